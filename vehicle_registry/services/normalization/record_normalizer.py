# vehicle_registry/services/normalization/record_normalizer.py
"""
מיפוי רשומה גולמית מהמאגר (שמות שדות מקוצרים בעברית) ל-Vehicle קנוני.
לא זורק לעולם: שדה חסר / null / לא תקין -> ערך ברירת מחדל, כדי ששינויי סכמה במאגר לא ישברו חיפוש.
"""
from typing import Any, List, Optional, Mapping

from vehicle_registry.domain.vehicle import Vehicle, ExtendedVehicleDetails

RawRegistryRecord = Mapping[str, Any]


def _to_int(v: Any, default: Optional[int] = None) -> Optional[int]:
    try:
        if v is None or isinstance(v, bool):
            return default
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return default
            return int(float(v))
        return int(v)
    except (TypeError, ValueError, OverflowError):
        return default


def _to_str(v: Any, default: Optional[str] = "") -> Optional[str]:
    if v is None:
        return default
    s = str(v)
    return s if s != "" else default


def _to_plate(v: Any) -> str:
    # המאגר מחזיר את מספר הרכב כמספר; 1234567.0 -> "1234567"
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    return _to_str(v)


def _get(record: RawRegistryRecord, key: str) -> Any:
    try:
        return record.get(key)
    except AttributeError:
        return None


def normalize(record: RawRegistryRecord) -> Vehicle:
    return Vehicle(
        id=_to_int(_get(record, "_id"), 0),
        license_plate=_to_plate(_get(record, "mispar_rechev")),
        manufacturer=_to_str(_get(record, "tozeret_nm")),
        manufacturer_code=_to_int(_get(record, "tozeret_cd"), 0),
        model=_to_str(_get(record, "degem_nm")),
        model_code=_to_int(_get(record, "degem_cd"), 0),
        model_type=_to_str(_get(record, "sug_degem")),
        commercial_name=_to_str(_get(record, "kinuy_mishari")),
        year=_to_int(_get(record, "shnat_yitzur"), 0),
        color=_to_str(_get(record, "tzeva_rechev")),
        color_code=_to_int(_get(record, "tzeva_cd"), 0),
        fuel_type=_to_str(_get(record, "sug_delek_nm")),
        ownership=_to_str(_get(record, "baalut")),
        last_test_date=_to_str(_get(record, "mivchan_acharon_dt"), None),
        valid_until=_to_str(_get(record, "tokef_dt"), None),
        chassis_number=_to_str(_get(record, "misgeret")),
        front_tire=_to_str(_get(record, "zmig_kidmi")),
        rear_tire=_to_str(_get(record, "zmig_ahori")),
        engine_model=_to_str(_get(record, "degem_manoa")),
        trim_level=_to_str(_get(record, "ramat_gimur")),
        pollution_group=_to_int(_get(record, "kvutzat_zihum")),
        safety_level=_to_int(_get(record, "ramat_eivzur_betihuty")),
        registration_instruction=_to_int(_get(record, "horaat_rishum")),
        first_on_road=_to_str(_get(record, "moed_aliya_lakvish"), None),
    )


def normalize_extended(record: RawRegistryRecord) -> ExtendedVehicleDetails:
    return ExtendedVehicleDetails(
        id=_to_int(_get(record, "_id"), 0),
        license_plate=_to_plate(_get(record, "mispar_rechev")),
        manufacturer_code=_to_int(_get(record, "tozeret_cd")),
        model_code=_to_int(_get(record, "degem_cd")),
        model_type=_to_str(_get(record, "sug_degem")),
        front_tire_load_code=_to_int(_get(record, "kod_omes_tzmig_kidmi")),
        rear_tire_load_code=_to_int(_get(record, "kod_omes_tzmig_ahori")),
        front_tire_speed_code=_to_str(_get(record, "kod_mehirut_tzmig_kidmi"), None),
        rear_tire_speed_code=_to_str(_get(record, "kod_mehirut_tzmig_ahori"), None),
        towing_info=_to_str(_get(record, "grira_nm"), None),
    )


def normalize_many(records) -> List[Vehicle]:
    return [normalize(r) for r in (records or [])]
