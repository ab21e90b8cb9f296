# vehicle_registry/domain/vehicle.py
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any

# snake_case -> camelCase כפי שה-UI וה-API החיצוני מצפים
_WIRE_NAMES = {
    "license_plate": "licensePlate",
    "manufacturer_code": "manufacturerCode",
    "model_code": "modelCode",
    "model_type": "modelType",
    "commercial_name": "commercialName",
    "color_code": "colorCode",
    "fuel_type": "fuelType",
    "last_test_date": "lastTestDate",
    "valid_until": "validUntil",
    "chassis_number": "chassisNumber",
    "front_tire": "frontTire",
    "rear_tire": "rearTire",
    "engine_model": "engineModel",
    "trim_level": "trimLevel",
    "pollution_group": "pollutionGroup",
    "safety_level": "safetyLevel",
    "registration_instruction": "registrationInstruction",
    "first_on_road": "firstOnRoad",
    "front_tire_load_code": "frontTireLoadCode",
    "rear_tire_load_code": "rearTireLoadCode",
    "front_tire_speed_code": "frontTireSpeedCode",
    "rear_tire_speed_code": "rearTireSpeedCode",
    "towing_info": "towingInfo",
}


def to_wire(obj) -> Dict[str, Any]:
    return {_WIRE_NAMES.get(k, k): v for k, v in asdict(obj).items()}


@dataclass(frozen=True)
class Vehicle:
    id: int
    license_plate: str  # תמיד המספר מהמאגר, בלי מקפים
    manufacturer: str
    model: str
    commercial_name: str
    year: int
    color: str
    fuel_type: str  # בנזין / דיזל / חשמלי ...
    ownership: str  # פרטי / ליסינג ...
    last_test_date: Optional[str]  # YYYY-MM-DD
    valid_until: Optional[str]  # YYYY-MM-DD
    chassis_number: str
    front_tire: str
    rear_tire: str
    engine_model: str
    trim_level: str
    pollution_group: Optional[int]
    safety_level: Optional[int]
    first_on_road: Optional[str]  # YYYY-MM
    manufacturer_code: int = 0
    model_code: int = 0
    model_type: str = ""  # P = פרטי
    color_code: int = 0
    registration_instruction: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return to_wire(self)


@dataclass(frozen=True)
class ExtendedVehicleDetails:
    """Tire codes, model codes and towing info from the extended registry resource."""
    id: int
    license_plate: str
    manufacturer_code: Optional[int]
    model_code: Optional[int]
    model_type: str
    front_tire_load_code: Optional[int]
    rear_tire_load_code: Optional[int]
    front_tire_speed_code: Optional[str]  # אות: V, H ...
    rear_tire_speed_code: Optional[str]
    towing_info: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return to_wire(self)
