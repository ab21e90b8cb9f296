import json

from conftest import ok_body

from vehicle_registry.domain.search import VehicleFilterOptions
from vehicle_registry.services.providers.http import TransportTimeout
from vehicle_registry.services.vehicles import VehiclesService, to_registry_filters


def _records(raw_record, years):
    out = []
    for i, y in enumerate(years):
        r = dict(raw_record)
        r["_id"] = i + 1
        r["shnat_yitzur"] = y
        out.append(r)
    return out


def test_filter_options_map_to_registry_fields():
    opts = VehicleFilterOptions(manufacturer="מאזדה", model="3", year_from=2018, color="אפור",
                                fuel_type="בנזין", ownership="פרטי")
    assert to_registry_filters(opts) == {
        "tozeret_nm": "מאזדה",
        "kinuy_mishari": "3",
        "shnat_yitzur": 2018,
        "tzeva_rechev": "אפור",
        "sug_delek_nm": "בנזין",
        "baalut": "פרטי",
    }


def test_empty_options_send_no_filters(gateway, stub_transport):
    stub_transport.outcome = ok_body([])
    VehiclesService(gateway).search_with_filters(VehicleFilterOptions())
    assert stub_transport.calls[0][0].filters is None


def test_year_to_filters_the_returned_page(gateway, stub_transport, raw_record):
    stub_transport.outcome = ok_body(_records(raw_record, [2015, 2018, 2020, 2023]), total=4)
    result = VehiclesService(gateway).search_with_filters(VehicleFilterOptions(year_to=2020), limit=20)
    assert [v.year for v in result.vehicles] == [2015, 2018, 2020]
    assert result.total == 4
    assert stub_transport.calls[0][0].limit == 20


def test_year_range(gateway, stub_transport, raw_record):
    stub_transport.outcome = ok_body(_records(raw_record, [2017, 2018, 2019]))
    result = VehiclesService(gateway).search_with_filters(VehicleFilterOptions(year_from=2018, year_to=2018))
    assert [v.year for v in result.vehicles] == [2018]
    assert json.loads(stub_transport.calls[0][0].filters) == {"shnat_yitzur": 2018}


def test_failed_search_is_returned_untouched(gateway, stub_transport):
    stub_transport.outcome = TransportTimeout()
    result = VehiclesService(gateway).search_with_filters(VehicleFilterOptions(year_to=2020))
    assert not result.success
    assert result.error == "Request timed out. Please try again."


def test_get_by_plate(gateway, stub_transport, raw_record):
    stub_transport.outcome = ok_body([raw_record])
    v = VehiclesService(gateway).get_by_plate("12-345-67")
    assert v is not None and v.license_plate == "1234567"


def test_get_by_plate_none_when_missing_or_invalid(gateway, stub_transport):
    stub_transport.outcome = ok_body([])
    service = VehiclesService(gateway)
    assert service.get_by_plate("1234567") is None
    assert service.get_by_plate("abc") is None
    assert len(stub_transport.calls) == 1
