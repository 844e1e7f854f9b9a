import pytest

from powerprox.domain.models import Address, SelectedLatLon, SelectSuburbResponse
from powerprox.geometry.basic import Point
from powerprox.geometry.polyline import PolyLine
from powerprox.geometry.projection import GeodeticProjector, GeoPosition
from powerprox.ingestion.errors import DataFormatError
from powerprox.ingestion.parsing import (
    get_all_suburbs,
    parse_address,
    parse_high_voltage_lines,
    parse_voltage,
)

PROJECTOR = GeodeticProjector(GeoPosition.from_degrees(-33.88243560003056, 151.2064118987779))

ROSEBERY = Point(-738.6767504988909, -4301.452856541296)
HILLS = Point(-22787.159185405268, 18391.717575661813)
BEACON_HILL = Point(7513.165838856347, 9962.083813063693)

ROSEBERY_LON_LAT = [151.1984099658811, -33.921119441679096, 0.0]
HILLS_LON_LAT = [150.9600398224331, -33.71703513789143, 0.0]
BEACON_HILL_LON_LAT = [151.2877152046721, -33.79284455124619, 0.0]


def _line_close_to(line: PolyLine, points: list[Point], delta: float = 1.0) -> bool:
    vertices = line.get_vertices()
    return len(vertices) == len(points) and all(v.close_to(p, delta) for v, p in zip(vertices, points))


@pytest.mark.parametrize(
    "raw",
    [
        {"abcd": ["CHERRYBROOK", "2126", "-33.72", "151.04"]},
        {"3900": ["CHERRYBROOK", "abcd", "-33.72", "151.04"]},
    ],
)
def test_get_all_suburbs_rejects_non_numbers(raw):
    with pytest.raises(DataFormatError):
        get_all_suburbs(raw)


def test_get_all_suburbs():
    raw = {
        "3900": ["CHERRYBROOK", "2126", "-33.72185040017101", "151.04624440456263"],
        "3775": ["BLUE MOUNTAINS NATIONAL PARK", "None", "-33.90908096333183", "150.35316571753296"],
    }
    suburbs = {s.id: s for s in get_all_suburbs(raw)}
    assert suburbs[3900].name == "CHERRYBROOK"
    assert suburbs[3900].postcode == 2126
    assert suburbs[3775].postcode is None
    assert suburbs[3775].longitude_deg == pytest.approx(150.35316571753296)


def test_parse_address():
    address = Address(
        full_address=(
            "30, Franklin Road, Cherrybrook, Sydney, The Council of the Shire of Hornsby, "
            "New South Wales, 2126, Australia"
        ),
        latitude_deg=-33.921119441679096,
        longitude_deg=151.1984099658811,
    )
    postcode, location = parse_address(address, PROJECTOR)
    assert postcode == 2126
    assert location.close_to(ROSEBERY, 1.0)


def test_parse_address_without_postcode():
    address = Address(full_address="Somewhere, Australia", latitude_deg=-33.9, longitude_deg=151.2)
    with pytest.raises(DataFormatError, match="failed to capture post code"):
        parse_address(address, PROJECTOR)


def test_parse_voltage():
    assert parse_voltage("132kV") == 132
    with pytest.raises(DataFormatError):
        parse_voltage("123KV")


def test_parse_high_voltage_lines_groups_by_voltage():
    raw = SelectSuburbResponse(
        selected_lat_lon={
            "512": SelectedLatLon(type="LineString", coordinates=[ROSEBERY_LON_LAT, HILLS_LON_LAT]),
            "1024": SelectedLatLon(type="LineString", coordinates=[BEACON_HILL_LON_LAT, HILLS_LON_LAT]),
            "2048": SelectedLatLon(type="LineString", coordinates=[ROSEBERY_LON_LAT, BEACON_HILL_LON_LAT]),
        },
        selected_popup_info={"512": ["123kV"], "1024": ["123kV"], "2048": ["66kV"]},
    )
    lines = parse_high_voltage_lines(raw, PROJECTOR)

    assert len(lines[66]) == 1
    assert _line_close_to(lines[66][0].line, [ROSEBERY, BEACON_HILL])

    by_id = {hv.id: hv for hv in lines[123]}
    assert set(by_id) == {"512", "1024"}
    assert _line_close_to(by_id["512"].line, [ROSEBERY, HILLS])
    assert _line_close_to(by_id["1024"].line, [BEACON_HILL, HILLS])
    assert by_id["1024"].voltage_kv == 123


def _single(line_type="LineString", labels=("123kV",), line_id="512", label_id="512"):
    return SelectSuburbResponse(
        selected_lat_lon={
            line_id: SelectedLatLon(type=line_type, coordinates=[[0.0, 0.0, 0.0], [0.01, 0.01, 0.0]])
        },
        selected_popup_info={label_id: list(labels)},
    )


def test_parse_high_voltage_lines_wrong_voltage_format():
    with pytest.raises(DataFormatError, match="failed to parse voltage string '123KV'"):
        parse_high_voltage_lines(_single(labels=("123KV",)), PROJECTOR)


def test_parse_high_voltage_lines_multiple_voltages():
    with pytest.raises(DataFormatError, match="only 1 voltage should be in the map"):
        parse_high_voltage_lines(_single(labels=("123kV", "123kV")), PROJECTOR)


def test_parse_high_voltage_lines_unsupported_type():
    with pytest.raises(DataFormatError, match="only LineString is supported for lines, but got 'PolyLine'"):
        parse_high_voltage_lines(_single(line_type="PolyLine"), PROJECTOR)


def test_parse_high_voltage_lines_missing_voltage():
    with pytest.raises(DataFormatError, match="can not find voltage for id='512'"):
        parse_high_voltage_lines(_single(label_id="1024"), PROJECTOR)


def test_parse_high_voltage_lines_skips_degenerate_runs():
    raw = SelectSuburbResponse(
        selected_lat_lon={
            "1": SelectedLatLon(type="LineString", coordinates=[ROSEBERY_LON_LAT]),
            "2": SelectedLatLon(type="LineString", coordinates=[ROSEBERY_LON_LAT, ROSEBERY_LON_LAT]),
            "3": SelectedLatLon(type="LineString", coordinates=[ROSEBERY_LON_LAT, HILLS_LON_LAT]),
        },
        selected_popup_info={"1": ["33kV"], "2": ["33kV"], "3": ["33kV"]},
    )
    lines = parse_high_voltage_lines(raw, PROJECTOR)
    assert [hv.id for hv in lines[33]] == ["3"]
