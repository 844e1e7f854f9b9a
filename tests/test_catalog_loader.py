import json

import pytest

from powerprox.catalog.loader import load_suburb_data
from powerprox.config.settings import get_settings
from powerprox.geometry.errors import DegenerateShape
from powerprox.ingestion.errors import DataFormatError
from powerprox.proximity.report import build_projector

PROJECTOR = build_projector(get_settings())


def _write(tmp_path, payload) -> str:
    path = tmp_path / "data.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_load_suburb_data(tmp_path):
    path = _write(
        tmp_path,
        {
            "ROSEBERY": {
                "suburb_catchment": [[151.19, -33.93], [151.21, -33.93], [151.21, -33.91], [151.19, -33.93]],
                "high_voltage_lines": [
                    [[151.19, -33.92, 10.0], [151.2, -33.92, 12.0], [151.2, -33.915, 0.0]],
                    [[151.195, -33.925, 0.0], [151.195, -33.925, 0.0]],
                ],
                "line_voltages_kv": [132, 33],
            }
        },
    )
    [suburb] = load_suburb_data(path, PROJECTOR)

    assert suburb.name == "ROSEBERY"
    # Already closed, so no extra closing segment.
    assert len(suburb.catchment) == 3
    # The zero-length run is skipped.
    assert [hv.id for hv in suburb.high_voltage_lines] == ["ROSEBERY#0"]
    assert suburb.high_voltage_lines[0].voltage_kv == 132
    assert len(suburb.polylines[0].get_vertices()) == 3


def test_missing_voltages_are_unknown(tmp_path):
    path = _write(
        tmp_path,
        {
            "X": {
                "suburb_catchment": [[151.19, -33.93], [151.21, -33.93], [151.21, -33.91]],
                "high_voltage_lines": [[[151.19, -33.92, 0.0], [151.2, -33.92, 0.0]]],
            }
        },
    )
    [suburb] = load_suburb_data(path, PROJECTOR)
    assert suburb.high_voltage_lines[0].voltage_kv is None


def test_degenerate_catchment_aborts(tmp_path):
    path = _write(
        tmp_path,
        {"X": {"suburb_catchment": [[151.19, -33.93], [151.21, -33.93], [151.19, -33.93]]}},
    )
    with pytest.raises(DegenerateShape):
        load_suburb_data(path, PROJECTOR)


def test_invalid_json_is_a_data_format_error(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(DataFormatError):
        load_suburb_data(str(path), PROJECTOR)
