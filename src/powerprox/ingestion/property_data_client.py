"""
Property data client (propertydatamap.com.au).

Two form-POST endpoints are used:
- "initial": returns `Array_Suburb`, a JSON *string* mapping suburb code ->
  [name, postcode, latitude, longitude].
- "select suburb": returns `Array_Data`, a JSON string whose
  `Geometry_Selected_LatLon` values are themselves JSON strings of line geometry and
  whose `Geometry_Selected_Popup_Info` holds voltage labels per line id.

Parsing into engine shapes happens in `powerprox.ingestion.parsing`.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from powerprox.config.settings import Settings
from powerprox.core.cache import FileCache
from powerprox.core.http import post_form
from powerprox.domain.models import SelectedLatLon, SelectSuburbResponse
from powerprox.ingestion.errors import DataFormatError

logger = logging.getLogger(__name__)

# With no power lines the service returns an array of unrelated values instead of an
# empty object for the popup info.
_NO_LINES_MARKER = 'Geometry_Selected_Popup_Info":[["'


def _loads_json_string(value: Any, what: str) -> Any:
    if not isinstance(value, str):
        raise DataFormatError(f"{what} must be a JSON string, got {type(value).__name__}")
    try:
        return json.loads(value)
    except ValueError as exc:
        raise DataFormatError(f"failed to parse {what}: {exc}") from exc


def parse_select_suburb_payload(array_data: str) -> SelectSuburbResponse:
    """Decode the `Array_Data` string of a select-suburb response."""
    if _NO_LINES_MARKER in array_data:
        return SelectSuburbResponse()

    data = _loads_json_string(array_data, "Array_Data")
    if not isinstance(data, dict):
        raise DataFormatError("Array_Data must decode to an object")
    raw_lines = data.get("Geometry_Selected_LatLon") or {}
    popup_info = data.get("Geometry_Selected_Popup_Info") or {}
    if not isinstance(raw_lines, dict) or not isinstance(popup_info, dict):
        raise DataFormatError("Array_Data geometry/popup info must be objects")

    lines: dict[str, SelectedLatLon] = {}
    for line_id, raw in raw_lines.items():
        geometry = _loads_json_string(raw, f"Geometry_Selected_LatLon[{line_id}]")
        lines[str(line_id)] = SelectedLatLon.model_validate(geometry)

    return SelectSuburbResponse(
        selected_lat_lon=lines,
        selected_popup_info={str(k): [str(v) for v in vs] for k, vs in popup_info.items()},
    )


class PropertyDataClient:
    """Fetches suburb indexes and per-suburb power-line data, with caching."""

    def __init__(self, settings: Settings, cache: FileCache):
        self._settings = settings
        self._cache = cache

    def _form(self, suburb_code: str) -> dict[str, str]:
        form = dict(self._settings.property_data.form_defaults)
        form["Local_Suburb"] = str(suburb_code)
        return form

    def _post(self, url: str, suburb_code: str) -> dict[str, Any]:
        payload = post_form(
            url,
            data=self._form(suburb_code),
            timeout_seconds=self._settings.app.http_timeout_seconds,
        )
        if not isinstance(payload, dict):
            raise DataFormatError(f"response from {url} must be an object")
        return payload

    def get_raw_suburb_map(self) -> dict[str, list[str]]:
        """Return suburb code -> [name, postcode, latitude, longitude] (all strings)."""
        cache_key = "property_data:suburbs"

        def builder() -> dict[str, list[str]]:
            logger.info("Fetching suburb index from property data service")
            payload = self._post(
                self._settings.property_data.init_url,
                self._settings.property_data.init_suburb_code,
            )
            raw = _loads_json_string(payload.get("Array_Suburb"), "Array_Suburb")
            if not isinstance(raw, dict):
                raise DataFormatError("Array_Suburb must decode to an object")
            return {str(k): [str(v) for v in vs] for k, vs in raw.items()}

        raw_map = self._cache.get_or_set(cache_key, builder)
        logger.debug("Suburb post code raw data received (%d suburbs)", len(raw_map))
        return raw_map

    def select_suburb(self, suburb_id: int, suburb_name: str) -> SelectSuburbResponse:
        """Return the power-line payload for one suburb."""
        cache_key = f"property_data:select:{suburb_id}"

        def builder() -> str:
            logger.debug("Fetching suburb response for %s", suburb_name)
            payload = self._post(self._settings.property_data.select_url, str(suburb_id))
            array_data = payload.get("Array_Data")
            if not isinstance(array_data, str):
                raise DataFormatError(f"Array_Data for suburb_id={suburb_id} must be a string")
            return array_data

        array_data = self._cache.get_or_set(cache_key, builder)
        response = parse_select_suburb_payload(array_data)
        if not response.selected_lat_lon:
            logger.debug("There is no high voltage power line in %s", suburb_name)
        return response
