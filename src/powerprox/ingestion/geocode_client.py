"""
Geocoding client (geocode.maps.co search API).

Resolves free-text addresses to `Address` candidates. Only the first candidate is
used downstream; when several come back we warn so the user can be more specific.
"""

from __future__ import annotations

import logging
from typing import Any

from powerprox.config.settings import Settings
from powerprox.core.cache import FileCache
from powerprox.core.http import get_json
from powerprox.domain.models import Address
from powerprox.ingestion.errors import AddressNotFound, DataFormatError

logger = logging.getLogger(__name__)


def _parse_candidate(raw: Any) -> Address:
    if not isinstance(raw, dict):
        raise DataFormatError(f"geocode candidate must be an object, got {raw!r}")
    try:
        lat = float(raw["lat"])
    except (KeyError, TypeError, ValueError) as exc:
        raise DataFormatError(f"failed to parse latitude from the response, got {raw.get('lat')!r}") from exc
    try:
        lon = float(raw["lon"])
    except (KeyError, TypeError, ValueError) as exc:
        raise DataFormatError(f"failed to parse longitude from the response, got {raw.get('lon')!r}") from exc
    return Address(
        full_address=str(raw.get("display_name") or ""),
        latitude_deg=lat,
        longitude_deg=lon,
    )


class GeocodeClient:
    """Fetches and caches geocoder results."""

    def __init__(self, settings: Settings, cache: FileCache):
        self._settings = settings
        self._cache = cache

    def _fetch(self, address: str) -> list[Any]:
        params: dict[str, Any] = {"q": address}
        if self._settings.geocode.api_key:
            params["api_key"] = self._settings.geocode.api_key
        logger.debug("Fetching '%s' to find geo location", self._settings.geocode.base_url)
        payload = get_json(
            self._settings.geocode.base_url,
            params=params,
            timeout_seconds=self._settings.app.http_timeout_seconds,
        )
        if not isinstance(payload, list):
            raise DataFormatError(f"geocode response must be a list, got {type(payload).__name__}")
        return payload

    def search(self, address: str) -> list[Address]:
        """Return every candidate for `address` (possibly empty)."""
        cache_key = f"geocode:{address.strip().lower()}"
        raw = self._cache.get(cache_key)
        if raw is None:
            raw = self._fetch(address)
            if raw:
                self._cache.set(cache_key, raw)
        return [_parse_candidate(item) for item in raw]

    def find_address(self, address: str) -> Address:
        """Return the first candidate for `address`.

        Raises:
            AddressNotFound: If the geocoder returns nothing.
        """
        candidates = self.search(address)
        if not candidates:
            raise AddressNotFound(address)
        if len(candidates) > 1:
            logger.warning(
                "More than one result found for address '%s': %s",
                address,
                [c.full_address for c in candidates],
            )
            logger.warning(
                "The first address will be used; if it's not expected, please specify a more specific address"
            )
        found = candidates[0]
        logger.debug(
            "Address found as '%s' at %s, %s", found.full_address, found.latitude_deg, found.longitude_deg
        )
        return found
