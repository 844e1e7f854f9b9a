"""Errors raised while interpreting upstream payloads."""

from __future__ import annotations


class DataFormatError(ValueError):
    """An upstream payload does not have the expected shape or values."""


class AddressNotFound(LookupError):
    """The geocoder returned no candidates for an address."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"no result found for address '{address}'")
