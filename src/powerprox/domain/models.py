"""
Domain models (Pydantic).

These types are the contract between the ingestion layer, the proximity report and
the CLI's JSON output. Geometry shapes themselves are plain engine classes
(`powerprox.geometry.*`) and never appear here.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class Address(BaseModel):
    """A geocoded address candidate, in decimal degrees."""

    full_address: str
    latitude_deg: float = Field(..., ge=-90, le=90)
    longitude_deg: float = Field(..., ge=-180, le=180)


class SuburbInfo(BaseModel):
    """One suburb known to the property data service."""

    id: int
    name: str
    postcode: int | None = None
    latitude_deg: float = Field(..., ge=-90, le=90)
    longitude_deg: float = Field(..., ge=-180, le=180)


class SelectedLatLon(BaseModel):
    """GeoJSON-like geometry of one power-line run ([lon, lat, elevation] points)."""

    type: str
    coordinates: list[list[float]]


class SelectSuburbResponse(BaseModel):
    """Power-line payload for one suburb, keyed by line id."""

    selected_lat_lon: dict[str, SelectedLatLon] = Field(default_factory=dict)
    selected_popup_info: dict[str, list[str]] = Field(default_factory=dict)


class VoltageDistance(BaseModel):
    voltage_kv: int | None
    distance_m: float = Field(..., ge=0)


class ProximityReport(BaseModel):
    """Result of one address check."""

    address: Address
    postcode: int | None = None
    x_m: float
    y_m: float
    source: Literal["service", "catalog"] = "service"
    suburbs_searched: list[str] = Field(default_factory=list)
    distances: list[VoltageDistance] = Field(default_factory=list)
    # Subset of `distances` where a lower voltage is strictly closer than all higher ones.
    reported: list[VoltageDistance] = Field(default_factory=list)
