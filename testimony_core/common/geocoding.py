# testimony_core/common/geocoding.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    pass


@dataclass(frozen=True)
class GeocodeResult:
    place_name: str
    address: Dict[str, Any] = field(default_factory=dict)


def _config() -> dict:
    return getattr(settings, "GEOCODING", {}) or {}


def format_lat_lon(latitude: float, longitude: float) -> str:
    return f"{latitude:.4f}, {longitude:.4f}"


def concise_place_name(payload: Dict[str, Any]) -> str:
    """
    Short human label from a Nominatim reverse-geocoding payload:
      road[, city|town|village] -> city|town|village -> country -> first 3 parts of display_name
    """
    address = payload.get("address") or {}
    locality = address.get("city") or address.get("town") or address.get("village")

    name = ""
    if address.get("road"):
        name = address["road"]
        if locality:
            name += f", {locality}"
    elif locality:
        name = locality
    elif address.get("country"):
        name = address["country"]

    if not name:
        display_name = payload.get("display_name") or ""
        name = ",".join(display_name.split(",")[:3]).strip()
    return name


def reverse_geocode(latitude: float, longitude: float) -> GeocodeResult:
    """
    Reverse-geocode a point against a Nominatim-compatible endpoint.
    Raises GeocodingError on any failure (disabled, network, bad payload).
    """
    cfg = _config()
    if not cfg.get("ENABLED", False):
        raise GeocodingError("Geocoding is disabled.")

    try:
        response = requests.get(
            cfg["URL"],
            params={
                "format": "json",
                "lat": latitude,
                "lon": longitude,
                "addressdetails": 1,
                "zoom": 16,
            },
            headers={"User-Agent": cfg.get("USER_AGENT", "testimony-backend")},
            timeout=cfg.get("TIMEOUT", 5),
        )
    except requests.RequestException as e:
        raise GeocodingError(str(e)) from e

    if response.status_code != 200:
        raise GeocodingError(f"Geocoder responded {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise GeocodingError("Geocoder returned invalid JSON") from e

    if not isinstance(payload, dict) or not payload.get("display_name"):
        raise GeocodingError("Geocoder returned no result")

    place_name = concise_place_name(payload)
    if not place_name:
        raise GeocodingError("Geocoder returned an empty place name")
    return GeocodeResult(place_name=place_name, address=payload.get("address") or {})


def resolve_place(latitude: float, longitude: float) -> GeocodeResult:
    """
    Best-effort enrichment: never raises, never returns an empty place name.
    Falls back to "lat, lon" when the geocoder is unavailable.
    """
    try:
        return reverse_geocode(latitude, longitude)
    except GeocodingError as e:
        logger.warning("Reverse geocoding failed for (%s, %s): %s", latitude, longitude, e)
        return GeocodeResult(place_name=format_lat_lon(latitude, longitude))


def resolve_place_name(latitude: float, longitude: float) -> str:
    return resolve_place(latitude, longitude).place_name
