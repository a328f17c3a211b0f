# testimony_core/posts/builders.py
"""
Submission builders: turn raw user input into validated drafts.

Everything here runs before any blob upload or row insert, so a rejected
submission leaves nothing behind.
"""
from __future__ import annotations

import math
from typing import Any, Iterable, Optional

from django.core.exceptions import ValidationError

from testimony_core.common.geocoding import resolve_place
from testimony_core.posts.domain import CoordinateDraft, GeoPoint, NarrativeDraft
from testimony_core.posts.models import NARRATIVE_TYPES, PostType

CORNER_COUNT = 4


def _to_float(value: Any, *, field: str) -> float:
    if value is None or (isinstance(value, str) and not value.strip()) or isinstance(value, bool):
        raise ValidationError({field: "This field is required."})
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError({field: "Must be a number."})
    if not math.isfinite(number):
        raise ValidationError({field: "Must be a finite number."})
    return number


def parse_point(latitude: Any, longitude: Any, *, field: str = "coordinates") -> GeoPoint:
    """
    Latitude must lie in [-90, 90] and longitude in [-180, 180], bounds inclusive.
    """
    lat = _to_float(latitude, field=f"{field}.latitude")
    lon = _to_float(longitude, field=f"{field}.longitude")

    if not -90.0 <= lat <= 90.0:
        raise ValidationError({f"{field}.latitude": "Latitude must be between -90 and 90."})
    if not -180.0 <= lon <= 180.0:
        raise ValidationError({f"{field}.longitude": "Longitude must be between -180 and 180."})
    return GeoPoint(latitude=lat, longitude=lon)


def _point_from_mapping(data: Any, *, field: str) -> GeoPoint:
    if not isinstance(data, dict):
        raise ValidationError({field: "Expected an object with latitude and longitude."})
    return parse_point(data.get("latitude"), data.get("longitude"), field=field)


def build_narrative_draft(
    *,
    post_type: str,
    title: str = "",
    description: str = "",
    media=None,
    audio=None,
    latitude: Any = None,
    longitude: Any = None,
) -> NarrativeDraft:
    if post_type not in NARRATIVE_TYPES:
        raise ValidationError({"type": f"Unsupported post type '{post_type}'."})

    if post_type != PostType.TEXT and media is None:
        raise ValidationError({"file": f"A file is required for {post_type} posts."})

    if audio is not None and post_type != PostType.IMAGE:
        raise ValidationError({"audio_file": "An audio attachment is only allowed on image posts."})

    location: Optional[GeoPoint] = None
    # location is optional, but half a pair is an error
    if latitude not in (None, "") or longitude not in (None, ""):
        location = parse_point(latitude, longitude, field="location")

    return NarrativeDraft(
        type=post_type,
        title=(title or "").strip(),
        description=(description or "").strip(),
        media=media if post_type != PostType.TEXT else None,
        audio=audio,
        location=location,
    )


def build_coordinate_draft(
    *,
    coordinates: Any,
    four_corners: Any,
    title: str = "",
    description: str = "",
) -> CoordinateDraft:
    if coordinates is None:
        raise ValidationError({"coordinates": "The primary coordinate is required."})
    point = _point_from_mapping(coordinates, field="coordinates")

    if not isinstance(four_corners, (list, tuple)) or len(four_corners) != CORNER_COUNT:
        raise ValidationError({"four_corners": f"Exactly {CORNER_COUNT} corner coordinates are required."})

    corners = tuple(
        _point_from_mapping(corner, field=f"four_corners[{i}]") for i, corner in enumerate(four_corners)
    )

    return CoordinateDraft(
        point=point,
        corners=corners,
        title=(title or "").strip(),
        description=(description or "").strip(),
    )


def enrich_location(point: GeoPoint) -> dict:
    """
    Narrative location payload with a best-effort place name and address.
    """
    place = resolve_place(point.latitude, point.longitude)
    return {
        "latitude": point.latitude,
        "longitude": point.longitude,
        "place_name": place.place_name,
        "address": place.address,
    }


def enrich_coordinates(point: GeoPoint) -> dict:
    return {
        "latitude": point.latitude,
        "longitude": point.longitude,
        "place_name": resolve_place(point.latitude, point.longitude).place_name,
    }


def corners_payload(corners: Iterable[GeoPoint]) -> list[dict]:
    return [c.as_dict() for c in corners]
