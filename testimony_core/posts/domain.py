# testimony_core/posts/domain.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from django.core.exceptions import ValidationError


class TransitionNotAllowed(ValidationError):
    """
    A moderation state-machine guard failed (edit after a decision,
    repeat approve/reject, editing a coordinate post, ...).
    Mapped to 409 by the API layer.
    """


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def as_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: dict) -> "GeoPoint":
        return cls(latitude=float(data["latitude"]), longitude=float(data["longitude"]))


@dataclass(frozen=True)
class NarrativeDraft:
    type: str
    title: str = ""
    description: str = ""
    media: Any = None
    audio: Any = None
    location: Optional[GeoPoint] = None


@dataclass(frozen=True)
class CoordinateDraft:
    point: GeoPoint
    corners: Tuple[GeoPoint, GeoPoint, GeoPoint, GeoPoint]
    title: str = ""
    description: str = ""
    extra: dict = field(default_factory=dict)
