"""Normalize raw client payloads into a usable hole context."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from holeplan.config import coerce_boolish
from holeplan.schemas.plan import ClientRequest

GENERIC_SAFE_NOTES: tuple[str, ...] = ("Favour center line; play to the fat side.",)
GENERIC_AVOID_NOTES: tuple[str, ...] = (
    "Don't short-side; avoid penalties in front/edges.",
)

_NULL_LIKE = {"", "null", "none", "undefined", "nan"}


@dataclass(frozen=True, slots=True)
class NormalizedContext:
    hole: Any = None
    par: Any = None
    miss: str | None = None
    handicap: str | None = None
    wind: str | None = None
    wind_strength: str | None = None
    green_speed: str | None = None
    captain_mode: bool = False
    pin_lr: str | None = None
    pin_fb: str | None = None
    flag_color: str | None = None
    ping: bool = False
    have_hole: bool = False
    have_notes: bool = False
    safe_notes: tuple[str, ...] = GENERIC_SAFE_NOTES
    avoid_notes: tuple[str, ...] = GENERIC_AVOID_NOTES

    @property
    def degraded(self) -> bool:
        return not (self.have_hole and self.have_notes)


def parse_payload(raw: Any) -> Mapping[str, Any]:
    """Return *raw* as a mapping, treating anything unparseable as empty."""

    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return {}
    if isinstance(raw, str):
        if not raw.strip():
            return {}
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return parsed if isinstance(parsed, Mapping) else {}
    return {}


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() not in _NULL_LIKE
    if isinstance(value, (list, tuple, dict)):
        return bool(value)
    return True


def _text(value: Any) -> str | None:
    if not is_present(value) or isinstance(value, (list, tuple, dict)):
        return None
    return str(value).strip()


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _notes(notes: Any) -> tuple[bool, tuple[str, ...], tuple[str, ...]]:
    if not isinstance(notes, Mapping):
        return False, GENERIC_SAFE_NOTES, GENERIC_AVOID_NOTES
    safe = notes.get("safe")
    avoid = notes.get("avoid")
    if not (_is_sequence(safe) and _is_sequence(avoid)):
        return False, GENERIC_SAFE_NOTES, GENERIC_AVOID_NOTES
    # An empty client list still counts as notes, but the prompt never gets
    # an empty section.
    return (
        True,
        tuple(str(item) for item in safe) or GENERIC_SAFE_NOTES,
        tuple(str(item) for item in avoid) or GENERIC_AVOID_NOTES,
    )


def normalize_context(raw: Any) -> NormalizedContext:
    """Extract the recognized request fields and derived presence flags.

    Never fails: an unparseable body behaves like an empty request, and
    unrecognized fields are dropped.
    """

    request = ClientRequest.model_validate(dict(parse_payload(raw)))
    have_notes, safe_notes, avoid_notes = _notes(request.notes)
    hole = request.hole if is_present(request.hole) else None
    if isinstance(hole, str):
        hole = hole.strip()

    return NormalizedContext(
        hole=hole,
        par=request.par if is_present(request.par) else None,
        miss=_text(request.miss),
        handicap=_text(request.handicap),
        wind=_text(request.wind),
        wind_strength=_text(request.wind_strength),
        green_speed=_text(request.green_speed),
        captain_mode=bool(coerce_boolish(request.captain_mode)),
        pin_lr=_text(request.pin_lr),
        pin_fb=_text(request.pin_fb),
        flag_color=_text(request.flag_color),
        ping=bool(coerce_boolish(request.ping)),
        have_hole=hole is not None,
        have_notes=have_notes,
        safe_notes=safe_notes,
        avoid_notes=avoid_notes,
    )


__all__ = [
    "GENERIC_AVOID_NOTES",
    "GENERIC_SAFE_NOTES",
    "NormalizedContext",
    "is_present",
    "normalize_context",
    "parse_payload",
]
