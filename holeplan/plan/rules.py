"""Course rules: marker colours, pin depth and green speed defaults."""

from __future__ import annotations

from dataclasses import dataclass

from holeplan.plan.context import NormalizedContext

PIN_FRONT = "front"
PIN_MIDDLE = "middle"
PIN_BACK = "back"
PIN_UNKNOWN = "unknown"

# Flag colour -> pin depth as marked on the course.
FLAG_COLOR_DEPTH: dict[str, str] = {
    "red": PIN_FRONT,
    "white": PIN_MIDDLE,
    "blue": PIN_BACK,
}

_PIN_FB_ALIASES: dict[str, str] = {
    "f": PIN_FRONT,
    "front": PIN_FRONT,
    "m": PIN_MIDDLE,
    "mid": PIN_MIDDLE,
    "middle": PIN_MIDDLE,
    "center": PIN_MIDDLE,
    "centre": PIN_MIDDLE,
    "b": PIN_BACK,
    "back": PIN_BACK,
}


@dataclass(frozen=True, slots=True)
class ResolvedConditions:
    context: NormalizedContext
    pin_depth: str
    green_speed: str
    course_name: str


def resolve_pin_depth(pin_fb: str | None, flag_color: str | None) -> str:
    """Return the pin depth for the hole.

    An explicit front/back position wins; otherwise the flag colour is
    looked up. Anything unrecognized resolves to ``"unknown"``.
    """

    if pin_fb:
        depth = _PIN_FB_ALIASES.get(pin_fb.strip().lower())
        if depth:
            return depth
    if flag_color:
        return FLAG_COLOR_DEPTH.get(flag_color.strip().lower(), PIN_UNKNOWN)
    return PIN_UNKNOWN


def resolve_green_speed(green_speed: str | None, default: str) -> str:
    if green_speed and green_speed.strip():
        return green_speed.strip()
    return default


def resolve_conditions(
    context: NormalizedContext,
    *,
    course_name: str,
    default_green_speed: str,
) -> ResolvedConditions:
    return ResolvedConditions(
        context=context,
        pin_depth=resolve_pin_depth(context.pin_fb, context.flag_color),
        green_speed=resolve_green_speed(context.green_speed, default_green_speed),
        course_name=course_name,
    )


__all__ = [
    "FLAG_COLOR_DEPTH",
    "PIN_BACK",
    "PIN_FRONT",
    "PIN_MIDDLE",
    "PIN_UNKNOWN",
    "ResolvedConditions",
    "resolve_conditions",
    "resolve_green_speed",
    "resolve_pin_depth",
]
