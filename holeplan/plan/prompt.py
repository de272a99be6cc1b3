"""Render the caddie instruction sent to the generation backend."""

from __future__ import annotations

from holeplan.plan.rules import PIN_UNKNOWN, ResolvedConditions

GENERIC_NOTES_NOTICE = (
    "(Notes were missing from the client; these are generic safety notes.)"
)

RULES: tuple[str, ...] = (
    "Do not invent hazards or yardages not implied by the notes.",
    "Be concise. If info is thin, say so and default conservative.",
    "When uncertain between two options, prefer the more conservative one.",
    "Always fill every output key: conservative, neutral, aggressive, "
    'club_suggestions (use [] if none) and warnings (use "" if none).',
)


def _bullets(items: tuple[str, ...] | list[str]) -> list[str]:
    return [f"- {item}" for item in items]


def _wind_line(wind: str | None, strength: str | None) -> str:
    base = wind or "calm/unknown"
    if strength:
        return f"- wind: {base} ({strength})"
    return f"- wind: {base}"


def _pin_line(pin_lr: str | None, pin_depth: str) -> str:
    parts = []
    if pin_depth != PIN_UNKNOWN:
        parts.append(pin_depth)
    if pin_lr:
        parts.append(pin_lr.lower())
    return f"- pin: {' / '.join(parts) if parts else 'unknown'}"


def compile_prompt(conditions: ResolvedConditions) -> str:
    """Build the instruction string for *conditions*.

    Pure function of its input; the same conditions always produce the same
    text.
    """

    ctx = conditions.context
    hole = ctx.hole if ctx.have_hole else "?"
    par = ctx.par if ctx.par is not None else "?"

    lines = [
        "You are a cautious golf caddie. Use ONLY the provided notes for "
        f"{conditions.course_name} hole {hole} (par {par}).",
        "Personalize a plan for:",
        f"- handicap: {ctx.handicap or 'unknown'}",
        f"- typical miss: {ctx.miss or 'unknown'}",
        _wind_line(ctx.wind, ctx.wind_strength),
        f"- green speed: {conditions.green_speed}",
        _pin_line(ctx.pin_lr, conditions.pin_depth),
    ]
    if ctx.captain_mode:
        lines.append(
            "- captain mode: on (team format; the captain's ball sets the "
            "safe line for the group)"
        )

    lines.append("")
    lines.append("SAFE:")
    lines.extend(_bullets(ctx.safe_notes))
    lines.append("AVOID:")
    lines.extend(_bullets(ctx.avoid_notes))
    lines.append("")
    lines.append("Rules:")
    lines.extend(_bullets(RULES))
    lines.append(
        "Respond with JSON only, matching the hole_plan schema: "
        '{"conservative": str, "neutral": str, "aggressive": str, '
        '"club_suggestions": [str], "warnings": str}.'
    )
    if not ctx.have_notes:
        lines.append("")
        lines.append(GENERIC_NOTES_NOTICE)

    return "\n".join(lines) + "\n"


__all__ = ["GENERIC_NOTES_NOTICE", "RULES", "compile_prompt"]
