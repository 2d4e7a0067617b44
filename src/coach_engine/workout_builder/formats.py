"""Text formats for designed workouts: ZWO-style XML rides and sectioned run text.

Ride body (durations in seconds, power as a fraction of FTP)::

    <workout>
      <Warmup Duration="900" PowerLow="0.50" PowerHigh="0.65"/>
      <IntervalsT Repeat="4" OnDuration="480" OffDuration="240" OnPower="0.98" OffPower="0.55"/>
      <SteadyState Duration="600" Power="0.65"/>
      <Cooldown Duration="600" PowerLow="0.60" PowerHigh="0.45"/>
    </workout>

Run description (durations in minutes, ``m`` also accepted, or ``km``)::

    Warmup
    - 15min @ 6:10-6:40/km
    Main Set
    - 4x 8min @ 4:50-5:05/km, 2min @ 6:30/km
    Cooldown
    - 10min @ Z1

Parsers collect every structural problem they find and raise a single
ValidationFailure listing all of them.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from coach_engine.errors import ValidationFailure
from coach_engine.math.zones import POWER_ZONE_BOUNDS, format_pace, zone_for_power_fraction
from coach_engine.models.enums import DurationType, StepType, TrainingZone
from coach_engine.models.structured_workout import WorkoutStep
from coach_engine.workout_builder.session_templates import RECOVERY_BAND

# -- ZWO-style ride XML -----------------------------------------------------

_REQUIRED_ATTRS: dict[str, tuple[str, ...]] = {
    "Warmup": ("Duration", "PowerLow", "PowerHigh"),
    "Cooldown": ("Duration", "PowerLow", "PowerHigh"),
    "Ramp": ("Duration", "PowerLow", "PowerHigh"),
    "SteadyState": ("Duration", "Power"),
    "IntervalsT": ("Repeat", "OnDuration", "OffDuration", "OnPower", "OffPower"),
}


def render_zwo(steps: tuple[WorkoutStep, ...]) -> str:
    """Render steps as a ZWO-style <workout> body."""
    lines = ["<workout>"]
    for step in steps:
        lines.append("  " + _zwo_element(step))
    lines.append("</workout>")
    return "\n".join(lines)


def _zwo_element(step: WorkoutStep) -> str:
    seconds = round(step.duration_value * 60)
    low = step.power_low if step.power_low is not None else RECOVERY_BAND[0]
    high = step.power_high if step.power_high is not None else low
    if step.step_type == StepType.WARMUP:
        return f'<Warmup Duration="{seconds}" PowerLow="{low:.2f}" PowerHigh="{high:.2f}"/>'
    if step.step_type == StepType.COOLDOWN:
        return f'<Cooldown Duration="{seconds}" PowerLow="{high:.2f}" PowerHigh="{low:.2f}"/>'
    if step.step_type == StepType.REPEAT and len(step.child_steps) == 2:
        on, off = step.child_steps
        return (
            f'<IntervalsT Repeat="{step.repeat_count}" '
            f'OnDuration="{round(on.duration_value * 60)}" OffDuration="{round(off.duration_value * 60)}" '
            f'OnPower="{_mid(on):.2f}" OffPower="{_mid(off):.2f}"/>'
        )
    return f'<SteadyState Duration="{seconds}" Power="{(low + high) / 2:.2f}"/>'


def parse_zwo(body: str) -> tuple[WorkoutStep, ...]:
    """Parse a ZWO-style ride body into workout steps.

    Raises:
        ValidationFailure: If the XML is malformed or structurally invalid.
    """
    try:
        root = ET.fromstring(body.strip())
    except ET.ParseError as exc:
        raise ValidationFailure(
            "Ride workout is not well-formed XML", [f"Unbalanced or malformed tags: {exc}"]
        ) from exc

    errors: list[str] = []
    if root.tag != "workout":
        errors.append(f"Root element must be <workout>, got <{root.tag}>")
    elements = list(root)
    if not elements:
        raise ValidationFailure("Ride workout is empty", ["<workout> has no steps"])
    if elements[0].tag != "Warmup":
        errors.append("First step must be a <Warmup>")
    if elements[-1].tag != "Cooldown":
        errors.append("Last step must be a <Cooldown>")

    steps: list[WorkoutStep] = []
    for index, element in enumerate(elements, start=1):
        required = _REQUIRED_ATTRS.get(element.tag)
        if required is None:
            errors.append(f"Step {index}: unknown element <{element.tag}>")
            continue
        values: dict[str, float] = {}
        for attr in required:
            raw = element.get(attr)
            if raw is None:
                errors.append(f"Step {index} <{element.tag}> is missing {attr}")
                continue
            try:
                values[attr] = float(raw)
            except ValueError:
                errors.append(f"Step {index} <{element.tag}> has non-numeric {attr}={raw!r}")
                continue
            if values[attr] <= 0:
                errors.append(f"Step {index} <{element.tag}> {attr} must be positive")
        if len(values) == len(required):
            steps.append(_zwo_step(element.tag, values))

    if errors:
        raise ValidationFailure("Ride workout failed validation", errors)
    return tuple(steps)


def _zwo_step(tag: str, values: dict[str, float]) -> WorkoutStep:
    if tag == "IntervalsT":
        on = WorkoutStep(
            step_type=StepType.ACTIVE,
            duration_value=values["OnDuration"] / 60,
            power_low=values["OnPower"],
            power_high=values["OnPower"],
        )
        off = WorkoutStep(
            step_type=StepType.RECOVERY,
            duration_value=values["OffDuration"] / 60,
            power_low=values["OffPower"],
            power_high=values["OffPower"],
        )
        return WorkoutStep(
            step_type=StepType.REPEAT,
            repeat_count=int(values["Repeat"]),
            child_steps=(on, off),
        )
    if tag == "SteadyState":
        return WorkoutStep(
            step_type=StepType.ACTIVE,
            duration_value=values["Duration"] / 60,
            power_low=values["Power"],
            power_high=values["Power"],
        )
    step_type = {"Warmup": StepType.WARMUP, "Cooldown": StepType.COOLDOWN}.get(tag, StepType.ACTIVE)
    return WorkoutStep(
        step_type=step_type,
        duration_value=values["Duration"] / 60,
        power_low=min(values["PowerLow"], values["PowerHigh"]),
        power_high=max(values["PowerLow"], values["PowerHigh"]),
    )


# -- Sectioned run text -----------------------------------------------------

SECTIONS = ("Warmup", "Main Set", "Cooldown")
_SECTION_STEP_TYPE = {
    "Warmup": StepType.WARMUP,
    "Main Set": StepType.ACTIVE,
    "Cooldown": StepType.COOLDOWN,
}
_SECTION_RE = re.compile(r"^(warm[\s-]?up|main[\s-]?set|cool[\s-]?down)\s*:?\s*$", re.IGNORECASE)
_REPEAT_RE = re.compile(r"^(?P<count>\d+)\s*[x×]\s*(?P<rest>.+)$", re.IGNORECASE)
_DURATION_RE = re.compile(r"(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>km|min|mins|sec|s|m)\b", re.IGNORECASE)
_PACE_RE = re.compile(r"(\d+):(\d{2})(?:\s*-\s*(\d+):(\d{2}))?\s*/\s*km", re.IGNORECASE)
_ZONE_RE = re.compile(r"\bZ([1-6])\b", re.IGNORECASE)
_PCT_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%")


def render_run_text(steps: tuple[WorkoutStep, ...]) -> str:
    """Render steps as a sectioned run description."""
    sections: dict[str, list[str]] = {name: [] for name in SECTIONS}
    for step in steps:
        if step.step_type == StepType.WARMUP:
            sections["Warmup"].append(_run_line(step))
        elif step.step_type == StepType.COOLDOWN:
            sections["Cooldown"].append(_run_line(step))
        else:
            sections["Main Set"].append(_run_line(step))
    lines: list[str] = []
    for name in SECTIONS:
        lines.append(name)
        lines.extend(f"- {line}" for line in sections[name])
    return "\n".join(lines)


def _run_line(step: WorkoutStep) -> str:
    if step.step_type == StepType.REPEAT:
        parts = ", ".join(_run_part(child) for child in step.child_steps)
        return f"{step.repeat_count}x {parts}"
    return _run_part(step)


def _run_part(step: WorkoutStep) -> str:
    return f"{step.duration_value:g}min @ {_run_target(step)}"


def _run_target(step: WorkoutStep) -> str:
    if step.pace_low is not None and step.pace_high is not None:
        if round(step.pace_low) == round(step.pace_high):
            return f"{format_pace(step.pace_low)}/km"
        return f"{format_pace(step.pace_low)}-{format_pace(step.pace_high)}/km"
    zone = zone_for_power_fraction(_mid(step))
    return f"Z{zone.value}" if zone is not None else "Z1"


def parse_run_text(text: str) -> tuple[WorkoutStep, ...]:
    """Parse a sectioned run description into workout steps.

    Step lines start with ``-``; any other line inside a section is a note.

    Raises:
        ValidationFailure: If sections are missing or out of order, or a
            step lacks a duration or a target.
    """
    errors: list[str] = []
    found: list[str] = []
    current: str | None = None
    steps: list[WorkoutStep] = []
    counts: dict[str, int] = {name: 0 for name in SECTIONS}

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        header = _SECTION_RE.match(line)
        if header:
            current = _canonical_section(header.group(1))
            found.append(current)
            continue
        if not line.startswith(("-", "•", "*")):
            continue
        if current is None:
            errors.append(f"Step {line!r} appears before any section header")
            continue
        counts[current] += 1
        try:
            steps.append(_parse_run_line(line.lstrip("-•* ").strip(), current))
        except ValueError as exc:
            errors.append(f"{current}: {exc}")

    for name in SECTIONS:
        if name not in found:
            errors.append(f"Missing '{name}' section")
        elif counts[name] == 0:
            errors.append(f"'{name}' section has no steps")
    ordered = [s for s in found if s in SECTIONS]
    if ordered and ordered != sorted(ordered, key=SECTIONS.index):
        errors.append("Sections must appear in order: Warmup, Main Set, Cooldown")

    if errors:
        raise ValidationFailure("Run workout failed validation", errors)
    return tuple(steps)


def _canonical_section(raw: str) -> str:
    key = re.sub(r"[\s-]", "", raw.lower())
    return {"warmup": "Warmup", "mainset": "Main Set", "cooldown": "Cooldown"}[key]


def _parse_run_line(line: str, section: str) -> WorkoutStep:
    repeat = _REPEAT_RE.match(line)
    if repeat:
        parts = [p.strip() for p in repeat.group("rest").split(",") if p.strip()]
        children = [_parse_run_part(p, StepType.ACTIVE) for p in parts[:1]]
        children += [_parse_run_part(p, StepType.RECOVERY) for p in parts[1:]]
        return WorkoutStep(
            step_type=StepType.REPEAT,
            repeat_count=int(repeat.group("count")),
            child_steps=tuple(children),
        )
    return _parse_run_part(line, _SECTION_STEP_TYPE[section])


def _parse_run_part(part: str, step_type: StepType) -> WorkoutStep:
    duration = _DURATION_RE.search(part)
    if duration is None:
        raise ValueError(f"step {part!r} has no duration or distance")
    value = float(duration.group("value"))
    unit = duration.group("unit").lower()
    if unit == "km":
        duration_type = DurationType.DISTANCE
    else:
        duration_type = DurationType.TIME
        if unit in ("s", "sec"):
            value /= 60.0

    target = part[duration.end():]
    pace = _PACE_RE.search(target)
    zone = _ZONE_RE.search(target)
    pct = _PCT_RE.search(target)
    power_low = power_high = pace_low = pace_high = None
    if pace:
        pace_low = int(pace.group(1)) * 60 + int(pace.group(2))
        pace_high = int(pace.group(3)) * 60 + int(pace.group(4)) if pace.group(3) else pace_low
        pace_low, pace_high = min(pace_low, pace_high), max(pace_low, pace_high)
    elif zone:
        power_low, power_high = _zone_band(int(zone.group(1)))
    elif pct:
        power_low = power_high = float(pct.group(1)) / 100.0
    else:
        raise ValueError(f"step {part!r} has no pace, zone or % target")

    return WorkoutStep(
        step_type=step_type,
        duration_type=duration_type,
        duration_value=round(value, 2),
        power_low=power_low,
        power_high=power_high,
        pace_low=pace_low,
        pace_high=pace_high,
    )


def _zone_band(number: int) -> tuple[float, float]:
    if number <= 1:
        return RECOVERY_BAND
    return POWER_ZONE_BOUNDS[TrainingZone(number)]


def _mid(step: WorkoutStep) -> float:
    low = step.power_low if step.power_low is not None else RECOVERY_BAND[0]
    high = step.power_high if step.power_high is not None else low
    return (low + high) / 2


def estimated_minutes(step: WorkoutStep, threshold_pace_s_per_km: float | None = None) -> float:
    """Step duration in minutes, estimating distance steps from pace."""
    if step.step_type == StepType.REPEAT:
        return step.repeat_count * sum(
            estimated_minutes(c, threshold_pace_s_per_km) for c in step.child_steps
        )
    if step.duration_type == DurationType.TIME:
        return step.duration_value
    if step.duration_type == DurationType.DISTANCE:
        pace = None
        if step.pace_low is not None and step.pace_high is not None:
            pace = (step.pace_low + step.pace_high) / 2
        elif threshold_pace_s_per_km is not None:
            pace = threshold_pace_s_per_km / max(_mid(step), 0.5)
        if pace is not None:
            return step.duration_value * pace / 60.0
    return 0.0
