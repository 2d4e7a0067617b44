"""WorkoutBuilder — template-based structured workouts from a brief.

This is the heuristic workout designer: it always produces a valid
session, so it doubles as the fallback whenever a generated workout is
rejected.
"""

from __future__ import annotations

from coach_engine.math.critical_speed import equivalent_pace
from coach_engine.models.enums import (
    ActivityKind,
    DurationType,
    StepType,
    WorkoutType,
)
from coach_engine.models.structured_workout import StructuredWorkout, WorkoutStep
from coach_engine.models.workout import WorkoutBrief
from coach_engine.workout_builder.description_builder import build_workout_description
from coach_engine.workout_builder.session_templates import (
    RECOVERY_BAND,
    Band,
    SegmentTemplate,
    SessionTemplate,
    get_template,
)

# Leftover main-set minutes worth an extra steady step after a repeat block
_MIN_FILLER_MIN = 5.0
_FILLER_BAND: Band = (0.60, 0.70)


class WorkoutBuilder:
    """Builds structured workouts from briefs.

    Usage::

        builder = WorkoutBuilder()
        structured = builder.build(brief)
    """

    def build(self, brief: WorkoutBrief) -> StructuredWorkout:
        """Build a structured workout for *brief*.

        Algorithm:
        1. Look up the session template for brief.workout_type
        2. Warmup / cooldown capped at 40 % / 20 % of the session
        3. Main set fills the remaining time; interval rep count is
           main_set // (work + recovery), leftover becomes a steady filler
        4. Main-set targets are scaled by the readiness modifier
        5. Runs get pace targets via the Critical Speed equivalency
        """
        title, description = build_workout_description(brief)
        if brief.workout_type == WorkoutType.REST or brief.duration_min <= 0:
            step = WorkoutStep(step_type=StepType.REST, step_notes="Rest day.")
            return StructuredWorkout(
                activity=brief.activity,
                steps=(step,),
                workout_title=title,
                workout_description=description,
            )

        template = get_template(brief.workout_type)
        total = brief.duration_min
        warmup_min = round(min(template.warmup_duration_min, total * 0.4), 1)
        cooldown_min = round(min(template.cooldown_duration_min, total * 0.2), 1)
        main_min = max(total - warmup_min - cooldown_min, 0.0)

        steps: list[WorkoutStep] = []
        if warmup_min > 0:
            steps.append(
                self._step(StepType.WARMUP, warmup_min, template.warmup_power, brief, scale=False)
            )
        steps.extend(self._build_main_set(template, main_min, brief))
        if cooldown_min > 0:
            steps.append(
                self._step(StepType.COOLDOWN, cooldown_min, template.cooldown_power, brief, scale=False)
            )

        return StructuredWorkout(
            activity=brief.activity,
            steps=tuple(steps),
            workout_title=title,
            workout_description=description,
        )

    def _build_main_set(
        self, template: SessionTemplate, main_min: float, brief: WorkoutBrief
    ) -> list[WorkoutStep]:
        steps: list[WorkoutStep] = []
        for segment in template.main_segments:
            if segment.is_repeat:
                block, used = self._build_repeat_block(segment, main_min, brief)
                steps.append(block)
                leftover = main_min - used
                if leftover >= _MIN_FILLER_MIN:
                    steps.append(
                        self._step(StepType.ACTIVE, round(leftover, 1), _FILLER_BAND, brief, scale=False)
                    )
            elif segment.fraction_of_main > 0:
                minutes = round(main_min * segment.fraction_of_main, 1)
                if minutes > 0:
                    steps.append(
                        self._step(StepType.ACTIVE, minutes, segment.power, brief, notes=segment.cue)
                    )
            else:
                steps.append(
                    self._step(StepType.ACTIVE, round(main_min, 1), segment.power, brief, notes=segment.cue)
                )
        return steps

    def _build_repeat_block(
        self, segment: SegmentTemplate, main_min: float, brief: WorkoutBrief
    ) -> tuple[WorkoutStep, float]:
        """REPEAT block with work + recovery children, plus minutes used.

        A main set shorter than one cycle gets a single rep shrunk to fit.
        """
        cycle = segment.rep_work_min + segment.rep_recovery_min
        work_min, recovery_min = segment.rep_work_min, segment.rep_recovery_min
        if main_min < cycle:
            reps = 1
            work_min = round(work_min * main_min / cycle, 1)
            recovery_min = round(main_min - work_min, 1)
        else:
            reps = int(main_min // cycle)
        work = self._step(StepType.ACTIVE, work_min, segment.power, brief, notes=segment.cue)
        recovery = self._step(StepType.RECOVERY, recovery_min, segment.recovery_power, brief, scale=False)
        block = WorkoutStep(
            step_type=StepType.REPEAT,
            repeat_count=reps,
            child_steps=(work, recovery),
            step_notes=f"{reps}x ({work_min:g}min on + {recovery_min:g}min off)",
        )
        return block, reps * (work_min + recovery_min)

    def _step(
        self,
        step_type: StepType,
        minutes: float,
        band: Band,
        brief: WorkoutBrief,
        scale: bool = True,
        notes: str = "",
    ) -> WorkoutStep:
        low, high = band
        if scale and brief.intensity_modifier < 1.0:
            low = max(low * brief.intensity_modifier, RECOVERY_BAND[0])
            high = max(high * brief.intensity_modifier, RECOVERY_BAND[1])
        pace_low = pace_high = None
        if brief.activity == ActivityKind.RUN and brief.threshold_pace_s_per_km:
            pace_low = round(equivalent_pace(high, brief.threshold_pace_s_per_km))
            pace_high = round(equivalent_pace(low, brief.threshold_pace_s_per_km))
        return WorkoutStep(
            step_type=step_type,
            duration_type=DurationType.TIME,
            duration_value=minutes,
            power_low=round(low, 2),
            power_high=round(high, 2),
            pace_low=pace_low,
            pace_high=pace_high,
            step_notes=notes,
        )
