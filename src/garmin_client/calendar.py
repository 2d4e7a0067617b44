"""GarminCalendar — the Garmin Connect calendar as a CalendarPort.

Event id = Garmin workout id. Create uploads and schedules a workout,
update PUTs the workout in place, delete removes the workout together with
its schedule. Every ``events_on`` call reads the calendar fresh.
"""

from __future__ import annotations

import logging
from datetime import date

from coach_engine.models.calendar_event import PlaceholderEvent
from coach_engine.models.enums import DurationType, StepType
from coach_engine.models.structured_workout import StructuredWorkout, WorkoutStep
from coach_engine.reconcile.port import CalendarPort, EventWrite
from coach_engine.serialization.garmin import to_garmin_json

from garmin_client.calendar_mapper import map_calendar_item, system_description, system_title
from garmin_client.client import GarminClient

logger = logging.getLogger(__name__)


class GarminCalendar(CalendarPort):
    """Calendar adapter over a GarminClient.

    Args:
        client: Authenticated Garmin client.
        ftp_watts: Converts ride power fractions to watts.
        threshold_pace_s_per_km: Converts run targets to paces.
    """

    def __init__(
        self,
        client: GarminClient,
        ftp_watts: float | None = None,
        threshold_pace_s_per_km: float | None = None,
    ) -> None:
        self.client = client
        self.ftp_watts = ftp_watts
        self.threshold_pace_s_per_km = threshold_pace_s_per_km

    def events_on(self, day: date) -> list[PlaceholderEvent]:
        events: list[PlaceholderEvent] = []
        for item in self.client.calendar_items(day, day):
            workout = None
            workout_id = item.get("workoutId")
            if str(item.get("itemType", "")).lower() == "workout" and workout_id:
                workout = self.client.get_workout(int(workout_id))
            event = map_calendar_item(item, workout)
            if event is not None:
                events.append(event)
        return events

    def create_event(self, write: EventWrite) -> str:
        workout_id = self.client.upload_and_schedule(self.workout_payload(write), write.date)
        return str(workout_id)

    def update_event(self, event_id: str, write: EventWrite) -> None:
        self.client.update_workout(int(event_id), self.workout_payload(write))

    def delete_event(self, event_id: str) -> None:
        self.client.delete_workout(int(event_id))

    def workout_payload(self, write: EventWrite) -> dict:
        """Garmin workout JSON for *write*.

        Without detailed content the workout is a single untargeted block
        of the planned length, to be detailed on the day.
        """
        workout = write.workout or StructuredWorkout(
            activity=write.activity,
            steps=(
                WorkoutStep(
                    step_type=StepType.ACTIVE,
                    duration_type=DurationType.TIME,
                    duration_value=write.duration_min,
                    step_notes=write.workout_type.label,
                ),
            ),
            workout_title=write.name,
        )
        payload = to_garmin_json(workout, self.ftp_watts, self.threshold_pace_s_per_km)
        payload["workoutName"] = system_title(write.name)
        payload["description"] = system_description(write)
        logger.debug("Payload for %s on %s: %d step(s)", write.name, write.date, len(workout.steps))
        return payload
