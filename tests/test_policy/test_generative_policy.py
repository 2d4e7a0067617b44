"""Tests for policy selection and the generative fallback."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from coach_engine.config import CoachConfig
from coach_engine.errors import ConfigurationError, TransientNetworkError
from coach_engine.models.enums import ActivityKind, WorkoutType
from coach_engine.models.workout import WorkoutBrief
from coach_engine.policy.factory import make_policy
from coach_engine.policy.generative import GenerativePolicy, brief_payload
from coach_engine.policy.heuristic import HEURISTIC_SUITABILITY, HeuristicPolicy


def _brief(activity: ActivityKind = ActivityKind.RIDE) -> WorkoutBrief:
    return WorkoutBrief(
        date=date(2026, 3, 4),
        activity=activity,
        workout_type=WorkoutType.THRESHOLD,
        intensity=4,
        duration_min=60,
        target_tss=75,
        phase_name="Build Phase",
        phase_focus="Threshold development",
        ftp_watts=250,
        threshold_pace_s_per_km=300,
    )


class TestHeuristicPolicy:
    def test_ride_gets_zwo_body(self) -> None:
        draft = HeuristicPolicy().design_workout(_brief())
        assert draft.suitability_score == HEURISTIC_SUITABILITY
        assert draft.workout_body
        assert draft.workout_description is None

    def test_run_gets_text_description(self) -> None:
        draft = HeuristicPolicy().design_workout(_brief(ActivityKind.RUN))
        assert draft.workout_description
        assert draft.workout_body is None


class TestGenerativePolicy:
    def test_uses_collaborator_reply(self) -> None:
        client = MagicMock()
        client.generate.return_value = {
            "explanation": "Two threshold blocks.",
            "suitability_score": 9,
            "reason": "fits",
            "workout_body": "<workout_file/>",
        }
        draft = GenerativePolicy(client).design_workout(_brief())
        assert draft.source == "generative"
        assert draft.suitability_score == 9.0
        assert draft.workout_body == "<workout_file/>"
        payload = client.generate.call_args.args[0]
        assert payload["sport"] == "ride"
        assert payload["workout_type"] == WorkoutType.THRESHOLD.label

    def test_falls_back_to_template_on_error(self) -> None:
        client = MagicMock()
        client.generate.side_effect = TransientNetworkError("timeout")
        draft = GenerativePolicy(client).design_workout(_brief())
        assert draft.source == "heuristic"
        assert draft.suitability_score == HEURISTIC_SUITABILITY

    def test_payload_is_json_ready(self) -> None:
        payload = brief_payload(_brief())
        assert payload["date"] == "2026-03-04"
        assert payload["target_zone"] is None
        assert payload["constraints"] == []


class TestMakePolicy:
    def test_heuristic_by_default(self) -> None:
        config = CoachConfig(athlete_id="a")
        assert isinstance(make_policy(config), HeuristicPolicy)
        assert not isinstance(make_policy(config), GenerativePolicy)

    def test_generative_needs_client(self) -> None:
        config = CoachConfig(athlete_id="a", policy_mode="generative")
        with pytest.raises(ConfigurationError):
            make_policy(config)
        assert isinstance(make_policy(config, MagicMock()), GenerativePolicy)
