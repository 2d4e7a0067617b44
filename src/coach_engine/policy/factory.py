"""Policy selection from configuration."""

from __future__ import annotations

from coach_engine.config import POLICY_GENERATIVE, CoachConfig
from coach_engine.errors import ConfigurationError
from coach_engine.policy.base import PolicyProvider
from coach_engine.policy.generative import GenerativePolicy, WorkoutCollaborator
from coach_engine.policy.heuristic import HeuristicPolicy


def make_policy(config: CoachConfig, client: WorkoutCollaborator | None = None) -> PolicyProvider:
    """HeuristicPolicy, or GenerativePolicy when configured and a client is given."""
    if config.policy_mode == POLICY_GENERATIVE:
        if client is None:
            raise ConfigurationError("Generative policy configured but no collaborator client given")
        return GenerativePolicy(client)
    return HeuristicPolicy()
