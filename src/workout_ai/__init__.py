"""Generative workout collaborator backed by the OpenAI chat API."""

from workout_ai.client import WorkoutAIClient
from workout_ai.exceptions import (
    WorkoutAIError,
    WorkoutAIRateLimitError,
    WorkoutAIRejection,
    WorkoutAIResponseError,
)

__all__ = [
    "WorkoutAIClient",
    "WorkoutAIError",
    "WorkoutAIRateLimitError",
    "WorkoutAIRejection",
    "WorkoutAIResponseError",
]
