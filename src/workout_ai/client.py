"""WorkoutAIClient — OpenAI chat completions in JSON mode.

Implements the collaborator the generative policy talks to. Rate limits,
timeouts and 5xx answers are retried with exponential backoff; every
other API error is a rejection. Replies are checked for the fields the
policy reads before they are returned.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Optional

import openai
from openai import OpenAI

from workout_ai.exceptions import WorkoutAIRateLimitError, WorkoutAIRejection, WorkoutAIResponseError
from workout_ai.prompts import (
    STRATEGY_SYSTEM_PROMPT,
    WORKOUT_SYSTEM_PROMPT,
    strategy_request,
    workout_request,
)

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3
_BASE_BACKOFF_S = 2
_TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


class WorkoutAIClient:
    """Generative collaborator.

    Args:
        api_key: OpenAI API key.
        model: Chat model name.
        client: Pre-built OpenAI client (tests pass a MagicMock).
        sleep: Backoff sleep, injectable for tests.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        client: Optional[OpenAI] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client or OpenAI(api_key=api_key)
        self.model = model
        self._sleep = sleep

    def generate(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Design one workout for a brief payload."""
        data = self._complete(WORKOUT_SYSTEM_PROMPT, workout_request(payload))
        missing = [k for k in ("explanation", "suitability_score") if k not in data]
        content_key = "workout_description" if payload.get("sport") == "run" else "workout_body"
        if not data.get(content_key):
            missing.append(content_key)
        if missing:
            raise WorkoutAIResponseError(f"Reply is missing {', '.join(missing)}")
        try:
            data["suitability_score"] = float(data["suitability_score"])
        except (TypeError, ValueError) as exc:
            raise WorkoutAIResponseError(f"Non-numeric suitability score {data['suitability_score']!r}") from exc
        return data

    def describe_strategy(self, payload: dict[str, Any]) -> str:
        data = self._complete(STRATEGY_SYSTEM_PROMPT, strategy_request(payload))
        return str(data.get("strategy", ""))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _complete(self, system: str, user: str) -> dict[str, Any]:
        response = self._safe_call(
            self.client.chat.completions.create,
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise WorkoutAIResponseError("Empty reply")
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise WorkoutAIResponseError(f"Reply is not JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise WorkoutAIResponseError("Reply JSON is not an object")
        return data

    def _safe_call(self, fn: Callable, *args: Any, **kwargs: Any) -> Any:
        """Call *fn* with retry + exponential backoff on transient errors."""
        last_exc: Exception | None = None
        for attempt in range(_MAX_RETRIES):
            try:
                return fn(*args, **kwargs)
            except _TRANSIENT_ERRORS as exc:
                last_exc = exc
                if attempt + 1 < _MAX_RETRIES:
                    wait = _BASE_BACKOFF_S * (2 ** attempt)
                    logger.warning(
                        "OpenAI %s (attempt %d/%d), retrying in %ds",
                        type(exc).__name__,
                        attempt + 1,
                        _MAX_RETRIES,
                        wait,
                    )
                    self._sleep(wait)
            except openai.APIStatusError as exc:
                raise WorkoutAIRejection(str(exc), status_code=exc.status_code) from exc
        raise WorkoutAIRateLimitError(f"OpenAI unavailable after {_MAX_RETRIES} attempts: {last_exc}") from last_exc
