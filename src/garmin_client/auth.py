"""Garmin Connect session handling for unattended jobs.

Saved garth tokens are tried first so scheduled runs never need a
password; a fresh SSO login is the fallback and refreshes the tokens.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from garminconnect import Garmin, GarminConnectAuthenticationError

from garmin_client.exceptions import GarminAuthError, GarminMFARequired

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_DIR = Path("~/.garminconnect").expanduser()
_TOKEN_FILE = "oauth1_token.json"


def has_saved_tokens(token_dir: Path | str = DEFAULT_TOKEN_DIR) -> bool:
    return (Path(token_dir) / _TOKEN_FILE).exists()


def resume_session(token_dir: Path | str = DEFAULT_TOKEN_DIR) -> Garmin:
    """Resume a session from saved tokens (no credentials needed).

    Raises:
        GarminAuthError: If tokens are missing or no longer accepted.
    """
    token_dir = Path(token_dir)
    if not has_saved_tokens(token_dir):
        raise GarminAuthError(f"No saved tokens at {token_dir}")
    try:
        client = Garmin()
        client.login(tokenstore=str(token_dir))
    except (GarminConnectAuthenticationError, OSError, ValueError) as exc:
        raise GarminAuthError(f"Token resume failed: {exc}") from exc
    logger.debug("Resumed session from %s", token_dir)
    return client


def create_session(
    email: str,
    password: str,
    token_dir: Path | str = DEFAULT_TOKEN_DIR,
    prompt_mfa: Optional[Callable[[], str]] = None,
) -> Garmin:
    """Authenticated Garmin session, from saved tokens or a fresh login.

    Args:
        email: Garmin Connect account email.
        password: Garmin Connect account password.
        token_dir: Where garth tokens are persisted.
        prompt_mfa: Returns the MFA code when Garmin asks for one. Without
            it an MFA challenge raises ``GarminMFARequired``, since a
            scheduled job cannot answer it.

    Raises:
        GarminMFARequired: MFA is needed and no prompt was given.
        GarminAuthError: Login failed.
    """
    token_dir = Path(token_dir)
    token_dir.mkdir(parents=True, exist_ok=True)

    if has_saved_tokens(token_dir):
        try:
            return resume_session(token_dir)
        except GarminAuthError as exc:
            logger.info("%s; trying fresh SSO login", exc)

    if not email or not password:
        raise GarminAuthError("No usable tokens and no Garmin credentials configured")

    try:
        client = Garmin(
            email=email,
            password=password,
            prompt_mfa=prompt_mfa,
            return_on_mfa=prompt_mfa is None,
        )
        result = client.login()
    except GarminConnectAuthenticationError as exc:
        raise GarminAuthError(f"Login failed: {exc}") from exc

    # With return_on_mfa, login() hands back ("needs_mfa", state) instead of blocking
    if isinstance(result, tuple) and result and result[0] == "needs_mfa":
        raise GarminMFARequired("MFA verification required; run the job interactively once")

    client.garth.dump(str(token_dir))
    logger.info("Logged in via SSO and saved tokens to %s", token_dir)
    return client
