"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

SECRETS_DIR = Path("/run/secrets")

# Seeded system admin user of the Org/User service
SYSTEM_ADMIN_USER_ID = "fc83cf36-bba0-41f0-8125-2ebc03087140"


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = SECRETS_DIR / secret_name

    # Priority 1: Read from /run/secrets
    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.debug("Loaded %s from %s", secret_name, SECRETS_DIR)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read %s/%s: %s", SECRETS_DIR, secret_name, e)

    # Priority 2: Fallback to environment variable
    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug("Loaded %s from environment (fallback)", env_var)
            return secret_value

    return None


@dataclass
class ClientConfig:
    """Client configuration container."""
    # Mode
    demo_mode: bool = False

    # Service
    base_url: str = "http://localhost:4000"
    log_level: str = "debug"
    request_timeout: float = 5.0

    # Pre-issued bearer token
    api_token: str = ""

    # Locally minted HS256 JWT
    jwt_secret: str = ""
    jwt_audience: str = "org-service"
    jwt_issuer: str = "org-service"
    jwt_subject: str = ""
    jwt_admin: bool = False
    jwt_ttl_seconds: int = 86400

    # OAuth2 client credentials
    token_url: str = ""
    client_id: str = ""
    client_secret: str = ""


def _get_or_generate(var_name: str, demo_default: Optional[str] = None, required: bool = True, demo_mode: bool = False) -> str:
    """Get environment variable or use demo default."""
    value = os.environ.get(var_name)
    if value:
        return value

    if demo_mode and demo_default is not None:
        logger.info("[demo-mode] Using default for %s", var_name)
        return demo_default

    if not required:
        return ""

    raise RuntimeError(f"Environment variable {var_name} is required in production mode.")


def _env_bool(var_name: str, default: bool = False) -> bool:
    return os.environ.get(var_name, str(default)).strip().lower() == "true"


def _env_number(var_name: str, default, cast):
    raw = os.environ.get(var_name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{var_name} must be a number, got '{raw}'") from None
    if not math.isfinite(value):
        raise ValueError(f"{var_name} must be a finite number, got '{raw}'")
    return value


def load_settings() -> ClientConfig:
    """Load client settings from environment and /run/secrets.

    Raises:
        ValueError: If a numeric setting is malformed or out of range
    """
    demo_mode = _env_bool("DEMO_MODE")

    base_url = os.environ.get("BASE_URL", "http://localhost:4000").rstrip("/")
    log_level = os.environ.get("LOG_LEVEL", "debug")

    request_timeout = _env_number("REQUEST_TIMEOUT", 5.0, float)
    if request_timeout <= 0:
        raise ValueError("REQUEST_TIMEOUT must be greater than 0")

    # ─────────────────────────────────────────────────────────────────────────
    # Credentials
    # Priority: /run/secrets > environment variables > demo defaults
    # ─────────────────────────────────────────────────────────────────────────
    api_token = _load_secret_from_file("api_token", "API_TOKEN") or ""

    jwt_secret = _load_secret_from_file("jwt_secret", "JWT_SECRET")
    if not jwt_secret:
        jwt_secret = _get_or_generate(
            "JWT_SECRET",
            demo_default="demo-jwt-secret",
            required=False,
            demo_mode=demo_mode,
        )
    jwt_subject = _get_or_generate(
        "JWT_SUBJECT",
        demo_default=SYSTEM_ADMIN_USER_ID,
        required=False,
        demo_mode=demo_mode,
    )
    jwt_ttl_seconds = _env_number("JWT_TTL_SECONDS", 86400, int)
    if jwt_ttl_seconds <= 0:
        raise ValueError("JWT_TTL_SECONDS must be greater than 0")

    client_secret = _load_secret_from_file("client_secret", "CLIENT_SECRET") or ""

    mode_label = "DEMO" if demo_mode else "PRODUCTION"
    logger.info("Mode=%s; base_url=%s", mode_label, base_url)

    if demo_mode:
        logger.warning("Demo credentials in use. Do not deploy with these defaults.")

    return ClientConfig(
        demo_mode=demo_mode,
        base_url=base_url,
        log_level=log_level,
        request_timeout=request_timeout,
        api_token=api_token,
        jwt_secret=jwt_secret,
        jwt_audience=os.environ.get("JWT_AUDIENCE", "org-service"),
        jwt_issuer=os.environ.get("JWT_ISSUER", "org-service"),
        jwt_subject=jwt_subject,
        jwt_admin=_env_bool("JWT_ADMIN"),
        jwt_ttl_seconds=jwt_ttl_seconds,
        token_url=os.environ.get("TOKEN_URL", ""),
        client_id=os.environ.get("CLIENT_ID", ""),
        client_secret=client_secret,
    )
