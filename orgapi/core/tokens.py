"""Bearer token suppliers for ApiClient.

Every supplier is a callable ``supplier(is_retry: bool) -> str``. A call with
``is_retry=True`` always obtains a fresh token instead of a cached one.
"""
from __future__ import annotations
import logging
import threading
import time
from typing import TYPE_CHECKING, Optional

import jwt
import requests

from orgapi.core.httpclient.exceptions import TokenSupplierError
from orgapi.core.httpclient.transport import REQUEST_TIMEOUT

if TYPE_CHECKING:
    from orgapi.config.settings import ClientConfig

logger = logging.getLogger(__name__)

# Refresh cached tokens this many seconds before they expire
EXPIRY_MARGIN_SECONDS = 10


class StaticTokenSupplier:
    """Returns a pre-issued token; a retry cannot refresh it."""

    def __init__(self, token: str):
        self.token = token

    def __call__(self, is_retry: bool = False) -> str:
        return self.token


class _CachingSupplier:
    """Thread-safe token cache; subclasses implement `_fetch()`."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._token: Optional[str] = None
        self._expires_at: float = 0.0

    def _fetch(self) -> tuple[str, float]:
        """Return (token, lifetime in seconds)."""
        raise NotImplementedError

    def __call__(self, is_retry: bool = False) -> str:
        with self._lock:
            now = time.monotonic()
            if not is_retry and self._token and now < self._expires_at - EXPIRY_MARGIN_SECONDS:
                return self._token
            token, lifetime = self._fetch()
            self._token = token
            self._expires_at = now + lifetime
            return token


class HmacJWTTokenSupplier(_CachingSupplier):
    """Mints HS256-signed JWTs locally from a shared secret.

    Args:
        secret: HMAC signing secret shared with the service
        subject: User id placed in the `sub` claim
        audience: Expected `aud` claim
        issuer: Expected `iss` claim
        admin: Adds `admin: true` to the claims
        ttl_seconds: Token lifetime (one day by default)
    """

    def __init__(
        self,
        secret: str,
        subject: str,
        audience: str,
        issuer: str,
        admin: bool = False,
        ttl_seconds: int = 86400,
    ):
        super().__init__()
        self.secret = secret
        self.subject = subject
        self.audience = audience
        self.issuer = issuer
        self.admin = admin
        self.ttl_seconds = ttl_seconds

    def claims(self) -> dict:
        now = int(time.time())
        claims = {
            "sub": self.subject,
            "aud": self.audience,
            "iss": self.issuer,
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        if self.admin:
            claims["admin"] = True
        return claims

    def _fetch(self) -> tuple[str, float]:
        try:
            token = jwt.encode(self.claims(), self.secret, algorithm="HS256")
        except jwt.PyJWTError as exc:
            raise TokenSupplierError(f"failed to sign jwt: {exc}") from exc
        logger.debug("Minted jwt for sub=%s admin=%s", self.subject, self.admin)
        return token, self.ttl_seconds


class ClientCredentialsTokenSupplier(_CachingSupplier):
    """Fetches tokens with the OAuth2 client credentials grant.

    Args:
        token_url: Token endpoint URL
        client_id: Client identifier
        client_secret: Client secret
        timeout: Seconds to wait for the token endpoint
    """

    # Lifetime assumed when the server omits expires_in
    DEFAULT_LIFETIME_SECONDS = 60

    def __init__(self, token_url: str, client_id: str, client_secret: str, timeout: float = REQUEST_TIMEOUT):
        super().__init__()
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout

    def _fetch(self) -> tuple[str, float]:
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        try:
            resp = requests.post(self.token_url, data=data, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TokenSupplierError(f"token request to {self.token_url} failed: {exc}") from exc
        if resp.status_code != 200:
            raise TokenSupplierError(
                f"token request to {self.token_url} failed with {resp.status_code} status: {resp.text}"
            )
        try:
            payload = resp.json()
            token = payload["access_token"]
            lifetime = float(payload.get("expires_in") or self.DEFAULT_LIFETIME_SECONDS)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise TokenSupplierError(f"malformed token response from {self.token_url}: {exc}") from exc
        logger.debug("Fetched client credentials token for client_id=%s", self.client_id)
        return token, lifetime


def build_token_supplier(cfg: "ClientConfig"):
    """Pick a supplier from configuration.

    Order: a pre-issued API token, then client credentials, then a locally
    minted JWT.

    Raises:
        ValueError: If no credentials are configured
    """
    if cfg.api_token:
        return StaticTokenSupplier(cfg.api_token)
    if cfg.token_url and cfg.client_id and cfg.client_secret:
        return ClientCredentialsTokenSupplier(
            cfg.token_url, cfg.client_id, cfg.client_secret, timeout=cfg.request_timeout
        )
    if cfg.jwt_secret and cfg.jwt_subject:
        return HmacJWTTokenSupplier(
            secret=cfg.jwt_secret,
            subject=cfg.jwt_subject,
            audience=cfg.jwt_audience,
            issuer=cfg.jwt_issuer,
            admin=cfg.jwt_admin,
            ttl_seconds=cfg.jwt_ttl_seconds,
        )
    raise ValueError(
        "No credentials configured: set API_TOKEN, TOKEN_URL/CLIENT_ID/CLIENT_SECRET, "
        "or JWT_SECRET/JWT_SUBJECT"
    )
