"""Exceptions raised by the outbound HTTP client layer."""
from __future__ import annotations


class HttpClientError(Exception):
    """Base exception for all outbound HTTP client failures."""
    pass


class TokenSupplierError(HttpClientError):
    """The bearer token supplier could not produce a token."""
    pass


class URIParseError(HttpClientError):
    """The request URI is malformed (e.g. no scheme or host)."""
    pass


class PathParamMissingError(HttpClientError):
    """A path template placeholder has no (or an empty) value.

    Attributes:
        param: Placeholder segment that could not be resolved (e.g. ":id")
    """

    def __init__(self, param: str):
        self.param = param
        super().__init__(f"path param reference of '{param}' not found in the path params")


class BodyEncodingError(HttpClientError):
    """The request body could not be encoded for its content type."""
    pass


class TransportError(HttpClientError):
    """Network failure, timeout or cancellation while talking to the server."""
    pass


class ResponseDecodeError(HttpClientError):
    """A successful response body could not be decoded."""
    pass


class HTTPStatusError(HttpClientError):
    """Non-2xx response from the server.

    Attributes:
        status_code: HTTP status code
        message: Best-effort message extracted from the response body
    """

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        self.message = message
        super().__init__(f"http call failed with {status_code} status: {message}")

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_forbidden(self) -> bool:
        return self.status_code == 403

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409
