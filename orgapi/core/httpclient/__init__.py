"""Outbound HTTP client layer.

Architecture:
- paths.py: URI path template rendering (literal + escaped)
- request.py: Immutable fluent RequestBuilder and the Method enum
- transport.py: HttpClient executing builders over requests
- api_client.py: Bearer auth, X-Request-Id propagation, single 401 retry
- context.py: Per-call deadline, cancellation and correlation id
- exceptions.py: Typed exceptions for error handling

Usage:
    from orgapi.core.httpclient import ApiClient, CallContext, HttpClient

    api = ApiClient(HttpClient(), get_token, base_url="http://localhost:4000")
    status_code, orgs = api.get(
        "/api/orgs",
        query_params={"name": ["acme"]},
        call_ctx=CallContext.with_timeout(5, request_id="abc"),
    )
"""
from .api_client import (
    ApiClient,
    TokenSupplier,
    AUTHORIZATION_HEADER,
    REQUEST_ID_HEADER,
)
from .context import (
    CallContext,
    BACKGROUND,
)
from .exceptions import (
    HttpClientError,
    TokenSupplierError,
    URIParseError,
    PathParamMissingError,
    BodyEncodingError,
    TransportError,
    ResponseDecodeError,
    HTTPStatusError,
)
from .paths import (
    RenderedPath,
    render_path,
)
from .request import (
    Method,
    RequestBuilder,
    JSON_MEDIA_TYPE,
    json_value,
)
from .transport import (
    HttpClient,
    extract_http_error,
    REQUEST_TIMEOUT,
)

__all__ = [
    # Clients
    "ApiClient",
    "HttpClient",
    "TokenSupplier",
    "REQUEST_TIMEOUT",
    "AUTHORIZATION_HEADER",
    "REQUEST_ID_HEADER",

    # Requests
    "Method",
    "RequestBuilder",
    "JSON_MEDIA_TYPE",
    "json_value",
    "RenderedPath",
    "render_path",
    "extract_http_error",

    # Call context
    "CallContext",
    "BACKGROUND",

    # Exceptions
    "HttpClientError",
    "TokenSupplierError",
    "URIParseError",
    "PathParamMissingError",
    "BodyEncodingError",
    "TransportError",
    "ResponseDecodeError",
    "HTTPStatusError",
]
