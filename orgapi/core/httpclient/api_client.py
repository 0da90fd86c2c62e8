"""Authenticated JSON API client.

Adds the bearer token and correlation id to every call, prefixes a base URL
to request paths, and retries exactly once with a freshly minted token when
the server answers 401 Unauthorized.
"""
from __future__ import annotations
from typing import Any, Callable, Optional

from .context import BACKGROUND, CallContext
from .exceptions import HTTPStatusError
from .request import JSON_MEDIA_TYPE, Method, MultiValues, RequestBuilder, json_value
from .transport import HttpClient

AUTHORIZATION_HEADER = "Authorization"
REQUEST_ID_HEADER = "X-Request-Id"

# get_token(is_retry) -> raw bearer token
TokenSupplier = Callable[[bool], str]


class ApiClient:
    """JSON-over-HTTP client with bearer auth and a single 401 retry.

    Args:
        http_client: HttpClient used to build and execute requests
        get_token: Token supplier; called with True to force a fresh token
        base_url: Prefix joined to every request path
    """

    def __init__(self, http_client: HttpClient, get_token: TokenSupplier, base_url: str = ""):
        self.http_client = http_client
        self.get_token = get_token
        self.base_url = base_url

    def get(
        self,
        path: str,
        path_params: Optional[dict] = None,
        query_params: Optional[MultiValues] = None,
        *,
        into: Optional[Callable[[Any], Any]] = json_value,
        call_ctx: Optional[CallContext] = None,
    ) -> tuple[int, Any]:
        return self._call(Method.GET, path, path_params, query_params, None, into, call_ctx)

    def post(
        self,
        path: str,
        path_params: Optional[dict] = None,
        query_params: Optional[MultiValues] = None,
        body: Any = None,
        *,
        into: Optional[Callable[[Any], Any]] = json_value,
        call_ctx: Optional[CallContext] = None,
    ) -> tuple[int, Any]:
        return self._call(Method.POST, path, path_params, query_params, body, into, call_ctx)

    def put(
        self,
        path: str,
        path_params: Optional[dict] = None,
        query_params: Optional[MultiValues] = None,
        body: Any = None,
        *,
        into: Optional[Callable[[Any], Any]] = json_value,
        call_ctx: Optional[CallContext] = None,
    ) -> tuple[int, Any]:
        return self._call(Method.PUT, path, path_params, query_params, body, into, call_ctx)

    def delete(
        self,
        path: str,
        path_params: Optional[dict] = None,
        query_params: Optional[MultiValues] = None,
        body: Any = None,
        *,
        into: Optional[Callable[[Any], Any]] = json_value,
        call_ctx: Optional[CallContext] = None,
    ) -> tuple[int, Any]:
        return self._call(Method.DELETE, path, path_params, query_params, body, into, call_ctx)

    # ─────────────────────────────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────────────────────────────
    def _auth_headers(self, token: str, call_ctx: CallContext) -> dict[str, str]:
        headers = {AUTHORIZATION_HEADER: f"Bearer {token}"}
        if call_ctx.request_id:
            headers[REQUEST_ID_HEADER] = call_ctx.request_id
        return headers

    def _build(
        self,
        method: Method,
        path: str,
        path_params: Optional[dict],
        query_params: Optional[MultiValues],
        body: Any,
    ) -> RequestBuilder:
        builder = (
            self.http_client.new_request(method, self.base_url + path, path_params)
            .with_query_params(query_params or {})
            .with_accept(JSON_MEDIA_TYPE)
        )
        if method is Method.GET:
            return builder
        return builder.with_content_type(JSON_MEDIA_TYPE).with_body(body)

    def _call(
        self,
        method: Method,
        path: str,
        path_params: Optional[dict],
        query_params: Optional[MultiValues],
        body: Any,
        into: Optional[Callable[[Any], Any]],
        call_ctx: Optional[CallContext],
    ) -> tuple[int, Any]:
        call_ctx = call_ctx or BACKGROUND
        token = self.get_token(False)
        builder = self._build(method, path, path_params, query_params, body)

        try:
            return builder.with_headers(self._auth_headers(token, call_ctx)).retrieve(call_ctx, into=into)
        except HTTPStatusError as exc:
            if not exc.is_unauthorized:
                raise
            try:
                token = self.get_token(True)
            except Exception:
                # the 401 is more useful to the caller than the refresh failure
                raise exc from None
            return builder.with_headers(self._auth_headers(token, call_ctx)).retrieve(call_ctx, into=into)
