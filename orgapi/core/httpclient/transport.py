"""HttpClient: executes RequestBuilder values over a requests.Session.

The client holds no per-call state and is safe to share between threads as
long as the underlying session is.
"""
from __future__ import annotations
import json
from typing import Optional

import requests

from .context import BACKGROUND, DEADLINE_EXCEEDED, CallContext
from .exceptions import HTTPStatusError, TransportError
from .request import Method, RequestBuilder

# Default per-request timeout in seconds
REQUEST_TIMEOUT = 5


def is_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


def extract_http_error(response: requests.Response) -> HTTPStatusError:
    """Build an HTTPStatusError from a non-2xx response.

    The body is parsed as a flat JSON object of strings; "message" wins over
    "error". Any other body is used verbatim as the message, and an
    unreadable body yields an empty message.
    """
    status_code = response.status_code
    try:
        raw = response.content
    except (requests.RequestException, OSError):
        return HTTPStatusError(status_code)

    text = raw.decode("utf-8", errors="replace")
    try:
        error_body = json.loads(raw)
    except ValueError:
        return HTTPStatusError(status_code, text)

    if error_body is None:
        error_body = {}
    if not isinstance(error_body, dict) or not all(
        value is None or isinstance(value, str) for value in error_body.values()
    ):
        return HTTPStatusError(status_code, text)

    message = error_body.get("message") or error_body.get("error") or ""
    return HTTPStatusError(status_code, message)


class HttpClient:
    """Factory for RequestBuilder values and executor of built requests.

    Args:
        session: requests.Session (or compatible) used for all calls
        timeout: Upper bound in seconds for each call; None disables it
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = REQUEST_TIMEOUT):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def new_request(self, method: Method, uri: str, path_params: Optional[dict] = None) -> RequestBuilder:
        return RequestBuilder(client=self, method=method, uri=uri, path_params=path_params or {})

    def head(self, uri: str, path_params: Optional[dict] = None) -> RequestBuilder:
        return self.new_request(Method.HEAD, uri, path_params)

    def get(self, uri: str, path_params: Optional[dict] = None) -> RequestBuilder:
        return self.new_request(Method.GET, uri, path_params)

    def post(self, uri: str, path_params: Optional[dict] = None) -> RequestBuilder:
        return self.new_request(Method.POST, uri, path_params)

    def put(self, uri: str, path_params: Optional[dict] = None) -> RequestBuilder:
        return self.new_request(Method.PUT, uri, path_params)

    def delete(self, uri: str, path_params: Optional[dict] = None) -> RequestBuilder:
        return self.new_request(Method.DELETE, uri, path_params)

    def _timeout_for(self, call_ctx: CallContext) -> Optional[float]:
        remaining = call_ctx.remaining()
        if remaining is None:
            return self.timeout
        if self.timeout is None:
            return remaining
        return min(self.timeout, remaining)

    def execute(
        self,
        builder: RequestBuilder,
        call_ctx: Optional[CallContext] = None,
        read_body: bool = True,
    ) -> tuple[int, Optional[bytes]]:
        """Send one request and return its status and raw body.

        Args:
            builder: Fully configured request
            call_ctx: Deadline/cancellation for the call (BACKGROUND if None)
            read_body: False leaves the body unread

        Returns:
            (status_code, body bytes); body is None for HEAD, 204 or when
            read_body is False

        Raises:
            URIParseError, PathParamMissingError, BodyEncodingError: Before any I/O
            TransportError: On network failure, timeout or cancellation
            HTTPStatusError: On a non-2xx response
        """
        call_ctx = call_ctx or BACKGROUND
        url = builder.url()
        data = builder.encode_body()
        headers = builder.header_items()

        call_ctx.check()
        try:
            response = self.session.request(
                builder.method.value,
                url,
                data=data,
                headers=headers,
                timeout=self._timeout_for(call_ctx),
                stream=True,
            )
        except requests.Timeout as exc:
            raise TransportError(f"{DEADLINE_EXCEEDED}: {exc}") from exc
        except (requests.RequestException, OSError) as exc:
            raise TransportError(str(exc)) from exc

        with response:
            status_code = response.status_code
            if not is_success(status_code):
                raise extract_http_error(response)
            if builder.method is Method.HEAD or status_code == 204 or not read_body:
                return status_code, None
            try:
                return status_code, response.content
            except (requests.RequestException, OSError) as exc:
                raise TransportError(f"failed to read response body: {exc}") from exc
