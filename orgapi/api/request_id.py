"""
Flask request-id propagation.

Every inbound request gets a correlation id: the caller's X-Request-Id
header, or a generated "generated-<uuid4>" one. The id is stored on
``flask.g`` so outbound calls made while serving the request can forward it:

    from orgapi.api.request_id import current_call_context

    org = org_client.get_by_id(org_id, call_ctx=current_call_context(timeout=5))
"""

import logging
import uuid
from typing import Optional

from flask import Flask, g, has_request_context, request

from orgapi.core.httpclient import REQUEST_ID_HEADER, CallContext

logger = logging.getLogger(__name__)

GENERATED_PREFIX = "generated-"


def _assign_request_id():
    request_id = request.headers.get(REQUEST_ID_HEADER, "")
    if not request_id:
        request_id = f"{GENERATED_PREFIX}{uuid.uuid4()}"
    g.request_id = request_id
    logger.debug("Request id assigned | path=%s | request_id=%s", request.path, request_id)


def _echo_request_id(response):
    """Return the correlation id to the caller for tracing."""
    request_id = g.get("request_id")
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


def init_request_id(app: Flask) -> None:
    """Register the request-id hooks on a Flask app."""
    app.before_request(_assign_request_id)
    app.after_request(_echo_request_id)


def current_request_id() -> Optional[str]:
    """
    Get the correlation id of the request being served.

    Returns:
        str: Request id, or None outside a request context
    """
    if not has_request_context():
        return None
    return g.get("request_id")


def current_call_context(timeout: Optional[float] = None) -> CallContext:
    """
    Build a CallContext carrying the current request id.

    Args:
        timeout: Optional deadline in seconds from now

    Returns:
        CallContext for outbound calls
    """
    request_id = current_request_id()
    if timeout is None:
        return CallContext(request_id=request_id)
    return CallContext.with_timeout(timeout, request_id=request_id)
