"""Immutable, fluent description of one outbound HTTP call.

Builders are created by HttpClient (``client.get(uri, path_params)``) and
refined with ``with_*`` calls, each of which returns a new builder:

    status_code, org = (
        client.get("http://svc/api/orgs/:id", {"id": org_id})
        .with_accept(JSON_MEDIA_TYPE)
        .retrieve(into=Org.from_dict)
    )
"""
from __future__ import annotations
import dataclasses
import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from requests.structures import CaseInsensitiveDict

from .context import CallContext
from .exceptions import BodyEncodingError, ResponseDecodeError, URIParseError
from .paths import RenderedPath, render_path

if TYPE_CHECKING:
    from .transport import HttpClient

JSON_MEDIA_TYPE = "application/json"

MultiValues = Mapping[str, Union[str, Iterable[str]]]


class Method(str, Enum):
    """Supported HTTP methods."""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def allows_body(self) -> bool:
        """Whether a configured body is transmitted for this method."""
        return self not in (Method.GET, Method.HEAD)


def json_value(value: Any) -> Any:
    """Output converter returning decoded JSON as-is."""
    return value


def _freeze_multi(values: Optional[MultiValues]) -> Mapping[str, tuple[str, ...]]:
    frozen = {}
    for key, vals in (values or {}).items():
        frozen[key] = (vals,) if isinstance(vals, str) else tuple(vals)
    return MappingProxyType(frozen)


def _json_default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass(frozen=True)
class RequestBuilder:
    """Value object for one call; never mutated after construction."""
    client: "HttpClient" = field(repr=False, compare=False)
    method: Method
    uri: str
    path_params: Mapping[str, str] = field(default_factory=dict)
    query_params: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    headers: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    accept: str = ""
    content_type: str = ""
    body: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", Method(self.method))
        object.__setattr__(self, "path_params", MappingProxyType(dict(self.path_params or {})))
        object.__setattr__(self, "query_params", _freeze_multi(self.query_params))
        object.__setattr__(self, "headers", _freeze_multi(self.headers))

    # ─────────────────────────────────────────────────────────────────────
    # Fluent configuration
    # ─────────────────────────────────────────────────────────────────────
    def with_query_params(self, query_params: MultiValues) -> "RequestBuilder":
        return dataclasses.replace(self, query_params=query_params)

    def with_headers(self, headers: MultiValues) -> "RequestBuilder":
        return dataclasses.replace(self, headers=headers)

    def with_accept(self, accept: str) -> "RequestBuilder":
        return dataclasses.replace(self, accept=accept)

    def with_content_type(self, content_type: str) -> "RequestBuilder":
        return dataclasses.replace(self, content_type=content_type)

    def with_body(self, body: Any) -> "RequestBuilder":
        return dataclasses.replace(self, body=body)

    # ─────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────
    def _split_uri(self):
        try:
            parts = urlsplit(self.uri)
        except ValueError as exc:
            raise URIParseError(f"invalid uri '{self.uri}': {exc}") from exc
        if not parts.scheme or not parts.netloc:
            raise URIParseError(f"invalid uri '{self.uri}': missing scheme or host")
        return parts

    def render_path(self) -> RenderedPath:
        """Literal and escaped renderings of the URI path."""
        return render_path(self._split_uri().path, self.path_params)

    def url(self) -> str:
        """Full URL sent on the wire (escaped path plus encoded query)."""
        parts = self._split_uri()
        escaped_path = render_path(parts.path, self.path_params).escaped_path
        query = parts.query
        if self.query_params:
            pairs = parse_qsl(parts.query, keep_blank_values=True)
            for key, values in self.query_params.items():
                pairs.extend((key, value) for value in values)
            query = urlencode(pairs)
        return urlunsplit((parts.scheme, parts.netloc, escaped_path, query, parts.fragment))

    def encode_body(self) -> Optional[bytes]:
        """Encode the body per method and content type.

        Returns:
            Encoded bytes, or None when no body is transmitted

        Raises:
            BodyEncodingError: If JSON serialization fails, or a non-JSON
                content type is paired with a non-string body
        """
        if not self.method.allows_body:
            return None
        if self.body is None or (isinstance(self.body, str) and not self.body):
            return None
        if self.content_type == JSON_MEDIA_TYPE:
            try:
                encoded = json.dumps(
                    self.body,
                    default=_json_default,
                    allow_nan=False,
                    separators=(",", ":"),
                )
            except (TypeError, ValueError) as exc:
                raise BodyEncodingError(f"failed to encode body as {JSON_MEDIA_TYPE}: {exc}") from exc
            return encoded.encode("utf-8")
        if not isinstance(self.body, str):
            raise BodyEncodingError(
                f"contentType was '{self.content_type}' and input body was not a string: body={self.body!r}"
            )
        return self.body.encode("utf-8")

    def header_items(self) -> CaseInsensitiveDict:
        """Headers to send; Accept/Content-Type replace same-named custom headers."""
        overrides = {}
        if self.accept:
            overrides["Accept"] = self.accept
        if self.content_type:
            overrides["Content-Type"] = self.content_type
        overridden = {name.lower() for name in overrides}

        headers = CaseInsensitiveDict()
        for name, values in self.headers.items():
            if name.lower() in overridden:
                continue
            for value in values:
                existing = headers.get(name)
                # repeated fields fold into one comma-separated field
                headers[name] = value if existing is None else f"{existing}, {value}"
        headers.update(overrides)
        return headers

    # ─────────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────────
    def retrieve(
        self,
        call_ctx: Optional[CallContext] = None,
        *,
        into: Optional[Callable[[Any], Any]] = json_value,
    ) -> tuple[int, Any]:
        """Execute and JSON-decode the response body.

        Args:
            call_ctx: Deadline/cancellation/correlation for this call
            into: Converter applied to the decoded JSON; None skips reading
                the body entirely

        Returns:
            (status_code, converted value or None for HEAD/204/into=None)

        Raises:
            HTTPStatusError: On a non-2xx response
            ResponseDecodeError: If the body is not valid JSON for `into`
        """
        status_code, content = self.client.execute(self, call_ctx, read_body=into is not None)
        if content is None:
            return status_code, None
        try:
            return status_code, into(json.loads(content))
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            raise ResponseDecodeError(f"failed to decode response body: {exc}") from exc

    def retrieve_str(
        self,
        call_ctx: Optional[CallContext] = None,
        *,
        read_body: bool = True,
    ) -> tuple[int, Optional[str]]:
        """Execute and return the raw response body as text.

        Bytes that are not valid UTF-8 decode to lone surrogates, so
        ``text.encode("utf-8", "surrogateescape")`` recovers the exact body.
        """
        status_code, content = self.client.execute(self, call_ctx, read_body=read_body)
        if content is None:
            return status_code, None
        return status_code, content.decode("utf-8", errors="surrogateescape")
