"""Typed client for the organization endpoints."""
from __future__ import annotations
import logging
from typing import Optional

from orgapi.core.httpclient import ApiClient, CallContext, HttpClientError
from orgapi.core.models import DeleteOrg, Org, orgs_from_list
from orgapi.core.validators import validate_delete, validate_org

logger = logging.getLogger(__name__)

ORGS_PATH = "/api/orgs"
ORG_PATH = "/api/orgs/:id"


def _request_id(call_ctx: Optional[CallContext]) -> Optional[str]:
    return call_ctx.request_id if call_ctx else None


class OrgClient:
    """Client for /api/orgs."""

    def __init__(self, api: ApiClient):
        """Initialize org client.

        Args:
            api: Authenticated API client pointed at the service base URL
        """
        self.api = api

    def _call(self, fn: str, send, *args, call_ctx: Optional[CallContext] = None, **kwargs):
        logger.debug("OrgClient.%s called | request_id=%s", fn, _request_id(call_ctx))
        try:
            _, value = send(*args, call_ctx=call_ctx, **kwargs)
        except HttpClientError as e:
            logger.warning("OrgClient.%s failed | request_id=%s | error=%s", fn, _request_id(call_ctx), e)
            raise
        return value

    def get_by_id(self, org_id: str, call_ctx: Optional[CallContext] = None) -> Org:
        """Fetch one org.

        Raises:
            HTTPStatusError: is_not_found when the org does not exist
        """
        return self._call("get_by_id", self.api.get, ORG_PATH, {"id": org_id},
                          into=Org.from_dict, call_ctx=call_ctx)

    def get_all(self, call_ctx: Optional[CallContext] = None) -> list[Org]:
        return self._call("get_all", self.api.get, ORGS_PATH,
                          into=orgs_from_list, call_ctx=call_ctx)

    def search_by_name(self, name: str, call_ctx: Optional[CallContext] = None) -> list[Org]:
        return self._call("search_by_name", self.api.get, ORGS_PATH, None, {"name": [name]},
                          into=orgs_from_list, call_ctx=call_ctx)

    def save(self, org: Org, call_ctx: Optional[CallContext] = None) -> Org:
        """Create the org (no id) or update it (id and version set).

        Raises:
            ValueError: If the org fails validation; nothing is sent
        """
        validate_org(org)
        if not org.id:
            return self._call("save", self.api.post, ORGS_PATH, None, None, org,
                              into=Org.from_dict, call_ctx=call_ctx)
        return self._call("save", self.api.put, ORG_PATH, {"id": org.id}, None, org,
                          into=Org.from_dict, call_ctx=call_ctx)

    def delete(self, target: DeleteOrg, call_ctx: Optional[CallContext] = None) -> None:
        """Delete an org at a known version.

        Raises:
            ValueError: If id or version is missing; nothing is sent
            HTTPStatusError: is_conflict when the version is stale
        """
        validate_delete(target)
        self._call("delete", self.api.delete, ORG_PATH, {"id": target.id}, None, target,
                   into=None, call_ctx=call_ctx)
