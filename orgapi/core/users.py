"""Typed client for the user endpoints."""
from __future__ import annotations
import logging
from typing import Optional

from orgapi.core.httpclient import ApiClient, CallContext, HttpClientError
from orgapi.core.models import DeleteUser, User, users_from_list
from orgapi.core.validators import validate_delete, validate_user

logger = logging.getLogger(__name__)

USERS_PATH = "/api/users"
USER_PATH = "/api/users/:id"
ORG_USERS_PATH = "/api/orgs/:orgID/users"


class UserClient:
    """Client for /api/users and /api/orgs/:orgID/users."""

    def __init__(self, api: ApiClient):
        self.api = api

    def _call(self, fn: str, send, *args, call_ctx: Optional[CallContext] = None, **kwargs):
        request_id = call_ctx.request_id if call_ctx else None
        logger.debug("UserClient.%s called | request_id=%s", fn, request_id)
        try:
            _, value = send(*args, call_ctx=call_ctx, **kwargs)
        except HttpClientError as e:
            logger.warning("UserClient.%s failed | request_id=%s | error=%s", fn, request_id, e)
            raise
        return value

    def get_by_id(self, user_id: str, call_ctx: Optional[CallContext] = None) -> User:
        return self._call("get_by_id", self.api.get, USER_PATH, {"id": user_id},
                          into=User.from_dict, call_ctx=call_ctx)

    def get_all(self, call_ctx: Optional[CallContext] = None) -> list[User]:
        return self._call("get_all", self.api.get, USERS_PATH,
                          into=users_from_list, call_ctx=call_ctx)

    def get_all_by_org_id(self, org_id: str, call_ctx: Optional[CallContext] = None) -> list[User]:
        """List the users of one org."""
        return self._call("get_all_by_org_id", self.api.get, ORG_USERS_PATH, {"orgID": org_id},
                          into=users_from_list, call_ctx=call_ctx)

    def save(self, user: User, call_ctx: Optional[CallContext] = None) -> User:
        """Create the user (no id) or update it (id and version set).

        Raises:
            ValueError: If the user fails validation; nothing is sent
        """
        validate_user(user)
        if not user.id:
            return self._call("save", self.api.post, USERS_PATH, None, None, user,
                              into=User.from_dict, call_ctx=call_ctx)
        return self._call("save", self.api.put, USER_PATH, {"id": user.id}, None, user,
                          into=User.from_dict, call_ctx=call_ctx)

    def delete(self, target: DeleteUser, call_ctx: Optional[CallContext] = None) -> None:
        validate_delete(target)
        self._call("delete", self.api.delete, USER_PATH, {"id": target.id}, None, target,
                   into=None, call_ctx=call_ctx)
