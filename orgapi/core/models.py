"""Resource models exchanged with the Org/User service."""
from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

# Server fractions run from 1 to 9 digits; fromisoformat needs exactly 6 before 3.11
_FRACTION_RE = re.compile(r"\.(\d{1,6})\d*")


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    value = _FRACTION_RE.sub(lambda m: "." + m.group(1).ljust(6, "0"), value)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def _compact(data: dict, omit_empty: tuple[str, ...]) -> dict:
    """Drop keys whose value is None, or "" for the listed fields."""
    return {
        key: value
        for key, value in data.items()
        if value is not None and not (key in omit_empty and value == "")
    }


@dataclass
class Org:
    """Organization resource."""

    name: str = ""
    desc: str = ""
    id: str = ""
    is_system: bool = False
    created_at: Optional[datetime] = None
    created_by: str = ""
    updated_at: Optional[datetime] = None
    updated_by: str = ""
    version: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Org":
        return cls(
            id=data.get("id") or "",
            name=data.get("name") or "",
            desc=data.get("desc") or "",
            is_system=bool(data.get("is_system", False)),
            created_at=_parse_timestamp(data.get("created_at")),
            created_by=data.get("created_by") or "",
            updated_at=_parse_timestamp(data.get("updated_at")),
            updated_by=data.get("updated_by") or "",
            version=int(data.get("version") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "name": self.name,
                "desc": self.desc,
                "is_system": self.is_system,
                "created_at": _format_timestamp(self.created_at),
                "created_by": self.created_by,
                "updated_at": _format_timestamp(self.updated_at),
                "updated_by": self.updated_by,
                "version": self.version,
            },
            omit_empty=("id", "name", "desc", "created_by", "updated_by"),
        )


@dataclass
class DeleteOrg:
    """Optimistic-lock delete request for an organization."""

    id: str
    version: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "version": self.version}


@dataclass
class User:
    """User resource; always belongs to one organization."""

    org_id: str = ""
    name: str = ""
    email: str = ""
    id: str = ""
    is_system: bool = False
    is_admin: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
    created_by: str = ""
    updated_at: Optional[datetime] = None
    updated_by: str = ""
    version: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=data.get("id") or "",
            org_id=data.get("org_id") or "",
            name=data.get("name") or "",
            email=data.get("email") or "",
            is_system=bool(data.get("is_system", False)),
            is_admin=bool(data.get("is_admin", False)),
            is_active=bool(data.get("is_active", False)),
            created_at=_parse_timestamp(data.get("created_at")),
            created_by=data.get("created_by") or "",
            updated_at=_parse_timestamp(data.get("updated_at")),
            updated_by=data.get("updated_by") or "",
            version=int(data.get("version") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "org_id": self.org_id,
                "name": self.name,
                "email": self.email,
                "is_system": self.is_system,
                "is_admin": self.is_admin,
                "is_active": self.is_active,
                "created_at": _format_timestamp(self.created_at),
                "created_by": self.created_by,
                "updated_at": _format_timestamp(self.updated_at),
                "updated_by": self.updated_by,
                "version": self.version,
            },
            omit_empty=("id", "created_by", "updated_by"),
        )


@dataclass
class DeleteUser:
    """Optimistic-lock delete request for a user."""

    id: str
    version: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "version": self.version}


def orgs_from_list(data: Optional[list]) -> list[Org]:
    # the service answers null rather than [] when nothing matches
    return [Org.from_dict(item) for item in data or []]


def users_from_list(data: Optional[list]) -> list[User]:
    return [User.from_dict(item) for item in data or []]
