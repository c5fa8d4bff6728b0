"""
Paginated listing query over persisted roles.

This is the read side served to the frontend: active roles only, newest
posting first, with optional filters. Stores apply RoleQuery through
filter_roles()/paginate() so every backend returns the same shape.
"""

import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field, field_validator

from role_tracker.models import Role

ALL = "all"
MAX_LIMIT = 200


class RoleQuery(BaseModel):
    """
    Filters and paging for the role listing.

    "all" (or an empty value) disables a filter.
    """

    work_mode: Optional[str] = None
    role_level: Optional[str] = None
    industry: Optional[str] = None
    search: Optional[str] = Field(
        default=None, description="Case-insensitive substring over company, title and industry"
    )
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=50, ge=1, le=MAX_LIMIT)

    @field_validator("work_mode", "role_level", "industry", "search")
    @classmethod
    def _blank_means_all(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value or value.lower() == ALL:
            return None
        return value

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _matches(role: Role, query: RoleQuery) -> bool:
    if not role.is_active:
        return False
    if query.work_mode and role.work_mode != query.work_mode:
        return False
    if query.role_level and role.role_level != query.role_level:
        return False
    if query.industry and (role.industry or "").lower() != query.industry.lower():
        return False
    if query.search:
        needle = query.search.lower()
        haystacks = (role.company_name, role.role_title, role.industry or "")
        if not any(needle in h.lower() for h in haystacks):
            return False
    return True


def _posting_key(role: Role) -> datetime:
    posted = role.posting_date
    if posted.tzinfo is None:
        posted = posted.replace(tzinfo=timezone.utc)
    return posted


def filter_roles(roles: Iterable[Role], query: RoleQuery) -> List[Role]:
    """Active roles matching the query, newest posting first."""
    matched = [role for role in roles if _matches(role, query)]
    matched.sort(key=_posting_key, reverse=True)
    return matched


def paginate(roles: List[Role], query: RoleQuery) -> Dict[str, Any]:
    """
    Slice a filtered list into the listing response shape.

    Returns:
        {"jobs": [...role dicts...], "pagination": {page, limit, total, totalPages}}
    """
    total = len(roles)
    page = roles[query.offset : query.offset + query.limit]
    return {
        "jobs": [role.model_dump(mode="json") for role in page],
        "pagination": {
            "page": query.page,
            "limit": query.limit,
            "total": total,
            "totalPages": math.ceil(total / query.limit),
        },
    }
