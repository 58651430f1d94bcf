"""Listing query parameters, validated once at the API boundary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from jobhub.config import JOBS_PAGE_SIZE, MAX_PAGE_SIZE
from jobhub.errors import ValidationError
from jobhub.models.job import CATEGORIES


@dataclass(frozen=True)
class JobFilter:
    search: Optional[str] = None
    location: Optional[str] = None
    remote: Optional[bool] = None  # True means "remote only"; None means no constraint
    category: Optional[str] = None

    def __post_init__(self):
        if self.category is not None and self.category not in CATEGORIES:
            raise ValidationError(
                f"Unsupported category '{self.category}'. Allowed: {', '.join(CATEGORIES)}",
                {"category": self.category},
            )
        if self.remote is False:
            object.__setattr__(self, "remote", None)

    @property
    def is_empty(self) -> bool:
        return not (self.search or self.location or self.remote or self.category)


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_job_filter(args: Mapping[str, Any]) -> JobFilter:
    remote = _clean(args.get("remote"))
    category = _clean(args.get("category"))
    return JobFilter(
        search=_clean(args.get("search")),
        location=_clean(args.get("location")),
        remote=True if remote and remote.lower() == "true" else None,
        category=category.lower() if category else None,
    )


def _parse_positive_int(args: Mapping[str, Any], field: str, default: int) -> int:
    raw = _clean(args.get(field))
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{field} must be an integer", {field: raw})
    if value < 1:
        raise ValidationError(f"{field} must be >= 1", {field: value})
    return value


def parse_pagination(
    args: Mapping[str, Any],
    default_limit: int = JOBS_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> Tuple[int, int]:
    page = _parse_positive_int(args, "page", 1)
    limit = _parse_positive_int(args, "limit", default_limit)
    return page, min(limit, max_limit)
