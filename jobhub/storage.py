"""
Listing store: filtered/paginated reads, insert-if-absent batch writes and stats.

Every call opens its own session and re-reads the database; there is no
in-process cache. Uniqueness of ``external_id`` is enforced by the database
(``uq_jobs_external_id``), so overlapping sync runs need no locking here.
"""

from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional

from sqlalchemy import and_, desc, func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from jobhub.countries import extract_countries
from jobhub.errors import NotFoundError, PersistenceUnavailable, ValidationError
from jobhub.filters import JobFilter
from jobhub.models.job import CATEGORIES, DEFAULT_CATEGORY, Job, utcnow

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 30
MAX_COUNTRIES = 193
BATCH_CHUNK = 200

INSERTABLE_FIELDS = (
    "external_id", "title", "company", "location", "description", "url",
    "remote", "tags", "salary", "source", "category", "posted_at",
)

_DIALECT_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


@dataclass
class JobPage:
    items: List[Job]
    total: int
    page: int
    total_pages: int
    has_more: bool


@dataclass
class JobStats:
    total_jobs: int
    countries_count: int
    sources_count: int
    last_updated: datetime


@dataclass
class NewJob:
    """A posting ready for insertion (no id / created_at yet)."""

    external_id: str
    title: str
    company: str
    url: str
    source: str
    posted_at: datetime
    location: str = ""
    description: str = ""
    remote: bool = False
    tags: List[str] = field(default_factory=list)
    salary: Optional[str] = None
    category: str = DEFAULT_CATEGORY

    def __post_init__(self):
        if self.category not in CATEGORIES:
            raise ValidationError(
                f"Unsupported category '{self.category}'. Allowed: {', '.join(CATEGORIES)}",
                {"external_id": self.external_id},
            )

    def to_row(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in INSERTABLE_FIELDS}


def _filter_clause(flt: Optional[JobFilter]):
    conditions = []
    if flt is None:
        return None
    if flt.search:
        # literal substring match; % and _ in user input are escaped
        conditions.append(or_(
            Job.title.icontains(flt.search, autoescape=True),
            Job.company.icontains(flt.search, autoescape=True),
            Job.description.icontains(flt.search, autoescape=True),
        ))
    if flt.location:
        conditions.append(Job.location.icontains(flt.location, autoescape=True))
    if flt.remote:
        conditions.append(Job.remote.is_(True))
    if flt.category:
        conditions.append(Job.category == flt.category)
    return and_(*conditions) if conditions else None


class JobStore:
    def __init__(self, session_factory):
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._session_factory() as s:
                yield s
        except (OperationalError, InterfaceError) as e:
            logger.error("Database unavailable: %s", e.orig if hasattr(e, "orig") else e)
            raise PersistenceUnavailable("Job store is unavailable") from e

    # ------------------------ Reads ------------------------

    def list_jobs(self, flt: Optional[JobFilter] = None, page: int = 1, limit: int = DEFAULT_LIMIT) -> JobPage:
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be >= 1")

        where = _filter_clause(flt)
        count_stmt = select(func.count()).select_from(Job)
        stmt = select(Job).order_by(desc(Job.posted_at), desc(Job.id))
        if where is not None:
            count_stmt = count_stmt.where(where)
            stmt = stmt.where(where)
        stmt = stmt.offset((page - 1) * limit).limit(limit)

        with self._session() as s:
            total = int(s.scalar(count_stmt) or 0)
            rows = list(s.scalars(stmt).all())

        total_pages = math.ceil(total / limit)
        return JobPage(items=rows, total=total, page=page, total_pages=total_pages, has_more=page < total_pages)

    def get_job(self, job_id: int) -> Job:
        with self._session() as s:
            job = s.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found", {"id": job_id})
        return job

    def get_job_by_external_id(self, external_id: str) -> Optional[Job]:
        with self._session() as s:
            return s.scalars(select(Job).where(Job.external_id == external_id)).first()

    def stats(self) -> JobStats:
        with self._session() as s:
            total = s.scalar(select(func.count()).select_from(Job)) or 0
            locations = s.scalar(select(func.count(func.distinct(Job.location)))) or 0
            sources = s.scalar(select(func.count(func.distinct(Job.source)))) or 0
            latest = s.scalar(select(func.max(Job.created_at)))
        return JobStats(
            total_jobs=int(total),
            countries_count=min(int(locations), MAX_COUNTRIES),
            sources_count=int(sources),
            last_updated=latest or utcnow(),
        )

    def unique_countries(self) -> List[str]:
        with self._session() as s:
            locations = s.scalars(select(Job.location).distinct()).all()
        return extract_countries(locations)

    # ------------------------ Writes ------------------------

    def _insert_stmt(self, s: Session, rows: List[Dict[str, Any]]):
        dialect = s.get_bind().dialect.name
        insert = _DIALECT_INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Unsupported database dialect '{dialect}'")
        return (
            insert(Job)
            .values(rows)
            .on_conflict_do_nothing(index_elements=[Job.external_id])
            .returning(Job)
        )

    def insert_batch(self, postings: Iterable[NewJob]) -> List[Job]:
        """Insert postings whose external id is not stored yet; return only the new rows."""
        rows: List[Dict[str, Any]] = []
        seen = set()
        for p in postings:
            if p.external_id in seen:
                continue
            seen.add(p.external_id)
            row = p.to_row()
            row["created_at"] = utcnow()
            rows.append(row)
        if not rows:
            return []

        inserted: List[Job] = []
        with self._session() as s:
            for start in range(0, len(rows), BATCH_CHUNK):
                chunk = rows[start:start + BATCH_CHUNK]
                inserted.extend(s.scalars(self._insert_stmt(s, chunk)).all())
            s.commit()

        logger.info("Inserted %d of %d postings (%d already stored)", len(inserted), len(rows), len(rows) - len(inserted))
        return inserted

    def create_job(self, posting: NewJob) -> Optional[Job]:
        """Single-row insert-if-absent; None when the external id is already stored."""
        inserted = self.insert_batch([posting])
        return inserted[0] if inserted else None

    def count(self) -> int:
        with self._session() as s:
            return int(s.scalar(select(func.count()).select_from(Job)) or 0)
