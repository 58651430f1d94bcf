from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

import requests

from jobhub.storage import JobStore, NewJob
from jobhub.sync.sources import ArbeitnowSource, JobSource, JoobleSource, RemoteOkSource, make_session

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    fetched: int = 0
    inserted: int = 0
    per_source: Dict[str, int] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    postings: List[NewJob] = field(default_factory=list)


def build_sources(config: Mapping) -> List[JobSource]:
    timeout = float(config.get("HTTP_TIMEOUT", 30))
    return [
        ArbeitnowSource(timeout=timeout),
        RemoteOkSource(timeout=timeout),
        JoobleSource(
            api_key=config.get("JOOBLE_API_KEY", ""),
            keywords=config.get("JOOBLE_KEYWORDS", ()),
            timeout=timeout,
        ),
    ]


class SyncJob:
    """Pull every source, normalize, and insert the postings that are not stored yet."""

    def __init__(self, store: Optional[JobStore], sources: Sequence[JobSource], session: Optional[requests.Session] = None):
        self.store = store
        self.sources = list(sources)
        self.session = session

    def collect(self, report: SyncReport) -> List[NewJob]:
        if self.session is not None:
            return self._collect(self.session, report)
        with make_session() as session:
            return self._collect(session, report)

    def _collect(self, session: requests.Session, report: SyncReport) -> List[NewJob]:
        postings: List[NewJob] = []
        seen = set()
        for source in self.sources:
            if not source.enabled:
                logger.info("Skipping %s (not configured)", source.name)
                continue
            try:
                fetched = source.fetch(session)
            except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError) as e:
                # one broken source must not stop the others
                logger.warning("Source %s failed: %s", source.name, e)
                report.errors[source.name] = str(e)
                continue
            fresh = [p for p in fetched if p.external_id not in seen]
            seen.update(p.external_id for p in fresh)
            report.per_source[source.name] = len(fresh)
            postings.extend(fresh)
        report.fetched = len(postings)
        return postings

    def run(self, persist: bool = True) -> SyncReport:
        report = SyncReport()
        postings = self.collect(report)
        report.postings = postings
        if persist and self.store is not None and postings:
            report.inserted = len(self.store.insert_batch(postings))
        logger.info(
            "Sync finished: fetched=%d inserted=%d errors=%s",
            report.fetched, report.inserted, sorted(report.errors) or "none",
        )
        return report
