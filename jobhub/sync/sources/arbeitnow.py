"""Arbeitnow job board API (https://www.arbeitnow.com/api/job-board-api)."""

from __future__ import annotations

import logging
from typing import List

import requests

from jobhub.storage import NewJob
from jobhub.sync.normalize import build_posting
from jobhub.sync.sources.base import JobSource

logger = logging.getLogger(__name__)


class ArbeitnowSource(JobSource):
    name = "arbeitnow"
    base_url = "https://www.arbeitnow.com/api/job-board-api"

    def __init__(self, timeout: float = 30.0, max_pages: int = 3):
        super().__init__(timeout)
        self.max_pages = max_pages

    def fetch(self, session: requests.Session) -> List[NewJob]:
        out: List[NewJob] = []
        url = self.base_url
        pages = 0
        while url and pages < self.max_pages:
            resp = session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json() or {}
            if not isinstance(payload, dict):
                raise ValueError(f"arbeitnow: expected an object, got {type(payload).__name__}")
            pages += 1

            for j in payload.get("data") or []:
                if not isinstance(j, dict):
                    continue
                posting = build_posting(
                    self.name,
                    raw_id=j.get("slug"),
                    title=j.get("title"),
                    company=j.get("company_name"),
                    url=j.get("url"),
                    posted_at=j.get("created_at"),
                    location=j.get("location"),
                    description=j.get("description"),
                    remote=bool(j.get("remote", False)),
                    tags=(j.get("tags") or []) + (j.get("job_types") or []),
                )
                if posting:
                    out.append(posting)

            url = (payload.get("links") or {}).get("next")

        logger.info("arbeitnow fetched %d postings from %d page(s)", len(out), pages)
        return out
