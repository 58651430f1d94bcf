"""Jooble REST API (https://jooble.org/api/<key>); needs an API key."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import requests

from jobhub.storage import NewJob
from jobhub.sync.normalize import build_posting
from jobhub.sync.sources.base import JobSource

logger = logging.getLogger(__name__)


class JoobleSource(JobSource):
    name = "jooble"
    base_url = "https://jooble.org/api"

    def __init__(self, api_key: str, keywords: Sequence[str] = (), timeout: float = 30.0, location: Optional[str] = None):
        super().__init__(timeout)
        self.api_key = api_key
        self.keywords = list(keywords) or [""]
        self.location = location

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def fetch(self, session: requests.Session) -> List[NewJob]:
        if not self.enabled:
            return []
        url = f"{self.base_url}/{self.api_key}"
        out: List[NewJob] = []
        for keyword in self.keywords:
            body = {"keywords": keyword, "page": 1}
            if self.location:
                body["location"] = self.location
            resp = session.post(url, json=body, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json() or {}
            if not isinstance(payload, dict):
                raise ValueError(f"jooble: expected an object, got {type(payload).__name__}")
            for j in payload.get("jobs") or []:
                if not isinstance(j, dict):
                    continue
                location = j.get("location") or ""
                posting = build_posting(
                    self.name,
                    raw_id=j.get("id"),
                    title=j.get("title"),
                    company=j.get("company"),
                    url=j.get("link"),
                    posted_at=j.get("updated"),
                    location=location,
                    description=j.get("snippet"),
                    remote="remote" in location.lower() or "remote" in (j.get("type") or "").lower(),
                    tags=[j.get("type")] if j.get("type") else [],
                    salary=j.get("salary"),
                )
                if posting:
                    out.append(posting)
        logger.info("jooble fetched %d postings for %d keyword(s)", len(out), len(self.keywords))
        return out
