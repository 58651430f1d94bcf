"""RemoteOK public API (https://remoteok.com/api)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from jobhub.storage import NewJob
from jobhub.sync.normalize import build_posting
from jobhub.sync.sources.base import JobSource

logger = logging.getLogger(__name__)


def _salary(entry: Dict[str, Any]) -> Optional[str]:
    amounts = [v for v in (entry.get("salary_min"), entry.get("salary_max")) if isinstance(v, (int, float)) and v > 0]
    if not amounts:
        return None
    return " - ".join(f"${int(v):,}" for v in amounts)


class RemoteOkSource(JobSource):
    name = "remoteok"
    base_url = "https://remoteok.com/api"

    def fetch(self, session: requests.Session) -> List[NewJob]:
        resp = session.get(self.base_url, timeout=self.timeout)
        resp.raise_for_status()
        payload = resp.json() or []
        if not isinstance(payload, list):
            raise ValueError(f"remoteok: expected a list, got {type(payload).__name__}")

        out: List[NewJob] = []
        for entry in payload:
            # first element is the API's legal notice
            if not isinstance(entry, dict) or not entry.get("id"):
                continue
            posting = build_posting(
                self.name,
                raw_id=entry.get("id"),
                title=entry.get("position"),
                company=entry.get("company"),
                url=entry.get("apply_url") or entry.get("url"),
                posted_at=entry.get("epoch") or entry.get("date"),
                location=entry.get("location") or "Remote",
                description=entry.get("description"),
                remote=True,
                tags=entry.get("tags"),
                salary=_salary(entry),
            )
            if posting:
                out.append(posting)

        logger.info("remoteok fetched %d postings", len(out))
        return out
