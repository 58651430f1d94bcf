from typing import List, Optional

import requests

from jobhub.storage import NewJob
from jobhub.sync.sources.base import JobSource


class StaticSource(JobSource):
    """Source that returns canned postings, or raises ``error``."""

    def __init__(self, name: str, postings: Optional[List[NewJob]] = None, error: Optional[Exception] = None, enabled: bool = True):
        super().__init__(timeout=1)
        self.name = name
        self.postings = postings or []
        self.error = error
        self._enabled = enabled
        self.calls = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    def fetch(self, session):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.postings)


class FakeResponse:
    def __init__(self, payload, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """Records requests and answers from a url -> payload map."""

    def __init__(self, responses):
        self.responses = responses
        self.requests = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.closed = True

    def _answer(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        payload = self.responses[url]
        if isinstance(payload, list) and payload and isinstance(payload[0], FakeResponse):
            return payload.pop(0)
        if isinstance(payload, FakeResponse):
            return payload
        return FakeResponse(payload)

    def get(self, url, **kwargs):
        return self._answer("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._answer("POST", url, **kwargs)
