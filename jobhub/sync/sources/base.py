"""Base class and HTTP session shared by source connectors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from jobhub.storage import NewJob

USER_AGENT = "jobhub-sync/1.0 (+https://github.com/jobhub)"


def make_session(retries: int = 3, backoff: float = 1.0) -> requests.Session:
    sess = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=backoff,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET", "POST"],
    )
    sess.mount("http://", HTTPAdapter(max_retries=retry))
    sess.mount("https://", HTTPAdapter(max_retries=retry))
    sess.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
    return sess


class JobSource(ABC):
    """A job-board API that yields normalized postings."""

    name: str

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return True

    @abstractmethod
    def fetch(self, session: requests.Session) -> List[NewJob]:
        raise NotImplementedError
