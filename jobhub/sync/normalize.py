"""
Normalization shared by every source connector.

Each connector maps its own payload onto ``NewJob`` through ``build_posting``,
which owns the cleanup rules: stripped/truncated text, HTML-free
descriptions, UTC posting dates, de-duplicated tags, inferred category and a
source-prefixed external id.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from dateutil import parser as dateparser

from jobhub.models.job import DEFAULT_CATEGORY, utcnow
from jobhub.storage import NewJob

logger = logging.getLogger(__name__)

MAX_TAGS = 12

UN_MARKERS = (
    "united nations", "undp", "unicef", "unhcr", "unops", "unesco", "unfpa", "unep",
    "un women", "wfp", "world food programme", "world health organization",
    "fao", "ocha", "un-habitat", "unido", "unwto",
)
# acronyms that are also English words only count in capitals
UN_ACRONYMS = ("UN", "WHO", "IOM", "ILO")
NGO_MARKERS = (
    "ngo", "non-profit", "nonprofit", "not-for-profit", "charity", "humanitarian",
    "foundation", "red cross", "red crescent", "oxfam", "save the children",
    "médecins sans frontières", "msf", "care international", "mercy corps",
)
_UN_RE = re.compile(r"\b(" + "|".join(re.escape(m) for m in UN_MARKERS) + r")\b", re.I)
_UN_ACRONYM_RE = re.compile(r"\b(" + "|".join(UN_ACRONYMS) + r")\b")
_NGO_RE = re.compile(r"\b(" + "|".join(re.escape(m) for m in NGO_MARKERS) + r")\b", re.I)

# Path segments that show a url points at an application/posting page.
_POSTING_PATH_RE = re.compile(
    r"/(jobs?|careers?|vacanc(y|ies)|positions?|openings?|apply|postings?|requisitions?|opportunit(y|ies)|recruit\w*)(/|$|\?|-)",
    re.I,
)
# Bare landing pages: "/", "/en", "/home", "/index.html", "/about" ...
_HOMEPAGE_PATH_RE = re.compile(r"^/?((en|de|fr|es)/?)?(home|index(\.\w+)?|about(-us)?|contact)?/?$", re.I)
_EPOCH_MS = 1e12
# shorter digit strings are compact dates such as 20240115
_EPOCH_MIN_DIGITS = 9


def clean_text(value: Any, max_len: Optional[int] = None) -> str:
    if value is None:
        return ""
    text = re.sub(r"\s+", " ", str(value)).strip()
    return text[:max_len] if max_len else text


def html_to_text(value: Any) -> str:
    """Strip markup from an HTML description, keeping paragraph breaks."""
    if not value:
        return ""
    soup = BeautifulSoup(str(value), "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    text = soup.get_text("\n")
    lines = [re.sub(r"[ \t\xa0]+", " ", ln).strip() for ln in text.splitlines()]
    return "\n".join(ln for ln in lines if ln)


def parse_posted_at(value: Any) -> Optional[datetime]:
    """Epoch seconds/ms, ISO strings or free-form dates -> naive UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) or (
        isinstance(value, str) and value.strip().isdigit() and len(value.strip()) >= _EPOCH_MIN_DIGITS
    ):
        ts = float(value)
        if ts > _EPOCH_MS:
            ts /= 1000.0
        try:
            dt = datetime.fromtimestamp(ts, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        try:
            dt = dateparser.parse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def normalize_tags(values: Optional[Iterable[Any]], limit: int = MAX_TAGS) -> List[str]:
    seen = set()
    out: List[str] = []
    for v in values or []:
        tag = clean_text(v, 60)
        if not tag or tag.lower() in seen:
            continue
        seen.add(tag.lower())
        out.append(tag)
    return out[:limit]


def classify_category(*texts: str) -> str:
    """Keyword guess at un/ngo/international from company and title."""
    blob = " ".join(t or "" for t in texts)
    if _UN_RE.search(blob) or _UN_ACRONYM_RE.search(blob):
        return "un"
    if _NGO_RE.search(blob):
        return "ngo"
    return DEFAULT_CATEGORY


def is_application_url(url: str) -> bool:
    """
    Best-effort check that ``url`` points at a posting rather than a company homepage.

    Approximate by nature: it rejects bare domains and obvious landing pages,
    accepts anything with a job-like path segment or a query string, and
    otherwise accepts paths at least two segments deep.
    """
    if not url:
        return False
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    path = parsed.path or "/"
    if _POSTING_PATH_RE.search(path) or parsed.query:
        return True
    if _HOMEPAGE_PATH_RE.match(path):
        return False
    segments = [seg for seg in path.split("/") if seg]
    return len(segments) >= 2 or (len(segments) == 1 and "-" in segments[0])


def make_external_id(source: str, raw_id: Any) -> str:
    return f"{source}-{clean_text(raw_id)}"


def build_posting(
    source: str,
    raw_id: Any,
    title: Any,
    company: Any,
    url: Any,
    posted_at: Any = None,
    location: Any = "",
    description: Any = "",
    remote: bool = False,
    tags: Optional[Iterable[Any]] = None,
    salary: Any = None,
    html: bool = True,
) -> Optional[NewJob]:
    """Map one source record onto ``NewJob``; None when the record is unusable."""
    title = clean_text(title, 255)
    company = clean_text(company, 255)
    url = clean_text(url)
    raw_id = clean_text(raw_id)
    if not (raw_id and title and company and url):
        return None
    if not is_application_url(url):
        logger.debug("Skipping %s/%s: %s does not look like an application link", source, raw_id, url)
        return None

    body = html_to_text(description) if html else clean_text(description)
    location = clean_text(location, 255)
    salary = clean_text(salary, 255) or None
    return NewJob(
        external_id=make_external_id(source, raw_id),
        title=title,
        company=company,
        url=url,
        source=source,
        posted_at=parse_posted_at(posted_at) or utcnow(),
        location=location,
        description=body,
        remote=bool(remote),
        tags=normalize_tags(tags),
        salary=salary,
        category=classify_category(company, title),
    )
