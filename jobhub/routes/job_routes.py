from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from flask import Blueprint, current_app, jsonify, request

from jobhub.errors import ValidationError
from jobhub.filters import parse_job_filter, parse_pagination
from jobhub.models.job import CATEGORIES, DEFAULT_CATEGORY, Job, utcnow
from jobhub.storage import JobStore, NewJob
from jobhub.sync.normalize import is_application_url, normalize_tags, parse_posted_at

bp = Blueprint("jobs", __name__)

DIRECT_SOURCE = "direct"


def _store() -> JobStore:
    return current_app.extensions["jobhub.store"]


def _iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).isoformat()


def _to_dict(j: Job) -> Dict[str, Any]:
    return {
        "id": j.id,
        "externalId": j.external_id,
        "title": j.title,
        "company": j.company,
        "location": j.location or "",
        "description": j.description or "",
        "url": j.url,
        "remote": bool(j.remote),
        "tags": j.tags or [],
        "salary": j.salary,
        "source": j.source,
        "category": j.category or DEFAULT_CATEGORY,
        "postedAt": _iso(j.posted_at),
        "createdAt": _iso(j.created_at),
    }


def _normalize_tags(value: Any) -> List[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return []
    return normalize_tags(value)


def _parse_remote(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValidationError("remote must be a boolean", {"remote": value})


def _parse_direct_job(data: Dict[str, Any]) -> NewJob:
    missing = [f for f in ["title", "company", "description", "url"] if not str(data.get(f) or "").strip()]
    if missing:
        raise ValidationError("Missing required fields", {"missing": missing})

    url = str(data["url"]).strip()
    if not is_application_url(url):
        raise ValidationError("url must link to the job posting or application page, not a homepage", {"url": url})

    category = str(data.get("category") or DEFAULT_CATEGORY).strip().lower()
    if category not in CATEGORIES:
        raise ValidationError(f"Unsupported category '{category}'. Allowed: {', '.join(CATEGORIES)}")

    posted_at = utcnow()
    if data.get("postedAt"):
        posted_at = parse_posted_at(data["postedAt"])
        if posted_at is None:
            raise ValidationError("postedAt must be an ISO-8601 timestamp")

    salary = str(data.get("salary") or "").strip()[:255] or None
    return NewJob(
        external_id=f"{DIRECT_SOURCE}-{uuid.uuid4().hex}",
        title=str(data["title"]).strip()[:255],
        company=str(data["company"]).strip()[:255],
        location=str(data.get("location") or "").strip()[:255],
        description=str(data["description"]).strip(),
        url=url,
        remote=_parse_remote(data.get("remote")),
        tags=_normalize_tags(data.get("tags")),
        salary=salary,
        source=DIRECT_SOURCE,
        category=category,
        posted_at=posted_at,
    )


@bp.get("/health")
def health():
    """
    Health Check
    ---
    tags: [Meta]
    responses:
      200:
        description: API and DB health
        schema:
          type: object
          properties:
            ok: { type: boolean }
            db_rows: { type: integer }
    """
    return jsonify({"ok": True, "db_rows": _store().count()})


@bp.get("/api/jobs")
def list_jobs():
    """
    List Jobs
    ---
    tags: [Jobs]
    parameters:
      - name: search
        in: query
        type: string
        required: false
        description: Case-insensitive keyword in title, company or description
      - name: location
        in: query
        type: string
        description: Case-insensitive substring of the location
      - name: remote
        in: query
        type: string
        enum: ["true"]
        description: Only remote jobs when "true"; anything else means no constraint
      - name: category
        in: query
        type: string
        enum: [un, ngo, international]
      - name: page
        in: query
        type: integer
        default: 1
      - name: limit
        in: query
        type: integer
        default: 30
    responses:
      200:
        description: Paginated jobs, newest posting first
        schema:
          type: object
          properties:
            jobs:
              type: array
              items:
                $ref: '#/definitions/Job'
            total: { type: integer }
            page: { type: integer }
            totalPages: { type: integer }
            hasMore: { type: boolean }
      400:
        description: Validation error
    definitions:
      Job:
        type: object
        properties:
          id: { type: integer }
          externalId: { type: string }
          title: { type: string }
          company: { type: string }
          location: { type: string }
          description: { type: string }
          url: { type: string }
          remote: { type: boolean }
          tags:
            type: array
            items: { type: string }
          salary: { type: string }
          source: { type: string }
          category: { type: string, enum: [un, ngo, international] }
          postedAt: { type: string, format: date-time }
          createdAt: { type: string, format: date-time }
    """
    flt = parse_job_filter(request.args)
    page, limit = parse_pagination(
        request.args,
        default_limit=current_app.config["JOBS_PAGE_SIZE"],
        max_limit=current_app.config["MAX_PAGE_SIZE"],
    )
    result = _store().list_jobs(flt, page=page, limit=limit)
    return jsonify({
        "jobs": [_to_dict(j) for j in result.items],
        "total": result.total,
        "page": result.page,
        "totalPages": result.total_pages,
        "hasMore": result.has_more,
    })


@bp.get("/api/jobs/stats")
def job_stats():
    """
    Job Stats
    ---
    tags: [Jobs]
    responses:
      200:
        description: Summary counts for the dashboard
        schema:
          type: object
          properties:
            totalJobs: { type: integer }
            countriesCount: { type: integer }
            sourcesCount: { type: integer }
            lastUpdated: { type: string, format: date-time }
    """
    stats = _store().stats()
    return jsonify({
        "totalJobs": stats.total_jobs,
        "countriesCount": stats.countries_count,
        "sourcesCount": stats.sources_count,
        "lastUpdated": _iso(stats.last_updated),
    })


@bp.get("/api/jobs/countries")
def job_countries():
    """
    Countries with listings
    ---
    tags: [Jobs]
    responses:
      200:
        description: Country names extracted from listing locations, special locations last
        schema:
          type: object
          properties:
            countries:
              type: array
              items: { type: string }
    """
    return jsonify({"countries": _store().unique_countries()})


@bp.get("/api/jobs/<int:job_id>")
def get_job(job_id: int):
    """
    Get Job by ID
    ---
    tags: [Jobs]
    parameters:
      - name: job_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: Job
        schema:
          $ref: '#/definitions/Job'
      404:
        description: Not Found
    """
    return jsonify(_to_dict(_store().get_job(job_id)))


@bp.post("/api/jobs")
def create_job():
    """
    Submit a direct Job
    ---
    tags: [Jobs]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, company, description, url]
          properties:
            title: { type: string }
            company: { type: string }
            location: { type: string }
            description: { type: string }
            url: { type: string, description: Application link (not a homepage) }
            remote: { type: boolean, default: false }
            tags:
              type: array
              items: { type: string }
            salary: { type: string }
            category: { type: string, enum: [un, ngo, international], default: international }
            postedAt: { type: string, format: date-time }
    responses:
      201:
        description: Created
        schema:
          $ref: '#/definitions/Job'
      400:
        description: Validation error
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    job = _store().create_job(_parse_direct_job(data))
    # external ids of direct posts are fresh uuids, so a conflict means a uuid clash
    if job is None:
        return jsonify({"error": "conflict", "message": "externalId already exists"}), 409
    return jsonify(_to_dict(job)), 201


@bp.post("/api/jobs/sync")
def sync_jobs():
    """
    Sync jobs from the external job boards
    ---
    tags: [Jobs]
    responses:
      200:
        description: Number of newly inserted listings
        schema:
          type: object
          properties:
            message: { type: string }
            count: { type: integer }
    """
    report = current_app.extensions["jobhub.sync"].run()
    return jsonify({"message": "Sync complete", "count": report.inserted})
