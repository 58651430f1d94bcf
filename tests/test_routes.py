import pytest

from fakes import StaticSource


@pytest.fixture
def sources(make_job):
    return [StaticSource("arbeitnow", [make_job("arbeitnow-s1", 1), make_job("arbeitnow-s2", 2)])]


@pytest.fixture
def seeded(app_store, make_job):
    app_store.insert_batch([
        make_job("a", 1, title="Backend Engineer", company="Acme", category="international"),
        make_job("b", 2, title="Programme Officer", company="UNDP", category="un", location="Geneva", remote=True),
        make_job("c", 3, title="Field Coordinator", company="Oxfam", category="ngo", location="Nairobi, Kenya"),
    ])
    return app_store


def test_health(client, seeded):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True, "db_rows": 3}


def test_list_jobs_shape_and_order(client, seeded):
    body = client.get("/api/jobs").get_json()

    assert set(body) == {"jobs", "total", "page", "totalPages", "hasMore"}
    assert [j["externalId"] for j in body["jobs"]] == ["c", "b", "a"]
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["totalPages"] == 1
    assert body["hasMore"] is False

    job = body["jobs"][0]
    assert job["company"] == "Oxfam"
    assert job["category"] == "ngo"
    assert job["postedAt"] == "2024-01-04T12:00:00+00:00"
    assert job["createdAt"].endswith("+00:00")


def test_list_jobs_filters(client, seeded):
    assert [j["externalId"] for j in client.get("/api/jobs?search=ACME").get_json()["jobs"]] == ["a"]
    assert [j["externalId"] for j in client.get("/api/jobs?remote=true").get_json()["jobs"]] == ["b"]
    assert [j["externalId"] for j in client.get("/api/jobs?category=ngo").get_json()["jobs"]] == ["c"]
    assert [j["externalId"] for j in client.get("/api/jobs?location=kenya").get_json()["jobs"]] == ["c"]
    assert client.get("/api/jobs?remote=false").get_json()["total"] == 3


def test_list_jobs_pagination(client, seeded):
    first = client.get("/api/jobs?page=1&limit=2").get_json()
    beyond = client.get("/api/jobs?page=5&limit=2").get_json()

    assert len(first["jobs"]) == 2
    assert first["totalPages"] == 2
    assert first["hasMore"] is True
    assert beyond["jobs"] == []
    assert beyond["hasMore"] is False
    assert beyond["total"] == 3


def test_list_jobs_limit_is_clamped(client, app, seeded):
    app.config["MAX_PAGE_SIZE"] = 2
    body = client.get("/api/jobs?limit=50").get_json()
    assert len(body["jobs"]) == 2
    assert body["totalPages"] == 2


@pytest.mark.parametrize("query", ["category=development", "page=0", "page=x", "limit=-1"])
def test_list_jobs_validation_errors(client, query):
    resp = client.get(f"/api/jobs?{query}")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


def test_get_job(client, seeded):
    job_id = seeded.get_job_by_external_id("b").id
    body = client.get(f"/api/jobs/{job_id}").get_json()
    assert body["id"] == job_id
    assert body["company"] == "UNDP"
    assert body["remote"] is True


def test_get_missing_job_is_not_found(client):
    resp = client.get("/api/jobs/999")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"


def test_stats(client, seeded):
    body = client.get("/api/jobs/stats").get_json()
    assert body["totalJobs"] == 3
    assert body["countriesCount"] == 3
    assert body["sourcesCount"] == 1
    assert body["lastUpdated"].endswith("+00:00")


def test_stats_on_empty_store(client):
    body = client.get("/api/jobs/stats").get_json()
    assert body["totalJobs"] == 0
    assert body["lastUpdated"]


def test_countries(client, seeded):
    assert client.get("/api/jobs/countries").get_json() == {"countries": ["Germany", "Kenya"]}


def test_create_direct_job(client, app_store):
    resp = client.post("/api/jobs", json={
        "title": "Grant Writer",
        "company": "Helping Hands",
        "description": "Write grants.",
        "url": "https://helpinghands.org/careers/grant-writer",
        "tags": "writing, grants",
        "category": "ngo",
        "postedAt": "2024-03-01T09:30:00Z",
    })

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["source"] == "direct"
    assert body["externalId"].startswith("direct-")
    assert body["tags"] == ["writing", "grants"]
    assert body["category"] == "ngo"
    assert body["postedAt"] == "2024-03-01T09:30:00+00:00"
    assert app_store.get_job(body["id"]).title == "Grant Writer"


@pytest.mark.parametrize("payload, fragment", [
    ({"company": "A", "description": "d", "url": "https://a.org/jobs/1"}, "Missing"),
    ({"title": "T", "company": "A", "description": "d", "url": "https://a.org/"}, "homepage"),
    ({"title": "T", "company": "A", "description": "d", "url": "https://a.org/jobs/1", "category": "x"}, "category"),
    ({"title": "T", "company": "A", "description": "d", "url": "https://a.org/jobs/1", "postedAt": "soon"}, "postedAt"),
])
def test_create_direct_job_validation(client, payload, fragment):
    resp = client.post("/api/jobs", json=payload)
    assert resp.status_code == 400
    assert fragment in resp.get_json()["message"]


def test_create_requires_json_object(client):
    resp = client.post("/api/jobs", data="nope", content_type="text/plain")
    assert resp.status_code == 400


def test_sync_endpoint_reports_new_rows(client, app_store):
    first = client.post("/api/jobs/sync").get_json()
    second = client.post("/api/jobs/sync").get_json()

    assert first == {"message": "Sync complete", "count": 2}
    assert second == {"message": "Sync complete", "count": 0}
    assert app_store.count() == 2


def test_swagger_spec_lists_routes(client):
    spec = client.get("/apispec_1.json").get_json()
    assert "/api/jobs" in spec["paths"]
    assert "/api/jobs/stats" in spec["paths"]


@pytest.mark.parametrize("value, expected", [(True, True), (False, False), ("false", False), ("TRUE", True), (None, False)])
def test_create_direct_job_remote_flag(client, value, expected):
    resp = client.post("/api/jobs", json={
        "title": "T", "company": "A", "description": "d", "url": "https://a.org/jobs/1", "remote": value,
    })
    assert resp.status_code == 201
    assert resp.get_json()["remote"] is expected


@pytest.mark.parametrize("value", ["yes", 1, [True]])
def test_create_direct_job_rejects_non_boolean_remote(client, app_store, value):
    resp = client.post("/api/jobs", json={
        "title": "T", "company": "A", "description": "d", "url": "https://a.org/jobs/1", "remote": value,
    })
    assert resp.status_code == 400
    assert "remote" in resp.get_json()["message"]
    assert app_store.count() == 0
