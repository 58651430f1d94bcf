import json

import pandas as pd

from fakes import StaticSource
from jobhub.db import make_engine, make_session_factory
from jobhub.storage import JobStore
from jobhub.sync import cli


def test_run_syncs_into_db_and_exports(monkeypatch, tmp_path, db_url, make_job):
    source = StaticSource("arbeitnow", [make_job("arbeitnow-1", tags=["a", "b"]), make_job("arbeitnow-2")])
    monkeypatch.setattr(cli, "build_sources", lambda config: [source])
    outdir = tmp_path / "out"

    cli.cli(["--db-url", db_url, "run", "--outdir", str(outdir)])

    store = JobStore(make_session_factory(make_engine(db_url)))
    assert store.count() == 2
    records = json.loads((outdir / "jobs.json").read_text(encoding="utf-8"))
    assert [r["external_id"] for r in records] == ["arbeitnow-1", "arbeitnow-2"]
    df = pd.read_csv(outdir / "jobs.csv")
    assert df.loc[0, "tags"] == "a,b"


def test_run_without_db(monkeypatch, tmp_path, make_job):
    monkeypatch.setattr(cli, "build_sources", lambda config: [StaticSource("a", [make_job("a-1")])])
    assert cli.run(db_url=None, outdir=str(tmp_path)) == 0
    assert (tmp_path / "jobs.csv").exists()
