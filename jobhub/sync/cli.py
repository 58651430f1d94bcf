#!/usr/bin/env python3
"""
Job sync CLI (Arbeitnow / RemoteOK / Jooble -> jobs table)

What it does
------------
- Pulls postings from every configured job-board API
- Normalizes them into the common jobs schema
- Inserts the ones whose external id is not stored yet (ON CONFLICT DO NOTHING)
- Optionally saves the fetched postings to JSON and CSV

Run examples
------------
# One sync into the default DB_URL, also writing JSON/CSV
jobhub-sync run --outdir sync-output

# Fetch only, no database
jobhub-sync run --no-db --outdir sync-output

# Sync every 30 minutes until interrupted
jobhub-sync schedule --interval 30
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from typing import List, Optional

import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from jobhub import config
from jobhub.db import init_db, make_engine, make_session_factory
from jobhub.errors import PersistenceUnavailable
from jobhub.storage import JobStore, NewJob
from jobhub.sync.runner import SyncJob, build_sources
from jobhub.sync.scheduler import run_blocking_sync

logger = logging.getLogger("jobhub.sync")


def export_postings(postings: List[NewJob], outdir: str) -> None:
    os.makedirs(outdir, exist_ok=True)
    records = [asdict(p) for p in postings]
    for r in records:
        r["posted_at"] = r["posted_at"].isoformat()

    json_path = os.path.join(outdir, "jobs.json")
    csv_path = os.path.join(outdir, "jobs.csv")
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(records, f, ensure_ascii=False, indent=2)

    df = pd.DataFrame(records)
    if "tags" in df.columns:
        df["tags"] = df["tags"].apply(lambda x: ",".join(x) if isinstance(x, list) else (x or ""))
    df.to_csv(csv_path, index=False, encoding="utf-8")
    logger.info("Saved %d postings to %s and %s", len(records), json_path, csv_path)


def _store(db_url: str) -> JobStore:
    engine = make_engine(db_url)
    init_db(engine)
    return JobStore(make_session_factory(engine))


def run(db_url: Optional[str], outdir: Optional[str]) -> int:
    store = _store(db_url) if db_url else None
    report = SyncJob(store, build_sources(config.as_dict())).run(persist=store is not None)
    if outdir:
        export_postings(report.postings, outdir)
    for name, err in report.errors.items():
        logger.warning("%s: %s", name, err)
    logger.info("Fetched %d postings, inserted %d new", report.fetched, report.inserted)
    return report.inserted


def cli(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(prog="jobhub-sync", description="Sync job-board APIs into the jobs table")
    ap.add_argument("--db-url", type=str, default=config.DB_URL, help="SQLAlchemy DB URL")
    ap.add_argument("--log-level", type=str, default=config.LOG_LEVEL)
    sub = ap.add_subparsers(dest="command", required=True)

    run_p = sub.add_parser("run", help="Run one sync and exit")
    run_p.add_argument("--outdir", type=str, default=None, help="Also write jobs.json / jobs.csv here")
    run_p.add_argument("--no-db", action="store_true", help="Skip the database (fetch/export only)")

    sched_p = sub.add_parser("schedule", help="Sync periodically until interrupted")
    sched_p.add_argument("--interval", type=int, default=config.SYNC_INTERVAL_MINUTES or 60, help="Minutes between runs")

    args = ap.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "run":
            run(db_url=None if args.no_db else args.db_url, outdir=args.outdir)
        else:
            job = SyncJob(_store(args.db_url), build_sources(config.as_dict()))
            run_blocking_sync(job, args.interval)
    except (PersistenceUnavailable, SQLAlchemyError) as e:
        logger.error("Database error: %s", e)
        sys.exit(2)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    cli()
