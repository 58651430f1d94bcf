import logging
from typing import Any, Dict, Optional

from flasgger import Swagger
from flask import Flask
from flask_cors import CORS

from jobhub import __version__, config
from jobhub.db import init_db, make_engine, make_session_factory
from jobhub.errors import register_error_handlers
from jobhub.routes.job_routes import bp as job_bp
from jobhub.storage import JobStore
from jobhub.sync import SyncJob, build_sources
from jobhub.sync.scheduler import start_background_sync

logger = logging.getLogger(__name__)


def create_app(overrides: Optional[Dict[str, Any]] = None, start_scheduler: bool = False) -> Flask:
    app = Flask(__name__)
    app.config.update(config.as_dict())
    app.config.update(overrides or {})
    CORS(app)

    engine = make_engine(app.config["DB_URL"])
    init_db(engine)
    store = JobStore(make_session_factory(engine))
    sources = app.config.get("SYNC_SOURCES")
    if sources is None:
        sources = build_sources(app.config)
    sync_job = SyncJob(store, sources)
    app.extensions["jobhub.store"] = store
    app.extensions["jobhub.sync"] = sync_job

    register_error_handlers(app)
    app.register_blueprint(job_bp)

    # simple Swagger config (shows at /apidocs)
    Swagger(app, template={
        "info": {"title": "JobHub API", "version": __version__},
        "basePath": "/"
    })

    interval = int(app.config.get("SYNC_INTERVAL_MINUTES") or 0)
    if start_scheduler and interval > 0:
        app.extensions["jobhub.scheduler"] = start_background_sync(
            sync_job, interval, run_now=bool(app.config.get("SYNC_ON_STARTUP"))
        )

    return app


def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app(start_scheduler=True)
    app.run(host="0.0.0.0", port=config.PORT, use_reloader=False)


if __name__ == "__main__":
    main()
