from jobhub.sync.runner import SyncJob, SyncReport, build_sources

__all__ = ["SyncJob", "SyncReport", "build_sources"]
