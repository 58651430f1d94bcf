from jobhub.sync.sources.arbeitnow import ArbeitnowSource
from jobhub.sync.sources.base import JobSource, make_session
from jobhub.sync.sources.jooble import JoobleSource
from jobhub.sync.sources.remoteok import RemoteOkSource

__all__ = ["ArbeitnowSource", "JobSource", "JoobleSource", "RemoteOkSource", "make_session"]
