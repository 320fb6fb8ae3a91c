"""Database layer package for job, refresh, generation and state persistence."""

from .connection_state import SQLAlchemyConnectionStateService
from .interfaces import (
	JOB_TERMINAL_STATUSES,
	JobPersistenceError,
	JobQueuePort,
	StatePersistencePort,
	StreamGenerationRepositoryPort,
	StreamRefreshRepositoryPort,
)
from .job_queue import SQLAlchemyJobQueueService
from .session import db_create_engine
from .stream_generation import SQLAlchemyStreamGenerationService
from .stream_refresh import SQLAlchemyStreamRefreshService

__all__ = [
	"JOB_TERMINAL_STATUSES",
	"JobPersistenceError",
	"JobQueuePort",
	"StatePersistencePort",
	"StreamGenerationRepositoryPort",
	"StreamRefreshRepositoryPort",
	"SQLAlchemyConnectionStateService",
	"SQLAlchemyJobQueueService",
	"SQLAlchemyStreamGenerationService",
	"SQLAlchemyStreamRefreshService",
	"db_create_engine",
]
