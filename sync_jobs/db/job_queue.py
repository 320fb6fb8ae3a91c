"""Database service for the conditional job work queue."""

from __future__ import annotations

import hashlib

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from sync_jobs.domain import JobConfig, domain_job_config_to_json

from .interfaces import JOB_TERMINAL_STATUSES, JobPersistenceError, JobQueuePort

_TERMINAL_STATUS_LIST = ", ".join(f"'{status}'" for status in JOB_TERMINAL_STATUSES)


class SQLAlchemyJobQueueService(JobQueuePort):
    """SQLAlchemy-backed job queue.

    Enqueue is conditional: a job is only inserted when its scope has no
    non-terminal job (`failed`, `succeeded` and `cancelled` are terminal). A
    transaction-scoped advisory lock serializes concurrent enqueues for one
    scope; a caller that cannot take the lock loses the race and gets no job.
    """

    def __init__(self, engine: Engine):
        """Initialize job queue persistence service.

        Args:
            engine: SQLAlchemy engine used for all persistence operations.

        Returns:
            None: This initializer does not return a value.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_job_enqueue(self, scope: str, config: JobConfig) -> int | None:
        """Insert a pending job unless the scope already has a non-terminal job.

        Args:
            scope: Queue scope, the connection id as text.
            config: Job configuration payload.

        Returns:
            int | None: New job id, or None when another non-terminal job owns the scope.

        Raises:
            ValueError: Raised when scope is blank.
            JobPersistenceError: Raised when persistence fails.
        """

        normalized_scope = scope.strip()
        if not normalized_scope:
            raise ValueError("scope must not be blank")
        advisory_key_1, advisory_key_2 = self._build_advisory_lock_keys(normalized_scope)

        try:
            with self._engine.begin() as connection:
                lock_row = connection.execute(
                    text(
                        "SELECT pg_try_advisory_xact_lock(CAST(:key_1 AS integer), CAST(:key_2 AS integer)) "
                        "AS lock_acquired"
                    ),
                    {"key_1": advisory_key_1, "key_2": advisory_key_2},
                ).mappings().one()
                if not bool(lock_row["lock_acquired"]):
                    return None

                created_row = connection.execute(
                    text(
                        "INSERT INTO jobs (config_type, scope, status, config, created_at, updated_at) "
                        "SELECT :config_type, :scope, 'pending', CAST(:config AS jsonb), now(), now() "
                        "WHERE NOT EXISTS ("
                        "SELECT 1 FROM jobs "
                        f"WHERE scope = :scope AND status NOT IN ({_TERMINAL_STATUS_LIST})"
                        ") "
                        "RETURNING id"
                    ),
                    {
                        "config_type": config.config_type,
                        "scope": normalized_scope,
                        "config": domain_job_config_to_json(config),
                    },
                ).mappings().first()
                if created_row is None:
                    return None
                return int(created_row["id"])
        except SQLAlchemyError as error:
            raise JobPersistenceError("failed to enqueue job") from error

    def db_job_update_config(self, job_id: int, config: JobConfig) -> None:
        """Replace the configuration of an enqueued job.

        Args:
            job_id: Job identifier.
            config: Replacement configuration payload.

        Returns:
            None: Job row is updated as side effect.

        Raises:
            LookupError: Raised when the job does not exist.
            JobPersistenceError: Raised when persistence fails.
        """

        try:
            with self._engine.begin() as connection:
                updated_row = connection.execute(
                    text(
                        "UPDATE jobs SET "
                        "config = CAST(:config AS jsonb), "
                        "updated_at = now() "
                        "WHERE id = :job_id "
                        "RETURNING id"
                    ),
                    {"config": domain_job_config_to_json(config), "job_id": job_id},
                ).mappings().first()
                if updated_row is None:
                    raise LookupError(f"job not found: {job_id}")
        except SQLAlchemyError as error:
            raise JobPersistenceError("failed to update job config") from error

    def _build_advisory_lock_keys(self, scope: str) -> tuple[int, int]:
        """Create deterministic advisory lock keys for a scope-level enqueue lock.

        Args:
            scope: Queue scope.

        Returns:
            tuple[int, int]: Two signed int32 lock keys for PostgreSQL advisory lock.
        """

        digest = hashlib.sha256(f"jobs:{scope}".encode("utf-8")).digest()
        key_1 = int.from_bytes(digest[0:4], byteorder="big", signed=True)
        key_2 = int.from_bytes(digest[4:8], byteorder="big", signed=True)
        return key_1, key_2
