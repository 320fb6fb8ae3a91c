"""Regression tests for SQL templates and error mapping of db-layer services."""

from __future__ import annotations

from uuid import uuid4

import orjson
import pytest
from sqlalchemy.exc import OperationalError

from sync_jobs.db import (
    JobPersistenceError,
    SQLAlchemyConnectionStateService,
    SQLAlchemyJobQueueService,
    SQLAlchemyStreamGenerationService,
    SQLAlchemyStreamRefreshService,
)
from sync_jobs.domain import (
    ConfiguredCatalog,
    GlobalState,
    JobResetConnectionConfig,
    NamespaceDefinition,
    ResourceRequirementSpec,
    StateType,
    StateWrapper,
    StreamDescriptor,
    StreamState,
    SyncResourceRequirements,
    SyncResourceRequirementsKey,
)


class _MappingResultStub:
    """Stub mapping result wrapper for SQLAlchemy-like query responses."""

    def __init__(self, rows: list[dict]):
        """Initialize mapping result rows.

        Args:
            rows: Row mappings returned by a query.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: This stub does not raise value errors.
        """

        self._rows = rows

    def mappings(self) -> _MappingResultStub:
        """Return self to emulate SQLAlchemy mappings chain.

        Returns:
            _MappingResultStub: This object.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        return self

    def all(self) -> list[dict]:
        """Return all row mappings.

        Returns:
            list[dict]: Query rows.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        return self._rows

    def first(self) -> dict | None:
        """Return the first row mapping, if any.

        Returns:
            dict | None: First query row.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        return self._rows[0] if self._rows else None

    def one(self) -> dict:
        """Return the single row mapping.

        Returns:
            dict: Query row.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        return self._rows[0]


class _ConnectionStub:
    """Connection stub capturing executed SQL and returning scripted rows."""

    def __init__(self, results: list[list[dict]] | None = None, error: Exception | None = None):
        """Initialize connection capture state.

        Args:
            results: Rows returned by successive execute() calls.
            error: Exception raised by every execute() call.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: This stub does not raise value errors.
        """

        self._results = list(results or [])
        self._error = error
        self.executed_queries: list[str] = []
        self.executed_parameters: list = []

    def __enter__(self) -> _ConnectionStub:
        """Enter context manager.

        Returns:
            _ConnectionStub: This object.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        return self

    def __exit__(self, exc_type, exc, traceback) -> bool:
        """Exit context manager.

        Args:
            exc_type: Exception type.
            exc: Exception value.
            traceback: Exception traceback.

        Returns:
            bool: False to propagate exceptions.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        _ = (exc_type, exc, traceback)
        return False

    def execute(self, statement, parameters=None):
        """Capture execute input and return the next scripted result.

        Args:
            statement: SQLAlchemy text clause or raw string.
            parameters: Bound query parameters.

        Returns:
            _MappingResultStub: Query result stub.

        Raises:
            Exception: Scripted error, when configured.
        """

        statement_text = getattr(statement, "text", str(statement))
        self.executed_queries.append(statement_text)
        self.executed_parameters.append(parameters)
        if self._error is not None:
            raise self._error
        rows = self._results.pop(0) if self._results else []
        return _MappingResultStub(rows=rows)


class _EngineStub:
    """Engine stub that returns a predefined connection object."""

    def __init__(self, connection: _ConnectionStub):
        """Initialize engine with a deterministic connection stub.

        Args:
            connection: Connection stub instance.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: This stub does not raise value errors.
        """

        self._connection = connection

    def connect(self) -> _ConnectionStub:
        """Return connection stub.

        Returns:
            _ConnectionStub: Deterministic connection object.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        return self._connection

    def begin(self) -> _ConnectionStub:
        """Return connection stub for begin-context compatibility.

        Returns:
            _ConnectionStub: Deterministic connection object.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        return self._connection


def _operational_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


def _build_reset_config() -> JobResetConnectionConfig:
    """Build a minimal reset job config.

    Returns:
        JobResetConnectionConfig: Deterministic config.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    spec = ResourceRequirementSpec(cpu_limit="1")
    return JobResetConnectionConfig(
        namespace_definition=NamespaceDefinition.SOURCE,
        namespace_format=None,
        prefix=None,
        destination_docker_image="dst:1",
        destination_protocol_version="0.2.0",
        operation_sequence=(),
        configured_catalog=ConfiguredCatalog(),
        resource_requirements=spec,
        sync_resource_requirements=SyncResourceRequirements(
            config_key=SyncResourceRequirementsKey(variant="default"),
            orchestrator=spec,
            destination=spec,
            destination_stdin=spec,
            destination_stdout=spec,
            destination_stderr=spec,
            heartbeat=spec,
        ),
        streams_to_reset=(StreamDescriptor(name="orders"),),
        is_destination_custom_connector=False,
        workspace_id=uuid4(),
        destination_definition_version_id=uuid4(),
    )


def test_db_job_queue_enqueue_inserts_only_without_active_job() -> None:
    """Take the scope lock and insert guarded by a non-terminal job check.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when SQL or parameters differ from expectations.
    """

    connection = _ConnectionStub(results=[[{"lock_acquired": True}], [{"id": 42}]])
    service = SQLAlchemyJobQueueService(engine=_EngineStub(connection))
    scope = str(uuid4())

    job_id = service.db_job_enqueue(scope, _build_reset_config())

    assert job_id == 42
    assert "pg_try_advisory_xact_lock" in connection.executed_queries[0]
    insert_query = connection.executed_queries[1]
    assert "WHERE NOT EXISTS" in insert_query
    assert "status NOT IN ('failed', 'succeeded', 'cancelled')" in insert_query
    insert_parameters = connection.executed_parameters[1]
    assert insert_parameters["scope"] == scope
    assert insert_parameters["config_type"] == "reset_connection"
    assert orjson.loads(insert_parameters["config"])["streams_to_reset"] == [{"name": "orders", "namespace": None}]


def test_db_job_queue_enqueue_returns_none_when_scope_busy() -> None:
    connection = _ConnectionStub(results=[[{"lock_acquired": True}], []])
    service = SQLAlchemyJobQueueService(engine=_EngineStub(connection))

    assert service.db_job_enqueue(str(uuid4()), _build_reset_config()) is None


def test_db_job_queue_enqueue_returns_none_when_lock_is_held() -> None:
    connection = _ConnectionStub(results=[[{"lock_acquired": False}]])
    service = SQLAlchemyJobQueueService(engine=_EngineStub(connection))

    assert service.db_job_enqueue(str(uuid4()), _build_reset_config()) is None
    assert len(connection.executed_queries) == 1


def test_db_job_queue_enqueue_rejects_blank_scope() -> None:
    service = SQLAlchemyJobQueueService(engine=_EngineStub(_ConnectionStub()))

    with pytest.raises(ValueError):
        service.db_job_enqueue("  ", _build_reset_config())


def test_db_job_queue_update_config_maps_missing_job_and_db_errors() -> None:
    """Raise LookupError for unknown jobs and wrap SQLAlchemy failures.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when errors are not mapped.
    """

    missing_service = SQLAlchemyJobQueueService(engine=_EngineStub(_ConnectionStub(results=[[]])))
    failing_service = SQLAlchemyJobQueueService(engine=_EngineStub(_ConnectionStub(error=_operational_error())))

    with pytest.raises(LookupError):
        missing_service.db_job_update_config(99, _build_reset_config())
    with pytest.raises(JobPersistenceError):
        failing_service.db_job_update_config(99, _build_reset_config())


def test_db_stream_refresh_list_and_delete() -> None:
    connection_id = uuid4()
    connection = _ConnectionStub(
        results=[[{"connection_id": connection_id, "stream_name": "orders", "stream_namespace": None}]]
    )
    service = SQLAlchemyStreamRefreshService(engine=_EngineStub(connection))

    requests = service.db_stream_refresh_list(connection_id)
    service.db_stream_refresh_delete(connection_id, "orders", None)

    assert [(request.stream_name, request.stream_namespace) for request in requests] == [("orders", None)]
    assert "IS NOT DISTINCT FROM" in connection.executed_queries[1]
    assert connection.executed_parameters[1]["stream_namespace"] is None


def test_db_stream_refresh_delete_wraps_db_error() -> None:
    service = SQLAlchemyStreamRefreshService(engine=_EngineStub(_ConnectionStub(error=_operational_error())))

    with pytest.raises(JobPersistenceError):
        service.db_stream_refresh_delete(uuid4(), "orders", "public")


def test_db_stream_generation_reads_latest_and_inserts_batch() -> None:
    """Map grouped generation rows and insert one row per bumped stream.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when rows or parameters are not mapped.
    """

    connection = _ConnectionStub(results=[[{"stream_name": "orders", "stream_namespace": "public", "generation_id": 4}]])
    service = SQLAlchemyStreamGenerationService(engine=_EngineStub(connection))
    connection_id = uuid4()

    current = service.db_stream_generation_current(connection_id)
    service.db_stream_generation_insert(connection_id, 7, [(StreamDescriptor(name="orders", namespace="public"), 5)])

    assert current == {StreamDescriptor(name="orders", namespace="public"): 4}
    assert "GROUP BY" in connection.executed_queries[0]
    assert connection.executed_parameters[1] == [
        {
            "connection_id": str(connection_id),
            "stream_name": "orders",
            "stream_namespace": "public",
            "generation_id": 5,
            "start_job_id": 7,
        }
    ]


def test_db_stream_generation_insert_skips_empty_batch() -> None:
    connection = _ConnectionStub()
    service = SQLAlchemyStreamGenerationService(engine=_EngineStub(connection))

    service.db_stream_generation_insert(uuid4(), 7, [])

    assert connection.executed_queries == []


def test_db_connection_state_upserts_and_reads_back_json() -> None:
    """Write state JSON with an upsert and map a stored document back.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when the stored document does not map back.
    """

    state = StateWrapper(
        state_type=StateType.GLOBAL,
        global_state=GlobalState(
            shared_state={"lsn": 10},
            stream_states=(StreamState(stream_name="orders", stream_namespace="public", state={"cursor": 1}),),
        ),
    )
    write_connection = _ConnectionStub()
    SQLAlchemyConnectionStateService(engine=_EngineStub(write_connection)).db_state_update_or_create(uuid4(), state)
    stored_document = orjson.loads(write_connection.executed_parameters[0]["state"])

    read_connection = _ConnectionStub(results=[[{"state": stored_document}]])
    read_state = SQLAlchemyConnectionStateService(engine=_EngineStub(read_connection)).db_state_get_current(uuid4())

    assert "ON CONFLICT (connection_id) DO UPDATE" in write_connection.executed_queries[0]
    assert read_state == state


def test_db_connection_state_missing_and_invalid_documents() -> None:
    missing_service = SQLAlchemyConnectionStateService(engine=_EngineStub(_ConnectionStub(results=[[]])))
    invalid_service = SQLAlchemyConnectionStateService(
        engine=_EngineStub(_ConnectionStub(results=[[{"state": {"state_type": "unknown"}}]]))
    )

    assert missing_service.db_state_get_current(uuid4()) is None
    with pytest.raises(JobPersistenceError):
        invalid_service.db_state_get_current(uuid4())


def test_db_services_reject_missing_engine() -> None:
    for service_class in (
        SQLAlchemyJobQueueService,
        SQLAlchemyStreamRefreshService,
        SQLAlchemyStreamGenerationService,
        SQLAlchemyConnectionStateService,
    ):
        with pytest.raises(ValueError):
            service_class(engine=None)
