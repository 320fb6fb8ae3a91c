"""Regression tests for pure configured-catalog transforms."""

from __future__ import annotations

from sync_jobs.domain import (
    ConfiguredCatalog,
    ConfiguredStream,
    DestinationSyncMode,
    StreamDescriptor,
    SyncMode,
    catalog_apply_generations,
    catalog_apply_reset,
)

_ORDERS = StreamDescriptor(name="orders", namespace="public")
_USERS = StreamDescriptor(name="users", namespace="public")
_EVENTS = StreamDescriptor(name="events")


def _build_catalog() -> ConfiguredCatalog:
    """Build a three-stream catalog mixing sync modes.

    Returns:
        ConfiguredCatalog: Incremental `orders`, full-refresh overwrite `users`,
            incremental dedup `events`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return ConfiguredCatalog(
        streams=(
            ConfiguredStream(
                stream=_ORDERS,
                sync_mode=SyncMode.INCREMENTAL,
                destination_sync_mode=DestinationSyncMode.APPEND,
                cursor_field=("updated_at",),
            ),
            ConfiguredStream(
                stream=_USERS,
                sync_mode=SyncMode.FULL_REFRESH,
                destination_sync_mode=DestinationSyncMode.OVERWRITE,
            ),
            ConfiguredStream(
                stream=_EVENTS,
                sync_mode=SyncMode.INCREMENTAL,
                destination_sync_mode=DestinationSyncMode.APPEND_DEDUP,
                cursor_field=("ts",),
                primary_key=(("id",),),
            ),
        )
    )


def test_domain_catalog_reset_marks_only_selected_streams() -> None:
    """Switch selected streams to full-refresh overwrite and keep the others.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when unselected streams are modified.
    """

    catalog = _build_catalog()

    reset_catalog = catalog_apply_reset(catalog, [_ORDERS])

    assert reset_catalog.streams[0].sync_mode == SyncMode.FULL_REFRESH
    assert reset_catalog.streams[0].destination_sync_mode == DestinationSyncMode.OVERWRITE
    assert reset_catalog.streams[0].cursor_field == ("updated_at",)
    assert reset_catalog.streams[1] == catalog.streams[1]
    assert reset_catalog.streams[2] == catalog.streams[2]


def test_domain_catalog_reset_does_not_mutate_input_and_is_idempotent() -> None:
    """Leave the input catalog untouched and produce a stable result on re-apply."""

    catalog = _build_catalog()
    original_streams = catalog.streams

    once = catalog_apply_reset(catalog, [_ORDERS, _EVENTS])
    twice = catalog_apply_reset(once, [_ORDERS, _EVENTS])

    assert catalog.streams is original_streams
    assert catalog.streams[0].sync_mode == SyncMode.INCREMENTAL
    assert once == twice


def test_domain_catalog_reset_ignores_unknown_streams() -> None:
    catalog = _build_catalog()

    reset_catalog = catalog_apply_reset(catalog, [StreamDescriptor(name="missing")])

    assert reset_catalog == catalog


def test_domain_catalog_reset_matches_namespace_exactly() -> None:
    """Treat a null namespace as distinct from a named one."""

    catalog = _build_catalog()

    reset_catalog = catalog_apply_reset(catalog, [StreamDescriptor(name="orders")])

    assert reset_catalog.streams[0].sync_mode == SyncMode.INCREMENTAL


def test_domain_catalog_generations_stamp_minimum_generation_by_mode() -> None:
    """Stamp generations, sync id and minimum generation per stream mode.

    Returns:
        None: Assertions validate behavior.

    Raises:
        AssertionError: Raised when stamping rules are not applied.
    """

    catalog = _build_catalog()

    stamped = catalog_apply_generations(
        catalog=catalog,
        generations={_ORDERS: 3, _USERS: 5},
        job_id=42,
        refreshed_streams=[],
    )

    orders, users, events = stamped.streams
    assert (orders.generation_id, orders.minimum_generation_id, orders.sync_id) == (3, 0, 42)
    assert (users.generation_id, users.minimum_generation_id, users.sync_id) == (5, 5, 42)
    assert (events.generation_id, events.minimum_generation_id, events.sync_id) == (0, 0, 42)
    assert catalog.streams[0].generation_id is None


def test_domain_catalog_generations_truncate_refreshed_streams() -> None:
    catalog = _build_catalog()

    stamped = catalog_apply_generations(
        catalog=catalog,
        generations={_ORDERS: 4},
        job_id=7,
        refreshed_streams=[_ORDERS],
    )

    assert stamped.streams[0].generation_id == 4
    assert stamped.streams[0].minimum_generation_id == 4
    assert stamped.streams[0].sync_id == 7
