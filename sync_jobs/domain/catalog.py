"""Configured catalog contracts and pure catalog transforms."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import Enum


class SyncMode(str, Enum):
    """Read mode of a stream on the source side."""

    FULL_REFRESH = "full_refresh"
    INCREMENTAL = "incremental"


class DestinationSyncMode(str, Enum):
    """Write mode of a stream on the destination side."""

    APPEND = "append"
    OVERWRITE = "overwrite"
    APPEND_DEDUP = "append_dedup"
    OVERWRITE_DEDUP = "overwrite_dedup"


_TRUNCATING_DESTINATION_MODES = frozenset({DestinationSyncMode.OVERWRITE, DestinationSyncMode.OVERWRITE_DEDUP})


@dataclass(frozen=True)
class StreamDescriptor:
    """Identity of one stream.

    Attributes:
        name: Stream name.
        namespace: Optional stream namespace.
    """

    name: str
    namespace: str | None = None


@dataclass(frozen=True)
class ConfiguredStream:
    """One stream of a configured catalog.

    Attributes:
        stream: Stream identity.
        sync_mode: Source read mode.
        destination_sync_mode: Destination write mode.
        cursor_field: Cursor path for incremental reads.
        primary_key: Primary key paths for dedup modes.
        generation_id: Generation of the data written by this job.
        minimum_generation_id: Oldest generation kept by the destination.
        sync_id: Identifier of the job that stamped the generation.
    """

    stream: StreamDescriptor
    sync_mode: SyncMode
    destination_sync_mode: DestinationSyncMode
    cursor_field: tuple[str, ...] = ()
    primary_key: tuple[tuple[str, ...], ...] = ()
    generation_id: int | None = None
    minimum_generation_id: int | None = None
    sync_id: int | None = None


@dataclass(frozen=True)
class ConfiguredCatalog:
    """Ordered set of configured streams."""

    streams: tuple[ConfiguredStream, ...] = ()

    def catalog_stream_descriptors(self) -> tuple[StreamDescriptor, ...]:
        """Return stream identities in catalog order."""

        return tuple(configured_stream.stream for configured_stream in self.streams)


def catalog_apply_reset(
    catalog: ConfiguredCatalog,
    streams_to_reset: Iterable[StreamDescriptor],
) -> ConfiguredCatalog:
    """Mark selected streams to be cleared by a reset job.

    Selected streams are switched to `full_refresh`/`overwrite` so the empty
    reset source truncates them. Other streams are returned as-is. Streams
    listed for reset that are not in the catalog are ignored.

    Args:
        catalog: Connection catalog; never mutated.
        streams_to_reset: Streams to clear.

    Returns:
        ConfiguredCatalog: New catalog value with the reset markers applied.
    """

    reset_descriptors = frozenset(streams_to_reset)
    return ConfiguredCatalog(
        streams=tuple(
            replace(
                configured_stream,
                sync_mode=SyncMode.FULL_REFRESH,
                destination_sync_mode=DestinationSyncMode.OVERWRITE,
            )
            if configured_stream.stream in reset_descriptors
            else configured_stream
            for configured_stream in catalog.streams
        )
    )


def catalog_apply_generations(
    catalog: ConfiguredCatalog,
    generations: Mapping[StreamDescriptor, int],
    job_id: int,
    refreshed_streams: Iterable[StreamDescriptor],
) -> ConfiguredCatalog:
    """Stamp every stream with its current generation and the owning job.

    A stream gets `minimum_generation_id == generation_id` when it is being
    refreshed or is a truncating full refresh, which lets the destination drop
    older generations. Every other stream keeps all generations (minimum 0).

    Args:
        catalog: Catalog to stamp; never mutated.
        generations: Current generation per stream; unknown streams are at 0.
        job_id: Job identifier recorded as the sync id.
        refreshed_streams: Streams refreshed by this job.

    Returns:
        ConfiguredCatalog: Stamped catalog value.
    """

    refreshed_descriptors = frozenset(refreshed_streams)
    stamped_streams = []
    for configured_stream in catalog.streams:
        current_generation = generations.get(configured_stream.stream, 0)
        truncates = configured_stream.stream in refreshed_descriptors or (
            configured_stream.sync_mode == SyncMode.FULL_REFRESH
            and configured_stream.destination_sync_mode in _TRUNCATING_DESTINATION_MODES
        )
        stamped_streams.append(
            replace(
                configured_stream,
                generation_id=current_generation,
                minimum_generation_id=current_generation if truncates else 0,
                sync_id=job_id,
            )
        )
    return ConfiguredCatalog(streams=tuple(stamped_streams))
