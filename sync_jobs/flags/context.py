"""Feature-flag evaluation context assembly."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class ContextKind(str, Enum):
    """Entity kinds a flag can be scoped to."""

    WORKSPACE = "workspace"
    CONNECTION = "connection"
    SOURCE = "source"
    SOURCE_DEFINITION = "source_definition"
    DESTINATION = "destination"
    DESTINATION_DEFINITION = "destination_definition"


@dataclass(frozen=True)
class ContextEntry:
    """One scoped entity identifier inside an evaluation context.

    Attributes:
        kind: Entity kind.
        key: Entity identifier.
    """

    kind: ContextKind
    key: UUID

    def context_entry_label(self) -> str:
        """Return the `kind:uuid` label used by flag override tables."""

        return f"{self.kind.value}:{self.key}"


@dataclass(frozen=True)
class EvaluationContext:
    """Set of scoped entity identifiers used to select flag variants."""

    entries: frozenset[ContextEntry] = frozenset()

    def context_key_for(self, kind: ContextKind) -> UUID | None:
        """Return the identifier of the given kind, if present."""

        for entry in self.entries:
            if entry.kind == kind:
                return entry.key
        return None


def flags_build_context(
    workspace_id: UUID | None = None,
    connection_id: UUID | None = None,
    source_id: UUID | None = None,
    source_definition_id: UUID | None = None,
    destination_id: UUID | None = None,
    destination_definition_id: UUID | None = None,
) -> EvaluationContext:
    """Build a composite evaluation context from the identifiers present.

    Identifiers passed as None are omitted; jobs without a live source simply
    produce a context without source entries.

    Args:
        workspace_id: Workspace identifier.
        connection_id: Connection identifier.
        source_id: Source actor identifier.
        source_definition_id: Source definition identifier.
        destination_id: Destination actor identifier.
        destination_definition_id: Destination definition identifier.

    Returns:
        EvaluationContext: Context with one entry per present identifier.
    """

    candidates = (
        (ContextKind.WORKSPACE, workspace_id),
        (ContextKind.CONNECTION, connection_id),
        (ContextKind.SOURCE, source_id),
        (ContextKind.SOURCE_DEFINITION, source_definition_id),
        (ContextKind.DESTINATION, destination_id),
        (ContextKind.DESTINATION_DEFINITION, destination_definition_id),
    )
    return EvaluationContext(
        entries=frozenset(ContextEntry(kind=kind, key=key) for kind, key in candidates if key is not None)
    )
