"""Typed interfaces for resource-requirement default lookup."""

from typing import Protocol

from sync_jobs.domain import ResourceRequirementSpec, ResourceRole


class ResourceDefaultsCatalogPort(Protocol):
    """Port definition for type-level resource requirement defaults."""

    def resource_defaults_lookup(
        self,
        role: ResourceRole,
        sub_type: str | None,
        variant: str,
    ) -> ResourceRequirementSpec:
        """Return the default requirement for one role.

        Args:
            role: Execution role.
            sub_type: Source type classifier, None when no source participates.
            variant: Resource requirements variant.

        Returns:
            ResourceRequirementSpec: Default requirement; fields may be None.

        Raises:
            RuntimeError: Raised when defaults cannot be loaded.
        """
