"""Configuration-backed catalog of type-level resource requirement defaults."""

from __future__ import annotations

from collections.abc import Mapping

from sync_jobs.domain import ResourceRequirementSpec, ResourceRole

from .interfaces import ResourceDefaultsCatalogPort
from .merge import resource_merge

DEFAULT_VARIANT = "default"
DEFAULT_SUB_TYPE = "default"

VariantTable = Mapping[str, Mapping[str, Mapping[str, ResourceRequirementSpec]]]


class ConfiguredResourceDefaultsCatalog(ResourceDefaultsCatalogPort):
    """Resolve defaults from a `variant -> role -> sub_type` table.

    Lookup falls back from the requested variant to the `default` variant and
    from the requested sub type to the `default` sub type. The matched entry is
    merged over the base job defaults, so unset fields inherit them.
    """

    def __init__(self, base_defaults: ResourceRequirementSpec, variants: VariantTable | None = None):
        """Initialize catalog tables.

        Args:
            base_defaults: Requirement applied when no table entry sets a field.
            variants: Per-variant, per-role, per-sub-type requirements.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when base defaults are None.
        """

        if base_defaults is None:
            raise ValueError("base_defaults must not be None")
        self._base_defaults = base_defaults
        self._variants = variants or {}

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
            ResourceRequirementSpec: Matched entry merged over the base defaults.
        """

        return resource_merge(self._resource_find_entry(role, sub_type, variant), self._base_defaults)

    def _resource_find_entry(
        self,
        role: ResourceRole,
        sub_type: str | None,
        variant: str,
    ) -> ResourceRequirementSpec | None:
        variant_candidates = [variant] if variant == DEFAULT_VARIANT else [variant, DEFAULT_VARIANT]
        sub_type_candidates = [DEFAULT_SUB_TYPE] if sub_type in (None, DEFAULT_SUB_TYPE) else [sub_type, DEFAULT_SUB_TYPE]
        for variant_name in variant_candidates:
            role_table = self._variants.get(variant_name, {}).get(role.value)
            if role_table is None:
                continue
            for sub_type_name in sub_type_candidates:
                entry = role_table.get(sub_type_name)
                if entry is not None:
                    return entry
        return None
