"""Resource layer package for requirement merging, defaults and resolution."""

from .defaults_catalog import DEFAULT_SUB_TYPE, DEFAULT_VARIANT, ConfiguredResourceDefaultsCatalog
from .interfaces import ResourceDefaultsCatalogPort
from .merge import resource_definition_tiers, resource_merge, resource_overrides_parse
from .policy import PolicyInputs, resource_policy_assemble
from .resolver import ResourceRequirementsResolver, resource_build_context, resource_source_type

__all__ = [
	"DEFAULT_SUB_TYPE",
	"DEFAULT_VARIANT",
	"ConfiguredResourceDefaultsCatalog",
	"PolicyInputs",
	"ResourceDefaultsCatalogPort",
	"ResourceRequirementsResolver",
	"resource_build_context",
	"resource_definition_tiers",
	"resource_merge",
	"resource_overrides_parse",
	"resource_policy_assemble",
	"resource_source_type",
]
