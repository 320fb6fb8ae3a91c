"""Feature-flag layer package for evaluation contexts and flag evaluators."""

from .context import ContextEntry, ContextKind, EvaluationContext, flags_build_context
from .interfaces import (
	ACTIVATE_REFRESHES,
	DEST_RESOURCE_OVERRIDES,
	ORCHESTRATOR_RESOURCE_OVERRIDES,
	SOURCE_RESOURCE_OVERRIDES,
	USE_RESOURCE_REQUIREMENTS_VARIANT,
	FeatureFlag,
	FeatureFlagEvaluatorPort,
)
from .static_client import StaticFeatureFlagEvaluator

__all__ = [
	"ACTIVATE_REFRESHES",
	"DEST_RESOURCE_OVERRIDES",
	"ORCHESTRATOR_RESOURCE_OVERRIDES",
	"SOURCE_RESOURCE_OVERRIDES",
	"USE_RESOURCE_REQUIREMENTS_VARIANT",
	"ContextEntry",
	"ContextKind",
	"EvaluationContext",
	"FeatureFlag",
	"FeatureFlagEvaluatorPort",
	"StaticFeatureFlagEvaluator",
	"flags_build_context",
]
