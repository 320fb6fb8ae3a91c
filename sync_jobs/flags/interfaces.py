"""Typed interfaces and flag definitions for feature-flag evaluation."""

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from .context import EvaluationContext

FlagValue = TypeVar("FlagValue", bool, str)


@dataclass(frozen=True)
class FeatureFlag(Generic[FlagValue]):
    """Named feature flag with the value used when no rule matches.

    Attributes:
        key: Flag key known to the evaluation backend.
        default: Fallback value.
    """

    key: str
    default: FlagValue


ACTIVATE_REFRESHES: FeatureFlag[bool] = FeatureFlag(key="platform.activate-refreshes", default=False)
USE_RESOURCE_REQUIREMENTS_VARIANT: FeatureFlag[str] = FeatureFlag(
    key="platform.resource-requirements-variant",
    default="default",
)
SOURCE_RESOURCE_OVERRIDES: FeatureFlag[str] = FeatureFlag(key="source-resource-overrides", default="")
DEST_RESOURCE_OVERRIDES: FeatureFlag[str] = FeatureFlag(key="dest-resource-overrides", default="")
ORCHESTRATOR_RESOURCE_OVERRIDES: FeatureFlag[str] = FeatureFlag(key="orchestrator-resource-overrides", default="")


class FeatureFlagEvaluatorPort(Protocol):
    """Port definition for the feature-flag evaluation backend."""

    def flag_evaluate_bool(self, flag: FeatureFlag[bool], context: EvaluationContext) -> bool:
        """Evaluate a boolean flag for one context.

        Args:
            flag: Boolean flag definition.
            context: Evaluation context.

        Returns:
            bool: Flag value for the context.

        Raises:
            RuntimeError: Raised when the backend is unavailable.
        """

    def flag_evaluate_string(self, flag: FeatureFlag[str], context: EvaluationContext) -> str:
        """Evaluate a string flag for one context.

        Args:
            flag: String flag definition.
            context: Evaluation context.

        Returns:
            str: Flag value for the context.

        Raises:
            RuntimeError: Raised when the backend is unavailable.
        """
