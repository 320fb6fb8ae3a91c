"""Settings-backed feature-flag evaluator."""

from __future__ import annotations

from collections.abc import Mapping

from .context import ContextKind, EvaluationContext
from .interfaces import FeatureFlag, FeatureFlagEvaluatorPort

_CONTEXT_KIND_PRECEDENCE = (
    ContextKind.CONNECTION,
    ContextKind.SOURCE,
    ContextKind.DESTINATION,
    ContextKind.SOURCE_DEFINITION,
    ContextKind.DESTINATION_DEFINITION,
    ContextKind.WORKSPACE,
)


class StaticFeatureFlagEvaluator(FeatureFlagEvaluatorPort):
    """Feature-flag evaluator answering from static configuration.

    Context overrides are keyed by `kind:uuid` labels and checked from the most
    specific entity kind (connection) to the least specific (workspace). Flags
    without an override fall back to the global value, then to the flag default.
    """

    def __init__(
        self,
        flag_values: Mapping[str, bool | str] | None = None,
        context_overrides: Mapping[str, Mapping[str, bool | str]] | None = None,
    ):
        """Initialize static flag tables.

        Args:
            flag_values: Global value per flag key.
            context_overrides: Per-flag mapping of `kind:uuid` label to value.

        Returns:
            None: Initializer does not return a value.
        """

        self._flag_values = dict(flag_values or {})
        self._context_overrides = {key: dict(values) for key, values in (context_overrides or {}).items()}

    def flag_evaluate_bool(self, flag: FeatureFlag[bool], context: EvaluationContext) -> bool:
        """Evaluate a boolean flag.

        Args:
            flag: Boolean flag definition.
            context: Evaluation context.

        Returns:
            bool: Configured value for the context.

        Raises:
            ValueError: Raised when the configured value is not a boolean.
        """

        value = self._flag_resolve(flag, context)
        if not isinstance(value, bool):
            raise ValueError(f"flag {flag.key} is configured with non-boolean value {value!r}")
        return value

    def flag_evaluate_string(self, flag: FeatureFlag[str], context: EvaluationContext) -> str:
        """Evaluate a string flag.

        Args:
            flag: String flag definition.
            context: Evaluation context.

        Returns:
            str: Configured value for the context.

        Raises:
            ValueError: Raised when the configured value is not a string.
        """

        value = self._flag_resolve(flag, context)
        if not isinstance(value, str):
            raise ValueError(f"flag {flag.key} is configured with non-string value {value!r}")
        return value

    def _flag_resolve(self, flag: FeatureFlag, context: EvaluationContext) -> bool | str:
        overrides = self._context_overrides.get(flag.key, {})
        if overrides:
            labels = {entry.kind: entry.context_entry_label() for entry in context.entries}
            for kind in _CONTEXT_KIND_PRECEDENCE:
                label = labels.get(kind)
                if label is not None and label in overrides:
                    return overrides[label]
        return self._flag_values.get(flag.key, flag.default)
