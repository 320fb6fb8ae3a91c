"""Per-call feature-flag inputs driving resource resolution."""

from __future__ import annotations

from dataclasses import dataclass

from sync_jobs.flags import (
    DEST_RESOURCE_OVERRIDES,
    ORCHESTRATOR_RESOURCE_OVERRIDES,
    SOURCE_RESOURCE_OVERRIDES,
    USE_RESOURCE_REQUIREMENTS_VARIANT,
    EvaluationContext,
    FeatureFlagEvaluatorPort,
)
from sync_jobs.domain import ResourceRequirementSpec

from .merge import resource_overrides_parse


@dataclass(frozen=True)
class PolicyInputs:
    """Flag-derived inputs evaluated once per job-creation call.

    Every role of one job sees the same variant and overrides.

    Attributes:
        variant: Resource requirements catalog variant.
        orchestrator_override: Parsed orchestrator runtime override.
        source_override: Parsed source runtime override.
        destination_override: Parsed destination runtime override.
    """

    variant: str
    orchestrator_override: ResourceRequirementSpec | None = None
    source_override: ResourceRequirementSpec | None = None
    destination_override: ResourceRequirementSpec | None = None


def resource_policy_assemble(
    flag_evaluator: FeatureFlagEvaluatorPort,
    context: EvaluationContext,
    include_source: bool,
) -> PolicyInputs:
    """Evaluate the resource flags for one job-creation call.

    Args:
        flag_evaluator: Feature-flag backend.
        context: Evaluation context of the job.
        include_source: Whether a source participates; the source override is skipped otherwise.

    Returns:
        PolicyInputs: Variant and parsed overrides.
    """

    source_override = None
    if include_source:
        source_override = resource_overrides_parse(
            "SOURCE",
            flag_evaluator.flag_evaluate_string(SOURCE_RESOURCE_OVERRIDES, context),
        )
    return PolicyInputs(
        variant=flag_evaluator.flag_evaluate_string(USE_RESOURCE_REQUIREMENTS_VARIANT, context),
        orchestrator_override=resource_overrides_parse(
            "ORCHESTRATOR",
            flag_evaluator.flag_evaluate_string(ORCHESTRATOR_RESOURCE_OVERRIDES, context),
        ),
        source_override=source_override,
        destination_override=resource_overrides_parse(
            "DESTINATION",
            flag_evaluator.flag_evaluate_string(DEST_RESOURCE_OVERRIDES, context),
        ),
    )
