"""Refresh eligibility gate."""

from __future__ import annotations

from uuid import UUID

from sync_jobs.flags import ACTIVATE_REFRESHES, FeatureFlagEvaluatorPort, flags_build_context


class RefreshEligibilityGate:
    """Decide whether refresh-style jobs are allowed for a connection."""

    def __init__(self, flag_evaluator: FeatureFlagEvaluatorPort):
        """Initialize gate dependencies.

        Args:
            flag_evaluator: Feature-flag backend.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when flag_evaluator is None.
        """

        if flag_evaluator is None:
            raise ValueError("flag_evaluator must not be None")
        self._flag_evaluator = flag_evaluator

    def is_refresh_eligible(
        self,
        workspace_id: UUID,
        connection_id: UUID,
        source_definition_id: UUID,
        destination_definition_id: UUID,
    ) -> bool:
        """Evaluate the refresh activation flag for one connection.

        Args:
            workspace_id: Workspace identifier.
            connection_id: Connection identifier.
            source_definition_id: Source definition identifier.
            destination_definition_id: Destination definition identifier.

        Returns:
            bool: True when refreshes and generation stamping are enabled.
        """

        context = flags_build_context(
            workspace_id=workspace_id,
            connection_id=connection_id,
            source_definition_id=source_definition_id,
            destination_definition_id=destination_definition_id,
        )
        return self._flag_evaluator.flag_evaluate_bool(ACTIVATE_REFRESHES, context)
