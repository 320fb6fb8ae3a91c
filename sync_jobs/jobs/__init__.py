"""Job layer package for job creation boundaries."""

from .config_builder import job_config_build_refresh, job_config_build_reset, job_config_build_sync
from .creator import JobCreator
from .eligibility import RefreshEligibilityGate
from .errors import JobCreationError, RefreshNotEligibleError
from .generation import CatalogGenerationSetter, GenerationBumper
from .interfaces import GenerationCounterPort, GenerationTaggerPort, JobCreatorPort, RefreshStateUpdaterPort
from .state_refresh import RefreshJobStateUpdater, job_state_strip_refreshed_streams

__all__ = [
	"CatalogGenerationSetter",
	"GenerationBumper",
	"GenerationCounterPort",
	"GenerationTaggerPort",
	"JobCreationError",
	"JobCreator",
	"JobCreatorPort",
	"RefreshEligibilityGate",
	"RefreshJobStateUpdater",
	"RefreshNotEligibleError",
	"RefreshStateUpdaterPort",
	"job_config_build_refresh",
	"job_config_build_reset",
	"job_config_build_sync",
	"job_state_strip_refreshed_streams",
]
