"""Domain models used across job-creation layer boundaries."""

from .catalog import (
	ConfiguredCatalog,
	ConfiguredStream,
	DestinationSyncMode,
	StreamDescriptor,
	SyncMode,
	catalog_apply_generations,
	catalog_apply_reset,
)
from .job_config import (
	JobConfig,
	JobRefreshConfig,
	JobResetConnectionConfig,
	JobSyncConfig,
	domain_job_config_from_json,
	domain_job_config_to_json,
)
from .models import (
	SOURCE_ROLES,
	AbsentSource,
	ActorDefinitionRef,
	ActorDefinitionResourceRequirements,
	ActorImage,
	GlobalState,
	JobType,
	JobTypeResourceLimit,
	NamespaceDefinition,
	ResourceRequirementSpec,
	ResourceRole,
	SourceSide,
	SourceType,
	StateType,
	StateWrapper,
	StreamRefreshRequest,
	StreamState,
	SyncDescriptor,
	SyncOperation,
	SyncResourceRequirements,
	SyncResourceRequirementsKey,
)

__all__ = [
	"SOURCE_ROLES",
	"AbsentSource",
	"ActorDefinitionRef",
	"ActorDefinitionResourceRequirements",
	"ActorImage",
	"ConfiguredCatalog",
	"ConfiguredStream",
	"DestinationSyncMode",
	"GlobalState",
	"JobConfig",
	"JobRefreshConfig",
	"JobResetConnectionConfig",
	"JobSyncConfig",
	"JobType",
	"JobTypeResourceLimit",
	"NamespaceDefinition",
	"ResourceRequirementSpec",
	"ResourceRole",
	"SourceSide",
	"SourceType",
	"StateType",
	"StateWrapper",
	"StreamDescriptor",
	"StreamRefreshRequest",
	"StreamState",
	"SyncDescriptor",
	"SyncMode",
	"SyncOperation",
	"SyncResourceRequirements",
	"SyncResourceRequirementsKey",
	"catalog_apply_generations",
	"catalog_apply_reset",
	"domain_job_config_from_json",
	"domain_job_config_to_json",
]
