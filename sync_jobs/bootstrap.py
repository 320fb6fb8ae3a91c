"""Runtime bootstrap wiring for startup validation and dependency assembly."""

from sync_jobs.config import AppSettings, ResourceQuantitiesSettings, config_load_settings
from sync_jobs.core.logging import configure_logging
from sync_jobs.db import (
    SQLAlchemyConnectionStateService,
    SQLAlchemyJobQueueService,
    SQLAlchemyStreamGenerationService,
    SQLAlchemyStreamRefreshService,
    db_create_engine,
)
from sync_jobs.domain import ResourceRequirementSpec
from sync_jobs.flags import StaticFeatureFlagEvaluator
from sync_jobs.jobs import (
    CatalogGenerationSetter,
    GenerationBumper,
    JobCreator,
    RefreshEligibilityGate,
    RefreshJobStateUpdater,
)
from sync_jobs.resources import ConfiguredResourceDefaultsCatalog, ResourceRequirementsResolver


def _bootstrap_quantities(quantities: ResourceQuantitiesSettings) -> ResourceRequirementSpec:
    return ResourceRequirementSpec(**quantities.model_dump())


def bootstrap_create_defaults_catalog(settings: AppSettings) -> ConfiguredResourceDefaultsCatalog:
    """Build the resource defaults catalog from settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        ConfiguredResourceDefaultsCatalog: Catalog over the configured variant table.
    """

    base_defaults = ResourceRequirementSpec(
        cpu_request=settings.job_default_cpu_request,
        cpu_limit=settings.job_default_cpu_limit,
        memory_request=settings.job_default_memory_request,
        memory_limit=settings.job_default_memory_limit,
    )
    variants = {
        variant_name: {
            role_name: {
                sub_type: _bootstrap_quantities(quantities)
                for sub_type, quantities in sub_type_table.items()
            }
            for role_name, sub_type_table in role_table.items()
        }
        for variant_name, role_table in settings.resource_requirement_variants.items()
    }
    return ConfiguredResourceDefaultsCatalog(base_defaults=base_defaults, variants=variants)


def bootstrap_create_job_creator(settings: AppSettings | None = None) -> JobCreator:
    """Assemble the job creator after validating startup configuration.

    Args:
        settings: Pre-loaded settings; loaded from environment and dotenv when omitted.

    Returns:
        JobCreator: Fully wired job creator.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    settings = settings if settings is not None else config_load_settings()
    configure_logging(level=settings.log_level, use_json=settings.log_json)

    engine = db_create_engine(database_url=settings.database_url)
    generation_repository = SQLAlchemyStreamGenerationService(engine=engine)
    state_persistence = SQLAlchemyConnectionStateService(engine=engine)
    flag_evaluator = StaticFeatureFlagEvaluator(
        flag_values=settings.feature_flags,
        context_overrides=settings.feature_flag_context_overrides,
    )
    return JobCreator(
        job_queue=SQLAlchemyJobQueueService(engine=engine),
        resource_resolver=ResourceRequirementsResolver(
            flag_evaluator=flag_evaluator,
            defaults_catalog=bootstrap_create_defaults_catalog(settings),
        ),
        eligibility_gate=RefreshEligibilityGate(flag_evaluator=flag_evaluator),
        generation_tagger=CatalogGenerationSetter(generation_repository=generation_repository),
        generation_counter=GenerationBumper(generation_repository=generation_repository),
        state_persistence=state_persistence,
        refresh_state_updater=RefreshJobStateUpdater(state_persistence=state_persistence),
        stream_refresh_repository=SQLAlchemyStreamRefreshService(engine=engine),
    )
