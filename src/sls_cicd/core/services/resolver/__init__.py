from .core import (
    build_environment_variables,
    default_options,
    excluded_stages,
    resolve_config,
    should_run,
    stage_context_from_custom,
)

from .exceptions import ConfigurationError, EnvVarEntryError

__all__ = [
    "build_environment_variables",
    "default_options",
    "excluded_stages",
    "resolve_config",
    "should_run",
    "stage_context_from_custom",
    "ConfigurationError",
    "EnvVarEntryError",
]
