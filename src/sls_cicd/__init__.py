from .core.context import ServerlessContext
from .core.core import CICDPlugin
from .core.models import Configuration, StageContext
from .core.services.builders.resources import build_resources
from .core.services.resolver import ConfigurationError, resolve_config, should_run

__all__ = [
    "CICDPlugin",
    "Configuration",
    "ConfigurationError",
    "ServerlessContext",
    "StageContext",
    "build_resources",
    "resolve_config",
    "should_run",
]
