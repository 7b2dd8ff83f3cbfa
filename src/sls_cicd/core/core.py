from typing import Any, Callable, Dict, List, Optional

from sls_cicd.utils import merge_resources

from .config import PACKAGE_HOOK
from .context import ServerlessContext
from .models import Configuration, ResourceSummary
from .services.builders import resources as builder
from .services.resolver import (
    ConfigurationError,
    default_options,
    excluded_stages,
    resolve_config,
    should_run,
    stage_context_from_custom,
)


class CICDPlugin:
    """
    Плагин хоста: на хуке before:package:initialize добавляет в описание
    сервиса роль, проект CodeBuild и CodePipeline.
    """

    def __init__(self, serverless: ServerlessContext, options: Optional[Dict[str, Any]] = None):
        self.serverless = serverless
        self.options = options or {}
        self.stage = serverless.resolve_stage(self.options)
        self.default_options = default_options(serverless.service_name)
        self.logs: List[str] = []
        self.warnings: List[str] = []
        self.summary: Optional[ResourceSummary] = None

        self.hooks: Dict[str, Callable[[], Any]] = {
            PACKAGE_HOOK: self.create_pipeline,
        }

    def _log(self, message: str) -> None:
        self.logs.append(message)
        self.serverless.log(message)

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        self.serverless.log(f"Warning: {message}")

    def resolve(self) -> Configuration:
        stage_context = stage_context_from_custom(self.stage, self.serverless.custom)
        try:
            config, logs, warnings = resolve_config(
                self.serverless.cicd_options,
                self.default_options,
                stage_context,
            )
        except ConfigurationError as e:
            self.logs.extend(e.logs)
            self.warnings.append("CICD-ресурсы не сгенерированы: ошибка в custom.cicd.")
            raise
        self.logs.extend(logs)
        for warning in warnings:
            self._warn(warning)
        return config

    def generate_resources(self, config: Optional[Configuration] = None) -> Dict[str, Any]:
        """
        Строит документ ресурсов, не трогая описание сервиса.
        """
        if config is None:
            config = self.resolve()

        document = builder.build_resources(
            self.serverless.service_name, self.stage, config
        )
        self.summary = builder.summarize_resources(document)
        self.logs.append(self.summary.description)
        return document.to_dict()

    def create_pipeline(self) -> bool:
        """
        Обработчик хука. Возвращает False, если стадия исключена (excludestages)
        и описание сервиса осталось нетронутым.

        Ошибки конфигурации поднимаются до мержа, поэтому частичных изменений не бывает.
        """
        if not should_run(self.stage, excluded_stages(self.serverless.cicd_options)):
            self._log(f"CICD is ignored for {self.stage} stage")
            return False

        self._log("Updating CICD Resources...")

        pipeline_resources = self.generate_resources()
        merge_resources(self.serverless.service, pipeline_resources)

        self._log("CICD Resources Updated")
        return True
