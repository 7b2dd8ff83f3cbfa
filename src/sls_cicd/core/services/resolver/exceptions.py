from typing import Any, List, Optional

from sls_cicd.exception import CLIException


class ConfigurationError(CLIException):
    """
    Ошибка в пользовательской конфигурации custom.cicd.

    Дополнительно хранит логи, накопленные во время разбора конфигурации.
    """

    def __init__(
        self,
        *args,
        description: str = "Invalid CICD configuration",
        logs: Optional[List[str]] = None,
    ) -> None:
        super().__init__(*args, description=description)
        self.logs: List[str] = logs or []


class EnvVarEntryError(ConfigurationError):
    """
    Элемент envVars не является словарём ровно с одним ключом.
    """

    def __init__(
        self,
        index: int,
        entry: Any,
        logs: Optional[List[str]] = None,
        *args,
    ) -> None:
        description = (
            f"envVars[{index}] must be a mapping with exactly one key, got {entry!r}"
        )
        super().__init__(*args, description=description, logs=logs)
        self.index = index
        self.entry = entry
