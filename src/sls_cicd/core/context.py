from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import click

from sls_cicd.core.config import CUSTOM_KEY, DEFAULT_STAGE


@dataclass
class ServerlessContext:
    """
    То, что плагин получает от хоста.

    service — изменяемое описание сервиса (service, provider, custom, resources ...),
              владелец — хост; плагин только один раз мержит в него ресурсы.
    log     — куда писать человекочитаемые сообщения (по умолчанию click.echo).
    """

    service: Dict[str, Any]
    log: Callable[[str], None] = field(default=click.echo)

    @property
    def service_name(self) -> str:
        name = self.service.get("service")
        # В старом формате serverless.yml service мог быть словарём {name: ...}
        if isinstance(name, dict):
            name = name.get("name")
        return str(name or "")

    @property
    def custom(self) -> Dict[str, Any]:
        return self.service.get("custom") or {}

    @property
    def cicd_options(self) -> Optional[Dict[str, Any]]:
        return self.custom.get(CUSTOM_KEY)

    def resolve_stage(self, options: Optional[Dict[str, Any]] = None) -> str:
        """
        Активная стадия: --stage из опций, затем custom.stage, затем provider.stage.
        """
        provider = self.service.get("provider") or {}
        for candidate in (
            (options or {}).get("stage"),
            self.custom.get("stage"),
            provider.get("stage"),
        ):
            if candidate:
                return str(candidate)
        return DEFAULT_STAGE
