import json
from pathlib import Path

import click
import yaml

from sls_cicd.core.config import PACKAGE_HOOK
from sls_cicd.core.context import ServerlessContext
from sls_cicd.core.core import CICDPlugin
from sls_cicd.exception import CLIException


def _load_service(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            service = yaml.safe_load(f)
    except OSError as e:
        raise CLIException(description=f"Не удалось прочитать файл '{path}': {e}")
    except yaml.YAMLError as e:
        raise CLIException(description=f"Не удалось разобрать YAML '{path}': {e}")

    if not isinstance(service, dict):
        raise CLIException(description=f"'{path}' не похож на serverless.yml: ожидался словарь")
    return service


def _render(resources: dict, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(resources, sort_keys=False)
    return json.dumps(resources, indent=2)


@click.command()
@click.option("--stage", default=None, help="Стадия деплоя (по умолчанию custom.stage / provider.stage)")
@click.option("--format", "fmt", type=click.Choice(["json", "yaml"]), default="json", help="Формат вывода")
@click.option("-o", "--output", default=None, help="Файл, куда дополнительно сохранить результат")
@click.argument("service_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def main(service_file: Path, stage: str, fmt: str, output: str):
    """
    Генерирует CICD-ресурсы для SERVICE_FILE (serverless.yml) и печатает секцию resources.
    """
    service = _load_service(service_file)

    # Диагностика идёт в stderr, чтобы stdout оставался валидным JSON/YAML
    context = ServerlessContext(service=service, log=lambda message: click.echo(message, err=True))
    plugin = CICDPlugin(context, {"stage": stage} if stage else None)

    if not plugin.hooks[PACKAGE_HOOK]():
        return

    template = _render(service["resources"], fmt)
    click.echo(template)

    if output is None:
        return

    try:
        with open(output, "w", encoding="utf-8") as f:
            f.write(template)
    except OSError as e:
        click.echo(f"Не удалось сохранить результат в файл '{output}': {e}", err=True)
    else:
        click.echo(f"Результат сохранён в файл: {output}", err=True)


if __name__ == "__main__":
    main()
