from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Optional, Tuple

from sls_cicd.core.config import DEFAULT_BASE_IMAGE, DEFAULT_BRANCH
from sls_cicd.core.models import BranchOverride, Configuration, StageContext
from sls_cicd.model import EnvironmentVariable

from .exceptions import ConfigurationError, EnvVarEntryError


def default_options(service_name: str) -> Dict[str, Any]:
    """
    Значения по умолчанию для custom.cicd.
    gitOwner и githubOAuthToken по умолчанию пустые, их проверяет AWS при деплое.
    """
    return {
        "baseImage": DEFAULT_BASE_IMAGE,
        "gitOwner": "",
        "gitRepo": service_name,
        "gitBranch": DEFAULT_BRANCH,
        "githubOAuthToken": "",
    }


def _apply_defaults(
    user_config: Mapping[str, Any], defaults: Mapping[str, Any]
) -> Dict[str, Any]:
    # Значение пользователя всегда главнее; None считаем «не задано»
    merged: Dict[str, Any] = dict(user_config)
    for key, value in defaults.items():
        if merged.get(key) is None:
            merged[key] = value
    return merged


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        # YAML true/false -> привычные для shell значения
        return "true" if value else "false"
    return str(value)


def build_environment_variables(
    env_vars: Optional[Sequence[Any]],
) -> List[EnvironmentVariable]:
    """
    Превращает envVars вида [{FOO: bar}, {BAZ: qux}] в список пар Name/Value
    с сохранением порядка.

    Каждый элемент должен быть словарём ровно с одним ключом,
    иначе поднимаем EnvVarEntryError с индексом и содержимым элемента.
    """
    if env_vars is None:
        return []

    if isinstance(env_vars, (str, bytes)) or not isinstance(env_vars, Sequence):
        raise ConfigurationError(
            description=f"envVars must be a list of single-key mappings, got {env_vars!r}"
        )

    result: List[EnvironmentVariable] = []
    for index, entry in enumerate(env_vars):
        if not isinstance(entry, Mapping) or len(entry) != 1:
            raise EnvVarEntryError(index=index, entry=entry)

        ((name, value),) = entry.items()
        result.append(EnvironmentVariable(Name=str(name), Value=_to_str(value)))

    return result


def excluded_stages(user_config: Optional[Mapping[str, Any]]) -> Optional[List[str]]:
    """
    excludestages из custom.cicd; одиночная строка трактуется как список из одной стадии.
    """
    if not isinstance(user_config, Mapping):
        return None

    excluded = user_config.get("excludestages")
    if excluded is None:
        return None
    if isinstance(excluded, str):
        return [excluded]
    if not isinstance(excluded, Sequence):
        raise ConfigurationError(
            description=f"excludestages must be a list of stage names, got {excluded!r}"
        )
    return [str(name) for name in excluded]


def stage_context_from_custom(
    stage: str, custom: Optional[Mapping[str, Any]]
) -> StageContext:
    """
    Собирает переопределения ветки из секции custom:
    custom.<stage>.branch -> ветка для этой стадии.
    """
    overrides: Dict[str, BranchOverride] = {}
    for name, value in (custom or {}).items():
        if isinstance(value, Mapping) and "branch" in value:
            branch = value.get("branch")
            overrides[str(name)] = BranchOverride(
                branch=None if branch is None else str(branch)
            )
    return StageContext(stage=stage, overrides=overrides)


def resolve_config(
    user_config: Optional[Mapping[str, Any]],
    defaults: Mapping[str, Any],
    stage_context: StageContext,
) -> Tuple[Configuration, List[str], List[str]]:
    """
    Накладываем пользовательский custom.cicd на значения по умолчанию,
    применяем переопределение ветки для активной стадии и разбираем envVars.

    Возвращает (Configuration, logs, warnings).
    """
    logs: List[str] = []
    warnings: List[str] = []

    if user_config is not None and not isinstance(user_config, Mapping):
        raise ConfigurationError(
            description=f"custom.cicd must be a mapping, got {user_config!r}"
        )

    merged = _apply_defaults(user_config or {}, defaults)

    image = merged.get("image") or merged.get("baseImage")
    logs.append(f"Build image: {image}")

    branch = merged.get("gitBranch")
    override = stage_context.branch_override()
    if override is not None:
        logs.append(
            f"Branch for stage {stage_context.stage} overridden: {branch} -> {override}"
        )
        branch = override

    try:
        environment_variables = build_environment_variables(merged.get("envVars"))
    except ConfigurationError as e:
        logs.append(f"Failed to parse envVars: {e.description}")
        e.logs = logs + e.logs
        raise

    config = Configuration(
        image=_to_str(image),
        git_owner=_to_str(merged.get("gitOwner")),
        git_repo=_to_str(merged.get("gitRepo")),
        git_branch=_to_str(branch),
        github_oauth_token=_to_str(merged.get("githubOAuthToken")),
        environment_variables=environment_variables,
    )

    if not config.git_owner:
        warnings.append(
            "gitOwner is empty: the Source action will be rejected by CodePipeline at deploy time."
        )
    if not config.github_oauth_token:
        warnings.append(
            "githubOAuthToken is empty: the Source action will be rejected by CodePipeline at deploy time."
        )

    return config, logs, warnings


def should_run(stage: str, exclude_stages: Optional[Sequence[str]]) -> bool:
    """
    False только если список исключённых стадий задан и содержит активную стадию.
    """
    if exclude_stages is None:
        return True
    return stage not in exclude_stages
