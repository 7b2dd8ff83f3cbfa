from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

from sls_cicd.model import EnvironmentVariable


class Configuration(BaseModel):
    """
    Итоговые опции плагина после наложения custom.cicd на значения по умолчанию.

    Имена ключей в serverless.yml (camelCase) доступны как алиасы,
    поэтому модель можно собрать как из ответа резолвера, так и из словаря хоста.
    """

    model_config = ConfigDict(populate_by_name=True)

    image: str
    git_owner: str = Field("", alias="gitOwner")
    git_repo: str = Field(alias="gitRepo")
    git_branch: str = Field(alias="gitBranch")
    github_oauth_token: str = Field("", alias="githubOAuthToken")
    # Пары Name/Value, разобранные из envVars (порядок сохраняется).
    # excludestages сюда не попадает: его проверяют до разбора остальных опций
    environment_variables: List[EnvironmentVariable] = Field(default_factory=list)


class BranchOverride(BaseModel):
    branch: Optional[str] = None


class StageContext(BaseModel):
    """
    Активная стадия деплоя и переопределения ветки по стадиям
    (custom.<stage>.branch в serverless.yml).
    """

    stage: str
    overrides: Dict[str, BranchOverride] = Field(default_factory=dict)

    def branch_override(self) -> Optional[str]:
        override = self.overrides.get(self.stage)
        if override is None:
            return None
        return override.branch


class ResourceSummary(BaseModel):
    resources_count: int
    logical_ids: List[str]
    resource_types: List[str]
    pipeline_stages: List[str]
    # Короткое текстовое описание для лога хоста и CLI
    description: str
