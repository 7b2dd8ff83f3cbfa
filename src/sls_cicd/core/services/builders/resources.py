from typing import List

from sls_cicd.core.config import (
    BUILD_COMPUTE_TYPE,
    BUILD_ENVIRONMENT_TYPE,
    BUILD_LOGICAL_ID,
    BUILD_TIMEOUT_MINUTES,
    DEPLOYMENT_BUCKET_LOGICAL_ID,
    PIPELINE_LOGICAL_ID,
    POLICY_VERSION,
    ROLE_LOGICAL_ID,
    ROLE_POLICY_ACTIONS,
    STAGE_ENV_VAR,
    TRUSTED_SERVICES,
)
from sls_cicd.core.models import Configuration, ResourceSummary
from sls_cicd.model import (
    Action,
    ActionType,
    Artifact,
    BuildArtifacts,
    BuildEnvironment,
    BuildSource,
    CICDResources,
    CodeBuildActionConfiguration,
    CodeBuildProject,
    CodePipeline,
    EnvironmentVariable,
    GetAtt,
    GitHubSourceConfiguration,
    IamPolicyDocument,
    IamRole,
    InlinePolicy,
    PipelineArtifactStore,
    PipelineProperties,
    PipelineStage,
    PolicyStatement,
    ProjectProperties,
    Ref,
    ResourceDocument,
    RoleProperties,
    ServicePrincipal,
)


def _resource_name(service_name: str, stage: str) -> str:
    return f"{service_name}-{stage}"


def _role_arn() -> GetAtt:
    return GetAtt(logical_id=ROLE_LOGICAL_ID, attribute="Arn")


def build_role(service_name: str, stage: str) -> IamRole:
    """
    Роль, которую принимают и CodePipeline, и CodeBuild.

    Набор прав фиксированный и широкий (Resource "*"): он не выводится
    из того, какие действия реально выполняет пайплайн.
    """
    name = _resource_name(service_name, stage)

    trust = IamPolicyDocument(
        Version=POLICY_VERSION,
        Statement=[
            PolicyStatement(
                Principal=ServicePrincipal(Service=[service]),
                Action=["sts:AssumeRole"],
            )
            for service in TRUSTED_SERVICES
        ],
    )

    policy = InlinePolicy(
        PolicyName=name,
        PolicyDocument=IamPolicyDocument(
            Version=POLICY_VERSION,
            Statement=[
                PolicyStatement(Action=list(ROLE_POLICY_ACTIONS), Resource="*"),
            ],
        ),
    )

    return IamRole(
        Properties=RoleProperties(
            RoleName=name,
            AssumeRolePolicyDocument=trust,
            Policies=[policy],
        )
    )


def build_project(service_name: str, stage: str, config: Configuration) -> CodeBuildProject:
    """
    Проект CodeBuild. Переменная STAGE всегда первая, за ней envVars в исходном порядке.
    """
    name = _resource_name(service_name, stage)

    env_vars: List[EnvironmentVariable] = [
        EnvironmentVariable(Name=STAGE_ENV_VAR, Value=stage),
    ]
    env_vars.extend(config.environment_variables)

    return CodeBuildProject(
        Properties=ProjectProperties(
            Name=name,
            ServiceRole=_role_arn(),
            Artifacts=BuildArtifacts(
                Type="CODEPIPELINE",
                Name=f"{name}-build",
                Packaging="NONE",
            ),
            Environment=BuildEnvironment(
                Type=BUILD_ENVIRONMENT_TYPE,
                ComputeType=BUILD_COMPUTE_TYPE,
                Image=config.image,
                EnvironmentVariables=env_vars,
            ),
            Source=BuildSource(Type="CODEPIPELINE"),
            TimeoutInMinutes=BUILD_TIMEOUT_MINUTES,
        )
    )


def _source_stage(service_name: str, config: Configuration) -> PipelineStage:
    return PipelineStage(
        Name="Source",
        Actions=[
            Action(
                Name="Source",
                ActionTypeId=ActionType(
                    Category="Source",
                    Owner="ThirdParty",
                    Version="1",
                    Provider="GitHub",
                ),
                OutputArtifacts=[Artifact(Name=service_name)],
                Configuration=GitHubSourceConfiguration(
                    Owner=config.git_owner,
                    Repo=config.git_repo,
                    Branch=config.git_branch,
                    OAuthToken=config.github_oauth_token,
                ),
                RunOrder=1,
            )
        ],
    )


def _build_stage(service_name: str) -> PipelineStage:
    # Артефакт <service>Build пока никто не потребляет, но имя оставляем:
    # на него могут ссылаться внешние стадии деплоя
    return PipelineStage(
        Name="Build",
        Actions=[
            Action(
                Name="CodeBuild",
                ActionTypeId=ActionType(
                    Category="Build",
                    Owner="AWS",
                    Version="1",
                    Provider="CodeBuild",
                ),
                InputArtifacts=[Artifact(Name=service_name)],
                OutputArtifacts=[Artifact(Name=f"{service_name}Build")],
                Configuration=CodeBuildActionConfiguration(
                    ProjectName=Ref(logical_id=BUILD_LOGICAL_ID),
                ),
                RunOrder=1,
            )
        ],
    )


def build_pipeline(service_name: str, stage: str, config: Configuration) -> CodePipeline:
    """
    Пайплайн из двух стадий: Source (GitHub) -> Build (CodeBuild).
    Артефакты хранятся в бакете деплоя, который создаёт хост.
    """
    return CodePipeline(
        Properties=PipelineProperties(
            Name=_resource_name(service_name, stage),
            RoleArn=_role_arn(),
            Stages=[
                _source_stage(service_name, config),
                _build_stage(service_name),
            ],
            ArtifactStore=PipelineArtifactStore(
                Type="S3",
                Location=Ref(logical_id=DEPLOYMENT_BUCKET_LOGICAL_ID),
            ),
        )
    )


def build_resources(service_name: str, stage: str, config: Configuration) -> ResourceDocument:
    """
    Строим документ {Resources: {CICDRole, Build, Pipeline}}.

    Функция чистая: без I/O и логов, одинаковый вход даёт одинаковый выход.
    """
    return ResourceDocument(
        Resources=CICDResources(
            CICDRole=build_role(service_name, stage),
            Build=build_project(service_name, stage, config),
            Pipeline=build_pipeline(service_name, stage, config),
        )
    )


def summarize_resources(document: ResourceDocument) -> ResourceSummary:
    """
    Краткое резюме документа для лога хоста и CLI.
    """
    resources = document.to_dict()["Resources"]
    logical_ids = list(resources.keys())
    resource_types = [resource["Type"] for resource in resources.values()]
    pipeline_stages = [
        stage["Name"] for stage in resources[PIPELINE_LOGICAL_ID]["Properties"]["Stages"]
    ]

    description = (
        f"Сгенерировано {len(logical_ids)} ресурсов: {', '.join(logical_ids)}; "
        f"стадии пайплайна: {' -> '.join(pipeline_stages)}."
    )

    return ResourceSummary(
        resources_count=len(logical_ids),
        logical_ids=logical_ids,
        resource_types=resource_types,
        pipeline_stages=pipeline_stages,
        description=description,
    )
