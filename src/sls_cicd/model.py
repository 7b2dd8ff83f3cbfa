from pydantic import BaseModel, model_serializer
from typing import Any, Dict, List, Literal, Optional, Union


class Ref(BaseModel):
    """
    Ссылка {"Ref": <logical id>} на другой ресурс шаблона.
    """

    logical_id: str

    @model_serializer
    def ser_model(self) -> Dict[str, Any]:
        return {"Ref": self.logical_id}


class GetAtt(BaseModel):
    """
    Ссылка {"Fn::GetAtt": [<logical id>, <attribute>]} на атрибут ресурса,
    который появится только после деплоя.
    """

    logical_id: str
    attribute: str = "Arn"

    @model_serializer
    def ser_model(self) -> Dict[str, Any]:
        return {"Fn::GetAtt": [self.logical_id, self.attribute]}


# --- IAM ---


class ServicePrincipal(BaseModel):
    Service: List[str]


class PolicyStatement(BaseModel):
    Effect: Literal["Allow", "Deny"] = "Allow"
    Principal: Optional[ServicePrincipal] = None
    Action: List[str]
    Resource: Optional[str] = None


class IamPolicyDocument(BaseModel):
    Version: str
    Statement: List[PolicyStatement]


class InlinePolicy(BaseModel):
    PolicyName: str
    PolicyDocument: IamPolicyDocument


class RoleProperties(BaseModel):
    RoleName: str
    AssumeRolePolicyDocument: IamPolicyDocument
    Policies: List[InlinePolicy]


class IamRole(BaseModel):
    Type: Literal["AWS::IAM::Role"] = "AWS::IAM::Role"
    Properties: RoleProperties


# --- CodeBuild ---


class EnvironmentVariable(BaseModel):
    Name: str
    Value: str


class BuildArtifacts(BaseModel):
    Type: str = "CODEPIPELINE"
    Name: Optional[str] = None
    Packaging: Optional[str] = None


class BuildSource(BaseModel):
    Type: str = "CODEPIPELINE"


class BuildEnvironment(BaseModel):
    Type: str
    ComputeType: str
    Image: str
    EnvironmentVariables: List[EnvironmentVariable]


class ProjectProperties(BaseModel):
    Name: str
    ServiceRole: GetAtt
    Artifacts: BuildArtifacts
    Environment: BuildEnvironment
    Source: BuildSource
    TimeoutInMinutes: int


class CodeBuildProject(BaseModel):
    Type: Literal["AWS::CodeBuild::Project"] = "AWS::CodeBuild::Project"
    Properties: ProjectProperties


# --- CodePipeline ---


class ActionType(BaseModel):
    Category: str
    Owner: str
    Version: str = "1"
    Provider: str


class Artifact(BaseModel):
    Name: str


class GitHubSourceConfiguration(BaseModel):
    Owner: str
    Repo: str
    Branch: str
    OAuthToken: str


class CodeBuildActionConfiguration(BaseModel):
    ProjectName: Ref


class Action(BaseModel):
    Name: str
    ActionTypeId: ActionType
    InputArtifacts: Optional[List[Artifact]] = None
    OutputArtifacts: List[Artifact]
    Configuration: Union[GitHubSourceConfiguration, CodeBuildActionConfiguration]
    RunOrder: int = 1


class PipelineStage(BaseModel):
    Name: str
    Actions: List[Action]


class PipelineArtifactStore(BaseModel):
    Type: str = "S3"
    Location: Ref


class PipelineProperties(BaseModel):
    Name: str
    RoleArn: GetAtt
    Stages: List[PipelineStage]
    ArtifactStore: PipelineArtifactStore


class CodePipeline(BaseModel):
    Type: Literal["AWS::CodePipeline::Pipeline"] = "AWS::CodePipeline::Pipeline"
    Properties: PipelineProperties


# --- Документ целиком ---


class CICDResources(BaseModel):
    """
    Три взаимосвязанных ресурса: роль -> проект сборки -> пайплайн.
    Имена полей совпадают с логическими именами в шаблоне.
    """

    CICDRole: IamRole
    Build: CodeBuildProject
    Pipeline: CodePipeline


class ResourceDocument(BaseModel):
    Resources: CICDResources

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
