import os

"""
Базовые значения по умолчанию и фиксированные параметры генерируемых ресурсов.

Образ сборки по умолчанию можно переопределить переменной окружения
SLS_CICD_DEFAULT_IMAGE.
"""

DEFAULT_BASE_IMAGE = os.getenv(
    "SLS_CICD_DEFAULT_IMAGE", "aws/codebuild/amazonlinux2-x86_64-standard:3.0"
)
DEFAULT_BRANCH = "main"
DEFAULT_STAGE = "dev"

# Хук хоста, на котором плагин добавляет ресурсы
PACKAGE_HOOK = "before:package:initialize"

# Ключ секции custom, в которой лежат опции плагина
CUSTOM_KEY = "cicd"

# Логические имена ресурсов внутри документа
ROLE_LOGICAL_ID = "CICDRole"
BUILD_LOGICAL_ID = "Build"
PIPELINE_LOGICAL_ID = "Pipeline"

# Бакет деплоя создаёт сам хост, мы только ссылаемся на него
DEPLOYMENT_BUCKET_LOGICAL_ID = "ServerlessDeploymentBucket"

POLICY_VERSION = "2012-10-17"
TRUSTED_SERVICES = ["codepipeline.amazonaws.com", "codebuild.amazonaws.com"]

# Фиксированный набор прав роли, не зависит от действий пайплайна
ROLE_POLICY_ACTIONS = [
    "cloudformation:DescribeStacks",
    "cloudformation:DescribeStackResource",
    "s3:ListBucket",
    "s3:GetObject",
    "s3:GetObjectVersion",
    "lambda:GetFunction",
    "sts:GetCallerIdentity",
    "s3:PutObject",
    "cloudformation:ValidateTemplate",
    "cloudformation:UpdateStack",
    "cloudformation:DescribeStackEvents",
    "cloudformation:ListStackResources",
]

BUILD_COMPUTE_TYPE = "BUILD_GENERAL1_SMALL"
BUILD_ENVIRONMENT_TYPE = "LINUX_CONTAINER"
BUILD_TIMEOUT_MINUTES = 60
STAGE_ENV_VAR = "STAGE"
