"""
Pytest Configuration and Shared Fixtures.

- service_description: serverless.yml-подобное описание сервиса
- make_config: фабрика Configuration для тестов билдера
- context: ServerlessContext, который пишет лог в список
"""

import pytest

from sls_cicd.core.context import ServerlessContext
from sls_cicd.core.models import Configuration
from sls_cicd.model import EnvironmentVariable


@pytest.fixture
def service_description() -> dict:
    """Return a sample service description with CICD options."""
    return {
        "service": "orders-api",
        "provider": {"name": "aws", "stage": "dev"},
        "custom": {
            "stage": "dev",
            "cicd": {
                "gitOwner": "acme",
                "githubOAuthToken": "secret-token",
                "envVars": [{"FOO": "bar"}, {"BAZ": "qux"}],
            },
        },
    }


@pytest.fixture
def make_config():
    """Build a Configuration with sensible defaults."""

    def _make(**overrides) -> Configuration:
        values = {
            "image": "aws/codebuild/standard:7.0",
            "git_owner": "acme",
            "git_repo": "orders-api",
            "git_branch": "main",
            "github_oauth_token": "secret-token",
            "environment_variables": [],
        }
        values.update(overrides)
        return Configuration(**values)

    return _make


@pytest.fixture
def log_sink() -> list:
    return []


@pytest.fixture
def context(service_description, log_sink) -> ServerlessContext:
    return ServerlessContext(service=service_description, log=log_sink.append)


@pytest.fixture
def sample_env_vars():
    return [EnvironmentVariable(Name="FOO", Value="bar"), EnvironmentVariable(Name="BAZ", Value="qux")]
