"""Tests for the lifecycle hook handler."""

import copy
import json

import pytest

from sls_cicd import CICDPlugin, ConfigurationError, ServerlessContext
from sls_cicd.core.config import PACKAGE_HOOK


class TestHookRegistration:
    def test_registers_package_hook(self, context):
        plugin = CICDPlugin(context)

        assert list(plugin.hooks) == ["before:package:initialize"]
        assert plugin.hooks[PACKAGE_HOOK] == plugin.create_pipeline


class TestStageResolution:
    def test_option_beats_custom_stage(self, context):
        assert CICDPlugin(context, {"stage": "prod"}).stage == "prod"

    def test_custom_stage(self, context):
        assert CICDPlugin(context).stage == "dev"

    def test_provider_stage(self, service_description, log_sink):
        del service_description["custom"]["stage"]
        service_description["provider"]["stage"] = "qa"
        context = ServerlessContext(service=service_description, log=log_sink.append)

        assert CICDPlugin(context).stage == "qa"

    def test_default_stage(self, log_sink):
        context = ServerlessContext(service={"service": "orders-api"}, log=log_sink.append)
        assert CICDPlugin(context).stage == "dev"


class TestCreatePipeline:
    def test_merges_resources(self, context, service_description, log_sink):
        """Hook adds the three resources to the service description."""
        plugin = CICDPlugin(context)

        assert plugin.create_pipeline() is True

        resources = service_description["resources"]["Resources"]
        assert list(resources) == ["CICDRole", "Build", "Pipeline"]
        assert log_sink[0] == "Updating CICD Resources..."
        assert log_sink[-1] == "CICD Resources Updated"
        assert plugin.summary is not None

    def test_environment_propagation(self, context, service_description):
        CICDPlugin(context).create_pipeline()

        build = service_description["resources"]["Resources"]["Build"]
        assert build["Properties"]["Environment"]["EnvironmentVariables"] == [
            {"Name": "STAGE", "Value": "dev"},
            {"Name": "FOO", "Value": "bar"},
            {"Name": "BAZ", "Value": "qux"},
        ]

    def test_keeps_existing_resources(self, context, service_description):
        service_description["resources"] = {
            "Resources": {"OrdersTable": {"Type": "AWS::DynamoDB::Table", "Properties": {}}},
            "Outputs": {"TableName": {"Value": {"Ref": "OrdersTable"}}},
        }

        CICDPlugin(context).create_pipeline()

        resources = service_description["resources"]
        assert set(resources["Resources"]) == {"OrdersTable", "CICDRole", "Build", "Pipeline"}
        assert "Outputs" in resources

    def test_excluded_stage_is_skipped(self, context, service_description, log_sink):
        """Excluded stage leaves the service description untouched."""
        service_description["custom"]["cicd"]["excludestages"] = ["dev"]
        before = copy.deepcopy(service_description)

        assert CICDPlugin(context).create_pipeline() is False

        assert service_description == before
        assert log_sink == ["CICD is ignored for dev stage"]

    def test_excluded_stage_skips_validation(self, context, service_description):
        service_description["custom"]["cicd"]["excludestages"] = ["dev"]
        service_description["custom"]["cicd"]["envVars"] = [{"A": "1", "B": "2"}]

        assert CICDPlugin(context).create_pipeline() is False

    def test_other_stage_not_skipped(self, context, service_description):
        service_description["custom"]["cicd"]["excludestages"] = ["local"]

        assert CICDPlugin(context, {"stage": "prod"}).create_pipeline() is True
        assert "Pipeline" in service_description["resources"]["Resources"]

    def test_malformed_env_vars_no_partial_merge(self, context, service_description):
        service_description["custom"]["cicd"]["envVars"] = [{"A": "1", "B": "2"}]
        before = copy.deepcopy(service_description)

        with pytest.raises(ConfigurationError):
            CICDPlugin(context).create_pipeline()

        assert service_description == before

    @pytest.mark.parametrize("value", [{}, ""])
    def test_empty_non_list_env_vars_rejected(self, context, service_description, value):
        service_description["custom"]["cicd"]["envVars"] = value
        before = copy.deepcopy(service_description)

        with pytest.raises(ConfigurationError):
            CICDPlugin(context).create_pipeline()

        assert service_description == before

    def test_excluded_stages_scalar_rejected(self, context, service_description):
        service_description["custom"]["cicd"]["excludestages"] = 5

        with pytest.raises(ConfigurationError):
            CICDPlugin(context).create_pipeline()

        assert "resources" not in service_description

    def test_configuration_error_logs_kept(self, context, service_description):
        """Logs collected during resolution stay on the plugin."""
        service_description["custom"]["cicd"]["envVars"] = [{"A": "1", "B": "2"}]
        plugin = CICDPlugin(context)

        with pytest.raises(ConfigurationError):
            plugin.create_pipeline()

        assert any("envVars" in line for line in plugin.logs)
        assert plugin.warnings

    def test_second_run_does_not_duplicate(self, context, service_description):
        """Running the hook twice gives the same resources as running it once."""
        CICDPlugin(context).create_pipeline()
        first = copy.deepcopy(service_description["resources"])

        CICDPlugin(context).create_pipeline()

        resources = service_description["resources"]["Resources"]
        assert service_description["resources"] == first
        assert len(resources["Pipeline"]["Properties"]["Stages"]) == 2
        assert len(resources["Build"]["Properties"]["Environment"]["EnvironmentVariables"]) == 3
        assert len(resources["CICDRole"]["Properties"]["Policies"]) == 1

    def test_existing_build_resource_replaced_lists(self, context, service_description):
        service_description["resources"] = {
            "Resources": {
                "Build": {
                    "Type": "AWS::CodeBuild::Project",
                    "Properties": {
                        "Environment": {
                            "EnvironmentVariables": [{"Name": "OLD", "Value": "1"}],
                        },
                        "Tags": [{"Key": "team", "Value": "orders"}],
                    },
                }
            }
        }

        CICDPlugin(context).create_pipeline()

        properties = service_description["resources"]["Resources"]["Build"]["Properties"]
        assert [v["Name"] for v in properties["Environment"]["EnvironmentVariables"]] == [
            "STAGE",
            "FOO",
            "BAZ",
        ]
        assert properties["Tags"] == [{"Key": "team", "Value": "orders"}]

    def test_branch_override_for_stage(self, context, service_description):
        service_description["custom"]["cicd"]["gitBranch"] = "develop"
        service_description["custom"]["prod"] = {"branch": "release"}

        CICDPlugin(context, {"stage": "prod"}).create_pipeline()

        pipeline = service_description["resources"]["Resources"]["Pipeline"]
        source = pipeline["Properties"]["Stages"][0]["Actions"][0]["Configuration"]
        assert source["Branch"] == "release"
        assert pipeline["Properties"]["Name"] == "orders-api-prod"

    def test_missing_cicd_block_uses_defaults(self, log_sink):
        service = {"service": "orders-api", "custom": {"stage": "dev"}}
        plugin = CICDPlugin(ServerlessContext(service=service, log=log_sink.append))

        assert plugin.create_pipeline() is True

        source = service["resources"]["Resources"]["Pipeline"]["Properties"]["Stages"][0]
        configuration = source["Actions"][0]["Configuration"]
        assert configuration["Repo"] == "orders-api"
        assert configuration["Branch"] == "main"
        assert len(plugin.warnings) == 2


class TestGenerateResources:
    def test_does_not_mutate_service(self, context, service_description):
        before = copy.deepcopy(service_description)

        document = CICDPlugin(context).generate_resources()

        assert service_description == before
        assert list(document["Resources"]) == ["CICDRole", "Build", "Pipeline"]

    def test_repeatable(self, context):
        plugin = CICDPlugin(context)

        first = json.dumps(plugin.generate_resources())
        second = json.dumps(plugin.generate_resources())

        assert first == second
