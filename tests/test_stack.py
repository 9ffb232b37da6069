"""Resource wiring of the root stack, checked against the Pulumi mocks."""

import pulumi
import pytest

from config.azure import DemoConfig
from pulumi_azure_demo import (
    AzureDemoStack,
    InvalidResourceName,
    UnknownRoleError,
    role_definition_id,
)

from .conftest import CLIENT_CONFIG_SUBSCRIPTION_ID, STORAGE_KEY, SUBSCRIPTION_ID, SUFFIX

RESOURCE_GROUP_ID = f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/demo-resources"


def _settled(stack: AzureDemoStack) -> pulumi.Output:
    """Resolves once every custom resource in the stack has been registered."""
    return pulumi.Output.all(
        stack.resource_group.id,
        stack.storage.storage_account.id,
        stack.storage.container.id,
        stack.app_service.plan.id,
        stack.app_service.web_app.id,
        stack.access.role_assignment.id,
        stack.backend_url,
    )


@pulumi.runtime.test
def test_one_of_each_resource_in_demo_resources(mocks, demo_config):
    stack = AzureDemoStack("demo", demo_config)

    def check(_):
        for typ in (
            "azure-native:resources:ResourceGroup",
            "azure-native:storage:StorageAccount",
            "azure-native:storage:BlobContainer",
            "azure-native:web:AppServicePlan",
            "azure-native:web:WebApp",
            "azure-native:authorization:RoleAssignment",
            "random:index/randomString:RandomString",
        ):
            assert len(mocks.of_type(typ)) == 1, typ

        [rg] = mocks.of_type("azure-native:resources:ResourceGroup")
        assert rg.inputs["resourceGroupName"] == "demo-resources"
        assert rg.inputs["location"] == "centralus"

        scoped = (
            "azure-native:storage:StorageAccount",
            "azure-native:storage:BlobContainer",
            "azure-native:storage:BlobServiceProperties",
            "azure-native:web:AppServicePlan",
            "azure-native:web:WebApp",
        )
        for typ in scoped:
            for res in mocks.of_type(typ):
                assert res.inputs["resourceGroupName"] == "demo-resources", typ

    return _settled(stack).apply(check)


@pulumi.runtime.test
def test_suffix_is_lowercase_alphanumeric(mocks, demo_config):
    stack = AzureDemoStack("demo", demo_config)

    def check(_):
        [suffix] = mocks.of_type("random:index/randomString:RandomString")
        assert suffix.inputs["length"] == 8
        assert suffix.inputs["upper"] is False
        assert suffix.inputs["special"] is False
        assert suffix.inputs["lower"] is True
        assert suffix.inputs["numeric"] is True

    return _settled(stack).apply(check)


@pulumi.runtime.test
def test_storage_account_name_uses_suffix(mocks, demo_config):
    stack = AzureDemoStack("demo", demo_config)

    def check(args):
        account_name, container_name = args
        assert account_name == f"demostrgacnt{SUFFIX}"
        assert len(account_name) == 20
        assert container_name == "tfstate"

        [account] = mocks.of_type("azure-native:storage:StorageAccount")
        assert account.inputs["sku"] == {"name": "Standard_LRS"}
        assert account.inputs["kind"] == "StorageV2"
        assert account.inputs["identity"] == {"type": "SystemAssigned"}
        assert account.inputs["allowBlobPublicAccess"] is False

        [container] = mocks.of_type("azure-native:storage:BlobContainer")
        assert container.inputs["publicAccess"] == "None"

    return pulumi.Output.all(
        stack.storage.account_name, stack.storage.container_name, _settled(stack)
    ).apply(lambda args: check(args[:2]))


@pulumi.runtime.test
def test_app_service_runs_on_plan_with_system_identity(mocks, demo_config):
    stack = AzureDemoStack("demo", demo_config)

    def check(args):
        plan_id, host_name = args
        [plan] = mocks.of_type("azure-native:web:AppServicePlan")
        assert plan.inputs["name"] == "demo-appserviceplan"
        assert plan.inputs["sku"] == {"name": "S1", "tier": "Standard"}

        [app] = mocks.of_type("azure-native:web:WebApp")
        assert app.inputs["name"] == f"demo-appservice-{SUFFIX}"
        assert app.inputs["serverFarmId"] == plan_id
        assert app.inputs["identity"] == {"type": "SystemAssigned"}
        assert app.inputs["siteConfig"]["appSettings"] == [
            {"name": "SCM_DO_BUILD_DURING_DEPLOYMENT", "value": "true"}
        ]
        assert host_name == f"demo-appservice-{SUFFIX}.azurewebsites.net"

    return pulumi.Output.all(
        stack.app_service.plan_id, stack.app_service.default_host_name, _settled(stack)
    ).apply(lambda args: check(args[:2]))


@pulumi.runtime.test
def test_role_assignment_targets_app_identity_on_resource_group(mocks, demo_config):
    stack = AzureDemoStack("demo", demo_config)

    def check(_):
        [assignment] = mocks.of_type("azure-native:authorization:RoleAssignment")
        assert assignment.inputs["principalId"] == "app-principal"
        assert assignment.inputs["principalType"] == "ServicePrincipal"
        assert assignment.inputs["scope"] == RESOURCE_GROUP_ID
        assert assignment.inputs["roleDefinitionId"] == role_definition_id(
            SUBSCRIPTION_ID, "Contributor"
        )

        # the assignment could only be registered once the app identity resolved
        types = [r.typ for r in mocks.resources]
        assert types.index("azure-native:web:WebApp") < types.index(
            "azure-native:authorization:RoleAssignment"
        )

    return _settled(stack).apply(check)


@pulumi.runtime.test
def test_subscription_falls_back_to_client_config(mocks):
    from config.azure import DemoConfig

    stack = AzureDemoStack("demo", DemoConfig())

    def check(_):
        [assignment] = mocks.of_type("azure-native:authorization:RoleAssignment")
        assert assignment.inputs["roleDefinitionId"].startswith(
            f"/subscriptions/{CLIENT_CONFIG_SUBSCRIPTION_ID}/"
        )

    return _settled(stack).apply(check)


@pulumi.runtime.test
def test_backend_points_at_state_storage(mocks, demo_config):
    stack = AzureDemoStack("demo", demo_config)

    def check(backend):
        assert backend.resource_group_name == "demo-resources"
        assert backend.storage_account_name == f"demostrgacnt{SUFFIX}"
        assert backend.container_name == "tfstate"
        assert backend.key == "demo.tfstate"
        assert backend.url == f"azblob://tfstate/demo?storage_account=demostrgacnt{SUFFIX}"

    return pulumi.Output.all(stack.backend, _settled(stack)).apply(lambda args: check(args[0]))


@pytest.mark.parametrize(
    "overrides",
    [
        {"storage_account_prefix": "Demo_Strg"},
        {"suffix_length": 16},
        {"storage_account_prefix": "demostrgacnt", "suffix_length": 13},
    ],
)
def test_bad_storage_account_name_fails_before_any_resource(mocks, overrides):
    config = DemoConfig(subscription_id=SUBSCRIPTION_ID, **overrides)

    with pytest.raises(InvalidResourceName) as exc:
        AzureDemoStack("demo", config)

    assert exc.value.kind == "storage account"
    assert mocks.resources == []


def test_unknown_role_fails_before_any_resource(mocks):
    config = DemoConfig(subscription_id=SUBSCRIPTION_ID, role_definition_name="Janitor")

    with pytest.raises(UnknownRoleError):
        AzureDemoStack("demo", config)

    assert mocks.resources == []


@pulumi.runtime.test
def test_storage_access_key_is_exposed(mocks, demo_config):
    stack = AzureDemoStack("demo", demo_config)

    def check(key):
        assert key == STORAGE_KEY

    return pulumi.Output.all(stack.storage.access_key, _settled(stack)).apply(
        lambda args: check(args[0])
    )


@pulumi.runtime.test
def test_missing_identity_gives_none_for_both_principals(mocks, demo_config):
    mocks.without_identity = True
    stack = AzureDemoStack("demo", demo_config)

    def check(args):
        storage_principal, app_principal = args[0], args[1]
        assert storage_principal is None
        assert app_principal is None

    return pulumi.Output.all(
        stack.storage.identity_principal_id, stack.app_service.principal_id, _settled(stack)
    ).apply(check)
