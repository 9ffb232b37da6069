"""
Pytest fixtures for the Azure demo stack.

Provides:
- Pulumi runtime mocks that record every registered resource
- Helpers to look up recorded resources by type
"""

import pulumi
import pytest

from config.azure import DemoConfig

SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000001"
CLIENT_CONFIG_SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000002"
TENANT_ID = "00000000-0000-0000-0000-0000000000aa"
SUFFIX = "a1b2c3d4"
STORAGE_KEY = "fake-storage-key=="


class DemoMocks(pulumi.runtime.Mocks):
    """Fakes the azure-native and random providers, keeping a record of resources."""

    def __init__(self):
        self.resources: list[pulumi.runtime.MockResourceArgs] = []
        # when set, the provider reports no managed identity
        self.without_identity = False

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(args)
        outputs = dict(args.inputs)
        resource_id = f"{args.name}_id"

        if args.typ == "random:index/randomString:RandomString":
            outputs["result"] = SUFFIX
        elif args.typ == "azure-native:resources:ResourceGroup":
            outputs["name"] = args.inputs["resourceGroupName"]
            resource_id = f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{outputs['name']}"
        elif args.typ == "azure-native:storage:StorageAccount":
            outputs["name"] = args.inputs["accountName"]
            outputs["identity"] = None if self.without_identity else {
                **args.inputs.get("identity", {}),
                "principalId": "storage-principal",
                "tenantId": TENANT_ID,
            }
        elif args.typ == "azure-native:storage:BlobContainer":
            outputs["name"] = args.inputs["containerName"]
        elif args.typ == "azure-native:web:WebApp":
            outputs["defaultHostName"] = f"{args.inputs['name']}.azurewebsites.net"
            outputs["identity"] = None if self.without_identity else {
                **args.inputs.get("identity", {}),
                "principalId": "app-principal",
                "tenantId": TENANT_ID,
            }

        return [resource_id, outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if args.token == "azure-native:authorization:getClientConfig":
            return {
                "clientId": "client",
                "objectId": "object",
                "subscriptionId": CLIENT_CONFIG_SUBSCRIPTION_ID,
                "tenantId": TENANT_ID,
            }
        if args.token == "azure-native:storage:listStorageAccountKeys":
            return {
                "keys": [
                    {
                        "keyName": "key1",
                        "value": STORAGE_KEY,
                        "permissions": "FULL",
                        "creationTime": "2026-01-01T00:00:00Z",
                    }
                ]
            }
        return {}

    def of_type(self, typ: str) -> list[pulumi.runtime.MockResourceArgs]:
        return [r for r in self.resources if r.typ == typ]


MOCKS = DemoMocks()
pulumi.runtime.set_mocks(MOCKS, project="azure-demo", stack="dev", preview=False)


@pytest.fixture
def mocks():
    MOCKS.resources.clear()
    MOCKS.without_identity = False
    yield MOCKS
    MOCKS.resources.clear()
    MOCKS.without_identity = False


@pytest.fixture
def demo_config():
    return DemoConfig(subscription_id=SUBSCRIPTION_ID)
