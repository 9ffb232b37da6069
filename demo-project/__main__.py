"""Azure demo deployment."""

import pulumi
from config.azure import DemoConfig
from pulumi_azure_demo import AzureDemoStack

config = DemoConfig.from_pulumi()

stack = AzureDemoStack("demo", config)

pulumi.export("resource_group_name", stack.resource_group.name)
pulumi.export("location", stack.resource_group.location)
pulumi.export("storage_account_name", stack.storage.account_name)
pulumi.export("container_name", stack.storage.container_name)
pulumi.export("state_key", config.state_key)
pulumi.export("app_service_name", stack.app_service.app_name)
pulumi.export("default_host_name", stack.app_service.default_host_name)
pulumi.export("principal_id", stack.app_service.principal_id)
pulumi.export("backend_url", stack.backend_url)
pulumi.export("storage_account_key", stack.storage.access_key)
