"""AzureDemoStack - root component wiring the demo deployment together."""

import pulumi
from pulumi_azure_native import authorization, resources

from config.azure import DemoConfig

from .access import AppServiceAccess, resolve_role
from .app_service import AppService
from .backend import StateBackend
from .naming import app_service_name, check_storage_account_prefix, random_suffix
from .storage import StateStorage


class AzureDemoStack(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        config: DemoConfig,
        opts: pulumi.ResourceOptions | None = None,
    ):
        # globally unique names must be valid for any suffix before anything is registered
        check_storage_account_prefix(config.storage_account_prefix, config.suffix_length)
        app_service_name(config.app_service.name_prefix, "0" * config.suffix_length)
        resolve_role(config.role_definition_name)

        super().__init__("demo:azure:AzureDemoStack", name, None, opts)

        self._config = config
        child_opts = pulumi.ResourceOptions(parent=self)

        if config.subscription_id:
            subscription_id: pulumi.Input[str] = config.subscription_id
        else:
            pulumi.log.warn(
                "subscription_id not configured, using the provider's client config",
                resource=self,
            )
            subscription_id = authorization.get_client_config_output().subscription_id

        # phase 1: naming
        self._suffix = random_suffix(
            f"{name}-suffix", length=config.suffix_length, opts=child_opts
        )
        suffix = self._suffix.result

        # phase 2: resource group
        self.resource_group = resources.ResourceGroup(
            f"{name}-rg",
            resource_group_name=config.resource_group_name,
            location=config.location,
            tags=config.tags(),
            opts=child_opts,
        )
        rg_name = self.resource_group.name
        location = self.resource_group.location

        # phase 3: state storage
        self._storage = StateStorage(
            f"{name}-state",
            config,
            suffix=suffix,
            resource_group_name=rg_name,
            location=location,
            opts=child_opts,
        )

        # phase 4: compute
        self._app_service = AppService(
            f"{name}-app",
            config,
            suffix=suffix,
            resource_group_name=rg_name,
            location=location,
            opts=child_opts,
        )

        # phase 5: access. principal_id is an app output, so the app is created first
        self._access = AppServiceAccess(
            f"{name}-access",
            principal_id=self._app_service.principal_id,
            scope=self.resource_group.id,
            subscription_id=subscription_id,
            role=config.role_definition_name,
            opts=child_opts,
        )

        # backend target for the state this stack will migrate into
        self._backend = StateBackend.from_outputs(
            resource_group_name=rg_name,
            storage_account_name=self._storage.account_name,
            container_name=self._storage.container_name,
            key=config.state_key,
        )
        self._backend_url = self._backend.apply(lambda b: b.url)
        self._backend_url.apply(lambda url: pulumi.log.info(f"State backend target: {url}"))

        self.register_outputs(
            {
                "resource_group_name": rg_name,
                "location": location,
                "storage_account_name": self._storage.account_name,
                "storage_account_key": self._storage.access_key,
                "container_name": self._storage.container_name,
                "app_service_name": self._app_service.app_name,
                "default_host_name": self._app_service.default_host_name,
                "principal_id": self._app_service.principal_id,
                "backend_url": self._backend_url,
            }
        )

    @property
    def config(self) -> DemoConfig:
        return self._config

    @property
    def suffix(self) -> pulumi.Output[str]:
        return self._suffix.result

    @property
    def storage(self) -> StateStorage:
        return self._storage

    @property
    def app_service(self) -> AppService:
        return self._app_service

    @property
    def access(self) -> AppServiceAccess:
        return self._access

    @property
    def backend(self) -> pulumi.Output[StateBackend]:
        return self._backend

    @property
    def backend_url(self) -> pulumi.Output[str]:
        return self._backend_url
