"""Azure Blob Storage holding remote state."""

import pulumi
import pulumi_azure_native as azure_native

from config.azure import DemoConfig

from .naming import check_storage_account_prefix, storage_account_name


class StateStorage(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        config: DemoConfig,
        suffix: pulumi.Input[str],
        resource_group_name: pulumi.Input[str],
        location: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ):
        check_storage_account_prefix(config.storage_account_prefix, config.suffix_length)

        super().__init__("demo:azure:StateStorage", name, None, opts)

        self.config = config
        self._suffix = pulumi.Output.from_input(suffix)
        self._resource_group_name = pulumi.Output.from_input(resource_group_name)
        child_opts = pulumi.ResourceOptions(parent=self)

        account_name = self._suffix.apply(
            lambda s: storage_account_name(config.storage_account_prefix, s)
        )

        self.storage_account = azure_native.storage.StorageAccount(
            f"{name}-account",
            account_name=account_name,
            resource_group_name=resource_group_name,
            location=location,
            access_tier=azure_native.storage.AccessTier.HOT,
            allow_blob_public_access=False,
            minimum_tls_version=azure_native.storage.MinimumTlsVersion.TLS1_2,
            sku=azure_native.storage.SkuArgs(
                name=config.storage_sku,
            ),
            kind=azure_native.storage.Kind.STORAGE_V2,
            identity=azure_native.storage.IdentityArgs(
                type=azure_native.storage.IdentityType.SYSTEM_ASSIGNED,
            ),
            tags=config.tags(),
            opts=child_opts,
        )

        # shared key for the azblob state backend
        self.access_key = pulumi.Output.secret(
            pulumi.Output.all(self.storage_account.name, self._resource_group_name).apply(
                lambda args: (
                    azure_native.storage.list_storage_account_keys(
                        account_name=args[0],
                        resource_group_name=args[1],
                    )
                    .keys[0]
                    .value
                )
            )
        )

        # keep prior state versions around for manual recovery
        azure_native.storage.BlobServiceProperties(
            f"{name}-blob-service",
            blob_services_name="default",
            account_name=self.storage_account.name,
            resource_group_name=resource_group_name,
            is_versioning_enabled=True,
            delete_retention_policy=azure_native.storage.DeleteRetentionPolicyArgs(
                enabled=True,
                days=7,
            ),
            opts=child_opts,
        )

        self.container = azure_native.storage.BlobContainer(
            f"{name}-container",
            account_name=self.storage_account.name,
            container_name=config.state_container_name,
            resource_group_name=resource_group_name,
            public_access=azure_native.storage.PublicAccess.NONE,
            opts=child_opts,
        )

        self.register_outputs(
            {
                "account_name": self.storage_account.name,
                "container_name": self.container.name,
                "access_key": self.access_key,
            }
        )

    @property
    def account_name(self) -> pulumi.Output[str]:
        return self.storage_account.name

    @property
    def container_name(self) -> pulumi.Output[str]:
        return self.container.name

    @property
    def identity_principal_id(self) -> pulumi.Output[str]:
        return self.storage_account.identity.apply(lambda i: i.principal_id if i else None)
