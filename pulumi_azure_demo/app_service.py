"""App Service Plan and App Service with a system-assigned identity."""

import pulumi
from pulumi_azure_native import web

from config.azure import DemoConfig

from .naming import app_service_name


class AppService(pulumi.ComponentResource):
    def __init__(
        self,
        name: str,
        config: DemoConfig,
        suffix: pulumi.Input[str],
        resource_group_name: pulumi.Input[str],
        location: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("demo:azure:AppService", name, None, opts)

        self.config = config
        self._suffix = pulumi.Output.from_input(suffix)
        child_opts = pulumi.ResourceOptions(parent=self)
        plan_config = config.app_service_plan
        app_config = config.app_service

        self.plan = web.AppServicePlan(
            f"{name}-plan",
            name=plan_config.name,
            resource_group_name=resource_group_name,
            location=location,
            kind="linux" if plan_config.reserved else "app",
            reserved=plan_config.reserved,
            sku=web.SkuDescriptionArgs(
                name=plan_config.sku_size,
                tier=plan_config.sku_tier,
            ),
            tags=config.tags(),
            opts=child_opts,
        )

        # app service hostnames are global, so the name carries the suffix
        self.web_app = web.WebApp(
            f"{name}-app",
            name=self._suffix.apply(lambda s: app_service_name(app_config.name_prefix, s)),
            resource_group_name=resource_group_name,
            location=location,
            server_farm_id=self.plan.id,
            https_only=app_config.https_only,
            identity=web.ManagedServiceIdentityArgs(
                type=web.ManagedServiceIdentityType.SYSTEM_ASSIGNED,
            ),
            site_config=web.SiteConfigArgs(
                linux_fx_version=app_config.linux_fx_version if plan_config.reserved else None,
                app_settings=[
                    web.NameValuePairArgs(name=key, value=value)
                    for key, value in sorted(app_config.app_settings.items())
                ],
            ),
            tags=config.tags(),
            opts=child_opts,
        )

        # principal id only exists once azure has created the site identity
        self._principal_id = self.web_app.identity.apply(
            lambda identity: identity.principal_id if identity else None
        )

        self.register_outputs(
            {
                "plan_id": self.plan.id,
                "app_name": self.web_app.name,
                "default_host_name": self.web_app.default_host_name,
                "principal_id": self._principal_id,
            }
        )

    @property
    def plan_id(self) -> pulumi.Output[str]:
        return self.plan.id

    @property
    def app_name(self) -> pulumi.Output[str]:
        return self.web_app.name

    @property
    def default_host_name(self) -> pulumi.Output[str]:
        return self.web_app.default_host_name

    @property
    def principal_id(self) -> pulumi.Output[str]:
        return self._principal_id
