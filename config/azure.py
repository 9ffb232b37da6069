"""Azure-specific configuration for the demo stack."""

import os
from typing import Optional

import pulumi
from pydantic import BaseModel, Field

from .base import BaseConfig


class AppServicePlanConfig(BaseModel):
    name: str = Field(default="demo-appserviceplan", min_length=1)
    sku_tier: str = "Standard"
    sku_size: str = "S1"
    # linux plans must be reserved
    reserved: bool = True


class AppServiceConfig(BaseModel):
    name_prefix: str = Field(default="demo-appservice", min_length=1)
    https_only: bool = True
    linux_fx_version: str = "PYTHON|3.12"
    app_settings: dict[str, str] = Field(
        default_factory=lambda: {"SCM_DO_BUILD_DURING_DEPLOYMENT": "true"}
    )


class DemoConfig(BaseConfig):
    """
    Main configuration for the demo deployment.

    Every value has a default so an empty stack config deploys the
    canonical demo-resources layout.
    """

    subscription_id: str = ""

    resource_group_name: str = Field(default="demo-resources", min_length=1)

    # remote state storage
    storage_account_prefix: str = Field(default="demostrgacnt", min_length=1)
    state_container_name: str = Field(default="tfstate", min_length=1)
    state_key: str = Field(default="demo.tfstate", min_length=1)
    storage_sku: str = "Standard_LRS"

    suffix_length: int = Field(default=8, ge=1)

    app_service_plan: AppServicePlanConfig = Field(default_factory=AppServicePlanConfig)
    app_service: AppServiceConfig = Field(default_factory=AppServiceConfig)

    # built-in role name or role definition GUID
    role_definition_name: str = "Contributor"

    @classmethod
    def from_pulumi(cls, config: Optional[pulumi.Config] = None) -> "DemoConfig":
        """Load configuration from Pulumi config."""
        config = config or pulumi.Config()

        subscription_id = (
            config.get("subscription_id") or os.environ.get("ARM_SUBSCRIPTION_ID") or ""
        )

        plan_raw = config.get_object("app_service_plan") or {}
        app_raw = config.get_object("app_service") or {}

        values = {
            "subscription_id": subscription_id,
            "location": config.get("location"),
            "environment": config.get("environment"),
            "resource_group_name": config.get("resource_group_name"),
            "storage_account_prefix": config.get("storage_account_prefix"),
            "state_container_name": config.get("state_container_name"),
            "state_key": config.get("state_key"),
            "storage_sku": config.get("storage_sku"),
            "suffix_length": config.get_int("suffix_length"),
            "role_definition_name": config.get("role_definition_name"),
            "custom_tags": config.get_object("tags"),
        }
        # unset keys fall back to the model defaults
        values = {k: v for k, v in values.items() if v is not None}

        return cls(
            app_service_plan=AppServicePlanConfig(**plan_raw),
            app_service=AppServiceConfig(**app_raw),
            **values,
        )

