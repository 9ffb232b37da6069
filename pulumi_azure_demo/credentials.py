"""
Credential checks for the Azure provider and the Pulumi service.

The azure-native provider authenticates as a service principal from the
ARM_* environment variables. PULUMI_ACCESS_TOKEN is only needed when runs are
coordinated through the Pulumi service.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

REQUIRED_AZURE_ENV_VARS = [
    "ARM_CLIENT_ID",
    "ARM_CLIENT_SECRET",
    "ARM_SUBSCRIPTION_ID",
    "ARM_TENANT_ID",
]

PULUMI_TOKEN_ENV_VAR = "PULUMI_ACCESS_TOKEN"

# the azblob state backend reads the azure SDK names, not the provider ones
SDK_ENV_VAR_MAP = {
    "ARM_CLIENT_ID": "AZURE_CLIENT_ID",
    "ARM_CLIENT_SECRET": "AZURE_CLIENT_SECRET",
    "ARM_TENANT_ID": "AZURE_TENANT_ID",
}


class MissingCredentialsError(Exception):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"missing Azure credentials: {', '.join(missing)}")


@dataclass
class CredentialStatus:
    missing: list[str] = field(default_factory=list)
    has_pulumi_token: bool = False

    @property
    def ok(self) -> bool:
        return not self.missing


def check_azure_credentials(env: Optional[Mapping[str, str]] = None) -> CredentialStatus:
    env = os.environ if env is None else env
    return CredentialStatus(
        missing=[name for name in REQUIRED_AZURE_ENV_VARS if not env.get(name)],
        has_pulumi_token=bool(env.get(PULUMI_TOKEN_ENV_VAR)),
    )


def require_azure_credentials(env: Optional[Mapping[str, str]] = None) -> CredentialStatus:
    status = check_azure_credentials(env)
    if not status.ok:
        raise MissingCredentialsError(status.missing)
    return status


def service_principal_environment(env: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """AZURE_CLIENT_* variables derived from the ARM_* ones that are set."""
    env = os.environ if env is None else env
    return {sdk: env[arm] for arm, sdk in SDK_ENV_VAR_MAP.items() if env.get(arm)}
