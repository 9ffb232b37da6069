"""Remote state backend target.

Points state storage at an Azure storage account/container/key. Values are
forwarded as-is: a malformed account name is reported by the backend itself
at login time, not here.

The storage this points at must exist before the backend can be used, so a
stack cannot create its own backend storage in a single pass. See
setup/bootstrap.py for the two-phase procedure.
"""

from typing import Optional

import pulumi
from pydantic import BaseModel, ConfigDict, Field

_STATE_FILE_EXT = ".tfstate"


class StateBackend(BaseModel):
    model_config = ConfigDict(frozen=True)

    resource_group_name: str = Field(min_length=1)
    storage_account_name: str = Field(min_length=1)
    container_name: str = Field(min_length=1)
    key: str = Field(min_length=1)

    @classmethod
    def from_outputs(
        cls,
        resource_group_name: pulumi.Input[str],
        storage_account_name: pulumi.Input[str],
        container_name: pulumi.Input[str],
        key: pulumi.Input[str],
    ) -> pulumi.Output["StateBackend"]:
        return pulumi.Output.all(
            resource_group_name, storage_account_name, container_name, key
        ).apply(
            lambda args: cls(
                resource_group_name=args[0],
                storage_account_name=args[1],
                container_name=args[2],
                key=args[3],
            )
        )

    @property
    def prefix(self) -> str:
        """Path inside the container under which stack state is written."""
        return self.key.removesuffix(_STATE_FILE_EXT).strip("/")

    @property
    def url(self) -> str:
        path = f"{self.container_name}/{self.prefix}" if self.prefix else self.container_name
        return f"azblob://{path}?storage_account={self.storage_account_name}"

    def environment(self, access_key: Optional[str] = None) -> dict[str, str]:
        """Environment the pulumi CLI needs to reach this backend.

        Without an access key the azblob driver falls back to AZURE_CLIENT_*
        service principal variables or an az CLI login.
        """
        env = {
            "PULUMI_BACKEND_URL": self.url,
            "AZURE_STORAGE_ACCOUNT": self.storage_account_name,
        }
        if access_key:
            env["AZURE_STORAGE_KEY"] = access_key
        return env

    def project_backend(self) -> dict[str, str]:
        """`backend` section for Pulumi.yaml."""
        return {"url": self.url}

    def to_terraform(self) -> dict:
        return {
            "terraform": {
                "backend": {
                    "azurerm": {
                        "resource_group_name": self.resource_group_name,
                        "storage_account_name": self.storage_account_name,
                        "container_name": self.container_name,
                        "key": self.key,
                    }
                }
            }
        }
