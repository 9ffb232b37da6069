"""Role assignments for the App Service managed identity."""

import re

import pulumi
from pulumi_azure_native import authorization

BUILTIN_ROLES = {
    "Owner": "8e3af657-a8ff-443c-a75c-2fe8c4bcb635",
    "Contributor": "b24988ac-6180-42a0-ab88-20f7382dd24c",
    "Reader": "acdd72a7-3385-48ef-bd42-f606fba81ae7",
    "Storage Blob Data Contributor": "ba92f5b4-2d11-453d-a403-e96b0029c9fe",
    "Storage Blob Data Reader": "2a2b9908-6ea1-4ae2-8e65-a410df84e7d1",
    "Website Contributor": "de139f84-1756-47ae-9be6-808fbbe84772",
}

_GUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


class UnknownRoleError(ValueError):
    def __init__(self, role: str):
        self.role = role
        super().__init__(
            f"unknown role {role!r}: expected a role definition GUID or one of "
            f"{', '.join(sorted(BUILTIN_ROLES))}"
        )


def resolve_role(role: str) -> str:
    """Role definition GUID for a built-in role name or a GUID."""
    role_id = BUILTIN_ROLES.get(role)
    if role_id is not None:
        return role_id
    if not _GUID_RE.match(role):
        raise UnknownRoleError(role)
    return role.lower()


def role_definition_id(subscription_id: str, role: str) -> str:
    role_id = resolve_role(role)
    return f"/subscriptions/{subscription_id}/providers/Microsoft.Authorization/roleDefinitions/{role_id}"


class AppServiceAccess(pulumi.ComponentResource):
    """Grants the app service identity a role on a scope (the resource group)."""

    def __init__(
        self,
        name: str,
        principal_id: pulumi.Input[str],
        scope: pulumi.Input[str],
        subscription_id: pulumi.Input[str],
        role: str = "Contributor",
        opts: pulumi.ResourceOptions | None = None,
    ):
        # fail before any resource is registered
        resolve_role(role)

        super().__init__("demo:azure:AppServiceAccess", name, None, opts)

        self.role = role
        self.role_assignment = authorization.RoleAssignment(
            f"{name}-role",
            principal_id=principal_id,
            principal_type=authorization.PrincipalType.SERVICE_PRINCIPAL,
            role_definition_id=pulumi.Output.from_input(subscription_id).apply(
                lambda sub: role_definition_id(sub, role)
            ),
            scope=scope,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.register_outputs(
            {
                "role_assignment_id": self.role_assignment.id,
                "role": role,
            }
        )
