"""
pulumi-azure-demo - Pulumi components for the Azure demo deployment.
"""

__version__ = "0.1.0"

# primary exports - what most users need
from .stack import AzureDemoStack
from .backend import StateBackend

# individual components for advanced usage
from .storage import StateStorage
from .app_service import AppService
from .access import (
    AppServiceAccess,
    BUILTIN_ROLES,
    UnknownRoleError,
    resolve_role,
    role_definition_id,
)
from .naming import (
    STORAGE_ACCOUNT_MAX,
    STORAGE_ACCOUNT_MIN,
    SUFFIX_LENGTH,
    InvalidResourceName,
    check_storage_account_prefix,
    app_service_name,
    is_valid_suffix,
    random_suffix,
    storage_account_name,
)
from .credentials import (
    CredentialStatus,
    MissingCredentialsError,
    check_azure_credentials,
    require_azure_credentials,
    service_principal_environment,
)

__all__ = [
    # primary
    "AzureDemoStack",
    "StateBackend",
    # components
    "StateStorage",
    "AppService",
    "AppServiceAccess",
    # naming
    "STORAGE_ACCOUNT_MAX",
    "STORAGE_ACCOUNT_MIN",
    "SUFFIX_LENGTH",
    "InvalidResourceName",
    "check_storage_account_prefix",
    "app_service_name",
    "is_valid_suffix",
    "random_suffix",
    "storage_account_name",
    # access
    "BUILTIN_ROLES",
    "UnknownRoleError",
    "resolve_role",
    "role_definition_id",
    # credentials
    "CredentialStatus",
    "MissingCredentialsError",
    "check_azure_credentials",
    "require_azure_credentials",
    "service_principal_environment",
]
