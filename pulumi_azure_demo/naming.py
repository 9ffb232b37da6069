"""Azure resource naming helpers.

Globally-unique Azure resource names (storage accounts, app service hostnames)
hang off a single random suffix generated once per stack. The suffix is never
truncated: a shortened suffix would silently collide across stacks.
"""

import re

import pulumi
import pulumi_random as random

SUFFIX_LENGTH = 8

STORAGE_ACCOUNT_MIN = 3
STORAGE_ACCOUNT_MAX = 24  # lowercase alphanumeric only
_APP_SERVICE_MIN = 2
_APP_SERVICE_MAX = 60  # alphanumeric and hyphens

_STORAGE_ACCOUNT_RE = re.compile(r"^[a-z0-9]+$")
_APP_SERVICE_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")


class InvalidResourceName(ValueError):
    def __init__(self, kind: str, name: str, reason: str):
        self.kind = kind
        self.name = name
        self.reason = reason
        super().__init__(f"invalid {kind} name {name!r}: {reason}")


def random_suffix(
    name: str,
    length: int = SUFFIX_LENGTH,
    opts: pulumi.ResourceOptions | None = None,
) -> random.RandomString:
    """Lowercase alphanumeric suffix, pinned in state after the first apply."""
    return random.RandomString(
        name,
        length=length,
        lower=True,
        upper=False,
        numeric=True,
        special=False,
        opts=opts,
    )


def is_valid_suffix(value: str, length: int = SUFFIX_LENGTH) -> bool:
    return len(value) == length and _STORAGE_ACCOUNT_RE.match(value) is not None


def storage_account_name(prefix: str, suffix: str) -> str:
    name = f"{prefix}{suffix}"
    if not _STORAGE_ACCOUNT_RE.match(name):
        raise InvalidResourceName(
            "storage account", name, "only lowercase letters and digits are allowed"
        )
    if not STORAGE_ACCOUNT_MIN <= len(name) <= STORAGE_ACCOUNT_MAX:
        raise InvalidResourceName(
            "storage account",
            name,
            f"length {len(name)} outside {STORAGE_ACCOUNT_MIN}-{STORAGE_ACCOUNT_MAX}",
        )
    return name


def app_service_name(prefix: str, suffix: str) -> str:
    name = f"{prefix}-{suffix}"
    if not _APP_SERVICE_MIN <= len(name) <= _APP_SERVICE_MAX:
        raise InvalidResourceName(
            "app service",
            name,
            f"length {len(name)} outside {_APP_SERVICE_MIN}-{_APP_SERVICE_MAX}",
        )
    if not _APP_SERVICE_RE.match(name):
        raise InvalidResourceName(
            "app service",
            name,
            "only alphanumerics and inner hyphens are allowed",
        )
    return name


def check_storage_account_prefix(prefix: str, suffix_length: int = SUFFIX_LENGTH) -> None:
    """Raise before any resource exists if no suffix could make the name valid."""
    storage_account_name(prefix, "0" * suffix_length)
