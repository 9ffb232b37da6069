from .base import BaseConfig

from .azure import AppServiceConfig, AppServicePlanConfig, DemoConfig

__all__ = [
    # Base
    "BaseConfig",
    # Azure
    "DemoConfig",
    "AppServicePlanConfig",
    "AppServiceConfig",
]
