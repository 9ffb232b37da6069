"""
Base configuration for the Azure demo stack (provider-agnostic parts).
"""

from pydantic import BaseModel, Field


class BaseConfig(BaseModel):
    """
    Base configuration shared by every stack.

    All settings are loaded from Pulumi config with sensible defaults.
    """

    location: str = "centralus"
    environment: str = "dev"

    custom_tags: dict[str, str] = Field(default_factory=dict)

    def tags(self, **extra: str) -> dict[str, str]:
        """Generate consistent resource tags."""
        base_tags = {
            "managed-by": "pulumi",
            "environment": self.environment,
        }
        return {**base_tags, **self.custom_tags, **extra}
