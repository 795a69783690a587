"""Configuration management module"""
import os
from pathlib import Path
from typing import Optional
from uuid import UUID

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
    PydanticBaseSettingsSource,
    TomlConfigSettingsSource,
)

from .models import ServiceInstance


def get_config_file() -> Path | None:
    """Get config file path if it exists

    The path is read from HEALTHVAULT_CONFIG_FILE; without it no TOML file
    is consulted.
    """
    config_file = os.environ.get("HEALTHVAULT_CONFIG_FILE")
    if not config_file:
        return None
    path = Path(config_file).expanduser()
    if path.exists():
        return path
    return None


class HealthVaultSettings(BaseSettings):
    """Application and service configuration

    Instances are passed explicitly to HealthVaultConnection and to
    ShellRedirectParameters.construct_redirect_url(); nothing in the SDK
    reads a process-wide settings object.
    """

    # Application identity
    application_id: Optional[UUID] = None
    application_shared_secret: Optional[str] = Field(
        default=None,
        description="Base64 encoded secret used to sign session requests",
    )

    # Service instance
    health_service_url: str = "https://platform.healthvault-ppe.com/platform/wildcat.ashx"
    shell_url: Optional[str] = "https://account.healthvault-ppe.com/"
    instance_id: str = "1"
    instance_name: str = "US"

    # Request configuration
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    msg_ttl_seconds: int = Field(default=1800, ge=1)
    language: str = "en"
    country: str = "US"
    sdk_version: str = "healthvault-sdk-python/0.1.0"

    model_config = SettingsConfigDict(
        env_prefix="HEALTHVAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include TOML file"""
        config_file = get_config_file()
        if config_file:
            toml_settings = TomlConfigSettingsSource(
                settings_cls, toml_file=config_file
            )
            return (
                init_settings,
                env_settings,
                dotenv_settings,
                toml_settings,
                file_secret_settings,
            )
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    @classmethod
    def from_config_file(cls, config_file: str | Path, **values) -> "HealthVaultSettings":
        """Load settings with an explicit TOML file

        Values in the file take precedence over the environment; keyword
        values take precedence over the file. The process environment is
        left untouched.
        """
        path = Path(config_file).expanduser()
        file_values = TomlConfigSettingsSource(cls, toml_file=path)()
        return cls(**{**file_values, **values})

    def default_service_instance(self) -> ServiceInstance:
        """Build the service instance described by this configuration"""
        return ServiceInstance(
            instance_id=self.instance_id,
            name=self.instance_name,
            description=self.instance_name,
            health_service_url=self.health_service_url,
            shell_url=self.shell_url,
        )
