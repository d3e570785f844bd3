"""
Configuration settings for the integration app scaffolder.
"""

from typing import Optional, Dict, Any, List
from pathlib import Path
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProvisionConfig(BaseModel):
    """Tool provisioning configuration."""
    auto_install: bool = Field(default=True, description="Install missing tools through the package manager")
    verify_rechecks: int = Field(
        default=0, ge=0,
        description="Extra detection attempts after an install (PATH propagation delay)"
    )
    verify_recheck_delay_seconds: float = Field(default=2.0, ge=0, description="Delay between re-checks")
    command_timeout: Optional[float] = Field(None, description="Timeout for external commands; None waits forever")
    tools: Optional[List[Dict[str, Any]]] = Field(
        None,
        description="Tool requirement definitions replacing the OS defaults"
    )


class ProjectDefaults(BaseModel):
    """Defaults and fixed values for the generated project."""
    name: str = Field(default="my-integration", description="Project name when none is given")
    vendor: Optional[str] = Field(None, description="Vendor when none is given")
    version: str = Field(default="0.1.0", description="Initial project version")
    base_dir: Path = Field(default=Path("."), description="Directory the project directory is created in")
    install_command: str = Field(default="yarn install", description="Dependency install command")
    build_command: str = Field(default="yarn build", description="Build command")
    scripts: Dict[str, str] = Field(
        default_factory=lambda: {
            "build": "tsc -p .",
            "validate": "appkit validate",
            "start": "appkit run",
        }
    )
    dependencies: Dict[str, str] = Field(
        default_factory=lambda: {
            "axios": "^1.7.2",
        }
    )
    dev_dependencies: Dict[str, str] = Field(
        default_factory=lambda: {
            "typescript": "^5.4.5",
            "@types/node": "^20.14.2",
        }
    )


class PlatformCliConfig(BaseModel):
    """External platform CLI used to validate and run the generated app."""
    executable: str = Field(default="appkit", description="CLI executable name")
    validate_command: str = Field(default="appkit validate", description="Validation command")
    serve_command: str = Field(default="appkit run", description="Local dev server command")


class CredentialsConfig(BaseModel):
    """Per-user credentials file."""
    path: Path = Field(default=Path("~/.appkit/credentials.json"), description="Credentials file location")
    api_key: Optional[str] = Field(None, description="API key (can use env var)")

    @field_validator('path')
    @classmethod
    def expand_user(cls, v):
        return Path(v).expanduser()


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        description="Log file record format"
    )
    file_path: Optional[Path] = Field(default=Path("logs/scaffold.log"))
    max_file_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, description="Number of log backups to keep")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"Unknown log level: {v}")
        return v


class Settings(BaseSettings):
    """Main application settings."""
    # Component configs
    provision: ProvisionConfig = Field(default_factory=ProvisionConfig)
    project: ProjectDefaults = Field(default_factory=ProjectDefaults)
    platform_cli: PlatformCliConfig = Field(default_factory=PlatformCliConfig)
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Operational settings
    skip_tools: bool = Field(default=False, description="Skip tool provisioning")
    install_dependencies: bool = Field(default=True, description="Run dependency install and build")
    serve: bool = Field(default=False, description="Start the dev server after validation")

    model_config = SettingsConfigDict(
        env_prefix="SCAFFOLD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",  # Ignore extra fields from environment
    )
