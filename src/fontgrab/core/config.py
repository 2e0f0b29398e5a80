"""Configuration management for the web font harvester."""

from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    ConfigurationError,
    EmptyConfigFileError,
    InvalidYamlError,
    TimeoutSecondsPositiveError,
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)
DEFAULT_PAGE_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,text/css,*/*;q=0.8"


class HttpConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FONTGRAB_HTTP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """HTTP client configuration shared by discovery and downloads."""

    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header value")
    page_accept: str = Field(
        DEFAULT_PAGE_ACCEPT, description="Accept header for pages and stylesheets"
    )
    connect_timeout: float = Field(10.0, description="Connect timeout in seconds")
    read_timeout: float = Field(30.0, description="Read timeout for pages and stylesheets")
    download_read_timeout: float = Field(45.0, description="Read timeout for font files")
    verify_ssl: bool = Field(True, description="Verify TLS certificates")

    @field_validator("connect_timeout", "read_timeout", "download_read_timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise TimeoutSecondsPositiveError()
        return v

    @property
    def page_timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)

    @property
    def download_timeout(self) -> tuple[float, float]:
        return (self.connect_timeout, self.download_read_timeout)


class ExtractorConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FONTGRAB_EXTRACT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Font discovery configuration."""

    max_import_depth: int = Field(3, ge=0, le=10, description="Maximum @import recursion depth")
    include_preloaded_fonts: bool = Field(
        True, description="Record fonts referenced by preload/prefetch links"
    )


class DownloadConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FONTGRAB_DOWNLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Download configuration."""

    output_dir: Path = Field(Path("downloads"), description="Default destination directory")
    fallback_extension: str = Field(
        "bin", min_length=1, description="Extension used when no font format can be inferred"
    )

    @field_validator("fallback_extension")
    @classmethod
    def strip_leading_dot(cls, v: str) -> str:
        return v.lstrip(".") or "bin"


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FONTGRAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Main application configuration."""

    log_level: str = Field("INFO", description="Logging level")

    http: HttpConfig = Field(default_factory=HttpConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    download: DownloadConfig = Field(default_factory=DownloadConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_config_from_yaml(config_path: str | Path, config_class: type) -> BaseSettings:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with config_path.open() as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            raise EmptyConfigFileError(str(config_path))

        # YAML values win over .env for this instance
        if issubclass(config_class, BaseSettings):

            class TempConfig(config_class):
                model_config = SettingsConfigDict(
                    env_file=None,
                    case_sensitive=False,
                    extra="ignore",
                )

            return TempConfig(**config_data)
        return config_class(**config_data)

    except ConfigurationError:
        raise
    except yaml.YAMLError as e:
        raise InvalidYamlError(str(config_path), str(e)) from e
    except Exception as e:
        raise ConfigLoadError(str(e)) from e


def _add_yaml_methods():
    """Add YAML loading methods to configuration classes."""

    @classmethod
    def from_yaml(cls, config_path: str | Path):
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)

    @classmethod
    def from_env_and_yaml(cls, yaml_path: str | Path | None = None, env_file: str = ".env"):
        """Load configuration from environment variables and optionally override with YAML."""
        if yaml_path and Path(yaml_path).exists():
            return cls.from_yaml(yaml_path)
        return cls(_env_file=env_file if Path(env_file).exists() else None)

    for config_class in [HttpConfig, ExtractorConfig, DownloadConfig, AppConfig]:
        config_class.from_yaml = from_yaml
        config_class.from_env_and_yaml = from_env_and_yaml


_add_yaml_methods()
