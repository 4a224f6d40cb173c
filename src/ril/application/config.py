from pathlib import Path
from typing import Any

from pydantic import Field, PositiveInt, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from ril.domain.constants import TICK_INTERVAL


class AppConfig(BaseSettings):
    """
    Configuration model for ril.
    Supports loading from:
    1. Environment variables (RIL_*)
    2. Config file (~/.config/ril/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="RIL_",
        extra="ignore",
        validate_default=True,
    )

    # Paths
    storage_path: Path = Field(
        default_factory=lambda: Path.home() / ".config/ril/progress.json"
    )
    catalog_path: Path | None = None  # None -> bundled catalog
    sandbox_dir: Path = Field(default_factory=lambda: Path.cwd() / "ril-sandbox")

    # Storage
    storage_quota_bytes: PositiveInt | None = None

    # Timer
    tick_interval: float = Field(default=TICK_INTERVAL, gt=0)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Home may be redirected after import (tests), so resolve lazily.
        toml_file = None
        for f in _config_files():
            if f.exists():
                toml_file = f
                break

        # Earlier sources win: CLI overrides > env > TOML.
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("storage_path", "sandbox_dir", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("catalog_path", mode="before")
    @classmethod
    def resolve_catalog(cls, v: Any) -> Path | None:
        if v:
            return Path(v).expanduser().resolve()
        return None


def _config_files() -> list[Path]:
    home = Path.home()
    return [home / ".config/ril/config.toml", home / ".ril.toml"]


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/ril/config.toml (if exists)
    3. Environment variables (RIL_*)
    4. cli_overrides (passed from Typer), None values ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
