"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

load_dotenv()

SECRET_FIELDS = ("graph_api_key", "llm_api_key")


class QuerySettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with DEFI_QUERY_, credentials also under their
      conventional names)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- credentials ---
    graph_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "graph_api_key", "DEFI_QUERY_GRAPH_API_KEY", "GRAPH_API_KEY"
        ),
    )
    llm_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "llm_api_key", "DEFI_QUERY_LLM_API_KEY", "ANTHROPIC_API_KEY"
        ),
    )

    # --- data source behaviour ---
    demo_mode: bool = Field(
        default=False,
        validation_alias=AliasChoices("demo_mode", "DEFI_QUERY_DEMO_MODE", "DEMO_MODE"),
        description="Force synthetic data for every source.",
    )
    fallback_on_error: bool = Field(
        default=True,
        description="Substitute synthetic data when a live source fails.",
    )
    request_timeout: float = Field(default=15.0, gt=0)

    # --- intent resolution ---
    llm_model: str = "anthropic/claude-haiku-4-5"
    llm_max_tokens: int = Field(default=300, gt=0)

    # --- http server ---
    host: str = "0.0.0.0"
    port: int = 3000

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="DEFI_QUERY_",
        env_file=".env",
        extra="ignore",  # ignore unknown keys in env/config file
        populate_by_name=True,
    )

    @field_validator("graph_api_key", "llm_api_key", mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr, treating blank values as unset."""
        if v is None or isinstance(v, SecretStr):
            return v
        if isinstance(v, str) and not v.strip():
            return None
        return SecretStr(v)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get("DEFI_QUERY_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    local_config = Path("defi-query.toml")
                    user_config = Path.home() / ".config" / "defi-query" / "config.toml"
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [defi_query]
                body = data.get("defi_query", data)
                if not isinstance(body, dict):
                    return {}

                for key in SECRET_FIELDS:
                    if key in body:
                        raise ValueError(
                            f"Security violation: '{key}' found in TOML config file. "
                            f"Secrets must only be provided via environment variables or CLI flags."
                        )

                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a dict with secrets redacted."""
        data = self.model_dump()
        for key in SECRET_FIELDS:
            data[key] = "***redacted***" if getattr(self, key) else None
        return data

    @property
    def graph_key_configured(self) -> bool:
        return self.graph_api_key is not None

    @property
    def llm_configured(self) -> bool:
        return self.llm_api_key is not None
