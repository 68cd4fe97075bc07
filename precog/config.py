"""Centralized configuration via pydantic-settings. All secrets from .env."""

from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from precog.chain.registry import resolve_target_network_set


PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Managed RPC providers (empty disables the provider)
    quicknode_endpoint_name: str = ""
    quicknode_api_key: str = ""
    alchemy_api_key: str = ""

    # Optional per-chain RPC overrides, e.g. RPC_OVERRIDES='{"8453": "https://..."}'
    rpc_overrides: dict[int, str] = Field(default_factory=dict)

    # Target networks; the first entry is the default chain
    target_networks: list[int] = Field(default_factory=lambda: [84532])

    # Client polling
    polling_interval_ms: int = 30_000
    local_chain_id: int = 31337

    # Static deployed-contracts artifact
    contracts_path: Path = Field(default_factory=lambda: PROJECT_ROOT / "deployedContracts.json")

    log_level: str = "WARNING"

    @property
    def target_network_set(self) -> tuple[int, ...]:
        return resolve_target_network_set(self.target_networks)

    @property
    def default_chain_id(self) -> int:
        return self.target_network_set[0]


@lru_cache
def get_settings() -> Settings:
    return Settings()
