# qcomm/settings.py
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime settings for the quantum core.
    """

    # --- Register limits ---
    MAX_QUBITS: int = 4
    MAX_CIRCUIT_DEPTH: int = 100

    # --- Capability detection ---
    ENABLE_HARDWARE: bool = True

    # --- Quality targets ---
    FIDELITY_THRESHOLD: float = 1.0
    ENABLE_ERROR_CORRECTION: bool = False

    # Default max_age for QuantumCore.cleanup_old_states()
    CLEANUP_INTERVAL_SECONDS: int = 300

    # --- Runtime ---
    LOG_LEVEL: str = "INFO"
    model_config = SettingsConfigDict(
        env_prefix="QCOMM_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
