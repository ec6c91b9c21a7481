"""Global configuration for strictimpl.

This module provides centralized configuration of the host runner (file
discovery, severity policy, exit behavior) with support for environment
variables and sensible defaults. The check itself has no options.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from strictimpl.core.models import Severity


class StrictImplConfig(BaseSettings):
    """strictimpl configuration settings.

    Values can be overridden via environment variables with STRICTIMPL_ prefix.
    Example: STRICTIMPL_SEVERITY=warning reports diagnostics as warnings.
    """

    # Reporting policy
    severity: Severity = Field(
        default=Severity.ERROR,
        description="Severity attached to emitted diagnostics",
    )
    fail_on_diagnostics: bool = Field(
        default=True,
        description="Exit with a non-zero status when diagnostics are reported",
    )

    # File discovery
    file_extensions: list[str] = Field(
        default_factory=lambda: [".ts", ".tsx", ".mts", ".cts"],
        min_length=1,
        description="Source file extensions to analyze (.d.ts files are included via .ts)",
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: ["node_modules", ".git", "dist", "build", "coverage"],
        description="Directory names skipped during file discovery",
    )
    max_file_bytes: int = Field(
        default=2_000_000,
        ge=1024,
        le=100_000_000,
        description="Files larger than this are skipped",
    )

    # ID generation
    id_length: int = Field(
        default=16,
        ge=8,
        le=64,
        description="Length of generated declaration IDs (hex characters)",
    )

    model_config = {
        "env_prefix": "STRICTIMPL_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_config() -> StrictImplConfig:
    """Get cached configuration instance.

    Returns:
        StrictImplConfig singleton instance.
    """
    return StrictImplConfig()


def reload_config() -> StrictImplConfig:
    """Reload configuration (clears cache).

    Returns:
        Fresh StrictImplConfig instance.
    """
    get_config.cache_clear()
    return get_config()
