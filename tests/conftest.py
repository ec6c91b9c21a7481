"""Shared pytest fixtures for strictimpl tests."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from dotenv import load_dotenv
from hypothesis import settings

from strictimpl.core.config import StrictImplConfig

# Load environment variables from .env file
load_dotenv()

# Configure hypothesis for property-based testing
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=20, deadline=None)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture
def config() -> StrictImplConfig:
    """Provide a configuration unaffected by the environment."""
    with patch.dict(os.environ, {}, clear=True):
        return StrictImplConfig(_env_file=None)


@pytest.fixture
def ts_project(tmp_path: Path):
    """Write TypeScript files into a temporary project directory.

    Usage: ``root = ts_project({"a.ts": "...", "lib/b.ts": "..."})``
    """
    root = tmp_path / "ts-project"
    root.mkdir()

    def write(files: dict[str, str]) -> Path:
        for relative, text in files.items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        return root

    return write
