"""Shared fixtures: throwaway solution directories."""

from pathlib import Path

import pytest
import yaml


@pytest.fixture
def solution_dir(tmp_path):
    """Build a solution directory with a kattis.yml and sample files."""

    def make(config: dict, samples: dict = None, files: dict = None) -> Path:
        with open(tmp_path / "kattis.yml", "w", encoding="utf-8") as f:
            yaml.safe_dump(config, f)
        samples_dir = tmp_path / "samples"
        samples_dir.mkdir(exist_ok=True)
        for name, text in (samples or {}).items():
            (samples_dir / name).write_text(text, encoding="utf-8")
        for name, text in (files or {}).items():
            (tmp_path / name).write_text(text, encoding="utf-8")
        return tmp_path

    return make
