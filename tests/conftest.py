"""Shared fixtures for cron-job-list tests."""

from __future__ import annotations

import json
from pathlib import Path

import asyncssh
import pytest

from cron_job_list.config import RunConfig


@pytest.fixture
def write_config(tmp_path):
    """Write a config file and return its path."""

    def _write(content, name: str = "hosts.json") -> Path:
        path = tmp_path / name
        if not isinstance(content, str):
            content = json.dumps(content)
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def run_config(tmp_path) -> RunConfig:
    return RunConfig(config_path=tmp_path / "hosts.json", key_path=tmp_path / "id_rsa")


@pytest.fixture
def key_file(tmp_path) -> Path:
    """A real, unencrypted private key on disk."""
    key = asyncssh.generate_private_key("ssh-ed25519")
    path = tmp_path / "id_ed25519"
    key.write_private_key(str(path))
    return path
