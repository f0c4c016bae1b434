# Galion Test Fixtures
# Pytest fixtures for galion tests

import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any, Optional

import pytest
import yaml

from galion.config.schema import GalionConfig
from galion.errors import RcloneError
from galion.jobs.channels import Receiver, Sender, channel
from galion.jobs.model import JobStatus
from galion.remotes.model import ConfigOrigin, RemoteConfiguration
from galion.remotes.store import RemoteStore


class FakeRcloneClient:
    """
    In-memory stand-in for RcloneClient.

    Job ids are handed out from next_job_id; job_status answers from the
    per-job scripts in order, repeating the last entry. A script entry may
    be an exception instance to raise.
    """

    def __init__(self, next_job_id: int = 1):
        self.next_job_id = next_job_id
        self.submitted: list[tuple[str, str]] = []
        self.status_scripts: dict[int, list[Any]] = {}
        self.status_calls: list[int] = []
        self.submit_error: Optional[Exception] = None
        self.remotes: dict[str, dict[str, Any]] = {}
        self.options: list[dict[str, Any]] = []
        self.config_paths: list[str] = []
        self.dump_error: Optional[Exception] = None
        self.closed = False

    def submit_sync(self, source: str, destination: str, is_async: bool = True) -> int:
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append((source, destination))
        job_id = self.next_job_id
        self.next_job_id += 1
        return job_id

    def job_status(self, job_id: int) -> JobStatus:
        self.status_calls.append(job_id)
        script = self.status_scripts.get(job_id)
        if not script:
            raise RcloneError(f"job not found: {job_id}", status=404)
        entry = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(entry, Exception):
            raise entry
        return entry

    def list_active_jobs(self) -> list[int]:
        return sorted(self.status_scripts)

    def list_remotes(self) -> list[str]:
        return list(self.remotes)

    def get_remote(self, name: str) -> dict[str, Any]:
        return self.remotes[name]

    def set_options(self, options: dict[str, Any]) -> dict[str, Any]:
        self.options.append(options)
        return {}

    def set_config_path(self, config_path: str) -> dict[str, Any]:
        self.config_paths.append(config_path)
        return {}

    def dump_config(self) -> dict[str, Any]:
        if self.dump_error is not None:
            raise self.dump_error
        return {name: params for name, params in self.remotes.items()}

    def noop(self, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return params or {}

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("GALION_CONFIG", raising=False)
    return home


@pytest.fixture
def sample_config() -> dict:
    """Create sample configuration dict."""
    return {
        "remotes": [
            {
                "remote_name": "backup",
                "source_locator": "/data",
                "destination_locator": "remote:bucket",
            },
            {
                "remote_name": "photos",
                "source_locator": "/home/me/Pictures",
            },
        ],
        "rclone": {"url": "http://127.0.0.1:5572", "timeout": 5},
        "jobs": {"poll_interval": 0.01},
        "output": {"verbose": False, "colored": False, "hide_banner": True},
    }


@pytest.fixture
def config_file(temp_home: Path, sample_config: dict) -> Path:
    """Create a configuration file."""
    config_dir = temp_home / ".config" / "galion"
    config_dir.mkdir(parents=True)
    config_path = config_dir / "config.yaml"

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config, f, default_flow_style=False)

    return config_path


@pytest.fixture
def fake_client() -> FakeRcloneClient:
    """Scriptable rclone client."""
    return FakeRcloneClient()


@pytest.fixture
def store(temp_dir: Path) -> RemoteStore:
    """Store with one user defined and one discovered remote."""
    remotes = [
        RemoteConfiguration("backup", "/data", "remote:bucket"),
        RemoteConfiguration("gdrive", None, "gdrive:", ConfigOrigin.EXTERNALLY_DISCOVERED),
    ]
    return RemoteStore(remotes, config=GalionConfig(), config_path=temp_dir / "config.yaml")


@pytest.fixture
def command_channel() -> tuple[Sender, Receiver]:
    """Command channel pair."""
    return channel()
