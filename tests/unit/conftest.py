"""Pytest configuration and fixtures for ec2dev tests."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import yaml

from ec2dev.core.config import Paths, Settings
from ec2dev.core.poller import ConvergencePoller
from tests.unit.fakes.fake_ec2_manager import FakeEC2Manager

INSTANCE_ID = "i-0123456789abcdef0"


@pytest.fixture(autouse=True)
def cleanup_ec2dev_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the operator's real settings and SSH config out of unit tests."""
    monkeypatch.delenv("EC2DEV_CONFIG", raising=False)
    monkeypatch.delenv("EC2DEV_SSH_CONFIG", raising=False)
    monkeypatch.delenv("EC2DEV_DEBUG", raising=False)


@pytest.fixture
def aws_credentials() -> Generator[None, None, None]:
    """Fixture to set AWS credentials for testing with proper cleanup.

    Yields
    ------
    None
        Control back to test after setting credentials
    """
    old_values = {
        key: os.environ.get(key)
        for key in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_DEFAULT_REGION")
    }

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

    yield

    for key, value in old_values.items():
        if value is not None:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)


@pytest.fixture
def paths(tmp_path: Path) -> Paths:
    """Settings and SSH config locations inside a temporary home."""
    return Paths(
        config_file=tmp_path / ".ec2dev" / "config.yml",
        ssh_config_file=tmp_path / ".ssh" / "config",
    )


@pytest.fixture
def settings_data() -> dict[str, Any]:
    return {
        "instance_id": INSTANCE_ID,
        "region": "us-east-1",
        "name": "dev",
        "credential": "~/.ssh/dev.pem",
        "port": 8080,
        "user": "ubuntu",
    }


@pytest.fixture
def write_settings(paths: Paths) -> Callable[[dict[str, Any]], Path]:
    """Helper fixture to write settings data to the settings file.

    Returns
    -------
    callable
        Function that takes a settings dict and writes it as YAML
    """

    def _write(data: dict[str, Any]) -> Path:
        paths.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(paths.config_file, "w") as f:
            yaml.dump(data, f)
        return paths.config_file

    return _write


@pytest.fixture
def settings(settings_data: dict[str, Any]) -> Settings:
    return Settings(**settings_data)


@pytest.fixture
def fake_ec2() -> FakeEC2Manager:
    return FakeEC2Manager(instance_id=INSTANCE_ID, state="stopped")


@pytest.fixture
def sleeps() -> list[float]:
    """Durations passed to the poller's sleep function."""
    return []


@pytest.fixture
def poller_factory(sleeps: list[float]) -> Callable[..., ConvergencePoller]:
    """Poller factory that records sleeps instead of blocking."""

    def _factory(inspector: Any) -> ConvergencePoller:
        return ConvergencePoller(inspector, sleep=sleeps.append)

    return _factory


@pytest.fixture
def ec2dev(
    paths: Paths,
    fake_ec2: FakeEC2Manager,
    poller_factory: Callable[..., ConvergencePoller],
) -> Any:
    """Ec2Dev wired to the fake provider, temp paths and a confirming prompt."""
    from ec2dev.__main__ import Ec2Dev

    def factory(region: str | None = None) -> FakeEC2Manager:
        fake_ec2.region = region
        return fake_ec2

    return Ec2Dev(
        compute_provider_factory=factory,
        paths=paths,
        input_func=lambda prompt: "",
        poller_factory=poller_factory,
    )
