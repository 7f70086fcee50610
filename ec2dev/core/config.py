"""Settings loading for ec2dev."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from ec2dev.constants import (
    DEFAULT_CONFIG_RELATIVE_PATH,
    DEFAULT_PROVIDER,
    DEFAULT_SSH_CONFIG_RELATIVE_PATH,
)
from ec2dev.providers import list_providers
from ec2dev.services.ssh_config import SSHHostBlock

logger = logging.getLogger(__name__)

SSH_FIELDS = ("name", "credential", "port", "user")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class SettingsError(ValueError):
    """Raised when the settings file is missing, unreadable or invalid."""


@dataclass(frozen=True)
class Paths:
    """File locations used by a run, resolved once at startup."""

    config_file: Path
    ssh_config_file: Path

    @classmethod
    def from_environment(
        cls, env: dict[str, str] | None = None, home: Path | None = None
    ) -> "Paths":
        """Resolve paths from ``EC2DEV_CONFIG``/``EC2DEV_SSH_CONFIG`` and the home dir.

        Parameters
        ----------
        env : dict[str, str] | None
            Environment mapping, defaults to ``os.environ``
        home : Path | None
            Home directory, defaults to ``Path.home()``
        """
        env = os.environ if env is None else env
        home = Path.home() if home is None else home

        config_file = env.get("EC2DEV_CONFIG") or home / DEFAULT_CONFIG_RELATIVE_PATH
        ssh_config_file = (
            env.get("EC2DEV_SSH_CONFIG") or home / DEFAULT_SSH_CONFIG_RELATIVE_PATH
        )

        return cls(
            config_file=Path(config_file).expanduser(),
            ssh_config_file=Path(ssh_config_file).expanduser(),
        )


@dataclass(frozen=True)
class Settings:
    """Validated settings record.

    Attributes
    ----------
    instance_id : str
        Instance to toggle
    region : str | None
        Region override; None keeps the provider default
    name : str | None
        SSH host alias; None disables SSH config reconciliation
    credential : str | None
        Identity file written into the host block
    port : int | None
        Local forward port
    user : str | None
        Remote login user
    provider : str
        Registered compute provider name
    """

    instance_id: str
    region: str | None = None
    name: str | None = None
    credential: str | None = None
    port: int | None = None
    user: str | None = None
    provider: str = DEFAULT_PROVIDER

    @property
    def manages_ssh_config(self) -> bool:
        return self.name is not None

    def host_block(self, public_ip: str) -> SSHHostBlock:
        """Build the host block for the instance's public address.

        Raises
        ------
        SettingsError
            If SSH reconciliation is not configured
        """
        if not self.manages_ssh_config:
            raise SettingsError("SSH host 'name' is not configured")

        return SSHHostBlock(
            alias=self.name,
            user=self.user,
            hostname=public_ip,
            local_forward_port=self.port,
            identity_file=self.credential,
        )


class SettingsLoader:
    """Load and validate the YAML settings file."""

    def load_raw(self, config_path: Path) -> dict[str, Any]:
        """Load the settings file with interpolations resolved.

        Parameters
        ----------
        config_path : Path
            Path to the YAML settings file

        Returns
        -------
        dict[str, Any]
            Parsed settings

        Raises
        ------
        SettingsError
            If the file is missing, unreadable, not valid YAML, not a mapping,
            or references undefined variables
        """
        config_file = Path(config_path)

        if not config_file.exists():
            raise SettingsError(
                f"Settings file {config_file} not found. Run 'ec2dev init' to create one."
            )

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML settings file %s: %s", config_file, e)
            raise SettingsError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read settings file %s: %s", config_file, e)
            raise SettingsError(f"Failed to read settings file {config_file}: {e}") from e

        if cfg is None or not OmegaConf.is_dict(cfg):
            raise SettingsError(f"Settings file {config_file} must contain a mapping")

        try:
            return OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except OmegaConfBaseException as e:
            logger.error("Failed to resolve settings variables: %s", e)
            raise SettingsError(f"Settings variable resolution error: {e}") from e

    def load(self, config_path: Path) -> Settings:
        """Load, validate and convert the settings file into ``Settings``."""
        raw = self.load_raw(config_path)
        self.validate(raw)

        port = raw.get("port")
        return Settings(
            instance_id=str(raw["instance_id"]).strip(),
            region=raw.get("region") or None,
            name=(raw.get("name") or "").strip() or None,
            credential=raw.get("credential"),
            port=int(port) if port not in (None, "") else None,
            user=raw.get("user"),
            provider=raw.get("provider") or DEFAULT_PROVIDER,
        )

    def validate(self, config: dict[str, Any]) -> None:
        """Validate settings have required fields and correct types.

        Raises
        ------
        SettingsError
            If settings are invalid
        """
        self._validate_instance_id(config)
        self._validate_optional_fields(config)
        self._validate_ssh_fields(config)

        provider = config.get("provider") or DEFAULT_PROVIDER
        available_providers = list_providers()
        if provider not in available_providers:
            raise SettingsError(
                f"Unknown provider: {provider}. Available providers: {available_providers}"
            )

    def _validate_instance_id(self, config: dict[str, Any]) -> None:
        instance_id = config.get("instance_id")

        if instance_id is None or str(instance_id).strip() == "":
            raise SettingsError("You must supply an instance ID (instance_id)")

        if not isinstance(instance_id, str):
            raise SettingsError("instance_id must be a string")

    def _validate_optional_fields(self, config: dict[str, Any]) -> None:
        optional_validations = {
            "region": (str, "region must be a string"),
            "name": (str, "name must be a string"),
            "credential": (str, "credential must be a string"),
            "user": (str, "user must be a string"),
            "provider": (str, "provider must be a string"),
        }

        for field, (expected_type, type_msg) in optional_validations.items():
            value = config.get(field)
            if value is not None and not isinstance(value, expected_type):
                raise SettingsError(type_msg)

    def _validate_ssh_fields(self, config: dict[str, Any]) -> None:
        """Require the SSH fields together once a host alias is configured."""
        if _is_blank(config.get("name")):
            present = [f for f in SSH_FIELDS if not _is_blank(config.get(f))]
            if present:
                logger.warning(
                    "SSH settings %s are ignored because 'name' is not set",
                    ", ".join(present),
                )
            return

        missing = [f for f in SSH_FIELDS if _is_blank(config.get(f))]
        if missing:
            raise SettingsError(
                f"SSH host '{config['name']}' requires settings: {', '.join(missing)}"
            )

        if any(char.isspace() for char in config["name"].strip()):
            raise SettingsError("name must be a single SSH host alias without spaces")

        port = config["port"]
        if isinstance(port, bool):
            raise SettingsError("port must be an integer")

        try:
            port_number = int(port)
        except (TypeError, ValueError) as e:
            raise SettingsError("port must be an integer") from e

        if not (1 <= port_number <= 65535):
            raise SettingsError("port must be between 1 and 65535")
