from pathlib import Path

import pytest

from ec2dev.core.config import Paths, Settings, SettingsError, SettingsLoader
from ec2dev.services.ssh_config import SSHHostBlock


class TestSettingsLoader:
    def test_load_full_settings(self, write_settings, settings_data) -> None:
        config_file = write_settings(settings_data)

        settings = SettingsLoader().load(config_file)

        assert settings == Settings(
            instance_id="i-0123456789abcdef0",
            region="us-east-1",
            name="dev",
            credential="~/.ssh/dev.pem",
            port=8080,
            user="ubuntu",
        )
        assert settings.manages_ssh_config is True

    def test_missing_file_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(SettingsError, match="not found"):
            SettingsLoader().load(tmp_path / "missing.yml")

    def test_missing_instance_id_is_fatal(self, write_settings) -> None:
        config_file = write_settings({"region": "us-east-1"})

        with pytest.raises(SettingsError, match="instance ID"):
            SettingsLoader().load(config_file)

    def test_blank_instance_id_is_fatal(self, write_settings) -> None:
        config_file = write_settings({"instance_id": "  "})

        with pytest.raises(SettingsError, match="instance ID"):
            SettingsLoader().load(config_file)

    def test_empty_file_is_fatal(self, paths: Paths) -> None:
        paths.config_file.parent.mkdir(parents=True)
        paths.config_file.write_text("")

        with pytest.raises(SettingsError):
            SettingsLoader().load(paths.config_file)

    def test_invalid_yaml(self, paths: Paths) -> None:
        paths.config_file.parent.mkdir(parents=True)
        paths.config_file.write_text("instance_id: [unclosed\n")

        with pytest.raises(SettingsError, match="Invalid YAML"):
            SettingsLoader().load(paths.config_file)

    def test_list_document_is_rejected(self, paths: Paths) -> None:
        paths.config_file.parent.mkdir(parents=True)
        paths.config_file.write_text("- i-0123456789abcdef0\n")

        with pytest.raises(SettingsError, match="mapping"):
            SettingsLoader().load(paths.config_file)

    def test_region_is_optional(self, write_settings) -> None:
        config_file = write_settings({"instance_id": "i-0123456789abcdef0"})

        settings = SettingsLoader().load(config_file)

        assert settings.region is None
        assert settings.manages_ssh_config is False

    def test_ssh_fields_required_together(self, write_settings, settings_data) -> None:
        del settings_data["credential"]
        del settings_data["port"]
        config_file = write_settings(settings_data)

        with pytest.raises(SettingsError, match="credential, port"):
            SettingsLoader().load(config_file)

    def test_ssh_fields_without_name_are_ignored(self, write_settings, caplog) -> None:
        config_file = write_settings(
            {"instance_id": "i-0123456789abcdef0", "user": "ubuntu"}
        )

        with caplog.at_level("WARNING"):
            settings = SettingsLoader().load(config_file)

        assert settings.manages_ssh_config is False
        assert "ignored" in caplog.text

    @pytest.mark.parametrize("field", ["user", "credential"])
    def test_blank_ssh_field_is_fatal(self, write_settings, settings_data, field) -> None:
        settings_data[field] = "  "
        config_file = write_settings(settings_data)

        with pytest.raises(SettingsError, match=field):
            SettingsLoader().load(config_file)

    @pytest.mark.parametrize("port", [0, 65536, "http", True])
    def test_invalid_port(self, write_settings, settings_data, port) -> None:
        settings_data["port"] = port
        config_file = write_settings(settings_data)

        with pytest.raises(SettingsError, match="port"):
            SettingsLoader().load(config_file)

    def test_string_port_is_converted(self, write_settings, settings_data) -> None:
        settings_data["port"] = "9000"
        config_file = write_settings(settings_data)

        assert SettingsLoader().load(config_file).port == 9000

    def test_alias_with_spaces_is_rejected(self, write_settings, settings_data) -> None:
        settings_data["name"] = "dev box"
        config_file = write_settings(settings_data)

        with pytest.raises(SettingsError, match="alias"):
            SettingsLoader().load(config_file)

    def test_unknown_provider(self, write_settings) -> None:
        config_file = write_settings(
            {"instance_id": "i-0123456789abcdef0", "provider": "gcp"}
        )

        with pytest.raises(SettingsError, match="Unknown provider"):
            SettingsLoader().load(config_file)

    def test_wrong_type(self, write_settings) -> None:
        config_file = write_settings({"instance_id": "i-0123456789abcdef0", "region": 5})

        with pytest.raises(SettingsError, match="region must be a string"):
            SettingsLoader().load(config_file)

    def test_interpolation(self, write_settings, settings_data, monkeypatch) -> None:
        monkeypatch.setenv("EC2DEV_TEST_KEY_DIR", "/keys")
        settings_data["credential"] = "${oc.env:EC2DEV_TEST_KEY_DIR}/dev.pem"
        config_file = write_settings(settings_data)

        assert SettingsLoader().load(config_file).credential == "/keys/dev.pem"

    def test_unresolvable_interpolation(self, write_settings, settings_data) -> None:
        settings_data["credential"] = "${undefined_key}"
        config_file = write_settings(settings_data)

        with pytest.raises(SettingsError, match="resolution"):
            SettingsLoader().load(config_file)


class TestSettings:
    def test_host_block(self, settings: Settings) -> None:
        assert settings.host_block("203.0.113.5") == SSHHostBlock(
            alias="dev",
            user="ubuntu",
            hostname="203.0.113.5",
            local_forward_port=8080,
            identity_file="~/.ssh/dev.pem",
        )

    def test_host_block_requires_name(self) -> None:
        with pytest.raises(SettingsError):
            Settings(instance_id="i-0123456789abcdef0").host_block("203.0.113.5")


class TestPaths:
    def test_defaults_under_home(self, tmp_path: Path) -> None:
        paths = Paths.from_environment(env={}, home=tmp_path)

        assert paths.config_file == tmp_path / ".ec2dev" / "config.yml"
        assert paths.ssh_config_file == tmp_path / ".ssh" / "config"

    def test_environment_overrides(self, tmp_path: Path) -> None:
        env = {
            "EC2DEV_CONFIG": str(tmp_path / "settings.yml"),
            "EC2DEV_SSH_CONFIG": str(tmp_path / "ssh_config"),
        }

        paths = Paths.from_environment(env=env, home=tmp_path / "home")

        assert paths.config_file == tmp_path / "settings.yml"
        assert paths.ssh_config_file == tmp_path / "ssh_config"
