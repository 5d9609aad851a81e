"""Tests for environment and .env driven device settings."""

import os

import pytest

from shared.config.device_config import DEFAULT_ADDRESS, DeviceSettings

_VARS = [
    "MULTISENSE_ADDRESS",
    "MULTISENSE_SIMULATE",
    "MULTISENSE_FIRMWARE_VERSION",
    "MULTISENSE_IMAGER",
    "MULTISENSE_LOG_DIR",
]


@pytest.fixture
def clean_env():
    saved = {name: os.environ.pop(name) for name in _VARS if name in os.environ}
    yield
    for name in _VARS:
        os.environ.pop(name, None)
    os.environ.update(saved)


def test_defaults_without_env_file(tmp_path, clean_env):
    settings = DeviceSettings.from_env(tmp_path / "missing.env")
    assert settings.address == DEFAULT_ADDRESS
    assert settings.simulate is True
    assert settings.firmware_version == 0x0300
    assert settings.imager == "CMV2000_GREY"
    assert settings.log_dir is None


def test_env_file_values(tmp_path, clean_env):
    env_path = tmp_path / ".env"
    env_path.write_text(
        "MULTISENSE_ADDRESS=10.0.0.5\n"
        "MULTISENSE_SIMULATE=no\n"
        "MULTISENSE_FIRMWARE_VERSION=0x0202\n"
        "MULTISENSE_IMAGER=CMV4000_COLOR\n"
    )
    settings = DeviceSettings.from_env(env_path)
    assert settings.address == "10.0.0.5"
    assert settings.simulate is False
    assert settings.firmware_version == 0x0202
    assert settings.imager == "CMV4000_COLOR"


def test_environment_overrides_env_file(tmp_path, clean_env):
    env_path = tmp_path / ".env"
    env_path.write_text("MULTISENSE_FIRMWARE_VERSION=0x0202\n")
    os.environ["MULTISENSE_FIRMWARE_VERSION"] = "768"
    settings = DeviceSettings.from_env(env_path)
    assert settings.firmware_version == 0x0300
