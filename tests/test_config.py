from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from venv_kernel.config import ProvisioningConfig, build_config, load_config_file
from venv_kernel.services.errors import ConfigError


def test_defaults() -> None:
    config = build_config()
    assert config == ProvisioningConfig()
    assert config.venv_dir == Path(".venv")
    assert config.requirements == Path("requirements.txt")
    assert config.kernel_name == "deep-learning-venv"
    assert config.display_name == "Python (deep-learning .venv)"
    assert config.python is None


def test_same_arguments_build_equal_configs() -> None:
    kwargs = dict(venv_dir="env1", requirements="req.txt", kernel_name="k1", display_name="K 1", python="python3")
    assert build_config(**kwargs) == build_config(**kwargs)


def test_config_is_immutable() -> None:
    config = build_config()
    with pytest.raises(FrozenInstanceError):
        config.kernel_name = "other"  # type: ignore[misc]


@pytest.mark.parametrize("name", ["has space", "slash/name", "", "bang!"])
def test_rejects_unsafe_kernel_names(name: str) -> None:
    with pytest.raises(ConfigError):
        build_config(kernel_name=name)


@pytest.mark.parametrize("name", ["deep-learning-venv", "py3.12", "my_kernel", "A-b.C_9"])
def test_accepts_kernelspec_names(name: str) -> None:
    assert build_config(kernel_name=name).kernel_name == name


def test_rejects_blank_values() -> None:
    with pytest.raises(ConfigError):
        build_config(venv_dir="")
    with pytest.raises(ConfigError):
        build_config(requirements="  ")
    with pytest.raises(ConfigError):
        build_config(display_name=" ")
    with pytest.raises(ConfigError):
        build_config(python="")


def test_config_file_supplies_defaults_and_flags_win(tmp_path: Path) -> None:
    path = tmp_path / "venv-kernel.yaml"
    path.write_text(
        "venv: envs/dl\n"
        "requirements: reqs/dl.txt\n"
        "kernel_name: from-file\n"
        "display_name: Python (from file)\n"
    )

    config = build_config(kernel_name="from-flag", config_file=path)

    assert config.venv_dir == Path("envs/dl")
    assert config.requirements == Path("reqs/dl.txt")
    assert config.kernel_name == "from-flag"
    assert config.display_name == "Python (from file)"
    assert config.python is None


def test_empty_config_file_means_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config_file(path) == {}
    assert build_config(config_file=path) == ProvisioningConfig()


def test_config_file_rejects_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("venv: .venv\npackages: [numpy]\n")
    with pytest.raises(ConfigError, match="packages"):
        load_config_file(path)


def test_config_file_must_be_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- .venv\n- requirements.txt\n")
    with pytest.raises(ConfigError, match="mapping"):
        load_config_file(path)


def test_config_file_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("venv: [unclosed\n")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config_file(path)


def test_config_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unable to read"):
        load_config_file(tmp_path / "nope.yaml")


def test_config_file_rejects_nested_values(tmp_path: Path) -> None:
    path = tmp_path / "nested.yaml"
    path.write_text("python:\n  path: /usr/bin/python3\n")
    with pytest.raises(ConfigError, match="python"):
        load_config_file(path)
