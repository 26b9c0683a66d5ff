from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
import re
from typing import Any

import yaml

from venv_kernel.services.errors import ConfigError

DEFAULT_VENV_DIR = ".venv"
DEFAULT_REQUIREMENTS = "requirements.txt"
DEFAULT_KERNEL_NAME = "deep-learning-venv"
DEFAULT_DISPLAY_NAME = "Python (deep-learning .venv)"

TOOLING_PACKAGES = ("pip", "setuptools", "wheel")
# CPU builds only. CUDA or MPS builds have to be installed by hand per platform.
FALLBACK_PACKAGES = ("torch", "numpy", "pandas", "matplotlib", "scikit-learn", "ipython")
KERNEL_BRIDGE_PACKAGE = "ipykernel"
INTERPRETER_CANDIDATES = ("python3", "python")
FREEZE_PATTERNS = FALLBACK_PACKAGES

# Same character set jupyter_client accepts for kernelspec names.
KERNEL_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")

CONFIG_FILE_KEYS = {
    "venv": "venv_dir",
    "requirements": "requirements",
    "kernel_name": "kernel_name",
    "display_name": "display_name",
    "python": "python",
}


@dataclass(frozen=True)
class ProvisioningConfig:
    venv_dir: Path = Path(DEFAULT_VENV_DIR)
    requirements: Path = Path(DEFAULT_REQUIREMENTS)
    kernel_name: str = DEFAULT_KERNEL_NAME
    display_name: str = DEFAULT_DISPLAY_NAME
    python: str | None = None

    def __post_init__(self) -> None:
        if not str(self.venv_dir).strip():
            raise ConfigError("Virtualenv directory must not be empty")
        if not str(self.requirements).strip():
            raise ConfigError("Requirements file path must not be empty")
        if not KERNEL_NAME_RE.fullmatch(self.kernel_name):
            raise ConfigError(
                f"Invalid kernel name {self.kernel_name!r}: use only letters, digits, '.', '_' and '-'"
            )
        if not self.display_name.strip():
            raise ConfigError("Kernel display name must not be empty")
        if self.python is not None and not self.python.strip():
            raise ConfigError("--python must not be empty when given")


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML settings file and map its keys onto ProvisioningConfig fields."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    unknown = sorted(str(key) for key in document if key not in CONFIG_FILE_KEYS)
    if unknown:
        raise ConfigError(f"Unknown keys in config file {path}: {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key, value in document.items():
        if value is None:
            continue
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            raise ConfigError(f"Config key {key!r} in {path} must be a string")
        values[CONFIG_FILE_KEYS[key]] = str(value)
    return values


def build_config(
    *,
    venv_dir: str | Path | None = None,
    requirements: str | Path | None = None,
    kernel_name: str | None = None,
    display_name: str | None = None,
    python: str | None = None,
    config_file: Path | None = None,
) -> ProvisioningConfig:
    """Merge explicit values over config file values over built-in defaults."""
    file_values = load_config_file(config_file) if config_file is not None else {}
    explicit = {
        "venv_dir": venv_dir,
        "requirements": requirements,
        "kernel_name": kernel_name,
        "display_name": display_name,
        "python": python,
    }
    merged: dict[str, Any] = {}
    for field in fields(ProvisioningConfig):
        value = explicit[field.name]
        if value is None:
            value = file_values.get(field.name)
        if value is None:
            continue
        if field.name in ("venv_dir", "requirements"):
            # Path("") silently becomes ".", so reject blanks before converting.
            if not str(value).strip():
                raise ConfigError(f"{field.name} must not be empty")
            value = Path(value)
        merged[field.name] = value
    return ProvisioningConfig(**merged)
