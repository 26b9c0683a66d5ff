from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

from venv_kernel.proc import CommandRunner, run_command
from venv_kernel.services.errors import VenvInterpreterMissingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VenvResult:
    python: Path
    changed: bool


def venv_python(venv_dir: Path) -> Path:
    if os.name == "nt":
        return venv_dir / "Scripts" / "python.exe"
    return venv_dir / "bin" / "python"


def activate_command(venv_dir: Path) -> str:
    if os.name == "nt":
        return str(venv_dir / "Scripts" / "activate")
    return f"source {venv_dir / 'bin' / 'activate'}"


class VenvAdapter:
    """Adapter for virtual environment creation via ``python -m venv``."""

    def __init__(self, *, runner: CommandRunner | None = None) -> None:
        self._runner = runner

    def ensure_venv(self, *, interpreter: str, venv_dir: Path) -> VenvResult:
        if venv_dir.is_dir():
            logger.info("Virtualenv %s already exists. Skipping creation.", venv_dir)
            changed = False
        else:
            logger.info("Creating virtualenv at %s...", venv_dir)
            run_command(
                [interpreter, "-m", "venv", str(venv_dir)],
                runner=self._runner,
                error_message=f"Failed to create virtualenv at {venv_dir}",
            )
            changed = True

        python = venv_python(venv_dir)
        if not (python.is_file() and os.access(python, os.X_OK)):
            raise VenvInterpreterMissingError(f"python in venv not found at {python}")
        return VenvResult(python=python, changed=changed)
