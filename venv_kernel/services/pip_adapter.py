from __future__ import annotations

import logging
from pathlib import Path
import shlex
from typing import Sequence

from venv_kernel.config import TOOLING_PACKAGES
from venv_kernel.proc import CommandRunner, run_command

logger = logging.getLogger(__name__)


class PipAdapter:
    """Adapter for package installation with the environment's own pip."""

    def __init__(self, *, runner: CommandRunner | None = None) -> None:
        self._runner = runner

    def upgrade_tooling(self, python: Path, packages: Sequence[str] = TOOLING_PACKAGES) -> None:
        logger.info("Upgrading pip and core packaging tools in venv...")
        self.install_packages(python, packages, upgrade=True)

    def install_requirements(self, python: Path, requirements: Path) -> None:
        logger.info("Installing packages from %s into venv...", requirements)
        run_command(
            [str(python), "-m", "pip", "install", "-r", str(requirements)],
            runner=self._runner,
            error_message=f"Failed to install packages from {requirements}",
        )

    def install_packages(self, python: Path, packages: Sequence[str], *, upgrade: bool = False) -> None:
        cmd = [str(python), "-m", "pip", "install"]
        if upgrade:
            cmd.append("--upgrade")
        cmd.extend(packages)
        run_command(
            cmd,
            runner=self._runner,
            error_message=f"Failed to install {', '.join(packages)}",
        )


def freeze_command(python: Path, requirements: Path, patterns: Sequence[str]) -> str:
    """Shell pipeline that pins the matching installed packages into the manifest.

    Only printed as a hint, never executed.
    """
    return (
        f"{shlex.quote(str(python))} -m pip freeze"
        f" | grep -E {shlex.quote('|'.join(patterns))}"
        f" > {shlex.quote(str(requirements))}"
    )
