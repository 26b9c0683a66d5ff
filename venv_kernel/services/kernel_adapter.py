from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from venv_kernel.config import KERNEL_BRIDGE_PACKAGE
from venv_kernel.proc import CommandRunner, run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KernelRegistration:
    name: str
    display_name: str


class KernelAdapter:
    """Adapter for Jupyter kernelspec registration through ipykernel."""

    def __init__(self, *, runner: CommandRunner | None = None) -> None:
        self._runner = runner

    def install_bridge(self, python: Path) -> None:
        run_command(
            [str(python), "-m", "pip", "install", "--upgrade", KERNEL_BRIDGE_PACKAGE],
            runner=self._runner,
            error_message=f"Failed to install {KERNEL_BRIDGE_PACKAGE}",
        )

    def register(self, python: Path, *, name: str, display_name: str) -> KernelRegistration:
        # --user keeps the kernelspec out of the system-wide Jupyter data dir.
        run_command(
            [
                str(python),
                "-m",
                "ipykernel",
                "install",
                "--user",
                "--name",
                name,
                "--display-name",
                display_name,
            ],
            runner=self._runner,
            error_message=f"Failed to register kernel {name}",
        )
        logger.debug("Registered kernel %s (%s) for %s", name, display_name, python)
        return KernelRegistration(name=name, display_name=display_name)
