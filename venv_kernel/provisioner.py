from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Callable

from venv_kernel.config import FALLBACK_PACKAGES, FREEZE_PATTERNS, ProvisioningConfig
from venv_kernel.proc import CommandRunner
from venv_kernel.services.interpreter import InterpreterAdapter, ResolvedInterpreter, WhichFn, resolve_interpreter
from venv_kernel.services.kernel_adapter import KernelAdapter, KernelRegistration
from venv_kernel.services.pip_adapter import PipAdapter, freeze_command
from venv_kernel.services.venv_adapter import VenvAdapter, activate_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionResult:
    config: ProvisioningConfig
    interpreter: ResolvedInterpreter
    interpreter_executable: str
    venv_python: Path
    venv_created: bool
    used_requirements: bool
    kernel: KernelRegistration

    @property
    def activate_command(self) -> str:
        return activate_command(self.config.venv_dir)

    @property
    def freeze_command(self) -> str:
        return freeze_command(self.venv_python, self.config.requirements, FREEZE_PATTERNS)


class EnvironmentProvisioner:
    """Runs the provisioning steps in order and stops at the first failure.

    Nothing is rolled back: an interrupted or failed run leaves whatever the
    completed steps produced. Re-running is safe because an existing
    environment is never re-created, and the later steps lean on pip and
    ipykernel treating repeated installs and registrations as no-ops or
    in-place overwrites. That idempotence belongs to those tools, not to this
    module.
    """

    def __init__(
        self,
        *,
        runner: CommandRunner | None = None,
        which: WhichFn | None = None,
        interpreter: InterpreterAdapter | None = None,
        venv: VenvAdapter | None = None,
        pip: PipAdapter | None = None,
        kernel: KernelAdapter | None = None,
        report: Callable[[str], None] | None = None,
    ) -> None:
        self._which = which
        self.interpreter = interpreter or InterpreterAdapter(runner=runner)
        self.venv = venv or VenvAdapter(runner=runner)
        self.pip = pip or PipAdapter(runner=runner)
        self.kernel = kernel or KernelAdapter(runner=runner)
        self._report = report or logger.info

    def provision(self, config: ProvisioningConfig) -> ProvisionResult:
        resolved = resolve_interpreter(config.python, which=self._which)
        executable = self.interpreter.describe(resolved.command)
        self._report(f"Using python: {executable}")

        venv = self.venv.ensure_venv(interpreter=resolved.command, venv_dir=config.venv_dir)

        self.pip.upgrade_tooling(venv.python)

        used_requirements = config.requirements.is_file()
        if used_requirements:
            self.pip.install_requirements(venv.python, config.requirements)
        else:
            logger.info("No %s found, installing a minimal default set into venv...", config.requirements)
            self.pip.install_packages(venv.python, FALLBACK_PACKAGES)

        logger.info("Installing ipykernel and registering kernel '%s'...", config.kernel_name)
        self.kernel.install_bridge(venv.python)
        registration = self.kernel.register(
            venv.python,
            name=config.kernel_name,
            display_name=config.display_name,
        )

        return ProvisionResult(
            config=config,
            interpreter=resolved,
            interpreter_executable=executable,
            venv_python=venv.python,
            venv_created=venv.changed,
            used_requirements=used_requirements,
            kernel=registration,
        )
