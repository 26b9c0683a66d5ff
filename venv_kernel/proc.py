from __future__ import annotations

from dataclasses import dataclass
import logging
import shlex
import subprocess
from typing import Callable

logger = logging.getLogger(__name__)

CommandRunner = Callable[[list[str]], subprocess.CompletedProcess[str]]


@dataclass(frozen=True)
class CommandResult:
    command: list[str]
    returncode: int
    stdout: str
    stderr: str


class ExternalToolFailure(RuntimeError):
    """A child process exited non-zero; its own output has already been shown."""

    def __init__(self, *, message: str, result: CommandResult) -> None:
        self.result = result
        super().__init__(self._build_message(message))

    @property
    def returncode(self) -> int:
        return self.result.returncode

    @property
    def exit_code(self) -> int:
        # Negative return codes mean the child was killed by a signal.
        if self.result.returncode < 0:
            return 128 + abs(self.result.returncode)
        return self.result.returncode

    def _build_message(self, message: str) -> str:
        return f"{message} (returncode={self.result.returncode}, command={format_command(self.result.command)!r})"


def format_command(command: list[str]) -> str:
    return " ".join(shlex.quote(part) for part in command)


def default_runner(command: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(command, text=True, check=False)


def capturing_runner(command: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(command, capture_output=True, text=True, check=False)


def run_command(
    command: list[str],
    *,
    runner: CommandRunner | None = None,
    error_message: str,
    capture: bool = False,
) -> CommandResult:
    active_runner = runner or (capturing_runner if capture else default_runner)
    logger.debug("Running: %s", format_command(command))
    completed = active_runner(command)
    result = CommandResult(
        command=command,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
    if result.returncode != 0:
        raise ExternalToolFailure(message=error_message, result=result)
    return result
