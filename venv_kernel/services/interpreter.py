from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import shutil
from typing import Callable, Optional, Sequence

from venv_kernel.config import INTERPRETER_CANDIDATES
from venv_kernel.proc import CommandRunner, run_command
from venv_kernel.services.errors import InterpreterNotExecutableError, InterpreterNotFoundError

logger = logging.getLogger(__name__)

WhichFn = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class ResolvedInterpreter:
    command: str


def _looks_like_path(value: str) -> bool:
    return os.sep in value or (os.altsep is not None and os.altsep in value) or Path(value).exists()


def _is_executable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def resolve_interpreter(
    override: str | None,
    *,
    which: WhichFn | None = None,
    candidates: Sequence[str] = INTERPRETER_CANDIDATES,
) -> ResolvedInterpreter:
    """Pick the interpreter used to create the environment.

    An override is returned verbatim once it is known to be runnable. Without
    one, the candidates are probed on PATH in order and the first hit wins.
    """
    lookup = which or shutil.which
    if override is not None:
        if _looks_like_path(override):
            if not _is_executable_file(Path(override)):
                raise InterpreterNotExecutableError(f"Python executable {override} is not an executable file")
        elif lookup(override) is None:
            raise InterpreterNotExecutableError(f"Python executable {override} was not found on PATH")
        logger.debug("Using interpreter override: %s", override)
        return ResolvedInterpreter(command=override)

    for name in candidates:
        if lookup(name) is not None:
            logger.debug("Found interpreter on PATH: %s", name)
            return ResolvedInterpreter(command=name)

    raise InterpreterNotFoundError(
        "No python executable found on PATH. Install Python 3 or pass --python /path/to/python"
    )


class InterpreterAdapter:
    """Queries the base interpreter before anything is written to disk."""

    def __init__(self, *, runner: CommandRunner | None = None) -> None:
        self._runner = runner

    def describe(self, interpreter: str) -> str:
        result = run_command(
            [interpreter, "-c", "import sys; print(sys.executable)"],
            runner=self._runner,
            error_message=f"Failed to run python executable {interpreter}",
            capture=True,
        )
        return result.stdout.strip() or interpreter
