from __future__ import annotations

import logging
from pathlib import Path
import shutil

import pytest
from typer.testing import CliRunner

from tests.fakes import FakeRunner, which_from
from venv_kernel import proc


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def executable_file(tmp_path: Path) -> Path:
    path = tmp_path / "bin" / "python3.12"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


@pytest.fixture()
def cli_runner(tmp_path, monkeypatch, fake_runner):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("VENV_KERNEL_LOG_LEVEL", raising=False)
    monkeypatch.setattr(proc, "default_runner", fake_runner)
    monkeypatch.setattr(proc, "capturing_runner", fake_runner)
    monkeypatch.setattr(shutil, "which", which_from({"python3", "python"}))
    root = logging.getLogger()
    level = root.level

    import venv_kernel.cli as cli

    yield CliRunner(), cli.app
    root.setLevel(level)
