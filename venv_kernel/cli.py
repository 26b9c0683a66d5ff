from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
import typer
from typer.core import TyperCommand

from venv_kernel.config import (
    DEFAULT_DISPLAY_NAME,
    DEFAULT_KERNEL_NAME,
    DEFAULT_REQUIREMENTS,
    DEFAULT_VENV_DIR,
    ProvisioningConfig,
    build_config,
)
from venv_kernel.logging_config import configure_logging
from venv_kernel.proc import ExternalToolFailure
from venv_kernel.provisioner import EnvironmentProvisioner, ProvisionResult
from venv_kernel.services.errors import ProvisionerException

configure_logging()
logger = logging.getLogger(__name__)
app = typer.Typer(
    help="Create a virtualenv, install its packages and register it as a Jupyter kernel.",
    add_completion=False,
    pretty_exceptions_show_locals=False,
)


class _ProvisionCommand(TyperCommand):
    """Reports bad flags with exit status 1 instead of click's default 2."""

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


def _exit_for_domain_error(exc: ProvisionerException) -> None:
    logger.warning("Provisioning failed: %s", exc)
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


def _echo_settings(config: ProvisioningConfig) -> None:
    typer.echo("Using settings:")
    typer.echo(f"  VENV_DIR: {config.venv_dir}")
    typer.echo(f"  REQ_FILE: {config.requirements}")
    typer.echo(f"  KERNEL_NAME: {config.kernel_name}")
    typer.echo(f"  KERNEL_DISPLAY_NAME: {config.display_name}")


def _echo_summary(result: ProvisionResult) -> None:
    if result.venv_created:
        typer.echo(f"Created virtualenv at {result.config.venv_dir}")
    else:
        typer.echo(f"Reused existing virtualenv at {result.config.venv_dir}")
    typer.echo(f"Done. To use the kernel in VS Code or Jupyter, select kernel: {result.kernel.display_name}")
    typer.echo(f"Activate the venv locally with: {result.activate_command}")
    typer.echo("To pin currently installed versions for reproducibility (optional):")
    typer.echo(f"  {result.freeze_command}")


@app.command(cls=_ProvisionCommand, context_settings={"help_option_names": ["-h", "--help"]})
def provision(
    venv: str | None = typer.Option(
        None, "-v", "--venv", metavar="VENV_DIR", show_default=DEFAULT_VENV_DIR, help="Virtualenv directory."
    ),
    requirements: str | None = typer.Option(
        None,
        "-r",
        "--requirements",
        metavar="REQ_FILE",
        show_default=DEFAULT_REQUIREMENTS,
        help="Requirements file; a minimal package set is installed when it is missing.",
    ),
    kernel_name: str | None = typer.Option(
        None, "-n", "--kernel-name", metavar="KERNEL_NAME", show_default=DEFAULT_KERNEL_NAME, help="Kernel name."
    ),
    display_name: str | None = typer.Option(
        None,
        "-d",
        "--display-name",
        metavar="KERNEL_DISPLAY_NAME",
        show_default=DEFAULT_DISPLAY_NAME,
        help="Kernel label shown by Jupyter.",
    ),
    python: str | None = typer.Option(
        None,
        "--python",
        metavar="PYTHON_EXECUTABLE",
        show_default="python3, then python",
        help="Interpreter used to create the virtualenv.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        metavar="CONFIG_FILE",
        help="YAML file with defaults for venv, requirements, kernel_name, display_name and python.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log every command line before it runs.",
    ),
) -> None:
    """Create the virtualenv if missing, install packages into it and register a Jupyter kernel."""
    configure_logging(verbose=verbose)
    try:
        config = build_config(
            venv_dir=venv,
            requirements=requirements,
            kernel_name=kernel_name,
            display_name=display_name,
            python=python,
            config_file=config_file,
        )
    except ProvisionerException as e:
        _exit_for_domain_error(e)

    _echo_settings(config)

    try:
        result = EnvironmentProvisioner(report=typer.echo).provision(config)
    except ExternalToolFailure as e:
        logger.warning("Provisioning step failed: %s", e)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=e.exit_code)
    except ProvisionerException as e:
        _exit_for_domain_error(e)

    _echo_summary(result)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
