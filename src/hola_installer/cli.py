"""
Hola installer CLI

Implements 2 CLI verbs with Operations facade integration:
- install: Download, verify and install the latest (or a pinned) release
- resolve: Show platform, release URLs and install path without side effects
"""
from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from . import __version__
from .operations import Operations, OpsConfig, run_and_exit
from .operations.printers import console_reporter, print_install_summary, print_plan
from .settings import create_settings_from_env

app = typer.Typer(name="hola-installer", help="Install or update the hola binary from GitHub releases", no_args_is_help=True)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hola-installer {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit")
) -> None:
    """Install or update the hola binary from GitHub releases."""


@app.command()
def install(
    tag: Optional[str] = typer.Option(None, "--tag", help="Install this release tag instead of the latest"),
    install_dir: Optional[str] = typer.Option(None, "--install-dir", help="Directory to install the binary into"),
    repo: Optional[str] = typer.Option(None, "--repo", help="GitHub repository (owner/name)"),
    no_modify_path: bool = typer.Option(False, "--no-modify-path", help="Do not edit shell profiles or the user PATH"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging")
) -> None:
    """Download, verify and install the release binary."""

    def _install() -> None:
        _configure_logging(verbose)
        settings = create_settings_from_env().with_overrides(repo=repo, install_dir=install_dir)
        config = OpsConfig(modify_path=not no_modify_path)
        ops = Operations(config=config, settings=settings, reporter=console_reporter)

        result = ops.install(tag=tag)
        print_install_summary(result, settings.bin_name)

    run_and_exit(_install)


@app.command()
def resolve(
    tag: Optional[str] = typer.Option(None, "--tag", help="Resolve this release tag instead of the latest"),
    install_dir: Optional[str] = typer.Option(None, "--install-dir", help="Directory the binary would be installed into"),
    repo: Optional[str] = typer.Option(None, "--repo", help="GitHub repository (owner/name)"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging")
) -> None:
    """Show what would be installed without downloading anything."""

    def _resolve() -> None:
        _configure_logging(verbose)
        settings = create_settings_from_env().with_overrides(repo=repo, install_dir=install_dir)
        ops = Operations(config=OpsConfig(), settings=settings)

        ctx = ops.resolve(tag=tag)
        print_plan(ctx)

    run_and_exit(_resolve)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
