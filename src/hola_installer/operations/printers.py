"""
Human-readable output formatting.

Centralizes all CLI output so that commands stay thin. Messages follow the
``[INFO]`` / ``[WARN]`` / ``[ERROR]`` convention of the shell installer,
coloured cyan, yellow and red.
"""
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..installer import InstallResult, RunContext
from ..platforms import PathOutcome

_console = Console(highlight=False)
_err_console = Console(stderr=True, highlight=False)


def _emit(console: Console, label: str, message: str, style: str) -> None:
    # soft_wrap keeps long URLs and paths on one line
    console.print(Text(f"[{label}] {message}", style=style), soft_wrap=True)


def print_info(message: str) -> None:
    _emit(_console, "INFO", message, "cyan")


def print_warn(message: str) -> None:
    _emit(_console, "WARN", message, "bold yellow")


def print_error(message: str, step: Optional[str] = None) -> None:
    prefix = f"{step}: " if step else ""
    _emit(_err_console, "ERROR", f"{prefix}{message}", "red")


def console_reporter(level: str, message: str) -> None:
    """Installer progress reporter that prints to the console."""
    if level == "warn":
        print_warn(message)
    else:
        print_info(message)


def print_plan(ctx: RunContext) -> None:
    """
    Print what an install would do.

    Args:
        ctx: Context returned by ``Installer.plan``
    """
    table = Table(title="Install plan", show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", overflow="fold")
    table.add_row("Platform", str(ctx.platform))
    table.add_row("Repository", ctx.release.repo)
    table.add_row("Tag", ctx.release.tag)
    table.add_row("Archive", ctx.release.archive_name)
    table.add_row("Download URL", ctx.release.download_url)
    table.add_row("Checksums URL", ctx.release.checksum_url)
    table.add_row("Install path", str(ctx.target.binary_path))
    _console.print(table)


def print_path_outcome(outcome: Optional[PathOutcome]) -> None:
    """
    Explain the result of PATH reconciliation.

    Args:
        outcome: Reconciliation result, or None when it failed with a warning
    """
    if outcome is None:
        return

    if outcome.action == "already_present":
        print_info(f"'{outcome.install_dir}' is already in your PATH.")
    elif outcome.action == "profile_updated":
        print_info(f"Successfully updated profile. Please run 'source {outcome.target}' or restart your shell.")
    elif outcome.action == "marker_present":
        print_info(f"PATH update line already exists in {outcome.target}.")
    elif outcome.action == "registry_updated":
        print_info("Added to user PATH. Restart your terminal for the change to take effect.")
    elif outcome.action in ("manual", "skipped"):
        print_warn(f"'{outcome.install_dir}' is not found in your current PATH.")
        if outcome.action == "manual":
            print_warn("Could not automatically detect a suitable shell profile file.")
            print_warn("Please add the following line to your shell configuration file manually:")
        else:
            print_warn("To add it yourself, run:")
        print_warn(f"  {outcome.instruction}")


def print_install_summary(result: InstallResult, bin_name: str) -> None:
    """
    Print the final summary of a successful install.

    Args:
        result: Installer result
        bin_name: Installed tool name (for the verification hint)
    """
    print_path_outcome(result.path)
    _console.print()
    print_info(
        f"{bin_name} {result.release.tag} ({result.release.archive_name}) "
        f"installed/updated successfully to: {result.target.binary_path}"
    )
    print_info(f"SHA-256: {result.sha256}")
    if result.warnings:
        print_warn(f"Completed with {len(result.warnings)} warning(s).")
    print_info(f"Run '{bin_name} --version' in a new shell/terminal tab to verify.")
