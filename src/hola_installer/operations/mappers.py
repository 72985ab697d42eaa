"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and CLI command wrappers
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

from typing import Callable, TypeVar

import typer

T = TypeVar('T')

# Non-zero for every fatal failure; each step gets its own code
EXIT_CODES = {
    "ValueError": 2,
    "UnsupportedPlatformError": 3,
    "MetadataFetchError": 4,
    "DownloadError": 5,
    "ChecksumManifestFetchError": 6,
    "ChecksumEntryNotFoundError": 7,
    "ChecksumMismatchError": 8,
    "ExtractionError": 9,
    "BinaryNotFoundInArchiveError": 10,
    "InstallationError": 11,
}

FALLBACK_EXIT_CODE = 1


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    Returns:
    - 2: Invalid configuration (ValueError)
    - 3: Unsupported platform
    - 4: Release metadata fetch failed
    - 5: Archive download failed
    - 6: Checksum manifest download failed
    - 7: Archive missing from checksum manifest
    - 8: Checksum mismatch
    - 9: Extraction failed
    - 10: Binary missing from archive
    - 11: Installation failed
    - 1: Anything else

    Args:
        exc: Exception to map

    Returns:
        Exit code (never 0)
    """
    return EXIT_CODES.get(type(exc).__name__, FALLBACK_EXIT_CODE)


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function and maps any exceptions to appropriate
    exit codes using typer.Exit, after printing which step failed.

    Args:
        func: Function to execute

    Returns:
        Function result if successful

    Raises:
        typer.Exit: With appropriate exit code if function raises exception
    """
    try:
        return func()
    except (typer.Exit, typer.Abort):
        raise
    except Exception as e:
        from .printers import print_error
        step = getattr(e, "step", None) or ("config" if isinstance(e, ValueError) else None)
        print_error(str(e), step=step)
        raise typer.Exit(code=exit_code_for(e)) from e
