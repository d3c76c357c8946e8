"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code and outcome-to-exit-code mapping
and CLI command wrappers to ensure consistent error handling across all Typer
commands.
"""
from __future__ import annotations

import typer
from typing import Callable, TypeVar

from ..outcome import CopyOutcome

T = TypeVar('T')

# Exit codes for exceptions raised before a copy outcome exists
EXIT_CODES = {
    "ValidationError": 2,
    "ValueError": 2,
    "FileNotFoundError": 2,
    "StoreError": 3,
}


def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    Returns exit codes:
    - 2: Invalid configuration (ValueError, ValidationError, missing config file)
    - 3: Store error or unknown error

    Args:
        exc: Exception to map

    Returns:
        Exit code (3 as fallback for unknown exceptions)
    """
    return EXIT_CODES.get(type(exc).__name__, 3)


def exit_code_for_outcome(outcome: CopyOutcome) -> int:
    """
    Map a copy outcome to its exit code.

    Each outcome variant carries its own code:
    - 0: Success
    - 1: SourceNotFound
    - 3: RemoteCopyFailed
    - 4: LocalIOFailure
    - 5: SizeMismatch
    - 6: ContentMismatch
    """
    return outcome.exit_code


def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function and maps any exceptions to appropriate
    exit codes using typer.Exit. This centralizes error handling so
    CLI commands don't need individual try/except blocks.

    Args:
        func: Function to execute

    Returns:
        Function result if successful

    Raises:
        typer.Exit: With appropriate exit code if function raises exception
    """
    try:
        return func()
    except typer.Exit:
        raise
    except Exception as e:
        from .printers import print_error
        print_error(e)
        raise typer.Exit(code=exit_code_for(e)) from e
