"""Error display for the repoflow-provider CLI.

Provides consistent error formatting with:
- Human-friendly messages
- Suggested fixes
- Hidden stack traces (unless debug mode)
"""

from __future__ import annotations

import os
import sys
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from rich.markup import escape

from ..errors import ConfigError, EntityLookupError, RepoflowAPIError

if TYPE_CHECKING:
    from rich.console import Console

# Debug mode enabled by REPOFLOW_DEBUG=1 or --debug flag
_debug_mode = os.environ.get("REPOFLOW_DEBUG", "0") == "1"


class ErrorCategory(str, Enum):
    """Categories of errors for consistent formatting."""

    CONFIG = "config"  # Missing or invalid provider configuration
    NETWORK = "network"  # repoflow API errors
    LOOKUP = "lookup"  # Workspace or repository lookups
    INTERNAL = "internal"  # Internal/unexpected errors


@dataclass
class ErrorInfo:
    """Structured error information for consistent display."""

    message: str
    category: ErrorCategory
    suggestion: str | None = None
    details: str | None = None
    original_error: Exception | None = None


def set_debug_mode(enabled: bool) -> None:
    """Enable or disable debug mode for verbose error output."""
    global _debug_mode
    _debug_mode = enabled


def is_debug_mode() -> bool:
    """Check if debug mode is enabled."""
    return _debug_mode


def format_error(error: ErrorInfo, console: Console) -> None:
    """Format and display an error with consistent styling.

    Args:
        error: Structured error information
        console: Rich console for output
    """
    console.print(f"[bold red]Error:[/bold red] {escape(error.message)}")

    if error.details:
        if _debug_mode or len(error.details) < 200:
            console.print(f"[dim]{escape(error.details)}[/dim]")

    if error.suggestion:
        console.print()
        console.print(f"[yellow]Suggestion:[/yellow] {escape(error.suggestion)}")

    if _debug_mode and error.original_error:
        console.print()
        console.print("[dim]Stack trace (debug mode):[/dim]")
        tb_lines = traceback.format_exception(
            type(error.original_error),
            error.original_error,
            error.original_error.__traceback__,
        )
        for line in tb_lines:
            console.print(f"[dim]{escape(line.rstrip())}[/dim]")

    if not _debug_mode and error.original_error:
        console.print()
        console.print("[dim]Set REPOFLOW_DEBUG=1 or use --debug for more details[/dim]")


def error_not_configured() -> ErrorInfo:
    """Create error info for a missing provider configuration."""
    return ErrorInfo(
        message="repoflow is not configured",
        category=ErrorCategory.CONFIG,
        suggestion=(
            "Set REPOFLOW_BASE_URL and REPOFLOW_API_KEY, "
            "or add a [repoflow] section to ~/.repoflow/config.toml"
        ),
    )


def error_network(message: str, original: Exception | None = None) -> ErrorInfo:
    """Create error info for repoflow API errors."""
    suggestion = "Check REPOFLOW_BASE_URL and your network connection"
    if any(code in message for code in ("401", "403")):
        suggestion = "Check REPOFLOW_API_KEY and its permissions"

    return ErrorInfo(
        message=f"repoflow API error: {message}",
        category=ErrorCategory.NETWORK,
        suggestion=suggestion,
        original_error=original,
    )


def error_internal(message: str, original: Exception | None = None) -> ErrorInfo:
    """Create error info for internal/unexpected errors."""
    return ErrorInfo(
        message=f"Internal error: {message}",
        category=ErrorCategory.INTERNAL,
        suggestion="This may be a bug in repoflow-provider",
        original_error=original,
    )


def classify_exception(exception: Exception, context: str = "operation") -> ErrorInfo:
    """Classify an exception into an ErrorInfo.

    Args:
        exception: The exception to classify
        context: Description of what was being done
    """
    if isinstance(exception, ConfigError):
        return ErrorInfo(
            message=f"Configuration error: {exception}",
            category=ErrorCategory.CONFIG,
            suggestion="Check REPOFLOW_* environment variables and ~/.repoflow/config.toml",
            original_error=exception,
        )

    if isinstance(exception, EntityLookupError):
        return ErrorInfo(
            message=exception.message,
            category=ErrorCategory.LOOKUP,
            suggestion=f"Check that the {exception.entity} exists and is visible to your API key",
            details=f"{type(exception.cause).__name__}: {exception.cause}",
            original_error=exception,
        )

    if isinstance(exception, RepoflowAPIError):
        return error_network(str(exception), exception)

    if isinstance(exception, (ConnectionError, TimeoutError)):
        return error_network(f"{context}: {exception}", exception)

    return error_internal(f"{context}: {exception}", exception)


def handle_exception(
    console: Console,
    exception: Exception,
    context: str = "operation",
    exit_code: int = 1,
    exit_on_error: bool = True,
) -> ErrorInfo:
    """Handle an exception and display a formatted error.

    Args:
        console: Rich console for output
        exception: The exception to handle
        context: Description of what was being done
        exit_code: Exit code to use if exit_on_error is True
        exit_on_error: Whether to exit after displaying the error

    Returns:
        ErrorInfo for the error (useful if not exiting)
    """
    error = classify_exception(exception, context)
    format_error(error, console)

    if exit_on_error:
        sys.exit(exit_code)

    return error
