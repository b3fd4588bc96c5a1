"""Verbose logger for Geostamp."""

from typing import Any
from rich.console import Console

# Global instance
_console = Console()
_verbose = False


def set_verbose(enabled: bool) -> None:
    """Turns verbose mode on or off."""
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    """Returns whether verbose mode is on."""
    return _verbose


def log_call(service: str, method: str, **kwargs: Any) -> None:
    """Logs a service call with its parameters.

    Args:
        service: Service name (e.g. "Locator")
        method: Method name (e.g. "locate")
        **kwargs: Call parameters
    """
    if not _verbose:
        return

    params = []
    for key, value in kwargs.items():
        if value is None:
            continue
        str_value = str(value)
        if len(str_value) > 50:
            str_value = str_value[:47] + "..."
        params.append(f"{key}={str_value}")

    params_str = ", ".join(params) if params else ""
    _console.print(f"  [dim]→ {service}.{method}({params_str})[/dim]")


def log_result(service: str, method: str, result: Any) -> None:
    """Logs the result of a service call.

    Args:
        service: Service name
        method: Method name
        result: Call result
    """
    if not _verbose:
        return

    str_result = str(result)
    if len(str_result) > 80:
        str_result = str_result[:77] + "..."

    _console.print(f"  [dim]← {service}.{method} = {str_result}[/dim]")


def log_info(message: str) -> None:
    """Logs an informational message (verbose only)."""
    if _verbose:
        _console.print(f"  [dim]{message}[/dim]")


def log_warning(message: str) -> None:
    """Logs a warning (always shown)."""
    _console.print(f"  [yellow]⚠ {message}[/yellow]")
