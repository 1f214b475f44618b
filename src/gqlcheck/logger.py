"""Unified logging system for gqlcheck with CLI output support."""

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


class GqlCheckLogger(logging.Logger):
    """
    Logger that combines Python logging with CLI formatting methods.

    Provides the standard logging levels (debug, info, warning, error, critical)
    and semantic CLI output methods used to report diagnostics (success, hint, rule, etc.).
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        """
        Initialize the gqlcheck logger.

        Args:
            name: Logger name
            level: Initial log level
        """
        super().__init__(name, level)
        self.console = Console(stderr=False)

        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.addHandler(handler)

    def print(self, message: str, markup: bool = True) -> None:
        """
        Print a plain message (with Rich markup support).

        Args:
            message: Message to display
            markup: Interpret Rich markup in the message
        """
        self.console.print(message, markup=markup, highlight=False, soft_wrap=True)

    def colored(self, message: str, style: str = "bold cyan") -> None:
        """
        Print a message with a specific style/color.

        Args:
            message: Message to display
            style: Rich style string (e.g., "green", "red", "bold cyan", "dim")
        """
        self.print(f"[{style}]{message}[/{style}]")

    def success(self, message: str) -> None:
        """
        Print a success message in green with checkmark icon.

        Args:
            message: Message to display
        """
        self.print(f"[green]✓[/green] {message}")

    def hint(self, message: str) -> None:
        """Print a dimmed hint/secondary message."""
        self.colored(message, "dim")

    def rule(self, title: str, style: str = "bold blue") -> None:
        """
        Print a horizontal rule with a title.

        Args:
            title: Title text for the rule
            style: Rich style string (default: "bold blue")
        """
        self.console.rule(f"[{style}]{title}")

    def print_dict(self, data: dict[str, Any]) -> None:
        """
        Print dictionary data as syntax highlighted JSON.

        Args:
            data: Dictionary to display
        """
        self.console.print_json(json.dumps(data, indent=2))


def get_logger(name: str = "gqlcheck") -> GqlCheckLogger:
    """
    Get or create a gqlcheck logger instance.

    Args:
        name: Logger name (default: "gqlcheck")

    Returns:
        GqlCheckLogger instance
    """
    previous_class = logging.getLoggerClass()
    logging.setLoggerClass(GqlCheckLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous_class)

    # Loggers created before the class was registered can't be converted
    if not isinstance(logger, GqlCheckLogger):
        raise RuntimeError(f"Logger '{name}' already exists and is not a GqlCheckLogger")

    logger.propagate = False
    return logger
