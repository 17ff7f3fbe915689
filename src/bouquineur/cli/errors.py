# ABOUTME: Error reporting for the CLI: a short red message on the console, details in the log.
# ABOUTME: FetchFailureError output from the fetcher is echoed dimmed after the message.

import logging

from rich.console import Console
from rich.markup import escape

from bouquineur.metadata.calibre import FetchFailureError
from bouquineur.metadata.fetcher import MetadataError

logger = logging.getLogger(__name__)


def report_error(console: Console, exc: Exception) -> None:
    """Print a failure for the user and log the full error chain."""
    console.print(f"[red]Error: {escape(str(exc))}[/red]")
    logger.debug("Command failed", exc_info=exc)

    cause = exc.error if isinstance(exc, MetadataError) else exc
    if isinstance(cause, FetchFailureError) and cause.stderr:
        console.print(escape(cause.stderr.decode("utf-8", errors="replace")), style="dim")
