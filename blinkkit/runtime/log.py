from __future__ import annotations
import logging
from rich.console import Console
from rich.logging import RichHandler

def setup_logging(verbose: bool=False):
    # diagnostics on stderr, stdout stays JSON lines
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
