"""Logging configuration for xdndpeer."""
import logging


def configure_logging(verbose: bool, name: str) -> None:
    """Configure logging level and a per-peer line prefix.

    Args:
        verbose: If True, set DEBUG level; otherwise INFO level, which
            shows every XDND message sent and received.
        name: Peer name prefixed to every line so the output of both
            peers can be told apart on a shared terminal.

    Errors are always printed to stderr regardless of verbosity.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format=f"{name} %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler()],
        force=True,
    )
