"""Subprocess wrapper shared by the share-listing and mount primitives."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from .types import ProcessOutcome

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT_SECONDS = 30.0
LAUNCH_FAILED_STATUS = -1


def run_command(argv: Sequence[str], timeout_seconds: float = DEFAULT_COMMAND_TIMEOUT_SECONDS) -> ProcessOutcome:
    """Run ``argv`` and capture its output.

    Launch failures and timeouts come back as ``LAUNCH_FAILED_STATUS`` with the
    reason in ``stderr`` instead of raising.
    """
    try:
        proc = subprocess.run(
            list(argv),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        logger.debug("command timed out: %s", argv[0])
        return ProcessOutcome(LAUNCH_FAILED_STATUS, "", f"{argv[0]} timed out after {timeout_seconds:g}s")
    except OSError as exc:
        logger.debug("command failed to start: %s", argv[0], exc_info=True)
        return ProcessOutcome(LAUNCH_FAILED_STATUS, "", str(exc))
    return ProcessOutcome(proc.returncode, proc.stdout or "", proc.stderr or "")


__all__ = ["DEFAULT_COMMAND_TIMEOUT_SECONDS", "LAUNCH_FAILED_STATUS", "run_command"]
