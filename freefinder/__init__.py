"""Public package surface for freefinder.

Exports ``main`` for programmatic CLI invocation. The browsing engine lives
in ``freefinder.session``; its collaborators live in sibling modules.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
