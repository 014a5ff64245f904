"""Module entrypoint for ``python -m freefinder``.

Argument parsing and session setup happen in ``freefinder.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
