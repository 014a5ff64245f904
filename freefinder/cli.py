"""Command-line front door for freefinder.

Builds a ``FileBrowserSession`` on an inline runner, settles it, and prints
the resulting listing. Also lists shares on a network host and the recent
"Connect to Server" addresses.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import config
from .file_model import SortCriteria, SortField
from .formatting import format_row
from .location import FilesystemLocation, NetworkHostLocation
from .network import CredentialStore, Credentials
from .session import FileBrowserSession
from .tasks import InlineTaskRunner

logger = logging.getLogger(__name__)

SETTLE_ROUNDS = 8


def _settle(session: FileBrowserSession) -> None:
    """Apply inline results until no further completions arrive."""
    for _ in range(SETTLE_ROUNDS):
        if not session.runner.drain_results():
            return


def _open_session(start: FilesystemLocation, args: argparse.Namespace) -> FileBrowserSession:
    sort = config.load_sort_criteria()
    if args.sort is not None:
        sort = SortCriteria(SortField.parse(args.sort), ascending=True)
    if args.descending:
        sort = SortCriteria(sort.field, ascending=False)
    return FileBrowserSession(
        start,
        runner=InlineTaskRunner(),
        show_hidden=args.hidden or config.load_show_hidden(),
        sort=sort,
        debounce_seconds=config.load_debounce_seconds(),
    )


def _print_listing(session: FileBrowserSession) -> None:
    out: list[str] = []
    for row in session.display_entries:
        expanded = session.expansion.is_expanded(row.entry.location)
        out.append(format_row(row, expanded=expanded))
        out.append("\n")
    sys.stdout.write("".join(out))


def _expand(session: FileBrowserSession, directory: str) -> None:
    target = FilesystemLocation.of(directory)
    for row in session.display_entries:
        if row.entry.location == target and row.entry.is_directory:
            session.toggle_expand(row.entry)
            _settle(session)
            return
    logger.warning("not expanding %s: not listed", directory)


def list_shares(host: str, user: str | None, password: str | None) -> int:
    store = CredentialStore()
    if user:
        store.remember(host, Credentials(user, password or ""))
    session = FileBrowserSession(
        NetworkHostLocation(host),
        runner=InlineTaskRunner(),
        credential_store=store,
        record_recent_server=None,
    )
    try:
        _settle(session)
        if session.auth_prompt is not None:
            raise SystemExit(f"Authentication required for {host}; pass --user and --password.")
        if session.error_message:
            raise SystemExit(session.error_message)
        sys.stdout.write("".join(f"{entry.name}\n" for entry in session.entries))
    finally:
        session.close()
    return len(session.entries)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print a listing, a share list or recent servers."""
    parser = argparse.ArgumentParser(description="List folders the way the freefinder browser shows them.")
    parser.add_argument("path", nargs="?", default=None, help="Folder to list. Defaults to current directory.")
    parser.add_argument(
        "--sort",
        choices=[field.value for field in SortField],
        default=None,
        help="Sort column (default: saved preference).",
    )
    parser.add_argument("--descending", action="store_true", help="Reverse the sort direction.")
    parser.add_argument("--filter", default="", metavar="PATTERN", help="Search pattern; * and ? are wildcards.")
    parser.add_argument("--hidden", action="store_true", help="Include hidden files.")
    parser.add_argument(
        "--expand",
        action="append",
        default=[],
        metavar="DIR",
        help="Expand a listed folder inline (repeatable; nested folders after their parent).",
    )
    parser.add_argument("--shares", metavar="HOST", help="List shares on a network host and exit.")
    parser.add_argument("--user", help="User name for --shares.")
    parser.add_argument("--password", help="Password for --shares.")
    parser.add_argument("--recent", action="store_true", help="Print recent server addresses and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.recent:
        sys.stdout.write("".join(f"{address}\n" for address in config.load_recent_servers()))
        return

    if args.shares is not None:
        if args.path is not None:
            raise SystemExit("Cannot combine positional path with --shares.")
        list_shares(args.shares, args.user, args.password)
        return

    path = Path(args.path) if args.path is not None else Path.cwd()
    if not path.is_dir():
        raise SystemExit(f"Not a folder: {path}")

    session = _open_session(FilesystemLocation.of(path), args)
    try:
        _settle(session)
        if session.error_message:
            raise SystemExit(session.error_message)
        for directory in args.expand:
            _expand(session, directory)
        session.set_search_query(args.filter)
        _print_listing(session)
    finally:
        session.close()


__all__ = ["main", "list_shares"]
