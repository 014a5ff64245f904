"""Stateful browsing session the UI binds to.

The session is owned by a single thread. Every listing, mutation and network
primitive is handed to a ``TaskRunner``; completions come back through
``poll()``, which the owner calls from its idle loop. Results whose target is
no longer current are dropped, so a later ``reload()`` always wins.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from . import config
from .clipboard import (
    ClipboardCoordinator,
    ClipboardEntry,
    Pasteboard,
    PendingConflict,
    PendingMove,
    TransferMode,
    TransferOutcome,
    execute_transfer,
    filter_move_sources,
    plan_transfer,
)
from .errors import AuthRequiredError, FinderError, NetworkError, PermissionDeniedError, translate_os_error
from .expansion import ExpansionCache
from .file_model import (
    DirectoryContentsProvider,
    DisplayEntry,
    FileEntry,
    LocalDirectoryProvider,
    SortCriteria,
    SortField,
    default_trash_paths,
    is_trash_location,
    sort_entries,
)
from .fileops import FileOperations, validate_item_name
from .location import (
    FilesystemLocation,
    Location,
    NetworkHostLocation,
    NetworkRoot,
    NetworkShareLocation,
    parse_server_address,
)
from .navigation import NavigationState
from .network import (
    AuthenticationCoordinator,
    AuthPrompt,
    CredentialStore,
    Credentials,
    EnumerationAuthRequired,
    EnumerationFailed,
    EnumerationRetry,
    MountAuthRequired,
    MountFailed,
    MountRetry,
    NetworkShareBrowser,
    SharesListed,
)
from .pasteboard import SystemPasteboard
from .search import SearchFilter
from .tasks import BackgroundTaskRunner, TaskRunner
from .watch import (
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_WATCH_POLL_SECONDS,
    Debouncer,
    DirectoryWatcher,
    sample_signatures,
)

logger = logging.getLogger(__name__)

ELEVATED_ACCESS_MESSAGE = "Full disk access is required to view the Trash"


def _filesystem_locations(locations: Iterable[Location]) -> tuple[FilesystemLocation, ...]:
    out: list[FilesystemLocation] = []
    for location in locations:
        if isinstance(location, FilesystemLocation) and location not in out:
            out.append(location)
    return tuple(out)


class FileBrowserSession:
    """Navigation, lazily expanded listings, clipboard and network browsing.

    No operation raises to the caller: failures land in ``operation_errors``
    (per item) or in the listing error, and ``error_message`` summarizes them.
    ``dirty`` is raised whenever visible state changes; the UI clears it after
    redrawing.
    """

    def __init__(
        self,
        start: Location | None = None,
        *,
        provider: DirectoryContentsProvider | None = None,
        file_ops: FileOperations | None = None,
        network: NetworkShareBrowser | None = None,
        runner: TaskRunner | None = None,
        pasteboard: Pasteboard | None = None,
        show_hidden: bool = False,
        sort: SortCriteria | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        watch_poll_seconds: float = DEFAULT_WATCH_POLL_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
        trash_paths: tuple[Path, ...] | None = None,
        open_file: Callable[[FileEntry], None] | None = None,
        record_recent_server: Callable[[str], Any] | None = config.remember_recent_server,
        credential_store: CredentialStore | None = None,
        save_preferences: bool = False,
    ) -> None:
        if start is None:
            start = FilesystemLocation.of(Path.home())
        self.provider = provider or LocalDirectoryProvider()
        self.file_ops = file_ops or FileOperations()
        self.network = network or NetworkShareBrowser()
        self.runner = runner or BackgroundTaskRunner()
        self.trash_paths = trash_paths if trash_paths is not None else default_trash_paths()
        self._open_file = open_file
        self._record_recent_server = record_recent_server
        self._save_preferences = save_preferences

        self.navigation = NavigationState(start)
        self.expansion = ExpansionCache()
        self.clipboard = ClipboardCoordinator(pasteboard if pasteboard is not None else SystemPasteboard())
        self.auth = AuthenticationCoordinator(credential_store)
        self.search = SearchFilter()
        self.sort = sort or SortCriteria()
        self.show_hidden = show_hidden
        self.watcher = DirectoryWatcher(poll_seconds=watch_poll_seconds, monotonic=monotonic)
        self.debouncer = Debouncer(debounce_seconds, monotonic)

        self.entries: list[FileEntry] = []
        self.selection: set[Location] = set()
        self.pending_conflict: PendingConflict | None = None
        self.pending_move: PendingMove | None = None
        self.pending_delete: tuple[FilesystemLocation, ...] | None = None
        self.is_loading = False
        self.listing_error: str | None = None
        self.operation_errors: list[FinderError] = []
        self.needs_elevated_access = False
        self.dirty = True

        self._load_generation = 0
        self._child_loads: dict[Location, int] = {}
        self._enumerations: dict[str, int] = {}
        self._mounts: dict[NetworkShareLocation, int] = {}
        self._serial = 0
        self._watch_sample_in_flight = False
        self._refresh_in_flight = False
        self._closed = False

        self.reload()

    # State views

    @property
    def current_location(self) -> Location:
        return self.navigation.current

    @property
    def display_entries(self) -> list[DisplayEntry]:
        matches = self.search.matches if self.search.is_active else None
        return self.expansion.flatten(self.entries, matches)

    @property
    def search_query(self) -> str:
        return self.search.query

    @property
    def auth_prompt(self) -> AuthPrompt | None:
        return self.auth.prompt

    @property
    def error_message(self) -> str | None:
        if self.operation_errors:
            first = self.operation_errors[0]
            if len(self.operation_errors) == 1:
                return str(first)
            return f"{len(self.operation_errors)} items failed: {first}"
        return self.listing_error

    def breadcrumb(self) -> list[tuple[str, Location]]:
        return self.navigation.path_breadcrumb()

    def _next_serial(self) -> int:
        self._serial += 1
        return self._serial

    def _report(self, errors: Iterable[FinderError]) -> None:
        self.operation_errors = list(errors)
        for error in self.operation_errors:
            logger.info("operation failed: %s", error)
        self.dirty = True

    def _as_finder_error(self, error: BaseException) -> FinderError:
        if isinstance(error, FinderError):
            return error
        if isinstance(error, OSError):
            return translate_os_error(error)
        logger.debug("unexpected task failure", exc_info=error)
        return FinderError(str(error) or type(error).__name__)

    # Navigation

    def navigate(self, to: Location) -> None:
        if isinstance(to, NetworkShareLocation):
            self.mount_share(to)
            return
        self._clear_expansion()
        if self.navigation.navigate(to):
            self.selection.clear()
        self.reload()

    def go_back(self) -> bool:
        if self.navigation.go_back() is None:
            return False
        self._after_history_move()
        return True

    def go_forward(self) -> bool:
        if self.navigation.go_forward() is None:
            return False
        self._after_history_move()
        return True

    def _after_history_move(self) -> None:
        self._clear_expansion()
        self.selection.clear()
        self.reload()

    def go_to_parent(self) -> bool:
        parent = self.navigation.parent()
        if parent is None:
            return False
        self.navigate(parent)
        return True

    def open_entry(self, entry: FileEntry) -> None:
        """Navigate into folders and network nodes, mount shares, open files."""
        location = entry.location
        if isinstance(location, NetworkShareLocation):
            self.mount_share(location)
        elif entry.is_directory or isinstance(location, (NetworkRoot, NetworkHostLocation)):
            self.navigate(location)
        elif self._open_file is not None:
            self._open_file(entry)

    def reload(self) -> None:
        """Re-list the current location; results of earlier reloads are dropped."""
        self.debouncer.cancel()
        self._load_generation += 1
        generation = self._load_generation
        location = self.current_location
        self.listing_error = None
        self.needs_elevated_access = False
        self.dirty = True

        self.watcher.unwatch(location)
        self.watcher.sync([location, *self.expansion.expanded])

        if isinstance(location, FilesystemLocation):
            self.is_loading = True
            show_hidden, sort = self.show_hidden, self.sort
            self.runner.submit(
                lambda: self.provider.list_contents(location, show_hidden, sort),
                lambda value, error: self._apply_listing(generation, location, value, error),
            )
        elif isinstance(location, NetworkRoot):
            self.is_loading = False
            if not self.network.is_discovering:
                self.network.start_discovery()
            self.entries = sort_entries(self.network.host_entries(), self.sort)
        elif isinstance(location, NetworkHostLocation):
            self.entries = sort_entries(self.network.share_entries(location.hostname), self.sort)
            self.is_loading = True
            self._request_enumeration(location.hostname)

    def _apply_listing(
        self,
        generation: int,
        location: FilesystemLocation,
        value: list[FileEntry] | None,
        error: BaseException | None,
    ) -> None:
        if generation != self._load_generation or location != self.current_location:
            logger.debug("dropping stale listing for %s", location.path)
            return
        self.is_loading = False
        self.dirty = True
        if error is None:
            self.entries = list(value or ())
            return
        self.entries = []
        failure = self._as_finder_error(error)
        if isinstance(failure, PermissionDeniedError) and is_trash_location(location, self.trash_paths):
            self.needs_elevated_access = True
            self.listing_error = ELEVATED_ACCESS_MESSAGE
        else:
            self.listing_error = str(failure)

    # Expansion

    def _clear_expansion(self) -> None:
        for location in self.expansion.clear():
            self.watcher.unwatch(location)
        self._child_loads.clear()

    def toggle_expand(self, entry: FileEntry) -> bool:
        """Collapse an expanded row or expand a folder or host row.

        Returns whether the row is expanded afterwards.
        """
        location = entry.location
        if self.expansion.is_expanded(location):
            for removed in self.expansion.collapse(location):
                self.watcher.unwatch(removed)
                self._child_loads.pop(removed, None)
            self.dirty = True
            return False

        if isinstance(location, FilesystemLocation) and entry.is_directory:
            self.expansion.expand(location)
            self.watcher.watch(location)
            self._load_children(location)
        elif isinstance(location, NetworkHostLocation):
            self.expansion.expand(location)
            self._request_enumeration(location.hostname)
        else:
            return False
        self.dirty = True
        return True

    def _load_children(self, location: FilesystemLocation) -> None:
        serial = self._next_serial()
        self._child_loads[location] = serial
        show_hidden, sort = self.show_hidden, self.sort
        self.runner.submit(
            lambda: self.provider.list_contents(location, show_hidden, sort),
            lambda value, error: self._apply_children(serial, location, value, error),
        )

    def _apply_children(
        self,
        serial: int,
        location: FilesystemLocation,
        value: list[FileEntry] | None,
        error: BaseException | None,
    ) -> None:
        if self._child_loads.get(location) != serial:
            return
        del self._child_loads[location]
        if error is not None:
            self.expansion.set_children(location, [])
            self._report([self._as_finder_error(error)])
            return
        if self.expansion.set_children(location, value or ()):
            self.dirty = True

    # Listing options

    def set_search_query(self, text: str) -> None:
        if self.search.update(text):
            self.dirty = True

    def toggle_sort(self, field: SortField) -> None:
        self.sort = self.sort.toggled(field)
        if self._save_preferences:
            config.save_sort_criteria(self.sort)
        for location, children in list(self.expansion.children.items()):
            self.expansion.set_children(location, sort_entries(children, self.sort))
        self.reload()

    def set_show_hidden(self, show_hidden: bool) -> None:
        if show_hidden == self.show_hidden:
            return
        self.show_hidden = show_hidden
        if self._save_preferences:
            config.save_show_hidden(show_hidden)
        self.watcher.reset_signatures()
        self.reload()
        for location in list(self.expansion.expanded):
            if isinstance(location, FilesystemLocation):
                self._load_children(location)

    # Selection

    def set_selection(self, locations: Iterable[Location]) -> None:
        self.selection = set(locations)
        self.dirty = True

    def clear_selection(self) -> None:
        if self.selection:
            self.selection.clear()
            self.dirty = True

    def _targets(self, locations: Iterable[Location] | None) -> tuple[FilesystemLocation, ...]:
        if locations is None:
            locations = sorted(self.selection, key=str)
        return _filesystem_locations(locations)

    def _forget(self, removed: Iterable[FilesystemLocation]) -> None:
        for location in removed:
            self.selection.discard(location)
            for collapsed in self.expansion.collapse(location):
                self.watcher.unwatch(collapsed)
                self._child_loads.pop(collapsed, None)

    def _writable_destination(self) -> FilesystemLocation | None:
        location = self.current_location
        if isinstance(location, FilesystemLocation):
            return location
        self._report([FinderError("Items cannot be placed in the network browser")])
        return None

    # Clipboard and moves

    def copy_items(self, locations: Iterable[Location] | None = None) -> bool:
        entry = self.clipboard.copy(self._targets(locations))
        self.dirty = True
        return entry is not None

    def cut_items(self, locations: Iterable[Location] | None = None) -> bool:
        entry = self.clipboard.cut(self._targets(locations))
        self.dirty = True
        return entry is not None

    def clear_clipboard(self) -> None:
        self.clipboard.clear()
        self.dirty = True

    def paste_items(self) -> bool:
        """Paste the clipboard into the current folder.

        Any destination collision parks the whole paste in ``pending_conflict``
        before a single item is touched.
        """
        entry = self.clipboard.current
        if entry is None:
            return False
        destination = self._writable_destination()
        if destination is None:
            return False
        mode = TransferMode.MOVE if entry.is_cut else TransferMode.COPY
        self._start_transfer(entry.sources, destination, mode, entry)
        return True

    def _start_transfer(
        self,
        sources: Iterable[FilesystemLocation],
        destination: FilesystemLocation,
        mode: TransferMode,
        clipboard_entry: ClipboardEntry | None,
    ) -> None:
        self.operation_errors = []
        ops = self.file_ops
        sources = tuple(sources)

        def work():
            plan = plan_transfer(sources, destination, mode, ops.exists)
            if plan.conflicts:
                return plan, None
            return plan, execute_transfer(plan, ops)

        def apply(value, error) -> None:
            if error is not None:
                self._report([self._as_finder_error(error)])
                return
            plan, outcome = value
            if outcome is None:
                self.pending_conflict = PendingConflict(plan.conflicts, plan, clipboard_entry)
                self.dirty = True
                return
            self._finish_transfer(outcome, clipboard_entry)

        self.runner.submit(work, apply)

    def _finish_transfer(self, outcome: TransferOutcome, clipboard_entry: ClipboardEntry | None) -> None:
        if clipboard_entry is not None:
            self.clipboard.finish_paste(clipboard_entry, outcome)
        if outcome.plan.mode is TransferMode.MOVE:
            self._forget(FilesystemLocation(item.source) for item in outcome.succeeded)
        self._report(outcome.errors)
        self.reload()

    def confirm_overwrite(self) -> bool:
        conflict = self.pending_conflict
        if conflict is None:
            return False
        self.pending_conflict = None
        self.operation_errors = []
        ops = self.file_ops

        def apply(value, error) -> None:
            if error is not None:
                self._report([self._as_finder_error(error)])
                return
            self._finish_transfer(value, conflict.clipboard_entry)

        self.runner.submit(lambda: execute_transfer(conflict.plan, ops, overwrite=True), apply)
        self.dirty = True
        return True

    def cancel_conflict(self) -> None:
        self.pending_conflict = None
        self.dirty = True

    def request_move_items(
        self,
        locations: Iterable[Location],
        destination: FilesystemLocation | None = None,
    ) -> PendingMove | None:
        """Stage a drag-and-drop move for confirmation.

        Sources already inside ``destination`` are dropped; nothing is staged
        when none remain.
        """
        if destination is None:
            destination = self._writable_destination()
            if destination is None:
                return None
        sources = filter_move_sources(locations, destination)
        self.pending_move = PendingMove(sources, destination) if sources else None
        self.dirty = True
        return self.pending_move

    def confirm_move_items(self) -> bool:
        pending = self.pending_move
        if pending is None:
            return False
        self.pending_move = None
        self._start_transfer(pending.sources, pending.destination, TransferMode.MOVE, None)
        self.dirty = True
        return True

    def cancel_move(self) -> None:
        self.pending_move = None
        self.dirty = True

    # Trash and delete

    def move_to_trash(self, locations: Iterable[Location] | None = None) -> bool:
        targets = self._targets(locations)
        if not targets:
            return False
        self._remove_items(targets, self.file_ops.trash)
        return True

    def request_delete(self, locations: Iterable[Location] | None = None) -> bool:
        targets = self._targets(locations)
        self.pending_delete = targets or None
        self.dirty = True
        return bool(targets)

    def confirm_delete(self) -> bool:
        targets = self.pending_delete
        if not targets:
            return False
        self.pending_delete = None
        self._remove_items(targets, self.file_ops.delete)
        return True

    def cancel_delete(self) -> None:
        self.pending_delete = None
        self.dirty = True

    def _remove_items(
        self,
        targets: tuple[FilesystemLocation, ...],
        remove: Callable[[Path], None],
    ) -> None:
        self.operation_errors = []

        def work():
            removed: list[FilesystemLocation] = []
            errors: list[FinderError] = []
            for location in targets:
                try:
                    remove(location.path)
                except FinderError as exc:
                    errors.append(exc)
                    continue
                removed.append(location)
            return removed, errors

        def apply(value, error) -> None:
            if error is not None:
                self._report([self._as_finder_error(error)])
            else:
                removed, errors = value
                self._forget(removed)
                self._report(errors)
            self.reload()

        self.runner.submit(work, apply)

    # Rename and create

    def rename_item(self, at: Location, new_name: str) -> bool:
        """Rename ``at`` in place; renaming to the current name does nothing."""
        if not isinstance(at, FilesystemLocation):
            return False
        self.operation_errors = []
        try:
            name = validate_item_name(new_name)
        except FinderError as exc:
            self._report([exc])
            return False
        if at.path.with_name(name) == at.path:
            return False
        ops = self.file_ops

        def apply(value, error) -> None:
            if error is not None:
                self._report([self._as_finder_error(error)])
            else:
                self._forget([at])
                self.selection.add(FilesystemLocation(value))
            self.reload()

        self.runner.submit(lambda: ops.rename(at.path, name), apply)
        return True

    def create_folder(self, name: str) -> bool:
        return self._create(name, self.file_ops.create_directory)

    def create_file(self, name: str) -> bool:
        return self._create(name, self.file_ops.create_file)

    def _create(self, name: str, create: Callable[[Path], None]) -> bool:
        self.operation_errors = []
        destination = self._writable_destination()
        if destination is None:
            return False
        try:
            target = destination.path / validate_item_name(name)
        except FinderError as exc:
            self._report([exc])
            self.reload()
            return False

        def apply(value, error) -> None:
            if error is not None:
                self._report([self._as_finder_error(error)])
            else:
                self.selection = {FilesystemLocation(target)}
            self.reload()

        self.runner.submit(lambda: create(target), apply)
        return True

    # Network

    def start_network_discovery(self) -> None:
        self.network.start_discovery()
        self.dirty = True

    def stop_network_discovery(self) -> None:
        self.network.stop_discovery()
        self.dirty = True

    def _request_enumeration(self, hostname: str, credentials: Credentials | None = None) -> None:
        if credentials is None:
            credentials = self.auth.credentials_for(hostname)
        serial = self._next_serial()
        self._enumerations[hostname.lower()] = serial
        self.network.begin_enumeration(hostname)
        self.runner.submit(
            lambda: self.network.run_enumeration(hostname, credentials),
            lambda value, error: self._apply_enumeration(serial, hostname, credentials, value, error),
        )

    def _apply_enumeration(self, serial, hostname, credentials, result, error) -> None:
        if self._enumerations.get(hostname.lower()) != serial:
            return
        del self._enumerations[hostname.lower()]
        if error is not None:
            result = EnumerationFailed(str(self._as_finder_error(error)))
        self.network.apply_enumeration(hostname, result)
        host = NetworkHostLocation(hostname)
        is_current = self.current_location == host
        if is_current:
            self.is_loading = False
        self.dirty = True

        if isinstance(result, SharesListed):
            self.auth.accept(hostname, credentials)
            shares = sort_entries(self.network.share_entries(hostname), self.sort)
            if is_current:
                self.entries = shares
            self.expansion.set_children(host, shares)
        elif isinstance(result, EnumerationAuthRequired):
            logger.info("share listing on %s requires authentication", hostname)
            self.auth.require_enumeration(hostname)
            if is_current:
                self.entries = []
            self.expansion.set_children(host, [])
        else:
            self.expansion.set_children(host, [])
            self._report([NetworkError(self.network.describe_error(hostname))])

    def mount_share(self, location: NetworkShareLocation, credentials: Credentials | None = None) -> None:
        """Mount ``location`` and navigate to its mount point once mounted.

        The navigation only happens while the user is still where the mount
        was requested; otherwise the share is just recorded as mounted.
        """
        if credentials is None:
            credentials = self.auth.credentials_for(location.hostname)
        self.operation_errors = []
        serial = self._next_serial()
        self._mounts[location] = serial
        origin = self.current_location
        self.network.begin_mount(location)
        self.dirty = True
        self.runner.submit(
            lambda: self.network.run_mount(location, credentials),
            lambda value, error: self._apply_mount(serial, origin, location, credentials, value, error),
        )

    def _apply_mount(self, serial, origin, location, credentials, result, error) -> None:
        if self._mounts.get(location) != serial:
            return
        del self._mounts[location]
        if error is not None:
            result = MountFailed(str(self._as_finder_error(error)))
        mount_point = self.network.apply_mount(location, result)
        self.dirty = True
        if mount_point is not None:
            self.auth.accept(location.hostname, credentials)
        if self.current_location != origin:
            logger.debug("mount of %s finished after leaving %s", location.url, origin.name)
            return
        if mount_point is not None:
            self.navigate(mount_point)
        elif isinstance(result, MountAuthRequired):
            logger.info("mounting %s requires authentication", location.url)
            self.auth.require_mount(location)
        else:
            self._report([NetworkError(result.message)])

    def connect_to_server(self, address: str) -> bool:
        """Open a typed server address: mount a share or browse a host."""
        target = parse_server_address(address)
        if target is None:
            self._report([NetworkError(f"Invalid server address: {address.strip() or '(empty)'}")])
            return False
        if self._record_recent_server is not None:
            self._record_recent_server(address.strip())
        if isinstance(target, NetworkShareLocation):
            self.mount_share(target)
        else:
            self.navigate(target)
        return True

    def submit_credentials(self, credentials: Credentials) -> bool:
        """Retry whatever the pending prompt was blocking; the prompt closes first."""
        retry = self.auth.submit(credentials)
        self.dirty = True
        if isinstance(retry, EnumerationRetry):
            self._request_enumeration(retry.hostname, retry.credentials)
            if self.current_location == NetworkHostLocation(retry.hostname):
                self.is_loading = True
            return True
        if isinstance(retry, MountRetry):
            self.mount_share(retry.location, retry.credentials)
            return True
        return False

    def cancel_authentication(self) -> None:
        """Dismiss the pending prompt; the blocked listing or mount stays unavailable."""
        prompt = self.auth.prompt
        self.auth.cancel()
        self.dirty = True
        if prompt is not None:
            self._report([AuthRequiredError(f"Authentication required for {prompt.server_name}")])

    # Owner loop

    def poll(self) -> bool:
        """Apply finished work, merge discovery, sample watchers, fire the debounce.

        Returns ``True`` when visible state may have changed.
        """
        if self._closed:
            return False
        applied = self.runner.drain_results()
        if self.network.drain_discovery():
            if isinstance(self.current_location, NetworkRoot):
                self.entries = sort_entries(self.network.host_entries(), self.sort)
            self.dirty = True

        if not self._watch_sample_in_flight:
            due = self.watcher.due()
            if due:
                self._watch_sample_in_flight = True
                show_hidden = self.show_hidden
                self.runner.submit(lambda: sample_signatures(due, show_hidden), self._apply_watch_samples)

        if self.debouncer.fire_if_due():
            self._refresh_watched()
        return bool(applied) or self.dirty

    def _apply_watch_samples(self, value, error) -> None:
        self._watch_sample_in_flight = False
        if error is not None:
            logger.debug("watch sampling failed: %s", error)
            return
        if self.watcher.record(value):
            self.debouncer.schedule()

    def _refresh_watched(self) -> None:
        """Re-list the current folder and expanded folders in place."""
        if self._refresh_in_flight:
            self.debouncer.schedule()
            return
        generation = self._load_generation
        targets = [location for location in self.watcher.watched]
        show_hidden, sort = self.show_hidden, self.sort
        provider = self.provider

        def work() -> dict[FilesystemLocation, list[FileEntry]]:
            listings: dict[FilesystemLocation, list[FileEntry]] = {}
            for location in targets:
                try:
                    listings[location] = provider.list_contents(location, show_hidden, sort)
                except (FinderError, OSError) as exc:
                    logger.debug("background refresh of %s failed: %s", location.path, exc)
            return listings

        def apply(value, error) -> None:
            self._refresh_in_flight = False
            if error is not None:
                logger.debug("background refresh failed: %s", error)
                return
            if generation != self._load_generation:
                return
            for location, entries in value.items():
                if location == self.current_location:
                    self.entries = entries
                    self.dirty = True
                elif location not in self._child_loads and self.expansion.set_children(location, entries):
                    self.dirty = True

        self._refresh_in_flight = True
        self.runner.submit(work, apply)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.watcher.stop_all()
        self.debouncer.cancel()
        self.network.stop_discovery()
        self.runner.shutdown()

    def __enter__(self) -> FileBrowserSession:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


__all__ = [
    "ELEVATED_ACCESS_MESSAGE",
    "FileBrowserSession",
]
