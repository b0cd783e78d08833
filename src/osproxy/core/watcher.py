"""Watch the network preferences store for changes made by any program.

The watcher only signals that the store moved; subscribers call `get()` again
to read the new configuration. All watched paths share one underlying file
watcher so a change is delivered once, however many times `watch()` ran.

Qt delivers file notifications through the event loop of the thread that
created the watcher, so a QCoreApplication (or QApplication) must be running
there for events to arrive.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterable, Protocol, Union

from PyQt6.QtCore import QFileSystemWatcher, QObject, pyqtSignal

from osproxy.core.models import ChangeEvent
from osproxy.core.platform_commands import get_platform_commands

logger = logging.getLogger(__name__)

PathArg = Union[str, os.PathLike]
ChangeCallback = Callable[[str], None]


class WatchHandle(Protocol):
    def add(self, paths: list[str]) -> list[str]:
        """Start watching `paths` and return the ones actually being watched."""
        ...

    def remove(self, paths: list[str]) -> None:
        ...


HandleFactory = Callable[[ChangeCallback, QObject], WatchHandle]


class QtWatchHandle:
    """QFileSystemWatcher reporting every changed path to one callback."""

    def __init__(self, on_change: ChangeCallback, parent: QObject | None = None) -> None:
        self._on_change = on_change
        self._watcher = QFileSystemWatcher(parent)
        self._watcher.fileChanged.connect(self._on_file_changed)
        self._watcher.directoryChanged.connect(self._on_change)

    def add(self, paths: list[str]) -> list[str]:
        failed = set(self._watcher.addPaths(paths))
        for path in failed:
            logger.warning("Unable to watch path: %s", path)
        return [path for path in paths if path not in failed]

    def remove(self, paths: list[str]) -> None:
        watched = set(self._watcher.files()) | set(self._watcher.directories())
        targets = [path for path in paths if path in watched]
        if targets:
            self._watcher.removePaths(targets)

    def _on_file_changed(self, path: str) -> None:
        # A file replaced by rename drops out of the watch list.
        if path not in self._watcher.files() and os.path.exists(path):
            self._watcher.addPath(path)
        self._on_change(path)


class WatchSession:
    """The set of watched paths and the handle that serves all of them."""

    def __init__(self) -> None:
        self._paths: list[str] = []
        self.handle: WatchHandle | None = None

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(self._paths)

    @property
    def active(self) -> bool:
        return self.handle is not None and bool(self._paths)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def add(self, paths: Iterable[str]) -> list[str]:
        added: list[str] = []
        for path in paths:
            if path not in self._paths:
                self._paths.append(path)
                added.append(path)
        return added

    def remove(self, paths: Iterable[str]) -> list[str]:
        removed: list[str] = []
        for path in paths:
            if path in self._paths:
                self._paths.remove(path)
                removed.append(path)
        return removed


class ChangeWatcher(QObject):
    changed = pyqtSignal(object)

    def __init__(
        self,
        *,
        default_path: str | None = None,
        session: WatchSession | None = None,
        handle_factory: HandleFactory = QtWatchHandle,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._default_path = default_path
        self._session = session or WatchSession()
        self._handle_factory = handle_factory

    @property
    def session(self) -> WatchSession:
        return self._session

    @property
    def default_path(self) -> str:
        if self._default_path is None:
            self._default_path = get_platform_commands().config_path
        return self._default_path

    def is_watching(self) -> bool:
        return self._session.active

    def _targets(self, paths: PathArg | Iterable[PathArg] | None) -> list[str]:
        if paths is None:
            return [self.default_path]
        if isinstance(paths, (str, os.PathLike)):
            return [os.fspath(paths)]
        return [os.fspath(path) for path in paths]

    def watch(self, paths: PathArg | Iterable[PathArg] | None = None) -> WatchSession:
        """Start watching `paths` (default: the OS network preferences store).

        Paths join the existing session when one is already running. Paths the
        platform refuses to watch, such as missing files, are left out of it.
        """
        targets = [
            path for path in dict.fromkeys(self._targets(paths)) if path not in self._session
        ]
        if self._session.handle is None:
            self._session.handle = self._handle_factory(self._on_raw_change, self)
            logger.info("Started proxy configuration watch session")
        if not targets:
            return self._session
        added = self._session.add(self._session.handle.add(targets))
        if added:
            logger.info("Watching for proxy changes: %s", ", ".join(added))
        return self._session

    def unwatch(self, paths: PathArg | Iterable[PathArg] | None = None) -> None:
        """Stop watching `paths`. Does nothing when no session exists."""
        if self._session.handle is None:
            return
        removed = self._session.remove(self._targets(paths))
        if removed:
            self._session.handle.remove(removed)
            logger.info("Stopped watching: %s", ", ".join(removed))

    def _on_raw_change(self, path: str) -> None:
        if path not in self._session:
            return
        self.changed.emit(ChangeEvent(path=path))
