from __future__ import annotations

import itertools
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable

import yaml

from syncsafe.domain.models import EventRef, FileKind, VaultEvent, VaultFile
from syncsafe.ports.vault_port import DestinationExistsError, VaultPort

logger = logging.getLogger(__name__)

EVENT_KINDS = ("create", "rename")
_FRONT_MATTER_DELIMITER = "---"


class LocalVaultAdapter(VaultPort):
    """A directory on disk used as the vault; paths are `/`-separated and relative to root."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()
        if not self._root.is_dir():
            raise RuntimeError(f"Vault folder not found: {self._root}")
        self._move_lock = threading.Lock()
        self._callbacks: dict[int, tuple[str, Callable[[VaultEvent], None]]] = {}
        self._callbacks_lock = threading.Lock()
        self._ref_ids = itertools.count(1)
        self._snapshot: dict[str, tuple[FileKind, int]] | None = None
        self._stop_watching = threading.Event()
        self._watch_thread: threading.Thread | None = None

    @property
    def root(self) -> Path:
        return self._root

    def list_files(self) -> list[VaultFile]:
        return [
            VaultFile.from_path(path)
            for path, (kind, _) in sorted(self._scan().items())
            if kind is FileKind.FILE
        ]

    def get_file(self, path: str) -> VaultFile | None:
        if not path.strip("/"):
            return None
        absolute = self._absolute(path)
        if not absolute.exists():
            return None
        kind = FileKind.FOLDER if absolute.is_dir() else FileKind.FILE
        return VaultFile.from_path(path, kind=kind)

    def move_file(self, file_ref: VaultFile, new_path: str) -> None:
        source = self._absolute(file_ref.path)
        target = self._absolute(new_path)
        with self._move_lock:
            if not source.exists():
                raise RuntimeError(f"Source not found: {file_ref.path}")
            if target.exists() and not _same_entry(source, target):
                raise DestinationExistsError(new_path)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                os.rename(source, target)
            except OSError as exc:
                raise RuntimeError(f"Failed to move {file_ref.path}: {exc}") from exc
            moved = VaultFile.from_path(new_path, kind=file_ref.kind)
            self._forget(file_ref.path, moved)
        logger.info("Moved %s -> %s", file_ref.path, moved.path)
        self._emit(VaultEvent(kind="rename", file=moved, old_path=file_ref.path))

    def process_front_matter(
        self, file_ref: VaultFile, mutate: Callable[[dict[str, Any]], None]
    ) -> None:
        if not file_ref.is_file or file_ref.extension.lower() != "md":
            raise RuntimeError(f"Front matter is only supported for Markdown files: {file_ref.path}")
        absolute = self._absolute(file_ref.path)
        try:
            text = absolute.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise RuntimeError(f"Failed to read {file_ref.path}") from exc

        front_matter, body = split_front_matter(text)
        mutate(front_matter)
        rendered = render_front_matter(front_matter) + body
        _write_atomic(absolute, rendered)

    def subscribe(self, kind: str, callback: Callable[[VaultEvent], None]) -> EventRef:
        if kind not in EVENT_KINDS:
            raise ValueError(f"Unsupported vault event: {kind}")
        ref = EventRef(ref_id=next(self._ref_ids), kind=kind)
        with self._callbacks_lock:
            self._callbacks[ref.ref_id] = (kind, callback)
        return ref

    def unsubscribe(self, ref: EventRef) -> None:
        with self._callbacks_lock:
            self._callbacks.pop(ref.ref_id, None)

    def poll_changes(self) -> list[VaultEvent]:
        """
        Diff the tree against the previous poll and emit the differences.

        The first call only records a baseline, so files that already exist
        are never reported as created.
        """
        current = self._scan()
        with self._move_lock:
            previous = self._snapshot
            self._snapshot = current
        if previous is None:
            return []

        removed = {path: info for path, info in previous.items() if path not in current}
        removed_by_inode = {inode: path for path, (_, inode) in removed.items()}
        events: list[VaultEvent] = []
        for path in sorted(set(current) - set(previous)):
            kind, inode = current[path]
            file_ref = VaultFile.from_path(path, kind=kind)
            old_path = removed_by_inode.get(inode)
            if old_path is not None:
                events.append(VaultEvent(kind="rename", file=file_ref, old_path=old_path))
            else:
                events.append(VaultEvent(kind="create", file=file_ref))
        for event in events:
            logger.debug("Vault %s event for %s", event.kind, event.file.path)
            self._emit(event)
        return events

    def start_watching(self, interval_seconds: float = 1.0) -> None:
        if self._watch_thread is not None and self._watch_thread.is_alive():
            return
        self.poll_changes()
        self._stop_watching.clear()

        def _watch() -> None:
            while not self._stop_watching.wait(interval_seconds):
                try:
                    self.poll_changes()
                except RuntimeError as exc:
                    logger.warning("Vault polling failed: %s", exc)

        self._watch_thread = threading.Thread(target=_watch, daemon=True)
        self._watch_thread.start()

    def stop_watching(self) -> None:
        self._stop_watching.set()
        if self._watch_thread is not None:
            self._watch_thread.join()
            self._watch_thread = None

    def _emit(self, event: VaultEvent) -> None:
        with self._callbacks_lock:
            callbacks = [cb for kind, cb in self._callbacks.values() if kind == event.kind]
        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                # Logged only; remaining callbacks and the watcher keep running.
                logger.exception("Vault %s callback failed for %s", event.kind, event.file.path)

    def _forget(self, old_path: str, moved: VaultFile) -> None:
        # Keeps the watcher from re-reporting a move this adapter made itself.
        if self._snapshot is None:
            return
        info = self._snapshot.pop(old_path, None)
        if info is not None:
            self._snapshot[moved.path] = info

    def _scan(self) -> dict[str, tuple[FileKind, int]]:
        entries: dict[str, tuple[FileKind, int]] = {}
        try:
            for dirpath, dirnames, filenames in os.walk(self._root):
                dirnames[:] = [name for name in dirnames if not name.startswith(".")]
                base = Path(dirpath)
                for name in dirnames:
                    self._record(entries, base / name, FileKind.FOLDER)
                for name in filenames:
                    if not name.startswith("."):
                        self._record(entries, base / name, FileKind.FILE)
        except OSError as exc:
            raise RuntimeError(f"Failed to list vault {self._root}") from exc
        return entries

    def _record(
        self, entries: dict[str, tuple[FileKind, int]], absolute: Path, kind: FileKind
    ) -> None:
        try:
            inode = absolute.stat().st_ino
        except FileNotFoundError:
            # Vanished between listing and stat.
            return
        entries[self._relative(absolute)] = (kind, inode)

    def _absolute(self, path: str) -> Path:
        segments = [part for part in path.split("/") if part]
        return self._root.joinpath(*segments)

    def _relative(self, absolute: Path) -> str:
        return absolute.relative_to(self._root).as_posix()


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n") != _FRONT_MATTER_DELIMITER:
        return {}, text
    for index, line in enumerate(lines[1:], start=1):
        if line.rstrip("\r\n") == _FRONT_MATTER_DELIMITER:
            raw = "".join(lines[1:index])
            try:
                data = yaml.safe_load(raw)
            except yaml.YAMLError as exc:
                raise RuntimeError("Invalid front matter") from exc
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise RuntimeError("Front matter must be a mapping")
            return data, "".join(lines[index + 1 :])
    return {}, text


def render_front_matter(data: dict[str, Any]) -> str:
    if not data:
        return f"{_FRONT_MATTER_DELIMITER}\n{_FRONT_MATTER_DELIMITER}\n"
    dumped = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return f"{_FRONT_MATTER_DELIMITER}\n{dumped}{_FRONT_MATTER_DELIMITER}\n"


def _write_atomic(path: Path, content: str) -> None:
    try:
        fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=".syncsafe-", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(temp_name, path)
    except OSError as exc:
        raise RuntimeError(f"Failed to write {path}") from exc


def _same_entry(source: Path, target: Path) -> bool:
    # Case-only renames on case-insensitive file systems resolve to the source itself.
    try:
        return os.path.samefile(source, target)
    except OSError:
        return False
