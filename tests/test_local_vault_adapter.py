import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from syncsafe.adapters.local_vault_adapter import (
    LocalVaultAdapter,
    render_front_matter,
    split_front_matter,
)
from syncsafe.domain.models import FileKind, VaultFile
from syncsafe.ports.vault_port import DestinationExistsError, VaultPort


def _write(root, relative: str, content: str = "") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_adapter_satisfies_port(tmp_path) -> None:
    assert isinstance(LocalVaultAdapter(tmp_path), VaultPort)


def test_missing_vault_raises(tmp_path) -> None:
    with pytest.raises(RuntimeError, match="Vault folder not found"):
        LocalVaultAdapter(tmp_path / "missing")


def test_list_files_skips_hidden_entries(tmp_path) -> None:
    _write(tmp_path, "notes/a.md")
    _write(tmp_path, "b?.md")
    _write(tmp_path, ".obsidian/workspace.json")
    _write(tmp_path, ".hidden.md")

    paths = [file_ref.path for file_ref in LocalVaultAdapter(tmp_path).list_files()]

    assert paths == ["b?.md", "notes/a.md"]


def test_get_file_reports_kind(tmp_path) -> None:
    _write(tmp_path, "notes/a.md")
    vault = LocalVaultAdapter(tmp_path)

    assert vault.get_file("notes/a.md") == VaultFile("a.md", ("notes",))
    assert vault.get_file("notes").kind is FileKind.FOLDER
    assert vault.get_file("notes/missing.md") is None


def test_move_file_renames_and_emits_event(tmp_path) -> None:
    _write(tmp_path, "notes/bad?.md", "body")
    vault = LocalVaultAdapter(tmp_path)
    events = []
    vault.subscribe("rename", events.append)

    vault.move_file(VaultFile("bad?.md", ("notes",)), "notes/bad-.md")

    assert (tmp_path / "notes" / "bad-.md").read_text(encoding="utf-8") == "body"
    assert not (tmp_path / "notes" / "bad?.md").exists()
    assert events[0].file.path == "notes/bad-.md"
    assert events[0].old_path == "notes/bad?.md"


def test_move_file_never_overwrites(tmp_path) -> None:
    _write(tmp_path, "bad?.md", "source")
    _write(tmp_path, "bad-.md", "existing")
    vault = LocalVaultAdapter(tmp_path)

    with pytest.raises(DestinationExistsError):
        vault.move_file(VaultFile("bad?.md"), "bad-.md")

    assert (tmp_path / "bad-.md").read_text(encoding="utf-8") == "existing"
    assert (tmp_path / "bad?.md").exists()


def test_move_missing_source_raises(tmp_path) -> None:
    vault = LocalVaultAdapter(tmp_path)

    with pytest.raises(RuntimeError, match="Source not found"):
        vault.move_file(VaultFile("gone.md"), "other.md")


def test_concurrent_moves_to_one_target(tmp_path) -> None:
    _write(tmp_path, "a?.md", "first")
    _write(tmp_path, "a*.md", "second")
    vault = LocalVaultAdapter(tmp_path)

    def _move(name: str) -> bool:
        try:
            vault.move_file(VaultFile(name), "a-.md")
            return True
        except DestinationExistsError:
            return False

    with ThreadPoolExecutor(max_workers=2) as executor:
        outcomes = list(executor.map(_move, ["a?.md", "a*.md"]))

    assert sorted(outcomes) == [False, True]


def test_unsubscribe_stops_callbacks(tmp_path) -> None:
    _write(tmp_path, "bad?.md")
    vault = LocalVaultAdapter(tmp_path)
    events = []
    ref = vault.subscribe("rename", events.append)
    vault.unsubscribe(ref)

    vault.move_file(VaultFile("bad?.md"), "bad-.md")

    assert events == []


def test_subscribe_rejects_unknown_event(tmp_path) -> None:
    with pytest.raises(ValueError, match="Unsupported vault event"):
        LocalVaultAdapter(tmp_path).subscribe("delete", lambda event: None)


def test_process_front_matter_creates_block(tmp_path) -> None:
    _write(tmp_path, "note.md", "# Title\n")
    vault = LocalVaultAdapter(tmp_path)

    vault.process_front_matter(
        VaultFile("note.md"), lambda data: data.setdefault("aliases", []).append("note?")
    )

    text = (tmp_path / "note.md").read_text(encoding="utf-8")
    assert text == "---\naliases:\n- note?\n---\n# Title\n"


def test_process_front_matter_keeps_existing_keys(tmp_path) -> None:
    _write(tmp_path, "note.md", "---\ntags: [a]\naliases: [old]\n---\nBody\n")
    vault = LocalVaultAdapter(tmp_path)

    vault.process_front_matter(VaultFile("note.md"), lambda data: data["aliases"].append("new"))

    data, body = split_front_matter((tmp_path / "note.md").read_text(encoding="utf-8"))
    assert data == {"tags": ["a"], "aliases": ["old", "new"]}
    assert body == "Body\n"


def test_process_front_matter_rejects_non_markdown(tmp_path) -> None:
    _write(tmp_path, "image.png")

    with pytest.raises(RuntimeError, match="only supported for Markdown"):
        LocalVaultAdapter(tmp_path).process_front_matter(VaultFile("image.png"), lambda data: None)


def test_split_front_matter_without_block() -> None:
    assert split_front_matter("plain text\n") == ({}, "plain text\n")
    assert split_front_matter("---\nunterminated\n") == ({}, "---\nunterminated\n")


def test_split_front_matter_rejects_non_mapping() -> None:
    with pytest.raises(RuntimeError, match="must be a mapping"):
        split_front_matter("---\n- a\n- b\n---\n")


def test_render_empty_front_matter() -> None:
    assert render_front_matter({}) == "---\n---\n"


def test_poll_changes_reports_created_files(tmp_path) -> None:
    _write(tmp_path, "existing.md")
    vault = LocalVaultAdapter(tmp_path)
    created = []
    vault.subscribe("create", created.append)

    assert vault.poll_changes() == []
    _write(tmp_path, "new?.md")
    events = vault.poll_changes()

    assert [(event.kind, event.file.path) for event in events] == [("create", "new?.md")]
    assert created == events


def test_poll_changes_reports_external_renames(tmp_path) -> None:
    _write(tmp_path, "before.md")
    vault = LocalVaultAdapter(tmp_path)
    vault.poll_changes()

    (tmp_path / "before.md").rename(tmp_path / "after?.md")
    events = vault.poll_changes()

    assert len(events) == 1
    assert events[0].kind == "rename"
    assert events[0].file.path == "after?.md"
    assert events[0].old_path == "before.md"


def test_poll_changes_ignores_own_moves(tmp_path) -> None:
    _write(tmp_path, "bad?.md")
    vault = LocalVaultAdapter(tmp_path)
    vault.poll_changes()

    vault.move_file(VaultFile("bad?.md"), "bad-.md")

    assert vault.poll_changes() == []


def test_undecodable_markdown_raises_runtime_error(tmp_path) -> None:
    (tmp_path / "caf?.md").write_bytes("café".encode("latin-1"))

    with pytest.raises(RuntimeError, match="Failed to read caf\\?.md"):
        LocalVaultAdapter(tmp_path).process_front_matter(VaultFile("caf?.md"), lambda data: None)


def test_failing_callback_does_not_block_other_callbacks(tmp_path) -> None:
    _write(tmp_path, "existing.md")
    vault = LocalVaultAdapter(tmp_path)
    seen = []

    def _broken(event) -> None:
        raise ValueError("handler bug")

    vault.subscribe("create", _broken)
    vault.subscribe("create", seen.append)
    vault.poll_changes()
    _write(tmp_path, "new.md")

    events = vault.poll_changes()

    assert [event.file.path for event in events] == ["new.md"]
    assert seen == events


def test_failing_callback_does_not_fail_move(tmp_path) -> None:
    _write(tmp_path, "bad?.md")
    vault = LocalVaultAdapter(tmp_path)

    def _broken(event) -> None:
        raise ValueError("handler bug")

    vault.subscribe("rename", _broken)

    vault.move_file(VaultFile("bad?.md"), "bad-.md")

    assert (tmp_path / "bad-.md").exists()


def test_watcher_survives_failing_callback(tmp_path) -> None:
    vault = LocalVaultAdapter(tmp_path)
    later_seen = threading.Event()

    def _handler(event) -> None:
        if event.file.name == "first.md":
            raise ValueError("handler bug")
        later_seen.set()

    vault.subscribe("create", _handler)
    vault.start_watching(0.02)
    try:
        _write(tmp_path, "first.md")
        time.sleep(0.1)
        _write(tmp_path, "later.md")

        assert later_seen.wait(timeout=5)
        assert vault._watch_thread is not None and vault._watch_thread.is_alive()
    finally:
        vault.stop_watching()
