from syncsafe.container import build_services
from syncsafe.domain.models import RenameStatus


def test_end_to_end_rename_with_alias(tmp_path) -> None:
    vault_root = tmp_path / "vault"
    (vault_root / "notes").mkdir(parents=True)
    (vault_root / "notes" / "What’s new?.md").write_text("Body\n", encoding="utf-8")
    (vault_root / "ok.md").write_text("", encoding="utf-8")
    services = build_services(str(vault_root), str(tmp_path / "settings.db"))

    report = services["rename_service"].generate_report()
    assert "| [[notes/What’s new?.md]] | What’s new?.md | What's new-.md | Yes |" in report

    file_ref = services["vault"].get_file("notes/What’s new?.md")
    result = services["rename_service"].rename_single_file(file_ref)

    assert result.status is RenameStatus.RENAMED
    renamed = vault_root / "notes" / "What's new-.md"
    assert renamed.read_text(encoding="utf-8") == "---\naliases:\n- What’s new?\n---\nBody\n"
    assert services["rename_service"].generate_report() == "All files are already sync-safe."


def test_end_to_end_batch_collision(tmp_path) -> None:
    vault_root = tmp_path / "vault"
    vault_root.mkdir()
    for name in ("a?.md", "a*.md", "b|.md"):
        (vault_root / name).write_text(name, encoding="utf-8")
    services = build_services(str(vault_root), str(tmp_path / "settings.db"))

    summary = services["rename_service"].rename_all_files()

    assert summary.successes == 2
    assert summary.failures == 1
    assert (vault_root / "a-.md").exists()
    assert (vault_root / "b-.md").exists()
    leftovers = [name for name in ("a?.md", "a*.md") if (vault_root / name).exists()]
    assert len(leftovers) == 1


def test_undecodable_note_is_reported_as_failed(tmp_path) -> None:
    vault_root = tmp_path / "vault"
    vault_root.mkdir()
    (vault_root / "caf?.md").write_bytes("café".encode("latin-1"))
    services = build_services(str(vault_root), str(tmp_path / "settings.db"))

    result = services["rename_service"].rename_single_file(services["vault"].get_file("caf?.md"))

    assert result.status is RenameStatus.FAILED
    assert "Failed to read caf?.md" in result.message
    assert (vault_root / "caf?.md").exists()
