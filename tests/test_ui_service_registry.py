from unittest.mock import Mock

from syncsafe.ui_streamlit import main as ui_main


def _fake_services(vault_path: str, sqlite_path: str) -> dict:
    return {
        "vault": Mock(),
        "settings_service": Mock(),
        "auto_rename_service": Mock(),
        "notices": Mock(),
    }


def test_sessions_share_one_set_of_services(monkeypatch) -> None:
    build = Mock(side_effect=_fake_services)
    monkeypatch.setattr(ui_main, "build_services", build)
    registry = ui_main._ServiceRegistry()

    first = registry.get("/vault", "./syncsafe.db")
    second = registry.get("/vault", "./syncsafe.db")

    assert first is second
    build.assert_called_once_with("/vault", "./syncsafe.db")
    first["vault"].start_watching.assert_called_once()
    first["settings_service"].activate.assert_called_once()


def test_changing_vault_stops_previous_watcher(monkeypatch) -> None:
    monkeypatch.setattr(ui_main, "build_services", _fake_services)
    registry = ui_main._ServiceRegistry()

    old = registry.get("/vault-a", "./syncsafe.db")
    new = registry.get("/vault-b", "./syncsafe.db")

    assert old is not new
    old["auto_rename_service"].disable.assert_called_once()
    old["vault"].stop_watching.assert_called_once()
    new["vault"].start_watching.assert_called_once()
    new["vault"].stop_watching.assert_not_called()
