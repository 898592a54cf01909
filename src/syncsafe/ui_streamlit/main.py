from __future__ import annotations

import sys
import threading
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

_SRC_ROOT = Path(__file__).resolve().parents[2]
if str(_SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(_SRC_ROOT))
load_dotenv(_SRC_ROOT.parent / ".env", override=False)

from syncsafe.container import build_services
from syncsafe.domain.notices import NO_ACTIVE_FILE_MESSAGE, batch_notice, single_file_notice
from syncsafe.domain.safe_name import BASE_CHARACTERS
from syncsafe.settings import LOG_LEVEL, SQLITE_PATH, SYNCSAFE_VAULT_PATH, WATCH_INTERVAL_SECONDS
from syncsafe.utils.logging import setup_logging


def _init_state() -> None:
    st.session_state.setdefault("report", "")


class _ServiceRegistry:
    """Process-wide services; one watcher per process whatever the number of sessions."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._key: tuple[str, str] | None = None
        self._services: dict | None = None

    def get(self, vault_path: str, sqlite_path: str) -> dict:
        with self._lock:
            if self._services is None or self._key != (vault_path, sqlite_path):
                if self._services is not None:
                    self._services["auto_rename_service"].disable()
                    self._services["vault"].stop_watching()
                    self._services = None
                services = build_services(vault_path, sqlite_path)
                services["settings_service"].activate()
                services["vault"].start_watching(WATCH_INTERVAL_SECONDS)
                self._services = services
                self._key = (vault_path, sqlite_path)
            return self._services


@st.cache_resource
def _service_registry() -> _ServiceRegistry:
    return _ServiceRegistry()


def _get_services(vault_path: str, sqlite_path: str):
    return _service_registry().get(vault_path, sqlite_path)


def _show_pending_notices(services) -> None:
    for message in services["notices"].drain():
        st.toast(message)


def _render_settings(services) -> None:
    settings = services["settings_service"].load()
    st.sidebar.header("Settings")
    rename_automatically = st.sidebar.toggle(
        "Rename automatically",
        value=settings.rename_automatically,
        help="If active, all new files will be renamed automatically.",
    )
    add_original_alias = st.sidebar.toggle(
        "Keep original name as alias",
        value=settings.add_original_alias,
        help=(
            "When a file name is rewritten, the original file name (without file extension) "
            "is added as an alias so that it can still be used to link to the file."
        ),
    )
    additional_characters = st.sidebar.text_area(
        "Allowed special characters",
        value=settings.additional_characters,
        help=(
            "Specify characters that should be allowed in addition to the basics.\n"
            "Always allowed are roman letters, numbers, hyphen, dot, underline and space "
            f"(/[{BASE_CHARACTERS}]/)."
        ),
    )
    changes = {
        name: value
        for name, value in (
            ("rename_automatically", rename_automatically),
            ("add_original_alias", add_original_alias),
            ("additional_characters", additional_characters),
        )
        if getattr(settings, name) != value
    }
    if changes:
        try:
            services["settings_service"].update(**changes)
        except (RuntimeError, ValueError) as exc:
            st.sidebar.error(f"Saving settings failed: {exc}")


def main() -> None:
    st.title("Sync-safe File Names")
    _init_state()
    setup_logging(LOG_LEVEL)

    vault_path = st.text_input("Vault folder", value=SYNCSAFE_VAULT_PATH)
    sqlite_path = st.text_input("SQLite Path", value=SQLITE_PATH)
    try:
        services = _get_services(vault_path, sqlite_path)
    except RuntimeError as exc:
        st.error(f"Opening vault failed: {exc}")
        return

    _render_settings(services)
    _show_pending_notices(services)

    cols = st.columns(2)
    report_clicked = cols[0].button("Report unsafe file names")
    rename_all_clicked = cols[1].button("Rename all files to be sync-safe")

    if report_clicked:
        try:
            st.session_state["report"] = services["rename_service"].generate_report()
        except RuntimeError as exc:
            st.error(f"Report failed: {exc}")

    if rename_all_clicked:
        try:
            summary = services["rename_service"].rename_all_files()
            message = batch_notice(summary)
            if summary.failures == 0:
                st.success(message)
            else:
                st.warning(message)
            st.session_state["report"] = ""
        except RuntimeError as exc:
            st.error(f"Rename failed: {exc}")

    st.subheader("Rename current file")
    paths = [file_ref.path for file_ref in services["vault"].list_files()]
    selected = st.selectbox("File", options=[""] + paths)
    if st.button("Rename current file to be sync-safe"):
        file_ref = services["vault"].get_file(selected) if selected else None
        if file_ref is None:
            st.warning(NO_ACTIVE_FILE_MESSAGE)
        else:
            result = services["rename_service"].rename_single_file(file_ref)
            message = single_file_notice(result)
            if result.success:
                st.success(message)
            else:
                st.error(message)

    if st.session_state.get("report"):
        st.subheader("Report")
        st.markdown(st.session_state["report"])


if __name__ == "__main__":
    main()
