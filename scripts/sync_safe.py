from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

_REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(_REPO_ROOT / ".env", override=False)

from syncsafe.container import build_services
from syncsafe.domain.notices import NO_ACTIVE_FILE_MESSAGE, batch_notice, single_file_notice
from syncsafe.settings import (
    LOG_LEVEL,
    LOG_PATH,
    SQLITE_PATH,
    SYNCSAFE_VAULT_PATH,
    WATCH_INTERVAL_SECONDS,
)
from syncsafe.utils.logging import setup_logging


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise argparse.ArgumentTypeError(f"Expected a boolean, got {value!r}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rename vault files so their names are safe for file synchronization."
    )
    parser.add_argument("--vault", default=SYNCSAFE_VAULT_PATH, help="Vault folder.")
    parser.add_argument("--sqlite-path", default=SQLITE_PATH, help="Settings database.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("report", help="Print a report of all unsafe file names.")
    subparsers.add_parser("rename-all", help="Rename all files to be sync-safe.")

    rename = subparsers.add_parser("rename", help="Rename one file to be sync-safe.")
    rename.add_argument("path", help="Vault-relative path of the file.")

    watch = subparsers.add_parser("watch", help="Rename new files automatically.")
    watch.add_argument("--interval", type=float, default=WATCH_INTERVAL_SECONDS)

    config = subparsers.add_parser("config", help="Show or change persisted options.")
    config.add_argument("--rename-automatically", type=_parse_bool)
    config.add_argument("--add-original-alias", type=_parse_bool)
    config.add_argument("--additional-characters")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(LOG_LEVEL, Path(LOG_PATH) if LOG_PATH else None)
    services = build_services(args.vault, args.sqlite_path)
    rename_service = services["rename_service"]

    if args.command == "report":
        print(rename_service.generate_report())
        return 0

    if args.command == "rename-all":
        summary = rename_service.rename_all_files()
        print(batch_notice(summary))
        return 0 if summary.failures == 0 else 1

    if args.command == "rename":
        file_ref = services["vault"].get_file(args.path)
        if file_ref is None or not file_ref.is_file:
            print(NO_ACTIVE_FILE_MESSAGE)
            return 1
        result = rename_service.rename_single_file(file_ref)
        print(single_file_notice(result))
        return 0 if result.success else 1

    if args.command == "watch":
        settings = services["settings_service"].activate()
        if not settings.rename_automatically:
            print("Automatic renaming is disabled; enable it with `config --rename-automatically true`.")
            return 1
        vault = services["vault"]
        vault.start_watching(args.interval)
        print(f"Watching {vault.root} (Ctrl+C to stop)")
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            pass
        finally:
            services["auto_rename_service"].disable()
            vault.stop_watching()
        return 0

    changes = {
        name: value
        for name, value in (
            ("rename_automatically", args.rename_automatically),
            ("add_original_alias", args.add_original_alias),
            ("additional_characters", args.additional_characters),
        )
        if value is not None
    }
    settings_service = services["settings_service"]
    settings = settings_service.update(**changes) if changes else settings_service.load()
    for name, value in settings.to_mapping().items():
        print(f"{name}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
