"""
Maintenance tool for the local crewbook store.

Usage:
  python maintenance.py check              integrity scan (read-only)
  python maintenance.py cleanup            scan and repair
  python maintenance.py errors             show the persisted error log
  python maintenance.py clear-errors       clear the error log
  python maintenance.py export <file>      write a backup
  python maintenance.py import <file>      restore a backup

The store location comes from STORAGE_URL (environment or .env).
"""
import sys

from crewbook.core.config import settings
from crewbook.core.errors import AppError
from crewbook.main import build_container, configure_logging


def main(argv: list[str]) -> int:
    if not argv or argv[0] not in {"check", "cleanup", "errors", "clear-errors", "export", "import"}:
        print(__doc__)
        return 1

    command = argv[0]
    if command in {"export", "import"} and len(argv) != 2:
        print(f"Usage: python maintenance.py {command} <file>")
        return 1

    configure_logging(settings.LOG_LEVEL)
    container = build_container()

    try:
        if command == "check":
            report = container.data_service.validate_data_integrity()
            if report.is_valid:
                print("✓ No data issues found")
            for issue in report.issues:
                print(f"  – {issue}")
            return 0 if report.is_valid else 2

        if command == "cleanup":
            report = container.data_service.cleanup_data()
            if not report.cleaned:
                print("✓ No data issues found")
            for key, removed in report.removed.items():
                print(f"  {key}: {removed} record(s) removed")
            return 0

        if command == "errors":
            for entry in container.error_handler.get_stored_errors():
                print(f"{entry.get('timestamp')}  {entry.get('code'):<22} {entry.get('message')}")
            return 0

        if command == "clear-errors":
            container.error_handler.clear_errors()
            print("✓ Error log cleared")
            return 0

        if command == "export":
            return 0 if container.backup.write_backup(argv[1]) else 1

        restored = container.backup.read_backup(argv[1])
        print(f"✓ {restored} collection(s) restored")
        return 0
    except AppError as e:
        print(f"Error: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
