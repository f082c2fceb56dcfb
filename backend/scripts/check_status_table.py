"""Check the Status table against the lifecycle statuses the app needs

Run: python -m scripts.check_status_table
Exits with status 1 when a lifecycle status is missing.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from irequest.domain.enums import StatusKind
from irequest.repositories.lookup_repo import LookupRepository


def main() -> int:
    statuses = LookupRepository().list_statuses()

    print("=== Status table ===")
    for status in statuses:
        final = "final" if status.is_final else ""
        print(f"  {status.status_id:>3}  {status.status_name:<15} {final}")

    print()
    print("=== Lifecycle statuses ===")
    names = {status.status_name.strip() for status in statuses}
    missing = [kind for kind in StatusKind if kind.value not in names]
    for kind in StatusKind:
        mark = "MISSING" if kind in missing else "ok"
        print(f"  {kind.name:<12} {kind.value:<15} {mark}")

    if missing:
        print()
        print("Run `python -m scripts.seed_data` to insert the missing rows.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
