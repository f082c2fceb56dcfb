"""
Seed Data Script - Creates tables, reference data and the bootstrap admin
Run: python -m scripts.seed_data
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from irequest.config.settings import settings
from irequest.repositories.database import create_tables
from irequest.repositories.seed import ensure_admin, seed_reference_data
from irequest.services.auth_service import hash_password


def main():
    print("=== Seeding database ===")
    print("-" * 40)

    create_tables()
    print("[OK] Tables ensured")

    seeded = seed_reference_data()
    for kind, status_id in seeded["statuses"].items():
        print(f"  Status  {status_id:>3}  {kind.value}")
    for name, priority_id in seeded["priorities"].items():
        print(f"  Priority {priority_id:>3}  {name.value}")

    user_id, created = ensure_admin(
        settings.bootstrap_username,
        settings.bootstrap_email,
        hash_password(settings.bootstrap_password),
        seeded["roles"],
    )
    if created:
        print(f"[OK] Created admin '{settings.bootstrap_username}' ({user_id})")
        print("     Change the bootstrap password after first login!")
    else:
        print(f"Admin '{settings.bootstrap_username}' already exists. Skipping.")

    print("-" * 40)
    print("Done!")


if __name__ == "__main__":
    main()
