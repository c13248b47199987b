"""
Seed one account per portal for local development.

Creates an employee and a HOD in each department plus the two finance
accounts (APA and AM). Existing emails are skipped.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from autotrack.core.database import SessionLocal
from autotrack.models.user import User
from autotrack.services.users import create_user

DEFAULT_PASSWORD = "changeme123"

DEPARTMENTS = ["Engineering", "Marketing", "Operations"]

FINANCE_USERS = [
    {"email": "apa@autotrack.local", "full_name": "Accounts Payable", "subrole": "apa"},
    {"email": "am@autotrack.local", "full_name": "Accounts Manager", "subrole": "am"},
]


def _demo_users():
    for department in DEPARTMENTS:
        slug = department.lower()
        yield {
            "email": f"employee.{slug}@autotrack.local",
            "full_name": f"{department} Employee",
            "role": "employee",
            "department": department,
        }
        yield {
            "email": f"hod.{slug}@autotrack.local",
            "full_name": f"{department} Head",
            "role": "hod",
            "department": department,
        }
    for finance_user in FINANCE_USERS:
        yield {**finance_user, "role": "finance", "department": "Finance"}


def seed_demo_data(password: str = DEFAULT_PASSWORD):
    db = SessionLocal()
    created = 0
    try:
        for account in _demo_users():
            if db.query(User).filter(User.email == account["email"]).first():
                print(f"  skip {account['email']} (exists)")
                continue
            create_user(db, password=password, **account)
            created += 1
            print(f"  created {account['email']} ({account['role']}, {account['department']})")
    finally:
        db.close()
    print(f"Seeded {created} users (password: {password})")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description='Seed demo users for every portal')
    parser.add_argument('--password', default=DEFAULT_PASSWORD, help='Password for all seeded users')
    args = parser.parse_args()
    seed_demo_data(args.password)
