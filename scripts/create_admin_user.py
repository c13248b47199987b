"""
Script to create the first admin user.
Run this after migrations to create the initial admin account.
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from autotrack.core.database import SessionLocal
from autotrack.core.errors import ValidationError
from autotrack.models.user import User
from autotrack.services.users import create_user


def create_admin_user(email: str, password: str, full_name: str = "Admin User", department: str = "Administration"):
    """Create the first admin user."""
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == email.strip().lower()).first():
            print(f"User with email {email} already exists!")
            return

        create_user(
            db,
            email=email,
            password=password,
            role="admin",
            department=department,
            full_name=full_name,
        )
        print("Admin user created successfully!")
        print(f"   Email: {email}")
        print(f"   Department: {department}")
    except ValidationError as e:
        db.rollback()
        print(f"Error creating admin user: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description='Create admin user')
    parser.add_argument('--email', default='admin@autotrack.local', help='Admin email')
    parser.add_argument('--password', default='admin123', help='Admin password')
    parser.add_argument('--name', default='Admin User', help='Admin full name')
    parser.add_argument('--department', default='Administration', help='Admin department')

    args = parser.parse_args()
    create_admin_user(args.email, args.password, args.name, args.department)
