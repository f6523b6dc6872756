#!/usr/bin/env python3
"""
Create the bootstrap admin account for the registry.
Run with: python3 init_admin.py --username admin --name "Registry Admin"
The password is read from ADMIN_PASSWORD or prompted for.
"""
import argparse
import getpass
import os

from registry import create_app
from registry.exceptions import ConflictError
from registry.extensions import db
from registry.services import create_user, get_user_by_username


def create_admin(username, name, password, email=None):
    """Create the bootstrap admin; skips if the username already exists"""
    app = create_app()

    with app.app_context():
        db.create_all()

        print("=" * 60)
        print("Initializing Admin User")
        print("=" * 60)

        if get_user_by_username(username):
            print(f"  - User '{username}' already exists (skipping)")
            return None

        try:
            user = create_user(
                username=username,
                password=password,
                name=name,
                email=email,
                bootstrap=True,
            )
        except ConflictError as e:
            print(f"  - {e.message}")
            return None

        print(f"  ✓ Created: {user.username} ({user.role})")
        print("=" * 60)
        return user


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Create the bootstrap admin account')
    parser.add_argument('--username', default='admin')
    parser.add_argument('--name', default='Registry Admin')
    parser.add_argument('--email')
    args = parser.parse_args()

    password = os.getenv('ADMIN_PASSWORD') or getpass.getpass('Admin password: ')
    create_admin(args.username, args.name, password, args.email)
