"""Add a user through the configured storage backend.

Only useful with a durable backend (STORAGE_BACKEND=sql); the in-memory store
is gone when the process exits.
"""

from app import create_app
from errors import Conflict
from modules.auth.service import create_account
from models import ROLES

app = create_app()

def create_user(username, password, role, full_name=None):
    with app.app_context():
        try:
            user = create_account(username, password, full_name, role)
        except Conflict:
            print(f"⚠️  User '{username}' already exists.")
            return None
        print(f"✅ Created user: {user.username} (role: {user.role})")
        return user

if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Create a new user.')
    parser.add_argument('username', help='Username')
    parser.add_argument('password', help='Password')
    parser.add_argument('role', choices=ROLES, help='User role')
    parser.add_argument('--full-name', help='Display name')

    args = parser.parse_args()
    create_user(args.username, args.password, args.role, args.full_name)
