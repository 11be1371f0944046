#!/usr/bin/env python3
"""
Script to seed placeholder users through the configured storage backend.
Creates: admin, demo
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from waitlist_api.core.exceptions import ConflictError
from waitlist_api.schemas.user import UserCreate
from waitlist_api.services.storage import get_storage

TEST_USERS = [
    {"username": "admin", "password": "ChangeMe123!"},
    {"username": "demo", "password": "demo"},
]


def create_test_users():
    """Create each placeholder user unless the username is already taken"""
    storage = get_storage()
    for data in TEST_USERS:
        try:
            user = storage.create_user(UserCreate(**data))
            print(f"Created user: {user.username} (ID: {user.id})")
        except ConflictError:
            print(f"User already exists: {data['username']}")


if __name__ == "__main__":
    create_test_users()
