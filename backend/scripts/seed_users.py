#!/usr/bin/env python
"""Seed script to create a workflow user and print a bearer token for it.

Tokens are normally issued by the identity provider in front of DocFlow. This
script is for local development: it makes sure the user row exists (documents,
approvals and notifications reference it) and prints a token signed with the
configured JWT_SECRET.

Usage:
    python backend/scripts/seed_users.py

Environment Variables:
    DATABASE_URL: Database connection string
    JWT_SECRET: Token signing key
    SEED_EMAIL: Email for the user (default: admin@example.com)
    SEED_NAME: Display name (default: Document Administrator)
    SEED_ROLE: ADMIN | MANAGER | STANDARDIZATION (default: ADMIN)
    SEED_CREATE_SCHEMA: Create missing tables first (default: false)
"""

import os
import sys

from docflow.auth.jwt import create_access_token
from docflow.auth.roles import UserRole
from docflow.database import engine, get_db_session
from docflow.models import Base, User


def main():
    """Create (or reuse) a user and print a token for it."""
    email = os.getenv("SEED_EMAIL", "admin@example.com").lower()
    name = os.getenv("SEED_NAME", "Document Administrator")
    role_str = os.getenv("SEED_ROLE", "ADMIN")

    try:
        role = UserRole(role_str)
    except ValueError:
        print(f"ERROR: Invalid SEED_ROLE: {role_str}")
        print(f"Valid roles: {', '.join(r.value for r in UserRole)}")
        sys.exit(1)

    if os.getenv("SEED_CREATE_SCHEMA", "false").lower() == "true":
        Base.metadata.create_all(engine)

    with get_db_session() as session:
        user = session.query(User).filter(User.email == email).first()
        if user is None:
            user = User(email=email, name=name, role=role.value)
            session.add(user)
            session.flush()
            print(f"Created {role.value} user {email} ({user.id})")
        else:
            if user.role != role.value:
                print(f"ERROR: {email} already exists with role {user.role}")
                sys.exit(1)
            print(f"Reusing existing user {email} ({user.id})")

        token = create_access_token(user.id, role, email=email)

    print()
    print("Bearer token:")
    print(token)


if __name__ == "__main__":
    main()
