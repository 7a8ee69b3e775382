#!/usr/bin/env python3
"""Seed sample users, posts and follow relationships.

Creates an administrator, a batch of ordinary users, a few posts for the first
users, and a follow graph so feeds have content.

Usage:
    DATABASE_URL=sqlite:///./microblog.db python scripts/seed_sample_data.py
"""

import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from microblog.database import SessionLocal, init_db
from microblog.errors import RecordInvalid
from microblog.models import User
from microblog.services import MicropostService, UserService

ADMIN_EMAIL = "admin@example.com"
SAMPLE_PASSWORD = "foobar"
SAMPLE_USER_COUNT = 30
POSTING_USER_COUNT = 6
POSTS_PER_USER = 5


def seed_sample_data():
    """Seed the configured database with sample data."""
    init_db()
    session = SessionLocal()
    users = UserService(session)
    microposts = MicropostService(session)

    try:
        if users.find_by_email(ADMIN_EMAIL):
            print("Sample data already exists, skipping.")
            return

        print("Creating users...")
        admin = users.save_or_raise(
            User(
                name="Example User",
                email=ADMIN_EMAIL,
                password=SAMPLE_PASSWORD,
                password_confirmation=SAMPLE_PASSWORD,
            )
        )
        users.grant_admin(admin)

        everyone = [admin]
        for n in range(1, SAMPLE_USER_COUNT):
            everyone.append(
                users.save_or_raise(
                    User(
                        name=f"Sample User {n}",
                        email=f"example-{n}@example.com",
                        password=SAMPLE_PASSWORD,
                        password_confirmation=SAMPLE_PASSWORD,
                    )
                )
            )

        print("Creating microposts...")
        for i in range(POSTS_PER_USER):
            for user in everyone[:POSTING_USER_COUNT]:
                microposts.create(user, f"Sample post {i + 1} from {user.name}.")

        print("Creating relationships...")
        for followed in everyone[2:20]:
            users.follow(admin, followed)
        for follower in everyone[3:15]:
            users.follow(follower, admin)

        print(f"Seeded {len(everyone)} users. Admin login: {ADMIN_EMAIL} / {SAMPLE_PASSWORD}")
    except RecordInvalid as e:
        session.rollback()
        print(f"Seeding failed: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    seed_sample_data()
