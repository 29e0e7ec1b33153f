"""
Create the database schema and optionally seed a user.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Allow running as `python scripts/init_db.py` from the project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.database import engine, init_db, sessionlocal  # noqa: E402
from app.models.user import User  # noqa: E402
from app.routers.auth import get_password_hash  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

load_dotenv()


def seed_user(username: str, password: str, email: Optional[str] = None, full_name: Optional[str] = None) -> User:
    """
    Create a user unless one with the same username exists.

    Args:
        username: Login name
        password: Plain-text password, stored hashed
        email: Defaults to ``<username>@example.com``
        full_name: Defaults to the username

    Returns:
        The new or existing user
    """
    db = sessionlocal()
    try:
        existing = db.query(User).filter(User.username == username).first()
        if existing:
            logger.info(f"User '{username}' already exists (id={existing.id})")
            return existing

        user = User(
            username=username,
            email=email or f"{username}@example.com",
            full_name=full_name or username,
            password_hash=get_password_hash(password),
            is_guest=False,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Created user '{username}' (id={user.id})")
        return user
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Initialize the folder database")
    parser.add_argument("--drop", action="store_true", help="Drop all tables before creating them")
    parser.add_argument("--seed-user", help="Username of a user to create")
    parser.add_argument("--password", help="Password for --seed-user")
    parser.add_argument("--email", help="Email for --seed-user")
    args = parser.parse_args()

    if args.seed_user and not args.password:
        parser.error("--seed-user requires --password")

    logger.info(f"Initializing schema on {engine.url.render_as_string(hide_password=True)}")
    init_db(drop=args.drop)
    logger.info("Schema ready")

    if args.seed_user:
        seed_user(args.seed_user, args.password, email=args.email)


if __name__ == "__main__":
    main()
