"""Seed script to create or update a clinic admin user.

Usage:
    python -m app.scripts.seed_admin --email=admin@example.com --password=SecurePass123!
    python -m app.scripts.seed_admin --email=staff@example.com --password=... --role=ADMIN

NEVER hardcode credentials in this file. Always pass via CLI arguments.
"""

import argparse
import asyncio
import sys
from sqlalchemy import select

from app.core.database import async_session
from app.models.user import User, UserRole, ADMIN_ROLES
from app.services.auth import hash_password

# Relationship targets of User must be registered before the first query.
from app.models import appointment, branch, lead, service  # noqa: F401


async def create_or_update_admin(
    email: str,
    password: str,
    role: UserRole,
    first_name: str,
    last_name: str,
) -> None:
    """Create a new admin or promote an existing user to ``role``."""
    async with async_session() as db:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user:
            print(f"User {email} already exists. Updating to {role.value}...")
            user.role = role
            user.is_verified = True
            user.is_active = True
            user.hashed_password = hash_password(password)
        else:
            print(f"Creating new {role.value} user: {email}...")
            user = User(
                email=email,
                hashed_password=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                role=role,
                is_active=True,
                is_verified=True,
            )
            db.add(user)

        await db.commit()

    print("\nAdmin setup complete!")
    print(f"   Email: {email}")
    print(f"   Role: {role.value}")


def main():
    """Parse CLI arguments and run the seed script."""
    parser = argparse.ArgumentParser(description="Create or update an admin user for ClinicBook API")
    parser.add_argument("--email", required=True, help="Admin email address")
    parser.add_argument("--password", required=True, help="Admin password (will be hashed before storing)")
    parser.add_argument(
        "--role",
        choices=[r.value for r in ADMIN_ROLES],
        default=UserRole.SUPER_ADMIN.value,
        help="Admin role (default: SUPER_ADMIN)",
    )
    parser.add_argument("--first-name", default="Clinic")
    parser.add_argument("--last-name", default="Admin")

    args = parser.parse_args()

    if "@" not in args.email or "." not in args.email:
        print("Error: Invalid email format.", file=sys.stderr)
        sys.exit(1)

    if len(args.password) < 8:
        print("Error: Password must be at least 8 characters.", file=sys.stderr)
        sys.exit(1)

    asyncio.run(create_or_update_admin(
        args.email, args.password, UserRole(args.role), args.first_name, args.last_name,
    ))


if __name__ == "__main__":
    main()
