#!/usr/bin/env python3
"""Create or update a portal profile and print a development access token."""

import asyncio

from sqlalchemy import select

from venue_portal.core.security import create_access_token
from venue_portal.database import async_session_factory, close_db
from venue_portal.models.user import Profile
from venue_portal.models.venue import Club


async def create_profile(
    email: str = "sbg_convener@dau.ac.in",
    full_name: str = "SBG Convener",
    role: str = "admin",
    club_name: str | None = None,
) -> None:
    """Create the profile if it doesn't exist, otherwise update it."""
    async with async_session_factory() as session:
        club_id = None
        if club_name:
            result = await session.execute(select(Club).where(Club.name == club_name))
            club = result.scalar_one_or_none()
            if club is None:
                raise SystemExit(f"Unknown club: {club_name}")
            club_id = club.id

        result = await session.execute(select(Profile).where(Profile.email == email))
        profile = result.scalar_one_or_none()

        if profile:
            profile.full_name = full_name
            profile.role = role
            profile.club_id = club_id
            await session.commit()
            print(f"Updated existing profile: {email}")
        else:
            profile = Profile(email=email, full_name=full_name, role=role, club_id=club_id)
            session.add(profile)
            await session.commit()
            print(f"Created profile: {email}")

        print(f"Role: {role}")
        if club_name:
            print(f"Club: {club_name}")
        print(f"Token: {create_access_token(str(profile.id))}")

    await close_db()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create a portal profile")
    parser.add_argument("--email", default="sbg_convener@dau.ac.in", help="Profile email")
    parser.add_argument("--full-name", default="SBG Convener", help="Display name")
    parser.add_argument("--role", default="admin", choices=["admin", "club"], help="Role")
    parser.add_argument("--club", default=None, help="Club name for club accounts")

    args = parser.parse_args()

    asyncio.run(
        create_profile(
            email=args.email,
            full_name=args.full_name,
            role=args.role,
            club_name=args.club,
        )
    )
