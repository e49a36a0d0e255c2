"""Seed venues and clubs.

Revision ID: 002_seed_venues_and_clubs
Revises: 001_initial
Create Date: 2026-10-19

Seeds the campus venues with their approval category and the clubs
organized by group.
"""

import uuid
from typing import Sequence

from alembic import op
from sqlalchemy import String, column, table
from sqlalchemy.dialects.postgresql import UUID

# revision identifiers
revision: str = "002_seed_venues_and_clubs"
down_revision: str = "001_initial"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

VENUES = [
    # ===== AUTO APPROVAL =====
    {"name": "CEP 104", "category": "auto_approval"},
    {"name": "CEP 105", "category": "auto_approval"},
    {"name": "CEP 106", "category": "auto_approval"},
    {"name": "CEP 107", "category": "auto_approval"},
    {"name": "CEP 204", "category": "auto_approval"},
    {"name": "CEP 205", "category": "auto_approval"},
    {"name": "OAT (Open Air Theatre)", "category": "auto_approval"},
    {"name": "University Ground", "category": "auto_approval"},
    {"name": "Cafeteria", "category": "auto_approval"},

    # ===== NEEDS APPROVAL =====
    {"name": "Lecture Theatre 1 (LT1)", "category": "needs_approval"},
    {"name": "Lecture Theatre 2 (LT2)", "category": "needs_approval"},
    {"name": "Lecture Theatre 3 (LT3)", "category": "needs_approval"},
    {"name": "CEP 110", "category": "needs_approval"},
    {"name": "CEP 102", "category": "needs_approval"},
    {"name": "CEP 108", "category": "needs_approval"},
]

CLUBS = {
    # Academic / tech
    "A": [
        "AI Club",
        "Academic Committee",
        "Business Club",
        "DCEI",
        "Debate Club",
        "Developers Student Club",
        "Electronics Hobby Club",
        "Headrush",
        "IEEE SB",
        "Microsoft Students Technical Club",
        "Muse",
        "Programming Club",
        "Research Club",
        "Student Placement Cell",
        "Tech Support Committee",
        "Cyber Information and Network Security Club",
    ],
    # Cultural
    "B": [
        "Annual Festival Committee",
        "Cafeteria Management Committee",
        "Cultural Committee",
        "DADC",
        "DTG",
        "Election Commission",
        "Film Club",
        "Hostel Management Committee",
        "Heritage Club",
        "Khelaiya Club",
        "Music Club",
        "Press Club",
        "PMMC",
        "Radio Club",
        "Sambhav",
    ],
    # Sports
    "C": [
        "Cubing Club",
        "Chess Club",
        "Sports Committee",
    ],
}


def upgrade() -> None:
    """Insert seed venues and clubs."""
    venues_table = table(
        "venues",
        column("id", UUID(as_uuid=True)),
        column("name", String),
        column("category", String),
    )
    clubs_table = table(
        "clubs",
        column("id", UUID(as_uuid=True)),
        column("name", String),
        column("group_category", String),
    )

    op.bulk_insert(
        venues_table,
        [{"id": uuid.uuid4(), "name": v["name"], "category": v["category"]} for v in VENUES],
    )
    op.bulk_insert(
        clubs_table,
        [
            {"id": uuid.uuid4(), "name": name, "group_category": group}
            for group, names in CLUBS.items()
            for name in names
        ],
    )


def downgrade() -> None:
    """Remove seed venues and clubs."""
    venues_table = table("venues", column("name", String))
    clubs_table = table("clubs", column("name", String))

    club_names = [name for names in CLUBS.values() for name in names]
    op.execute(clubs_table.delete().where(clubs_table.c.name.in_(club_names)))
    op.execute(venues_table.delete().where(venues_table.c.name.in_([v["name"] for v in VENUES])))
