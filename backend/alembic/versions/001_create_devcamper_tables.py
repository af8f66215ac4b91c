"""Create bootcamps, bootcamp_careers, courses and users tables

Revision ID: 001
Revises: None
Create Date: 2024-02-01 00:00:00.000000+00:00

What:  Initial schema. Location parts are flat columns on `bootcamps`;
       careers are rows in `bootcamp_careers`.

Rollback: downgrade() drops all four tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bootcamps",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("slug", sa.String(80), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("website", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        # Geocoded location
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("formatted_address", sa.String(255), nullable=True),
        sa.Column("street", sa.String(255), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("state", sa.String(60), nullable=True),
        sa.Column("zipcode", sa.String(20), nullable=True),
        sa.Column("country", sa.String(60), nullable=True),
        sa.Column("average_rating", sa.Float(), nullable=True),
        sa.Column("average_cost", sa.Float(), nullable=True),
        sa.Column(
            "photo",
            sa.String(255),
            nullable=False,
            server_default=sa.text("'no-photo.jpg'"),
        ),
        sa.Column("housing", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("job_assistance", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("job_guarantee", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("accept_gi", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_bootcamps_slug", "bootcamps", ["slug"])
    # Default list order: newest first
    op.create_index("idx_bootcamps_created_at", "bootcamps", [sa.text("created_at DESC")])
    # Radius search bounding box
    op.create_index("idx_bootcamps_lat_lng", "bootcamps", ["latitude", "longitude"])

    op.create_table(
        "bootcamp_careers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("bootcamp_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(40), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.ForeignKeyConstraint(["bootcamp_id"], ["bootcamps.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bootcamp_careers_bootcamp_id", "bootcamp_careers", ["bootcamp_id"])

    op.create_table(
        "courses",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("weeks", sa.String(20), nullable=False),
        sa.Column("tuition", sa.Float(), nullable=False),
        sa.Column("minimum_skill", sa.String(20), nullable=False),
        sa.Column(
            "scholarship_available", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("bootcamp_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["bootcamp_id"], ["bootcamps.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_courses_bootcamp_id", "courses", ["bootcamp_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'user'")),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_courses_bootcamp_id", table_name="courses")
    op.drop_table("courses")
    op.drop_index("ix_bootcamp_careers_bootcamp_id", table_name="bootcamp_careers")
    op.drop_table("bootcamp_careers")
    op.drop_index("idx_bootcamps_lat_lng", table_name="bootcamps")
    op.drop_index("idx_bootcamps_created_at", table_name="bootcamps")
    op.drop_index("ix_bootcamps_slug", table_name="bootcamps")
    op.drop_table("bootcamps")
