"""Create card schedule and review log tables."""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "card_schedules",
        sa.Column("card_id", sa.BigInteger(), primary_key=True, autoincrement=False, nullable=False),
        sa.Column("owner_id", sa.String(length=255), nullable=False),
        sa.Column("ease_factor", sa.Float(), server_default=sa.text("2.5"), nullable=False),
        sa.Column("interval", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("repetitions", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("is_learning", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("learning_step", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("learning_delay", sa.Interval(), nullable=False),
        sa.Column("next_review_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_review_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_reviews", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("correct_reviews", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("streak_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("max_streak", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("average_response_time", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            server_onupdate=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_card_schedules_owner_id_next_review_date",
        "card_schedules",
        ("owner_id", "next_review_date"),
    )

    op.create_table(
        "review_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("card_id", sa.BigInteger(), nullable=False),
        sa.Column("owner_id", sa.String(length=255), nullable=False),
        sa.Column("quality", sa.Integer(), nullable=False),
        sa.Column("was_correct", sa.Boolean(), nullable=False),
        sa.Column("response_time_ms", sa.Float(), nullable=True),
        sa.Column("review_type", sa.String(length=32), server_default=sa.text("'scheduled'"), nullable=False),
        sa.Column("ease_factor_before", sa.Float(), nullable=False),
        sa.Column("ease_factor_after", sa.Float(), nullable=False),
        sa.Column("interval_before", sa.Integer(), nullable=False),
        sa.Column("interval_after", sa.Integer(), nullable=False),
        sa.Column(
            "reviewed_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ("card_id",),
            ("card_schedules.card_id",),
            name="fk_review_logs_card_id_card_schedules",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_review_logs_owner_id_reviewed_at",
        "review_logs",
        ("owner_id", "reviewed_at"),
    )


def downgrade() -> None:
    op.drop_index("ix_review_logs_owner_id_reviewed_at", table_name="review_logs")
    op.drop_table("review_logs")
    op.drop_index("ix_card_schedules_owner_id_next_review_date", table_name="card_schedules")
    op.drop_table("card_schedules")
