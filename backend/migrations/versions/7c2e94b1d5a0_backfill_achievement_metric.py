from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '7c2e94b1d5a0'
down_revision: Union[str, Sequence[str], None] = '3a1f0c9d2b7e'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Imported therapy achievements picked their metric from words in the title.
# Order matters: the first matching word wins. Case-sensitive.
TITLE_METRICS = (
    ('meditation', 'mindfulness_sessions'),
    ('Graduate', 'completed_modules'),
    ('morning', 'morning_meditations'),
)

achievements = sa.table(
    'achievements',
    sa.column('id', sa.BigInteger()),
    sa.column('title', sa.String()),
    sa.column('type', sa.String()),
    sa.column('metric', sa.String()),
)


def upgrade() -> None:
    """Give imported therapy achievements an explicit metric."""
    conn = op.get_bind()
    rows = conn.execute(
        sa.select(achievements.c.id, achievements.c.title)
        .where(achievements.c.type == 'therapy', achievements.c.metric.is_(None))
    ).all()

    for ach_id, title in rows:
        metric = next((m for word, m in TITLE_METRICS if word in (title or '')), 'total_therapy_sessions')
        conn.execute(
            achievements.update().where(achievements.c.id == ach_id).values(metric=metric)
        )


def downgrade() -> None:
    """Metrics backfilled here are indistinguishable from hand-set ones; nothing to undo."""
    pass
