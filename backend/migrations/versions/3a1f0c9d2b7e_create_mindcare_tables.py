from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a1f0c9d2b7e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger().with_variant(sa.Integer(), 'sqlite'), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=True),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("role in ('user','admin')", name='ck_users_role'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'therapies',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('duration', sa.String(64), nullable=False),
        sa.Column('sessions', sa.Integer(), nullable=False),
        sa.Column('difficulty', sa.String(), nullable=False),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('icon', sa.String(), nullable=False),
        sa.Column('color', sa.String(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "difficulty in ('Beginner','Intermediate','Advanced')", name='ck_therapies_difficulty'
        ),
        sa.CheckConstraint("status in ('Active','Inactive')", name='ck_therapies_status'),
    )
    op.create_index('idx_therapies_status', 'therapies', ['status'])

    op.create_table(
        'achievements',
        sa.Column('id', sa.BigInteger().with_variant(sa.Integer(), 'sqlite'), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('requirement', sa.Integer(), nullable=False),
        sa.Column('icon', sa.String(), nullable=True),
        sa.Column('metric', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('idx_achievements_requirement', 'achievements', ['requirement'])

    op.create_table(
        'user_achievements',
        sa.Column('id', sa.BigInteger().with_variant(sa.Integer(), 'sqlite'), primary_key=True),
        sa.Column('user_id', sa.BigInteger(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'achievement_id', sa.BigInteger(),
            sa.ForeignKey('achievements.id', ondelete='CASCADE'), nullable=False
        ),
        sa.Column('progress', sa.Integer(), nullable=False),
        sa.Column('earned', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('earned_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'achievement_id', name='uq_user_achievement'),
    )
    op.create_index(
        'idx_user_achievements_user_created', 'user_achievements', ['user_id', 'created_at']
    )

    op.create_table(
        'key_value_entries',
        sa.Column('key', sa.String(128), primary_key=True),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('key_value_entries')
    op.drop_index('idx_user_achievements_user_created', table_name='user_achievements')
    op.drop_table('user_achievements')
    op.drop_index('idx_achievements_requirement', table_name='achievements')
    op.drop_table('achievements')
    op.drop_index('idx_therapies_status', table_name='therapies')
    op.drop_table('therapies')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
