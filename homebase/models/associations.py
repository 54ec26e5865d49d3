"""
Association tables for many-to-many relationships.
Kept separate to avoid circular imports between models.
"""
from sqlalchemy import Column, Integer, Table, ForeignKey, String, DateTime, func
from homebase.models.base import Base

# A user belongs to at most one household; the unique user_id makes the
# membership lookup a single point read.
household_members = Table(
    'household_members',
    Base.metadata,
    Column('user_id', String(64), ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    Column('household_id', Integer, ForeignKey('households.id', ondelete='CASCADE'), nullable=False, index=True),
    Column('role', String(20), nullable=False, server_default='member'),  # owner, admin or member
    Column('joined_at', DateTime(timezone=True), server_default=func.now(), nullable=False)
)
