"""User account model (credentials and raw VIP fields)."""
from sqlalchemy import Column, String, Boolean, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from pitchside.database import Base


class User(Base):
    """Account row keyed by the opaque identity string.

    Column names follow the existing store schema, which mixes camelCase
    (``isVIP``, ``vipMessage``) with snake_case.
    """

    __tablename__ = "users"

    auth = Column(String(255), primary_key=True)
    nicknames = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list)
    password = Column(String(255), nullable=False)
    is_vip = Column("isVIP", Boolean, default=False, nullable=False)
    vip_expires_at = Column(DateTime(timezone=True), nullable=True)
    vip_color = Column(String(32), nullable=True)
    vip_message = Column("vipMessage", String(500), nullable=True)
    vip_celebration = Column("vipCelebration", String(100), nullable=True)

    def __repr__(self):
        return f"<User(auth={self.auth}, nicknames={self.nicknames}, is_vip={self.is_vip})>"
