"""User model."""
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from studyqa.db.base import Base


class User(Base):
    """Registered account; username and email are unique."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash
    email = Column(String(255), unique=True, nullable=False, index=True)

    # Relationships
    documents = relationship("Document", back_populates="user", cascade="all, delete-orphan")
