"""Document model."""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from studyqa.db.base import Base
from studyqa.utils.clock import utcnow


class Document(Base):
    """Uploaded file and the text extracted from it."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    file_type = Column(String(100), nullable=False)  # application/pdf, image/png, image/jpeg
    file_size = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    upload_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="documents")
    questions = relationship("Question", back_populates="document", cascade="all, delete-orphan")
