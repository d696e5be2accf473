from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

JSON_TYPE = JSON().with_variant(JSONB, "postgresql")


class ConversationContextRecord(Base):
    __tablename__ = "conversation_contexts"

    user_id = Column(String(255), primary_key=True)
    mood = Column(String(16))
    previous_topics = Column(JSON_TYPE, nullable=False, default=list)
    session_start = Column(DateTime(timezone=True), nullable=False)
    message_count = Column(Integer, nullable=False, default=0)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
