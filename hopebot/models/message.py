# hopebot/models/message.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from hopebot.core.timezone import utcnow
from hopebot.db.base import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    # "true" for bot turns, "false" for user turns
    is_bot = Column(String(5), nullable=False, default="false")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    user = relationship("User", back_populates="messages", lazy="select")

    @property
    def from_bot(self) -> bool:
        return self.is_bot == "true"
