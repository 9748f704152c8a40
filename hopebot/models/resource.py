# hopebot/models/resource.py
import enum

from sqlalchemy import Column, Integer, String, Text

from hopebot.db.base import Base


class ResourceIcon(str, enum.Enum):
    ARTICLE = "article-line"
    FIRST_AID = "first-aid-kit-line"
    MENTAL_HEALTH = "mental-health-line"
    HEART_PULSE = "heart-pulse-line"


ICON_SYMBOLS = {
    ResourceIcon.ARTICLE: "📄",
    ResourceIcon.FIRST_AID: "🩹",
    ResourceIcon.MENTAL_HEALTH: "🧠",
    ResourceIcon.HEART_PULSE: "💓",
}

DEFAULT_ICON_SYMBOL = "🔗"


def icon_symbol(tag: str | None) -> str:
    """Display symbol for an icon tag; unknown tags get the default."""
    try:
        return ICON_SYMBOLS[ResourceIcon(tag)]
    except ValueError:
        return DEFAULT_ICON_SYMBOL


class Resource(Base):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(50), nullable=False)
    url = Column(String(500), nullable=False)

    @property
    def symbol(self) -> str:
        return icon_symbol(self.icon)

    @property
    def category(self) -> str:
        # "/resources/self-care" -> "self-care"
        return (self.url or "").rstrip("/").rsplit("/", 1)[-1]
