# hopebot/services/resources.py
import logging
from typing import List, Sequence

from sqlalchemy.orm import Session

from hopebot.models.resource import Resource, ResourceIcon

logger = logging.getLogger(__name__)

DEFAULT_RESOURCES = [
    {
        "title": "Understanding Mental Health vs Mental Illness",
        "description": "Learn the difference between mental health and mental illness",
        "icon": ResourceIcon.ARTICLE.value,
        "url": "/resources/mental-health-vs-illness",
    },
    {
        "title": "Crisis Support Hotlines",
        "description": "Emergency hotlines for immediate mental health support",
        "icon": ResourceIcon.FIRST_AID.value,
        "url": "/resources/crisis-hotlines",
    },
    {
        "title": "Coping Strategies for Stress",
        "description": "Effective techniques to manage stress in daily life",
        "icon": ResourceIcon.MENTAL_HEALTH.value,
        "url": "/resources/coping-strategies",
    },
    {
        "title": "Self-care Techniques",
        "description": "Practical self-care approaches for better mental wellbeing",
        "icon": ResourceIcon.HEART_PULSE.value,
        "url": "/resources/self-care",
    },
]


def list_resources(db: Session) -> List[Resource]:
    return db.query(Resource).order_by(Resource.id.asc()).all()


def seed_default_resources(db: Session) -> int:
    """Insert the default resources when the table is empty.

    Returns the number of rows inserted (0 when resources already exist).
    """
    if db.query(Resource).first() is not None:
        return 0

    for data in DEFAULT_RESOURCES:
        db.add(Resource(**data))
    db.commit()

    logger.info("✅ Initialized %d default resources", len(DEFAULT_RESOURCES))
    return len(DEFAULT_RESOURCES)


def resources_for_categories(db: Session, categories: Sequence[str]) -> List[Resource]:
    """Resources whose URL slug is one of ``categories``, in category order."""
    by_category = {r.category: r for r in list_resources(db)}
    return [by_category[c] for c in categories if c in by_category]
