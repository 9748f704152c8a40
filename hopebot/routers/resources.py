# hopebot/routers/resources.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hopebot.core.security import require_user_id
from hopebot.db.session import get_db
from hopebot.schemas.resource import RecommendIn, RecommendOut, ResourceOut
from hopebot.services.llm_client import recommend_resources
from hopebot.services.resources import list_resources, resources_for_categories

router = APIRouter(prefix="/api/resources", tags=["resources"])


@router.get("", response_model=List[ResourceOut])
def get_resources(db: Session = Depends(get_db)):
    return list_resources(db)


@router.post("/recommend", response_model=RecommendOut)
def recommend(
    payload: RecommendIn,
    _: int = Depends(require_user_id),
    db: Session = Depends(get_db)
):
    text = (payload.content or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Message content is required")

    categories = recommend_resources(text)
    return RecommendOut(
        categories=categories,
        resources=[ResourceOut.model_validate(r) for r in resources_for_categories(db, categories)],
    )
