from typing import List, Optional

from pydantic import BaseModel


class ResourceOut(BaseModel):
    id: int
    title: str
    description: str
    icon: str
    url: str
    symbol: str

    class Config:
        from_attributes = True


class RecommendIn(BaseModel):
    content: Optional[str] = None


class RecommendOut(BaseModel):
    categories: List[str]
    resources: List[ResourceOut]
