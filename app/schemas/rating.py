from pydantic import Field
from typing import Optional

from app.schemas.base import CamelModel


class RatingSubmit(CamelModel):
    restaurant_rating: Optional[int] = Field(None, ge=1, le=5)
    restaurant_review: Optional[str] = Field(None, max_length=1000)
    rider_rating: Optional[int] = Field(None, ge=1, le=5)
    rider_review: Optional[str] = Field(None, max_length=1000)


class RatingSummary(CamelModel):
    average: float
    count: int
