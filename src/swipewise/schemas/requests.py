from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from swipewise.domain.models import ClassificationMethod


class RecommendRequest(BaseModel):
    message: str | None = None
    amount: float | None = Field(default=None, ge=0)
    category: str | None = None
    user_id: str | None = None
    purchase_date: date | None = None
    method: ClassificationMethod | None = None


class PortfolioRequest(BaseModel):
    user_id: str
    mode: Literal["auto", "category"] = "auto"
    category: str | None = None
    as_of: date | None = None



class SpendingImportItem(BaseModel):
    card_id: str
    category: str
    amount: float = Field(gt=0)
    purchase_date: date | None = None
