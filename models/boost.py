# models/boost.py

from typing import Optional
from pydantic import BaseModel, Field

from models.enums import BoostType


class BoostCreate(BaseModel):
    property_id: str
    boost_type: BoostType
    # Defaults to the plan's duration
    duration_days: Optional[int] = Field(None, ge=1, le=90)
