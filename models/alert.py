# models/alert.py

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.enums import Furnishing, PropertyType


# ============================================================
# PROPERTY ALERTS (saved searches)
# ============================================================
class PropertyAlertBase(BaseModel):
    city_id: Optional[str] = None
    property_type: Optional[PropertyType] = None
    min_budget: Optional[float] = Field(None, ge=0)
    max_budget: Optional[float] = Field(None, ge=0)
    min_bedrooms: Optional[int] = Field(None, ge=0)
    max_bedrooms: Optional[int] = Field(None, ge=0)
    furnishing: Optional[Furnishing] = None
    localities: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_ranges(self):
        if self.min_budget is not None and self.max_budget is not None and self.min_budget > self.max_budget:
            raise ValueError("min_budget cannot exceed max_budget")
        if self.min_bedrooms is not None and self.max_bedrooms is not None and self.min_bedrooms > self.max_bedrooms:
            raise ValueError("min_bedrooms cannot exceed max_bedrooms")
        return self


class PropertyAlertCreate(PropertyAlertBase):
    name: str = Field(..., min_length=1)
    is_active: bool = True
    notify_email: bool = True
    notify_push: bool = True


class PropertyAlertUpdate(PropertyAlertBase):
    """Partial update: only fields present in the request are written."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None
    notify_email: Optional[bool] = None
    notify_push: Optional[bool] = None
