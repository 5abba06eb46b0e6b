# models/wizard.py

from typing import Any, Dict, Optional
from pydantic import BaseModel


class WizardStart(BaseModel):
    """Context the flow needs to open (which property, which lead)."""

    property_id: Optional[str] = None
    lead_id: Optional[str] = None


class WizardFieldsUpdate(BaseModel):
    values: Dict[str, Any]


class WizardSubmitResponse(BaseModel):
    ok: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    wizard: Dict[str, Any]
