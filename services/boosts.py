# services/boosts.py

"""
Paid listing boosts: plan catalogue and the property_boosts row for a
new boost. The plan price is recorded as amount_paid; collecting the
payment is not handled here.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from models.boost import BoostCreate
from models.enums import BoostType


BOOST_PLANS = [
    {
        "id": BoostType.featured.value,
        "name": "Featured",
        "price": 199,
        "duration": 7,
        "description": "Highlighted in search results",
        "benefits": ["Badge on listing", "2x visibility", "Priority in searches"],
    },
    {
        "id": BoostType.premium.value,
        "name": "Premium",
        "price": 499,
        "duration": 14,
        "description": "Top placement with analytics",
        "benefits": ["Top of search results", "5x visibility", "Performance analytics", "Social media promotion"],
    },
    {
        "id": BoostType.spotlight.value,
        "name": "Spotlight",
        "price": 999,
        "duration": 30,
        "description": "Maximum exposure package",
        "benefits": ["Homepage feature", "10x visibility", "Dedicated agent support", "Email campaign", "WhatsApp promotion"],
    },
]


def get_plan(boost_type: BoostType) -> dict:
    for plan in BOOST_PLANS:
        if plan["id"] == boost_type.value:
            return plan
    raise ValueError(f"Unknown boost type: {boost_type}")


def boost_row(owner_id: str, payload: BoostCreate, now: Optional[datetime] = None) -> dict:
    plan = get_plan(payload.boost_type)
    starts_at = now or datetime.now(timezone.utc)
    days = payload.duration_days or plan["duration"]
    return {
        "property_id": payload.property_id,
        "owner_id": owner_id,
        "boost_type": payload.boost_type.value,
        "amount_paid": plan["price"],
        "starts_at": starts_at.isoformat(),
        "ends_at": (starts_at + timedelta(days=days)).isoformat(),
        "is_active": True,
    }
