"""
General helper utilities
"""
import random
from datetime import datetime

EPOCH = datetime(1970, 1, 1)


def generate_tracking_id() -> str:
    """Random shipment tracking code, e.g. SH-4821937"""
    return f"SH-{random.randint(0, 9_999_999):07d}"


def utcnow() -> datetime:
    """Naive UTC now, matching how timestamps are stored"""
    return datetime.utcnow()


def update_values(data, required=()) -> dict:
    """Fields the client sent; an explicit null clears an optional field but is ignored for ``required``"""
    updates = data.model_dump(exclude_unset=True)
    for key in required:
        if key in updates and updates[key] is None:
            del updates[key]
    return updates
