#app/models/enums.py
from __future__ import annotations
from enum import Enum


class QuotationStatus(str, Enum):
    draft = "draft"
    sent = "sent"
    viewed = "viewed"
    accepted = "accepted"
    rejected = "rejected"
    expired = "expired"


class JobType(str, Enum):
    Electric = "Electric"
    Gas = "Gas"
    Water = "Water"
