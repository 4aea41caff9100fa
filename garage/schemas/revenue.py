# garage/schemas/revenue.py
from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal


class RevenueRequest(BaseModel):
    date: date
    sector: str


class RevenueOut(BaseModel):
    amount: Decimal
    currency: str
    timestamp: datetime
