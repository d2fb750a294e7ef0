from typing import Optional
from pydantic import BaseModel


class Transaction(BaseModel):
    userId: str
    transactionId: str
    dateTime: str
    courseId: str
    paymentProvider: str  # "stripe"
    amount: Optional[float] = None
