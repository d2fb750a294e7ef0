from typing import List, Literal, Optional
from pydantic import BaseModel

from models.transaction import Transaction
from models.user_course_progress import UserCourseProgress


class TransactionCreate(BaseModel):
    userId: str
    courseId: str
    transactionId: str
    amount: Optional[float] = None
    paymentProvider: Literal["stripe"] = "stripe"


class PaymentIntentRequest(BaseModel):
    amount: Optional[int] = None


class PurchaseData(BaseModel):
    transaction: Transaction
    courseProgress: UserCourseProgress


class PurchaseResponse(BaseModel):
    message: str
    data: PurchaseData


class TransactionsResponse(BaseModel):
    message: str
    data: List[Transaction]


class PaymentIntentResponse(BaseModel):
    message: str
    data: dict
