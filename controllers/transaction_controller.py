from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
from datetime import datetime, timezone
from boto3.dynamodb.conditions import Key
import logging
import stripe

from config import settings
from config.db_config import get_courses_table, get_transactions_table
from controllers.user_course_progress_controller import get_progress_store
from helpers.dynamodb_helper import convert_from_dynamodb_type, convert_to_dynamodb_type
from helpers.exceptions import ProgressConflictError, ProgressStorageError
from helpers.progress_service import create_initial_progress
from helpers.progress_store import ProgressStore
from middleware.auth_middleware import get_current_user
from models.transaction import Transaction
from schemas.transaction_schema import (
    PaymentIntentRequest,
    PaymentIntentResponse,
    PurchaseResponse,
    TransactionCreate,
    TransactionsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Transactions"])

DEFAULT_PAYMENT_AMOUNT = 50


def get_stripe_client():
    if not settings.STRIPE_SECRET_KEY:
        logger.error("STRIPE_SECRET_KEY not found in environment variables")
        raise HTTPException(status_code=500, detail="Stripe is not configured")
    return stripe.StripeClient(settings.STRIPE_SECRET_KEY)


@router.get("/", response_model=TransactionsResponse)
def list_transactions(userId: Optional[str] = None, table=Depends(get_transactions_table),
                      user=Depends(get_current_user)):
    # Callers only ever see their own purchases
    userId = userId or user['userId']
    if userId != user['userId']:
        raise HTTPException(status_code=403, detail="Access denied")

    try:
        kwargs = {'KeyConditionExpression': Key('userId').eq(userId)}
        transactions = []
        while True:
            response = table.query(**kwargs)
            transactions.extend(response.get('Items', []))
            if 'LastEvaluatedKey' not in response:
                break
            kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
        return {
            "message": "Transactions retrieved successfully",
            "data": convert_from_dynamodb_type(transactions)
        }
    except Exception as e:
        logger.error(f"Error retrieving transactions: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error retrieving transactions: {str(e)}")


@router.post("/stripe/payment-intent", response_model=PaymentIntentResponse)
def create_stripe_payment_intent(request: PaymentIntentRequest, client=Depends(get_stripe_client),
                                 user=Depends(get_current_user)):
    amount = request.amount
    if not amount or amount <= 0:
        amount = DEFAULT_PAYMENT_AMOUNT

    try:
        payment_intent = client.payment_intents.create(params={
            "amount": amount,
            "currency": "usd",
            "automatic_payment_methods": {
                "enabled": True,
                "allow_redirects": "never",
            },
        })
        return {"message": "", "data": {"clientSecret": payment_intent.client_secret}}
    except stripe.StripeError as e:
        logger.error(f"Error creating stripe payment intent: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error creating stripe payment intent: {str(e)}")


@router.post("/", response_model=PurchaseResponse)
def create_transaction(transaction: TransactionCreate,
                       transactions_table=Depends(get_transactions_table),
                       courses_table=Depends(get_courses_table),
                       store: ProgressStore = Depends(get_progress_store),
                       user=Depends(get_current_user)):
    if transaction.userId != user['userId']:
        raise HTTPException(status_code=403, detail="Cannot purchase a course for another user")

    try:
        # 1. get course info
        response = courses_table.get_item(Key={'courseId': transaction.courseId})
        if 'Item' not in response:
            raise HTTPException(status_code=404, detail="Course not found")
        course = convert_from_dynamodb_type(response['Item'])

        # 2. create initial course progress; a repeat purchase stops here before anything is recorded
        initial_progress = create_initial_progress(
            store, transaction.userId, transaction.courseId, course.get('sections') or []
        )

        # 3. create transaction record
        new_transaction = Transaction(
            dateTime=datetime.now(timezone.utc).isoformat(),
            userId=transaction.userId,
            courseId=transaction.courseId,
            transactionId=transaction.transactionId,
            amount=transaction.amount,
            paymentProvider=transaction.paymentProvider,
        ).model_dump()
        transactions_table.put_item(Item=convert_to_dynamodb_type(new_transaction))

        # 4. add enrollment to relevant course
        courses_table.update_item(
            Key={'courseId': transaction.courseId},
            UpdateExpression='SET #enrollments = list_append(if_not_exists(#enrollments, :empty), :enrollment)',
            ExpressionAttributeNames={'#enrollments': 'enrollments'},
            ExpressionAttributeValues={
                ':enrollment': [{'userId': transaction.userId}],
                ':empty': [],
            },
        )

        return {
            "message": "Purchased Course successfully",
            "data": {
                "transaction": new_transaction,
                "courseProgress": initial_progress,
            }
        }
    except HTTPException:
        raise
    except ProgressConflictError:
        raise HTTPException(status_code=409, detail="User is already enrolled in this course")
    except ProgressStorageError as e:
        logger.error(f"Error creating course progress for {transaction.userId}/{transaction.courseId}: {str(e)}")
        raise HTTPException(status_code=503, detail=f"Error creating transaction and enrollment: {str(e)}")
    except Exception as e:
        logger.error(f"Error creating transaction and enrollment: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error creating transaction and enrollment: {str(e)}")
