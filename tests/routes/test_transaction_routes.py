from decimal import Decimal
from unittest.mock import MagicMock

import stripe

from conftest import progress_record, TEST_USER_ID
from controllers.transaction_controller import get_stripe_client
from main import app
from middleware.auth_middleware import get_current_user

COURSE = {
    "courseId": "course-1",
    "teacherId": "teacher-1",
    "teacherName": "Teacher",
    "title": "Course",
    "category": "Computer Science",
    "level": "Beginner",
    "status": "Published",
    "price": Decimal("4999"),
    "sections": [
        {"sectionId": "s1", "sectionTitle": "Intro", "chapters": [
            {"chapterId": "c1", "type": "Text", "title": "A", "content": ""},
            {"chapterId": "c2", "type": "Video", "title": "B", "content": ""},
        ]},
        {"sectionId": "s2", "sectionTitle": "More", "chapters": [
            {"chapterId": "c3", "type": "Quiz", "title": "C", "content": ""},
        ]},
    ],
    "enrollments": [],
}


def purchase(client, **overrides):
    body = {
        "userId": TEST_USER_ID,
        "courseId": "course-1",
        "transactionId": "pi_123",
        "amount": 4999,
        "paymentProvider": "stripe",
    }
    body.update(overrides)
    return client.post("/transactions/", json=body)


def test_create_transaction_seeds_progress_and_enrollment(client, courses_table, transactions_table, progress_store):
    courses_table.get_item.return_value = {"Item": COURSE}

    response = purchase(client)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["transaction"]["transactionId"] == "pi_123"
    assert data["courseProgress"]["overallProgress"] == 0.0
    assert data["courseProgress"]["sections"] == [
        {"sectionId": "s1", "chapters": [
            {"chapterId": "c1", "completed": False},
            {"chapterId": "c2", "completed": False},
        ]},
        {"sectionId": "s2", "chapters": [{"chapterId": "c3", "completed": False}]},
    ]
    assert progress_store.get(TEST_USER_ID, "course-1")["version"] == 1

    saved_transaction = transactions_table.put_item.call_args.kwargs["Item"]
    assert saved_transaction["amount"] == Decimal("4999")
    assert saved_transaction["paymentProvider"] == "stripe"

    update = courses_table.update_item.call_args.kwargs
    assert update["Key"] == {"courseId": "course-1"}
    assert update["ExpressionAttributeValues"][":enrollment"] == [{"userId": TEST_USER_ID}]


def test_create_transaction_for_unknown_course(client, courses_table, transactions_table):
    courses_table.get_item.return_value = {}

    response = purchase(client)

    assert response.status_code == 404
    transactions_table.put_item.assert_not_called()


def test_repeat_purchase_conflicts(client, courses_table, transactions_table, progress_store):
    courses_table.get_item.return_value = {"Item": COURSE}
    progress_store.items[(TEST_USER_ID, "course-1")] = progress_record([], course_id="course-1")

    response = purchase(client)

    assert response.status_code == 409
    courses_table.update_item.assert_not_called()
    transactions_table.put_item.assert_not_called()


def test_only_stripe_is_accepted(client):
    response = purchase(client, paymentProvider="paypal")

    assert response.status_code == 422


def test_list_transactions_for_user(client, transactions_table):
    transactions_table.query.return_value = {"Items": [{
        "userId": TEST_USER_ID,
        "transactionId": "pi_123",
        "dateTime": "2024-01-01T00:00:00+00:00",
        "courseId": "course-1",
        "paymentProvider": "stripe",
        "amount": Decimal("4999"),
    }]}

    response = client.get("/transactions/", params={"userId": TEST_USER_ID})

    assert response.status_code == 200
    assert response.json()["data"][0]["amount"] == 4999
    transactions_table.scan.assert_not_called()


def test_list_transactions_defaults_to_caller(client, transactions_table):
    transactions_table.query.return_value = {"Items": []}

    response = client.get("/transactions/")

    assert response.status_code == 200
    assert response.json()["data"] == []
    assert transactions_table.query.call_count == 1
    transactions_table.scan.assert_not_called()


def test_list_transactions_of_another_user_is_forbidden(client, transactions_table):
    response = client.get("/transactions/", params={"userId": "someone_else"})

    assert response.status_code == 403
    transactions_table.query.assert_not_called()


def test_payment_intent_defaults_amount(client):
    stripe_client = MagicMock()
    stripe_client.payment_intents.create.return_value = MagicMock(client_secret="pi_secret")
    app.dependency_overrides[get_stripe_client] = lambda: stripe_client

    response = client.post("/transactions/stripe/payment-intent", json={"amount": 0})

    assert response.status_code == 200
    assert response.json()["data"] == {"clientSecret": "pi_secret"}
    params = stripe_client.payment_intents.create.call_args.kwargs["params"]
    assert params["amount"] == 50
    assert params["currency"] == "usd"


def test_payment_intent_stripe_error(client):
    stripe_client = MagicMock()
    stripe_client.payment_intents.create.side_effect = stripe.StripeError("card declined")
    app.dependency_overrides[get_stripe_client] = lambda: stripe_client

    response = client.post("/transactions/stripe/payment-intent", json={"amount": 1000})

    assert response.status_code == 500


def test_purchase_for_another_user_is_forbidden(client, courses_table, transactions_table, progress_store):
    courses_table.get_item.return_value = {"Item": COURSE}

    response = purchase(client, userId="someone_else")

    assert response.status_code == 403
    assert progress_store.put_calls == 0
    transactions_table.put_item.assert_not_called()


def test_purchase_requires_session_token(client, transactions_table, progress_store):
    app.dependency_overrides.pop(get_current_user)

    response = purchase(client)

    assert response.status_code == 401
    assert progress_store.put_calls == 0
    transactions_table.put_item.assert_not_called()


def test_list_transactions_requires_session_token(client, transactions_table):
    app.dependency_overrides.pop(get_current_user)

    response = client.get("/transactions/")

    assert response.status_code == 401
    transactions_table.query.assert_not_called()
