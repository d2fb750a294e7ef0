import copy
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from config.db_config import get_courses_table, get_dynamodb_resource, get_transactions_table
from controllers.user_course_progress_controller import get_progress_store
from helpers.exceptions import ProgressConflictError
from main import app
from middleware.auth_middleware import get_current_user

TEST_USER_ID = "user_test_123"


class InMemoryProgressStore:
    """Dict-backed stand-in for ProgressStore with the same version checks."""

    def __init__(self, records=None):
        self.items = {}
        self.put_calls = 0
        for record in records or []:
            self.items[(record['userId'], record['courseId'])] = copy.deepcopy(record)

    def get(self, user_id, course_id):
        record = self.items.get((user_id, course_id))
        return copy.deepcopy(record) if record is not None else None

    def put(self, record, expected_version=None):
        self.put_calls += 1
        key = (record['userId'], record['courseId'])
        current = self.items.get(key)
        if expected_version is None:
            if current is not None:
                raise ProgressConflictError("record already exists")
        elif current is None or current.get('version', 0) != expected_version:
            raise ProgressConflictError("version mismatch")
        item = copy.deepcopy(record)
        item['version'] = (expected_version or 0) + 1
        self.items[key] = item
        return copy.deepcopy(item)

    def list_for_user(self, user_id):
        return [copy.deepcopy(r) for (uid, _), r in self.items.items() if uid == user_id]


def progress_record(sections, user_id=TEST_USER_ID, course_id="course-1", version=1):
    return {
        'userId': user_id,
        'courseId': course_id,
        'enrollmentDate': "2024-01-01T00:00:00+00:00",
        'overallProgress': 0.0,
        'sections': sections,
        'lastAccessedTimestamp': "2024-01-01T00:00:00+00:00",
        'version': version,
    }


@pytest.fixture
def progress_store():
    return InMemoryProgressStore()


@pytest.fixture
def courses_table():
    return MagicMock()


@pytest.fixture
def transactions_table():
    return MagicMock()


@pytest.fixture
def dynamodb_resource():
    return MagicMock()


@pytest.fixture
def client(progress_store, courses_table, transactions_table, dynamodb_resource):
    app.dependency_overrides[get_progress_store] = lambda: progress_store
    app.dependency_overrides[get_courses_table] = lambda: courses_table
    app.dependency_overrides[get_transactions_table] = lambda: transactions_table
    app.dependency_overrides[get_dynamodb_resource] = lambda: dynamodb_resource
    app.dependency_overrides[get_current_user] = lambda: {"userId": TEST_USER_ID}
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
