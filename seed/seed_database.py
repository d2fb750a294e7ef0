import os
import sys
import json
import logging
from typing import Any, Dict, List

# Dynamically add the parent directory to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import settings
from config.db_config import create_tables, get_dynamodb_client, get_dynamodb_resource
from helpers.dynamodb_helper import convert_to_dynamodb_type
from helpers.progress_helper import calculate_overall_progress

logger = logging.getLogger(__name__)


def validate_data(data: List[Dict[str, Any]], schema: Dict[str, Any]) -> bool:
    """
    Basic validation for the data structure against a schema.
    """
    for record in data:
        for field, field_schema in schema.items():
            if field not in record:
                if field_schema.get('required', True):
                    logger.error(f"Missing required field '{field}' in record: {record}")
                    return False
            elif not isinstance(record[field], field_schema['type']):
                logger.error(f"Field '{field}' has incorrect type in record: {record}")
                return False
    return True


def load_json_data(file_path: str) -> List[Dict[str, Any]]:
    """
    Load data from a JSON file located in the 'data' directory.
    """
    current_dir = os.path.dirname(os.path.abspath(__file__))
    full_path = os.path.join(current_dir, "data", file_path)

    try:
        with open(full_path, 'r') as file:
            return json.load(file)
    except FileNotFoundError:
        logger.error(f"File not found: {full_path}")
        raise
    except json.JSONDecodeError:
        logger.error(f"Invalid JSON format in file: {full_path}")
        raise


def seed_table(table_name: str, data: List[Dict[str, Any]], schema: Dict[str, Dict[str, Any]]):
    """
    Seed data into the specified DynamoDB table.
    """
    table = get_dynamodb_resource().Table(table_name)

    # Validate the data before seeding
    if not validate_data(data, schema):
        raise ValueError(f"Data validation failed for table: {table_name}")

    with table.batch_writer() as batch:
        for record in data:
            batch.put_item(Item=convert_to_dynamodb_type(record))
    logger.info(f"Successfully seeded data into {table_name}")


def delete_all_tables():
    """
    Drop every table in DynamoDB Local so seeding starts from scratch.
    """
    client = get_dynamodb_client()
    for table_name in client.list_tables().get('TableNames', []):
        client.delete_table(TableName=table_name)
        client.get_waiter('table_not_exists').wait(TableName=table_name)
        logger.info(f"Table deleted: {table_name}")


def seed_courses():
    schema = {
        "courseId": {"type": str},
        "teacherId": {"type": str},
        "teacherName": {"type": str},
        "title": {"type": str},
        "description": {"type": str, "required": False},
        "category": {"type": str},
        "image": {"type": str, "required": False},
        "price": {"type": (int, float), "required": False},
        "level": {"type": str},
        "status": {"type": str},
        "enrollments": {"type": list},
        "sections": {"type": list}
    }
    seed_table(settings.COURSES_TABLE, load_json_data("courses.json"), schema)


def seed_transactions():
    schema = {
        "transactionId": {"type": str},
        "userId": {"type": str},
        "courseId": {"type": str},
        "dateTime": {"type": str},
        "paymentProvider": {"type": str},
        "amount": {"type": (int, float), "required": False}
    }
    seed_table(settings.TRANSACTIONS_TABLE, load_json_data("transactions.json"), schema)


def seed_user_progress():
    """
    Seed user course progress, recomputing overallProgress from the chapters.
    """
    schema = {
        "userId": {"type": str},
        "courseId": {"type": str},
        "enrollmentDate": {"type": str},
        "sections": {"type": list},
        "lastAccessedTimestamp": {"type": str}
    }
    records = [
        {**record, "overallProgress": calculate_overall_progress(record["sections"]), "version": 1}
        for record in load_json_data("userCourseProgress.json")
    ]
    seed_table(settings.USER_COURSE_PROGRESS_TABLE, records, schema)


def seed_all():
    """
    Seed all data into the database.
    """
    if settings.IS_PRODUCTION:
        raise RuntimeError("Refusing to seed a production database")

    logger.info("Starting database seeding...")
    delete_all_tables()
    create_tables()
    seed_courses()
    seed_transactions()
    seed_user_progress()
    logger.info("Database seeding completed successfully!")


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    seed_all()
