import logging
from functools import lru_cache

import boto3
from botocore.config import Config

from config import settings

logger = logging.getLogger(__name__)


def _client_kwargs():
    kwargs = {
        'region_name': settings.AWS_REGION,
        'config': Config(
            connect_timeout=settings.DYNAMODB_CONNECT_TIMEOUT,
            read_timeout=settings.DYNAMODB_READ_TIMEOUT,
            retries={'max_attempts': 3, 'mode': 'standard'},
        ),
    }
    # Outside production everything points at DynamoDB Local
    if not settings.IS_PRODUCTION:
        kwargs['endpoint_url'] = settings.DYNAMODB_ENDPOINT
        kwargs['aws_access_key_id'] = settings.AWS_ACCESS_KEY_ID
        kwargs['aws_secret_access_key'] = settings.AWS_SECRET_ACCESS_KEY
    return kwargs


# DynamoDB Configuration
def get_dynamodb_client():
    """Get DynamoDB client"""
    return boto3.client('dynamodb', **_client_kwargs())


@lru_cache(maxsize=1)
def get_dynamodb_resource():
    """Get DynamoDB resource"""
    return boto3.resource('dynamodb', **_client_kwargs())


def get_table(table_name: str):
    return get_dynamodb_resource().Table(table_name)


TABLE_DEFINITIONS = [
    {
        'TableName': settings.COURSES_TABLE,
        'KeySchema': [
            {'AttributeName': 'courseId', 'KeyType': 'HASH'}
        ],
        'AttributeDefinitions': [
            {'AttributeName': 'courseId', 'AttributeType': 'S'}
        ],
    },
    {
        'TableName': settings.TRANSACTIONS_TABLE,
        'KeySchema': [
            {'AttributeName': 'userId', 'KeyType': 'HASH'},
            {'AttributeName': 'transactionId', 'KeyType': 'RANGE'}
        ],
        'AttributeDefinitions': [
            {'AttributeName': 'userId', 'AttributeType': 'S'},
            {'AttributeName': 'transactionId', 'AttributeType': 'S'},
            {'AttributeName': 'courseId', 'AttributeType': 'S'}
        ],
        'GlobalSecondaryIndexes': [
            {
                'IndexName': 'CourseTransactionsIndex',
                'KeySchema': [
                    {'AttributeName': 'courseId', 'KeyType': 'HASH'}
                ],
                'Projection': {'ProjectionType': 'ALL'},
                'ProvisionedThroughput': {
                    'ReadCapacityUnits': 5,
                    'WriteCapacityUnits': 5
                }
            }
        ],
    },
    {
        'TableName': settings.USER_COURSE_PROGRESS_TABLE,
        'KeySchema': [
            {'AttributeName': 'userId', 'KeyType': 'HASH'},
            {'AttributeName': 'courseId', 'KeyType': 'RANGE'}
        ],
        'AttributeDefinitions': [
            {'AttributeName': 'userId', 'AttributeType': 'S'},
            {'AttributeName': 'courseId', 'AttributeType': 'S'}
        ],
    },
]


def create_tables():
    """Create DynamoDB tables if they don't exist"""
    dynamodb = get_dynamodb_resource()

    for definition in TABLE_DEFINITIONS:
        table_name = definition['TableName']
        try:
            table = dynamodb.create_table(
                ProvisionedThroughput={
                    'ReadCapacityUnits': 5,
                    'WriteCapacityUnits': 5
                },
                **definition
            )
            logger.info(f"Creating {table_name} table...")
            table.wait_until_exists()
        except dynamodb.meta.client.exceptions.ResourceInUseException:
            logger.info(f"{table_name} table already exists")


# FastAPI dependencies
def get_courses_table():
    return get_table(settings.COURSES_TABLE)


def get_transactions_table():
    return get_table(settings.TRANSACTIONS_TABLE)


def get_progress_table():
    return get_table(settings.USER_COURSE_PROGRESS_TABLE)
