"""
DynamoDB access for UserCourseProgress records.

Writes are conditional on the record's ``version`` attribute so a
load-merge-persist cycle that raced another writer fails instead of
overwriting the other writer's progress.
"""
import logging
from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from helpers.dynamodb_helper import convert_from_dynamodb_type, convert_to_dynamodb_type
from helpers.exceptions import ProgressConflictError, ProgressStorageError

logger = logging.getLogger(__name__)


class ProgressStore:
    """Progress record store keyed by (userId, courseId)."""

    def __init__(self, table):
        self.table = table

    def get(self, user_id: str, course_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.table.get_item(Key={'userId': user_id, 'courseId': course_id})
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error loading progress for {user_id}/{course_id}: {str(e)}")
            raise ProgressStorageError(f"Failed to load course progress: {str(e)}") from e
        item = response.get('Item')
        return convert_from_dynamodb_type(item) if item is not None else None

    def put(self, record: Dict[str, Any], expected_version: Optional[int] = None) -> Dict[str, Any]:
        """
        Persist ``record`` and return it with its new version.

        Args:
            record: The full progress record.
            expected_version: Version the caller loaded, or None when the
                caller believes no record exists yet.

        Raises:
            ProgressConflictError: the stored version no longer matches.
            ProgressStorageError: any other DynamoDB failure.
        """
        item = dict(record)
        item['version'] = (expected_version or 0) + 1

        if expected_version is None:
            condition = {'ConditionExpression': 'attribute_not_exists(userId)'}
        else:
            expression = '#version = :expected_version'
            if expected_version == 0:
                # Records written before versioning have no version attribute
                expression = f'attribute_not_exists(#version) OR {expression}'
            condition = {
                'ConditionExpression': expression,
                'ExpressionAttributeNames': {'#version': 'version'},
                'ExpressionAttributeValues': {':expected_version': expected_version},
            }

        try:
            self.table.put_item(Item=convert_to_dynamodb_type(item), **condition)
        except ClientError as e:
            if e.response['Error']['Code'] == 'ConditionalCheckFailedException':
                logger.warning(
                    f"Version mismatch for {item['userId']}/{item['courseId']}: "
                    f"expected {expected_version}, item was modified"
                )
                raise ProgressConflictError("Course progress was modified concurrently") from e
            logger.error(f"Error saving progress for {item['userId']}/{item['courseId']}: {str(e)}")
            raise ProgressStorageError(f"Failed to save course progress: {str(e)}") from e
        except BotoCoreError as e:
            logger.error(f"Error saving progress for {item['userId']}/{item['courseId']}: {str(e)}")
            raise ProgressStorageError(f"Failed to save course progress: {str(e)}") from e
        return item

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        items = []
        kwargs = {'KeyConditionExpression': Key('userId').eq(user_id)}
        try:
            while True:
                response = self.table.query(**kwargs)
                items.extend(response.get('Items', []))
                if 'LastEvaluatedKey' not in response:
                    break
                kwargs['ExclusiveStartKey'] = response['LastEvaluatedKey']
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error listing progress for {user_id}: {str(e)}")
            raise ProgressStorageError(f"Failed to list course progress: {str(e)}") from e
        return convert_from_dynamodb_type(items)
