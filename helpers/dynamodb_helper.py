from decimal import Decimal, InvalidOperation
from typing import Any
import logging

logger = logging.getLogger(__name__)


def convert_to_dynamodb_type(value: Any) -> Any:
    """
    Convert various data types to DynamoDB-compatible types.
    """
    if isinstance(value, bool):
        return value  # Handle booleans first to prevent conversion to Decimal
    elif isinstance(value, (int, float)):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            logger.error(f"Failed to convert numeric value: {value}")
            raise
    elif isinstance(value, dict):
        return {k: convert_to_dynamodb_type(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [convert_to_dynamodb_type(item) for item in value]
    return value


def convert_from_dynamodb_type(value: Any) -> Any:
    """
    Convert DynamoDB Decimals back into ints and floats so items serialize as JSON.
    """
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    elif isinstance(value, dict):
        return {k: convert_from_dynamodb_type(v) for k, v in value.items()}
    elif isinstance(value, (list, set)):
        return [convert_from_dynamodb_type(item) for item in value]
    return value
