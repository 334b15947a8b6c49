"""DynamoDB table layout for contact messages.

Messages are keyed by message_id. The StatusIndex GSI (status hash key,
created_at range key) serves the OPEN listing.
"""

from typing import Any

from utils.constants import STATUS_INDEX


def message_table_definition(table_name: str) -> dict[str, Any]:
    """
    Build the create_table arguments for the messages table.

    Args:
        table_name: Name of the table to create

    Returns:
        Keyword arguments for DynamoDB create_table
    """
    return {
        "TableName": table_name,
        "KeySchema": [{"AttributeName": "message_id", "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": "message_id", "AttributeType": "S"},
            {"AttributeName": "status", "AttributeType": "S"},
            {"AttributeName": "created_at", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": STATUS_INDEX,
                "KeySchema": [
                    {"AttributeName": "status", "KeyType": "HASH"},
                    {"AttributeName": "created_at", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            }
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


def create_messages_table(dynamodb, table_name: str, wait: bool = True):
    """
    Create the messages table.

    Args:
        dynamodb: boto3 DynamoDB service resource
        table_name: Name of the table to create
        wait: Block until the table exists

    Returns:
        The boto3 Table resource
    """
    table = dynamodb.create_table(**message_table_definition(table_name))
    if wait:
        table.wait_until_exists()
    return table
