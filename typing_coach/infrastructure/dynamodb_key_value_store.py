"""DynamoDB implementation of KeyValueStore."""

from typing import Optional

import boto3

from ..domain.interfaces.key_value_store import KeyValueStore


class DynamoDBKeyValueStore(KeyValueStore):
    """DynamoDB implementation of the KeyValueStore protocol.

    Each blob is one item with a ``key`` partition key and a ``value``
    string attribute.
    """

    def __init__(self, table_name: str, region_name: str = "us-east-1"):
        """Initialize the DynamoDB key-value store.

        Args:
            table_name: The name of the DynamoDB table.
            region_name: AWS region name (default: us-east-1).
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource("dynamodb", region_name=region_name)
        self.table = self.dynamodb.Table(table_name)

    def get(self, key: str) -> Optional[str]:
        """Read a blob from DynamoDB.

        Args:
            key: The storage key.

        Returns:
            Optional[str]: The blob, or None if the item does not exist.
        """
        response = self.table.get_item(Key={"key": key})

        if "Item" not in response:
            return None

        value = response["Item"].get("value")
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Write a blob to DynamoDB.

        Args:
            key: The storage key.
            value: The blob to store.
        """
        self.table.put_item(Item={"key": key, "value": value})

    def delete(self, key: str) -> None:
        """Delete a blob from DynamoDB.

        Args:
            key: The storage key.
        """
        self.table.delete_item(Key={"key": key})
