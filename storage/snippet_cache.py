"""DynamoDB-backed key/value cache for page snippets."""
import logging
import time
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class SnippetCache:
    """
    Key/value cache stored in a DynamoDB table.

    Items hold the cache_key hash key, the snippet and a ttl attribute
    (Unix timestamp) that doubles as the table's TTL attribute. DynamoDB
    deletes expired items lazily, so reads check ttl themselves.

    Errors never propagate: a failing read is a miss and a failing write
    is skipped.
    """

    def __init__(self, table_name: str, region_name: str = None):
        """
        Initialize DynamoDB table reference.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region (default: from the environment)
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb', region_name=region_name)
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized SnippetCache for table: {table_name}")

    def get(self, key: str) -> Optional[str]:
        """
        Read a cached value.

        Args:
            key: Cache key

        Returns:
            Cached value, or None if absent, expired or unreadable
        """
        try:
            response = self.table.get_item(Key={'cache_key': key})
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"Error reading cache key {key}: {e}")
            return None

        item = response.get('Item')
        if not item:
            return None

        if int(item.get('ttl', 0)) <= int(time.time()):
            logger.debug(f"Cache key {key} has expired")
            return None

        return item.get('snippet')

    def set(self, key: str, value: str, ttl: int) -> bool:
        """
        Store a value.

        Args:
            key: Cache key
            value: Value to store
            ttl: Lifetime in seconds

        Returns:
            True if the value was written
        """
        item = {
            'cache_key': key,
            'snippet': value,
            'ttl': int(time.time()) + ttl
        }

        try:
            self.table.put_item(Item=item)
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"Error writing cache key {key}: {e}")
            return False

        return True
