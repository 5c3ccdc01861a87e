"""
Key-value document store used by the v2 API.

A job is one document keyed by its string id, with its applications embedded.
"""

import copy
import threading
from functools import lru_cache
from typing import Dict, List, Optional
import boto3
from jobmanager.core.config import settings


class DocumentStore:
    """Abstract base class for document store backends"""

    def get(self, key: str) -> Optional[dict]:
        raise NotImplementedError

    def put(self, item: dict) -> None:
        """Insert or replace the document identified by item['id']"""
        raise NotImplementedError

    def scan(self) -> List[dict]:
        raise NotImplementedError

    def ping(self) -> None:
        raise NotImplementedError


class InMemoryDocumentStore(DocumentStore):
    """Process-local store for development and tests"""

    def __init__(self):
        self._items: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[dict]:
        with self._lock:
            item = self._items.get(key)
            return copy.deepcopy(item) if item is not None else None

    def put(self, item: dict) -> None:
        with self._lock:
            self._items[item["id"]] = copy.deepcopy(item)

    def scan(self) -> List[dict]:
        with self._lock:
            return [copy.deepcopy(item) for item in self._items.values()]

    def ping(self) -> None:
        return None


class DynamoDBDocumentStore(DocumentStore):
    """AWS DynamoDB table with a string partition key named 'id'"""

    def __init__(self, table_name: Optional[str] = None, resource=None):
        self.table_name = table_name or settings.DYNAMODB_JOBS_TABLE
        dynamodb = resource or boto3.resource('dynamodb', **settings.boto3_client_kwargs())
        self.table = dynamodb.Table(self.table_name)

    def get(self, key: str) -> Optional[dict]:
        response = self.table.get_item(Key={"id": key})
        return response.get("Item")

    def put(self, item: dict) -> None:
        self.table.put_item(Item=item)

    def scan(self) -> List[dict]:
        response = self.table.scan()
        items = response.get("Items", [])

        # Scan results are paginated at 1MB
        while "LastEvaluatedKey" in response:
            response = self.table.scan(ExclusiveStartKey=response["LastEvaluatedKey"])
            items.extend(response.get("Items", []))

        return items

    def ping(self) -> None:
        self.table.load()


@lru_cache
def get_document_store() -> DocumentStore:
    """Get the process-wide document store based on the USE_DYNAMODB setting"""
    if settings.USE_DYNAMODB:
        return DynamoDBDocumentStore()
    return InMemoryDocumentStore()
