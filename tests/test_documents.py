"""
Tests for the document store backends.
"""

from unittest.mock import MagicMock

from jobmanager.core.documents import DynamoDBDocumentStore, InMemoryDocumentStore


def dynamodb_store(table):
    resource = MagicMock()
    resource.Table.return_value = table
    return DynamoDBDocumentStore(table_name="jobs", resource=resource)


class TestInMemoryDocumentStore:

    def test_returns_copies(self):
        store = InMemoryDocumentStore()
        store.put({"id": "j1", "applications": []})

        item = store.get("j1")
        item["applications"].append({"id": "a1"})

        assert store.get("j1")["applications"] == []
        assert store.get("missing") is None

    def test_put_replaces_whole_item(self):
        store = InMemoryDocumentStore()
        store.put({"id": "j1", "title": "Engineer"})
        store.put({"id": "j1", "title": "Designer"})

        assert [item["title"] for item in store.scan()] == ["Designer"]


class TestDynamoDBDocumentStore:

    def test_scan_follows_pagination(self):
        table = MagicMock()
        table.scan.side_effect = [
            {"Items": [{"id": "j1"}], "LastEvaluatedKey": {"id": "j1"}},
            {"Items": [{"id": "j2"}]},
        ]
        store = dynamodb_store(table)

        assert [item["id"] for item in store.scan()] == ["j1", "j2"]
        table.scan.assert_called_with(ExclusiveStartKey={"id": "j1"})

    def test_get_missing_item(self):
        table = MagicMock()
        table.get_item.return_value = {}
        store = dynamodb_store(table)

        assert store.get("missing") is None
        table.get_item.assert_called_once_with(Key={"id": "missing"})

    def test_put_writes_item(self):
        table = MagicMock()
        store = dynamodb_store(table)

        store.put({"id": "j1", "applications": []})

        table.put_item.assert_called_once_with(Item={"id": "j1", "applications": []})
