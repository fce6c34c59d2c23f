"""DynamoDB-backed record store.

Single-table layout: the partition key is the collection path and the sort
key is the document id, so every collection (including sub-collections such
as ``users/{uid}/trips``) is one partition that can be queried directly.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from triptribe.db.interface import RecordStore
from triptribe.errors import BackendError, NotFoundError

logger = logging.getLogger(__name__)

COLLECTION_KEY = "collection"
DOC_KEY = "docId"

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _to_dynamo(value: Any) -> Any:
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_dynamo(v) for v in value]
    return value


def _from_dynamo(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(v) for v in value]
    return value


def serialize_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {name: _serializer.serialize(_to_dynamo(value)) for name, value in fields.items()}


def deserialize_item(item: dict[str, Any]) -> dict[str, Any]:
    return {
        name: _from_dynamo(_deserializer.deserialize(value))
        for name, value in item.items()
        if name not in (COLLECTION_KEY, DOC_KEY)
    }


class DynamoRecordStore(RecordStore):
    def __init__(self, client: Any, table_name: str) -> None:
        self._client = client
        self._table = table_name

    @staticmethod
    def _key(collection: str, doc_id: str) -> dict[str, Any]:
        return {COLLECTION_KEY: {"S": collection}, DOC_KEY: {"S": doc_id}}

    async def _call(self, operation: str, **kwargs: Any) -> Any:
        """Run a blocking client call off the event loop, translating botocore failures."""
        method = getattr(self._client, operation)
        try:
            return await asyncio.to_thread(method, TableName=self._table, **kwargs)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code == "ConditionalCheckFailedException":
                raise NotFoundError(f"Record not found for {operation}") from e
            raise BackendError(f"DynamoDB {operation} failed: {code or e}") from e
        except BotoCoreError as e:
            raise BackendError(f"DynamoDB {operation} failed: {e}") from e

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        response = await self._call("get_item", Key=self._key(collection, doc_id), ConsistentRead=True)
        item = response.get("Item")
        if item is None:
            return None
        return deserialize_item(item)

    async def set(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        item = {**serialize_fields(fields), **self._key(collection, doc_id)}
        await self._call("put_item", Item=item)

    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        if not fields:
            return

        names: dict[str, str] = {"#doc": DOC_KEY}
        values: dict[str, Any] = {}
        assignments: list[str] = []
        for i, (name, value) in enumerate(fields.items()):
            names[f"#f{i}"] = name
            values[f":v{i}"] = _serializer.serialize(_to_dynamo(value))
            assignments.append(f"#f{i} = :v{i}")

        await self._call(
            "update_item",
            Key=self._key(collection, doc_id),
            UpdateExpression="SET " + ", ".join(assignments),
            ConditionExpression="attribute_exists(#doc)",
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=values,
        )

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._call("delete_item", Key=self._key(collection, doc_id))

    async def list(self, collection: str) -> list[dict[str, Any]]:
        return await self._query_all(
            KeyConditionExpression="#c = :c",
            ExpressionAttributeNames={"#c": COLLECTION_KEY},
            ExpressionAttributeValues={":c": {"S": collection}},
        )

    async def query(self, collection: str, field: str, value: Any) -> list[dict[str, Any]]:
        return await self._query_all(
            KeyConditionExpression="#c = :c",
            FilterExpression="#f = :v",
            ExpressionAttributeNames={"#c": COLLECTION_KEY, "#f": field},
            ExpressionAttributeValues={":c": {"S": collection}, ":v": _serializer.serialize(_to_dynamo(value))},
        )

    async def _query_all(self, **kwargs: Any) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        last_key = None

        while True:
            query_kwargs: dict[str, Any] = {"ConsistentRead": True, **kwargs}
            if last_key:
                query_kwargs["ExclusiveStartKey"] = last_key

            response = await self._call("query", **query_kwargs)
            items.extend(deserialize_item(item) for item in response.get("Items", []))

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break

        logger.debug("Query on %s returned %d items", kwargs["ExpressionAttributeValues"][":c"]["S"], len(items))
        return items
