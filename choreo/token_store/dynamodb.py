"""DynamoDB-backed token store.

Table layout: partition key ``entityId`` and sort key ``eventName`` (both
strings), with the ``taskToken`` and ``executionArn`` attributes.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from choreo.token_store.base import CorrelationRecord, TokenStore

LOGGER = logging.getLogger("choreo.token_store.dynamodb")


class DynamoDBTokenStore(TokenStore):
    """Stores correlation records in a DynamoDB table."""

    def __init__(self, *, table_name: str, region_name: Optional[str] = None, client: Any = None) -> None:
        self._table_name = table_name
        self._client = client or boto3.client("dynamodb", region_name=region_name)

    def get(self, entity_id: str) -> List[CorrelationRecord]:
        query_kwargs: Dict[str, Any] = {
            "TableName": self._table_name,
            "KeyConditionExpression": "entityId = :hkey",
            "ExpressionAttributeValues": {":hkey": {"S": entity_id}},
        }
        records: List[CorrelationRecord] = []
        while True:
            try:
                response = self._client.query(**query_kwargs)
            except (BotoCoreError, ClientError):
                LOGGER.exception(
                    "token_store_query_failed",
                    extra={"entity_id": entity_id, "table_name": self._table_name},
                )
                raise
            records.extend(_to_record(item) for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return records
            query_kwargs["ExclusiveStartKey"] = last_key

    def put(self, record: CorrelationRecord) -> None:
        update_kwargs: Dict[str, Any] = {
            "TableName": self._table_name,
            "Key": _key(record.entity_id, record.branch_key),
        }
        assignments: List[str] = []
        values: Dict[str, Dict[str, str]] = {}
        if record.token is not None:
            assignments.append("taskToken = :token")
            values[":token"] = {"S": record.token}
        if record.execution_id is not None:
            assignments.append("executionArn = :execArn")
            values[":execArn"] = {"S": record.execution_id}
        if assignments:
            update_kwargs["UpdateExpression"] = "SET " + ", ".join(assignments)
            update_kwargs["ExpressionAttributeValues"] = values

        self._client.update_item(**update_kwargs)

    def delete(self, entity_id: str, branch_key: str) -> None:
        self._client.delete_item(
            TableName=self._table_name,
            Key=_key(entity_id, branch_key),
        )


def _key(entity_id: str, branch_key: str) -> Dict[str, Dict[str, str]]:
    return {
        "entityId": {"S": entity_id},
        "eventName": {"S": branch_key},
    }


def _to_record(item: Dict[str, Dict[str, str]]) -> CorrelationRecord:
    token = item.get("taskToken")
    execution = item.get("executionArn")
    return CorrelationRecord(
        entity_id=item["entityId"]["S"],
        branch_key=item["eventName"]["S"],
        token=token["S"] if token else None,
        execution_id=execution["S"] if execution else None,
    )
