"""
ActivityDAO

DynamoDB layout:
  PK = USER#<userId>
  SK = ACTIVITY#<createdAt ISO-8601>#<activityId>

Sort keys are lexicographically ordered by time, so a descending query
returns the newest events first.
"""

from typing import Any

from boto3.dynamodb.conditions import Key

from xeinst.dao.base import BaseDAO


class ActivityDAO(BaseDAO):

    @staticmethod
    def _pk(user_id: str) -> str:
        return f"USER#{user_id}"

    def list_recent(self, user_id: str, limit: int = 10) -> list[dict[str, Any]]:
        resp = self._table.query(
            KeyConditionExpression=(
                Key("PK").eq(self._pk(user_id)) & Key("SK").begins_with("ACTIVITY#")
            ),
            ScanIndexForward=False,
            Limit=limit,
        )
        return [self._clean(item) for item in resp.get("Items", [])]
