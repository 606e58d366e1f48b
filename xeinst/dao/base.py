from decimal import Decimal
from typing import Any

import boto3

from xeinst.core.config import get_settings


def _to_python(obj: Any) -> Any:
    """Recursively convert DynamoDB Decimal to int / float."""
    if isinstance(obj, Decimal):
        return int(obj) if obj % 1 == 0 else float(obj)
    if isinstance(obj, dict):
        return {k: _to_python(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_python(i) for i in obj]
    return obj


class BaseDAO:
    def __init__(self, table: Any = None) -> None:
        if table is None:
            settings = get_settings()
            dynamodb = boto3.resource("dynamodb", region_name=settings.aws_region)
            table = dynamodb.Table(settings.dynamodb_table_name)
        self._table = table

    def _clean(self, item: dict[str, Any]) -> dict[str, Any]:
        return _to_python(item)

    def _query_all(self, **kwargs: Any) -> list[dict[str, Any]]:
        """Run a Query and follow LastEvaluatedKey until exhausted."""
        items: list[dict[str, Any]] = []
        while True:
            resp = self._table.query(**kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
        return [self._clean(item) for item in items]
