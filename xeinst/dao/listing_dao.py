"""
ListingDAO

DynamoDB layout:
  PK = AGENT#<agentId>
  SK = LISTING

GSI usage:
  GSI1_CreatorByDate      — list_by_creator()       query creatorId, filter entityType=AGENT
  GSI2_MarketplaceHotness — list_all_marketplace()  query statusVisibility="published#public"

Listing attributes: name, description, category, price, rating, userCount,
creatorId, creatorName, invocationEndpoint, status, visibility, runs,
revenue, createdAt.
"""

from typing import Any

from boto3.dynamodb.conditions import Attr, Key

from xeinst.dao.base import BaseDAO

MARKETPLACE_PARTITION = "published#public"


class ListingDAO(BaseDAO):

    @staticmethod
    def _pk(agent_id: str) -> str:
        return f"AGENT#{agent_id}"

    SK = "LISTING"

    def get(self, agent_id: str) -> dict[str, Any] | None:
        resp = self._table.get_item(Key={"PK": self._pk(agent_id), "SK": self.SK})
        item = resp.get("Item")
        return self._clean(item) if item else None

    def list_all_marketplace(self) -> list[dict[str, Any]]:
        """
        Every published+public listing, most used first.

        GSI2 sorts by userCount; ScanIndexForward=False gives descending order.
        """
        return self._query_all(
            IndexName="GSI2_MarketplaceHotness",
            KeyConditionExpression=Key("statusVisibility").eq(MARKETPLACE_PARTITION),
            ScanIndexForward=False,
        )

    def list_by_creator(self, creator_id: str) -> list[dict[str, Any]]:
        """GSI1_CreatorByDate: all of a creator's listings, newest first."""
        return self._query_all(
            IndexName="GSI1_CreatorByDate",
            KeyConditionExpression=Key("creatorId").eq(creator_id),
            FilterExpression=Attr("entityType").eq("AGENT"),
            ScanIndexForward=False,
        )
