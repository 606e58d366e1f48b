from xeinst.dao.activity_dao import ActivityDAO
from xeinst.dao.listing_dao import ListingDAO

__all__ = [
    "ActivityDAO",
    "ListingDAO",
]
