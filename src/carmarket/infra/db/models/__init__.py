from carmarket.infra.db.models.base import Base
from carmarket.infra.db.models.car_detail import CarDetailRow, CarImageRow
from carmarket.infra.db.models.car_metadata import CarMakeRow, CarMetadataRow, CarModelRow
from carmarket.infra.db.models.listing import ListingRow

__all__ = [
    "Base",
    "CarDetailRow",
    "CarImageRow",
    "CarMakeRow",
    "CarMetadataRow",
    "CarModelRow",
    "ListingRow",
]
