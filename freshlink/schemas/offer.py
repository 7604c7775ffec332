# File: freshlink/schemas/offer.py

from typing import List, Literal

from freshlink.schemas.base import CamelModel


class StoreOffer(CamelModel):
    id: str
    zip: str
    store_name: str
    category: str
    description: str
    discount_percent: float
    valid_through: str
    items: List[str] = []
    type: Literal["bundle", "markdown", "loyalty"]
