# File: freshlink/schemas/buyer.py

from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import Field

from freshlink.schemas.base import CamelModel

InventoryStatus = Literal["healthy", "use-soon", "restock", "overflow"]
EventStatus = Literal["on-track", "needs-shopping", "draft"]
ShoppingItemStatus = Literal["covered", "add", "reserve"]


class BuyerInventoryItem(CamelModel):
    id: str
    name: str
    quantity: float
    unit: str
    category: str
    status: InventoryStatus
    added_on: str
    expiration_date: Optional[str] = None
    days_left: Optional[int] = None
    estimated_value: Optional[float] = None
    notes: Optional[str] = None


class PurchaseLine(CamelModel):
    name: str
    quantity: float
    unit: str
    category: str


class BuyerPurchaseRecord(CamelModel):
    id: str
    date: str
    total: float
    store: str
    items: List[PurchaseLine] = []


class ShoppingListEntry(CamelModel):
    name: str
    quantity: float
    unit: str
    status: ShoppingItemStatus


class BuyerEventPlan(CamelModel):
    id: str
    name: str
    date: str
    headcount: int
    menu: List[str] = []
    status: EventStatus
    shopping_list: List[ShoppingListEntry] = []


class BuyerGoals(CamelModel):
    reduce_waste: int = 60
    save_budget: int = 60
    eat_healthy: int = 60


class BuyerProfile(CamelModel):
    user_id: str
    display_name: str
    zip: str
    household_size: int = 1
    dietary_preferences: List[str] = []
    activity_level: Optional[str] = None
    budget_per_week: float
    calorie_target: Optional[int] = None
    goals: BuyerGoals = Field(default_factory=BuyerGoals)
    inventory: List[BuyerInventoryItem] = []
    purchases: List[BuyerPurchaseRecord] = []
    events: List[BuyerEventPlan] = []
    last_updated: str


# -----------------------------
# Request bodies
# -----------------------------

class BuyerInventoryInput(CamelModel):
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: str = Field(min_length=1)
    category: str = "Pantry"
    expiration_date: Optional[date] = None
    estimated_value: Optional[float] = None


class InventoryRemoveRequest(CamelModel):
    user_id: str = Field(min_length=1)
    inventory_id: str = Field(min_length=1)


class ShoppingListAddRequest(CamelModel):
    user_id: str = Field(min_length=1)
    item: str = Field(min_length=1)
    quantity: float = Field(default=1, gt=0)
    unit: str = "each"
