# File: freshlink/db/profile_store.py

"""
Buyer / seller profile tables and the read-only store offer feed.

Files under the data directory:
  - buyer-profiles.json   {"profiles": [BuyerProfile, ...]}
  - seller-profiles.json  {"profiles": [SellerProfile, ...]}
  - store-offers.json     [StoreOffer, ...]

Every mutation refreshes the profile's ``lastUpdated`` stamp.
"""

import logging
import time
import uuid
from datetime import date
from pathlib import Path
from typing import Callable, Generic, List, Optional, Type, TypeVar

from pydantic import ValidationError

from freshlink.db.json_store import JsonDocument
from freshlink.schemas.base import CamelModel
from freshlink.schemas.buyer import (
    BuyerEventPlan,
    BuyerInventoryInput,
    BuyerInventoryItem,
    BuyerProfile,
    InventoryStatus,
    ShoppingListEntry,
)
from freshlink.schemas.offer import StoreOffer
from freshlink.schemas.seller import (
    SellerInventoryInput,
    SellerInventoryItem,
    SellerItemStatus,
    SellerProfile,
    StoreInfo,
)
from freshlink.utils.dates import days_left as compute_days_left

logger = logging.getLogger(__name__)

DEFAULT_ZIP = "07030"
DEFAULT_REGION = "Hudson County"

P = TypeVar("P", bound=CamelModel)


class ProfileNotFoundError(LookupError):
    pass


# ---------------------------------------------------------------------------
# Derived inventory state
# ---------------------------------------------------------------------------

def derive_buyer_status(days_left: Optional[int], quantity: Optional[float]) -> InventoryStatus:
    if days_left is not None and days_left <= 3:
        return "use-soon"
    if (quantity or 0) <= 0.5:
        return "restock"
    if days_left is not None and days_left > 40:
        return "overflow"
    return "healthy"


def seller_spoilage_risk(days_on_hand: float) -> int:
    if days_on_hand > 14:
        return 70
    if days_on_hand > 9:
        return 40
    return 20


def derive_seller_status(spoilage_risk: float) -> SellerItemStatus:
    if spoilage_risk > 65:
        return "critical"
    if spoilage_risk > 40:
        return "risk"
    return "healthy"


def refresh_buyer_inventory(profile: BuyerProfile, today: date) -> BuyerProfile:
    """
    Return a copy whose dated items have ``daysLeft`` and ``status``
    recomputed for ``today``. Undated items keep their stored days-left
    (if any) but still get their status re-derived.
    """
    items = []
    for item in profile.inventory:
        remaining = item.days_left
        if item.expiration_date:
            try:
                remaining = compute_days_left(item.expiration_date, today)
            except ValueError:
                logger.warning(
                    "[profile-store] Ignoring unparseable expiration date %r on %s",
                    item.expiration_date,
                    item.id,
                )
        items.append(
            item.model_copy(
                update={
                    "days_left": remaining,
                    "status": derive_buyer_status(remaining, item.quantity),
                }
            )
        )
    return profile.model_copy(update={"inventory": items})


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

class _ProfileTable(Generic[P]):
    def __init__(self, path: Path, model: Type[P], label: str):
        self.model = model
        self.label = label
        self.document = JsonDocument(path, default_factory=lambda: {"profiles": []}, label=label)

    def all(self) -> List[P]:
        raw = self.document.read()
        entries = raw.get("profiles") if isinstance(raw, dict) else None
        profiles: List[P] = []
        for entry in entries or []:
            try:
                profiles.append(self.model.model_validate(entry))
            except ValidationError as e:
                logger.error("[%s] Skipping malformed profile: %s", self.label, e)
        return profiles

    def get(self, user_id: str) -> Optional[P]:
        for profile in self.all():
            if profile.user_id == user_id:
                return profile
        return None

    def upsert(self, profile: P) -> P:
        """
        Replace the stored entry with the same ``userId`` or append one.

        Works on the raw rows so entries this version cannot validate are
        written back untouched.
        """
        with self.document.locked():
            raw = self.document.read()
            entries = raw.get("profiles") if isinstance(raw, dict) else None
            entries = list(entries or [])
            stored = profile.to_json_dict()
            for i, entry in enumerate(entries):
                if isinstance(entry, dict) and entry.get("userId") == profile.user_id:
                    entries[i] = stored
                    break
            else:
                entries.append(stored)
            self.document.write({"profiles": entries})
        return profile


class ProfileStore:
    def __init__(self, data_dir: Path, today: Callable[[], date] = date.today):
        data_dir = Path(data_dir)
        self.today = today
        self.buyers: _ProfileTable[BuyerProfile] = _ProfileTable(
            data_dir / "buyer-profiles.json", BuyerProfile, "profile-store"
        )
        self.sellers: _ProfileTable[SellerProfile] = _ProfileTable(
            data_dir / "seller-profiles.json", SellerProfile, "profile-store"
        )
        self.offers = JsonDocument(
            data_dir / "store-offers.json", default_factory=list, label="profile-store"
        )

    def _stamp(self) -> str:
        return self.today().isoformat()

    # -------------------------- buyers --------------------------

    def get_buyer_profile(self, user_id: str) -> Optional[BuyerProfile]:
        return self.buyers.get(user_id)

    def upsert_buyer_profile(self, profile: BuyerProfile) -> BuyerProfile:
        return self.buyers.upsert(profile)

    def _require_buyer(self, user_id: str) -> BuyerProfile:
        profile = self.buyers.get(user_id)
        if profile is None:
            raise ProfileNotFoundError("Profile not found for buyer")
        return profile

    def ensure_buyer_profile_for_user(self, user_id: str, display_name: str) -> BuyerProfile:
        with self.buyers.document.locked():
            existing = self.buyers.get(user_id)
            if existing:
                return existing

            scaffold = BuyerProfile(
                user_id=user_id,
                display_name=display_name,
                zip=DEFAULT_ZIP,
                household_size=1,
                dietary_preferences=["balanced"],
                activity_level="moderate",
                budget_per_week=90,
                calorie_target=2000,
                last_updated=self._stamp(),
            )
            logger.info("[profile-store] Provisioned buyer profile for %s", user_id)
            return self.buyers.upsert(scaffold)

    def append_buyer_inventory_item(self, data: BuyerInventoryInput) -> BuyerProfile:
        today = self.today()
        with self.buyers.document.locked():
            profile = self._require_buyer(data.user_id)

            remaining = compute_days_left(data.expiration_date, today)
            item = BuyerInventoryItem(
                id=f"inv-{uuid.uuid4()}",
                name=data.name,
                quantity=data.quantity,
                unit=data.unit,
                category=data.category or "Pantry",
                status=derive_buyer_status(remaining, data.quantity),
                added_on=today.isoformat(),
                expiration_date=data.expiration_date.isoformat() if data.expiration_date else None,
                days_left=remaining,
                estimated_value=data.estimated_value,
            )

            updated = profile.model_copy(
                update={
                    "inventory": [*profile.inventory, item],
                    "last_updated": today.isoformat(),
                }
            )
            return self.buyers.upsert(updated)

    def remove_buyer_inventory_item(self, user_id: str, inventory_id: str) -> BuyerProfile:
        with self.buyers.document.locked():
            profile = self._require_buyer(user_id)

            remaining = [it for it in profile.inventory if it.id != inventory_id]
            if len(remaining) == len(profile.inventory):
                logger.info("[profile-store] %s has no inventory item %s", user_id, inventory_id)

            updated = profile.model_copy(
                update={"inventory": remaining, "last_updated": self._stamp()}
            )
            return self.buyers.upsert(updated)

    def add_buyer_shopping_item(
        self,
        user_id: str,
        item: str,
        quantity: float = 1,
        unit: str = "each",
    ) -> BuyerProfile:
        """
        Put ``item`` on the first event still being shopped for, or on a
        new "Quick Order" event when every plan is already on track.
        """
        with self.buyers.document.locked():
            profile = self._require_buyer(user_id)
            events = [e.model_copy(deep=True) for e in profile.events]

            target = next(
                (e for e in events if e.status in ("needs-shopping", "draft")),
                None,
            )
            if target is None:
                target = BuyerEventPlan(
                    id=f"event-quick-{int(time.time() * 1000)}",
                    name="Quick Order",
                    date=self._stamp(),
                    headcount=1,
                    menu=[],
                    status="needs-shopping",
                    shopping_list=[],
                )
                events.append(target)

            target.shopping_list.append(
                ShoppingListEntry(name=item, quantity=quantity or 1, unit=unit or "each", status="add")
            )

            updated = profile.model_copy(update={"events": events, "last_updated": self._stamp()})
            return self.buyers.upsert(updated)

    # -------------------------- sellers --------------------------

    def get_seller_profile(self, user_id: str) -> Optional[SellerProfile]:
        return self.sellers.get(user_id)

    def upsert_seller_profile(self, profile: SellerProfile) -> SellerProfile:
        return self.sellers.upsert(profile)

    def ensure_seller_profile_for_user(self, user_id: str, display_name: str) -> SellerProfile:
        with self.sellers.document.locked():
            existing = self.sellers.get(user_id)
            if existing:
                return existing

            scaffold = SellerProfile(
                user_id=user_id,
                display_name=display_name,
                store=StoreInfo(
                    name=f"{display_name}'s Market",
                    zip=DEFAULT_ZIP,
                    region=DEFAULT_REGION,
                    format="market",
                ),
                last_updated=self._stamp(),
            )
            logger.info("[profile-store] Provisioned seller profile for %s", user_id)
            return self.sellers.upsert(scaffold)

    def add_seller_inventory_entry(self, data: SellerInventoryInput) -> SellerProfile:
        with self.sellers.document.locked():
            profile = self.sellers.get(data.user_id)
            if profile is None:
                raise ProfileNotFoundError("Profile not found for seller")

            # Status follows days on hand even when the caller overrides the risk score.
            computed_risk = seller_spoilage_risk(data.days_on_hand)
            entry = SellerInventoryItem(
                sku=data.sku or f"sku-{uuid.uuid4().hex[:6]}",
                name=data.name,
                category=data.category or "General",
                stock=data.stock,
                par_level=data.par_level,
                days_on_hand=data.days_on_hand,
                status=derive_seller_status(computed_risk),
                spoilage_risk=(
                    data.spoilage_risk if data.spoilage_risk is not None else computed_risk
                ),
                margin=data.margin,
            )

            updated = profile.model_copy(
                update={
                    "inventory": [*profile.inventory, entry],
                    "last_updated": self._stamp(),
                }
            )
            return self.sellers.upsert(updated)

    # -------------------------- offers --------------------------

    def list_offers_for_zip(self, zip_code: str) -> List[StoreOffer]:
        raw = self.offers.read()
        if not isinstance(raw, list):
            logger.error("[profile-store] Offer feed is not a list; ignoring it")
            return []

        offers: List[StoreOffer] = []
        for entry in raw:
            if not isinstance(entry, dict) or entry.get("zip") != zip_code:
                continue
            try:
                offers.append(StoreOffer.model_validate(entry))
            except ValidationError as e:
                logger.error("[profile-store] Skipping malformed offer: %s", e)
        return offers
