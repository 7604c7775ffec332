# File: tests/test_profile_store.py

import json
from datetime import date

import pytest

from freshlink.db.json_store import JsonDocument
from freshlink.db.profile_store import (
    ProfileNotFoundError,
    derive_buyer_status,
    derive_seller_status,
    refresh_buyer_inventory,
    seller_spoilage_risk,
)
from freshlink.db.user_store import DuplicateUserError
from freshlink.schemas.buyer import BuyerEventPlan, BuyerInventoryInput
from freshlink.schemas.user import Role


@pytest.mark.parametrize(
    "days_left, quantity, expected",
    [
        (3, 5, "use-soon"),
        (0, 0, "use-soon"),
        (None, 0.5, "restock"),
        (10, 0.2, "restock"),
        (41, 2, "overflow"),
        (40, 2, "healthy"),
        (None, 2, "healthy"),
    ],
)
def test_derive_buyer_status(days_left, quantity, expected):
    assert derive_buyer_status(days_left, quantity) == expected


@pytest.mark.parametrize(
    "days_on_hand, risk, status",
    [(9, 20, "healthy"), (10, 40, "healthy"), (14, 40, "healthy"), (15, 70, "critical")],
)
def test_seller_risk_thresholds(days_on_hand, risk, status):
    assert seller_spoilage_risk(days_on_hand) == risk
    assert derive_seller_status(risk) == status


def test_seller_status_boundaries():
    assert derive_seller_status(40) == "healthy"
    assert derive_seller_status(41) == "risk"
    assert derive_seller_status(65) == "risk"
    assert derive_seller_status(66) == "critical"


def test_refresh_redates_items(profile_store):
    profile_store.ensure_buyer_profile_for_user("buyer-1", "Ada")
    profile = profile_store.append_buyer_inventory_item(
        BuyerInventoryInput(user_id="buyer-1", name="Yogurt", quantity=2, unit="cup", expiration_date=date(2025, 3, 20))
    )
    assert profile.inventory[0].status == "healthy"
    assert profile.inventory[0].days_left == 10

    later = refresh_buyer_inventory(profile, date(2025, 3, 18))
    assert later.inventory[0].days_left == 2
    assert later.inventory[0].status == "use-soon"

    expired = refresh_buyer_inventory(profile, date(2025, 4, 1))
    assert expired.inventory[0].days_left == 0


def test_ensure_profile_is_idempotent(profile_store):
    first = profile_store.ensure_buyer_profile_for_user("buyer-1", "Ada")
    second = profile_store.ensure_buyer_profile_for_user("buyer-1", "Someone else")
    assert second == first
    assert len(profile_store.buyers.all()) == 1


def test_profiles_are_stored_camel_case(profile_store, data_dir):
    profile_store.ensure_seller_profile_for_user("seller-1", "Lee")
    raw = json.loads((data_dir / "seller-profiles.json").read_text(encoding="utf-8"))
    stored = raw["profiles"][0]
    assert stored["userId"] == "seller-1"
    assert stored["store"]["name"] == "Lee's Market"
    assert stored["lastUpdated"] == "2025-03-10"


def test_mutations_require_profile(profile_store):
    with pytest.raises(ProfileNotFoundError):
        profile_store.add_buyer_shopping_item("buyer-missing", "Milk")
    with pytest.raises(ProfileNotFoundError):
        profile_store.remove_buyer_inventory_item("buyer-missing", "inv-1")


def test_remove_unknown_item_only_restamps(profile_store, clock):
    profile_store.ensure_buyer_profile_for_user("buyer-1", "Ada")
    clock.today = date(2025, 3, 12)

    profile = profile_store.remove_buyer_inventory_item("buyer-1", "inv-1")

    assert profile.inventory == []
    assert profile.last_updated == "2025-03-12"


def test_shopping_item_goes_to_first_open_event(profile_store):
    profile = profile_store.ensure_buyer_profile_for_user("buyer-1", "Ada")
    events = [
        BuyerEventPlan(id="e1", name="Brunch", date="2025-03-15", headcount=4, status="on-track"),
        BuyerEventPlan(id="e2", name="Game night", date="2025-03-18", headcount=6, status="draft"),
    ]
    profile_store.upsert_buyer_profile(profile.model_copy(update={"events": events}))

    updated = profile_store.add_buyer_shopping_item("buyer-1", "Chips", quantity=0, unit="")

    assert updated.events[0].shopping_list == []
    entry = updated.events[1].shopping_list[0]
    assert (entry.name, entry.quantity, entry.unit, entry.status) == ("Chips", 1, "each", "add")


def test_offers_filter_by_zip_and_skip_bad_rows(profile_store, data_dir, seed_offers):
    rows = seed_offers + [{"id": "broken", "zip": "07030"}]
    (data_dir / "store-offers.json").write_text(json.dumps(rows), encoding="utf-8")

    offers = profile_store.list_offers_for_zip("07030")
    assert [offer.id for offer in offers] == ["offer-1", "offer-2"]
    assert profile_store.list_offers_for_zip("99999") == []


def test_user_store_roundtrip(user_store, data_dir):
    user = user_store.create_user(" Ada@Example.com ", "secret123", Role.BUYER)
    assert user.email == "Ada@Example.com"
    assert user.display_name == "Ada"
    assert user_store.find_user_by_email("ada@example.com").id == user.id
    assert user_store.find_user_by_email("") is None

    raw = json.loads((data_dir / "users.json").read_text(encoding="utf-8"))
    assert raw["users"][0]["displayName"] == "Ada"


def test_json_document_tolerates_corrupt_file(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{not json", encoding="utf-8")
    document = JsonDocument(path, default_factory=lambda: {"users": []})
    assert document.read() == {"users": []}


def test_json_document_keeps_unsaved_changes_in_memory(tmp_path, monkeypatch):
    document = JsonDocument(tmp_path / "profiles.json", default_factory=dict)

    def fail(_document):
        raise OSError("read-only file system")

    monkeypatch.setattr(document, "_write_atomic", fail)

    assert document.write({"profiles": [1]}) is False
    assert document.read() == {"profiles": [1]}
    assert not (tmp_path / "profiles.json").exists()


def test_writes_keep_rows_that_fail_validation(profile_store, data_dir):
    odd = {
        "userId": "buyer-2",
        "displayName": "Bo",
        "zip": "07030",
        "inventory": [{"id": "inv-x", "name": "Milk", "quantity": 1, "unit": "gal", "status": "expired"}],
        "lastUpdated": "2025-03-01",
    }
    path = data_dir / "buyer-profiles.json"
    path.write_text(json.dumps({"profiles": [odd]}), encoding="utf-8")

    profile_store.ensure_buyer_profile_for_user("buyer-1", "Ada")
    profile_store.append_buyer_inventory_item(
        BuyerInventoryInput(user_id="buyer-1", name="Yogurt", quantity=2, unit="cup")
    )

    stored = json.loads(path.read_text(encoding="utf-8"))["profiles"]
    assert [entry["userId"] for entry in stored] == ["buyer-2", "buyer-1"]
    assert stored[0] == odd
    assert stored[1]["inventory"][0]["name"] == "Yogurt"


def test_create_user_keeps_rows_that_fail_validation(user_store, data_dir):
    admin = {"id": "admin-1", "email": "root@example.com", "password": "x", "role": "admin", "displayName": "Root"}
    path = data_dir / "users.json"
    path.write_text(json.dumps({"users": [admin]}), encoding="utf-8")

    user = user_store.create_user("new@example.com", "secret123", Role.BUYER)

    stored = json.loads(path.read_text(encoding="utf-8"))["users"]
    assert [entry["id"] for entry in stored] == ["admin-1", user.id]
    assert stored[0] == admin


def test_create_user_rejects_email_held_by_unreadable_row(user_store, data_dir):
    admin = {"id": "admin-1", "email": "Root@Example.com", "role": "admin"}
    (data_dir / "users.json").write_text(json.dumps({"users": [admin]}), encoding="utf-8")

    with pytest.raises(DuplicateUserError):
        user_store.create_user("root@example.com", "secret123", Role.SELLER)
