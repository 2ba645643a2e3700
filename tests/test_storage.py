"""Tests for cart persistence."""

import json
import os

import pytest

from storefront.core.storage import (
    CartStore,
    FileStorage,
    MemoryStorage,
    create_storage,
)
from storefront.models.cart import CartItem, CartSnapshot, CouponInfo


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return CartStore(MemoryStorage())
    return CartStore(FileStorage(str(tmp_path / "carts")))


SNAPSHOTS = [
    CartSnapshot(),
    CartSnapshot(items=[
        CartItem(product_id="pho", name="Phở Bò", unit_amount=1450, quantity=3, currency="EUR"),
        CartItem(product_id="tea", name="Trà Đá", unit_amount=350, quantity=1, currency="EUR"),
    ]),
    CartSnapshot(
        items=[CartItem(product_id="bun", name="Bún Chả", unit_amount=1290, quantity=999, currency="EUR")],
        coupon=CouponInfo(code="FIVE", amount_off=500, label="Gutschein – 5,00 €"),
    ),
    CartSnapshot(coupon=CouponInfo(code="TEN", percent_off=10, label="Rabatt – 10%")),
]


class TestCartStore:

    def test_missing_key_loads_empty(self, store):
        assert store.load() == CartSnapshot(items=[], coupon=None)

    @pytest.mark.parametrize("snapshot", SNAPSHOTS)
    def test_save_then_load_returns_same_snapshot(self, store, snapshot):
        store.save(snapshot)
        assert store.load() == snapshot

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            "null",
            "[]",
            '{"items": "nope"}',
            '{"items": [{"productId": "x"}]}',
            '{"items": [], "coupon": {"code": "X", "percentOff": 250}}',
        ],
    )
    def test_corrupt_value_loads_empty(self, store, raw):
        store.storage.set_item(store.key, raw)
        assert store.load() == CartSnapshot()

    def test_last_write_wins(self, store):
        store.save(SNAPSHOTS[1])
        store.save(SNAPSHOTS[2])
        assert store.load() == SNAPSHOTS[2]

    def test_clear(self, store):
        store.save(SNAPSHOTS[1])
        store.clear()
        assert store.load() == CartSnapshot()

    def test_wire_format(self, store):
        store.save(SNAPSHOTS[2])
        assert json.loads(store.storage.get_item(store.key)) == {
            "items": [
                {
                    "productId": "bun",
                    "name": "Bún Chả",
                    "unitAmount": 1290,
                    "quantity": 999,
                    "currency": "EUR",
                }
            ],
            "coupon": {"code": "FIVE", "amountOff": 500, "label": "Gutschein – 5,00 €"},
        }

    def test_reads_snapshot_written_elsewhere(self, store):
        store.storage.set_item(store.key, json.dumps({
            "items": [
                {"productId": "pho", "name": "Phở", "unitAmount": 1450, "quantity": 2, "currency": "EUR"}
            ]
        }))
        snapshot = store.load()
        assert snapshot.items[0].product_id == "pho"
        assert snapshot.coupon is None


class TestFileStorage:

    def test_keys_become_safe_file_names(self, tmp_path):
        storage = FileStorage(str(tmp_path))
        storage.set_item("restaurant_cart_v1:../../etc", "{}")

        files = os.listdir(tmp_path)
        assert files == ["restaurant_cart_v1_.._.._etc.json"]
        assert storage.get_item("restaurant_cart_v1:../../etc") == "{}"

    def test_remove_missing_key(self, tmp_path):
        FileStorage(str(tmp_path)).remove_item("absent")

    def test_unreadable_file_loads_empty(self, tmp_path):
        storage = FileStorage(str(tmp_path))
        store = CartStore(storage, "k")
        with open(os.path.join(tmp_path, "k.json"), "wb") as f:
            f.write(b"\xff\xfe\x00garbage")
        assert store.load() == CartSnapshot()


class TestCreateStorage:

    def test_memory(self):
        assert isinstance(create_storage("memory"), MemoryStorage)

    def test_file(self, tmp_path):
        storage = create_storage("file", str(tmp_path / "x"))
        assert isinstance(storage, FileStorage)
        assert os.path.isdir(tmp_path / "x")

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_storage("redis")
