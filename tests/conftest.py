"""Shared fixtures: an in-memory stand-in for the Our Groceries service."""

import itertools

import pytest

from pantry import settings
from pantry.commands import grocery, router


class FakeOurGroceries:
    """Records calls and keeps lists in memory, mirroring the client's API."""

    def __init__(self):
        self.lists = {}          # list_id -> {"name": str, "items": [dict]}
        self.calls = []
        self.logins = 0
        self.fail_with = None
        self.fail_on_mutation = None   # 1-based index of the mutation that fails
        self.mutations = 0
        self._ids = itertools.count(1)

    def add_list(self, list_id, name, values=()):
        self.lists[list_id] = {"name": name, "items": []}
        for value in values:
            self._store(list_id, value)

    def _store(self, list_id, value, crossed_off=False):
        item = {"id": f"item{next(self._ids)}", "value": value}
        if crossed_off:
            item["crossedOff"] = True
        self.lists[list_id]["items"].append(item)
        return item

    def values(self, list_id):
        return [i["value"] for i in self.lists[list_id]["items"]]

    def crossed_off(self, list_id):
        return [i["value"] for i in self.lists[list_id]["items"] if i.get("crossedOff")]

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def _mutate(self):
        self._check()
        self.mutations += 1
        if self.mutations == self.fail_on_mutation:
            raise ConnectionError("reset")

    async def login(self):
        self._check()
        self.logins += 1

    async def get_my_lists(self):
        self._check()
        self.calls.append(("get_my_lists",))
        return {"shoppingLists": [
            {"id": list_id, "name": lst["name"]} for list_id, lst in self.lists.items()
        ]}

    async def get_list_items(self, list_id):
        self._check()
        self.calls.append(("get_list_items", list_id))
        return {"list": {"id": list_id, "items": [dict(i) for i in self.lists[list_id]["items"]]}}

    async def add_item_to_list(self, list_id, value, category="uncategorized",
                               auto_category=False, note=None):
        self._mutate()
        self.calls.append(("add_item_to_list", list_id, value))
        self._store(list_id, value)

    async def toggle_item_crossed_off(self, list_id, item_id, cross_off=False):
        self._mutate()
        self.calls.append(("toggle_item_crossed_off", list_id, item_id, cross_off))
        for item in self.lists[list_id]["items"]:
            if item["id"] == item_id:
                item["crossedOff"] = cross_off

    async def remove_item_from_list(self, list_id, item_id):
        self._mutate()
        self.calls.append(("remove_item_from_list", list_id, item_id))
        items = self.lists[list_id]["items"]
        self.lists[list_id]["items"] = [i for i in items if i["id"] != item_id]


@pytest.fixture
def og(monkeypatch, tmp_path):
    """A fake Our Groceries account with a default list and a Costco list."""
    fake = FakeOurGroceries()
    fake.add_list("L1", "Shopping List", ["Milk", "Eggs (12)", "Almond Milk"])
    fake.add_list("L2", "Costco", ["Paper Towels"])

    monkeypatch.setattr(grocery, "OurGroceries", lambda username, password: fake)
    monkeypatch.setattr(settings, "load_credentials", lambda: ("me@example.com", "secret"))
    monkeypatch.setattr(settings, "default_list_name", lambda: "Shopping List")
    monkeypatch.setattr(router, "_LOG_PATH", str(tmp_path / "pantry.log"))
    grocery.reset()
    yield fake
    grocery.reset()
