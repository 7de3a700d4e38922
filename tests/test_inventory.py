import pytest

from errors import MissingFields, NotFound
from item_store import BACKEND_ID, TIMESTAMP


def test_create_list_update_delete(inventory):
    item = inventory.create({"item_id": "I1", "item_name": "Widget"})
    assert item[BACKEND_ID]
    assert item[TIMESTAMP]

    assert inventory.list_all() == [item]

    inventory.update(item[BACKEND_ID], {"item_name": "Widget2"})
    [listed] = inventory.list_all()
    assert listed["item_name"] == "Widget2"
    assert listed[BACKEND_ID] == item[BACKEND_ID]
    assert listed[TIMESTAMP] == item[TIMESTAMP]

    inventory.delete(item[BACKEND_ID])
    assert inventory.list_all() == []


@pytest.mark.parametrize("fields, missing", [
    ({"item_name": "Widget"}, ["item_id"]),
    ({"item_id": "I1"}, ["item_name"]),
    ({}, ["item_id", "item_name"]),
])
def test_create_requires_business_fields(inventory, fields, missing):
    with pytest.raises(MissingFields) as info:
        inventory.create(fields)
    assert info.value.missing == missing
    assert inventory.list_all() == []


def test_create_passes_extra_fields_through(inventory):
    item = inventory.create({"item_id": "I1", "item_name": "W", "total_stock": 5, "reorder_level": 2})
    assert item["total_stock"] == 5
    assert item["reorder_level"] == 2


def test_update_and_delete_unknown(inventory):
    with pytest.raises(NotFound):
        inventory.update("b-0-0", {"item_name": "x"})
    with pytest.raises(NotFound):
        inventory.delete("b-0-0")


def test_start_and_stop(inventory, db_path):
    inventory.start()
    inventory.create({"item_id": "I1", "item_name": "W"})
    inventory.stop()
    assert inventory.list_all()[0]["item_id"] == "I1"
