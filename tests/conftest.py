import pytest

from ids import BackendIdGenerator
from inventory import Inventory
from item_store import ItemStore
from reload_policy import ReloadPolicy


@pytest.fixture()
def db_path(tmp_path):
    return str(tmp_path / "db.json")


@pytest.fixture()
def store(db_path):
    s = ItemStore(db_path, id_generator=BackendIdGenerator())
    s.load()
    return s


@pytest.fixture()
def inventory(store):
    return Inventory(store, ReloadPolicy("always"))


