import re
from concurrent.futures import ThreadPoolExecutor

from ids import BackendIdGenerator

ID_RE = re.compile(r"^b-(\d+)-(\d+)$")


def test_id_format_and_counter():
    gen = BackendIdGenerator(clock=lambda: 1700000000.123)
    assert gen.next_id() == "b-1700000000123-0"
    assert gen.next_id() == "b-1700000000123-1"


def test_ids_unique_under_concurrency():
    gen = BackendIdGenerator()
    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(lambda _: gen.next_id(), range(500)))
    assert len(set(ids)) == 500
    assert all(ID_RE.match(i) for i in ids)


def test_timestamp_part_never_goes_backwards():
    ticks = iter([10.0, 5.0, 7.0, 11.0])
    gen = BackendIdGenerator(clock=lambda: next(ticks))
    stamps = [int(ID_RE.match(gen.next_id()).group(1)) for _ in range(4)]
    assert stamps == [10000, 10000, 10000, 11000]
