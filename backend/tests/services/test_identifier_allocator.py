"""Identifier Allocator — numbering, collision retries and conflict surfacing.

Invariants:
    - The next bag id follows the most recently created bag
    - A barcode collision is retried with a fresh code
    - Exhausted retries and bag id collisions both raise ConflictError
"""

import pytest

from closetmap.core.errors import ConflictError
from closetmap.models.bag import Bag
from closetmap.models.cloth import Cloth
from closetmap.services.identifier_allocator import IdentifierAllocator


def _sequence(*codes):
    """Factory returning codes in order, repeating the last one."""
    remaining = list(codes)

    def factory():
        return remaining.pop(0) if len(remaining) > 1 else remaining[0]
    return factory


async def test_first_bag_is_b1(test_db):
    assert await IdentifierAllocator(test_db).allocate_bag_id("alice") == "B1"


async def test_unparseable_latest_restarts_at_b1(test_db, seed):
    await seed.bag("alice", "legacy")
    assert await IdentifierAllocator(test_db).allocate_bag_id("alice") == "B1"


async def test_barcode_collision_is_retried(test_db, seed, fetch):
    await seed.bag("alice", "B1", barcode_value="BAG-AAAAAAAA")
    allocator = IdentifierAllocator(
        test_db, barcode_factory=_sequence("BAG-AAAAAAAA", "BAG-BBBBBBBB"),
    )

    bag = await allocator.create_bag("alice", "Second")

    assert bag.bag_id == "B2"
    assert bag.barcode_value == "BAG-BBBBBBBB"
    assert len(await fetch(Bag, owner_id="alice")) == 2


async def test_same_barcode_allowed_for_other_owner(test_db, seed):
    await seed.bag("alice", "B1", barcode_value="BAG-AAAAAAAA")
    allocator = IdentifierAllocator(test_db, barcode_factory=_sequence("BAG-AAAAAAAA"))

    bag = await allocator.create_bag("bob", "Bob's first")

    assert (bag.bag_id, bag.barcode_value) == ("B1", "BAG-AAAAAAAA")


async def test_barcode_retries_exhausted(test_db, seed, fetch):
    await seed.bag("alice", "B1", barcode_value="BAG-AAAAAAAA")
    allocator = IdentifierAllocator(
        test_db, max_attempts=3, barcode_factory=_sequence("BAG-AAAAAAAA"),
    )

    with pytest.raises(ConflictError):
        await allocator.create_bag("alice", "Never")
    assert len(await fetch(Bag, owner_id="alice")) == 1


async def test_bag_id_collision_is_not_retried(test_db, seed):
    await seed.bag("alice", "B2")
    await seed.bag("alice", "B1")
    calls = []

    def factory():
        calls.append(1)
        return f"BAG-0000000{len(calls)}"

    with pytest.raises(ConflictError):
        await IdentifierAllocator(test_db, barcode_factory=factory).create_bag("alice", "x")
    assert len(calls) == 1


async def test_cloth_id_collision_is_retried(test_db, seed):
    await seed.bag("alice", "B1")
    await seed.cloth("alice", "B1", "C-AAAAAAAA")
    allocator = IdentifierAllocator(
        test_db, cloth_id_factory=_sequence("C-AAAAAAAA", "C-BBBBBBBB"),
    )

    cloth = await allocator.create_cloth("alice", {
        "name": "Hat", "color": "grey", "container_bag_id": "B1",
        "image_url": "https://images.test/h.jpg", "image_public_id": "h",
    })

    assert cloth.cloth_id == "C-BBBBBBBB"
    assert cloth.owner == ""
