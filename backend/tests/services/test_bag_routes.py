"""Bag Routes — verifies numbering, barcodes, counts, ownership and cascade delete.

Invariants:
    - Successive creations yield B1, B2, B3 for one owner; numbering is per owner
    - Every bag gets a BAG-XXXXXXXX barcode and clothCount 0 on creation
    - Another owner's bag is indistinguishable from a missing one (404)
    - Deleting a bag removes its clothes and attempts to delete their images
"""

from closetmap.core.identifiers import BARCODE_PATTERN
from closetmap.models.bag import Bag
from closetmap.models.cloth import Cloth


async def test_create_bags_numbers_sequentially(client, alice):
    ids = []
    for name in ("Winter", "Summer", "Shoes"):
        res = await client.post("/api/v1/bags", json={"name": name}, headers=alice)
        assert res.status_code == 201
        ids.append(res.json()["bagId"])
    assert ids == ["B1", "B2", "B3"]


async def test_create_bag_response_shape(client, alice):
    res = await client.post("/api/v1/bags", json={"name": "  Winter  "}, headers=alice)
    body = res.json()
    assert body["name"] == "Winter"
    assert body["ownerId"] == "alice"
    assert body["clothCount"] == 0
    assert BARCODE_PATTERN.match(body["barcodeValue"])
    assert "createdAt" in body


async def test_numbering_is_per_owner(client, alice, bob):
    await client.post("/api/v1/bags", json={"name": "A"}, headers=alice)
    await client.post("/api/v1/bags", json={"name": "B"}, headers=alice)
    res = await client.post("/api/v1/bags", json={"name": "C"}, headers=bob)
    assert res.json()["bagId"] == "B1"


async def test_numbering_follows_most_recent_bag(client, alice, seed):
    await seed.bag("alice", "B7")
    res = await client.post("/api/v1/bags", json={"name": "Next"}, headers=alice)
    assert res.json()["bagId"] == "B8"


async def test_blank_name_rejected(client, alice):
    for body in ({"name": "   "}, {}):
        res = await client.post("/api/v1/bags", json=body, headers=alice)
        assert res.status_code == 400
        assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_bag_id_collision_returns_409(client, alice, seed, fetch):
    """B1 is the most recent bag, but an older B2 already exists."""
    await seed.bag("alice", "B2")
    await seed.bag("alice", "B1")

    res = await client.post("/api/v1/bags", json={"name": "Clash"}, headers=alice)

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"
    assert len(await fetch(Bag, owner_id="alice")) == 2


async def test_list_bags_newest_first_with_counts(client, alice, bob, seed):
    await seed.bag("alice", "B1", name="Old")
    await seed.bag("alice", "B2", name="New")
    await seed.bag("bob", "B1", name="Bob's")
    await seed.cloth("alice", "B1", "C-00000001")
    await seed.cloth("alice", "B1", "C-00000002")

    res = await client.get("/api/v1/bags", headers=alice)

    assert res.status_code == 200
    assert [(b["bagId"], b["clothCount"]) for b in res.json()] == [("B2", 0), ("B1", 2)]


async def test_get_bag(client, alice, seed):
    await seed.bag("alice", "B1", name="Winter")
    await seed.cloth("alice", "B1", "C-00000001")

    res = await client.get("/api/v1/bags/B1", headers=alice)

    assert res.json()["name"] == "Winter"
    assert res.json()["clothCount"] == 1


async def test_other_owners_bag_is_not_found(client, bob, seed):
    await seed.bag("alice", "B1")
    assert (await client.get("/api/v1/bags/B1", headers=bob)).status_code == 404
    res = await client.put("/api/v1/bags/B1", json={"name": "Mine"}, headers=bob)
    assert res.status_code == 404
    assert (await client.delete("/api/v1/bags/B1", headers=bob)).status_code == 404


async def test_rename_bag(client, alice, seed, fetch):
    await seed.bag("alice", "B1", name="Old")

    res = await client.put("/api/v1/bags/B1", json={"name": " New "}, headers=alice)

    assert res.status_code == 200
    assert res.json()["name"] == "New"
    [bag] = await fetch(Bag, owner_id="alice", bag_id="B1")
    assert bag.name == "New"


async def test_rename_rejects_blank(client, alice, seed):
    await seed.bag("alice", "B1")
    res = await client.put("/api/v1/bags/B1", json={"name": ""}, headers=alice)
    assert res.status_code == 400


async def test_delete_bag_cascades(client, alice, seed, fetch, image_store):
    await seed.bag("alice", "B1")
    await seed.bag("alice", "B2")
    await seed.cloth("alice", "B1", "C-00000001")
    await seed.cloth("alice", "B1", "C-00000002")
    await seed.cloth("alice", "B2", "C-00000003")

    res = await client.delete("/api/v1/bags/B1", headers=alice)

    assert res.status_code == 200
    assert "message" in res.json()
    assert await fetch(Bag, owner_id="alice", bag_id="B1") == []
    remaining = await fetch(Cloth, owner_id="alice")
    assert [c.cloth_id for c in remaining] == ["C-00000003"]
    assert sorted(image_store.deleted) == [
        "closetmap/alice/clothes/C-00000001",
        "closetmap/alice/clothes/C-00000002",
    ]


async def test_delete_bag_survives_image_failures(client, alice, seed, fetch, image_store):
    await seed.bag("alice", "B1")
    await seed.cloth("alice", "B1", "C-00000001")
    image_store.fail_deletes = True

    res = await client.delete("/api/v1/bags/B1", headers=alice)

    assert res.status_code == 200
    assert await fetch(Cloth, owner_id="alice") == []


async def test_delete_missing_bag(client, alice):
    assert (await client.delete("/api/v1/bags/B404", headers=alice)).status_code == 404
