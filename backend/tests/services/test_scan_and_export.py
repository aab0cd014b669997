"""Scan & Export — barcode resolution and printable labels.

Invariants:
    - A scan resolves only the caller's bags; anyone else's barcode is 404
    - Scan returns the bag with clothCount and its clothes newest first
    - The PDF sheet covers every bag of the caller; no bags is 404
"""

import pytest

from closetmap.services.export_service import ExportService


@pytest.fixture
async def scanned_bag(seed):
    bag = await seed.bag("alice", "B1", name="Winter", barcode_value="BAG-0000ABCD")
    await seed.cloth("alice", "B1", "C-00000001", name="Scarf")
    await seed.cloth("alice", "B1", "C-00000002", name="Gloves")
    return bag


async def test_scan_returns_bag_and_contents(client, alice, scanned_bag):
    res = await client.get("/api/v1/clothes/scan/BAG-0000ABCD", headers=alice)

    assert res.status_code == 200
    body = res.json()
    assert body["bag"]["bagId"] == "B1"
    assert body["bag"]["clothCount"] == 2
    assert [c["name"] for c in body["clothes"]] == ["Gloves", "Scarf"]
    assert {c["bagName"] for c in body["clothes"]} == {"Winter"}


async def test_scan_empty_bag(client, alice, seed):
    await seed.bag("alice", "B1", barcode_value="BAG-00000001")
    res = await client.get("/api/v1/clothes/scan/BAG-00000001", headers=alice)
    assert res.json()["clothes"] == []
    assert res.json()["bag"]["clothCount"] == 0


async def test_scan_other_owners_barcode(client, bob, scanned_bag):
    res = await client.get("/api/v1/clothes/scan/BAG-0000ABCD", headers=bob)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_scan_unknown_barcode(client, alice, scanned_bag):
    res = await client.get("/api/v1/clothes/scan/BAG-FFFFFFFF", headers=alice)
    assert res.status_code == 404


async def test_export_sheet(client, alice, seed):
    for n in (1, 2, 10):
        await seed.bag("alice", f"B{n}")

    res = await client.get("/api/v1/export/barcodes", headers=alice)

    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert "bag-barcodes.pdf" in res.headers["content-disposition"]
    assert res.content.startswith(b"%PDF")


async def test_export_sheet_without_bags(client, alice, bob, seed):
    await seed.bag("bob", "B1")
    res = await client.get("/api/v1/export/barcodes", headers=alice)
    assert res.status_code == 404


async def test_export_sheet_lists_bags_in_natural_order(context, seed):
    class RecordingRenderer:
        def __init__(self):
            self.captions = []

        def render_sheet(self, labels):
            self.captions = [label.caption for label in labels]
            return b"%PDF-fake"

        def render_barcode(self, code):
            return "<svg/>"

    for n in (10, 2, 1):
        await seed.bag("alice", f"B{n}", name=f"Bag {n}")
    renderer = RecordingRenderer()

    async with context.db.session() as db:
        await ExportService(db, renderer).barcode_sheet("alice")

    assert renderer.captions == ["B1: Bag 1", "B2: Bag 2", "B10: Bag 10"]


async def test_export_single_barcode(client, alice, bob, seed):
    await seed.bag("alice", "B1", barcode_value="BAG-0000ABCD")

    res = await client.get("/api/v1/export/barcode/B1", headers=alice)
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("image/svg+xml")
    assert "<svg" in res.text

    assert (await client.get("/api/v1/export/barcode/B1", headers=bob)).status_code == 404
