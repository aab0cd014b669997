"""Identifier Rules — bag numbering and barcode/cloth code generation.

Invariants:
    - next_bag_number is PURE: input is the most recent bag id (or None), output an int >= 1
    - Unparseable or missing previous ids restart numbering at 1
    - generate_code always yields "<PREFIX>-" + 8 uppercase hex chars

Design Decisions:
    - Numbering follows the most recently created bag, not the maximum existing id;
      the (owner_id, bag_id) unique constraint is the backstop for collisions
    - uuid4 is the random source: not a security boundary, collisions retried by the shell
"""

import re
import uuid

from closetmap.core.domain_types import (
    BagId, BarcodeValue, ClothId, BAG_BARCODE_PREFIX, CLOTH_ID_PREFIX,
)

BAG_ID_PATTERN = re.compile(r"B(\d+)")
CODE_LENGTH = 8

BARCODE_PATTERN = re.compile(rf"^{BAG_BARCODE_PREFIX}-[0-9A-F]{{{CODE_LENGTH}}}$")
CLOTH_ID_PATTERN = re.compile(rf"^{CLOTH_ID_PREFIX}-[0-9A-F]{{{CODE_LENGTH}}}$")


def next_bag_number(last_bag_id: str | None) -> int:
    """Sequence number following last_bag_id; 1 when absent or unparseable."""
    if not last_bag_id:
        return 1
    match = BAG_ID_PATTERN.search(last_bag_id)
    if not match:
        return 1
    return int(match.group(1)) + 1


def format_bag_id(number: int) -> BagId:
    return BagId(f"B{number}")


def bag_sort_key(bag_id: str) -> tuple[int, str]:
    """Natural ordering for bag ids: B2 before B10, unparseable ids last."""
    match = BAG_ID_PATTERN.fullmatch(bag_id)
    if match:
        return (int(match.group(1)), bag_id)
    return (2**63, bag_id)


def generate_code(prefix: str) -> str:
    """<PREFIX>-<8 random uppercase hex chars>."""
    return f"{prefix}-{uuid.uuid4().hex[:CODE_LENGTH].upper()}"


def generate_barcode() -> BarcodeValue:
    return BarcodeValue(generate_code(BAG_BARCODE_PREFIX))


def generate_cloth_id() -> ClothId:
    return ClothId(generate_code(CLOTH_ID_PREFIX))
