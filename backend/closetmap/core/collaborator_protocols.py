"""Boundary Protocols — contracts between core and the external collaborators.

Invariants:
    - Core NEVER imports from infrastructure; dependency arrows point inward only
    - Identity, image storage and label rendering are reached only through these types
    - Implementations are built once at startup and injected via AppContext

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - ImageStore is async because implementations do network IO; LabelRenderer is
      sync (CPU-bound) and the shell moves it off the event loop
"""

from dataclasses import dataclass
from typing import Protocol

from closetmap.core.domain_types import Identity


@dataclass(frozen=True)
class CallerCredentials:
    """Raw, unverified credentials extracted from a request."""
    bearer_token: str | None
    claimed_user_id: str | None = None


@dataclass(frozen=True)
class StoredImage:
    """Reference returned by the image store: public URL + deletable handle."""
    url: str
    public_id: str


@dataclass(frozen=True)
class BarcodeLabel:
    """One printable label: caption text and the value encoded in the barcode."""
    caption: str
    code: str


class CallerVerifier(Protocol):
    """Turns raw credentials into a verified Identity or raises UnauthorizedError."""
    def verify(self, credentials: CallerCredentials) -> Identity: ...


class ImageStore(Protocol):
    """Contract for image persistence, implemented by infrastructure."""
    async def upload(self, image_base64: str, folder: str) -> StoredImage: ...
    async def delete(self, public_id: str) -> None: ...


class LabelRenderer(Protocol):
    """Contract for printable barcode output."""
    def render_sheet(self, labels: list[BarcodeLabel]) -> bytes: ...
    def render_barcode(self, code: str) -> str: ...
