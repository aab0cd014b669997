"""Request Dependencies — context, DB session, verified caller and service wiring.

Invariants:
    - Every collaborator comes from the AppContext on app.state (no globals)
    - get_owner_id runs the CallerVerifier before any route body executes
    - One AsyncSession per request, rolled back on any exception
"""

from typing import AsyncGenerator

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from closetmap.core.collaborator_protocols import CallerCredentials
from closetmap.core.domain_types import Identity
from closetmap.infrastructure.app_context import AppContext
from closetmap.services.bag_service import BagService
from closetmap.services.cloth_query import ClothQueryService
from closetmap.services.cloth_service import ClothService
from closetmap.services.export_service import ExportService
from closetmap.services.identifier_allocator import IdentifierAllocator
from closetmap.services.relocation_tracker import RelocationTracker
from closetmap.services.scan_resolver import ScanResolver

_bearer = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("Application context not initialized")
    return context


async def get_db(
    context: AppContext = Depends(get_context),
) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with context.db.session() as session:
        yield session


def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    x_user_id: str | None = Header(None),
    context: AppContext = Depends(get_context),
) -> Identity:
    return context.verifier.verify(CallerCredentials(
        bearer_token=credentials.credentials if credentials else None,
        claimed_user_id=x_user_id,
    ))


def get_owner_id(identity: Identity = Depends(get_identity)) -> str:
    return identity.owner_id


def get_allocator(
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> IdentifierAllocator:
    return IdentifierAllocator(db, max_attempts=context.settings.barcode_max_attempts)


def get_bag_service(
    db: AsyncSession = Depends(get_db),
    allocator: IdentifierAllocator = Depends(get_allocator),
    context: AppContext = Depends(get_context),
) -> BagService:
    return BagService(db, context.image_store, allocator)


def get_cloth_service(
    db: AsyncSession = Depends(get_db),
    allocator: IdentifierAllocator = Depends(get_allocator),
    context: AppContext = Depends(get_context),
) -> ClothService:
    return ClothService(db, context.image_store, context.settings, allocator)


def get_relocation_tracker(
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> RelocationTracker:
    return RelocationTracker(db, context.image_store, context.settings)


def get_scan_resolver(db: AsyncSession = Depends(get_db)) -> ScanResolver:
    return ScanResolver(db)


def get_cloth_query_service(db: AsyncSession = Depends(get_db)) -> ClothQueryService:
    return ClothQueryService(db)


def get_export_service(
    db: AsyncSession = Depends(get_db),
    context: AppContext = Depends(get_context),
) -> ExportService:
    return ExportService(db, context.label_renderer)
