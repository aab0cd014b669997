"""Application Context — the single handle to every process-wide collaborator.

Invariants:
    - Built exactly once per process (FastAPI lifespan) or injected by tests
    - Request handlers reach collaborators only through this object
    - No module-level client singletons anywhere in the package

Design Decisions:
    - Plain dataclass stored on app.state: FastAPI dependencies read it from the
      request, tests replace it wholesale with fakes
"""

import logging
from dataclasses import dataclass

from closetmap.config import Settings
from closetmap.core.collaborator_protocols import (
    CallerVerifier, ImageStore, LabelRenderer,
)
from closetmap.infrastructure.database import DatabaseSessionManager
from closetmap.infrastructure.identity import build_verifier
from closetmap.infrastructure.image_store import CloudinaryImageStore
from closetmap.infrastructure.label_renderer import ReportlabLabelRenderer

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Process-wide collaborators, created at startup."""
    settings: Settings
    db: DatabaseSessionManager
    image_store: ImageStore
    verifier: CallerVerifier
    label_renderer: LabelRenderer

    async def close(self) -> None:
        await self.db.dispose()


def build_app_context(settings: Settings) -> AppContext:
    """Wire production collaborators from settings."""
    logger.info(f"Building application context (auth_mode={settings.auth_mode.value})")
    return AppContext(
        settings=settings,
        db=DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        ),
        image_store=CloudinaryImageStore(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
            upload_timeout_seconds=settings.image_upload_timeout_seconds,
        ),
        verifier=build_verifier(settings),
        label_renderer=ReportlabLabelRenderer(),
    )
