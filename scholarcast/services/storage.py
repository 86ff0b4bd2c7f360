"""
Illustration persistence.

Images are stored in the `module_illustrations` table and served back by
`GET /api/illustrations/{id}`. A row matching module, locale, style, visual
style and checksum is updated in place instead of duplicated.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scholarcast.database import ModuleIllustration
from scholarcast.models.cascade import IllustrationResult

logger = logging.getLogger(__name__)

PROMPT_SUMMARY_CHARS = 1000


def illustration_url(illustration_id: int) -> str:
    return f"/api/illustrations/{illustration_id}"


@dataclass
class PersistedIllustration:
    id: int
    image_url: str
    checksum: Optional[str]
    updated_existing: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "image_url": self.image_url,
            "checksum": self.checksum,
            "updated_existing": self.updated_existing,
        }


class IllustrationStore:
    """SQLAlchemy-backed store for generated illustrations"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _find_existing(
        self,
        module_id: str,
        locale: str,
        style: str,
        visual_style: str,
        checksum: str,
    ) -> Optional[ModuleIllustration]:
        result = await self.session.execute(
            select(ModuleIllustration).where(
                ModuleIllustration.module_id == module_id,
                ModuleIllustration.locale == locale,
                ModuleIllustration.style == style,
                ModuleIllustration.visual_style == visual_style,
                ModuleIllustration.checksum == checksum,
            )
        )
        return result.scalars().first()

    async def persist(
        self,
        *,
        module_id: str,
        locale: str,
        style: str,
        visual_style: str,
        result: IllustrationResult,
        provider: Optional[str],
        model: Optional[str],
        checksum: Optional[str],
        slot_id: Optional[str] = None,
        anchor: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[PersistedIllustration]:
        """Store (or refresh) an illustration. Returns None if the write failed."""
        values = {
            "provider": provider,
            "model": model,
            "prompt_summary": result.prompt_used[:PROMPT_SUMMARY_CHARS] or None,
            "mime_type": result.mime_type,
            "image_data": result.image_bytes,
            "slot_id": slot_id,
            "anchor": anchor,
            "metadata_json": metadata,
        }

        try:
            existing = None
            if checksum:
                existing = await self._find_existing(
                    module_id, locale, style, visual_style, checksum
                )

            if existing is not None:
                for key, value in values.items():
                    setattr(existing, key, value)
                record = existing
            else:
                record = ModuleIllustration(
                    module_id=module_id,
                    locale=locale,
                    style=style,
                    visual_style=visual_style,
                    checksum=checksum,
                    **values,
                )
                self.session.add(record)

            await self.session.commit()
            await self.session.refresh(record)
        except SQLAlchemyError:
            logger.exception(f"[Illustrations] Failed to persist illustration for module {module_id}")
            await self.session.rollback()
            return None

        return PersistedIllustration(
            id=record.id,
            image_url=illustration_url(record.id),
            checksum=checksum,
            updated_existing=existing is not None,
        )

    async def get(self, illustration_id: int) -> Optional[ModuleIllustration]:
        return await self.session.get(ModuleIllustration, illustration_id)
