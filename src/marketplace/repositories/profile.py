"""Repositories for actor profiles and properties."""

from uuid import UUID

from sqlmodel import select

from src.marketplace.models import DesignerProfile, HomeownerProfile, Property
from src.marketplace.repositories.base import BaseRepository


class HomeownerProfileRepository(BaseRepository[HomeownerProfile]):
    model = HomeownerProfile

    async def get_by_user_id(self, user_id: UUID) -> HomeownerProfile | None:
        result = await self.session.execute(
            select(HomeownerProfile).where(HomeownerProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()


class DesignerProfileRepository(BaseRepository[DesignerProfile]):
    model = DesignerProfile

    async def get_by_user_id(self, user_id: UUID) -> DesignerProfile | None:
        result = await self.session.execute(
            select(DesignerProfile).where(DesignerProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_many(self, ids: list[UUID]) -> dict[UUID, DesignerProfile]:
        """Load several designers at once, keyed by id."""
        if not ids:
            return {}
        result = await self.session.execute(
            select(DesignerProfile).where(DesignerProfile.id.in_(ids))  # type: ignore[attr-defined]
        )
        return {designer.id: designer for designer in result.scalars().all()}


class PropertyRepository(BaseRepository[Property]):
    model = Property

    async def get_owned(self, property_id: UUID, homeowner_id: UUID) -> Property | None:
        """Get a property only if it belongs to the given homeowner."""
        result = await self.session.execute(
            select(Property).where(
                Property.id == property_id,
                Property.homeowner_id == homeowner_id,
            )
        )
        return result.scalar_one_or_none()
