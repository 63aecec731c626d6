"""Resource registry backed by the ``resources`` table."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.models.resource import Resource
from staydesk.scheduling.enums import ResourceKind
from staydesk.scheduling.errors import ResourceNotFound
from staydesk.scheduling.records import ResourceInfo
from staydesk.scheduling.store import ResourceRegistry
from staydesk.scheduling.templates import WeeklyTemplate


def to_resource_info(row: Resource) -> ResourceInfo:
    """Convert a ``Resource`` row into the core's ``ResourceInfo``."""
    template = None
    if row.availability_template:
        template = WeeklyTemplate.from_dict(row.availability_template, slot_minutes=row.slot_minutes)
    return ResourceInfo(
        id=row.id,
        kind=ResourceKind(row.kind),
        owner_id=row.owner_id,
        name=row.name,
        instant_book=bool(row.instant_book),
        template=template,
    )


class SqlResourceRegistry(ResourceRegistry):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, resource_id: uuid.UUID) -> ResourceInfo:
        row = await self.session.get(Resource, resource_id)
        if row is None:
            raise ResourceNotFound(resource_id)
        return to_resource_info(row)
