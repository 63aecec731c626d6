"""Resource registration routes.

Resources normally arrive from the listing subsystem; these endpoints let
operators and tests register one directly, read it back and update an
agent's weekly template.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from staydesk.api.deps import get_db
from staydesk.config import settings
from staydesk.models.resource import Resource
from staydesk.scheduling.errors import InvalidInterval
from staydesk.schemas.resource import ResourceCreate, ResourceResponse, TemplateInput

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/resources", tags=["resources"])


@router.post(
    "",
    response_model=ResourceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a bookable resource",
)
async def create_resource(
    body: ResourceCreate,
    db: AsyncSession = Depends(get_db),
) -> ResourceResponse:
    """Create a property stay or an agent's viewing calendar.

    A weekly template is only meaningful for ``agent_slot`` resources and is
    validated before it is stored.
    """
    template_json = None
    slot_minutes = None
    if body.availability_template is not None:
        if body.kind != "agent_slot":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only agent_slot resources take an availability template",
            )
        try:
            template = body.availability_template.to_template(settings.default_slot_minutes)
        except InvalidInterval as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        template_json = template.to_dict()
        slot_minutes = template.slot_minutes

    resource = Resource(
        owner_id=body.owner_id,
        name=body.name,
        kind=body.kind,
        instant_book=body.instant_book,
        slot_minutes=slot_minutes,
        availability_template=template_json,
    )
    db.add(resource)
    await db.flush()
    await db.refresh(resource)
    logger.info("Registered %s resource %s (%s)", resource.kind, resource.id, resource.name)
    return ResourceResponse.model_validate(resource)


@router.get(
    "/{resource_id}",
    response_model=ResourceResponse,
    summary="Get a resource",
)
async def get_resource(
    resource_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> ResourceResponse:
    resource = await db.get(Resource, resource_id)
    if resource is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resource not found",
        )
    return ResourceResponse.model_validate(resource)


@router.put(
    "/{resource_id}/template",
    response_model=ResourceResponse,
    summary="Replace an agent's weekly availability",
)
async def update_template(
    resource_id: uuid.UUID,
    body: TemplateInput,
    db: AsyncSession = Depends(get_db),
) -> ResourceResponse:
    """Store new working hours for an ``agent_slot`` resource.

    Slot listings follow the new template immediately. Viewings already
    booked are kept even when they fall outside the new hours.
    """
    # row lock: slot bookings on this resource wait for the new template
    resource = await db.get(Resource, resource_id, with_for_update=True)
    if resource is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Resource not found",
        )
    if resource.kind != "agent_slot":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only agent_slot resources take an availability template",
        )
    try:
        template = body.to_template(settings.default_slot_minutes)
    except InvalidInterval as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    resource.availability_template = template.to_dict()
    resource.slot_minutes = template.slot_minutes
    await db.flush()
    await db.refresh(resource)
    logger.info("Updated availability template of resource %s", resource.id)
    return ResourceResponse.model_validate(resource)
