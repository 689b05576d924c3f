"""Fixed cost template endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db, get_feed
from components.core.realtime import ChangeFeed
from components.template.repository import TemplateRepository
from components.template import schemas
from components.user.models import User
from restapi.endpoints.auth import get_current_user

router = APIRouter(
    prefix="/templates",
    tags=["templates"],
    responses={404: {"description": "Not found"}},
)


def get_repository(
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_feed),
    current_user: User = Depends(get_current_user),
) -> TemplateRepository:
    return TemplateRepository(db, current_user.id, feed)


@router.get("/", response_model=List[schemas.Template])
async def read_templates(
    archived: bool = Query(False, description="List archived templates instead of active ones"),
    repo: TemplateRepository = Depends(get_repository),
):
    """Get templates in display order."""
    return await repo.get_all(archived=archived)


@router.post("/", response_model=schemas.Template, status_code=status.HTTP_201_CREATED)
async def create_template(
    template: schemas.TemplateCreate,
    repo: TemplateRepository = Depends(get_repository),
):
    """Create a template at the end of the active list."""
    return await repo.create(template)


@router.put("/order", response_model=List[schemas.Template])
async def reorder_templates(
    body: schemas.TemplateReorder,
    repo: TemplateRepository = Depends(get_repository),
):
    """Set the display order to the given id sequence."""
    return await repo.reorder(body.template_ids)


@router.patch("/{template_id}", response_model=schemas.Template)
async def update_template(
    template_id: int,
    template: schemas.TemplateUpdate,
    repo: TemplateRepository = Depends(get_repository),
):
    return await repo.update(template_id, template)


@router.post("/{template_id}/archive", response_model=schemas.Template)
async def archive_template(template_id: int, repo: TemplateRepository = Depends(get_repository)):
    return await repo.set_archived(template_id, True)


@router.post("/{template_id}/restore", response_model=schemas.Template)
async def restore_template(template_id: int, repo: TemplateRepository = Depends(get_repository)):
    return await repo.set_archived(template_id, False)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(template_id: int, repo: TemplateRepository = Depends(get_repository)):
    """Permanently delete a template, archived or not."""
    await repo.delete(template_id)
