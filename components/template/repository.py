"""Repository for fixed cost template operations."""

from datetime import datetime
from typing import List, Sequence

from sqlalchemy import func, select

from components.core import realtime
from components.core.repository import UserScopedRepository
from components.template.models import Template
from components.template import schemas


class TemplateRepository(UserScopedRepository[Template]):
    """Repository for template operations."""
    model = Template
    collection = realtime.TEMPLATES
    label = "Template"

    async def create(self, template: schemas.TemplateCreate) -> Template:
        """Create a template at the end of the active list."""
        result = await self.session.execute(
            select(func.count(Template.id)).where(
                Template.user_id == self.user_id,
                Template.is_archived.is_(False),
            )
        )
        db_template = Template(
            **template.model_dump(),
            order=result.scalar() or 0,
            is_archived=False,
            updated_at=datetime.now(),
        )
        await self.add(db_template)
        await self._commit()
        return db_template

    async def get_all(self, archived: bool = False) -> List[Template]:
        """Get active or archived templates in display order."""
        result = await self.session.execute(
            self._scoped()
            .where(Template.is_archived.is_(archived))
            .order_by(Template.order, Template.id)
        )
        return list(result.scalars().all())

    async def update(self, template_id: int, template: schemas.TemplateUpdate) -> Template:
        db_template = await self.get_or_raise(template_id)
        for field, value in template.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(db_template, field, value)
        db_template.updated_at = datetime.now()
        await self._commit()
        return db_template

    async def set_archived(self, template_id: int, archived: bool) -> Template:
        """Archive (soft delete) or restore a template."""
        db_template = await self.get_or_raise(template_id)
        db_template.is_archived = archived
        db_template.updated_at = datetime.now()
        await self._commit()
        return db_template

    async def delete(self, template_id: int) -> None:
        """Permanently delete a template. Costs already generated are kept."""
        db_template = await self.get_or_raise(template_id)
        await self.session.delete(db_template)
        await self._commit()

    async def reorder(self, template_ids: Sequence[int]) -> List[Template]:
        """Assign order = position for every given template in one commit."""
        now = datetime.now()
        templates = []
        for index, template_id in enumerate(template_ids):
            db_template = await self.get_or_raise(template_id)
            db_template.order = index
            db_template.updated_at = now
            templates.append(db_template)
        await self._commit()
        return templates
