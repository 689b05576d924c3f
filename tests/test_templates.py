import pytest

from components.core.errors import NotFound
from components.template import schemas
from components.template.models import Template
from components.template.repository import TemplateRepository
from conftest import make_account, reload


@pytest.mark.asyncio
async def test_create_appends_to_active_list(db, user):
    account = await make_account(db, user.id)
    async with db.get_db() as session:
        repo = TemplateRepository(session, user.id)
        rent = await repo.create(schemas.TemplateCreate(
            name="Rent", default_budget=85000, bank_account_id=account.id, payment_day=27,
        ))
        phone = await repo.create(schemas.TemplateCreate(
            name="Phone", default_budget="abc", bank_account_id=account.id, payment_day=10,
        ))

    assert (rent.order, phone.order) == (0, 1)
    assert rent.is_archived is False
    assert rent.updated_at is not None
    assert phone.default_budget == 0


def test_payment_day_must_be_a_day_of_month():
    with pytest.raises(ValueError):
        schemas.TemplateCreate(name="Rent", bank_account_id=1, payment_day=32)


@pytest.mark.asyncio
async def test_archive_restore_and_delete(db, user):
    account = await make_account(db, user.id)
    async with db.get_db() as session:
        repo = TemplateRepository(session, user.id)
        rent = await repo.create(schemas.TemplateCreate(
            name="Rent", default_budget=85000, bank_account_id=account.id, payment_day=27,
        ))

        await repo.set_archived(rent.id, True)
        assert await repo.get_all() == []
        assert [t.id for t in await repo.get_all(archived=True)] == [rent.id]

        restored = await repo.set_archived(rent.id, False)
        assert restored.is_archived is False
        assert [t.id for t in await repo.get_all()] == [rent.id]

        await repo.set_archived(rent.id, True)
        await repo.delete(rent.id)

    assert await reload(db, Template, rent.id) is None


@pytest.mark.asyncio
async def test_update_and_reorder(db, user):
    account = await make_account(db, user.id)
    async with db.get_db() as session:
        repo = TemplateRepository(session, user.id)
        created = [
            await repo.create(schemas.TemplateCreate(
                name=name, default_budget=1000, bank_account_id=account.id, payment_day=1,
            ))
            for name in ("Rent", "Phone", "Gas")
        ]
        updated = await repo.update(created[0].id, schemas.TemplateUpdate(default_budget=90000, payment_day=25))
        await repo.reorder([created[2].id, created[0].id, created[1].id])
        names = [t.name for t in await repo.get_all()]

    assert updated.default_budget == 90000
    assert updated.payment_day == 25
    assert updated.name == "Rent"
    assert names == ["Gas", "Rent", "Phone"]


@pytest.mark.asyncio
async def test_reorder_with_unknown_id_changes_nothing(db, user):
    account = await make_account(db, user.id)
    async with db.get_db() as session:
        repo = TemplateRepository(session, user.id)
        first = await repo.create(schemas.TemplateCreate(
            name="Rent", bank_account_id=account.id, payment_day=1,
        ))
        second = await repo.create(schemas.TemplateCreate(
            name="Phone", bank_account_id=account.id, payment_day=1,
        ))
    async with db.get_db() as session:
        with pytest.raises(NotFound):
            await TemplateRepository(session, user.id).reorder([second.id, 999, first.id])

    assert (await reload(db, Template, first.id)).order == 0
    assert (await reload(db, Template, second.id)).order == 1
