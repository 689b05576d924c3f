import asyncio
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from components.core.errors import NotFound
from components.cost.ledger import LedgerService
from components.cost.models import MonthlyCost
from components.cost.repository import CostRepository
from components.history.repository import HistoryRepository
from components.period.models import SalaryPeriod
from components.period.repository import PeriodRepository
from components.period.service import PeriodService, scheduled_payment_date
from conftest import make_account, make_template, reload


async def period_costs(db, user_id, period_id):
    async with db.get_db() as session:
        return await CostRepository(session, user_id).list_for_period(period_id)


@pytest.mark.asyncio
async def test_start_seeds_one_pending_cost_per_template(db, user):
    bank_a = await make_account(db, user.id, name="A", balance=200000)
    bank_b = await make_account(db, user.id, name="B", balance=50000)
    await make_template(db, user.id, bank_a.id, name="Rent", budget=85000, day=1, order=0)
    await make_template(db, user.id, bank_b.id, name="Electricity", budget=12000, day=5, order=1)

    period = await PeriodService(db, user.id).start_new_period(datetime(2024, 3, 1))

    assert period.status == "active"
    assert period.end_date is None
    rent, electricity = await period_costs(db, user.id, period.id)
    assert (rent.name, rent.budget, rent.bank_account_id) == ("Rent", 85000, bank_a.id)
    assert rent.payment_date == datetime(2024, 3, 1)
    assert (electricity.name, electricity.budget, electricity.bank_account_id) == ("Electricity", 12000, bank_b.id)
    assert electricity.payment_date == datetime(2024, 3, 5)
    assert {rent.status, electricity.status} == {"pending"}
    assert {rent.salary_period_id, electricity.salary_period_id} == {period.id}


@pytest.mark.asyncio
async def test_archived_templates_are_not_seeded(db, user):
    account = await make_account(db, user.id)
    await make_template(db, user.id, account.id, name="Gym", archived=True)

    period = await PeriodService(db, user.id).start_new_period(datetime(2024, 3, 1))

    assert await period_costs(db, user.id, period.id) == []


@pytest.mark.asyncio
async def test_explicit_templates_fall_back_to_index_order(db, user):
    account = await make_account(db, user.id)
    first = await make_template(db, user.id, account.id, name="Water", day=3, order=0)
    second = await make_template(db, user.id, account.id, name="Gas", day=3, order=0)

    period = await PeriodService(db, user.id).start_new_period(datetime(2024, 3, 1), [first, second])

    costs = await period_costs(db, user.id, period.id)
    assert [(c.name, c.order) for c in costs] == [("Water", 0), ("Gas", 1)]


@pytest.mark.asyncio
async def test_starting_again_closes_previous_period(db, user):
    service = PeriodService(db, user.id)
    first = await service.start_new_period(datetime(2024, 3, 1))

    second = await service.start_new_period(datetime(2024, 4, 1))

    previous = await reload(db, SalaryPeriod, first.id)
    assert previous.status == "closed"
    assert previous.end_date == datetime(2024, 4, 1)
    periods = await service.list_periods()
    assert [p.id for p in periods] == [second.id, first.id]
    assert [p.status for p in periods].count("active") == 1
    assert (await service.get_active()).id == second.id


@pytest.mark.asyncio
async def test_concurrent_starts_leave_one_active_period(db, user):
    service = PeriodService(db, user.id)

    await asyncio.gather(
        service.start_new_period(datetime(2024, 3, 1)),
        service.start_new_period(datetime(2024, 3, 2)),
    )

    periods = await service.list_periods()
    assert len(periods) == 2
    assert [p.status for p in periods].count("active") == 1
    closed = [p for p in periods if p.status == "closed"]
    assert closed[0].end_date is not None


@pytest.mark.parametrize("start, day, expected", [
    (datetime(2024, 4, 1), 31, datetime(2024, 4, 30)),
    (datetime(2024, 2, 1), 30, datetime(2024, 2, 29)),
    (datetime(2023, 2, 15), 29, datetime(2023, 2, 28)),
    (datetime(2024, 1, 20), 31, datetime(2024, 1, 31)),
])
def test_payment_day_is_clamped_to_month_end(start, day, expected):
    assert scheduled_payment_date(start, day) == expected


@pytest.mark.asyncio
async def test_close_archives_every_cost(db, user):
    account = await make_account(db, user.id, balance=100000)
    other = await make_account(db, user.id, name="Card", balance=100000)
    for order, name in enumerate(["Rent", "Phone", "Gas"]):
        await make_template(db, user.id, account.id, name=name, budget=1000 * (order + 1), day=order + 1, order=order)
    service = PeriodService(db, user.id)
    period = await service.start_new_period(datetime(2024, 3, 1))
    rent, phone, gas = await period_costs(db, user.id, period.id)

    ledger = LedgerService(db, user.id)
    await ledger.pay_cost(rent.id, 900, other.id, datetime(2024, 3, 2))
    async with db.get_db() as session:
        await CostRepository(session, user.id).skip(phone.id)

    closed = await service.close_period({"spent": 900})

    assert closed.status == "closed"
    assert closed.end_date is not None
    assert closed.last_summary == {"spent": 900}
    assert await period_costs(db, user.id, period.id) == []
    assert await reload(db, MonthlyCost, gas.id) is None
    assert await service.get_active() is None

    async with db.get_db() as session:
        records = await HistoryRepository(session, user.id).get_recent(50)
    assert len(records) == 3
    by_name = {r.name: r for r in records}
    assert by_name["Rent"].status == "paid"
    assert by_name["Rent"].amount == 900
    assert by_name["Rent"].budget == 1000
    assert by_name["Rent"].bank_account_id == other.id
    assert by_name["Rent"].paid_at == datetime(2024, 3, 2)
    assert by_name["Phone"].status == "skipped"
    assert by_name["Phone"].amount == 0
    assert by_name["Gas"].status == "unpaid"
    assert by_name["Gas"].bank_account_id == account.id
    assert by_name["Gas"].paid_at == closed.end_date
    assert {r.salary_period_id for r in records} == {period.id}
    assert all(r.is_archived_item for r in records)


@pytest.mark.asyncio
async def test_close_without_active_period(db, user):
    with pytest.raises(NotFound):
        await PeriodService(db, user.id).close_period()


@pytest.mark.asyncio
async def test_failed_start_leaves_no_partial_period(db, user):
    class BrokenTemplate:
        name = None  # violates NOT NULL on insert
        default_budget = 100
        bank_account_id = 1
        payment_day = 1
        order = 0

    service = PeriodService(db, user.id)
    first = await service.start_new_period(datetime(2024, 3, 1))

    with pytest.raises(IntegrityError):
        await service.start_new_period(datetime(2024, 4, 1), [BrokenTemplate()])

    async with db.get_db() as session:
        periods = await PeriodRepository(session, user.id).get_all()
    assert [(p.id, p.status) for p in periods] == [(first.id, "active")]
