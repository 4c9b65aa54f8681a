from __future__ import annotations

from datetime import datetime

import pytest

from rome_timeclock.core.exceptions import ValidationError
from rome_timeclock.production.memory_production_repository import InMemoryProductionRepository
from rome_timeclock.production.service import ProductionService

from conftest import FakeClock


def _service():
    return ProductionService(InMemoryProductionRepository(), clock=FakeClock(datetime(2026, 3, 4, 14, 0)))


def test_zero_quantities_are_dropped():
    svc = _service()

    logs = svc.log_production(
        1,
        [
            {"task_name": "Picking", "quantity": 40},
            {"task_name": "Packing", "quantity": 0},
            {"task_name": "Loading", "quantity": 3},
        ],
    )

    assert [(l.task_name, l.quantity) for l in logs] == [("Picking", 40), ("Loading", 3)]
    assert all(l.logged_at == datetime(2026, 3, 4, 14, 0) for l in logs)


@pytest.mark.parametrize(
    "entries",
    [
        [],
        [{"task_name": "Packing", "quantity": 0}],
        [{"task_name": "Packing", "quantity": -5}],
        [{"task_name": "", "quantity": 5}],
    ],
)
def test_nothing_to_log(entries):
    with pytest.raises(ValidationError, match="No tasks to log. Please add quantities."):
        _service().log_production(1, entries)


def test_non_numeric_quantity():
    with pytest.raises(ValidationError):
        _service().log_production(1, [{"task_name": "Picking", "quantity": "many"}])


def test_infinite_quantity_is_rejected():
    with pytest.raises(ValidationError, match="Quantity must be a whole number."):
        _service().log_production(1, [{"task_name": "Picking", "quantity": float("inf")}])


def test_entries_must_be_a_list():
    with pytest.raises(ValidationError, match="No tasks to log."):
        _service().log_production(1, 5)
