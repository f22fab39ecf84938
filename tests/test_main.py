"""
Tests for the composition root and the maintenance command.
"""
import pytest

import maintenance
from crewbook.core.config import Settings
from crewbook.core.storage import WORKERS_KEY
from crewbook.main import build_container


@pytest.fixture
def container():
    c = build_container(Settings(STORAGE_URL="sqlite://"))
    yield c
    c.engine.dispose()


def test_container_wires_shared_handler(container):
    assert container.data_service.error_handler is container.error_handler
    assert container.storage.error_handler is container.error_handler
    assert container.records.storage is container.storage
    assert container.error_handler.notifications is container.notifications


def test_end_to_end_payroll(container):
    worker = container.data_service.create_worker({"name": "John Doe", "dailyRate": 150000})
    container.records.append(WORKERS_KEY, worker)
    payroll = container.data_service.calculate_payroll(worker, 25, 8, "2024-01")
    container.records.save_payroll(payroll)

    assert payroll.total_pay == 3_975_000
    assert container.data_service.validate_data_integrity().is_valid
    assert container.dashboard.get_stats().total_workers == 1


def test_containers_are_independent():
    first = build_container(Settings(STORAGE_URL="sqlite://"))
    second = build_container(Settings(STORAGE_URL="sqlite://"))
    try:
        with pytest.raises(Exception):
            first.data_service.create_worker({"name": "A", "dailyRate": 150000})

        assert len(first.error_handler.get_errors()) == 1
        assert second.error_handler.get_errors() == []
        assert second.notifications.outbox == []
        assert second.storage.keys() == []
    finally:
        first.engine.dispose()
        second.engine.dispose()


def test_maintenance_usage(capsys):
    assert maintenance.main([]) == 1
    assert "Usage" in capsys.readouterr().out
    assert maintenance.main(["export"]) == 1
