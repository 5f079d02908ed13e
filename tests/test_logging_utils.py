import logging

from task_tracker.logging_utils import (
    CorrelationFilter,
    bind_task_id,
    request_id_var,
    reset_request_id,
    set_request_id,
    task_id_var,
)


def make_record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)


def test_filter_defaults_to_dash() -> None:
    record = make_record()

    assert CorrelationFilter().filter(record) is True
    assert record.request_id == "-"
    assert record.task_id == "-"


def test_filter_reads_context() -> None:
    token = set_request_id("req-1")
    try:
        with bind_task_id("task-9"):
            record = make_record()
            CorrelationFilter().filter(record)
    finally:
        reset_request_id(token)

    assert record.request_id == "req-1"
    assert record.task_id == "task-9"
    assert request_id_var.get() is None


def test_bind_task_id_restores_previous_value() -> None:
    with bind_task_id("outer"):
        with bind_task_id("inner"):
            assert task_id_var.get() == "inner"
        assert task_id_var.get() == "outer"
    assert task_id_var.get() is None


def test_handlers_log_task_operations(client, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="task_tracker.api.routes"):
        response = client.post("/api/tasks", json={"title": "Logged"})

    assert response.status_code == 201
    assert "Created new task: Logged" in caplog.text
    record = next(r for r in caplog.records if r.getMessage() == "Created new task: Logged")
    assert record.levelno == logging.INFO
