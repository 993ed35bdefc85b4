import uuid
from datetime import datetime, timezone
from decimal import Decimal

from support_service.app.crud.tickets.ticket_history_crud import (
    describe_change,
    diff_ticket_fields,
    serialize_history_value,
)
from support_service.app.enum.ticket_enum import TicketPriority, TicketStatus


def test_blank_and_none_are_the_same():
    assert diff_ticket_fields({"description": None}, {"description": "  "}) == []
    assert diff_ticket_fields({"description": ""}, {"description": None}) == []


def test_enum_and_plain_value_compare_equal():
    assert diff_ticket_fields({"status": TicketStatus.OPEN}, {"status": "open"}) == []


def test_numbers_compare_by_value():
    assert diff_ticket_fields({"estimated_hours": Decimal("2.50")}, {"estimated_hours": 2.5}) == []
    assert diff_ticket_fields({"estimated_hours": Decimal("2")}, {"estimated_hours": 3}) == [
        ("estimated_hours", Decimal("2"), 3)
    ]


def test_uuid_and_string_compare_equal():
    user_id = uuid.uuid4()
    assert diff_ticket_fields({"assigned_to_id": user_id}, {"assigned_to_id": str(user_id)}) == []


def test_naive_and_aware_timestamps():
    naive = datetime(2024, 5, 1, 12, 0)
    aware = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert diff_ticket_fields({"due_date": naive}, {"due_date": aware}) == []


def test_dict_key_order_is_ignored():
    assert diff_ticket_fields({"custom_fields": {"a": 1, "b": 2}}, {"custom_fields": {"b": 2, "a": 1}}) == []


def test_bookkeeping_fields_are_ignored():
    old = {"updated_at": datetime(2024, 1, 1), "ticket_number": "TKT-000001"}
    new = {"updated_at": datetime(2024, 2, 1), "ticket_number": "TKT-000002"}
    assert diff_ticket_fields(old, new) == []


def test_only_changed_fields_are_reported():
    old = {"title": "Broken screen", "priority": TicketPriority.LOW, "tags": ["hw"]}
    new = {"title": "Broken screen", "priority": TicketPriority.HIGH, "tags": ["hw", "urgent"]}

    assert [field for field, _, _ in diff_ticket_fields(old, new)] == ["priority", "tags"]


def test_serialize_history_value():
    assert serialize_history_value(None) is None
    assert serialize_history_value(TicketStatus.IN_PROGRESS) == "in_progress"
    assert serialize_history_value(datetime(2024, 5, 1, 8, 30)) == "2024-05-01T08:30:00"
    assert serialize_history_value(["b", "a"]) == '["b", "a"]'
    assert serialize_history_value({"z": 1, "a": 2}) == '{"a": 2, "z": 1}'
    assert serialize_history_value(True) == "true"
    assert serialize_history_value(Decimal("1.5")) == "1.5"


def test_describe_change():
    assert describe_change("assigned_to_id", None, "abc") == "Assignee set to 'abc'"
    assert describe_change("due_date", "2024-01-01", None) == "Due date cleared (was '2024-01-01')"
    assert describe_change("priority", TicketPriority.LOW, TicketPriority.HIGH) == \
        "Priority changed from 'low' to 'high'"
