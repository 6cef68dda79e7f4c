"""Reminder evaluation and notification."""

from src.reminders.evaluator import (
    clients_overdue_for_return,
    count_completed,
    services_due_tomorrow,
    services_on_day,
    upcoming_services,
)
from src.reminders.notifier import ReminderNotification, ReminderNotifier

__all__ = [
    "ReminderNotification",
    "ReminderNotifier",
    "clients_overdue_for_return",
    "count_completed",
    "services_due_tomorrow",
    "services_on_day",
    "upcoming_services",
]
