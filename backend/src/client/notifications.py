"""Local, fire-and-forget notifications for the field client.

Nothing here talks to the server. Notifications are appended to an in-memory
log and emitted through logging; callers get back only the notification id.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Literal

logger = logging.getLogger(__name__)

Channel = Literal["default", "patient-reminders"]


@dataclass
class Notification:
    id: int
    title: str
    body: str
    channel: Channel = "default"
    data: dict[str, Any] = field(default_factory=dict)
    deliver_at: datetime.datetime | None = None


class LocalNotifier:
    def __init__(self) -> None:
        self._next_id = 1
        self.delivered: list[Notification] = []
        self.pending: list[Notification] = []

    def send(
        self,
        title: str,
        body: str,
        *,
        channel: Channel = "default",
        data: dict[str, Any] | None = None,
        delay_seconds: int | None = None,
    ) -> int:
        """Deliver now, or queue for later when ``delay_seconds`` is given."""
        notification = Notification(
            id=self._next_id,
            title=title,
            body=body,
            channel=channel,
            data=dict(data or {}),
        )
        self._next_id += 1
        if delay_seconds:
            notification.deliver_at = datetime.datetime.now(
                datetime.UTC
            ) + datetime.timedelta(seconds=delay_seconds)
            self.pending.append(notification)
        else:
            self.delivered.append(notification)
            logger.info("Notification: %s - %s", title, body)
        return notification.id

    def deliver_due(self, now: datetime.datetime | None = None) -> list[Notification]:
        """Deliver queued notifications whose time has come, oldest first."""
        now = now or datetime.datetime.now(datetime.UTC)
        due = sorted(
            (n for n in self.pending if n.deliver_at <= now), key=lambda n: n.deliver_at
        )
        self.pending = [n for n in self.pending if n.deliver_at > now]
        for notification in due:
            self.delivered.append(notification)
            logger.info("Notification: %s - %s", notification.title, notification.body)
        return due

    def cancel(self, notification_id: int) -> None:
        self.pending = [n for n in self.pending if n.id != notification_id]

    def cancel_all(self) -> None:
        self.pending.clear()

    def notify_patient_added(self, patient_name: str, village: str) -> int:
        return self.send(
            "Patient Added Successfully",
            f"New patient {patient_name} from {village} has been registered.",
            data={"type": "patient_added", "patientName": patient_name},
        )

    def notify_patient_reminder(
        self, patient_name: str, condition: str, days_overdue: int = 0
    ) -> int:
        if days_overdue > 7:
            urgency = "URGENT"
        elif days_overdue > 3:
            urgency = "Important"
        else:
            urgency = "Reminder"
        body = f"Patient {patient_name} needs follow-up for {condition}"
        if days_overdue > 0:
            body += f" ({days_overdue} days overdue)"
        return self.send(
            f"{urgency}: Follow-up Required",
            body,
            channel="patient-reminders",
            data={"type": "patient_reminder", "daysOverdue": days_overdue},
        )

    def notify_system_sync(self, synced_count: int, failed_count: int = 0) -> int:
        title = "Partial Sync Complete" if failed_count > 0 else "Data Sync Complete"
        body = f"{synced_count} patients synced successfully"
        if failed_count > 0:
            body += f", {failed_count} failed"
        return self.send(title, body, data={"type": "system_sync"})
