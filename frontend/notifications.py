"""Client-side reminder delivery.

The server only answers "what is due right now"; this poller asks
periodically, shows each due reminder, then dismisses it. A reminder whose
dismissal fails is shown again on a later poll.
"""
import threading
from typing import Any, Callable, Dict, Optional

from logger import logger
from .client import ApiError, ServerUnreachable, TaskboardClient

DEFAULT_INTERVAL = 60

Notify = Callable[[str, str], None]


def notification_text(reminder: Dict[str, Any]) -> str:
    todo_text = reminder.get("todo_text")
    return f"Task: {todo_text}" if todo_text else "Your reminder is due."


class ReminderPoller:
    def __init__(self, client: TaskboardClient, notify: Notify, interval: float = DEFAULT_INTERVAL):
        self.client = client
        self.notify = notify
        self.interval = interval
        self._stop = threading.Event()

    def poll_once(self) -> int:
        """Deliver every currently due reminder. Returns how many were shown."""
        if not self.client.logged_in:
            return 0

        shown = 0
        for reminder in self.client.due_reminders():
            self.notify(reminder["title"], notification_text(reminder))
            shown += 1
            try:
                self.client.dismiss_reminder(reminder["id"])
            except (ApiError, ServerUnreachable) as e:
                logger.warning(f"Could not dismiss reminder {reminder['id']}, will retry: {e}")
        return shown

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """Poll now and then every ``interval`` seconds until stopped."""
        stop_event = stop_event or self._stop
        while not stop_event.is_set():
            try:
                self.poll_once()
            except ServerUnreachable as e:
                logger.warning(f"Reminder check skipped: {e}")
            except ApiError as e:
                logger.error(f"Reminder check failed: {e}")
            stop_event.wait(self.interval)

    def stop(self) -> None:
        self._stop.set()
