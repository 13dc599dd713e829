import os

from dotenv import load_dotenv

from logger import logger
from .client import ApiError, ServerUnreachable, TaskboardClient
from .notifications import DEFAULT_INTERVAL, ReminderPoller

# Load environment variables
load_dotenv()
BACKEND_URL = os.getenv("BACKEND_URL", "http://127.0.0.1:8000")


def show_notification(title: str, body: str) -> None:
    print(f"[reminder] {title}\n   {body}", flush=True)


def main() -> int:
    email = os.getenv("TASKBOARD_EMAIL")
    password = os.getenv("TASKBOARD_PASSWORD")
    if not email or not password:
        logger.error("Set TASKBOARD_EMAIL and TASKBOARD_PASSWORD to watch reminders.")
        return 1

    client = TaskboardClient(BACKEND_URL)
    try:
        client.login(email, password)
    except ApiError as e:
        logger.error(f"Login failed: {e.message}")
        return 1
    except ServerUnreachable as e:
        logger.error(str(e))
        return 1

    interval = float(os.getenv("REMINDER_POLL_SECONDS", DEFAULT_INTERVAL))
    poller = ReminderPoller(client, show_notification, interval)
    logger.info(f"Watching reminders for {email} every {interval:g}s")
    try:
        poller.run()
    except KeyboardInterrupt:
        poller.stop()
    finally:
        client.logout()
    return 0


# Run the app
if __name__ == "__main__":
    raise SystemExit(main())
