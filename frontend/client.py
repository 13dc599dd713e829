from typing import Any, Dict, List, Optional

import requests

DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{message} (Status: {status_code})")
        self.status_code = status_code
        self.message = message


class ServerUnreachable(Exception):
    """The request never got an answer from the server."""


class TaskboardClient:
    """Thin wrapper over the Taskboard REST API.

    Holds the bearer token after ``login`` and attaches it to every request.
    Application errors surface as ``ApiError`` with the server's message;
    network failures surface as ``ServerUnreachable``.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token: Optional[str] = None

    @property
    def logged_in(self) -> bool:
        return self.token is not None

    def _request(self, method: str, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = requests.request(method, url, headers=headers, json=data, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ServerUnreachable(f"Could not connect to server: {e}") from e

        if response.status_code >= 400:
            message = "Request failed"
            try:
                message = response.json().get("message", message)
            except ValueError:
                pass
            raise ApiError(response.status_code, message)

        if not response.content:
            return None
        return response.json()

    # --- Auth ---
    def register(self, email: str, password: str) -> str:
        return self._request("POST", "/api/auth/register", {"email": email, "password": password})["message"]

    def login(self, email: str, password: str) -> None:
        body = self._request("POST", "/api/auth/login", {"email": email, "password": password})
        self.token = body["token"]

    def logout(self) -> None:
        self.token = None

    # --- Todos & dashboard ---
    def todos(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/todos")

    def create_todo(self, text: str, **fields: Any) -> Dict[str, Any]:
        return self._request("POST", "/api/todos", {"text": text, **fields})

    def dashboard(self) -> Dict[str, Any]:
        return self._request("GET", "/api/dashboard")

    # --- Reminders ---
    def due_reminders(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/reminders/due")

    def dismiss_reminder(self, reminder_id: int) -> None:
        self._request("PUT", f"/api/reminders/{reminder_id}/dismiss")
