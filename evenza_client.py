"""Evenza API client.

A small wrapper around the public Evenza REST API built on ``requests``.
Every call returns a tuple ``(data, error)``: on success ``error`` is
``None``; on failure ``data`` is empty and ``error`` is a dictionary with
``status_code`` and ``message``.

Listing calls (events, trips, interviews) fall back to a built-in set of
sample records when the server cannot be reached at all, so that a demo
front end still has something to show.  HTTP errors returned by a
reachable server are never masked by the fallback.

Example::

    client = EvenzaClient(base_url="http://localhost:8000")
    client.login("student@example.com", "secret123")
    events, error = client.list_events(category="Workshop")
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15

SAMPLE_DATA: Dict[str, List[Dict[str, Any]]] = {
    "events": [
        {
            "id": 1,
            "title": "Tech Innovation Summit",
            "description": "Talks and demos from student founders and industry guests.",
            "date": "2025-03-15",
            "time": "10:00",
            "location": "Main Auditorium",
            "category": "Conference",
            "price": 0,
            "max_attendees": 200,
            "attendee_count": 0,
            "is_featured": True,
            "image": "/placeholder.svg?height=400&width=600",
            "status": "active",
        },
        {
            "id": 2,
            "title": "Cultural Night",
            "description": "Music, dance and food from around the world.",
            "date": "2025-04-02",
            "time": "18:30",
            "location": "Student Center",
            "category": "Cultural",
            "price": 10,
            "max_attendees": 150,
            "attendee_count": 0,
            "is_featured": False,
            "image": "/placeholder.svg?height=400&width=600",
            "status": "active",
        },
    ],
    "trips": [
        {
            "id": 1,
            "title": "Mountain Hiking Weekend",
            "description": "Two days of guided hiking with an overnight stay.",
            "date": "2025-05-10",
            "end_date": "2025-05-11",
            "location": "Blue Ridge",
            "price": 120,
            "spots": 20,
            "enrollments": 0,
            "image": "/placeholder.svg?height=400&width=600",
            "status": "active",
        },
    ],
    "interviews": [
        {
            "id": 1,
            "title": "Summer Internship Drive",
            "company": "Acme Corp",
            "description": "Internship interviews for software and design roles.",
            "date": "2025-03-28",
            "location": "Career Office",
            "positions": ["Software Intern", "Design Intern"],
            "registrations": 0,
            "status": "active",
        },
    ],
}


def _error(status_code: Optional[int], message: str) -> Dict[str, Any]:
    return {"status_code": status_code, "message": message}


class EvenzaClient:
    """Client for the Evenza API.

    Args:
        base_url: Server root, e.g. ``http://localhost:8000``.  The
            ``/api`` prefix is added by the client.
        token: Optional bearer token.  :meth:`login` stores the token it
            receives, so later calls are authenticated.
        session: Optional ``requests.Session`` to reuse.
        use_fallback: Serve :data:`SAMPLE_DATA` for listing calls when
            the server is unreachable.
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        use_fallback: bool = True,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.use_fallback = use_fallback

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request against ``/api<path>``.

        Returns:
            ``(data, error)``.  ``error["status_code"]`` is ``None`` when
            the server could not be reached.
        """
        url = f"{self.base_url}/api{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, _error(status, str(message))
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, _error(None, str(exc))

    def _list(
        self, resource: str, params: Dict[str, Any] | None = None
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", f"/{resource}", params=params)
        if error:
            if error["status_code"] is None and self.use_fallback:
                logger.warning("API unreachable, serving sample %s", resource)
                return copy.deepcopy(SAMPLE_DATA[resource]), None
            return [], error
        if isinstance(data, dict) and isinstance(data.get(resource), list):
            return data[resource], None
        if isinstance(data, list):
            return data, None
        return [], None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def register(self, name: str, email: str, password: str):
        return self._request(
            "POST", "/auth/register", json_body={"name": name, "email": email, "password": password}
        )

    def login(self, email: str, password: str, remember_me: bool = False):
        """Log in and keep the returned token for subsequent calls."""
        data, error = self._request(
            "POST",
            "/auth/login",
            json_body={"email": email, "password": password, "remember_me": remember_me},
        )
        if data and data.get("token"):
            self.token = data["token"]
        return data, error

    def logout(self):
        data, error = self._request("POST", "/auth/logout")
        self.token = None
        return data, error

    # ------------------------------------------------------------------
    # Events, trips, interviews
    # ------------------------------------------------------------------
    def list_events(self, category: Optional[str] = None, featured: Optional[bool] = None, limit: Optional[int] = None):
        return self._list("events", {"category": category, "featured": featured, "limit": limit})

    def get_event(self, event_id: Any):
        return self._request("GET", f"/events/{event_id}")

    def register_for_event(self, event_id: Any, payload: Dict[str, Any]):
        """Register the logged-in user.  ``payload`` carries tickets, name, email, phone..."""
        return self._request("POST", f"/events/{event_id}/register", json_body=payload)

    def list_trips(self, limit: Optional[int] = None):
        return self._list("trips", {"limit": limit})

    def get_trip(self, trip_id: Any):
        return self._request("GET", f"/trips/{trip_id}")

    def enroll_in_trip(self, trip_id: Any, payload: Dict[str, Any]):
        return self._request("POST", f"/trips/{trip_id}/enroll", json_body=payload)

    def list_interviews(self, limit: Optional[int] = None):
        return self._list("interviews", {"limit": limit})

    def get_interview(self, interview_id: Any):
        return self._request("GET", f"/interviews/{interview_id}")

    def apply_for_interview(self, interview_id: Any, payload: Dict[str, Any]):
        return self._request("POST", f"/interviews/{interview_id}/submit", json_body=payload)

    # ------------------------------------------------------------------
    # Queries and profile
    # ------------------------------------------------------------------
    def submit_query(self, name: str, email: str, message: str, subject: Optional[str] = None):
        body = {"name": name, "email": email, "subject": subject, "message": message}
        return self._request("POST", "/queries", json_body=body)

    def list_queries(self, page: int = 1, limit: int = 10):
        return self._request("GET", "/queries", params={"page": page, "limit": limit})

    def get_profile(self):
        return self._request("GET", "/user/profile")

    def get_dashboard(self):
        return self._request("GET", "/user/dashboard")
