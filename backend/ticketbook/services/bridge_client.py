"""HTTP client for the bridge service that fronts the same event data remotely.

Mirrors the event service's read/write operations. Every request carries the
static ``x-api-key`` header. There is no retry, caching, or timeout beyond the
``requests`` default.
"""
import logging
from datetime import datetime
from typing import Any, Optional

import pydantic
import pytz
import requests

from ticketbook.errors import ConfigurationError, NotFound, RemoteError
from ticketbook.schemas.event import EventOut, PhotoOut
from ticketbook.services.event_service import parse_event_id, validate_filter, validate_status

logger = logging.getLogger(__name__)


def remote_date(value: Any, tz) -> Any:
    """Reduce a serialized DATETIME to its calendar day in ``tz``; other values pass through."""
    if not isinstance(value, str) or "T" not in value:
        return value
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.date().isoformat()


class BridgeClient:
    """The API key is checked on first use, so building a client never fails.

    Remote rows are coerced into the local response schemas. Dates arriving as
    full ISO timestamps are read back as calendar days in ``timezone``.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timezone: str = "UTC",
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or requests.Session()
        self.tz = pytz.timezone(timezone)

    def validate_config(self) -> None:
        if not self.api_key:
            raise ConfigurationError("Bridge API key is missing")

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("error") or body.get("message") or body.get("detail")
            if message:
                return str(message)
        return f"Bridge request failed with status {response.status_code}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        self.validate_config()
        url = f"{self.base_url}{path}"
        headers = {"x-api-key": self.api_key}
        if "json" in kwargs:
            headers["Content-Type"] = "application/json"
        try:
            response = self.session.request(method, url, headers=headers, **kwargs)
        except requests.RequestException as exc:
            raise RemoteError(f"Bridge request to {path} failed: {exc}") from exc
        logger.info("Bridge %s %s -> %s", method, path, response.status_code)
        return response

    def _json(self, response: requests.Response) -> Any:
        if not response.ok:
            raise RemoteError(self._error_message(response), remote_status=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError("Bridge returned a response that is not JSON") from exc

    def _row(self, row: Any, model):
        if isinstance(row, dict) and "date" in row:
            row = {**row, "date": remote_date(row["date"], self.tz)}
        try:
            return model.model_validate(row)
        except pydantic.ValidationError as exc:
            logger.warning("Bridge returned a malformed %s: %s", model.__name__, exc)
            raise RemoteError("Bridge returned malformed event data") from exc

    def _rows(self, rows: Any, model) -> list:
        if not isinstance(rows, list):
            raise RemoteError("Bridge returned malformed event data")
        return [self._row(row, model) for row in rows]

    def list_events(self, filter_: Optional[str]) -> list[EventOut]:
        validate_filter(filter_)
        rows = self._json(self._request("GET", "/events", params={"filter": filter_}))
        return self._rows(rows, EventOut)

    def get_event(self, event_id: Any) -> EventOut:
        event_id = parse_event_id(event_id)
        response = self._request("GET", f"/events/{event_id}")
        if response.status_code == 404:
            raise NotFound("Event not found")
        return self._row(self._json(response), EventOut)

    def update_status(self, event_id: Any, new_status: Optional[str]) -> dict:
        event_id = parse_event_id(event_id)
        validate_status(new_status)
        return self._json(
            self._request("PUT", f"/events/{event_id}/status", json={"status": new_status})
        )

    def update_photo_path(self, event_id: Any, reference: Optional[str]) -> dict:
        event_id = parse_event_id(event_id)
        return self._json(
            self._request(
                "POST", "/update-photo", json={"fileUrl": reference, "eventId": str(event_id)}
            )
        )

    def list_photos(self) -> list[PhotoOut]:
        return self._rows(self._json(self._request("GET", "/photos")), PhotoOut)
