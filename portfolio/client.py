"""Contact form client with submission status tracking."""

import logging
import threading
from typing import Callable, Optional

import requests

from .config import Config
from .models import REQUIRED_FIELDS, SubmissionStatus

logger = logging.getLogger(__name__)

CONTACT_PATH = "/api/contact"
FORM_FIELDS = ("firstName", "lastName", "email", "phone", "message")

Listener = Callable[["ContactForm"], None]


class ContactForm:
    """Holds contact form fields and drives one submission at a time.

    Status moves idle -> submitting -> success or error. A successful
    submission clears the fields and reverts to idle after
    ``revert_after`` seconds; an error keeps the fields and stays until the
    next submit. Listeners registered with ``subscribe`` are called after
    every change.
    """

    def __init__(
        self,
        endpoint: str,
        session: Optional[requests.Session] = None,
        revert_after: float = 3.0,
        timeout: float = 10.0,
    ):
        self.endpoint = endpoint
        self.session = session or requests.Session()
        self.revert_after = revert_after
        self.timeout = timeout

        self._fields = {name: "" for name in FORM_FIELDS}
        self._status = SubmissionStatus.IDLE
        self._is_submitting = False
        self._error: Optional[str] = None
        self._missing: list[str] = []
        self._listeners: list[Listener] = []
        self._timer: Optional[threading.Timer] = None
        self._closed = False
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Config, session: Optional[requests.Session] = None) -> "ContactForm":
        return cls(
            config.api_base_url.rstrip("/") + CONTACT_PATH,
            session=session,
            revert_after=config.success_display_seconds,
            timeout=config.request_timeout,
        )

    @property
    def status(self) -> SubmissionStatus:
        return self._status

    @property
    def is_submitting(self) -> bool:
        return self._is_submitting

    @property
    def fields(self) -> dict[str, str]:
        return dict(self._fields)

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def missing_fields(self) -> list[str]:
        return list(self._missing)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def update(self, name: str, value: str) -> None:
        """Set a single field value."""
        if name not in self._fields:
            raise KeyError(f"Unknown contact form field: {name}")
        self._fields[name] = value
        self._notify()

    def submit(self) -> bool:
        """Post the form once. Returns True only if the server accepted it."""
        with self._lock:
            if self._closed or self._is_submitting:
                return False

            missing = [name for name in REQUIRED_FIELDS if not self._fields[name]]
            if missing:
                self._status = SubmissionStatus.ERROR
                self._error = "Missing required fields"
                self._missing = missing
                validation_failed = True
            else:
                self._cancel_timer()
                self._status = SubmissionStatus.SUBMITTING
                self._is_submitting = True
                self._error = None
                self._missing = []
                payload = dict(self._fields)
                validation_failed = False

        self._notify()
        if validation_failed:
            logger.debug(f"Not submitting, missing fields: {', '.join(missing)}")
            return False

        ok = False
        error = None
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
            ok = 200 <= response.status_code < 300
            if not ok:
                error = _error_message(response)
                logger.warning(f"Contact submission rejected ({response.status_code}): {error}")
        except requests.RequestException as e:
            logger.error(f"Form submission error: {e}")
            error = "Network error"

        with self._lock:
            self._is_submitting = False
            if ok:
                self._status = SubmissionStatus.SUCCESS
                self._fields = {name: "" for name in FORM_FIELDS}
                if not self._closed:
                    self._schedule_revert()
            else:
                self._status = SubmissionStatus.ERROR
                self._error = error

        self._notify()
        return ok

    def _schedule_revert(self) -> None:
        self._timer = threading.Timer(self.revert_after, self._revert)
        self._timer.daemon = True
        self._timer.start()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _revert(self) -> None:
        with self._lock:
            if self._closed or self._status is not SubmissionStatus.SUCCESS:
                return
            self._status = SubmissionStatus.IDLE
            self._timer = None
        self._notify()

    def close(self) -> None:
        """Tear the form down; a pending revert will no longer fire."""
        with self._lock:
            self._closed = True
            self._cancel_timer()
        self._listeners.clear()


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason or "Request failed"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return "Request failed"
