# core/controller.py
"""
Top-level application controller.

Owns the student store, the view router and the API client. Screens call
the intent methods here and render the ActionResult they get back; they
never touch records directly.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, MutableMapping, Optional

from core.api_client import StudentApiClient, build_registration_payload
from core.auth import AdminCredentials
from core.errors import (
    ApiError,
    InvalidAmountError,
    NextOfKinInvalid,
    RegistrationInvalid,
    StudentNotFound,
)
from core.fees import Amount
from core.models import DashboardStats, NextOfKin, RegistrationForm, StudentRecord
from core.navigation import Router, View
from core.settings import Settings
from core.store import StudentStore
from core.validation import validate_registration

log = logging.getLogger(__name__)

USER_KEY = "user"


@dataclass
class ActionResult:
    ok: bool
    message: str = ""
    errors: Dict[str, str] = field(default_factory=dict)
    record: Optional[StudentRecord] = None
    records: List[StudentRecord] = field(default_factory=list)
    stats: Optional[DashboardStats] = None


class AppController:
    def __init__(
        self,
        settings: Settings,
        state: MutableMapping,
        api: Optional[StudentApiClient] = None,
        credentials: Optional[AdminCredentials] = None,
    ):
        self.settings = settings
        self.state = state
        # a client handed in (shared or test) belongs to the caller
        self._owns_api = api is None
        self.api = api or StudentApiClient(settings.api.base_url, timeout=settings.api.timeout_seconds)
        self.credentials = credentials or AdminCredentials(settings.auth)
        self.store = StudentStore(admission_prefix=settings.admission.prefix)
        self.router = Router(state, exists=self.store.__contains__)

    # --- session -----------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return bool(self.state.get(USER_KEY))

    @property
    def user(self) -> dict:
        return self.state.get(USER_KEY) or {}

    def login(self, username: str, password: str) -> ActionResult:
        if not self.credentials.verify(username, password):
            return ActionResult(False, "Invalid username or password.")
        self.state[USER_KEY] = {
            "username": self.credentials.username,
            "full_name": self.credentials.display_name,
        }
        self.router.reset()
        log.info(f"{self.credentials.username} signed in")
        return ActionResult(True, f"Welcome to {self.settings.app.school_name} Management System")

    def logout(self) -> ActionResult:
        name = self.user.get("username", "")
        self.state.pop(USER_KEY, None)
        self.router.reset()
        if self._owns_api:
            self.api.close()
        log.info(f"{name} signed out")
        return ActionResult(True, "You have been logged out")

    # --- navigation --------------------------------------------------------------

    def current_view(self) -> View:
        return self.router.current()

    def navigate(self, view: View | str) -> View:
        return self.router.navigate(view)

    def view_student(self, student_id: str, record: Optional[StudentRecord] = None) -> View:
        if record is not None:
            self.store.adopt(record)
        return self.router.navigate(View.PROFILE, student_id)

    def close_profile(self) -> View:
        return self.router.close_profile()

    def selected_student(self) -> Optional[StudentRecord]:
        # always read through the store so the profile never shows a stale copy
        return self.store.find(self.router.selected_id)

    def next_admission_number(self) -> str:
        return self.store.next_admission_number()

    # --- intents -----------------------------------------------------------------

    def register_student(self, form: RegistrationForm) -> ActionResult:
        errors = validate_registration(form)
        if errors:
            log.info(f"Registration blocked: {sorted(errors)}")
            return ActionResult(False, "Please correct the highlighted fields.", errors=errors)

        try:
            server_record = self.api.create_student(build_registration_payload(form))
        except ApiError as e:
            log.warning(f"Registration not saved on server: {e}")
            return ActionResult(False, str(e))

        if server_record is not None and server_record.id in self.store:
            # the server answered with a student we already hold
            record = self.store.get(server_record.id)
            log.warning(f"Server returned existing student {record.admission_number} for a new registration")
            self.router.navigate(View.PROFILE, record.id)
            return ActionResult(True, f"Student {record.full_name} is already registered as {record.admission_number}", record=record)

        try:
            if server_record is not None:
                record = self.store.register(
                    form,
                    now=server_record.registered_at,
                    record_id=server_record.id,
                    admission_number=server_record.admission_number,
                )
            else:
                record = self.store.register(form)
        except RegistrationInvalid as e:
            return ActionResult(False, "Please correct the highlighted fields.", errors=e.errors)

        self.router.navigate(View.PROFILE, record.id)
        return ActionResult(
            True,
            f"Student {record.full_name} successfully added to {self.settings.app.school_name}. "
            f"Admission Number: {record.admission_number}",
            record=record,
        )

    def update_fees(
        self,
        student_id: str,
        *,
        bill: Optional[Amount] = None,
        payment: Optional[Amount] = None,
    ) -> ActionResult:
        try:
            record = self.store.update_fees(student_id, bill=bill, payment=payment)
        except InvalidAmountError as e:
            return ActionResult(False, str(e))
        except StudentNotFound as e:
            log.warning(str(e))
            return ActionResult(False, str(e))
        return ActionResult(True, "Fee status updated successfully", record=record)

    def update_next_of_kin(self, student_id: str, next_of_kin: NextOfKin) -> ActionResult:
        try:
            record = self.store.update_next_of_kin(student_id, next_of_kin)
        except NextOfKinInvalid as e:
            return ActionResult(False, "Please correct the highlighted fields.", errors=e.errors)
        except StudentNotFound as e:
            log.warning(str(e))
            return ActionResult(False, str(e))
        return ActionResult(True, "Next of kin information updated successfully", record=record)

    def list_students(self, search: str = "") -> ActionResult:
        """
        Fetch from the server. An unfiltered fetch syncs the local store
        (keeping this session's fee and next-of-kin changes); a filtered one
        only returns matches. On failure the local store is searched instead
        and the error is reported alongside.
        """
        try:
            remote = self.api.list_students(search)
        except ApiError as e:
            log.warning(f"Falling back to local students: {e}")
            return ActionResult(False, str(e), records=self.store.search(search))
        if not search:
            self.store.sync(remote)
            return ActionResult(True, records=self.store.records)
        return ActionResult(True, records=remote)

    def visible_students(self, fetched: List[StudentRecord], search: str = "") -> List[StudentRecord]:
        """
        What the student list should show for `search`: the fetched rows in
        their live store copies, plus local matches the fetch did not have
        (e.g. registered after the fetch), filtered by name or admission no.
        """
        if not search:
            return self.store.records
        rows = [self.store.find(r.id) or r for r in fetched]
        seen = {r.id for r in rows}
        rows += [r for r in self.store.search(search) if r.id not in seen]
        needle = search.strip().lower()
        # the server may ignore ?search=, so filter on this side as well
        return [r for r in rows if needle in r.full_name.lower() or needle in r.admission_number.lower()]

    def load_dashboard(self) -> ActionResult:
        try:
            stats = self.api.get_dashboard_stats()
        except ApiError as e:
            log.warning(f"Dashboard stats unavailable, computing locally: {e}")
            return ActionResult(False, str(e), stats=DashboardStats.from_records(self.store.records))
        return ActionResult(True, stats=stats)
