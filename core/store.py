# core/store.py
"""
In-memory student record store.

The store only exposes intent operations (register, update_fees,
update_next_of_kin). Records are frozen; every change swaps in a new
record built with dataclasses.replace, which keeps the admission number
and the derived balance consistent in one place.
"""

from __future__ import annotations
import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from core import fees
from core.admission import DEFAULT_PREFIX, generate_admission_number
from core.errors import NextOfKinInvalid, RegistrationInvalid, StudentNotFound
from core.fees import Amount
from core.models import FeeStatus, Gender, NextOfKin, RegistrationForm, StudentRecord
from core.validation import validate_next_of_kin, validate_registration

log = logging.getLogger(__name__)


class StudentStore:
    def __init__(self, records: Iterable[StudentRecord] = (), admission_prefix: str = DEFAULT_PREFIX):
        self.admission_prefix = admission_prefix
        self._records: List[StudentRecord] = []
        self._index: Dict[str, int] = {}
        self.replace_all(records)

    # --- reads ---------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, student_id: object) -> bool:
        return student_id in self._index

    @property
    def records(self) -> List[StudentRecord]:
        return list(self._records)

    def get(self, student_id: str) -> StudentRecord:
        try:
            return self._records[self._index[student_id]]
        except KeyError:
            raise StudentNotFound(student_id) from None

    def find(self, student_id: Optional[str]) -> Optional[StudentRecord]:
        if student_id is None or student_id not in self._index:
            return None
        return self._records[self._index[student_id]]

    def search(self, term: str = "") -> List[StudentRecord]:
        """Case-insensitive substring match on full name or admission number."""
        needle = (term or "").strip().lower()
        if not needle:
            return self.records
        return [
            r for r in self._records
            if needle in r.full_name.lower() or needle in r.admission_number.lower()
        ]

    def next_admission_number(self, year: Optional[int] = None) -> str:
        return generate_admission_number(len(self._records), year or date.today().year, self.admission_prefix)

    # --- intent operations ---------------------------------------------------

    def register(
        self,
        form: RegistrationForm,
        *,
        now: Optional[datetime] = None,
        record_id: Optional[str] = None,
        admission_number: Optional[str] = None,
    ) -> StudentRecord:
        """Validate and add a new student with a zeroed fee ledger."""
        errors = validate_registration(form)
        if errors:
            raise RegistrationInvalid(errors)

        now = now or datetime.now()
        record_id = record_id or uuid.uuid4().hex
        if record_id in self._index:
            raise ValueError(f"Duplicate student id: {record_id}")

        kin = form.next_of_kin.cleaned()
        record = StudentRecord(
            id=record_id,
            admission_number=admission_number or self.next_admission_number(now.year),
            full_name=form.full_name.strip(),
            gender=Gender.parse(form.gender),
            date_of_birth=form.date_of_birth,
            student_class=form.student_class.strip(),
            nemis_number=form.nemis_number,
            registered_at=now,
            fee_status=FeeStatus.zero(),
            next_of_kin=kin,
        )
        self._append(record)
        log.info(f"Registered student {record.full_name} as {record.admission_number}")
        return record

    def update_fees(
        self,
        student_id: str,
        *,
        bill: Optional[Amount] = None,
        payment: Optional[Amount] = None,
    ) -> StudentRecord:
        """Apply a bill and/or a payment; both are additive."""
        if bill is None and payment is None:
            raise ValueError("Nothing to apply: give a bill or a payment amount")
        current = self.get(student_id)
        status = current.fee_status
        if bill is not None:
            status = fees.apply_bill(status, bill)
        if payment is not None:
            status = fees.apply_payment(status, payment)
        updated = replace(current, fee_status=status)
        self._put(updated)
        log.info(
            f"Fees updated for {current.admission_number}: billed={status.total_billed} "
            f"paid={status.total_paid} balance={status.balance}"
        )
        return updated

    def update_next_of_kin(self, student_id: str, next_of_kin: NextOfKin) -> StudentRecord:
        errors = validate_next_of_kin(next_of_kin)
        if errors:
            raise NextOfKinInvalid(errors)
        current = self.get(student_id)
        updated = replace(current, next_of_kin=next_of_kin.cleaned())
        self._put(updated)
        log.info(f"Next of kin updated for {current.admission_number}")
        return updated

    def adopt(self, record: StudentRecord) -> StudentRecord:
        """Keep a record the server sent (e.g. from a filtered query) if it is new."""
        if record.id in self._index:
            return self.get(record.id)
        self._append(record)
        return record

    def sync(self, records: Iterable[StudentRecord]) -> None:
        """
        Take the server's list as the set of students, but keep the fee
        ledger and next of kin already held here for students we know
        (matched by id, then by admission number). The server has no way
        to change either, so its copies of them are never newer.
        """
        by_number = {r.admission_number: r for r in self._records if r.admission_number}
        merged = []
        for remote in records:
            local = self.find(remote.id) or by_number.get(remote.admission_number)
            if local is not None:
                remote = replace(
                    remote,
                    fee_status=local.fee_status,
                    next_of_kin=local.next_of_kin if local.next_of_kin is not None else remote.next_of_kin,
                )
            merged.append(remote)
        self.replace_all(merged)
        log.info(f"Synced {len(self._records)} students from server")

    def replace_all(self, records: Iterable[StudentRecord]) -> None:
        """Adopt an authoritative list (e.g. the server's)."""
        self._records = []
        self._index = {}
        for r in records:
            if r.id in self._index:
                # duplicate id in the feed: last one wins
                self._records[self._index[r.id]] = r
            else:
                self._append(r)

    # --- internals -----------------------------------------------------------

    def _append(self, record: StudentRecord) -> None:
        self._index[record.id] = len(self._records)
        self._records.append(record)

    def _put(self, record: StudentRecord) -> None:
        pos = self._index[record.id]
        if self._records[pos].admission_number != record.admission_number:
            raise ValueError("Admission numbers are immutable")
        self._records[pos] = record
