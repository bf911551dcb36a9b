# core/models.py
"""
Data models for student records and fee status.
Contains enums, dataclasses and the dashboard statistics model.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# ENUMS
# ============================================================================

class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"

    @classmethod
    def parse(cls, value) -> Optional["Gender"]:
        """Case-insensitive lookup; returns None for blank or unknown values."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for g in cls:
            if g.value.lower() == text:
                return g
        return None


# ============================================================================
# DATA CLASSES
# ============================================================================

def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value if value is not None else 0))
    except InvalidOperation as e:
        raise ValueError(f"Not a decimal amount: {value!r}") from e


@dataclass(frozen=True)
class FeeStatus:
    """Billed/paid pair. The balance is always derived, never stored."""
    total_billed: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")

    def __post_init__(self):
        billed = _as_decimal(self.total_billed)
        paid = _as_decimal(self.total_paid)
        if billed < 0 or paid < 0:
            raise ValueError("Fee totals cannot be negative")
        object.__setattr__(self, "total_billed", billed)
        object.__setattr__(self, "total_paid", paid)

    @property
    def balance(self) -> Decimal:
        return self.total_billed - self.total_paid

    @classmethod
    def zero(cls) -> "FeeStatus":
        return cls(Decimal("0"), Decimal("0"))


@dataclass(frozen=True)
class NextOfKin:
    """Guardian/contact attached to a student. Absence is modelled as None."""
    name: str
    relationship: str
    phone_number: str
    email: str = ""
    address: str = ""

    def cleaned(self) -> "NextOfKin":
        return NextOfKin(
            name=self.name.strip(),
            relationship=self.relationship.strip(),
            phone_number=self.phone_number.strip(),
            email=self.email.strip(),
            address=self.address.strip(),
        )


@dataclass
class RegistrationForm:
    """Raw values captured by the registration screen."""
    full_name: str = ""
    gender: str = ""
    date_of_birth: Optional[date] = None
    student_class: str = ""
    nemis_number: str = ""
    next_of_kin: NextOfKin = field(default_factory=lambda: NextOfKin("", "", "", "", ""))


@dataclass(frozen=True)
class StudentRecord:
    id: str
    admission_number: str
    full_name: str
    gender: Gender
    date_of_birth: Optional[date]
    student_class: str
    nemis_number: str
    registered_at: datetime
    fee_status: FeeStatus = field(default_factory=FeeStatus.zero)
    next_of_kin: Optional[NextOfKin] = None


# ============================================================================
# DASHBOARD
# ============================================================================

class DashboardStats(BaseModel):
    """Aggregates shown on the dashboard; wire names follow the server."""
    model_config = ConfigDict(populate_by_name=True)

    total_students: int = Field(0, alias="totalStudents")
    male_students: int = Field(0, alias="maleStudents")
    female_students: int = Field(0, alias="femaleStudents")
    # the server spells this key "registationsThiMonth"
    registrations_this_month: int = Field(0, alias="registationsThiMonth")
    male_percentage: float = Field(0.0, alias="malePercentage")
    female_percentage: float = Field(0.0, alias="femalePercentage")

    @classmethod
    def from_records(cls, records: Iterable[StudentRecord], today: Optional[date] = None) -> "DashboardStats":
        """Compute the same aggregates locally from the records in the store."""
        today = today or date.today()
        records = list(records)
        total = len(records)
        male = sum(1 for r in records if r.gender == Gender.MALE)
        female = sum(1 for r in records if r.gender == Gender.FEMALE)
        this_month = sum(
            1 for r in records
            if r.registered_at.year == today.year and r.registered_at.month == today.month
        )
        return cls(
            total_students=total,
            male_students=male,
            female_students=female,
            registrations_this_month=this_month,
            male_percentage=(male * 100.0 / total) if total else 0.0,
            female_percentage=(female * 100.0 / total) if total else 0.0,
        )
