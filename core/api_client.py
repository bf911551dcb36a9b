# core/api_client.py
from __future__ import annotations
import logging
import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import httpx

from core.errors import ApiConnectionError, ApiResponseError
from core.models import DashboardStats, FeeStatus, Gender, NextOfKin, RegistrationForm, StudentRecord

log = logging.getLogger(__name__)

STUDENTS_PATH = "/api/students"
SUCCESS_CODE = "200"
INVALID_RESPONSE = "Server returned an invalid response"


# ────────────────────────────────────────────────────────────────────────────────
# Wire helpers
# ────────────────────────────────────────────────────────────────────────────────

def build_registration_payload(form: RegistrationForm) -> Dict[str, Any]:
    """Flatten the form into the DTO the server expects."""
    kin = form.next_of_kin
    dob = form.date_of_birth
    return {
        "fullName": form.full_name.strip(),
        "gender": form.gender,
        "dateOfBirth": dob.isoformat() if isinstance(dob, date) else (dob or ""),
        "studentClass": form.student_class.strip(),
        "nemisNumber": form.nemis_number,
        "kinName": kin.name.strip(),
        "kinRelationship": kin.relationship.strip(),
        "kinContact": kin.phone_number.strip(),
        "kinEmail": kin.email.strip(),
        "kinAddress": kin.address.strip(),
        "totalBilled": 0,
        "totalPaid": 0,
    }


def _parse_date(value) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _parse_datetime(value) -> datetime:
    parsed = value if isinstance(value, datetime) else None
    if parsed is None and value:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            log.warning(f"Unparseable registration timestamp {value!r}")
    if parsed is None:
        return datetime.now()
    # records are compared and sorted together, so keep everything naive local time
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_student(data: Dict[str, Any]) -> StudentRecord:
    """
    Build a StudentRecord from a server object.

    Accepts nested feeStatus/nextOfKin objects as well as the flattened
    totalBilled/totalPaid/kin* keys.
    """
    fee = data.get("feeStatus") or {}
    fee_status = FeeStatus(
        total_billed=fee.get("totalBilled", data.get("totalBilled")) or 0,
        total_paid=fee.get("totalPaid", data.get("totalPaid")) or 0,
    )

    kin_obj = data.get("nextOfKin")
    if isinstance(kin_obj, dict):
        kin_fields = {
            "name": kin_obj.get("name"),
            "relationship": kin_obj.get("relationship"),
            "phone_number": kin_obj.get("phoneNumber"),
            "email": kin_obj.get("email"),
            "address": kin_obj.get("address"),
        }
    else:
        kin_fields = {
            "name": data.get("kinName"),
            "relationship": data.get("kinRelationship"),
            "phone_number": data.get("kinContact"),
            "email": data.get("kinEmail"),
            "address": data.get("kinAddress"),
        }
    next_of_kin = None
    if any(kin_fields.values()):
        next_of_kin = NextOfKin(**{k: str(v or "") for k, v in kin_fields.items()})

    admission_number = str(data.get("admissionNumber") or "")
    record_id = data.get("id") or admission_number
    if not record_id:
        record_id = uuid.uuid4().hex
        log.warning(f"Student {data.get('fullName')!r} has no id or admission number; using {record_id}")

    return StudentRecord(
        id=str(record_id),
        admission_number=admission_number,
        full_name=str(data.get("fullName") or ""),
        gender=Gender.parse(data.get("gender")),
        date_of_birth=_parse_date(data.get("dateOfBirth")),
        student_class=str(data.get("studentClass") or ""),
        nemis_number=str(data.get("nemisNumber") or ""),
        registered_at=_parse_datetime(data.get("registeredDate") or data.get("createdAt")),
        fee_status=fee_status,
        next_of_kin=next_of_kin,
    )


# ────────────────────────────────────────────────────────────────────────────────
# Client
# ────────────────────────────────────────────────────────────────────────────────

class StudentApiClient:
    def __init__(self, base_url: str, timeout: float = 10.0, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )
        log.info(f"StudentApiClient initialized with base_url: {self.base_url}")

    def close(self) -> None:
        self._client.close()

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    def __enter__(self) -> "StudentApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            log.info(f"{method} {self.base_url}{path}")
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            log.error(f"Timeout calling {path}: {e}")
            raise ApiConnectionError() from e
        except httpx.RequestError as e:
            log.error(f"Request error calling {path}: {type(e).__name__}: {e}")
            raise ApiConnectionError() from e

        if response.is_error:
            message = self._envelope_message(response) or f"Server returned HTTP {response.status_code}"
            log.warning(f"HTTP {response.status_code} from {path}: {message}")
            raise ApiResponseError(message, status_code=response.status_code)
        return response

    @staticmethod
    def _envelope_message(response: httpx.Response) -> Optional[str]:
        try:
            header = (response.json() or {}).get("header") or {}
        except (ValueError, AttributeError):
            return None
        return header.get("message")

    def _envelope_body(self, response: httpx.Response, default_message: str) -> Any:
        try:
            data = response.json()
        except ValueError as e:
            raise ApiResponseError(INVALID_RESPONSE, status_code=response.status_code) from e
        if not isinstance(data, dict):
            raise ApiResponseError(INVALID_RESPONSE, status_code=response.status_code)
        header = data.get("header") or {}
        code = header.get("responseCode")
        if code is not None and str(code) != SUCCESS_CODE:
            raise ApiResponseError(header.get("message") or default_message, response_code=str(code))
        return data.get("body")

    # --- endpoints ---------------------------------------------------------------

    def get_dashboard_stats(self) -> DashboardStats:
        response = self._request("GET", f"{STUDENTS_PATH}/dashboard-stats")
        body = self._envelope_body(response, "Failed to load dashboard statistics")
        try:
            # pydantic's ValidationError is a ValueError
            return DashboardStats.model_validate(body or {})
        except ValueError as e:
            log.warning(f"Bad dashboard stats from server: {e}")
            raise ApiResponseError(INVALID_RESPONSE, status_code=response.status_code) from e

    def list_students(self, search: str = "") -> List[StudentRecord]:
        params = {"search": search} if search else None
        response = self._request("GET", STUDENTS_PATH, params=params)
        body = self._envelope_body(response, "Failed to load students")
        if body is not None and not isinstance(body, list):
            raise ApiResponseError(INVALID_RESPONSE, status_code=response.status_code)
        records = []
        for item in body or []:
            if not isinstance(item, dict):
                log.warning(f"Skipping non-object student row: {item!r}")
                continue
            try:
                records.append(parse_student(item))
            except (ValueError, TypeError, AttributeError) as e:
                log.warning(f"Skipping unreadable student row {item.get('admissionNumber')!r}: {e}")
        log.info(f"Fetched {len(records)} students")
        return records

    def create_student(self, payload: Dict[str, Any]) -> Optional[StudentRecord]:
        """POST a registration. Returns the server's record when it sends one."""
        response = self._request("POST", f"{STUDENTS_PATH}/create", json=payload)
        try:
            data = response.json()
        except ValueError:
            # success status with no JSON body
            return None
        if isinstance(data, dict) and "header" in data:
            body = self._envelope_body(response, "Failed to register student")
        else:
            body = data
        if isinstance(body, dict) and body.get("admissionNumber"):
            try:
                return parse_student(body)
            except (ValueError, TypeError, AttributeError) as e:
                log.warning(f"Bad student record from server: {e}")
                raise ApiResponseError(INVALID_RESPONSE, status_code=response.status_code) from e
        return None
