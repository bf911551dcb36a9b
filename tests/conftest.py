import json
from datetime import date

import httpx
import pytest

from core.api_client import StudentApiClient
from core.auth import AdminCredentials
from core.models import NextOfKin, RegistrationForm
from core.settings import load_settings

BASE_URL = "http://testserver"


@pytest.fixture(scope="session")
def settings():
    """Settings from the bundled config/settings.yaml, pointed at a fake server."""
    s = load_settings()
    s.api.base_url = BASE_URL
    return s


@pytest.fixture(scope="session")
def credentials(settings):
    # bcrypt hashing is slow; share one instance across the test session
    return AdminCredentials(settings.auth)


@pytest.fixture()
def valid_form():
    return RegistrationForm(
        full_name="Jane Wanjiku",
        gender="Female",
        date_of_birth=date(2015, 3, 14),
        student_class="Grade 4",
        nemis_number="ABC12345678",
        next_of_kin=NextOfKin(
            name="Mary Wanjiku",
            relationship="Mother",
            phone_number="0712345678",
            email="mary@example.com",
            address="Kilimani, Nairobi",
        ),
    )


def envelope(body, code="200", message="Success"):
    return {"header": {"responseCode": code, "message": message}, "body": body}


class FakeServer:
    """
    Minimal in-process stand-in for the students backend, served through
    httpx.MockTransport. Records every request it sees.
    """

    def __init__(self):
        self.requests = []
        self.students = []
        self.stats = {
            "totalStudents": 0, "maleStudents": 0, "femaleStudents": 0,
            "registationsThiMonth": 0, "malePercentage": 0.0, "femalePercentage": 0.0,
        }
        self.down = False
        self.create_response = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)
        path = request.url.path
        if request.method == "GET" and path == "/api/students/dashboard-stats":
            return httpx.Response(200, json=envelope(self.stats))
        if request.method == "GET" and path == "/api/students":
            term = request.url.params.get("search", "").lower()
            rows = [s for s in self.students if term in s["fullName"].lower()]
            return httpx.Response(200, json=envelope(rows))
        if request.method == "POST" and path == "/api/students/create":
            payload = json.loads(request.content)
            if self.create_response is not None:
                return self.create_response
            n = len(self.students) + 1
            created = dict(payload, id=f"srv-{n}", admissionNumber=f"AHP2024{n:03d}",
                           registeredDate="2024-05-02T10:00:00")
            self.students.append(created)
            return httpx.Response(201, json=envelope(created))
        return httpx.Response(404, json=envelope(None, code="404", message="Not found"))

    def client(self) -> StudentApiClient:
        return StudentApiClient(BASE_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture()
def server():
    return FakeServer()


@pytest.fixture()
def api(server):
    client = server.client()
    yield client
    client.close()
