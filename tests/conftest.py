import json
import os
import re

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["STATE_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["UPSTREAM_API_URL"] = "http://leave-api.test"
os.environ["RETRY_WAIT_SECONDS"] = "0"

from fastapi.testclient import TestClient

from leave_portal.database import Base
from leave_portal.main import app
from leave_portal.models import portal_state  # noqa: F401
from leave_portal.routers.deps import get_api_client
from leave_portal.schemas.auth import AuthUser
from leave_portal.services.api_client import LeaveApiClient
from leave_portal.store import StateRepository, Store
from leave_portal.store.actions import LoginFulfilled

UPSTREAM_URL = "http://leave-api.test"

USERS = {
    "asha@college.edu": {"password": "student123", "userId": "S1", "name": "Asha Patel", "role": "STUDENT"},
    "rao@college.edu": {"password": "teacher123", "userId": "T1", "name": "Mr. Rao", "role": "TEACHER"},
    "admin@college.edu": {"password": "admin123", "userId": "A1", "name": "Admin", "role": "ADMIN"},
}

ADMIN_ID_FIELDS = {
    "departments": "departmentId",
    "classes": "classId",
    "teachers": "teacherId",
    "students": "studentId",
    "class-teachers": "classTeacherId",
}

ADMIN_PATH = re.compile(r"^/api/admin/(departments|classes|teachers|students|class-teachers)(?:/([^/]+))?$")


def token_for(email):
    return f"token-{USERS[email]['userId']}"


class FakeBackend:
    """In-memory leave-management API. Every request is recorded in `calls`."""

    def __init__(self):
        self.calls = []
        self._failures = {}
        self._raw_bodies = {}
        self.tokens = {token_for(email): email for email in USERS}
        self.leaves = []
        self._next_leave_id = 1
        self.ui_settings = {}
        self.admin = {
            "departments": [
                {"departmentId": 1, "departmentName": "Computer Science"},
                {"departmentId": 2, "departmentName": "Mechanical"},
            ],
            "classes": [
                {"classId": 1, "className": "CS-A", "departmentId": 1, "departmentName": "Computer Science"},
            ],
            "teachers": [
                {"teacherId": 1, "name": "Mr. Rao", "email": "rao@college.edu"},
            ],
            "students": [
                {"studentId": 1, "name": "Asha Patel", "email": "asha@college.edu"},
                {"studentId": 2, "name": "Ben Ong", "email": "ben@college.edu"},
            ],
            "class-teachers": [],
        }

    # --- test helpers ---
    def fail(self, method, path, status=500, message="Internal server error", times=None):
        """Makes `method path` fail. status="down" simulates an unreachable server."""
        self._failures[(method, path)] = [status, message, times]

    def respond_raw(self, method, path, text):
        """Answers `method path` with 200 and a body that is not JSON."""
        self._raw_bodies[(method, path)] = text

    def calls_to(self, method, path):
        return [c for c in self.calls if c[0] == method and c[1] == path]

    def add_leave(self, **fields):
        leave = {
            "leaveId": self._next_leave_id,
            "applicantId": "S1",
            "applicantName": "Asha Patel",
            "applicantRole": "STUDENT",
            "className": "CS-A",
            "departmentName": "Computer Science",
            "fromDate": "2024-01-10",
            "toDate": "2024-01-12",
            "subject": "Flu",
            "reason": "Sick leave",
            "status": "PENDING",
            "reportedToName": "Mr. Rao",
            "appliedAt": "2024-01-05T09:30:00",
        }
        leave.update(fields)
        self._next_leave_id += 1
        self.leaves.append(leave)
        return leave

    def _take_failure(self, method, path):
        failure = self._failures.get((method, path))
        if failure is None:
            return None
        status, message, times = failure
        if times is not None:
            if times <= 1:
                del self._failures[(method, path)]
            else:
                failure[2] = times - 1
        return status, message

    # --- transport ---
    def handle(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        body = json.loads(request.content) if request.content else None
        self.calls.append((method, path, body))

        failure = self._take_failure(method, path)
        if failure is not None:
            status, message = failure
            if status == "down":
                raise httpx.ConnectError("Connection refused", request=request)
            return httpx.Response(status, json={"message": message})
        if (method, path) in self._raw_bodies:
            return httpx.Response(200, text=self._raw_bodies[(method, path)])

        if path == "/api/auth/login":
            return self._login(body)
        if path == "/api/auth/register":
            return httpx.Response(201, json={"message": "User registered successfully"})

        auth = request.headers.get("Authorization", "")
        email = self.tokens.get(auth.replace("Bearer ", "", 1))
        if email is None:
            return httpx.Response(401, json={"message": "Unauthorized"})
        user = dict(USERS[email], email=email)

        if path == "/api/auth/update-password":
            if body["currentPassword"] != USERS[email]["password"]:
                return httpx.Response(400, json={"message": "Current password is incorrect"})
            return httpx.Response(200, json={"message": "Password updated successfully"})
        if path == "/api/settings":
            if method == "PUT":
                self.ui_settings = body["uiSettings"]
                return httpx.Response(200, json={"message": "Settings saved"})
            return httpx.Response(200, json={"uiSettings": self.ui_settings})
        if path == "/api/leaves/apply":
            return self._apply(user, body)
        if path == "/api/leaves/my-leaves":
            return httpx.Response(200, json=[l for l in self.leaves if l["applicantId"] == user["userId"]])
        if path in ("/api/leaves/all", "/api/leaves/pending"):
            leaves = self.leaves if path.endswith("all") else [l for l in self.leaves if l["status"] == "PENDING"]
            return httpx.Response(200, json=leaves)
        if path == "/api/leaves/approve":
            return self._process(user, body)
        if path in ("/api/dashboard/stats", "/api/admin/leave-statistics"):
            mine = self.leaves if user["role"] != "STUDENT" else [l for l in self.leaves if l["applicantId"] == user["userId"]]
            return httpx.Response(200, json=self._leave_counts(mine))
        if path == "/api/hierarchy/tree":
            return httpx.Response(200, json=self._tree())

        match = ADMIN_PATH.match(path)
        if match:
            return self._admin(method, match.group(1), match.group(2), body)
        return httpx.Response(404, json={"message": f"No route for {method} {path}"})

    def _login(self, body):
        user = USERS.get(body.get("email"))
        if user is None or user["password"] != body.get("password"):
            return httpx.Response(401, json={"message": "Invalid email or password"})
        return httpx.Response(200, json={
            "accessToken": token_for(body["email"]),
            "role": user["role"],
            "userId": user["userId"],
            "name": user["name"],
            "email": body["email"],
        })

    def _apply(self, user, body):
        leave = self.add_leave(
            applicantId=user["userId"],
            applicantName=user["name"],
            applicantRole=user["role"],
            fromDate=body["fromDate"],
            toDate=body["toDate"],
            subject=body["subject"],
            reason=body["reason"],
        )
        return httpx.Response(201, json=leave)

    def _process(self, user, body):
        leave = next((l for l in self.leaves if str(l["leaveId"]) == str(body["leaveId"])), None)
        if leave is None:
            return httpx.Response(404, json={"message": "Leave request not found"})
        if leave["status"] != "PENDING":
            return httpx.Response(400, json={"message": "Leave request has already been processed"})
        if body["action"] == "APPROVE":
            leave.update(status="APPROVED", approvedByName=user["name"], approvedAt="2024-01-06T10:00:00")
        else:
            if not body.get("rejectionReason"):
                return httpx.Response(400, json={"message": "Rejection reason is required"})
            leave.update(
                status="REJECTED",
                rejectionReason=body["rejectionReason"],
                rejectedByName=user["name"],
                rejectedAt="2024-01-06T10:00:00",
            )
        return httpx.Response(200, json=leave)

    @staticmethod
    def _leave_counts(leaves):
        return {
            "totalLeaves": len(leaves),
            "pendingLeaves": sum(1 for l in leaves if l["status"] == "PENDING"),
            "approvedLeaves": sum(1 for l in leaves if l["status"] == "APPROVED"),
            "rejectedLeaves": sum(1 for l in leaves if l["status"] == "REJECTED"),
        }

    @staticmethod
    def _tree():
        return {
            "id": None, "name": "College", "type": "ROOT",
            "children": [{
                "id": "1", "name": "Computer Science", "type": "DEPARTMENT",
                "children": [{
                    "id": "1", "name": "CS-A", "type": "CLASS",
                    "children": [
                        {"id": "1", "name": "Mr. Rao", "type": "TEACHER", "children": []},
                        {"id": "1", "name": "Asha Patel", "type": "STUDENT", "children": []},
                        {"id": "2", "name": "Ben Ong", "type": "STUDENT", "children": []},
                    ],
                }],
            }],
        }

    def _admin(self, method, resource, record_id, body):
        records = self.admin[resource]
        id_field = ADMIN_ID_FIELDS[resource]
        if record_id is None:
            if method == "GET":
                return httpx.Response(200, json=records)
            record = dict(body, **{id_field: max((r[id_field] for r in records), default=0) + 1})
            records.append(record)
            return httpx.Response(201, json=record)

        record = next((r for r in records if str(r[id_field]) == record_id), None)
        if record is None:
            return httpx.Response(404, json={"message": "Record not found"})
        if method == "DELETE":
            records.remove(record)
            return httpx.Response(200, json={"message": "Deleted successfully"})
        record.update(body)
        return httpx.Response(200, json=record)


@pytest.fixture(scope="function")
def backend():
    return FakeBackend()


@pytest.fixture(scope="function")
def make_client(backend):
    """Builds an upstream client wired to the fake backend."""
    def _make(token_provider=None):
        return LeaveApiClient(
            base_url=UPSTREAM_URL,
            token_provider=token_provider,
            transport=httpx.MockTransport(backend.handle),
        )
    return _make


@pytest.fixture(scope="function")
def store():
    """A fresh session store over its own in-memory state database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield Store(StateRepository(TestingSessionLocal))
    engine.dispose()


@pytest.fixture(scope="function")
def sign_in(store):
    """Puts a signed-in user into the store without going through the login endpoint."""
    def _sign_in(email):
        data = USERS[email]
        user = AuthUser(user_id=data["userId"], name=data["name"], email=email, role=data["role"])
        store.dispatch(LoginFulfilled(user=user, token=token_for(email)))
        return user
    return _sign_in


@pytest.fixture(scope="function")
def client(backend, store):
    """TestClient whose upstream calls go to the fake backend and whose session lives in `store`."""
    async def override_get_api_client():
        async with LeaveApiClient(
            base_url=UPSTREAM_URL,
            token_provider=store.token,
            transport=httpx.MockTransport(backend.handle),
        ) as api:
            yield api

    app.dependency_overrides[get_api_client] = override_get_api_client
    with TestClient(app) as c:
        app.state.store = store
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def login(client):
    def _login(email):
        response = client.post(
            "/portal/auth/login",
            json={"email": email, "password": USERS[email]["password"]},
        )
        assert response.status_code == 200, response.text
        return response.json()
    return _login
