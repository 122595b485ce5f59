"""
API tests for the applicants and auth routers
"""
from datetime import date, datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import settings
from src.caseflow.api.dependencies import get_db, get_merge_service
from src.caseflow.api.main import app
from src.caseflow.db.base import Base
from src.caseflow.db.models import Applicant, CaseEvent, FieldVisit
from src.caseflow.services.errors import MergeReassignmentError


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)

    def override_get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield factory
    app.dependency_overrides.clear()
    Base.metadata.drop_all(engine)


@pytest.fixture
def client(session_factory):
    return TestClient(app)


@pytest.fixture
def seeded(session_factory):
    with session_factory() as db:
        db.add_all([
            Applicant(id="M", full_name="John Smith", property_address="12 Oak Ave",
                      phone_number="510-555-0100", created_at=datetime(2024, 3, 2), comments="Called once"),
            Applicant(id="D", full_name="john smith", property_address="98 Bay Rd",
                      phone_number="510-555-0199", created_at=datetime(2024, 3, 1)),
            Applicant(id="X", full_name="Rosa Vega", property_address="5 Elm St",
                      created_at=datetime(2024, 2, 1), status="closed"),
        ])
        db.flush()
        db.add_all([
            FieldVisit(applicant_id="M", visit_outcome="attempt", visit_date=date(2024, 3, 5)),
            FieldVisit(applicant_id="D", visit_outcome="engagement", visit_date=date(2024, 3, 6)),
            FieldVisit(applicant_id="D", visit_outcome="attempt", visit_date=date(2024, 3, 4)),
            CaseEvent(applicant_id="D", event_type="call"),
        ])
        db.commit()
    return session_factory


def sign_token(claims, expires_in=timedelta(minutes=5)):
    """Sign a token the way the identity provider does."""
    payload = dict(claims, exp=datetime.now(timezone.utc) + expires_in)
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def auth_header(**claims):
    token = sign_token(claims)
    return {"Authorization": f"Bearer {token}"}


ADMIN = {"sub": "u-admin", "email": "ops@caseflow.org", "role": "admin"}
STAFF = {"sub": "u-staff", "email": "worker@caseflow.org", "role": "staff"}


class TestAuth:

    def test_missing_token(self, client):
        response = client.get("/api/v1/applicants/duplicates")
        assert response.status_code == 401

    def test_bad_token(self, client):
        response = client.get(
            "/api/v1/applicants/duplicates",
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    def test_expired_token(self, client):
        token = sign_token({"sub": "u-admin", "role": "admin"}, expires_in=timedelta(minutes=-1))
        response = client.get("/api/v1/applicants/duplicates", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_without_subject(self, client):
        response = client.get(
            "/api/v1/auth/users/me",
            headers={"Authorization": f"Bearer {sign_token({'role': 'admin'})}"},
        )
        assert response.status_code == 401

    def test_non_bearer_scheme(self, client):
        response = client.get(
            "/api/v1/auth/users/me",
            headers={"Authorization": f"Basic {sign_token(ADMIN)}"},
        )
        assert response.status_code == 401

    def test_openapi_uses_http_bearer(self, client):
        document = client.get("/openapi.json").json()
        schemes = document["components"]["securitySchemes"]

        assert list(schemes) == ["HTTPBearer"]
        assert schemes["HTTPBearer"]["scheme"] == "bearer"
        assert "/api/v1/auth/token" not in document["paths"]

    def test_non_admin_forbidden(self, client):
        response = client.get("/api/v1/applicants/duplicates", headers=auth_header(**STAFF))
        assert response.status_code == 403
        assert response.json()["detail"] == "Administrator access required"

    def test_admin_by_email_allowlist(self, client):
        response = client.get(
            "/api/v1/applicants/duplicates",
            headers=auth_header(sub="u-1", email="Admin@caseflow.org"),
        )
        assert response.status_code == 200

    def test_users_me(self, client):
        response = client.get("/api/v1/auth/users/me", headers=auth_header(**STAFF))

        assert response.status_code == 200
        assert response.json() == {
            "user_id": "u-staff",
            "email": "worker@caseflow.org",
            "role": "staff",
            "is_admin": False,
        }


class TestDuplicatesEndpoint:

    def test_lists_groups(self, client, seeded):
        response = client.get("/api/v1/applicants/duplicates", headers=auth_header(**ADMIN))

        assert response.status_code == 200
        groups = response.json()["data"]
        assert len(groups) == 1
        assert groups[0]["matchType"] == "name"
        assert groups[0]["matchValue"] == "John Smith"

        members = groups[0]["applications"]
        assert [m["id"] for m in members] == ["M", "D"]
        assert members[1]["visit_count"] == 2
        assert members[1]["event_count"] == 1
        assert members[1]["document_count"] == 0

    def test_empty(self, client):
        response = client.get("/api/v1/applicants/duplicates", headers=auth_header(**ADMIN))
        assert response.json() == {"data": []}


class TestMergeEndpoint:

    def test_merge(self, client, seeded):
        response = client.post(
            "/api/v1/applicants/M/merge",
            json={"duplicateId": "D"},
            headers=auth_header(**ADMIN),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Applications merged successfully"
        assert body["data"]["id"] == "M"

        with seeded() as db:
            assert db.get(Applicant, "D") is None

        visits = client.get("/api/v1/applicants/M/visits").json()
        assert visits["visitCount"] == 3

    def test_missing_duplicate_id(self, client, seeded):
        response = client.post("/api/v1/applicants/M/merge", json={}, headers=auth_header(**ADMIN))

        assert response.status_code == 400
        assert response.json()["detail"] == "duplicateId is required"

    def test_self_merge(self, client, seeded):
        response = client.post(
            "/api/v1/applicants/M/merge",
            json={"duplicateId": "M"},
            headers=auth_header(**ADMIN),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot merge an application with itself"

    def test_unknown_master(self, client, seeded):
        response = client.post(
            "/api/v1/applicants/nope/merge",
            json={"duplicateId": "D"},
            headers=auth_header(**ADMIN),
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Master application not found"

    def test_non_admin_cannot_merge(self, client, seeded):
        response = client.post(
            "/api/v1/applicants/M/merge",
            json={"duplicateId": "D"},
            headers=auth_header(**STAFF),
        )

        assert response.status_code == 403
        with seeded() as db:
            assert db.get(Applicant, "D") is not None

    def test_transient_failure_is_503(self, client, seeded):
        class TimingOutMergeService:
            def merge(self, master_id, duplicate_id):
                try:
                    raise OperationalError("UPDATE field_visits", {}, Exception("statement timeout"))
                except OperationalError as e:
                    raise MergeReassignmentError("field visits", e) from e

        app.dependency_overrides[get_merge_service] = lambda: TimingOutMergeService()

        response = client.post(
            "/api/v1/applicants/M/merge",
            json={"duplicateId": "D"},
            headers=auth_header(**ADMIN),
        )

        assert response.status_code == 503
        assert response.json()["detail"] == "Failed to merge field visits"


class TestSearchAndVisits:

    def test_search(self, client, seeded):
        response = client.get("/api/v1/applicants/search", params={"q": "smith"})

        assert response.status_code == 200
        assert [a["id"] for a in response.json()["data"]] == ["M", "D"]

    def test_search_short_query(self, client, seeded):
        response = client.get("/api/v1/applicants/search", params={"q": " s "})
        assert response.json() == {"data": []}

    def test_visits(self, client, seeded):
        response = client.get("/api/v1/applicants/D/visits")

        assert response.status_code == 200
        body = response.json()
        assert body["applicant"]["id"] == "D"
        assert [v["visit_outcome"] for v in body["visits"]] == ["engagement", "attempt"]
        assert (body["visitCount"], body["attemptCount"], body["engagementCount"]) == (2, 1, 1)

    def test_visits_unknown_applicant(self, client, seeded):
        response = client.get("/api/v1/applicants/zzz/visits")

        assert response.status_code == 404
        assert response.json()["detail"] == "Applicant not found: zzz"
