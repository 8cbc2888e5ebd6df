from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import OperationalError

from complaint_intake.dependencies import get_repository
from complaint_intake.main import app
from complaint_intake.models.complaint import Complaint
from complaint_intake.schemas.complaint import ComplaintResponse


def submit(client, **overrides):
    data = {
        "state": "MI",
        "productId": "PRD-100",
        "complaintDetails": "Seal was broken on arrival",
    }
    data.update(overrides)
    return client.post("/api/complaints", data=data)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Complaint API is running"}


def test_login_success(client):
    response = client.post("/api/login", json={"password": "staff-secret"})
    assert response.status_code == 200
    assert response.json() == {"message": "Login successful"}


def test_login_wrong_password(client):
    response = client.post("/api/login", json={"password": "Staff-Secret"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid password"
    assert "set-cookie" not in response.headers


def test_login_missing_password(client):
    response = client.post("/api/login", json={})
    assert response.status_code == 401


def test_submit_complaint(client, db_session):
    response = submit(
        client,
        customerName="Dana Reyes",
        customerEmail="dana@example.com",
        complaintType="Packaging",
        submitterRole="Customer",
    )
    assert response.status_code == 201

    body = response.json()
    assert body["id"]
    assert body["status"] == "Open"
    assert body["createdAt"]
    assert body["state"] == "MI"
    assert body["productId"] == "PRD-100"
    assert body["complaintType"] == "Packaging"
    assert body["submitterRole"] == "Customer"
    assert body["photoId"] is None
    assert db_session.query(Complaint).count() == 1


def test_submit_treats_blank_optional_fields_as_absent(client):
    response = submit(client, complaintType="", customerName="")
    assert response.status_code == 201
    assert response.json()["complaintType"] is None
    assert response.json()["customerName"] is None


def test_submit_missing_required_fields(client, db_session):
    for missing in ("state", "productId", "complaintDetails"):
        data = {
            "state": "PA",
            "productId": "PRD-7",
            "complaintDetails": "Wrong weight",
        }
        del data[missing]
        response = client.post("/api/complaints", data=data)
        assert response.status_code == 400
        assert response.json()["message"] == (
            "State, product ID, and complaint details are required"
        )

    assert db_session.query(Complaint).count() == 0


def test_submit_empty_required_field(client, db_session):
    response = submit(client, complaintDetails="")
    assert response.status_code == 400
    assert db_session.query(Complaint).count() == 0


def test_submit_invalid_enum_values(client, db_session):
    response = submit(client, state="CA")
    assert response.status_code == 400
    assert "state" in response.json()["message"]

    response = submit(client, complaintType="Taste")
    assert response.status_code == 400
    assert "complaintType" in response.json()["message"]

    response = submit(client, submitterRole="Manager")
    assert response.status_code == 400

    assert db_session.query(Complaint).count() == 0


def test_list_requires_password(client):
    queried = []

    def spy_repository():
        queried.append(True)

    app.dependency_overrides[get_repository] = spy_repository

    response = client.get("/api/complaints")
    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized"

    response = client.get(
        "/api/complaints", headers={"X-Staff-Password": "guess"}
    )
    assert response.status_code == 401
    assert queried == []


def test_list_newest_first(client, db_session, staff_headers):
    db_session.add_all(
        [
            Complaint(
                state="MI",
                product_id="OLD",
                complaint_details="first",
                created_at=datetime(2024, 1, 1, 9, 0),
            ),
            Complaint(
                state="MD",
                product_id="NEW",
                complaint_details="third",
                created_at=datetime(2024, 3, 1, 9, 0),
            ),
            Complaint(
                state="OK",
                product_id="MID",
                complaint_details="second",
                created_at=datetime(2024, 2, 1, 9, 0),
            ),
        ]
    )
    db_session.commit()

    response = client.get("/api/complaints", headers=staff_headers)
    assert response.status_code == 200
    assert [c["productId"] for c in response.json()] == ["NEW", "MID", "OLD"]


def test_list_includes_submitted_complaints(client, staff_headers):
    first = submit(client, productId="A").json()
    second = submit(client, productId="B").json()

    response = client.get("/api/complaints", headers=staff_headers)
    assert response.status_code == 200
    ids = [c["id"] for c in response.json()]
    assert ids == [second["id"], first["id"]]


def test_list_store_error(client, staff_headers):
    class BrokenRepository:
        def list_all(self):
            raise OperationalError("SELECT", {}, Exception("database down"))

    app.dependency_overrides[get_repository] = lambda: BrokenRepository()

    response = client.get("/api/complaints", headers=staff_headers)
    assert response.status_code == 500
    assert response.json()["message"] == "Server error"


def test_resolve_complaint(client, staff_headers):
    created = submit(client).json()

    response = client.put(
        f"/api/complaints/{created['id']}",
        json={"status": "Resolved"},
        headers=staff_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Resolved"
    assert response.json()["createdAt"] == created["createdAt"]

    listing = client.get("/api/complaints", headers=staff_headers).json()
    assert listing[0]["id"] == created["id"]
    assert listing[0]["status"] == "Resolved"


def test_reopen_resolved_complaint(client, staff_headers):
    created = submit(client).json()
    url = f"/api/complaints/{created['id']}"

    client.put(url, json={"status": "Resolved"}, headers=staff_headers)
    response = client.put(url, json={"status": "Open"}, headers=staff_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "Open"


def test_resolve_unknown_complaint(client, staff_headers):
    response = client.put(
        "/api/complaints/does-not-exist",
        json={"status": "Resolved"},
        headers=staff_headers,
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Complaint not found"


def test_resolve_requires_password(client):
    created = submit(client).json()
    response = client.put(
        f"/api/complaints/{created['id']}", json={"status": "Resolved"}
    )
    assert response.status_code == 401


def test_resolve_invalid_status(client, staff_headers):
    created = submit(client).json()
    response = client.put(
        f"/api/complaints/{created['id']}",
        json={"status": "Closed"},
        headers=staff_headers,
    )
    assert response.status_code == 400
    assert "status" in response.json()["message"]


def test_resolve_store_error(client, staff_headers):
    class BrokenRepository:
        def update_status(self, complaint_id, status):
            raise OperationalError("UPDATE", {}, Exception("database down"))

    app.dependency_overrides[get_repository] = lambda: BrokenRepository()

    response = client.put(
        "/api/complaints/abc",
        json={"status": "Resolved"},
        headers=staff_headers,
    )
    assert response.status_code == 500
    assert response.json()["message"] == "Server error"


def test_created_at_is_utc(client, staff_headers):
    created = submit(client).json()
    assert created["createdAt"].endswith("Z")

    listing = client.get("/api/complaints", headers=staff_headers).json()
    assert listing[0]["createdAt"] == created["createdAt"]


def test_created_at_converted_to_utc():
    record = ComplaintResponse(
        id="c-1",
        state="MI",
        product_id="P-1",
        complaint_details="x",
        status="Open",
        created_at=datetime(2024, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=-5))),
    )
    assert record.model_dump(by_alias=True)["createdAt"] == "2024-01-01T14:00:00Z"


def test_unknown_route_uses_message_key(client):
    response = client.get("/api/unknown")
    assert response.status_code == 404
    assert "message" in response.json()
