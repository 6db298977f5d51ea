from __future__ import annotations

from fastapi.testclient import TestClient
from twilio.base.exceptions import TwilioRestException

from app.services import notifications
from app.services.notifications.sms import TwilioSmsSender


def test_reservation_example_is_accepted_as_pending(client: TestClient, senders) -> None:
    response = client.post(
        "/api/reservations",
        json={"name": "A", "phone": "+911234", "email": "", "date": "2024-01-01", "time": "19:00", "party_size": 4},
    )

    assert response.status_code == 200
    reservation_id = response.json()["reservationId"]
    assert isinstance(reservation_id, int)

    rows = client.get("/api/reservations").json()
    assert rows[0]["id"] == reservation_id
    assert rows[0]["status"] == "pending"
    assert rows[0]["party_size"] == 4
    assert rows[0]["created_at"] is not None


def test_reservation_confirmations(client: TestClient, senders) -> None:
    sms, email = senders

    reservation_id = client.post(
        "/api/reservations",
        json={"name": "Meera", "phone": "+919800000001", "email": "meera@example.com",
              "date": "2025-02-14", "time": "20:30", "party_size": 2},
    ).json()["reservationId"]

    assert sms.sent == [(
        "+919800000001",
        f"Reservation Confirmed!\nReservation ID: {reservation_id}\nDate: 2025-02-14\n"
        "Time: 20:30\nParty Size: 2\nAdvance ₹100 paid.\nThank you!",
    )]
    to_email, subject, html = email.sent[0]
    assert to_email == "meera@example.com"
    assert subject == f"Reservation Confirmation #{reservation_id}"
    assert "Hi Meera," in html
    assert "2 people" in html


def test_reservations_are_never_rejected(client: TestClient, senders) -> None:
    body = {"name": "Big party", "date": "not a date", "time": "whenever", "party_size": 500}

    first = client.post("/api/reservations", json=body)
    second = client.post("/api/reservations", json=body)

    assert first.status_code == second.status_code == 200
    ids = [r["id"] for r in client.get("/api/reservations").json()]
    assert ids == [second.json()["reservationId"], first.json()["reservationId"]]


def test_twilio_failure_does_not_change_response(client: TestClient, monkeypatch) -> None:
    class FailingMessages:
        def create(self, **kwargs):
            raise TwilioRestException(status=400, uri="/Messages", msg="Invalid 'To' Phone Number")

    class FakeTwilio:
        messages = FailingMessages()

    sender = TwilioSmsSender("AC123", "token", "+15550001111", client=FakeTwilio())
    monkeypatch.setattr(notifications, "_sms_sender", sender)

    response = client.post(
        "/api/reservations",
        json={"name": "A", "phone": "bogus", "date": "2024-01-01", "time": "19:00", "party_size": 4},
    )

    assert response.status_code == 200
    assert set(response.json()) == {"reservationId"}


def test_null_and_blank_fields_fall_back_to_defaults(client: TestClient, senders) -> None:
    sms, email = senders

    response = client.post(
        "/api/reservations",
        json={"name": "A", "phone": "+911234", "email": None, "date": "2024-01-01", "time": None, "party_size": ""},
    )

    assert response.status_code == 200
    row = client.get("/api/reservations").json()[0]
    assert row["email"] == ""
    assert row["time"] == ""
    assert row["party_size"] == 0
    assert len(sms.sent) == 1
    assert email.sent == []


def test_numeric_party_size_from_form_field(client: TestClient) -> None:
    response = client.post("/api/reservations", json={"name": "A", "party_size": "6"})

    assert response.status_code == 200
    assert client.get("/api/reservations").json()[0]["party_size"] == 6
