"""
Tests for contact inquiries, events and the admin dashboard
"""

import uuid
from datetime import datetime, timedelta, timezone

from ashram_connect.core.clock import as_utc, utc_now
from ashram_connect.models import AppRole, ContactMessage, Donation, Event, PaymentStatus


CONTACT = {
    "name": "Ravi Kumar",
    "email": "ravi@ashramconnect.org",
    "inquiry_type": "volunteer",
    "message": "I would like to teach maths on weekends.",
}


class TestContact:
    """Inquiries"""

    def test_guest_can_submit(self, client):
        response = client.post("/api/v1/contact/", json=CONTACT)

        assert response.status_code == 201
        assert response.json()["is_read"] is False
        assert response.json()["inquiry_type"] == "volunteer"

    def test_invalid_email(self, client):
        response = client.post("/api/v1/contact/", json={**CONTACT, "email": "ravi"})
        assert response.status_code == 422

    def test_scoped_submission_is_tagged(self, client, test_ashram):
        response = client.post("/api/v1/tenant/sunrise/contact/", json=CONTACT)
        assert response.json()["ashram_id"] == str(test_ashram.id)

    def test_listing_and_marking_read(self, client, sub_admin_user, auth_headers):
        message_id = client.post("/api/v1/contact/", json=CONTACT).json()["id"]
        headers = auth_headers(sub_admin_user, AppRole.SUB_ADMIN)

        unread = client.get("/api/v1/contact/?unread_only=true", headers=headers).json()
        assert [m["id"] for m in unread] == [message_id]

        response = client.patch(f"/api/v1/contact/{message_id}/read", headers=headers)
        assert response.json()["is_read"] is True
        assert client.get("/api/v1/contact/?unread_only=true", headers=headers).json() == []

    def test_listing_requires_capability(self, client, user, auth_headers):
        assert client.get("/api/v1/contact/", headers=auth_headers(user)).status_code == 403


class TestEvents:
    """Events"""

    def test_upcoming_filter(self, client, db):
        db.add(Event(title="Annual day", event_date=utc_now() + timedelta(days=10)))
        db.add(Event(title="Holi", event_date=utc_now() - timedelta(days=30), is_upcoming=False))
        db.commit()

        assert [e["title"] for e in client.get("/api/v1/events/?upcoming=true").json()] == ["Annual day"]
        assert [e["title"] for e in client.get("/api/v1/events/?upcoming=false").json()] == ["Holi"]
        assert len(client.get("/api/v1/events/").json()) == 2

    def test_manage_event(self, client, tenant_admin_user, test_ashram, auth_headers):
        headers = auth_headers(tenant_admin_user)
        response = client.post(
            "/api/v1/tenant/sunrise/events/",
            json={"title": "Sports day", "location": "Main ground"},
            headers=headers,
        )
        assert response.status_code == 201
        event_id = response.json()["id"]

        response = client.patch(f"/api/v1/tenant/sunrise/events/{event_id}", json={"is_upcoming": False}, headers=headers)
        assert response.json()["is_upcoming"] is False

        assert client.delete(f"/api/v1/tenant/sunrise/events/{event_id}", headers=headers).status_code == 204
        assert client.get("/api/v1/tenant/sunrise/events/").json() == []

    def test_event_date_without_offset_is_read_as_utc(self, client, db, tenant_admin_user, test_ashram, auth_headers):
        response = client.post(
            "/api/v1/tenant/sunrise/events/",
            json={"title": "Diwali mela", "event_date": "2026-11-08T17:30:00"},
            headers=auth_headers(tenant_admin_user),
        )
        assert response.status_code == 201

        event = db.get(Event, uuid.UUID(response.json()["id"]))
        assert as_utc(event.event_date) == datetime(2026, 11, 8, 17, 30, tzinfo=timezone.utc)


class TestAdminDashboard:
    """Dashboard tabs and quick stats"""

    def test_requires_sign_in(self, client):
        response = client.get("/api/v1/admin/")

        assert response.status_code == 401
        assert response.headers["X-Sign-In-Path"] == "/auth"

    def test_plain_user_is_forbidden(self, client, user, auth_headers):
        assert client.get("/api/v1/admin/", headers=auth_headers(user)).status_code == 403

    def test_admin_dashboard(self, client, db, admin_user, auth_headers, make_need):
        make_need()
        make_need(is_active=False)
        db.add(Donation(amount=500, payment_status=PaymentStatus.COMPLETED))
        db.add(Donation(amount=1500, payment_status=PaymentStatus.COMPLETED))
        db.add(Donation(amount=2500))
        db.add(ContactMessage(name="Ravi", email="ravi@ashramconnect.org", message="Hello"))
        db.commit()

        data = client.get("/api/v1/admin/", headers=auth_headers(admin_user, AppRole.ADMIN)).json()

        assert data["tabs"] == ["ashrams", "needs", "donations", "vendors", "events", "messages", "users"]
        assert data["stats"] == {
            "total_donations": 2000,
            "active_needs": 1,
            "vendors": 0,
            "unread_messages": 1,
        }

    def test_tenant_admin_dashboard_is_scoped(
        self, client, db, tenant_admin_user, test_ashram, other_ashram, auth_headers
    ):
        db.add(Donation(amount=500, ashram_id=test_ashram.id, payment_status=PaymentStatus.COMPLETED))
        db.add(Donation(amount=9000, ashram_id=other_ashram.id, payment_status=PaymentStatus.COMPLETED))
        db.commit()

        headers = auth_headers(tenant_admin_user)
        data = client.get("/api/v1/tenant/sunrise/admin/", headers=headers).json()

        assert data["tabs"] == ["needs", "donations", "vendors", "events", "messages"]
        assert data["stats"]["total_donations"] == 500
        assert data["tenant_id"] == str(test_ashram.id)

        assert client.get("/api/v1/admin/", headers=headers).status_code == 403
        assert client.get("/api/v1/tenant/riverside/admin/", headers=headers).status_code == 403
