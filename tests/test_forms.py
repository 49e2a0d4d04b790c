from chef_site.errors import StorageError
from chef_site.services.bookings import BookingService

CART = {
    "customer_name": "Sipho Dlamini",
    "customer_email": "sipho@example.com",
    "customer_phone": "+27 71 555 0199",
    "event_date": "2026-11-28",
    "event_time": "19:00",
    "guest_count": 8,
    "location": "Franschhoek",
    "selected_dishes": [
        {"dish": "Bobotie", "quantity": 8, "price": 120, "totalPrice": 960},
        {"dish": "Malva Pudding", "quantity": 8, "price": 45, "totalPrice": 360},
    ],
    "total_amount": 1320,
}

CATERING = {
    "customer_name": "Jane Doe",
    "customer_email": "jane@example.com",
    "customer_phone": "+27 82 555 0101",
    "event_date": "2026-12-12",
    "event_type": "Wedding",
    "meal_type": "Plated",
    "selected_dishes": [{"dish": "Line Fish", "quantity": 40, "price": 180, "totalPrice": 7200}],
}


def test_contact_form_is_emailed_to_the_owner(client, mailer):
    response = client.post("/api/contact", json={
        "name": "Thandi",
        "email": "thandi@example.com",
        "subject": "Private dinner",
        "message": "Are you available in December?",
    })

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Message sent successfully!"}
    assert len(mailer.sent) == 1
    email = mailer.sent[0]
    assert email.subject == "Contact Form: Private dinner"
    assert email.reply_to == "thandi@example.com"
    assert "Are you available in December?" in email.html


def test_contact_form_escapes_html(client, mailer):
    client.post("/api/contact", json={
        "name": "<b>Mallory</b>",
        "email": "m@example.com",
        "subject": "Hi",
        "message": "<script>alert(1)</script>",
    })

    assert "<script>" not in mailer.sent[0].html
    assert "&lt;script&gt;" in mailer.sent[0].html


def test_contact_form_requires_all_fields(client, mailer):
    response = client.post("/api/contact", json={"name": "Thandi", "email": "thandi@example.com"})

    assert response.status_code == 400
    assert mailer.sent == []


def test_table_booking_is_emailed_and_kept_for_dashboard(admin_client, mailer):
    response = admin_client.post("/api/book-table", json={
        "name": "Lerato",
        "email": "lerato@example.com",
        "phone": "+27 83 555 0123",
        "date": "2026-11-20",
        "time": "18:30",
        "people": 4,
    })

    assert response.status_code == 200
    assert "booking" not in response.json()
    assert mailer.sent[0].subject == "New Booking Request - Lerato for 2026-11-20 at 18:30"

    stored = admin_client.get("/api/bookings").json()
    assert len(stored) == 1
    assert stored[0]["additional_info"] == "Table booking for 4 people"
    assert stored[0]["status"] == "pending"


def test_catering_inquiry_returns_stored_booking(client, mailer):
    response = client.post("/api/catering-inquiry", json=CATERING)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["booking"]["status"] == "pending"
    assert body["booking"]["event_type"] == "Wedding"
    assert body["booking"]["selected_dishes"][0]["totalPrice"] == 7200
    assert mailer.sent[0].subject == "Catering Inquiry - Jane Doe for 2026-12-12"


def test_cart_booking_is_stored_as_cart_booking(client, mailer):
    response = client.post("/api/cart-booking", json=CART)

    assert response.status_code == 200
    booking = response.json()["booking"]
    assert booking["event_type"] == "Cart Booking"
    assert booking["occasion"] == "8 guests"
    assert booking["additional_info"] == "Cart booking for 8 guests"
    assert [dish["dish"] for dish in booking["selected_dishes"]] == ["Bobotie", "Malva Pudding"]
    assert "Bobotie" in mailer.sent[0].html


def test_dispatch_failure_returns_kind_message_and_stores_nothing(admin_client, mailer):
    mailer.fail = True

    response = admin_client.post("/api/cart-booking", json=CART)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process booking request. Please try again later."}
    assert admin_client.get("/api/bookings").json() == []


def test_storage_failure_after_email_still_succeeds(client, mailer, monkeypatch):
    async def broken_insert(self, **values):
        raise StorageError()

    monkeypatch.setattr(BookingService, "create_from_values", broken_insert)

    response = client.post("/api/cart-booking", json=CART)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert "booking" not in response.json()
    assert len(mailer.sent) == 1
