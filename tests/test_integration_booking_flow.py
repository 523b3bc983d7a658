"""
End-to-end booking flow through the API: a user books at list price,
an admin books with custom pricing, and ownership rules apply to reads,
filters and cancellation.
"""

from datetime import timedelta

import pytest

from carrental.utils.dates import local_today


def iso(days_from_today):
    return (local_today("UTC") + timedelta(days=days_from_today)).isoformat()


@pytest.fixture
def user_booking(client, user_headers, car):
    r = client.post("/api/bookings/user", headers=user_headers, json={
        "car_id": car["car_id"],
        "start_date": iso(5),
        "end_date": iso(7),
        "discount": 50,
        "total_bill_amount": 1,
    })
    assert r.status_code == 201, r.get_json()
    return r.get_json()["data"]


def test_user_booking_is_priced_from_daily_rate(user_booking):
    assert user_booking["discount"] == 0.0
    assert user_booking["total_bill_amount"] == 120.0
    assert user_booking["customer_name"] == "Alice"
    assert user_booking["brand"] == "Honda"


def test_overlapping_user_booking_conflicts(client, user_headers, car, user_booking):
    r = client.post("/api/bookings/user", headers=user_headers, json={
        "car_id": car["car_id"], "start_date": iso(7), "end_date": iso(9)})
    assert r.status_code == 409
    assert "already booked" in r.get_json()["message"]


def test_availability_lists_booked_days(client, user_headers, car, user_booking):
    r = client.get(f"/api/cars/{car['car_id']}/availability", headers=user_headers)
    assert r.get_json()["data"] == [{"start_date": iso(5), "end_date": iso(7)}]


def test_admin_booking_uses_supplied_pricing(client, admin_headers, car, customer):
    r = client.post("/api/bookings", headers=admin_headers, json={
        "car_id": car["car_id"],
        "email": customer["email"],
        "start_date": iso(1),
        "end_date": iso(2),
        "discount": 10,
        "total_bill_amount": 72,
    })
    assert r.status_code == 201
    data = r.get_json()["data"]
    assert data["discount"] == 10.0 and data["total_bill_amount"] == 72.0
    assert data["customer_id"] == customer["customer_id"]


def test_admin_booking_without_total_is_rejected(client, admin_headers, car, customer):
    r = client.post("/api/bookings", headers=admin_headers, json={
        "car_id": car["car_id"], "customer_id": customer["customer_id"],
        "start_date": iso(1), "end_date": iso(2)})
    assert r.status_code == 400
    assert "total bill" in r.get_json()["message"]


def test_owner_reads_own_booking_others_cannot(client, user_booking, user_headers, register, login):
    bid = user_booking["booking_id"]
    assert client.get(f"/api/bookings/{bid}", headers=user_headers).status_code == 200

    register(email="zed@example.com", mobile_no="9444444444", name="Zed")
    zed = login("zed@example.com", "Secret@123")
    assert client.get(f"/api/bookings/{bid}", headers=zed).status_code == 403
    r = client.get(f"/api/bookings/customer/{user_booking['customer_id']}", headers=zed)
    assert r.status_code == 403
    assert client.delete(f"/api/bookings/{bid}", headers=zed).status_code == 403


def test_filter_is_scoped_for_users(client, admin_headers, user_headers, user_booking, car, customer):
    client.post("/api/bookings", headers=admin_headers, json={
        "car_id": car["car_id"], "customer_id": customer["customer_id"],
        "start_date": iso(20), "end_date": iso(21), "total_bill_amount": 80})

    r = client.post("/api/bookings/filter", headers=user_headers, json={})
    assert [b["booking_id"] for b in r.get_json()["data"]] == [user_booking["booking_id"]]

    r = client.post("/api/bookings/filter", headers=admin_headers, json={"car_id": "0"})
    assert len(r.get_json()["data"]) == 2

    r = client.post("/api/bookings/filter", headers=admin_headers, json={"customer_name": "bo"})
    assert [b["customer_name"] for b in r.get_json()["data"]] == ["Bob"]

    r = client.post("/api/bookings/filter", headers=admin_headers, json={"mobile_no": "9000"})
    assert [b["customer_name"] for b in r.get_json()["data"]] == ["Alice"]

    # window touching only the last day of the user booking
    r = client.post("/api/bookings/filter", headers=admin_headers,
                    json={"from_date": iso(7), "to_date": iso(10)})
    assert [b["customer_name"] for b in r.get_json()["data"]] == ["Alice"]


def test_admin_lists_bookings_newest_start_first(client, admin_headers, user_booking, car, customer):
    client.post("/api/bookings", headers=admin_headers, json={
        "car_id": car["car_id"], "customer_id": customer["customer_id"],
        "start_date": iso(30), "end_date": iso(31), "total_bill_amount": 80})
    r = client.get("/api/bookings", headers=admin_headers)
    starts = [b["start_date"] for b in r.get_json()["data"]]
    assert starts == [iso(30), iso(5)]


def test_owner_cancels_before_start(client, user_headers, user_booking, store):
    r = client.delete(f"/api/bookings/{user_booking['booking_id']}", headers=user_headers)
    assert r.status_code == 200
    assert not store.bookings


def test_owner_cannot_cancel_started_booking(client, user_headers, user_booking, store, admin_headers):
    store.update_booking(user_booking["booking_id"], {"start_date": iso(0)})
    r = client.delete(f"/api/bookings/{user_booking['booking_id']}", headers=user_headers)
    assert r.status_code == 403

    r = client.delete(f"/api/bookings/{user_booking['booking_id']}", headers=admin_headers)
    assert r.status_code == 200


def test_admin_updates_booking(client, admin_headers, user_booking, store):
    other = store.create_car({"brand": "Kia", "model": "Seltos", "year": 2023, "color": "Blue",
                              "daily_rate": 60, "reg_no": "KA01ZZ0001"})
    r = client.put(f"/api/bookings/{user_booking['booking_id']}", headers=admin_headers,
                   json={"car_id": other, "total_bill_amount": 180})
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert data["brand"] == "Kia" and data["total_bill_amount"] == 180.0

    r = client.put("/api/bookings/missing", headers=admin_headers, json={})
    assert r.status_code == 404


def test_car_with_booking_cannot_be_deleted_via_api(client, admin_headers, user_booking, car):
    r = client.delete(f"/api/cars/{car['car_id']}", headers=admin_headers)
    assert r.status_code == 409


@pytest.mark.parametrize("field, value", [
    ("total_bill_amount", "Infinity"),
    ("total_bill_amount", "NaN"),
    ("discount", "NaN"),
])
def test_admin_booking_rejects_non_finite_amounts(client, admin_headers, car, customer, field, value):
    body = {"car_id": car["car_id"], "customer_id": customer["customer_id"],
            "start_date": iso(1), "end_date": iso(2), "total_bill_amount": 80}
    body[field] = value
    r = client.post("/api/bookings", headers=admin_headers, json=body)
    assert r.status_code == 400
    assert "finite" in r.get_json()["message"]


def test_booking_update_rejects_infinite_total(client, admin_headers, car, customer):
    r = client.post("/api/bookings", headers=admin_headers, json={
        "car_id": car["car_id"], "customer_id": customer["customer_id"],
        "start_date": iso(1), "end_date": iso(2), "total_bill_amount": 80})
    bid = r.get_json()["data"]["booking_id"]

    r = client.put(f"/api/bookings/{bid}", headers=admin_headers, json={"total_bill_amount": "inf"})
    assert r.status_code == 400
    assert client.get(f"/api/bookings/{bid}", headers=admin_headers).get_json()["data"]["total_bill_amount"] == 80.0


def test_filter_with_array_body_is_rejected(client, user_headers):
    r = client.post("/api/bookings/filter", headers=user_headers, json=[])
    assert r.status_code == 400
