from conftest import MONDAY

API = "/api/v1"


async def completed_booking(client, salon, service, customer, owner, time_label="09:00"):
    response = await client.post(
        f"{API}/bookings",
        json={"salon": salon["id"], "service": service["id"], "date": MONDAY.isoformat(), "time": time_label},
        headers=customer["headers"],
    )
    booking_id = response.json()["data"]["id"]
    for target in ("confirmed", "completed"):
        response = await client.put(
            f"{API}/salon-owner/bookings/{booking_id}/status",
            json={"status": target},
            headers=owner["headers"],
        )
        assert response.status_code == 200
    return booking_id


async def test_verified_review_updates_salon_rating(client, salon, haircut, customer, owner, make_user):
    booking_id = await completed_booking(client, salon, haircut, customer, owner)

    response = await client.post(
        f"{API}/reviews",
        json={"salon": salon["id"], "booking": booking_id, "rating": 5, "comment": "Great cut"},
        headers=customer["headers"],
    )
    assert response.status_code == 201
    review = response.json()["data"]
    assert review["isVerified"] is True
    assert review["customer"] == customer["id"]

    other = await make_user("customer")
    response = await client.post(
        f"{API}/reviews", json={"salon": salon["id"], "rating": 2}, headers=other["headers"]
    )
    assert response.status_code == 201
    assert response.json()["data"]["isVerified"] is False

    response = await client.get(f"{API}/salons/{salon['id']}")
    assert response.json()["data"]["rating"] == 3.5
    assert response.json()["data"]["reviewCount"] == 2

    response = await client.get(f"{API}/reviews/salon/{salon['id']}", params={"rating": 5})
    assert [r["id"] for r in response.json()["data"]] == [review["id"]]

    response = await client.get(f"{API}/notifications", headers=owner["headers"])
    assert "review_received" in [n["type"] for n in response.json()["data"]]


async def test_one_review_per_salon(client, salon, customer):
    payload = {"salon": salon["id"], "rating": 4}
    response = await client.post(f"{API}/reviews", json=payload, headers=customer["headers"])
    assert response.status_code == 201

    response = await client.post(f"{API}/reviews", json=payload, headers=customer["headers"])
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "You have already reviewed this salon"}


async def test_review_needs_completed_booking(client, salon, haircut, customer):
    response = await client.post(
        f"{API}/bookings",
        json={"salon": salon["id"], "service": haircut["id"], "date": MONDAY.isoformat(), "time": "10:00"},
        headers=customer["headers"],
    )
    booking_id = response.json()["data"]["id"]

    response = await client.post(
        f"{API}/reviews",
        json={"salon": salon["id"], "booking": booking_id, "rating": 5},
        headers=customer["headers"],
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid booking or booking not completed"


async def test_review_rating_range_and_unknown_salon(client, salon, customer):
    response = await client.post(
        f"{API}/reviews", json={"salon": salon["id"], "rating": 6}, headers=customer["headers"]
    )
    assert response.status_code == 400

    response = await client.post(
        f"{API}/reviews", json={"salon": "0" * 24, "rating": 3}, headers=customer["headers"]
    )
    assert response.status_code == 404


async def test_owner_reply_and_delete(client, salon, customer, owner, make_user):
    response = await client.post(
        f"{API}/reviews", json={"salon": salon["id"], "rating": 4}, headers=customer["headers"]
    )
    review_id = response.json()["data"]["id"]

    rival = await make_user("salon_owner")
    response = await client.put(
        f"{API}/reviews/{review_id}/response", json={"response": "Mine now"}, headers=rival["headers"]
    )
    assert response.status_code == 403

    response = await client.put(
        f"{API}/reviews/{review_id}/response", json={"response": "Thanks for visiting"}, headers=owner["headers"]
    )
    assert response.status_code == 200
    assert response.json()["data"]["response"]["text"] == "Thanks for visiting"

    stranger = await make_user("customer")
    response = await client.delete(f"{API}/reviews/{review_id}", headers=stranger["headers"])
    assert response.status_code == 403

    response = await client.delete(f"{API}/reviews/{review_id}", headers=customer["headers"])
    assert response.status_code == 204

    response = await client.get(f"{API}/reviews/mine", headers=customer["headers"])
    assert response.json()["count"] == 0

    response = await client.get(f"{API}/salons/{salon['id']}")
    assert response.json()["data"]["rating"] == 0
    assert response.json()["data"]["reviewCount"] == 0
