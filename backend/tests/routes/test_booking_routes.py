# backend/tests/routes/test_booking_routes.py
"""
HTTP tests for trainer, class and profile booking routes.

These go through the real clock, so every booked day comes from
``future_day()``.
"""

from datetime import timedelta

from fitclub.core.enums import GroupClassStatus, TrainerType
from tests.utils.clock import at, future_day

PROBLEM = "application/problem+json"


class TestAuthentication:
    def test_booking_requires_token(self, client, make_class):
        group_class = make_class(day=future_day())

        response = client.post(
            f"/api/v1/classes/{group_class.id}/book",
            json={"class_date": future_day().isoformat()},
        )

        assert response.status_code == 401
        assert response.headers["content-type"].startswith(PROBLEM)
        assert response.headers["www-authenticate"] == "Bearer"

    def test_garbage_token(self, client):
        response = client.get(
            "/api/v1/user/profile/bookings", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Could not validate credentials"

    def test_inactive_user(self, client, make_user, auth_headers):
        inactive = make_user(is_active=False)

        response = client.get("/api/v1/user/profile/bookings", headers=auth_headers(inactive))

        assert response.status_code == 400


class TestTrainers:
    def test_list_trainers_is_public(self, client, trainer, make_trainer):
        make_trainer(TrainerType.GROUP)

        response = client.get("/api/v1/trainers")

        assert response.status_code == 200
        body = response.json()
        assert [t["id"] for t in body] == [trainer.id]
        assert body[0]["hourly_rate"] == 60.0

    def test_availability(self, client, trainer):
        response = client.get(
            f"/api/v1/trainers/{trainer.id}/availability",
            params={"date": future_day().isoformat()},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["trainer_name"] == "Alex Trainer"
        assert len(body["slots"]) == 12
        assert body["slots"][0]["display_time"] == "08:00 - 09:00"

    def test_availability_bad_date(self, client, trainer):
        response = client.get(
            f"/api/v1/trainers/{trainer.id}/availability", params={"date": "2030-13-01"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "INVALID_DATE"
        assert body["status"] == 400
        assert body["instance"] == f"/api/v1/trainers/{trainer.id}/availability"

    def test_availability_unknown_trainer(self, client):
        response = client.get(
            "/api/v1/trainers/missing/availability", params={"date": future_day().isoformat()}
        )

        assert response.status_code == 404

    def test_book_and_see_slot_taken(self, client, member, trainer, auth_headers):
        day = future_day()

        response = client.post(
            f"/api/v1/trainers/{trainer.id}/book",
            json={
                "start_time": at(day, 10).isoformat(),
                "end_time": at(day, 11).isoformat(),
                "notes": "First session",
            },
            headers=auth_headers(member),
        )

        assert response.status_code == 201
        booking = response.json()
        assert booking["type"] == "personal_training"
        assert booking["status"] == "confirmed"
        assert booking["trainer"]["id"] == trainer.id

        slots = client.get(
            f"/api/v1/trainers/{trainer.id}/availability", params={"date": day.isoformat()}
        ).json()["slots"]
        assert [s["display_time"] for s in slots if not s["available"]] == ["10:00 - 11:00"]

    def test_trainer_conflict_is_400(self, client, member, other_member, trainer, auth_headers):
        day = future_day()
        payload = {"start_time": at(day, 10).isoformat(), "end_time": at(day, 11).isoformat()}
        client.post(
            f"/api/v1/trainers/{trainer.id}/book", json=payload, headers=auth_headers(member)
        )

        response = client.post(
            f"/api/v1/trainers/{trainer.id}/book",
            json=payload,
            headers=auth_headers(other_member),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "TRAINER_UNAVAILABLE"

    def test_malformed_body_is_422(self, client, member, trainer, auth_headers):
        response = client.post(
            f"/api/v1/trainers/{trainer.id}/book",
            json={"start_time": "soon", "end_time": "later"},
            headers=auth_headers(member),
        )

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_unknown_fields_are_rejected(self, client, member, trainer, auth_headers):
        day = future_day()
        response = client.post(
            f"/api/v1/trainers/{trainer.id}/book",
            json={
                "start_time": at(day, 10).isoformat(),
                "end_time": at(day, 11).isoformat(),
                "price": 0,
            },
            headers=auth_headers(member),
        )

        assert response.status_code == 422

    def test_trainer_sessions(self, client, member, trainer, auth_headers):
        day = future_day()
        client.post(
            f"/api/v1/trainers/{trainer.id}/book",
            json={"start_time": at(day, 10).isoformat(), "end_time": at(day, 11).isoformat()},
            headers=auth_headers(member),
        )

        response = client.get("/api/v1/trainers/my-bookings", headers=auth_headers(trainer))
        forbidden = client.get("/api/v1/trainers/my-bookings", headers=auth_headers(member))

        assert response.status_code == 200
        assert [s["member"]["id"] for s in response.json()] == [member.id]
        assert forbidden.status_code == 403


class TestClasses:
    def test_list_and_occupancy(self, client, make_class):
        day = future_day()
        group_class = make_class(day=day, capacity=3)
        make_class(day=day, status=GroupClassStatus.PENDING, name="Hidden")

        listed = client.get("/api/v1/classes").json()
        occupancy = client.get(
            f"/api/v1/classes/{group_class.id}/availability/{day.isoformat()}"
        ).json()

        assert [c["name"] for c in listed] == ["Spin"]
        assert listed[0]["schedule"][0]["start_time"] == "18:00"
        assert occupancy["capacity"] == 3
        assert occupancy["available"] == 3
        assert occupancy["is_full"] is False

    def test_full_class_flow(
        self, client, make_class, member, other_member, make_user, auth_headers
    ):
        day = future_day()
        group_class = make_class(day=day, capacity=2)
        url = f"/api/v1/classes/{group_class.id}/book"
        body = {"class_date": day.isoformat()}

        first = client.post(url, json=body, headers=auth_headers(member))
        client.post(url, json=body, headers=auth_headers(other_member))
        third = client.post(url, json=body, headers=auth_headers(make_user()))

        assert first.status_code == 201
        assert first.json()["group_class"]["name"] == "Spin"
        assert first.json()["class_date"] == day.isoformat()
        assert third.status_code == 400
        assert third.json()["code"] == "CLASS_FULL"
        assert third.json()["errors"]["capacity"] == 2

    def test_duplicate_and_unscheduled(self, client, make_class, member, auth_headers):
        day = future_day()
        group_class = make_class(day=day, capacity=5)
        url = f"/api/v1/classes/{group_class.id}/book"
        client.post(url, json={"class_date": day.isoformat()}, headers=auth_headers(member))

        duplicate = client.post(
            url, json={"class_date": day.isoformat()}, headers=auth_headers(member)
        )
        unscheduled = client.post(
            url,
            json={"class_date": (day + timedelta(days=1)).isoformat()},
            headers=auth_headers(member),
        )
        malformed = client.post(url, json={"class_date": "soon"}, headers=auth_headers(member))

        assert duplicate.json()["code"] == "DUPLICATE_BOOKING"
        assert unscheduled.json()["code"] == "CLASS_NOT_SCHEDULED"
        assert malformed.status_code == 400
        assert malformed.json()["code"] == "INVALID_DATE"

    def test_trainer_cannot_book_class(self, client, make_class, trainer, auth_headers):
        day = future_day()
        group_class = make_class(day=day)

        response = client.post(
            f"/api/v1/classes/{group_class.id}/book",
            json={"class_date": day.isoformat()},
            headers=auth_headers(trainer),
        )

        assert response.status_code == 403

    def test_unknown_class(self, client, member, auth_headers):
        response = client.post(
            "/api/v1/classes/missing/book",
            json={"class_date": future_day().isoformat()},
            headers=auth_headers(member),
        )

        assert response.status_code == 404
        assert response.json()["title"] == "Not Found"


class TestProfileBookings:
    def _book_class(self, client, make_class, user, auth_headers):
        day = future_day()
        group_class = make_class(day=day, capacity=5)
        return client.post(
            f"/api/v1/classes/{group_class.id}/book",
            json={"class_date": day.isoformat()},
            headers=auth_headers(user),
        ).json()

    def test_list_get_and_cancel(self, client, make_class, member, auth_headers):
        booking = self._book_class(client, make_class, member, auth_headers)
        headers = auth_headers(member)

        listed = client.get("/api/v1/user/profile/bookings", headers=headers).json()
        fetched = client.get(f"/api/v1/user/profile/bookings/{booking['id']}", headers=headers)
        cancelled = client.delete(f"/api/v1/user/profile/bookings/{booking['id']}", headers=headers)
        again = client.delete(f"/api/v1/user/profile/bookings/{booking['id']}", headers=headers)

        assert [b["id"] for b in listed] == [booking["id"]]
        assert fetched.status_code == 200
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"
        assert cancelled.json()["cancelled_at"] is not None
        assert again.status_code == 400
        assert again.json()["code"] == "BOOKING_NOT_CANCELLABLE"

        only_cancelled = client.get(
            "/api/v1/user/profile/bookings", params={"status": "cancelled"}, headers=headers
        ).json()
        assert [b["id"] for b in only_cancelled] == [booking["id"]]

    def test_unknown_status_filter_is_422(self, client, member, auth_headers):
        response = client.get(
            "/api/v1/user/profile/bookings",
            params={"status": "lost"},
            headers=auth_headers(member),
        )

        assert response.status_code == 422

    def test_other_members_booking(
        self, client, make_class, member, other_member, admin, auth_headers
    ):
        booking = self._book_class(client, make_class, member, auth_headers)
        url = f"/api/v1/user/profile/bookings/{booking['id']}"

        assert client.get(url, headers=auth_headers(other_member)).status_code == 404
        assert client.delete(url, headers=auth_headers(other_member)).status_code == 403
        assert client.delete(url, headers=auth_headers(admin)).status_code == 200

    def test_cancel_unknown_booking(self, client, member, auth_headers):
        response = client.delete(
            "/api/v1/user/profile/bookings/missing", headers=auth_headers(member)
        )

        assert response.status_code == 404
