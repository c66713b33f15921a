from uuid import uuid4

from sharecal.models import CalendarRole
from sharecal.services import calendars, memberships

API = "/api/v1"


def _auth(user):
    return {"X-User-Id": str(user.id)}


def _event_body(**overrides):
    body = {
        "name": "Standup",
        "type": "meeting",
        "start_time": "2024-01-07T09:00:00",
        "end_time": "2024-01-07T10:00:00",
    }
    body.update(overrides)
    return body


def test_health(client):
    response = client.get(f"{API}/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_ready(client):
    response = client.get(f"{API}/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "database": "connected"}


def test_missing_identity_is_unauthorized(client):
    response = client.post(f"{API}/calendars/", json={"name": "Team"})
    assert response.status_code == 401


def test_unknown_identity_is_unauthorized(client):
    response = client.post(
        f"{API}/calendars/", json={"name": "Team"}, headers={"X-User-Id": str(uuid4())}
    )
    assert response.status_code == 401


def test_create_calendar(client, alice, bob):
    response = client.post(
        f"{API}/calendars/",
        json={"name": "Family", "owners": [{"user_id": str(bob.id), "role": "actor"}]},
        headers=_auth(alice),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Family"
    assert data["nb_owners"] == 1
    assert data["current_user_role"] == "admin"
    owners = {owner["pseudo"]: owner for owner in data["owners"]}
    assert owners["alice"]["confirmed"] is True
    assert owners["bob"]["confirmed"] is False
    assert owners["bob"]["role"] == "actor"


def test_blank_calendar_name_is_rejected(client, alice):
    response = client.post(f"{API}/calendars/", json={"name": "   "}, headers=_auth(alice))
    assert response.status_code == 400


def test_get_calendar_requires_membership(client, calendar, alice, bob):
    assert client.get(f"{API}/calendars/{calendar.id}", headers=_auth(alice)).status_code == 200

    response = client.get(f"{API}/calendars/{calendar.id}", headers=_auth(bob))
    assert response.status_code == 403
    assert response.json()["reason"] == "absent"


def test_unknown_calendar_is_not_found(client, alice):
    response = client.get(f"{API}/calendars/{uuid4()}", headers=_auth(alice))
    assert response.status_code == 404


def test_create_event_updates_preferences(client, calendar, alice):
    response = client.post(
        f"{API}/calendars/{calendar.id}/events",
        json=_event_body(),
        headers=_auth(alice),
    )
    assert response.status_code == 201
    assert response.json()["calendar_id"] == str(calendar.id)

    preferences = client.get(
        f"{API}/calendars/{calendar.id}/timeslot-preferences", headers=_auth(alice)
    ).json()["preferences"]
    assert preferences["meeting"][0][9] == 1
    assert preferences["meeting"][0][10] == 1


def test_create_event_rejects_unknown_type(client, calendar, alice):
    response = client.post(
        f"{API}/calendars/{calendar.id}/events",
        json=_event_body(type="nap"),
        headers=_auth(alice),
    )
    assert response.status_code == 400


def test_pending_member_cannot_create_event(session, client, calendar, alice, bob):
    calendars.add_members(
        session,
        calendar,
        memberships.find_relation(session, calendar.id, alice.id),
        [(bob.id, CalendarRole.ACTOR)],
    )

    response = client.post(
        f"{API}/calendars/{calendar.id}/events",
        json=_event_body(),
        headers=_auth(bob),
    )
    assert response.status_code == 403
    assert response.json()["reason"] == "unconfirmed"

    confirmed = client.post(
        f"{API}/calendars/{calendar.id}/members/confirm", headers=_auth(bob)
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["confirmed"] is True


def test_invite_and_respond(client, calendar, alice, bob):
    event_id = client.post(
        f"{API}/calendars/{calendar.id}/events",
        json=_event_body(),
        headers=_auth(alice),
    ).json()["id"]

    invited = client.post(
        f"{API}/events/{event_id}/attendees",
        json={"users": ["bob"]},
        headers=_auth(alice),
    )
    assert invited.status_code == 201
    assert [(a["pseudo"], a["status"]) for a in invited.json()] == [("bob", "invited")]

    again = client.post(
        f"{API}/events/{event_id}/attendees",
        json={"users": ["bob"]},
        headers=_auth(alice),
    )
    assert again.status_code == 409

    missing = client.post(
        f"{API}/events/{event_id}/attendees",
        json={"users": ["mallory"]},
        headers=_auth(alice),
    )
    assert missing.status_code == 404
    assert "mallory" in missing.json()["detail"]

    accepted = client.patch(
        f"{API}/events/{event_id}/attendance",
        json={"status": "accepted"},
        headers=_auth(bob),
    )
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "accepted"


def test_private_event_is_hidden_from_strangers(client, calendar, alice, carol):
    event_id = client.post(
        f"{API}/calendars/{calendar.id}/events",
        json=_event_body(),
        headers=_auth(alice),
    ).json()["id"]

    response = client.get(f"{API}/events/{event_id}", headers=_auth(carol))
    assert response.status_code == 403

    listed = client.get(f"{API}/calendars/{calendar.id}/events", headers=_auth(carol))
    assert listed.status_code == 200
    assert listed.json() == []


def test_delete_event(client, calendar, alice):
    event_id = client.post(
        f"{API}/calendars/{calendar.id}/events",
        json=_event_body(),
        headers=_auth(alice),
    ).json()["id"]

    assert client.delete(f"{API}/events/{event_id}", headers=_auth(alice)).status_code == 204
    assert client.get(f"{API}/events/{event_id}", headers=_auth(alice)).status_code == 404


def test_leaving_as_last_owner_deletes_calendar(client, calendar, alice):
    response = client.delete(
        f"{API}/calendars/{calendar.id}/members/{alice.id}", headers=_auth(alice)
    )
    assert response.status_code == 200
    assert response.json() == {"status": "removed", "calendar_deleted": True}
    assert client.get(f"{API}/calendars/{calendar.id}", headers=_auth(alice)).status_code == 404


def test_only_admin_deletes_calendar(session, client, calendar, alice, bob):
    calendars.add_members(
        session,
        calendar,
        memberships.find_relation(session, calendar.id, alice.id),
        [(bob.id, CalendarRole.ACTOR)],
    )
    calendars.confirm_membership(session, calendar.id, bob.id)

    forbidden = client.delete(f"{API}/calendars/{calendar.id}", headers=_auth(bob))
    assert forbidden.status_code == 403
    assert forbidden.json()["reason"] == "insufficient_role"

    assert client.delete(f"{API}/calendars/{calendar.id}", headers=_auth(alice)).status_code == 200


def test_list_calendars_shows_pending_invitations(session, client, calendar, alice, bob):
    calendars.add_members(
        session,
        calendar,
        memberships.find_relation(session, calendar.id, alice.id),
        [(bob.id, CalendarRole.ACTOR)],
    )

    response = client.get(f"{API}/calendars/", headers=_auth(bob))

    assert response.status_code == 200
    listed = {item["name"]: item for item in response.json()}
    assert set(listed) == {"Team", "Main Calendar"}
    assert listed["Team"]["current_user_role"] == "actor"
    assert listed["Team"]["confirmed"] is False
    assert listed["Main Calendar"]["current_user_role"] == "admin"
    assert listed["Main Calendar"]["confirmed"] is True

    again = client.get(f"{API}/calendars/", headers=_auth(bob))
    assert len(again.json()) == 2


def test_create_event_rejects_impossible_timezone_offset(client, calendar, alice):
    response = client.post(
        f"{API}/calendars/{calendar.id}/events",
        params={"timezone_offset": 10**10},
        json=_event_body(),
        headers=_auth(alice),
    )
    assert response.status_code == 422

    preferences = client.get(
        f"{API}/calendars/{calendar.id}/timeslot-preferences", headers=_auth(alice)
    ).json()["preferences"]
    assert sum(sum(day) for day in preferences["meeting"]) == 0
