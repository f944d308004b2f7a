"""Tests for note search and the flat tag listing."""
import pytest


def create_note(client, headers, **fields):
    response = client.post("/api/notes", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
def test_search_requires_query(client, user, params):
    response = client.get("/api/search", params=params, headers=user["headers"])
    assert response.status_code == 400
    assert response.json()["message"] == "Search query cannot be empty"


def test_search_orders_by_score(client, user):
    create_note(client, user["headers"], title="Groceries", content="milk and bread")
    create_note(client, user["headers"], title="Python", content="python python tips")
    create_note(client, user["headers"], title="Misc", content="a little python")

    response = client.get("/api/search", params={"q": "python"}, headers=user["headers"])
    assert response.status_code == 200

    hits = response.json()
    assert [h["title"] for h in hits] == ["Python", "Misc"]
    assert hits[0]["score"] > hits[1]["score"]
    assert hits[0]["content"] == "python python tips"


def test_search_is_scoped_to_user(client, user, other_user):
    create_note(client, other_user["headers"], content="private python notes")
    response = client.get("/api/search", params={"q": "python"}, headers=user["headers"])
    assert response.json() == []


def test_search_redacts_locked_notes(client, user):
    create_note(
        client, user["headers"], title="Secret plan", content="the plan", isLocked=True, lockPassword="1234"
    )
    hits = client.get("/api/search", params={"q": "plan"}, headers=user["headers"]).json()
    assert len(hits) == 1
    assert "content" not in hits[0]
    assert "lockHash" not in hits[0]
    assert hits[0]["message"] == "Note is locked. Content not available."
    assert hits[0]["score"] > 0


def test_list_tags_sorted_and_distinct(client, user, other_user):
    create_note(client, user["headers"], content="a", tags=["work", "alpha/beta"])
    create_note(client, user["headers"], content="b", tags=["work", "home"])
    create_note(client, other_user["headers"], content="c", tags=["zzz"])

    response = client.get("/api/tags", headers=user["headers"])
    assert response.status_code == 200
    assert response.json() == ["alpha/beta", "home", "work"]


def test_list_tags_empty(client, user):
    assert client.get("/api/tags", headers=user["headers"]).json() == []
