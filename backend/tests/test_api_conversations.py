"""Tests for conversation CRUD endpoints."""

from sqlmodel import Session

from tests.conftest import auth_header, test_engine
from skillstrong.models.conversation import ChatMessage, Conversation


def _seed_conversation(title="Test Chat", messages=None, user_id="user-1"):
    """Insert a conversation + messages directly into the test DB."""
    with Session(test_engine) as session:
        conv = Conversation(user_id=user_id, title=title)
        session.add(conv)
        session.commit()
        session.refresh(conv)

        if messages:
            for position, (role, content) in enumerate(messages):
                msg = ChatMessage(conversation_id=conv.id, position=position, role=role, content=content)
                session.add(msg)
            session.commit()

        session.refresh(conv)
        return conv.id


def test_requires_auth(client):
    response = client.get("/api/conversations/")
    assert response.status_code == 401


def test_rejects_bad_token(client):
    response = client.get("/api/conversations/", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_list_conversations_empty(client):
    response = client.get("/api/conversations/", headers=auth_header())
    assert response.status_code == 200
    assert response.json() == []


def test_list_only_own_conversations(client):
    _seed_conversation("Chat A")
    _seed_conversation("Chat B")
    _seed_conversation("Someone else's", user_id="user-2")
    response = client.get("/api/conversations/", headers=auth_header())
    assert response.status_code == 200
    titles = {c["title"] for c in response.json()}
    assert titles == {"Chat A", "Chat B"}


def test_get_conversation(client):
    cid = _seed_conversation("My Chat", [("user", "hello"), ("assistant", "hi there")])
    response = client.get(f"/api/conversations/{cid}", headers=auth_header())
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "My Chat"
    assert data["messages"] == [
        {"role": "user", "content": "hello"},
        {"role": "assistant", "content": "hi there"},
    ]


def test_get_other_users_conversation_is_not_found(client):
    cid = _seed_conversation("Private", user_id="user-2")
    response = client.get(f"/api/conversations/{cid}", headers=auth_header())
    assert response.status_code == 404


def test_get_conversation_not_found(client):
    response = client.get("/api/conversations/9999", headers=auth_header())
    assert response.status_code == 404


def test_create_conversation_with_messages(client):
    body = {
        "title": "Welding paths",
        "provider": "openai",
        "messages": [{"role": "user", "content": "Tell me about welding"}, {"role": "assistant", "content": "Sure"}],
    }
    response = client.post("/api/conversations/", json=body, headers=auth_header())
    assert response.status_code == 200
    created = response.json()
    assert created["title"] == "Welding paths"
    assert created["provider"] == "openai"

    fetched = client.get(f"/api/conversations/{created['id']}", headers=auth_header()).json()
    assert [m["content"] for m in fetched["messages"]] == ["Tell me about welding", "Sure"]


def test_create_duplicate_titles_get_suffix(client):
    titles = [
        client.post("/api/conversations/", json={"title": "CNC"}, headers=auth_header()).json()["title"]
        for _ in range(3)
    ]
    assert titles == ["CNC", "CNC (2)", "CNC (3)"]


def test_duplicate_title_check_is_per_user(client):
    _seed_conversation("CNC", user_id="user-2")
    response = client.post("/api/conversations/", json={"title": "CNC"}, headers=auth_header())
    assert response.json()["title"] == "CNC"


def test_update_replaces_messages_in_order(client):
    cid = _seed_conversation("Old", [("user", "first")])
    body = {
        "title": "Renamed",
        "messages": [
            {"role": "user", "content": "one"},
            {"role": "assistant", "content": "two"},
            {"role": "user", "content": "three"},
        ],
    }
    response = client.put(f"/api/conversations/{cid}", json=body, headers=auth_header())
    assert response.status_code == 200
    assert response.json()["title"] == "Renamed"

    fetched = client.get(f"/api/conversations/{cid}", headers=auth_header()).json()
    assert [m["content"] for m in fetched["messages"]] == ["one", "two", "three"]


def test_update_other_users_conversation_is_not_found(client):
    cid = _seed_conversation("Private", user_id="user-2")
    response = client.put(f"/api/conversations/{cid}", json={"messages": []}, headers=auth_header())
    assert response.status_code == 404


def test_delete_conversation(client):
    cid = _seed_conversation("To Delete", [("user", "bye")])
    response = client.delete(f"/api/conversations/{cid}", headers=auth_header())
    assert response.status_code == 200
    assert response.json()["status"] == "deleted"

    # Verify it's gone
    response = client.get(f"/api/conversations/{cid}", headers=auth_header())
    assert response.status_code == 404


def test_delete_conversation_not_found(client):
    response = client.delete("/api/conversations/9999", headers=auth_header())
    assert response.status_code == 404


def test_clear_only_removes_callers_conversations(client):
    _seed_conversation("Mine 1", [("user", "a")])
    _seed_conversation("Mine 2")
    theirs = _seed_conversation("Theirs", [("user", "b")], user_id="user-2")

    response = client.post("/api/conversations/clear", headers=auth_header())
    assert response.status_code == 200
    assert response.json()["deleted"] == 2

    assert client.get("/api/conversations/", headers=auth_header()).json() == []
    other = client.get(f"/api/conversations/{theirs}", headers=auth_header("user-2"))
    assert other.status_code == 200
    assert other.json()["messages"] == [{"role": "user", "content": "b"}]
