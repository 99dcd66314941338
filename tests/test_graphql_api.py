"""GraphQL over HTTP — end-to-end scenarios through the FastAPI app.

Learn: These go through the whole stack: header → context getter →
Strawberry → resolvers → SQLite. Errors come back in the `errors`
array of a 200 response, the way GraphQL reports field failures.
"""

import pytest

REGISTER = """
mutation Register($username: String!, $password: String!) {
  registerUser(username: $username, password: $password)
}
"""

LOGIN = """
mutation Login($username: String!, $password: String!) {
  loginUser(username: $username, password: $password)
}
"""

CREATE_EVENT = """
mutation Create($name: String!, $date: String!, $location: String!) {
  createEvent(name: $name, date: $date, location: $location) {
    id name date location
    creator { id username }
  }
}
"""

ATTENDANCE = """
mutation Attend($eventId: ID!, $status: String!) {
  updateEventAttendance(eventId: $eventId, status: $status) { id }
}
"""

EVENT_DETAIL = """
query Event($id: ID!) {
  event(id: $id) {
    id name
    creator { username }
    attendees { id username }
  }
}
"""


async def _register(gql, username="alice", password="pw1") -> str:
    body = await gql(REGISTER, {"username": username, "password": password})
    assert "errors" not in body, body
    return body["data"]["registerUser"]


async def _create_event(gql, token, name="Launch") -> dict:
    body = await gql(
        CREATE_EVENT,
        {"name": name, "date": "2023-06-01", "location": "Stockholm"},
        token=token,
    )
    assert "errors" not in body, body
    return body["data"]["createEvent"]


# ═══════════════════════════════════════════════════════════
# Register / login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_and_login(gql, codec):
    registered = await _register(gql)

    body = await gql(LOGIN, {"username": "alice", "password": "pw1"})
    token = body["data"]["loginUser"]
    assert codec.verify(token)["id"] == codec.verify(registered)["id"]

    me = await gql("{ user { id username } }", token=token)
    assert me["data"]["user"] == {
        "id": str(codec.verify(token)["id"]),
        "username": "alice",
    }


@pytest.mark.asyncio
async def test_login_failures_share_one_message(gql):
    await _register(gql)

    wrong = await gql(LOGIN, {"username": "alice", "password": "wrong"})
    unknown = await gql(LOGIN, {"username": "nobody", "password": "x"})

    assert wrong["data"]["loginUser"] is None
    assert wrong["errors"][0]["message"] == "Invalid login credentials"
    assert unknown["errors"][0]["message"] == "Invalid login credentials"


@pytest.mark.asyncio
async def test_duplicate_username_is_masked(gql):
    await _register(gql)
    body = await gql(REGISTER, {"username": "alice", "password": "pw2"})
    assert body["data"]["registerUser"] is None
    assert body["errors"][0]["message"] == "Unexpected error."


@pytest.mark.asyncio
async def test_user_type_does_not_expose_password(client, gql):
    token = await _register(gql)
    r = await client.post(
        "/graphql",
        json={"query": "{ user { password } }"},
        headers={"authorization": token},
    )
    body = r.json()
    assert "Cannot query field 'password'" in body["errors"][0]["message"]
    assert body.get("data") is None


# ═══════════════════════════════════════════════════════════
# Token handling at the transport boundary
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_bearer_prefix_is_accepted(gql):
    token = await _register(gql)
    body = await gql("{ events { id } }", token=f"Bearer {token}")
    assert body == {"data": {"events": []}}


@pytest.mark.asyncio
async def test_bad_token(gql):
    body = await gql("{ events { id } }", token="not-a-jwt")
    assert body["errors"][0]["message"] == "Bad token"


@pytest.mark.parametrize(
    "operation",
    [
        "{ events { id } }",
        '{ event(id: "1") { id } }',
        "{ user { id } }",
        'mutation { createEvent(name: "n", date: "d", location: "l") { id } }',
        'mutation { updateEvent(id: "1", name: "n", date: "d", location: "l") { id } }',
        'mutation { deleteEvent(id: "1") { id } }',
        'mutation { updateEventAttendance(eventId: "1", status: "ATTEND") { id } }',
    ],
)
@pytest.mark.asyncio
async def test_operations_without_token(gql, operation):
    body = await gql(operation)
    assert body["errors"][0]["message"] == "No token"


@pytest.mark.parametrize(
    "operation",
    [
        '{ event(id: "abc") { id } }',
        'mutation { updateEvent(id: "abc", name: "n", date: "d", location: "l") { id } }',
        'mutation { deleteEvent(id: "abc") { id } }',
        'mutation { updateEventAttendance(eventId: "abc", status: "ATTEND") { id } }',
    ],
)
@pytest.mark.asyncio
async def test_non_numeric_id_without_token_reports_no_token(gql, operation):
    body = await gql(operation)
    assert body["errors"][0]["message"] == "No token"


@pytest.mark.asyncio
async def test_non_numeric_id_with_token_is_masked(gql):
    token = await _register(gql)
    body = await gql('{ event(id: "abc") { id } }', token=token)
    assert body["errors"][0]["message"] == "Unexpected error."


# ═══════════════════════════════════════════════════════════
# Events
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_event_creator_round_trip(gql, codec):
    token = await _register(gql)
    event = await _create_event(gql, token)

    assert event["name"] == "Launch"
    assert event["creator"] == {
        "id": str(codec.verify(token)["id"]),
        "username": "alice",
    }

    body = await gql("{ user { createdEvents { id } attendedEvents { id } } }", token=token)
    assert body["data"]["user"]["createdEvents"] == [{"id": event["id"]}]
    assert body["data"]["user"]["attendedEvents"] == []


@pytest.mark.asyncio
async def test_update_and_delete_event(gql):
    alice = await _register(gql, "alice")
    bob = await _register(gql, "bob")
    event = await _create_event(gql, alice)

    body = await gql(
        """
        mutation Update($id: ID!) {
          updateEvent(id: $id, name: "Renamed", date: "2024-01-01", location: "Paris") {
            id name date location creator { username }
          }
        }
        """,
        {"id": event["id"]},
        token=bob,
    )
    assert body["data"]["updateEvent"] == {
        "id": event["id"],
        "name": "Renamed",
        "date": "2024-01-01",
        "location": "Paris",
        "creator": {"username": "alice"},
    }

    body = await gql(
        "mutation Delete($id: ID!) { deleteEvent(id: $id) { id name } }",
        {"id": event["id"]},
        token=bob,
    )
    assert body["data"]["deleteEvent"] == {"id": event["id"], "name": "Renamed"}

    body = await gql(EVENT_DETAIL, {"id": event["id"]}, token=alice)
    assert body["data"]["event"] is None


@pytest.mark.asyncio
async def test_update_missing_event_returns_null(gql):
    token = await _register(gql)
    body = await gql(
        'mutation { updateEvent(id: "999", name: "n", date: "d", location: "l") { id } }',
        token=token,
    )
    assert body == {"data": {"updateEvent": None}}


# ═══════════════════════════════════════════════════════════
# Attendance
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_attend_then_unattend(gql):
    alice = await _register(gql, "alice")
    bob = await _register(gql, "bob")
    event = await _create_event(gql, alice)

    await gql(ATTENDANCE, {"eventId": event["id"], "status": "ATTEND"}, token=bob)
    body = await gql(EVENT_DETAIL, {"id": event["id"]}, token=alice)
    assert [a["username"] for a in body["data"]["event"]["attendees"]] == ["bob"]

    body = await gql("{ user { attendedEvents { id } } }", token=bob)
    assert body["data"]["user"]["attendedEvents"] == [{"id": event["id"]}]

    await gql(ATTENDANCE, {"eventId": event["id"], "status": "UNATTEND"}, token=bob)
    body = await gql(EVENT_DETAIL, {"id": event["id"]}, token=alice)
    assert body["data"]["event"]["attendees"] == []


@pytest.mark.asyncio
async def test_duplicate_attend_is_masked(gql):
    token = await _register(gql)
    event = await _create_event(gql, token)
    variables = {"eventId": event["id"], "status": "ATTEND"}

    first = await gql(ATTENDANCE, variables, token=token)
    assert first["data"]["updateEventAttendance"] == {"id": event["id"]}

    second = await gql(ATTENDANCE, variables, token=token)
    assert second["errors"][0]["message"] == "Unexpected error."


def test_error_masking_is_built_per_request():
    from strawberry.extensions import MaskErrors, SchemaExtension

    from eventql.graphql.schema import schema

    assert not any(isinstance(ext, SchemaExtension) for ext in schema.extensions)

    first = [e for e in schema.get_extensions() if isinstance(e, MaskErrors)]
    second = [e for e in schema.get_extensions() if isinstance(e, MaskErrors)]
    assert len(first) == len(second) == 1
    assert first[0] is not second[0]
