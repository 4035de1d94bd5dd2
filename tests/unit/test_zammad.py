"""Tests for clients/zammad.py."""

from __future__ import annotations

import httpx
import pytest

from mailqc.clients.zammad import ZammadClient, _extract_ticket_ids, build_search_query, pick_agent_article
from mailqc.errors import ZammadError
from mailqc.models.zammad import ZammadArticle, ZammadSettings

SETTINGS = ZammadSettings(api_url="https://desk.example.com/", api_token="secret-token")

TICKETS = {
    1: {"id": 1, "number": "1001", "title": "Refund request", "owner_id": 7, "state": "open"},
    2: {"id": 2, "number": "1002", "title": "Internal only", "owner_id": 7},
}

ARTICLES = {
    1: [
        {"id": 10, "ticket_id": 1, "type": "email", "internal": False, "from": "customer@example.org",
         "to": "support@example.com", "subject": "Refund", "body": "Where is my refund?",
         "created_at": "2024-05-02T08:00:00Z"},
        {"id": 11, "ticket_id": 1, "type": "email", "internal": False, "from": "jane@example.com",
         "to": "customer@example.org", "subject": "RE: Refund", "body": "<p>Dear Sam,</p><p>Done.</p>",
         "created_at": "2024-05-03T09:00:00Z"},
        {"id": 12, "ticket_id": 1, "type": "note", "internal": True, "body": "escalated",
         "created_at": "2024-05-04T09:00:00Z"},
    ],
    2: [
        {"id": 20, "ticket_id": 2, "type": "note", "internal": True, "body": "todo",
         "created_at": "2024-05-02T08:00:00Z"},
    ],
}

USERS = [
    {"id": 7, "firstname": "Jane", "lastname": "Doe", "email": "jane@example.com", "active": True,
     "roles": ["Agent"]},
    {"id": 8, "firstname": "Old", "lastname": "Timer", "active": False, "roles": ["Agent"]},
    {"id": 9, "firstname": "Cus", "lastname": "Tomer", "active": True, "roles": ["Customer"]},
]


def _handler(search_response=None, seen=None):
    def handle(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        path = request.url.path
        if path == "/api/v1/tickets/search":
            if search_response is not None:
                return search_response
            return httpx.Response(200, json=[1, 2, 3])
        if path.startswith("/api/v1/tickets/"):
            ticket_id = int(path.rsplit("/", 1)[1])
            if ticket_id in TICKETS:
                return httpx.Response(200, json=TICKETS[ticket_id])
            return httpx.Response(500, json={"error": "boom"})
        if path.startswith("/api/v1/ticket_articles/by_ticket/"):
            return httpx.Response(200, json=ARTICLES.get(int(path.rsplit("/", 1)[1]), []))
        if path == "/api/v1/users/me":
            return httpx.Response(200, json=USERS[0])
        if path == "/api/v1/users":
            return httpx.Response(200, json=USERS)
        if path.startswith("/api/v1/users/"):
            user_id = int(path.rsplit("/", 1)[1])
            return httpx.Response(200, json=next(u for u in USERS if u["id"] == user_id))
        return httpx.Response(404)

    return handle


def _client(handler) -> ZammadClient:
    return ZammadClient(SETTINGS, transport=httpx.MockTransport(handler))


class TestHelpers:
    def test_search_query(self):
        assert build_search_query("2024-05-01", "2024-05-31") == "created_at:[2024-05-01 TO 2024-05-31]"
        assert build_search_query("a", "b", 7) == "created_at:[a TO b] AND owner_id:7"

    def test_extract_ticket_ids(self):
        assert _extract_ticket_ids([1, "2"]) == [1, 2]
        assert _extract_ticket_ids([{"id": 3}]) == [3]
        assert _extract_ticket_ids({"tickets": [4, 5], "assets": {}}) == [4, 5]
        with pytest.raises(ValueError):
            _extract_ticket_ids("nope")

    @pytest.mark.parametrize("payload", [[{"title": "no id"}], [None], ["abc"], [{"id": [1]}], [True]])
    def test_extract_ticket_ids_rejects_invalid_ids(self, payload):
        with pytest.raises(ValueError, match="Invalid ticket id"):
            _extract_ticket_ids(payload)

    def test_pick_agent_article(self):
        articles = [ZammadArticle.model_validate(a) for a in ARTICLES[1]]
        assert pick_agent_article(articles).id == 11
        assert pick_agent_article([ZammadArticle.model_validate(a) for a in ARTICLES[2]]) is None


class TestFetchEmails:
    @pytest.mark.asyncio
    async def test_maps_tickets_to_emails(self):
        seen: list[httpx.Request] = []
        emails = await _client(_handler(seen=seen)).fetch_emails("2024-05-01", "2024-05-31")

        # ticket 2 has no public email, ticket 3 fails to load
        assert len(emails) == 1
        email = emails[0]
        assert email.id == "11"
        assert email.ticket_id == "1"
        assert email.ticket_number == "1001"
        assert email.subject == "RE: Refund"
        assert email.from_ == "jane@example.com"
        assert email.agent_id == "7"
        assert email.agent_name == "Jane Doe"
        assert email.created_at == "2024-05-03T09:00:00Z"

        search = seen[0]
        assert search.headers["Authorization"] == "Token token=secret-token"
        assert search.url.params["query"] == "created_at:[2024-05-01 TO 2024-05-31]"

    @pytest.mark.asyncio
    async def test_agent_filter_in_query(self):
        seen: list[httpx.Request] = []
        await _client(_handler(seen=seen)).fetch_emails("2024-05-01", "2024-05-31", agent_id="7")
        assert seen[0].url.params["query"].endswith(" AND owner_id:7")

    @pytest.mark.asyncio
    async def test_search_error_status(self):
        client = _client(_handler(search_response=httpx.Response(401)))
        with pytest.raises(ZammadError, match="401"):
            await client.fetch_emails("2024-05-01", "2024-05-31")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handle(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ZammadError, match="connection refused"):
            await _client(handle).fetch_emails("2024-05-01", "2024-05-31")

    @pytest.mark.asyncio
    async def test_malformed_search_payload(self):
        client = _client(_handler(search_response=httpx.Response(200, json={"unexpected": True})))
        assert await client.fetch_emails("2024-05-01", "2024-05-31") == []

    @pytest.mark.asyncio
    async def test_search_result_without_id(self):
        client = _client(_handler(search_response=httpx.Response(200, json=[{"title": "no id"}])))
        with pytest.raises(ZammadError, match="Invalid ticket id"):
            await client.fetch_emails("2024-05-01", "2024-05-31")

    @pytest.mark.asyncio
    async def test_missing_settings(self):
        calls: list[httpx.Request] = []
        client = ZammadClient(
            ZammadSettings(api_url="", api_token=""),
            transport=httpx.MockTransport(_handler(seen=calls)),
        )
        with pytest.raises(ZammadError):
            await client.fetch_emails("2024-05-01", "2024-05-31")
        assert calls == []


class TestFetchAgents:
    @pytest.mark.asyncio
    async def test_active_agents_only(self):
        agents = await _client(_handler()).fetch_agents()
        assert agents == [{"id": "7", "name": "Jane Doe"}]

    @pytest.mark.asyncio
    async def test_error(self):
        def handle(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403)

        with pytest.raises(ZammadError):
            await _client(handle).fetch_agents()


class TestConnection:
    @pytest.mark.asyncio
    async def test_ok(self):
        assert await _client(_handler()).test_connection() is True

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        assert await _client(lambda request: httpx.Response(401)).test_connection() is False

    @pytest.mark.asyncio
    async def test_unreachable(self):
        def handle(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        assert await _client(handle).test_connection() is False
