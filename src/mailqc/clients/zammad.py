"""Zammad ticketing API client.

Imports the agent replies of tickets created in a date range as ``Email``
objects. Every payload is validated through the models in
``mailqc.models.zammad`` before it is used.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Optional, Union

import httpx
import pydantic

from ..errors import ZammadError
from ..models.email import Email
from ..models.zammad import ZammadArticle, ZammadSettings, ZammadTicket, ZammadUser
from ..utils.log import get_logger
from ..utils.sanitize import sanitize_error

logger = get_logger(__name__)

API_PREFIX = "/api/v1"
AGENT_ROLE = "agent"

# Failures that drop a single ticket instead of the whole import
_TICKET_ERRORS = (httpx.HTTPError, pydantic.ValidationError, ValueError, KeyError)


def _iso(value: Union[str, datetime]) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def build_search_query(
    from_date: Union[str, datetime],
    to_date: Union[str, datetime],
    agent_id: Optional[Union[str, int]] = None,
) -> str:
    query = f"created_at:[{_iso(from_date)} TO {_iso(to_date)}]"
    if agent_id:
        query += f" AND owner_id:{agent_id}"
    return query


def _extract_ticket_ids(payload: Any) -> list[int]:
    """Ticket search answers with ids, ticket objects, or an expanded asset map."""
    if isinstance(payload, dict):
        payload = payload.get("tickets") or []
    if not isinstance(payload, list):
        raise ValueError("Unexpected ticket search response")
    ids: list[int] = []
    for item in payload:
        raw = item.get("id") if isinstance(item, dict) else item
        if isinstance(raw, bool):
            raise ValueError(f"Invalid ticket id in search response: {raw!r}")
        try:
            ids.append(int(raw))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid ticket id in search response: {raw!r}") from e
    return ids


def pick_agent_article(articles: list[ZammadArticle]) -> Optional[ZammadArticle]:
    """Most recent public article of type email."""
    candidates = [a for a in articles if a.type == "email" and not a.internal]
    if not candidates:
        return None
    return sorted(candidates, key=lambda a: a.created_at, reverse=True)[0]


class ZammadClient:
    def __init__(self, settings: ZammadSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self.settings.configured:
            raise ZammadError("Zammad API URL and token must both be configured")
        return httpx.AsyncClient(
            base_url=self.settings.api_url.rstrip("/"),
            headers={
                "Authorization": f"Token token={self.settings.api_token}",
                "Content-Type": "application/json",
            },
            timeout=self.settings.timeout_seconds,
            transport=self.transport,
        )

    @staticmethod
    async def _get_json(client: httpx.AsyncClient, path: str, **params: Any) -> Any:
        response = await client.get(f"{API_PREFIX}{path}", params=params or None)
        response.raise_for_status()
        return response.json()

    async def _fetch_ticket_email(self, client: httpx.AsyncClient, ticket_id: int) -> Optional[Email]:
        try:
            ticket = ZammadTicket.model_validate(
                await self._get_json(client, f"/tickets/{ticket_id}", expand="true")
            )
            raw_articles = await self._get_json(client, f"/ticket_articles/by_ticket/{ticket_id}")
            if not isinstance(raw_articles, list):
                raise ValueError("Article list expected")
            article = pick_agent_article([ZammadArticle.model_validate(a) for a in raw_articles])
            if article is None:
                logger.debug("Ticket %s has no public email article", ticket_id)
                return None

            agent_id, agent_name = "", ""
            if ticket.owner_id:
                owner = ZammadUser.model_validate(
                    await self._get_json(client, f"/users/{ticket.owner_id}")
                )
                agent_id, agent_name = str(owner.id), owner.display_name
        except _TICKET_ERRORS as e:
            logger.debug("Skipping ticket %s: %s", ticket_id, sanitize_error(str(e)))
            return None

        return Email(
            id=str(article.id),
            ticket_id=str(ticket.id),
            ticket_number=ticket.number,
            subject=article.subject or ticket.title,
            body=article.body,
            from_=article.from_ or "",
            to=article.to or "",
            agent_id=agent_id,
            agent_name=agent_name,
            created_at=article.created_at,
        )

    async def fetch_emails(
        self,
        from_date: Union[str, datetime],
        to_date: Union[str, datetime],
        agent_id: Optional[Union[str, int]] = None,
    ) -> list[Email]:
        """Fetch agent replies for tickets created between the two dates.

        Raises ZammadError when the search itself fails. Tickets that cannot
        be fetched or parsed are skipped.
        """
        query = build_search_query(from_date, to_date, agent_id)
        async with self._client() as client:
            try:
                payload = await self._get_json(client, "/tickets/search", query=query)
                ticket_ids = _extract_ticket_ids(payload)
            except httpx.HTTPStatusError as e:
                raise ZammadError(
                    f"Zammad API error: {e.response.status_code} {e.response.reason_phrase}"
                ) from e
            except (httpx.HTTPError, ValueError) as e:
                raise ZammadError(f"Zammad request failed: {sanitize_error(str(e))}") from e

            logger.info("Ticket search returned %d tickets", len(ticket_ids))
            results = await asyncio.gather(
                *(self._fetch_ticket_email(client, tid) for tid in ticket_ids)
            )

        return [email for email in results if email is not None]

    async def fetch_agents(self) -> list[dict]:
        """Active users holding an agent role, as ``{"id", "name"}`` dicts."""
        async with self._client() as client:
            try:
                raw = await self._get_json(client, "/users", expand="true")
            except httpx.HTTPStatusError as e:
                raise ZammadError(
                    f"Zammad API error: {e.response.status_code} {e.response.reason_phrase}"
                ) from e
            except (httpx.HTTPError, ValueError) as e:
                raise ZammadError(f"Zammad request failed: {sanitize_error(str(e))}") from e

        if not isinstance(raw, list):
            raise ZammadError("Unexpected users response from Zammad")

        agents: list[dict] = []
        for item in raw:
            try:
                user = ZammadUser.model_validate(item)
            except pydantic.ValidationError as e:
                logger.debug("Skipping malformed user: %s", e)
                continue
            if user.active and any(AGENT_ROLE in r.lower() for r in user.roles):
                agents.append({"id": str(user.id), "name": user.display_name})
        return agents

    async def test_connection(self) -> bool:
        async with self._client() as client:
            try:
                response = await client.get(f"{API_PREFIX}/users/me")
            except httpx.HTTPError as e:
                logger.warning("Zammad connection test failed: %s", sanitize_error(str(e)))
                return False
        return response.is_success
