"""Email data model.

Emails are ephemeral: built from a ticketing-system article or from pasted
text, scored, and never persisted on their own.
"""

from __future__ import annotations

from pydantic import Field

from .base import CamelModel


class Email(CamelModel):
    id: str
    ticket_id: str = ""
    ticket_number: str = ""
    subject: str = ""
    body: str = ""
    from_: str = Field(default="", alias="from")
    to: str = ""
    agent_id: str = ""
    agent_name: str = ""
    created_at: str = ""
