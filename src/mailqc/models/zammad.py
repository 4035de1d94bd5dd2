"""Zammad REST payload models.

Raw JSON from the ticketing API is validated through these models before it
is turned into an Email; anything that fails validation is rejected at the
boundary.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ZammadSettings(BaseModel):
    api_url: str = ""
    api_token: str = ""
    timeout_seconds: float = 30

    @property
    def configured(self) -> bool:
        return bool(self.api_url and self.api_token)


class ZammadTicket(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    number: str = ""
    title: str = ""
    owner_id: Optional[int] = None


class ZammadArticle(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    ticket_id: Optional[int] = None
    type: Optional[str] = None
    sender: Optional[str] = None
    internal: bool = False
    from_: str = Field(default="", alias="from")
    to: Optional[str] = ""
    subject: Optional[str] = None
    body: str = ""
    created_at: str


class ZammadUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    firstname: Optional[str] = ""
    lastname: Optional[str] = ""
    email: Optional[str] = ""
    active: bool = True
    roles: list[str] = []

    @property
    def display_name(self) -> str:
        name = f"{self.firstname or ''} {self.lastname or ''}".strip()
        return name or self.email or f"User {self.id}"
