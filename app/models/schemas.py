"""
Pydantic models for the Discord REST API.

Only the fields the courier reads are declared; everything else in a
response payload is ignored.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict


# Discord channel type for a guild text channel
GUILD_TEXT = 0


class DiscordModel(BaseModel):
    """Base model tolerating the many fields Discord adds over time."""
    model_config = ConfigDict(extra="ignore")


class Guild(DiscordModel):
    """Guild (server) the bot is a member of."""
    id: str
    name: str


class Channel(DiscordModel):
    """Guild channel."""
    id: str
    name: Optional[str] = None
    type: int = GUILD_TEXT


class Attachment(DiscordModel):
    """Uploaded file attached to a message."""
    id: str
    filename: str


class Message(DiscordModel):
    """Message created by a send."""
    id: str
    channel_id: str
    content: str = ""
    attachments: list[Attachment] = []
