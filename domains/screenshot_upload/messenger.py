"""
Messaging collaborator.

The pipeline only needs three things from a chat service: list the
channels of the workspace, create a channel, and post a file with an
optional caption. ``Messenger`` captures that surface; ``DiscordMessenger``
implements it against the Discord REST API.
"""

from __future__ import annotations

import json
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from app.models.schemas import GUILD_TEXT, Channel, Guild, Message
from app.utils.config import Settings, get_settings
from domains.screenshot_upload.errors import SendFailure
from domains.screenshot_upload.models import Destination


class Messenger(ABC):
    @abstractmethod
    async def list_destinations(self) -> List[Destination]:
        raise NotImplementedError

    @abstractmethod
    async def create_destination(self, name: str) -> Destination:
        raise NotImplementedError

    @abstractmethod
    async def send(self, destination: Destination, attachment: Path, caption: Optional[str] = None) -> None:
        """Post ``attachment`` to ``destination``; raise ``SendFailure`` if it was not delivered."""
        raise NotImplementedError

    async def close(self) -> None:
        return None


class DiscordMessenger(Messenger):
    """Discord bot client for the first (or configured) guild."""

    def __init__(
        self,
        token: str = None,
        guild_id: Optional[str] = None,
        api_url: str = None,
        timeout: float = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize Discord client.

        Args:
            token: Bot token
            guild_id: Guild to manage; the bot's first guild when omitted
            api_url: REST API base URL
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests use ``httpx.MockTransport``)
            settings: Settings to read defaults from
        """
        settings = settings or get_settings()
        self.token = token or settings.discord_token
        self.guild_id = guild_id or settings.discord_guild_id
        self.api_url = (api_url or settings.discord_api_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout

        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            headers={"Authorization": f"Bot {self.token}"},
            timeout=self.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_guild_id(self) -> str:
        """Get the guild to manage, looking up the bot's first guild once."""
        if self.guild_id is None:
            response = await self._client.get("/users/@me/guilds")
            response.raise_for_status()
            guilds = [Guild.model_validate(g) for g in response.json()]
            if not guilds:
                raise RuntimeError("Discord bot is not a member of any guild")
            self.guild_id = guilds[0].id
            logger.info(f"Using Discord guild: {guilds[0].name} ({self.guild_id})")
        return self.guild_id

    async def list_destinations(self) -> List[Destination]:
        guild_id = await self.get_guild_id()
        response = await self._client.get(f"/guilds/{guild_id}/channels")
        response.raise_for_status()

        channels = [Channel.model_validate(c) for c in response.json()]
        return [
            Destination(name=c.name, channel_id=c.id)
            for c in channels
            if c.type == GUILD_TEXT and c.name
        ]

    async def create_destination(self, name: str) -> Destination:
        guild_id = await self.get_guild_id()
        response = await self._client.post(
            f"/guilds/{guild_id}/channels",
            json={"name": name, "type": GUILD_TEXT},
        )
        response.raise_for_status()

        channel = Channel.model_validate(response.json())
        logger.success(f"Created channel #{name}")
        return Destination(name=channel.name or name, channel_id=channel.id)

    async def send(self, destination: Destination, attachment: Path, caption: Optional[str] = None) -> None:
        attachment = Path(attachment)
        try:
            content = attachment.read_bytes()
        except OSError as e:
            raise SendFailure(f"Cannot read {attachment}: {e}") from e

        payload = {"attachments": [{"id": 0, "filename": attachment.name}]}
        if caption:
            payload["content"] = caption
        content_type = mimetypes.guess_type(attachment.name)[0] or "application/octet-stream"

        response = await self._client.post(
            f"/channels/{destination.channel_id}/messages",
            data={"payload_json": json.dumps(payload)},
            files={"files[0]": (attachment.name, content, content_type)},
        )
        if response.is_error:
            raise SendFailure(
                f"Discord rejected upload to #{destination.name}: "
                f"{response.status_code} {response.text[:200]}"
            )

        # A 2xx status means the file was posted; the body is informational only
        try:
            message = Message.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.debug(f"Posted to #{destination.name}; unreadable reply: {e}")
            return
        logger.debug(f"Posted message {message.id} to #{destination.name}")
