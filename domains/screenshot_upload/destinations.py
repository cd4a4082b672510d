"""Category to channel resolution."""

from typing import Dict

from loguru import logger

from domains.screenshot_upload.messenger import Messenger
from domains.screenshot_upload.models import DESTINATION_NAMES, Category, Destination


class DestinationResolver:
    """Maps each category to its channel, creating missing channels."""

    def __init__(self, messenger: Messenger):
        self.messenger = messenger
        self._destinations: Dict[Category, Destination] = {}

    async def ensure_all(self) -> Dict[Category, Destination]:
        """
        Create any missing channels and cache all five.

        Runs once at startup so deliveries never wait on channel creation.

        Returns:
            Mapping of category to destination
        """
        existing = await self._existing()
        for category, name in DESTINATION_NAMES.items():
            destination = existing.get(name)
            if destination is None:
                logger.info(f"Creating missing channel #{name}")
                destination = await self.messenger.create_destination(name)
            self._destinations[category] = destination

        logger.info(f"Resolved {len(self._destinations)} channels")
        return dict(self._destinations)

    async def resolve(self, category: Category) -> Destination:
        """Get the destination for a category."""
        destination = self._destinations.get(category)
        if destination is not None:
            return destination

        name = DESTINATION_NAMES[category]
        destination = (await self._existing()).get(name)
        if destination is None:
            logger.info(f"Creating missing channel #{name}")
            destination = await self.messenger.create_destination(name)
        self._destinations[category] = destination
        return destination

    async def _existing(self) -> Dict[str, Destination]:
        destinations = {}
        for destination in await self.messenger.list_destinations():
            # First channel wins when names are duplicated
            destinations.setdefault(destination.name, destination)
        return destinations
