import asyncio

from domains.screenshot_upload.destinations import DestinationResolver
from domains.screenshot_upload.models import DESTINATION_NAMES, Category


def test_ensure_all_creates_only_missing_channels(make_messenger):
    messenger = make_messenger(channels=["general", "quests", "misc"])
    resolver = DestinationResolver(messenger)

    destinations = asyncio.run(resolver.ensure_all())

    assert sorted(messenger.created) == ["barrows", "level-ups", "pets"]
    assert {c: d.name for c, d in destinations.items()} == DESTINATION_NAMES


def test_ensure_all_twice_never_duplicates(messenger):
    asyncio.run(DestinationResolver(messenger).ensure_all())
    asyncio.run(DestinationResolver(messenger).ensure_all())

    assert len(messenger.created) == 5


def test_resolve_same_category_twice_creates_once(messenger):
    resolver = DestinationResolver(messenger)

    async def resolve_twice():
        first = await resolver.resolve(Category.PET)
        second = await resolver.resolve(Category.PET)
        return first, second

    first, second = asyncio.run(resolve_twice())

    assert first == second
    assert first.name == "pets"
    assert messenger.created == ["pets"]


def test_resolve_uses_existing_channel(make_messenger):
    messenger = make_messenger(channels=["level-ups"])
    resolver = DestinationResolver(messenger)

    destination = asyncio.run(resolver.resolve(Category.LEVEL_UP))

    assert destination.channel_id == "id-level-ups"
    assert messenger.created == []
