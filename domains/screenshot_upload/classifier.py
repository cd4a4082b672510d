"""
Screenshot filename classifier.

RuneLite names screenshots after what triggered them, for example
``Mining(99).png``, ``Quest(Dragon Slayer).png``, ``Barrows(4).png`` or
``Pet 2019-05-04_16-01-33.png``. The leading word decides the category and
the parenthesised part becomes the label detail.
"""

import re
from pathlib import PurePath

from domains.screenshot_upload.models import Category, Label


SKILLS = frozenset({
    "Attack", "Hitpoints", "Mining",
    "Strength", "Agility", "Smithing",
    "Defence", "Herblore", "Fishing",
    "Ranged", "Thieving", "Cooking",
    "Prayer", "Crafting", "Firemaking",
    "Magic", "Fletching", "Woodcutting",
    "Runecraft", "Slayer", "Farming",
    "Construction", "Hunter",
})

LABEL_PATTERN = re.compile(r"([A-Z][a-z]+)\((.+)\)\.[A-Za-z0-9]+$")
PET_PATTERN = re.compile(r"Pet[\s\d_\-]+\.png$")


def classify(filename: str) -> Label:
    """
    Classify a screenshot by its filename.

    Level-up, Barrows and quest labels take precedence over the pet-drop
    pattern; anything unrecognised is ``Misc``. Never raises.

    Args:
        filename: Screenshot filename or path (only the basename is used)

    Returns:
        Label for the screenshot
    """
    name = PurePath(str(filename)).name

    match = LABEL_PATTERN.search(name)
    if match:
        word, detail = match.group(1), match.group(2)
        if word in SKILLS:
            return Label(Category.LEVEL_UP, detail=detail, subject=word)
        if word == "Barrows":
            return Label(Category.BARROWS, detail=detail, subject=word)
        if word == "Quest":
            return Label(Category.QUEST, detail=detail, subject=word)

    if PET_PATTERN.search(name):
        return Label(Category.PET)

    return Label(Category.MISC)


def build_caption(label: Label) -> str | None:
    """
    Build the message text posted alongside a screenshot.

    Pet drops and miscellaneous screenshots are posted without text.
    """
    if label.detail is None:
        return None
    if label.category is Category.LEVEL_UP:
        return f"Gained a level in {label.subject} ({label.detail})"
    if label.category is Category.QUEST:
        return f'Completed quest "{label.detail}"'
    if label.category is Category.BARROWS:
        return f"Opened Barrows chest #{label.detail}"
    return None
