"""Display name generator for anonymous users."""

import random
from typing import Literal

from claim.domain.value import DisplayName

from .base import Service

Locale = Literal["en", "ja"]

_ADJECTIVES: dict[str, tuple[str, ...]] = {
    "en": (
        "Cheerful",
        "Lively",
        "Gentle",
        "Clever",
        "Witty",
        "Quiet",
        "Bright",
    ),
    "ja": ("楽しい", "元気な", "優しい", "賢い", "面白い", "静かな", "明るい"),
}

_ANIMALS: dict[str, tuple[str, ...]] = {
    "en": ("Panda", "Koala", "Penguin", "Rabbit", "Fox", "Cat", "Dog"),
    "ja": ("パンダ", "コアラ", "ペンギン", "うさぎ", "きつね", "ねこ", "いぬ"),
}

# Japanese names read naturally without separators
_SEPARATOR: dict[str, str] = {"en": " ", "ja": ""}


class DisplayNameGenerator(Service):
    """Generate names like ``"Cheerful Panda 417"``.

    Names are not unique and collisions are expected. The random source is
    injectable so tests can seed it.
    """

    def __init__(
        self,
        locale: Locale = "en",
        rng: random.Random | None = None,
        max_number: int = 1000,
    ) -> None:
        if locale not in _ADJECTIVES:
            raise ValueError(f"Unsupported display name locale: {locale}")
        self.locale = locale
        self.rng = rng or random.SystemRandom()
        self.max_number = max_number

    def generate(self) -> DisplayName:
        adjective = self.rng.choice(_ADJECTIVES[self.locale])
        animal = self.rng.choice(_ANIMALS[self.locale])
        number = self.rng.randrange(self.max_number)
        sep = _SEPARATOR[self.locale]
        return DisplayName(f"{adjective}{sep}{animal}{sep}{number}")
