"""Sprite rectangles read from a loosely formatted JSON sprite list."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from os import PathLike

MAX_SPRITES = 8
_NAME_LIMIT = 32
_KEYS = ("name", "x", "y", "width", "height")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


@dataclass
class SpriteInfo:
    """Source rectangle of one sprite inside a sheet image."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    name: str = ""


def _leading_int(text: str, pos: int) -> int:
    """Parse an integer prefix at ``pos`` the way ``atoi`` does; 0 if none."""
    match = _INT_PREFIX.match(text, pos)
    return int(match.group(1)) if match else 0


def _key_at(text: str, pos: int) -> str | None:
    for key in _KEYS:
        if text.startswith(f'"{key}"', pos):
            return key
    return None


def _skip_past_field(text: str, pos: int) -> int:
    end = len(text)
    while pos < end and text[pos] not in ",}":
        pos += 1
    if pos < end and text[pos] == ",":
        pos += 1
    return pos


def parse_sprites(text: str, max_count: int = MAX_SPRITES) -> list[SpriteInfo]:
    """Read sprite objects from the first array in ``text``.

    Only objects with a positive width and height are kept, at most
    ``max_count`` of them. Names of 32 or more UTF-8 bytes are left empty.
    """
    start = text.find("[")
    if start < 0:
        return []
    end = len(text)
    pos = start + 1
    sprites: list[SpriteInfo] = []

    while pos < end and text[pos] != "]":
        pos = text.find("{", pos)
        if pos < 0:
            break
        pos += 1
        sprite = SpriteInfo()

        while pos < end and text[pos] != "}":
            key = _key_at(text, pos)
            if key is None:
                pos += 1
                continue
            colon = text.find(":", pos)
            if colon < 0:
                pos = end
                break
            pos = colon + 1
            if key == "name":
                while pos < end and text[pos] in ' "':
                    pos += 1
                close = text.find('"', pos)
                if close < 0:
                    close = end
                value = text[pos:close]
                if 0 < len(value.encode("utf-8")) < _NAME_LIMIT:
                    sprite.name = value
                pos = close
                if pos < end and text[pos] == '"':
                    pos += 1
            else:
                while pos < end and text[pos] == " ":
                    pos += 1
                setattr(sprite, key, _leading_int(text, pos))
            pos = _skip_past_field(text, pos)

        if pos < end and text[pos] == "}":
            pos += 1
            if sprite.width > 0 and sprite.height > 0 and len(sprites) < max_count:
                sprites.append(sprite)

        while pos < end and text[pos] not in "{}]":
            pos += 1

    return sprites


@dataclass
class SpriteSheet:
    """An ordered set of sprite rectangles, addressed by index or name."""

    sprites: list[SpriteInfo] = field(default_factory=list)

    def load_json(self, path: str | PathLike[str]) -> None:
        """Replace the sprites with those described in the JSON file at ``path``.

        Raises ``OSError`` if the file cannot be read and ``ValueError`` if it
        describes no usable sprite.
        """
        with open(path, "rb") as handle:
            text = handle.read().decode("utf-8", errors="replace")
        self.sprites = parse_sprites(text, MAX_SPRITES)
        if not self.sprites:
            raise ValueError(f"no sprites found in {path!s}")

    def find(self, name: str) -> int | None:
        """Return the index of the first sprite called ``name``, or None."""
        return next(
            (index for index, sprite in enumerate(self.sprites) if sprite.name == name),
            None,
        )

    def get(self, index: int) -> SpriteInfo | None:
        """Return the sprite at ``index``, or None when out of range."""
        if 0 <= index < len(self.sprites):
            return self.sprites[index]
        return None

    def __len__(self) -> int:
        return len(self.sprites)