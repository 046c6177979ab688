"""
Outbound replies built by the composer and delivered by telegram_api.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

# Telegram accepts 2-10 items per media group
MEDIA_GROUP_MIN = 2
MEDIA_GROUP_MAX = 10


@dataclass(frozen=True)
class Button:
    """Inline keyboard button. Exactly one target is set."""
    text: str
    url: Optional[str] = None
    switch_inline_query: Optional[str] = None
    switch_inline_query_current_chat: Optional[str] = None


Keyboard = tuple[tuple[Button, ...], ...]


@dataclass(frozen=True)
class TextReply:
    text: str
    reply_to: Optional[int] = None
    code: bool = False  # whole text shown as a monospace code entity
    disable_link_preview: bool = False
    keyboard: Optional[Keyboard] = None


@dataclass(frozen=True)
class PhotoReply:
    photo: str
    reply_to: Optional[int] = None
    keyboard: Optional[Keyboard] = None


@dataclass(frozen=True)
class PhotoGroupReply:
    photos: tuple[str, ...]
    reply_to: Optional[int] = None

    def __post_init__(self):
        if not MEDIA_GROUP_MIN <= len(self.photos) <= MEDIA_GROUP_MAX:
            raise ValueError(
                f"Photo group needs {MEDIA_GROUP_MIN}-{MEDIA_GROUP_MAX} photos, got {len(self.photos)}"
            )


@dataclass(frozen=True)
class InlineErrorResult:
    formula: str
    title: str = "Invalid LaTeX"


@dataclass(frozen=True)
class InlinePhotoResult:
    photo: str
    keyboard: Optional[Keyboard] = None


InlineResult = Union[InlineErrorResult, InlinePhotoResult]


@dataclass(frozen=True)
class InlineAnswer:
    results: tuple[InlineResult, ...] = field(default_factory=tuple)


OutboundReply = Union[TextReply, PhotoReply, PhotoGroupReply, InlineAnswer]
