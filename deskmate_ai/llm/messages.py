"""Wire-neutral chat messages.

``NormalizedMessage`` is what every provider adapter translates from. Its
content is either plain text or, when a turn carries images, a list of
parts in the OpenAI vision shape::

    [{"type": "text", "text": "..."},
     {"type": "image_url", "image_url": {"url": "https://... or data:..."}}]
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    user = "user"
    assistant = "assistant"


class ImageURL(BaseModel):
    url: str


class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: ImageURL


ContentPart = Union[TextPart, ImagePart]


class NormalizedMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: Union[str, List[ContentPart]] = Field(description="Plain text, or text and image parts.")

    @classmethod
    def build(cls, role: MessageRole | str, text: str, images: Optional[Sequence[str]] = None) -> "NormalizedMessage":
        """
        Build a message from stored fields.

        Messages with at least one image get structured content; the text
        part is omitted when the text is empty.
        """
        if not images:
            return cls(role=MessageRole(role), content=text)
        parts: List[ContentPart] = []
        if text:
            parts.append(TextPart(text=text))
        parts.extend(ImagePart(image_url=ImageURL(url=url)) for url in images)
        return cls(role=MessageRole(role), content=parts)

    def text(self) -> str:
        """Return the concatenated text of the message."""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(p.text for p in self.content if isinstance(p, TextPart))

    def image_urls(self) -> List[str]:
        if isinstance(self.content, str):
            return []
        return [p.image_url.url for p in self.content if isinstance(p, ImagePart)]

    def wire_content(self) -> Union[str, List[dict]]:
        """Content in the OpenAI chat-completions shape."""
        if isinstance(self.content, str):
            return self.content
        return [p.model_dump() for p in self.content]


_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]*)*?);base64,(?P<data>.*)$", re.DOTALL)


def split_data_url(url: str) -> Optional[Tuple[str, str]]:
    """
    Split a base64 ``data:`` URL into ``(media_type, data)``.

    Returns:
        ``None`` when ``url`` is not a base64 data URL. A missing media type
        defaults to ``image/png``.
    """
    match = _DATA_URL.match(url)
    if match is None:
        return None
    return match.group("mime") or "image/png", match.group("data")
