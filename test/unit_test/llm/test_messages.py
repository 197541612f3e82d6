from __future__ import annotations

from deskmate_ai.llm.messages import ImagePart, MessageRole, NormalizedMessage, TextPart, split_data_url


def test_text_only_message_is_plain_string() -> None:
    msg = NormalizedMessage.build("user", "hello")
    assert msg.role == MessageRole.user
    assert msg.content == "hello"
    assert msg.wire_content() == "hello"
    assert msg.image_urls() == []


def test_images_produce_structured_content() -> None:
    msg = NormalizedMessage.build(MessageRole.user, "look", ["https://img/a.png", "data:image/jpeg;base64,AAAA"])
    assert isinstance(msg.content, list)
    assert isinstance(msg.content[0], TextPart)
    assert all(isinstance(p, ImagePart) for p in msg.content[1:])
    assert msg.wire_content() == [
        {"type": "text", "text": "look"},
        {"type": "image_url", "image_url": {"url": "https://img/a.png"}},
        {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,AAAA"}},
    ]


def test_empty_text_with_images_omits_text_part() -> None:
    msg = NormalizedMessage.build("user", "", ["https://img/a.png"])
    assert msg.wire_content() == [{"type": "image_url", "image_url": {"url": "https://img/a.png"}}]
    assert msg.text() == ""


def test_empty_image_list_is_text_only() -> None:
    assert NormalizedMessage.build("assistant", "ok", []).content == "ok"


def test_split_data_url() -> None:
    assert split_data_url("data:image/webp;base64,UklGRg==") == ("image/webp", "UklGRg==")
    assert split_data_url("data:;base64,AAAA") == ("image/png", "AAAA")
    assert split_data_url("https://example.com/a.png") is None
    assert split_data_url("data:text/plain,hello") is None
