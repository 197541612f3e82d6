from __future__ import annotations

from deskmate_ai.core.database import ApiConfig, Chat, Message
from deskmate_ai.llm.config import ProviderConfig, ProviderKind
from deskmate_ai.llm.messages import MessageRole


def test_message_images_round_trip() -> None:
    message = Message(chat_id="c", role=MessageRole.user, content="see")
    assert message.get_images_list() is None
    message.set_images_list(["https://img/a.png", "data:image/png;base64,AA=="])
    assert message.get_images_list() == ["https://img/a.png", "data:image/png;base64,AA=="]
    message.set_images_list([])
    assert message.images is None


def test_generated_ids_are_unique() -> None:
    assert Chat(title="a").id != Chat(title="b").id


def test_api_config_defaults_and_provider_view() -> None:
    config = ApiConfig(name="Local", provider=ProviderKind.ollama, model="llama3", base_url="http://localhost:11434")
    assert config.api_key == ""
    assert config.temperature == 0.7
    assert config.is_default is False

    view = config.to_provider_config()
    assert isinstance(view, ProviderConfig)
    assert view.provider == ProviderKind.ollama
    assert view.base_url == "http://localhost:11434"
    assert view.id == config.id
