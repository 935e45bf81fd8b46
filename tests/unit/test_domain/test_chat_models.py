"""
Chat Domain Model Unit Tests
"""

from cerebr_chat.domain.chat import (
    AccumulatedMessage,
    CallOptions,
    ChatParams,
    ImageContentPart,
    Message,
    OtherContentPart,
    TextContentPart,
)


class TestMessage:
    def test_content_parts_are_discriminated(self):
        msg = Message.model_validate(
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "look"},
                    {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA", "detail": "low"}},
                    {"type": "input_audio", "input_audio": {"data": "xx"}},
                ],
            }
        )
        assert isinstance(msg.content[0], TextContentPart)
        assert isinstance(msg.content[1], ImageContentPart)
        assert isinstance(msg.content[2], OtherContentPart)

    def test_payload_keeps_unknown_fields_and_drops_transient_ones(self):
        msg = Message.model_validate(
            {
                "role": "assistant",
                "content": "Hi",
                "reasoning_content": "hmm",
                "updating": True,
                "name": "bot",
            }
        )
        assert msg.to_payload() == {"role": "assistant", "content": "Hi", "name": "bot"}

    def test_image_detail_survives_passthrough(self):
        msg = Message.model_validate(
            {"role": "user", "content": [{"type": "image_url", "image_url": {"url": "https://x/a.png", "detail": "high"}}]}
        )
        assert msg.to_payload()["content"][0] == {
            "type": "image_url",
            "image_url": {"url": "https://x/a.png", "detail": "high"},
        }

    def test_without_transient_fields(self):
        msg = Message(role="assistant", content="a", reasoning_content="r", updating=True)
        stripped = msg.without_transient_fields()
        assert stripped.reasoning_content is None
        assert stripped.updating is None
        assert msg.updating is True


class TestChatParams:
    def test_accepts_camel_case(self):
        params = ChatParams.model_validate(
            {
                "messages": [{"role": "user", "content": "Hi"}],
                "apiConfig": {
                    "baseUrl": "https://api.example.com",
                    "apiKey": "k",
                    "modelName": "m",
                    "advancedSettings": {"systemPrompt": "S"},
                },
                "userLanguage": "fr",
                "webpageInfo": {"pages": [{"title": "T", "isCurrent": True}]},
            }
        )
        assert params.api_config.model_name == "m"
        assert params.api_config.system_prompt == "S"
        assert params.webpage_info.pages[0].is_current is True

    def test_system_prompt_defaults_to_empty(self):
        params = ChatParams.model_validate({"messages": [], "apiConfig": {}})
        assert params.api_config.system_prompt == ""
        assert params.user_language == ""


class TestCallOptions:
    def test_default_prefix(self):
        assert CallOptions().resolve_prefixes("think") == ["think"]

    def test_single_prefix_overrides_default(self):
        options = CallOptions(misfiled_think_silently_prefix="  Reason ")
        assert options.resolve_prefixes("think") == ["reason"]

    def test_list_wins_and_is_normalized(self):
        options = CallOptions.model_validate(
            {
                "misfiledThinkSilentlyPrefix": "ignored",
                "misfiledThinkSilentlyPrefixes": ["Think", " think ", "", "Plan"],
            }
        )
        assert options.resolve_prefixes("x") == ["think", "plan"]

    def test_empty_list_falls_back_to_single_prefix(self):
        options = CallOptions(misfiled_think_silently_prefixes=[], misfiled_think_silently_prefix="plan")
        assert options.resolve_prefixes("think") == ["plan"]


class TestAccumulatedMessage:
    def test_append(self):
        acc = AccumulatedMessage()
        assert acc.append("a") is True
        assert acc.append(reasoning_content="r") is True
        assert acc.append("", "") is False
        assert acc.to_dict() == {"content": "a", "reasoning_content": "r"}

    def test_copy_is_independent(self):
        acc = AccumulatedMessage(content="a")
        snapshot = acc.copy()
        acc.append("b")
        assert snapshot.content == "a"
