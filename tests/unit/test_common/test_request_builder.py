"""
Request Builder Unit Tests
"""

import re

from cloudcode_proxy.common.protocol.request import (
    build_cloudcode_request,
    convert_messages_request,
    convert_tool,
    map_model_name,
    sanitize_tool_name,
)


class TestMapModelName:
    def test_known_and_unknown_names(self):
        assert map_model_name("claude-3-5-sonnet-20241022") == "claude-sonnet-4-5"
        assert map_model_name("claude-3-opus-20240229") == "claude-opus-4-5-thinking"
        assert map_model_name("some-other-model") == "some-other-model"


class TestConvertMessagesRequest:
    """Messages request -> inner Cloud Code request"""

    def test_minimal_request(self):
        payload = {"model": "claude-3-5-sonnet-20241022", "messages": [{"role": "user", "content": "Hi"}]}
        request = convert_messages_request(payload)
        assert request == {
            "contents": [{"role": "user", "parts": [{"text": "Hi"}]}],
            "generationConfig": {},
        }

    def test_roles_and_order_are_preserved(self):
        payload = {
            "messages": [
                {"role": "user", "content": "one"},
                {"role": "assistant", "content": "two"},
                {"role": "user", "content": "three"},
            ]
        }
        contents = convert_messages_request(payload)["contents"]
        assert [c["role"] for c in contents] == ["user", "model", "user"]
        assert [c["parts"][0]["text"] for c in contents] == ["one", "two", "three"]

    def test_system_string(self):
        payload = {"system": "Be brief.", "messages": []}
        assert convert_messages_request(payload)["systemInstruction"] == {"parts": [{"text": "Be brief."}]}

    def test_system_blocks_keep_text_only(self):
        payload = {
            "system": [
                {"type": "text", "text": "Rule 1"},
                {"type": "image", "source": {}},
                {"type": "text", "text": "Rule 2", "cache_control": {"type": "ephemeral"}},
            ],
            "messages": [],
        }
        assert convert_messages_request(payload)["systemInstruction"]["parts"] == [
            {"text": "Rule 1"},
            {"text": "Rule 2"},
        ]

    def test_empty_system_is_omitted(self):
        assert "systemInstruction" not in convert_messages_request({"system": "", "messages": []})
        assert "systemInstruction" not in convert_messages_request({"system": [], "messages": []})

    def test_generation_config_only_present_fields(self):
        payload = {
            "messages": [],
            "max_tokens": 1024,
            "temperature": 0,
            "top_k": 40,
            "stop_sequences": ["END"],
        }
        assert convert_messages_request(payload)["generationConfig"] == {
            "maxOutputTokens": 1024,
            "temperature": 0,
            "topK": 40,
            "stopSequences": ["END"],
        }

    def test_empty_stop_sequences_omitted(self):
        payload = {"messages": [], "top_p": 0.9, "stop_sequences": []}
        assert convert_messages_request(payload)["generationConfig"] == {"topP": 0.9}

    def test_thinking_never_emitted_for_claude(self):
        payload = {
            "model": "claude-sonnet-4-5-thinking",
            "messages": [],
            "thinking": {"type": "enabled", "budget_tokens": 2048},
        }
        request = convert_messages_request(payload)
        assert "thinkingConfig" not in request["generationConfig"]
        assert "thinking" not in request

    def test_tools_become_function_declarations(self):
        payload = {
            "messages": [],
            "tools": [
                {
                    "name": "get_weather",
                    "description": "Weather lookup",
                    "input_schema": {
                        "type": "object",
                        "properties": {"city": {"type": "string", "minLength": 1}},
                        "additionalProperties": False,
                    },
                }
            ],
        }
        assert convert_messages_request(payload)["tools"] == [
            {
                "functionDeclarations": [
                    {
                        "name": "get_weather",
                        "description": "Weather lookup",
                        "parameters": {"type": "object", "properties": {"city": {"type": "string"}}},
                    }
                ]
            }
        ]

    def test_no_tools_key_without_tools(self):
        assert "tools" not in convert_messages_request({"messages": [], "tools": []})

    def test_malformed_messages_are_skipped(self):
        payload = {"messages": ["junk", {"role": "user", "content": "ok"}]}
        assert len(convert_messages_request(payload)["contents"]) == 1


class TestConvertTool:
    """Tool definition probing"""

    def test_openai_function_wrapper(self):
        tool = {
            "type": "function",
            "function": {
                "name": "search",
                "description": "Search the web",
                "parameters": {"type": "object", "properties": {"q": {"type": "string"}}},
            },
        }
        assert convert_tool(tool, 0) == {
            "name": "search",
            "description": "Search the web",
            "parameters": {"type": "object", "properties": {"q": {"type": "string"}}},
        }

    def test_custom_wrapper(self):
        tool = {"custom": {"name": "calc", "description": "Math", "input_schema": {"type": "object"}}}
        assert convert_tool(tool, 0) == {"name": "calc", "description": "Math", "parameters": {"type": "object"}}

    def test_fallbacks(self):
        assert convert_tool({}, 3) == {"name": "tool-3", "description": "", "parameters": {"type": "object"}}

    def test_name_is_sanitized(self):
        assert convert_tool({"name": "my tool.v2!"}, 0)["name"] == "my_tool_v2_"


class TestSanitizeToolName:
    def test_truncates_to_64(self):
        name = sanitize_tool_name("a" * 100, 0)
        assert len(name) == 64

    def test_empty_name_uses_placeholder(self):
        assert sanitize_tool_name("", 5) == "tool-5"

    def test_result_matches_allowed_alphabet(self):
        name = sanitize_tool_name("weird/näme:with spaces", 0)
        assert re.fullmatch(r"[A-Za-z0-9_-]{1,64}", name)


class TestBuildCloudCodeRequest:
    """Full envelope"""

    def test_envelope_shape(self):
        payload = {
            "model": "claude-3-5-sonnet-20241022",
            "max_tokens": 4096,
            "messages": [{"role": "user", "content": "Hi"}],
        }
        envelope = build_cloudcode_request(payload, "my-project")

        assert envelope["project"] == "my-project"
        assert envelope["model"] == "claude-sonnet-4-5"
        assert envelope["userAgent"] == "antigravity"
        assert re.fullmatch(r"agent-[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[0-9a-f]{4}-[0-9a-f]{12}", envelope["requestId"])
        assert re.fullmatch(r"-\d+", envelope["request"]["sessionId"])
        assert envelope["request"]["contents"] == [{"role": "user", "parts": [{"text": "Hi"}]}]
        assert envelope["request"]["generationConfig"] == {"maxOutputTokens": 4096}

    def test_claude_family_tool_ids(self):
        payload = {
            "model": "claude-3-5-sonnet-20241022",
            "messages": [
                {"role": "assistant", "content": [{"type": "tool_use", "id": "toolu_9", "name": "f", "input": {}}]},
                {"role": "user", "content": [{"type": "tool_result", "tool_use_id": "toolu_9", "content": "done"}]},
            ],
        }
        contents = build_cloudcode_request(payload, "p")["request"]["contents"]
        assert contents[0]["parts"][0]["functionCall"]["id"] == "toolu_9"
        assert contents[1]["parts"][0]["functionResponse"]["id"] == "toolu_9"
