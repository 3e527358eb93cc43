"""
Unit Tests for recovering JSON from model output
"""
import pytest

from student_hub.core.exceptions import ExternalServiceError, MalformedAIResponse
from student_hub.schemas.ai import Recommendations
from student_hub.utils.ai_json import extract_json, parse_ai_model


class TestExtractJson:

    def test_plain_json(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_fenced_block(self):
        text = 'Here you go:\n```json\n{"courses": []}\n```\nGood luck!'
        assert extract_json(text) == {"courses": []}

    def test_embedded_array(self):
        assert extract_json('Skills: ["SQL", "Git"] are key.', list) == ["SQL", "Git"]

    def test_wrong_shape_is_malformed(self):
        with pytest.raises(MalformedAIResponse):
            extract_json('["not", "an", "object"]', dict)

    @pytest.mark.parametrize("text", ["", "   ", "no json here", "{broken"])
    def test_garbage_is_malformed(self, text):
        with pytest.raises(MalformedAIResponse) as exc_info:
            extract_json(text)
        assert exc_info.value.code == "malformed_ai_response"

    def test_malformed_is_an_external_service_error(self):
        assert issubclass(MalformedAIResponse, ExternalServiceError)


class TestParseAiModel:

    def test_valid_payload(self):
        text = '{"courses": [{"title": "ML", "description": "Intro", "link": "https://x.org"}], "competitions": [], "projects": []}'

        recommendations = parse_ai_model(text, Recommendations)

        assert recommendations.courses[0].title == "ML"

    def test_schema_mismatch_is_malformed(self):
        with pytest.raises(MalformedAIResponse):
            parse_ai_model('{"courses": [{"description": "missing title"}]}', Recommendations)
