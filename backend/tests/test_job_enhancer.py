"""
Tests for the job description enhancers
"""
import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from application.services.enhancer.interfaces import EnhancementError
from infrastructure.services.job_enhancer import (
    INCLUSION_STATEMENT,
    OpenRouterJobEnhancer,
    RuleBasedJobEnhancer,
    strip_code_fences,
)


class TestRuleBasedJobEnhancer:

    @pytest.mark.asyncio
    async def test_flags_and_replaces_biased_language(self):
        output = await RuleBasedJobEnhancer().enhance(
            "Developer",
            "We want a young rockstar to join our ServiceNow team.",
        )

        flagged = {issue.text for issue in output.bias_issues}
        assert flagged == {"young", "rockstar"}
        assert "rockstar" not in output.enhanced_description.lower()
        assert "experienced professional" in output.enhanced_description
        assert output.enhanced_description.endswith(INCLUSION_STATEMENT)

    @pytest.mark.asyncio
    async def test_title_names_the_platform(self):
        output = await RuleBasedJobEnhancer().enhance("Developer", "Build catalog items.")
        assert output.enhanced_title == "ServiceNow Developer"

    @pytest.mark.asyncio
    async def test_scores_and_missing_fields(self):
        output = await RuleBasedJobEnhancer().enhance(
            "ServiceNow Architect",
            "Remote role. Salary $150k. Certification CTA preferred. Three interview rounds. Great benefits.",
        )
        assert output.missing_fields == ()
        assert 0 <= output.score_before <= output.score_after <= 100

    @pytest.mark.asyncio
    async def test_suggests_skills_not_mentioned(self):
        output = await RuleBasedJobEnhancer().enhance("ServiceNow Developer", "Experience with ATF required.")
        assert "ATF" not in output.suggested_skills
        assert "Flow Designer" in output.suggested_skills


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"content": content}}]}


class TestOpenRouterJobEnhancer:
    """Uses an httpx mock transport in place of the network"""

    PAYLOAD = {
        "enhancedTitle": "Senior ServiceNow Developer",
        "enhancedDescription": "An improved description.",
        "scoreBefore": 40,
        "scoreAfter": 82,
        "biasIssues": [{"text": "ninja", "reason": "jargon", "suggestion": "expert", "severity": "High"}],
        "missingFields": ["Benefits"],
        "improvements": [],
        "suggestedSkills": ["ATF"],
    }

    def _enhancer(self, handler) -> OpenRouterJobEnhancer:
        return OpenRouterJobEnhancer(
            api_key="test-key",
            model="test/model",
            api_url="https://openrouter.test/api/v1/chat/completions",
            transport=httpx.MockTransport(handler),
        )

    @pytest.mark.asyncio
    async def test_parses_fenced_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Authorization"] == "Bearer test-key"
            body = json.loads(request.content)
            assert body["model"] == "test/model"
            return httpx.Response(200, json=_completion("```json\n" + json.dumps(self.PAYLOAD) + "\n```"))

        output = await self._enhancer(handler).enhance("Developer", "We need a ninja.")

        assert output.enhanced_title == "Senior ServiceNow Developer"
        assert output.score_after == 82
        assert output.bias_issues[0].severity == "High"
        assert output.suggested_skills == ("ATF",)

    @pytest.mark.asyncio
    async def test_retries_when_rate_limited(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(429)
            return httpx.Response(200, json=_completion(json.dumps(self.PAYLOAD)))

        with patch("infrastructure.services.job_enhancer.asyncio.sleep", new=AsyncMock()) as sleep:
            output = await self._enhancer(handler).enhance("Developer", "Text")

        assert len(calls) == 2
        sleep.assert_awaited_once_with(2)
        assert output.enhanced_description == "An improved description."

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        enhancer = self._enhancer(lambda request: httpx.Response(500, text="upstream down"))
        with pytest.raises(EnhancementError):
            await enhancer.enhance("Developer", "Text")

    @pytest.mark.asyncio
    async def test_unreadable_content_raises(self):
        enhancer = self._enhancer(lambda request: httpx.Response(200, json=_completion("not json")))
        with pytest.raises(EnhancementError):
            await enhancer.enhance("Developer", "Text")


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'
