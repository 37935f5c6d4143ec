"""
Job Description Enhancers
OpenRouter chat completions when an API key is configured, a rule-based rewrite otherwise
"""
import asyncio
import json
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

from application.services.enhancer.interfaces import EnhancementError, IJobEnhancer
from core.config import settings
from core.logging_config import logger
from domain.entities import BiasIssue, EnhancementOutput, Improvement


SYSTEM_PROMPT = """You are an expert technical recruiter specialising in the ServiceNow ecosystem.
Analyse and improve the job description you are given.

1. SCORE the original (0-100): clarity, specificity, inclusivity and completeness, 25 points each.
2. DETECT BIAS: gendered, age, cultural, ability and class bias.
3. REWRITE title, description and requirements: clear, inclusive, specific, candidate-centric,
   using proper ServiceNow platform terminology.
4. IDENTIFY missing fields, chosen from: "Salary range", "Remote/hybrid policy", "ServiceNow version",
   "Required certifications", "Interview process", "Team size", "Tech stack", "On-call requirements",
   "Visa sponsorship", "Benefits", "Start date".
5. SUGGEST ServiceNow skills that fit the role but are not mentioned.

Return ONLY a JSON object, no markdown:
{"enhancedTitle": "string", "enhancedDescription": "string", "enhancedRequirements": "string or null",
 "scoreBefore": 0-100, "scoreAfter": 0-100,
 "biasIssues": [{"text": "", "reason": "", "suggestion": "", "severity": "Low|Medium|High"}],
 "missingFields": [""],
 "improvements": [{"category": "Clarity|Specificity|Inclusivity|Structure|SEO", "description": "", "before": "", "after": ""}],
 "suggestedSkills": [""]}"""

MAX_ATTEMPTS = 3


def strip_code_fences(content: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one"""
    content = content.strip()
    if content.startswith("```"):
        lines = content.splitlines()[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        content = "\n".join(lines)
    return content.strip()


def output_from_payload(data: Dict[str, Any]) -> EnhancementOutput:
    """Map the model's camelCase JSON onto an EnhancementOutput"""
    if not data.get("enhancedDescription"):
        raise EnhancementError("The enhancer returned no description.")
    return EnhancementOutput(
        enhanced_title=data.get("enhancedTitle"),
        enhanced_description=data.get("enhancedDescription"),
        enhanced_requirements=data.get("enhancedRequirements"),
        score_before=int(data.get("scoreBefore") or 0),
        score_after=int(data.get("scoreAfter") or 0),
        bias_issues=tuple(
            BiasIssue(
                text=str(b.get("text", "")),
                reason=str(b.get("reason", "")),
                suggestion=str(b.get("suggestion", "")),
                severity=str(b.get("severity") or "Low"),
            )
            for b in data.get("biasIssues") or []
        ),
        missing_fields=tuple(str(f) for f in data.get("missingFields") or []),
        improvements=tuple(
            Improvement(
                category=str(i.get("category", "")),
                description=str(i.get("description", "")),
                before=str(i.get("before", "")),
                after=str(i.get("after", "")),
            )
            for i in data.get("improvements") or []
        ),
        suggested_skills=tuple(str(s) for s in data.get("suggestedSkills") or []),
    )


class OpenRouterJobEnhancer(IJobEnhancer):
    """Job description enhancement via OpenRouter chat completions"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.OPENROUTER_API_KEY
        self.model = model or settings.OPENROUTER_MODEL
        self.api_url = api_url or settings.OPENROUTER_API_URL
        self.timeout = timeout
        self._transport = transport

    async def enhance(self, title: str, description: str, requirements: Optional[str] = None) -> EnhancementOutput:
        user_message = f"Job title: {title}\n\nDescription:\n{description}"
        if requirements:
            user_message += f"\n\nRequirements:\n{requirements}"

        content = await self._complete(user_message)
        try:
            data = json.loads(strip_code_fences(content))
        except json.JSONDecodeError as e:
            logger.error(f"OpenRouter returned unparseable JSON: {e}")
            raise EnhancementError("The enhancer returned an unreadable response.") from e
        if not isinstance(data, dict):
            raise EnhancementError("The enhancer returned an unexpected response.")
        return output_from_payload(data)

    async def _complete(self, user_message: str) -> str:
        """POST the chat completion, retrying on 429 with backoff"""
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_message},
            ],
            "temperature": 0.3,
            "max_tokens": 3000,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            for attempt in range(1, MAX_ATTEMPTS + 1):
                try:
                    response = await client.post(self.api_url, headers=headers, json=payload)
                except httpx.HTTPError as e:
                    logger.error(f"OpenRouter request failed: {e}")
                    raise EnhancementError("The enhancement service is unavailable.") from e

                if response.status_code == 429 and attempt < MAX_ATTEMPTS:
                    delay = 2 ** attempt
                    logger.warning(f"OpenRouter rate limited, retrying in {delay}s (attempt {attempt})")
                    await asyncio.sleep(delay)
                    continue

                if response.status_code >= 400:
                    logger.error(f"OpenRouter returned {response.status_code}: {response.text[:500]}")
                    raise EnhancementError(f"The enhancement service returned {response.status_code}.")

                try:
                    return response.json()["choices"][0]["message"]["content"]
                except (ValueError, KeyError, IndexError, TypeError) as e:
                    raise EnhancementError("The enhancer returned an unexpected response.") from e

        raise EnhancementError("The enhancement service is rate limited.")


# phrase -> (reason, suggestion, severity, replacement)
BIAS_RULES: Dict[str, Tuple[str, str, str, str]] = {
    "rockstar": ("Exclusionary tech culture jargon", "experienced professional", "High", "experienced professional"),
    "ninja": ("Exclusionary tech culture jargon", "expert", "High", "expert"),
    "he/she": ("Assumes binary gender", "they", "Medium", "they"),
    "his/her": ("Assumes binary gender", "their", "Medium", "their"),
    "young": ("Age-biased language", "motivated", "High", "motivated"),
    "energetic": ("Age-biased language", "enthusiastic", "Medium", "enthusiastic"),
    "digital native": ("Age-biased language", "comfortable with digital tools", "High", "comfortable with digital tools"),
    "native english speaker": (
        "Nationality or origin bias",
        "strong written and verbal English",
        "High",
        "strong written and verbal English communication skills",
    ),
}

SUGGESTED_SKILLS = ("ATF", "Performance Analytics", "Integration Hub", "Service Portal", "Flow Designer")

INCLUSION_STATEMENT = (
    "We are committed to an inclusive hiring process. "
    "All qualified applicants will receive consideration for employment."
)


class RuleBasedJobEnhancer(IJobEnhancer):
    """Deterministic keyword-driven enhancer used when no LLM is configured"""

    async def enhance(self, title: str, description: str, requirements: Optional[str] = None) -> EnhancementOutput:
        combined = f"{description} {requirements or ''}".lower()
        bias_issues = [
            BiasIssue(text=phrase, reason=reason, suggestion=suggestion, severity=severity)
            for phrase, (reason, suggestion, severity, _) in BIAS_RULES.items()
            if re.search(rf"\b{re.escape(phrase)}\b", combined)
        ]
        score_before = self._score(description, requirements, len(bias_issues))

        enhanced_description = self._neutralise(description)
        improvements: List[Improvement] = []
        if bias_issues:
            improvements.append(Improvement(
                category="Inclusivity",
                description="Replaced exclusionary terms with neutral language",
                before=bias_issues[0].text,
                after=bias_issues[0].suggestion,
            ))
        if INCLUSION_STATEMENT not in enhanced_description:
            enhanced_description = f"{enhanced_description}\n\n{INCLUSION_STATEMENT}"
            improvements.append(Improvement(
                category="Structure",
                description="Added an equal opportunity statement",
                before="",
                after=INCLUSION_STATEMENT,
            ))

        enhanced_title = title.strip()
        if "servicenow" not in enhanced_title.lower():
            enhanced_title = f"ServiceNow {enhanced_title}"[:200]
            improvements.append(Improvement(
                category="SEO",
                description="Named the platform in the title",
                before=title,
                after=enhanced_title,
            ))

        suggested = [s for s in SUGGESTED_SKILLS if s.lower() not in combined]

        return EnhancementOutput(
            enhanced_title=enhanced_title,
            enhanced_description=enhanced_description,
            enhanced_requirements=self._neutralise(requirements) if requirements else None,
            score_before=score_before,
            score_after=min(100, score_before + 18),
            bias_issues=tuple(bias_issues),
            missing_fields=tuple(self._missing_fields(combined)),
            improvements=tuple(improvements),
            suggested_skills=tuple(suggested),
        )

    @staticmethod
    def _neutralise(text: str) -> str:
        for phrase, (_, _, _, replacement) in BIAS_RULES.items():
            text = re.sub(rf"\b{re.escape(phrase)}\b", replacement, text, flags=re.IGNORECASE)
        return text

    @staticmethod
    def _missing_fields(text: str) -> List[str]:
        missing = []
        if "salary" not in text and "$" not in text and "£" not in text and "€" not in text:
            missing.append("Salary range")
        if not any(word in text for word in ("remote", "hybrid", "on-site", "onsite")):
            missing.append("Remote/hybrid policy")
        if "certif" not in text:
            missing.append("Required certifications")
        if "interview" not in text:
            missing.append("Interview process")
        if "benefit" not in text:
            missing.append("Benefits")
        return missing

    @staticmethod
    def _score(description: str, requirements: Optional[str], bias_count: int) -> int:
        score = 60
        if len(description) > 300:
            score += 10
        if requirements:
            score += 5
        if "servicenow" in description.lower():
            score += 5
        score -= bias_count * 8
        return max(20, min(85, score))


def create_job_enhancer() -> IJobEnhancer:
    """OpenRouter when an API key is configured"""
    if settings.OPENROUTER_API_KEY:
        logger.info(f"Job enhancer: OpenRouter ({settings.OPENROUTER_MODEL})")
        return OpenRouterJobEnhancer()
    logger.info("Job enhancer: rule-based (OPENROUTER_API_KEY not set)")
    return RuleBasedJobEnhancer()
