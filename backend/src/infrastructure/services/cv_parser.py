"""
CV Extraction Service
Text extraction from PDF (pdfplumber) and DOCX (python-docx) plus ServiceNow-aware field heuristics
"""
import asyncio
import io
import re
from typing import Dict, List, Optional, Tuple

import docx
import pdfplumber

from application.services.cv_parser.commands import DOCX_CONTENT_TYPE
from application.services.cv_parser.interfaces import CvExtractionError, ICvExtractor
from core.logging_config import logger
from domain.entities import ExtractedCertification, ParsedCv


EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(r"(?:\+\d{1,3}[\s.-]?)?\(?\d{2,4}\)?[\s.-]?\d{3}[\s.-]?\d{3,4}")
LINKEDIN_PATTERN = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/[\w-]+", re.IGNORECASE)
GITHUB_PATTERN = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[\w-]+", re.IGNORECASE)
YEARS_PATTERN = re.compile(r"(\d{1,2})\+?\s*(?:years|yrs)\b", re.IGNORECASE)
LOCATION_PATTERN = re.compile(r"^(?:location|address|based in)\s*[:\-]\s*(.+)$", re.IGNORECASE | re.MULTILINE)
YEAR_PATTERN = re.compile(r"\b(19[89]\d|20\d{2})\b")

SECTION_HEADERS = (
    "summary", "profile", "about me", "professional summary", "experience", "work experience",
    "employment", "work history", "education", "skills", "certifications", "projects", "languages",
)

SERVICENOW_SKILLS = (
    "ITSM", "HRSD", "CSM", "FSM", "SecOps", "ITOM", "ITBM", "GRC", "SPM", "Creator Workflows",
    "Flow Designer", "Integration Hub", "Service Portal", "Now Platform", "Business Rules",
    "Client Scripts", "UI Policies", "REST API", "GraphQL", "ATF", "Performance Analytics", "CMDB",
    "Discovery", "Service Mapping", "MID Server", "Glide", "Scripted REST", "UI Builder",
)

TECHNICAL_SKILLS = (
    "JavaScript", "TypeScript", "Python", "Java", "SQL", "AngularJS", "React", "Node.js",
    "PowerShell", "Azure", "AWS", "Jenkins", "Git", "Docker", "Kubernetes", "Agile", "Scrum",
)

SERVICENOW_VERSIONS = (
    "Orlando", "Paris", "Quebec", "Rome", "San Diego", "Tokyo", "Utah",
    "Vancouver", "Washington", "Xanadu", "Yokohama", "Zurich",
)

# (type, full name, pattern)
CERTIFICATIONS = (
    ("CSA", "Certified System Administrator", r"certified system administrator|\bCSA\b"),
    ("CAD", "Certified Application Developer", r"certified application developer|\bCAD\b"),
    ("CIS", "Certified Implementation Specialist", r"certified implementation specialist|\bCIS\b"),
    ("CMA", "Certified Master Architect", r"certified master architect|\bCMA\b"),
    ("Other", "Certified Technical Architect", r"certified technical architect|\bCTA\b"),
)

ROLE_KEYWORDS = (
    "developer", "administrator", "architect", "consultant", "engineer",
    "analyst", "manager", "lead", "specialist", "owner",
)


class HeuristicCvExtractor(ICvExtractor):
    """Keyword and pattern based CV extraction; every field carries a 0-100 confidence"""

    async def extract(self, content: bytes, content_type: str) -> ParsedCv:
        text = await asyncio.to_thread(self._extract_text, content, content_type)
        if not text.strip():
            raise CvExtractionError("Could not extract any text from the uploaded document.")

        logger.info(f"Extracted {len(text)} chars from CV")
        return self.parse_text(text)

    def parse_text(self, text: str) -> ParsedCv:
        """Structured fields from plain CV text"""
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        confidences: Dict[str, int] = {}

        first_name, last_name = self._extract_name(lines)
        confidences["first_name"] = 70 if first_name else 0
        confidences["last_name"] = 70 if last_name else 0

        email = self._first_match(EMAIL_PATTERN, text)
        confidences["email"] = 95 if email else 0

        phone = self._first_match(PHONE_PATTERN, text)
        confidences["phone"] = 85 if phone else 0

        linkedin_url = self._as_url(self._first_match(LINKEDIN_PATTERN, text))
        confidences["linkedin_url"] = 95 if linkedin_url else 0
        github_url = self._as_url(self._first_match(GITHUB_PATTERN, text))
        confidences["github_url"] = 95 if github_url else 0

        location_match = LOCATION_PATTERN.search(text)
        location = location_match.group(1).strip()[:200] if location_match else None
        confidences["location"] = 80 if location else 0

        headline = self._extract_headline(lines)
        confidences["headline"] = 60 if headline else 0

        summary = self._section(lines, ("summary", "profile", "about me", "professional summary"))
        summary = summary[:1000] if summary else None
        confidences["summary"] = 75 if summary else 0

        current_role = self._extract_current_role(lines)
        confidences["current_role"] = 65 if current_role else 0

        years = self._extract_years(text)
        confidences["years_of_experience"] = 80 if years is not None else 0

        skills = self._find_keywords(text, SERVICENOW_SKILLS + TECHNICAL_SKILLS)
        confidences["skills"] = min(95, 50 + 5 * len(skills)) if skills else 0

        certifications = self._extract_certifications(lines)
        confidences["certifications"] = max((c.confidence for c in certifications), default=0)

        versions = self._find_keywords(text, SERVICENOW_VERSIONS)
        confidences["servicenow_versions"] = 70 if versions else 0

        overall = round(sum(confidences.values()) / len(confidences))

        return ParsedCv(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            location=location,
            headline=headline,
            summary=summary,
            current_role=current_role,
            years_of_experience=years,
            linkedin_url=linkedin_url,
            github_url=github_url,
            skills=tuple(skills),
            certifications=tuple(certifications),
            servicenow_versions=tuple(versions),
            overall_confidence=max(0, min(100, overall)),
            field_confidences=confidences,
        )

    # ------------------------------------------------------------------
    # Text extraction
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_text(content: bytes, content_type: str) -> str:
        content_type = content_type.lower()
        try:
            if content_type == "application/pdf":
                with pdfplumber.open(io.BytesIO(content)) as pdf:
                    return "\n".join(page.extract_text() or "" for page in pdf.pages)

            if content_type == DOCX_CONTENT_TYPE:
                document = docx.Document(io.BytesIO(content))
                parts = [p.text for p in document.paragraphs]
                for table in document.tables:
                    for row in table.rows:
                        parts.extend(cell.text for cell in row.cells)
                return "\n".join(parts)
        except Exception as e:
            logger.warning(f"CV text extraction failed ({content_type}): {e}")
            raise CvExtractionError(f"The document could not be read: {e}") from e

        raise CvExtractionError(f"Unsupported content type: {content_type}")

    # ------------------------------------------------------------------
    # Field heuristics
    # ------------------------------------------------------------------

    @staticmethod
    def _first_match(pattern: re.Pattern, text: str) -> Optional[str]:
        match = pattern.search(text)
        return match.group(0).strip() if match else None

    @staticmethod
    def _as_url(value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        return value if value.lower().startswith("http") else f"https://{value}"

    @staticmethod
    def _extract_name(lines: List[str]) -> Tuple[Optional[str], Optional[str]]:
        """First line heuristic: short, no digits, no @"""
        if not lines:
            return None, None
        candidate = lines[0]
        if len(candidate) > 40 or any(ch.isdigit() for ch in candidate) or "@" in candidate:
            return None, None
        parts = candidate.split()
        if len(parts) < 2:
            return None, None
        return parts[0], " ".join(parts[1:])

    @staticmethod
    def _extract_headline(lines: List[str]) -> Optional[str]:
        """Second line, when it reads like a title rather than contact details"""
        if len(lines) < 2:
            return None
        candidate = lines[1]
        if EMAIL_PATTERN.search(candidate) or PHONE_PATTERN.search(candidate) or len(candidate) > 200:
            return None
        if candidate.lower().rstrip(":") in SECTION_HEADERS:
            return None
        return candidate

    def _extract_current_role(self, lines: List[str]) -> Optional[str]:
        experience = self._section_lines(lines, ("experience", "work experience", "employment", "work history"))
        for line in experience:
            lowered = line.lower()
            if any(keyword in lowered for keyword in ROLE_KEYWORDS) and len(line) <= 120:
                # "Senior Developer | Acme | 2021 - Present" -> "Senior Developer"
                return re.split(r"\s[|@-]\s|,\s", line)[0].strip()
        return None

    @staticmethod
    def _extract_years(text: str) -> Optional[int]:
        values = [int(m) for m in YEARS_PATTERN.findall(text) if 0 < int(m) <= 50]
        return max(values) if values else None

    @staticmethod
    def _find_keywords(text: str, keywords: Tuple[str, ...]) -> List[str]:
        found = []
        for keyword in keywords:
            if re.search(rf"(?<![\w.]){re.escape(keyword)}(?![\w])", text, re.IGNORECASE):
                found.append(keyword)
        return found

    @staticmethod
    def _extract_certifications(lines: List[str]) -> List[ExtractedCertification]:
        certifications = []
        for cert_type, name, pattern in CERTIFICATIONS:
            for line in lines:
                match = re.search(pattern, line, re.IGNORECASE)
                if not match:
                    continue
                year = YEAR_PATTERN.search(line)
                spelled_out = len(match.group(0)) > 4
                certifications.append(ExtractedCertification(
                    type=cert_type,
                    name=name,
                    year=int(year.group(1)) if year else None,
                    confidence=95 if spelled_out else 70,
                ))
                break
        return certifications

    @staticmethod
    def _section_lines(lines: List[str], headers: Tuple[str, ...]) -> List[str]:
        """Lines under the first matching header, up to the next known header"""
        collected: List[str] = []
        inside = False
        for line in lines:
            header = line.lower().rstrip(":").strip()
            if header in SECTION_HEADERS:
                if inside:
                    break
                inside = header in headers
                continue
            if inside:
                collected.append(line)
        return collected

    def _section(self, lines: List[str], headers: Tuple[str, ...]) -> Optional[str]:
        body = " ".join(self._section_lines(lines, headers)).strip()
        return body or None
