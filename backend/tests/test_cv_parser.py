"""
Tests for the heuristic CV extractor
"""
import pytest

from application.services.cv_parser.interfaces import CvExtractionError
from domain.entities import fields_above_threshold
from infrastructure.services.cv_parser import HeuristicCvExtractor


SAMPLE_CV = """Jane Doe
Senior ServiceNow Developer
jane.doe@example.com | +1 555 123 4567
linkedin.com/in/janedoe
Location: Austin, TX
Summary
ServiceNow developer with 8 years of experience building ITSM and HRSD solutions on Tokyo and Utah.
Experience
Senior Developer | Acme Corp | 2021 - Present
Skills
JavaScript, Flow Designer, CMDB
Certifications
Certified System Administrator 2019
CAD 2020
"""


class TestParseText:
    """Field extraction from plain CV text"""

    @pytest.fixture
    def parsed(self):
        return HeuristicCvExtractor().parse_text(SAMPLE_CV)

    def test_identity_and_contact(self, parsed):
        assert parsed.first_name == "Jane"
        assert parsed.last_name == "Doe"
        assert parsed.email == "jane.doe@example.com"
        assert parsed.phone == "+1 555 123 4567"
        assert parsed.linkedin_url == "https://linkedin.com/in/janedoe"
        assert parsed.location == "Austin, TX"

    def test_career_fields(self, parsed):
        assert parsed.headline == "Senior ServiceNow Developer"
        assert parsed.current_role == "Senior Developer"
        assert parsed.years_of_experience == 8
        assert parsed.summary.startswith("ServiceNow developer with 8 years")

    def test_skills_and_versions(self, parsed):
        assert {"ITSM", "HRSD", "Flow Designer", "CMDB", "JavaScript"} <= set(parsed.skills)
        assert "Java" not in parsed.skills
        assert parsed.servicenow_versions == ("Tokyo", "Utah")

    def test_certifications(self, parsed):
        by_type = {c.type: c for c in parsed.certifications}
        assert by_type["CSA"].year == 2019
        assert by_type["CSA"].confidence == 95
        assert by_type["CAD"].year == 2020
        assert by_type["CAD"].confidence == 70

    def test_confidences_are_bounded(self, parsed):
        assert 0 < parsed.overall_confidence <= 100
        assert all(0 <= c <= 100 for c in parsed.field_confidences.values())

    def test_threshold_selects_confident_fields(self, parsed):
        selected = fields_above_threshold(parsed, 75)
        assert "certifications" in selected
        assert "headline" not in selected

    def test_empty_text_yields_nothing(self):
        parsed = HeuristicCvExtractor().parse_text("")
        assert parsed.email is None
        assert parsed.skills == ()
        assert parsed.overall_confidence == 0


class TestExtract:

    @pytest.mark.asyncio
    async def test_unsupported_content_type(self):
        with pytest.raises(CvExtractionError):
            await HeuristicCvExtractor().extract(b"plain text", "text/plain")

    @pytest.mark.asyncio
    async def test_corrupt_pdf(self):
        with pytest.raises(CvExtractionError):
            await HeuristicCvExtractor().extract(b"not really a pdf", "application/pdf")
