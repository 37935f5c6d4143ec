"""
Field Validators
Reusable checks for request models; each raises ValueError with a readable message
"""
import re
from typing import Optional
from urllib.parse import urlparse

from domain.value_objects import Email


_NAME_PATTERN = re.compile(r"^[^\W\d_]+(?:[ '\-]+[^\W\d_]+)*$")
_CURRENCY_PATTERN = re.compile(r"^[A-Za-z]{3}$")
_SPECIAL_CHARACTERS = set("!@#$%^&*()_+-=[]{}|;:'\",.<>/?`~\\")


def check_email(value: str) -> str:
    return Email(value).value


def check_password_strength(value: str) -> str:
    problems = []
    if len(value) < 8:
        problems.append("at least 8 characters")
    if not any(c.isupper() for c in value):
        problems.append("an uppercase letter")
    if not any(c.islower() for c in value):
        problems.append("a lowercase letter")
    if not any(c.isdigit() for c in value):
        problems.append("a digit")
    if not any(c in _SPECIAL_CHARACTERS for c in value):
        problems.append("a special character")
    if problems:
        raise ValueError("Password must contain " + ", ".join(problems))
    return value


def check_person_name(value: str) -> str:
    if not _NAME_PATTERN.match(value):
        raise ValueError("Name may only contain letters, spaces, hyphens and apostrophes")
    return value


def check_absolute_url(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Must be an absolute http(s) URL")
    return value


def check_currency(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not _CURRENCY_PATTERN.match(value):
        raise ValueError("Currency must be a 3-letter code")
    return value.upper()
