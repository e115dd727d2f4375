import pytest

from portal.core.errors import ValidationError
from portal.schemas.schemas import UserRole
from portal.services.profile_service import check_email, parse_role, parse_skills


def test_parse_skills_trims_and_drops_blanks() -> None:
    assert parse_skills("a, b, , c") == ["a", "b", "c"]


def test_parse_skills_keeps_order() -> None:
    assert parse_skills("SQL,Python ,  React") == ["SQL", "Python", "React"]


@pytest.mark.parametrize("raw", [None, "", " , ,"])
def test_parse_skills_empty(raw) -> None:
    assert parse_skills(raw) == []


def test_parse_role() -> None:
    assert parse_role("recruiter") == UserRole.recruiter
    with pytest.raises(ValidationError):
        parse_role("admin")


def test_check_email_normalizes() -> None:
    assert check_email(" Asha@Portal.io ") == "asha@portal.io"


@pytest.mark.parametrize("raw", ["no-at-sign", "two@@portal.io", "@portal.io"])
def test_check_email_rejects_malformed(raw: str) -> None:
    with pytest.raises(ValidationError):
        check_email(raw)
