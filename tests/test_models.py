from __future__ import annotations

import pytest

from portfolio_api.models import Certification, Project
from portfolio_api.services.validation import MAX_CREDENTIAL_ID_LENGTH, MAX_TITLE_LENGTH

pytestmark = pytest.mark.unit


def column_length(model, name: str) -> int | None:
    return getattr(model.__table__.c[name].type, "length", None)


@pytest.mark.parametrize(
    ("model", "name", "accepted"),
    [
        (Project, "title", MAX_TITLE_LENGTH),
        (Certification, "credential_id", MAX_CREDENTIAL_ID_LENGTH),
    ],
)
def test_bounded_columns_hold_the_longest_accepted_value(model, name: str, accepted: int) -> None:
    assert column_length(model, name) >= accepted


@pytest.mark.parametrize(
    ("model", "name"),
    [
        (Project, "demo_url"),
        (Project, "github_url"),
        (Certification, "title"),
        (Certification, "issuer"),
        (Certification, "credential_url"),
    ],
)
def test_columns_without_a_length_rule_are_unbounded(model, name: str) -> None:
    assert column_length(model, name) is None
