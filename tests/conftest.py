# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

from typing import List, Optional

import pytest

from supplychain_esg.assessment.catalog import QuestionCatalog
from supplychain_esg.assessment.models import CriticalViolation, Question, ViolationGrade
from supplychain_esg.config import SupplyChainESGConfig, reset_config, set_config
from supplychain_esg.emissions.factor_table import load_factor_table, parse_factor_table


def make_question(
    question_id: str,
    category: str,
    weight: float = 1.0,
    grade: Optional[str] = None,
    text: str = "",
) -> Question:
    """Build a catalog question; ``grade`` marks it critical."""
    violation = (
        CriticalViolation(grade=ViolationGrade(grade), reason=f"critical {question_id}")
        if grade else None
    )
    return Question(
        id=question_id,
        category=category,
        text=text or f"Question {question_id}",
        weight=weight,
        critical_violation=violation,
    )


@pytest.fixture(autouse=True)
def _isolated_config():
    """Every test starts from default configuration."""
    reset_config()
    set_config(SupplyChainESGConfig())
    yield
    reset_config()


@pytest.fixture
def small_catalog() -> QuestionCatalog:
    """Two categories with two questions each; ``2.1`` is critical grade C."""
    return QuestionCatalog(
        [
            make_question("1.1", "Human Rights"),
            make_question("1.2", "Human Rights"),
            make_question("2.1", "Safety", grade="C"),
            make_question("2.2", "Safety"),
        ],
        name="small",
    )


@pytest.fixture
def weighted_catalog() -> QuestionCatalog:
    """Catalog with uneven weights and D, B and B/C critical questions."""
    questions: List[Question] = [
        make_question("1.1", "Labor", weight=2.0, grade="D"),
        make_question("1.2", "Labor", weight=1.0),
        make_question("1.3", "Labor", weight=1.0),
        make_question("1.4", "Labor", weight=1.0),
        make_question("2.1", "Environment", weight=1.5, grade="B"),
        make_question("2.2", "Environment", weight=0.5, grade="B/C"),
        make_question("2.3", "Environment", weight=1.0),
    ]
    return QuestionCatalog(questions, name="weighted")


@pytest.fixture
def e2e_raw_answers():
    return {"1.1": "yes", "1.2": "yes", "2.1": "no", "2.2": "yes"}


@pytest.fixture(scope="session")
def factor_table():
    """The packaged emission-factor table."""
    return load_factor_table()


@pytest.fixture
def korean_csv_text() -> str:
    """Factor CSV using the source spreadsheet's headers and quirks."""
    return (
        "\ufeff대분류,구분,원료/에너지,단위,탄소발자국\n"
        "연료,에너지,경유,L,1.23.E-03\n"
        "연료,에너지,휘발유,L,2.17E+00\n"
        "연료,에너지,등유,L,n/a\n"
        "연료,에너지,폐유,L,-1.0\n"
        "연료,,LNG,kg,2.75E+00\n"
        "연료,에너지,경유,L,9.99E+00\n"
    )


@pytest.fixture
def korean_table(korean_csv_text):
    return parse_factor_table(korean_csv_text, source="korean.csv")


@pytest.fixture
def question_factory():
    """The ``make_question`` helper, for tests that build their own catalogs."""
    return make_question
