# -*- coding: utf-8 -*-
"""
Question Catalog

Immutable registry of the self-assessment questionnaire. The catalog is
loaded once (from the packaged YAML by default) and then passed by
reference into normalisation, scoring and reporting; nothing mutates it
after construction.

YAML layout::

    categories:
      - number: "1"
        name: Human Rights & Labor
        questions:
          - id: "1.1"
            text: Is child labour under the age of 18 prohibited?
            weight: 2.0
            critical_violation: {grade: D, reason: ...}
"""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from supplychain_esg.assessment.models import Question
from supplychain_esg.exceptions import DataLoadError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent.parent / "data" / "csddd_questions.yaml"

_QUESTION_ID_PATTERN = re.compile(r"^\d+\.\d+$")


class QuestionCatalog:
    """Read-only lookup over the questionnaire.

    Invariants checked at construction: ids are unique and follow the
    ``<categoryNumber>.<index>`` format; questions sharing a category
    number must share a category name. ``Question`` itself rejects
    non-positive weights.

    Example:
        >>> catalog = default_catalog()
        >>> catalog.get("1.1").weight
        2.0
        >>> "9.9" in catalog
        False
    """

    def __init__(self, questions: Iterable[Question], name: str = "", version: str = ""):
        self.name = name
        self.version = version
        self._questions: Tuple[Question, ...] = tuple(questions)
        self._by_id: Dict[str, Question] = {}
        self._category_names: Dict[str, str] = {}

        problems: Dict[str, str] = {}
        for question in self._questions:
            if question.id in self._by_id:
                problems[question.id] = "duplicate question id"
                continue
            if not _QUESTION_ID_PATTERN.match(question.id):
                problems[question.id] = "id must look like <categoryNumber>.<index>"
                continue
            number = question.category_number
            known = self._category_names.setdefault(number, question.category)
            if known != question.category:
                problems[question.id] = (
                    f"category number {number} already named {known!r}"
                )
                continue
            self._by_id[question.id] = question

        if problems:
            raise ValidationError(
                f"invalid question catalog ({len(problems)} problem(s))",
                invalid_fields=problems,
            )

        logger.debug(
            "QuestionCatalog built: %d questions in %d categories",
            len(self._questions), len(self._category_names),
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._by_id

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def categories(self) -> List[str]:
        """Distinct category names in definition order."""
        return list(self._category_names.values())

    @property
    def category_names(self) -> Dict[str, str]:
        """Map of category number (id prefix) to category name."""
        return dict(self._category_names)

    def category_name(self, category_number: str) -> Optional[str]:
        return self._category_names.get(category_number)

    def questions_in(self, category: str) -> List[Question]:
        return [q for q in self._questions if q.category == category]

    def critical_questions(self) -> List[Question]:
        """Questions whose ``no`` answer is a critical violation."""
        return [q for q in self._questions if q.is_critical]

    def total_weight(self) -> float:
        return sum(q.weight for q in self._questions)

    def __repr__(self) -> str:
        return (
            f"QuestionCatalog(name={self.name!r}, questions={len(self._questions)}, "
            f"categories={len(self._category_names)})"
        )

    # ------------------------------------------------------------------
    # Construction from mappings
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> QuestionCatalog:
        """Build a catalog from the parsed YAML structure."""
        if not isinstance(data, dict):
            raise ValidationError("question catalog must be a mapping")

        categories = data.get("categories")
        if not isinstance(categories, list) or not categories:
            raise ValidationError("question catalog must define at least one category")

        questions: List[Question] = []
        problems: Dict[str, str] = {}
        for index, category in enumerate(categories):
            if not isinstance(category, dict):
                problems[f"categories[{index}]"] = "must be a mapping"
                continue
            name = category.get("name")
            if not name:
                problems[f"categories[{index}]"] = "missing name"
                continue
            for item in category.get("questions") or []:
                try:
                    questions.append(Question(category=name, **item))
                except (PydanticValidationError, TypeError) as e:
                    key = str(item.get("id")) if isinstance(item, dict) else f"categories[{index}]"
                    problems[key] = str(e)

        if problems:
            raise ValidationError(
                f"invalid question catalog ({len(problems)} problem(s))",
                invalid_fields=problems,
            )

        return cls(
            questions,
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
        )


def load_catalog(path: Union[str, Path]) -> QuestionCatalog:
    """Load a questionnaire YAML file.

    Raises:
        DataLoadError: If the file is missing or not valid YAML.
        ValidationError: If the document violates catalog invariants.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise DataLoadError(
            f"question catalog not found: {path}", source=str(path), cause=e,
        ) from e
    except yaml.YAMLError as e:
        raise DataLoadError(
            f"failed to parse question catalog: {path}", source=str(path), cause=e,
        ) from e

    catalog = QuestionCatalog.from_dict(data)
    logger.info(
        "Loaded question catalog %r: %d questions, %d categories from %s",
        catalog.name, len(catalog), len(catalog.categories), path,
    )
    return catalog


_default_catalog: Optional[QuestionCatalog] = None
_default_lock = threading.Lock()


def default_catalog() -> QuestionCatalog:
    """Return the packaged CSDDD questionnaire, loading it on first use."""
    global _default_catalog
    if _default_catalog is None:
        with _default_lock:
            if _default_catalog is None:
                _default_catalog = load_catalog(DEFAULT_CATALOG_PATH)
    return _default_catalog


__all__ = [
    "DEFAULT_CATALOG_PATH",
    "QuestionCatalog",
    "load_catalog",
    "default_catalog",
]
