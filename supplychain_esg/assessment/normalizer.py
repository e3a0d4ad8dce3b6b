# -*- coding: utf-8 -*-
"""
Answer Normalizer

Single boundary between raw questionnaire input and the scoring pipeline.
Raw answers arrive as free-form strings (``" Yes"``), legacy booleans, or
``bool | "partial"`` values; everything is converted into the closed
``AnswerValue`` enum here and downstream code never re-validates.

Batch operations accumulate per-item problems and raise a single
``AnswerBatchError`` listing all of them, so a caller can show every
problem at once.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from supplychain_esg import metrics
from supplychain_esg.assessment.catalog import QuestionCatalog, default_catalog
from supplychain_esg.assessment.models import (
    UNKNOWN_CATEGORY,
    Answer,
    AnswerStats,
    AnswerValue,
    ExtendedBooleanAnswer,
)
from supplychain_esg.config import SupplyChainESGConfig, get_config
from supplychain_esg.exceptions import (
    AnswerBatchError,
    AnswerTypeError,
    EmptyResultError,
    InvalidAnswerError,
    SupplyChainESGException,
    ValidationError,
)

logger = logging.getLogger(__name__)

ALLOWED_ANSWERS: Tuple[str, ...] = tuple(v.value for v in AnswerValue)

PARTIAL = "partial"


# ---------------------------------------------------------------------------
# Single answers
# ---------------------------------------------------------------------------


def normalize(raw: Any) -> AnswerValue:
    """Convert one raw answer into its canonical value.

    Args:
        raw: Raw answer; must be a string such as ``"yes"`` or ``" No "``.

    Returns:
        The matching AnswerValue.

    Raises:
        AnswerTypeError: If ``raw`` is not a string.
        InvalidAnswerError: If the trimmed, lower-cased string is not one of
            ``yes``, ``no``, ``partial``.
    """
    if not isinstance(raw, str):
        raise AnswerTypeError(
            f"answer must be a string, got {type(raw).__name__}",
            actual_type=type(raw).__name__,
        )
    value = raw.strip().lower()
    try:
        return AnswerValue(value)
    except ValueError:
        raise InvalidAnswerError(
            f'invalid answer "{raw}"; allowed values: {", ".join(ALLOWED_ANSWERS)}',
            raw_value=raw,
            allowed=list(ALLOWED_ANSWERS),
        ) from None


def _is_valid_question_id(question_id: Any) -> bool:
    return isinstance(question_id, str) and bool(question_id.strip())


# ---------------------------------------------------------------------------
# Batch normalisation
# ---------------------------------------------------------------------------


def normalize_all(
    raw_answers: Mapping[str, Any],
    catalog: Optional[QuestionCatalog] = None,
    config: Optional[SupplyChainESGConfig] = None,
) -> List[Answer]:
    """Normalise a ``question id -> raw answer`` mapping.

    Category, weight and critical metadata are resolved from the catalog.
    Ids absent from the catalog fall into the ``UNKNOWN`` category with
    weight 1 unless ``config.reject_unknown_questions`` is set, in which
    case they are reported as errors.

    Args:
        raw_answers: Mapping in submission order.
        catalog: Questionnaire to resolve ids against (packaged one if None).
        config: Configuration (global config if None).

    Returns:
        Answers in submission order.

    Raises:
        ValidationError: If ``raw_answers`` is not a mapping.
        AnswerBatchError: If any item failed; carries every error.
        EmptyResultError: If no answer was produced.
    """
    if not isinstance(raw_answers, Mapping):
        raise ValidationError(
            "answers must be a mapping of question id to answer",
            context={"actual_type": type(raw_answers).__name__},
        )

    catalog = catalog if catalog is not None else default_catalog()
    config = config or get_config()
    start = time.perf_counter()

    results: List[Answer] = []
    errors: List[str] = []

    for question_id, raw_value in raw_answers.items():
        if not _is_valid_question_id(question_id):
            errors.append(f"invalid question id: {question_id!r}")
            continue
        question_id = question_id.strip()

        if raw_value is None:
            errors.append(f"question {question_id}: answer is missing")
            continue

        try:
            value = normalize(raw_value)
        except SupplyChainESGException as e:
            errors.append(f"question {question_id}: {e.message}")
            continue

        question = catalog.get(question_id)
        if question is None:
            if config.reject_unknown_questions:
                errors.append(f"question {question_id}: not in the question catalog")
                continue
            logger.debug("Question %s not in catalog; using %s", question_id, UNKNOWN_CATEGORY)
            results.append(Answer(question_id=question_id, answer=value))
            continue

        violation = question.critical_violation
        results.append(
            Answer(
                question_id=question_id,
                answer=value,
                category=question.category,
                weight=question.weight,
                critical=violation is not None,
                critical_grade=violation.grade if violation is not None else None,
            )
        )

    metrics.record_answer_normalization("accepted", len(results))
    metrics.record_answer_normalization("rejected", len(errors))
    metrics.record_processing_duration("normalize", time.perf_counter() - start)

    if errors:
        logger.warning("Answer normalisation failed for %d item(s)", len(errors))
        raise AnswerBatchError("answer conversion failed", errors)

    if not results:
        raise EmptyResultError("no valid answers to convert")

    logger.debug("Normalised %d answers", len(results))
    return results


# ---------------------------------------------------------------------------
# Legacy representations
# ---------------------------------------------------------------------------


def _item_fields(item: Any) -> Optional[Tuple[Any, Any]]:
    """Pull ``(question_id, answer)`` out of a mapping or model."""
    if isinstance(item, Mapping):
        return item.get("question_id"), item.get("answer")
    if hasattr(item, "question_id") and hasattr(item, "answer"):
        return item.question_id, item.answer
    return None


def from_boolean_answers(answers: Sequence[Any]) -> Dict[str, str]:
    """Convert ``[{question_id, answer: bool}]`` into a raw answer mapping.

    ``True`` becomes ``"yes"`` and ``False`` becomes ``"no"``.

    Raises:
        ValidationError: If ``answers`` is not a list.
        AnswerBatchError: If any item is malformed.
    """
    if not isinstance(answers, (list, tuple)):
        raise ValidationError("answers must be a list")

    result: Dict[str, str] = {}
    errors: List[str] = []
    for index, item in enumerate(answers):
        fields = _item_fields(item)
        if fields is None:
            errors.append(f"index {index}: invalid answer object")
            continue
        question_id, answer = fields
        if not _is_valid_question_id(question_id):
            errors.append(f"index {index}: invalid question id: {question_id!r}")
            continue
        if not isinstance(answer, bool):
            errors.append(
                f"index {index}: answer must be a boolean, got {type(answer).__name__}"
            )
            continue
        result[question_id.strip()] = AnswerValue.YES.value if answer else AnswerValue.NO.value

    if errors:
        raise AnswerBatchError("boolean answer conversion failed", errors)
    return result


def from_extended_boolean_answers(answers: Sequence[Any]) -> Dict[str, str]:
    """Convert ``[{question_id, answer: bool | "partial"}]`` into a raw mapping.

    Raises:
        ValidationError: If ``answers`` is not a list.
        AnswerBatchError: If any item is malformed.
    """
    if not isinstance(answers, (list, tuple)):
        raise ValidationError("answers must be a list")

    result: Dict[str, str] = {}
    errors: List[str] = []
    for index, item in enumerate(answers):
        fields = _item_fields(item)
        if fields is None:
            errors.append(f"index {index}: invalid answer object")
            continue
        question_id, answer = fields
        if not _is_valid_question_id(question_id):
            errors.append(f"index {index}: invalid question id: {question_id!r}")
            continue
        if answer == PARTIAL:
            result[question_id.strip()] = AnswerValue.PARTIAL.value
        elif isinstance(answer, bool):
            result[question_id.strip()] = AnswerValue.YES.value if answer else AnswerValue.NO.value
        else:
            errors.append(
                f"index {index}: answer must be a boolean or 'partial', got {answer!r}"
            )

    if errors:
        raise AnswerBatchError("extended answer conversion failed", errors)
    return result


def to_extended_boolean_answers(raw_answers: Mapping[str, Any]) -> List[ExtendedBooleanAnswer]:
    """Convert a raw answer mapping into the ``bool | "partial"`` form.

    Raises:
        ValidationError: If ``raw_answers`` is not a mapping.
        AnswerBatchError: If any id or answer is invalid.
    """
    if not isinstance(raw_answers, Mapping):
        raise ValidationError("answers must be a mapping of question id to answer")

    results: List[ExtendedBooleanAnswer] = []
    errors: List[str] = []
    for question_id, raw_value in raw_answers.items():
        if not _is_valid_question_id(question_id):
            errors.append(f"invalid question id: {question_id!r}")
            continue
        try:
            value = normalize(raw_value)
        except SupplyChainESGException as e:
            errors.append(f"question {question_id}: {e.message}")
            continue

        if value is AnswerValue.PARTIAL:
            answer: Any = PARTIAL
        else:
            answer = value is AnswerValue.YES
        results.append(ExtendedBooleanAnswer(question_id=question_id.strip(), answer=answer))

    if errors:
        raise AnswerBatchError("extended boolean conversion failed", errors)
    return results


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------


def find_answer(answers: Sequence[Answer], question_id: str) -> Optional[AnswerValue]:
    """Return the answer given to ``question_id``, if any."""
    for answer in answers:
        if answer.question_id == question_id:
            return answer.answer
    return None


def answer_stats(answers: Sequence[Answer]) -> AnswerStats:
    """Count answers by value; percentages are 0 for an empty list."""
    total = len(answers)
    counts = {value: 0 for value in AnswerValue}
    for answer in answers:
        counts[answer.answer] += 1

    def _pct(count: int) -> float:
        return round(count / total * 100, 2) if total else 0.0

    return AnswerStats(
        total=total,
        yes_count=counts[AnswerValue.YES],
        no_count=counts[AnswerValue.NO],
        partial_count=counts[AnswerValue.PARTIAL],
        yes_percentage=_pct(counts[AnswerValue.YES]),
        no_percentage=_pct(counts[AnswerValue.NO]),
        partial_percentage=_pct(counts[AnswerValue.PARTIAL]),
    )


def validate_answers(answers: Sequence[Any]) -> Tuple[bool, List[str]]:
    """Check a submission without raising.

    Reports an empty list, malformed items, blank ids, duplicate ids and
    answer values outside ``yes/no/partial``.

    Returns:
        ``(is_valid, errors)``
    """
    if not isinstance(answers, (list, tuple)):
        return False, ["answers must be a list"]
    if not answers:
        return False, ["at least one answer is required"]

    errors: List[str] = []
    seen: set = set()
    for index, item in enumerate(answers):
        fields = _item_fields(item)
        if fields is None:
            errors.append(f"index {index}: invalid answer object")
            continue
        question_id, value = fields
        if not _is_valid_question_id(question_id):
            errors.append(f"index {index}: invalid question id")
            continue
        if question_id in seen:
            errors.append(f"duplicate question id: {question_id}")
            continue
        seen.add(question_id)

        if isinstance(value, AnswerValue):
            continue
        if not isinstance(value, str) or value.strip().lower() not in ALLOWED_ANSWERS:
            errors.append(f'question {question_id}: invalid answer value "{value}"')

    return not errors, errors


__all__ = [
    "ALLOWED_ANSWERS",
    "normalize",
    "normalize_all",
    "from_boolean_answers",
    "from_extended_boolean_answers",
    "to_extended_boolean_answers",
    "find_answer",
    "answer_stats",
    "validate_answers",
]
