"""
Answer verification strategies.

The evaluator never compares answers itself; it delegates to an
AnswerVerifier so that the comparison mechanism can be swapped (e.g. for a
real encrypted equality check) without touching scoring logic.
"""
from typing import Protocol

from talentproof.core.question_generator import Question

# Minimum length (exclusive) for the placeholder encrypted-answer check
MIN_ENCRYPTED_ANSWER_LENGTH = 5


class AnswerVerifier(Protocol):
    """Decides whether a submitted answer is correct for a question."""

    def verify(self, answer: str, question: Question) -> bool: ...


class LengthHeuristicVerifier:
    """
    Placeholder for encrypted answer comparison.

    Any non-empty answer longer than MIN_ENCRYPTED_ANSWER_LENGTH characters
    counts as correct. This is a stand-in for a homomorphic equality check,
    not a real comparison: the question is ignored.
    """

    name = "length_heuristic"

    def verify(self, answer: str, question: Question) -> bool:
        return bool(answer) and len(answer) > MIN_ENCRYPTED_ANSWER_LENGTH


class OptionMatchVerifier:
    """
    Plaintext comparison against the question's correct option.

    Compares the option text, ignoring surrounding whitespace and case.
    Indices are not accepted: math options are themselves numbers.
    """

    name = "option_match"

    def verify(self, answer: str, question: Question) -> bool:
        submitted = answer.strip()
        if not submitted:
            return False
        return submitted.lower() == question.correct_option.strip().lower()


_VERIFIERS = {
    LengthHeuristicVerifier.name: LengthHeuristicVerifier,
    OptionMatchVerifier.name: OptionMatchVerifier,
}


def get_verifier(name: str) -> AnswerVerifier:
    """
    Build the verifier registered under name.

    Raises:
        ValueError: If no verifier is registered under name
    """
    try:
        return _VERIFIERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown answer verifier '{name}'. Available: {sorted(_VERIFIERS)}"
        )
