"""
Dynamic question generation.

Synthesizes a fresh multiple-choice question per request so that no two
users are likely to see the same question/option layout. Each topic has its
own generation strategy:

- math: one of four arithmetic operations with random operands
- programming: Fibonacci, factorial, or nth-prime questions
- blockchain / security: a canned prompt from a fixed pool

Every question is assembled as [correct, *distractors] and then shuffled;
the correct option's post-shuffle index is stored on the question.

Difficulty is stored on the question but does not change operand ranges or
content.
"""

import logging
import random
import secrets
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from talentproof.core.topics import DEFAULT_TOPIC

logger = logging.getLogger(__name__)


# Expected answering time per topic (seconds)
MATH_EXPECTED_TIME_SECONDS = 30
PROGRAMMING_EXPECTED_TIME_SECONDS = 45
BLOCKCHAIN_EXPECTED_TIME_SECONDS = 40
SECURITY_EXPECTED_TIME_SECONDS = 35

# Random offset range used for "near miss" numeric distractors: [low, high)
DISTRACTOR_OFFSET_RANGE = (5, 15)

FIRST_TEN_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29)

MATH_OPERATIONS = ("addition", "subtraction", "multiplication", "division")
PROGRAMMING_TYPES = ("fibonacci", "factorial", "prime")

BLOCKCHAIN_PROMPTS = (
    "What is the main purpose of a smart contract?",
    "Which consensus mechanism does Ethereum currently use?",
    "What does 'gas' represent in Ethereum?",
    "What is a blockchain fork?",
    "What is the role of miners/validators?",
)
BLOCKCHAIN_CORRECT = "Self-executing contract with code"
BLOCKCHAIN_DISTRACTORS = (
    "Legal document on blockchain",
    "Cryptocurrency wallet",
    "Network node",
)

SECURITY_PROMPTS = (
    "What is the primary goal of encryption?",
    "What does 2FA help protect against?",
    "What is a common phishing attack method?",
    "Why should passwords be hashed?",
    "What is social engineering?",
)
SECURITY_CORRECT = "Protect data confidentiality"
SECURITY_DISTRACTORS = (
    "Increase data size",
    "Speed up data transfer",
    "Make data public",
)


@dataclass(frozen=True)
class Question:
    """
    A generated multiple-choice question. Immutable once created.

    Options are stored as a tuple and parameters as a read-only mapping, so
    questions can be shared between the session store and its callers.
    """

    question_id: str
    question_text: str
    options: Tuple[str, ...]
    correct_answer: int  # Zero-based index into options
    parameters: Mapping[str, str] = field(default_factory=dict)
    difficulty: float = 0.0
    expected_time: int = 0  # Seconds

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer]


def user_seed(user_id: str) -> int:
    """Derive a deterministic seed from a user id (sum of code points)."""
    return sum(ord(c) for c in user_id)


def fibonacci(n: int) -> int:
    """Return the nth Fibonacci number, starting F(0)=0, F(1)=1."""
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a


def factorial(n: int) -> int:
    result = 1
    for i in range(2, n + 1):
        result *= i
    return result


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def shuffle_options(options: List[str], rng: random.Random) -> List[str]:
    """
    Return a shuffled copy of options (Fisher-Yates).

    For each position i, swap with a uniformly random position j >= i.
    """
    shuffled = list(options)
    n = len(shuffled)
    for i in range(n):
        j = rng.randrange(i, n)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def locate_correct_option(options: List[str], correct_value: str) -> int:
    """
    Find the index of the correct value in the shuffled options.

    Returns the first match. A missing value cannot happen for options built
    from [correct, *distractors]; if it does, it is logged as an error and
    index 0 is returned so the question is still servable.
    """
    try:
        return options.index(correct_value)
    except ValueError:
        logger.error(
            f"Correct value {correct_value!r} missing from options {options}; "
            "defaulting correct index to 0"
        )
        return 0


class QuestionGenerator:
    """
    Generates questions for quiz topics.

    Args:
        rng: Random source for question content (operations, operands,
            prompts, shuffling). Defaults to a fresh unseeded generator.
            Question identifiers never use this source, so a seeded
            generator cannot cause identifier collisions between sessions.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()
        self._strategies: Dict[str, Callable[[str, float], Question]] = {
            "math": self.generate_math_question,
            "programming": self.generate_programming_question,
            "blockchain": self.generate_blockchain_question,
            "security": self.generate_security_question,
        }

    @classmethod
    def for_user(cls, user_id: str) -> "QuestionGenerator":
        """Create a generator whose content is reproducible for user_id."""
        return cls(random.Random(user_seed(user_id)))

    def generate(self, topic: str, user_id: str, difficulty: float) -> Question:
        """Generate one question for topic; unknown topics use math."""
        strategy = self._strategies.get(topic) or self._strategies[DEFAULT_TOPIC]
        return strategy(user_id, difficulty)

    def generate_math_question(self, user_id: str, difficulty: float) -> Question:
        rng = self._rng
        operation = rng.choice(MATH_OPERATIONS)

        if operation == "addition":
            a = rng.randrange(1, 100)
            b = rng.randrange(1, 100)
            answer = a + b
            text = f"What is {a} + {b}?"
            distractors = [
                answer + self._offset(),
                answer - self._offset(),
                answer + 1,
            ]
        elif operation == "subtraction":
            a = rng.randrange(50, 200)
            b = rng.randrange(1, a)
            answer = a - b
            text = f"What is {a} - {b}?"
            # Adding instead of subtracting
            distractors = [answer + self._offset(), answer - self._offset(), a + b]
        elif operation == "multiplication":
            a = rng.randrange(2, 20)
            b = rng.randrange(2, 12)
            answer = a * b
            text = f"What is {a} × {b}?"
            # One group too many
            distractors = [
                answer + self._offset(),
                answer - self._offset(),
                (a + 1) * b,
            ]
        else:
            # Built from divisor and quotient so the division is exact
            b = rng.randrange(2, 12)
            answer = rng.randrange(2, 20)
            a = answer * b
            text = f"What is {a} ÷ {b}?"
            distractors = [answer + 1, answer - 1, max(a // (b + 1), 1)]

        parameters = {"a": str(a), "b": str(b), "type": operation}
        return self._assemble(
            prefix="math",
            user_id=user_id,
            text=text,
            correct=str(answer),
            distractors=[str(d) for d in distractors],
            parameters=parameters,
            difficulty=difficulty,
            expected_time=MATH_EXPECTED_TIME_SECONDS,
        )

    def generate_programming_question(
        self, user_id: str, difficulty: float
    ) -> Question:
        rng = self._rng
        question_type = rng.choice(PROGRAMMING_TYPES)

        if question_type == "fibonacci":
            n = rng.randrange(5, 15)
            answer = fibonacci(n)
            text = (
                f"What is the {_ordinal(n)} number in the Fibonacci sequence? "
                "(Start: 0, 1)"
            )
            parameters = {"n": str(n), "type": question_type}
        elif question_type == "factorial":
            n = rng.randrange(4, 8)
            answer = factorial(n)
            text = f"What is {n}! (factorial)?"
            parameters = {"n": str(n), "type": question_type}
        else:
            index = rng.randrange(len(FIRST_TEN_PRIMES))
            answer = FIRST_TEN_PRIMES[index]
            text = f"What is the {_ordinal(index + 1)} prime number?"
            parameters = {"prime_index": str(index), "type": question_type}

        return self._assemble(
            prefix="prog",
            user_id=user_id,
            text=text,
            correct=str(answer),
            distractors=[str(answer + 1), str(answer - 1), str(answer * 2)],
            parameters=parameters,
            difficulty=difficulty,
            expected_time=PROGRAMMING_EXPECTED_TIME_SECONDS,
        )

    def generate_blockchain_question(
        self, user_id: str, difficulty: float
    ) -> Question:
        return self._assemble(
            prefix="bc",
            user_id=user_id,
            text=self._rng.choice(BLOCKCHAIN_PROMPTS),
            correct=BLOCKCHAIN_CORRECT,
            distractors=list(BLOCKCHAIN_DISTRACTORS),
            parameters={},
            difficulty=difficulty,
            expected_time=BLOCKCHAIN_EXPECTED_TIME_SECONDS,
        )

    def generate_security_question(self, user_id: str, difficulty: float) -> Question:
        return self._assemble(
            prefix="sec",
            user_id=user_id,
            text=self._rng.choice(SECURITY_PROMPTS),
            correct=SECURITY_CORRECT,
            distractors=list(SECURITY_DISTRACTORS),
            parameters={},
            difficulty=difficulty,
            expected_time=SECURITY_EXPECTED_TIME_SECONDS,
        )

    def _offset(self) -> int:
        low, high = DISTRACTOR_OFFSET_RANGE
        return self._rng.randrange(low, high)

    def _assemble(
        self,
        prefix: str,
        user_id: str,
        text: str,
        correct: str,
        distractors: List[str],
        parameters: Dict[str, str],
        difficulty: float,
        expected_time: int,
    ) -> Question:
        options = shuffle_options([correct, *distractors], self._rng)
        return Question(
            question_id=f"{prefix}_{user_id}_{secrets.randbits(32)}",
            question_text=text,
            options=options,
            correct_answer=locate_correct_option(options, correct),
            parameters=parameters,
            difficulty=difficulty,
            expected_time=expected_time,
        )
