"""
Static quiz topic configuration.

Each topic carries a passing threshold and a small canonical question set.
The canonical set is never served to clients (sessions use dynamically
generated questions); it only determines how many questions a session gets
and documents the topic.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# Topic used for generation and thresholds when a requested topic is unknown
DEFAULT_TOPIC = "math"

# Question count for sessions whose topic has no canonical set
DEFAULT_QUESTION_COUNT = 3


@dataclass(frozen=True)
class CanonicalQuestion:
    """A fixed question from a topic's canonical set."""

    id: int
    question: str
    options: Tuple[str, ...]
    correct_answer: int


@dataclass(frozen=True)
class QuizTopicConfig:
    """Read-only configuration for a quiz topic."""

    topic: str
    passing_score: float  # Fraction of correct answers required, in [0, 1]
    questions: Tuple[CanonicalQuestion, ...]

    @property
    def question_count(self) -> int:
        return len(self.questions)


def _programming_quiz() -> QuizTopicConfig:
    return QuizTopicConfig(
        topic="programming",
        passing_score=0.6,
        questions=(
            CanonicalQuestion(
                id=1,
                question="What does FHE stand for?",
                options=(
                    "Fully Homomorphic Encryption",
                    "Federated Hardware Encryption",
                    "Fast Hash Encryption",
                ),
                correct_answer=0,
            ),
            CanonicalQuestion(
                id=2,
                question="Which language is best for FHE?",
                options=("Rust", "Python", "JavaScript"),
                correct_answer=0,
            ),
            CanonicalQuestion(
                id=3,
                question="What is Zero-Knowledge Proof?",
                options=(
                    "Proving something without revealing details",
                    "A type of encryption",
                    "A blockchain consensus",
                ),
                correct_answer=0,
            ),
        ),
    )


def _math_quiz() -> QuizTopicConfig:
    return QuizTopicConfig(
        topic="math",
        passing_score=0.7,
        questions=(
            CanonicalQuestion(
                id=1,
                question="What is 15 + 27?",
                options=("42", "32", "52"),
                correct_answer=0,
            ),
            CanonicalQuestion(
                id=2,
                question="Solve: 8 × 7",
                options=("56", "54", "64"),
                correct_answer=0,
            ),
            CanonicalQuestion(
                id=3,
                question="What is 144 ÷ 12?",
                options=("12", "11", "13"),
                correct_answer=0,
            ),
        ),
    )


def _blockchain_quiz() -> QuizTopicConfig:
    return QuizTopicConfig(
        topic="blockchain",
        passing_score=0.6,
        questions=(
            CanonicalQuestion(
                id=1,
                question="What is a smart contract?",
                options=(
                    "Self-executing contract with code",
                    "Legal document on blockchain",
                    "Cryptocurrency wallet",
                ),
                correct_answer=0,
            ),
            CanonicalQuestion(
                id=2,
                question="Which consensus mechanism does Ethereum use?",
                options=(
                    "Proof of Stake",
                    "Proof of Work",
                    "Delegated Proof of Stake",
                ),
                correct_answer=0,
            ),
            CanonicalQuestion(
                id=3,
                question="What is gas fee in Ethereum?",
                options=(
                    "Transaction execution cost",
                    "Mining reward",
                    "Network subscription",
                ),
                correct_answer=0,
            ),
        ),
    )


def _security_quiz() -> QuizTopicConfig:
    return QuizTopicConfig(
        topic="security",
        passing_score=0.8,
        questions=(
            CanonicalQuestion(
                id=1,
                question="What is phishing?",
                options=(
                    "Fraudulent attempt to obtain sensitive information",
                    "Type of encryption",
                    "Blockchain attack",
                ),
                correct_answer=0,
            ),
            CanonicalQuestion(
                id=2,
                question="What is 2FA?",
                options=(
                    "Two-Factor Authentication",
                    "Two-File Archive",
                    "Two-Function Algorithm",
                ),
                correct_answer=0,
            ),
            CanonicalQuestion(
                id=3,
                question="What's a common password best practice?",
                options=(
                    "Use long, complex passwords",
                    "Use same password everywhere",
                    "Use personal information",
                ),
                correct_answer=0,
            ),
        ),
    )


class TopicRegistry:
    """
    Lookup of quiz topic configurations.

    Built once at startup and never mutated afterwards, so it can be shared
    across request threads without locking.
    """

    def __init__(self, configs: List[QuizTopicConfig]):
        self._configs: Dict[str, QuizTopicConfig] = {c.topic: c for c in configs}
        if DEFAULT_TOPIC not in self._configs:
            raise ValueError(f"Topic registry must include '{DEFAULT_TOPIC}'")

    def get(self, topic: str) -> Optional[QuizTopicConfig]:
        return self._configs.get(topic)

    def get_or_default(self, topic: str) -> QuizTopicConfig:
        """Return the topic's config, falling back to the default topic."""
        return self._configs.get(topic) or self._configs[DEFAULT_TOPIC]

    def question_count(self, topic: str) -> int:
        config = self._configs.get(topic)
        return config.question_count if config else DEFAULT_QUESTION_COUNT

    def names(self) -> List[str]:
        return sorted(self._configs)

    def __contains__(self, topic: object) -> bool:
        return topic in self._configs

    def __len__(self) -> int:
        return len(self._configs)


def build_default_registry() -> TopicRegistry:
    """Create the registry of built-in quiz topics."""
    return TopicRegistry(
        [_programming_quiz(), _math_quiz(), _blockchain_quiz(), _security_quiz()]
    )


topic_registry = build_default_registry()
