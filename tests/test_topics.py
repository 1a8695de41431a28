"""
Tests for the quiz topic registry.
"""
import pytest

from talentproof.core.topics import (
    DEFAULT_QUESTION_COUNT,
    QuizTopicConfig,
    TopicRegistry,
    build_default_registry,
)


class TestTopicRegistry:
    """Tests for TopicRegistry lookups."""

    def setup_method(self):
        self.registry = build_default_registry()

    def test_names_sorted(self):
        assert self.registry.names() == ["blockchain", "math", "programming", "security"]

    @pytest.mark.parametrize(
        "topic,threshold",
        [
            ("programming", 0.6),
            ("math", 0.7),
            ("blockchain", 0.6),
            ("security", 0.8),
        ],
    )
    def test_passing_scores(self, topic, threshold):
        assert self.registry.get(topic).passing_score == threshold

    def test_every_topic_has_three_questions(self):
        for name in self.registry.names():
            assert self.registry.question_count(name) == 3

    def test_canonical_questions_are_consistent(self):
        for name in self.registry.names():
            for question in self.registry.get(name).questions:
                assert 0 <= question.correct_answer < len(question.options)

    def test_unknown_topic_defaults(self):
        assert self.registry.get("astrology") is None
        assert self.registry.get_or_default("astrology").topic == "math"
        assert self.registry.question_count("astrology") == DEFAULT_QUESTION_COUNT

    def test_membership(self):
        assert "math" in self.registry
        assert "astrology" not in self.registry
        assert len(self.registry) == 4

    def test_registry_requires_default_topic(self):
        with pytest.raises(ValueError, match="math"):
            TopicRegistry([QuizTopicConfig(topic="art", passing_score=0.5, questions=())])
