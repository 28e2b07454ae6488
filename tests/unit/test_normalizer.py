# =============================================================================
# TESTS - Question Normalizer
# =============================================================================
# Trivia record -> Question: decoding, shuffling, correctness invariant, points
# =============================================================================

import random
from collections import Counter

import pytest


class TestDecodeHtml:
    """Entity decoding."""

    def test_known_entities(self):
        """Decodes every entity in the table."""
        from quizmaster.engine.normalizer import decode_html

        assert decode_html("Tom &amp; Jerry") == "Tom & Jerry"
        assert decode_html("&lt;div&gt;") == "<div>"
        assert decode_html("&quot;quoted&quot;") == '"quoted"'
        assert decode_html("Don&#039;t") == "Don't"
        assert decode_html("&ldquo;a&rdquo; &lsquo;b&rsquo;") == "\"a\" 'b'"
        assert decode_html("wait&hellip;") == "wait..."
        assert decode_html("1&ndash;2&mdash;3") == "1–2—3"

    def test_unknown_entity_passes_through(self):
        """Entities outside the table are left as-is."""
        from quizmaster.engine.normalizer import decode_html

        assert decode_html("Caf&eacute; &#8217;") == "Caf&eacute; &#8217;"

    def test_plain_text_unchanged(self):
        from quizmaster.engine.normalizer import decode_html

        assert decode_html("No entities here & there") == "No entities here & there"


class TestNormalize:
    """Single record normalization."""

    def test_exactly_one_correct_option(self, normalizer, trivia_record):
        """The decoded correct answer is the only correct option."""
        question = normalizer.normalize(trivia_record)

        correct = [o for o in question.options if o.is_correct]
        assert len(correct) == 1
        assert correct[0].text == "HyperText Transfer Protocol"
        assert len(question.options) == 4

    def test_text_and_options_decoded(self, normalizer, trivia_record):
        question = normalizer.normalize(trivia_record)

        assert question.text == 'What does "HTTP" stand for?'
        assert "Hyperlink & Text Protocol" in [o.text for o in question.options]

    def test_explanation(self, normalizer, trivia_record):
        question = normalizer.normalize(trivia_record)

        assert question.explanation == "The correct answer is: HyperText Transfer Protocol"

    def test_decoded_correct_answer_matches(self, normalizer, trivia_record):
        """Correct answer is compared after decoding."""
        record = {**trivia_record, "correct_answer": "Rock &amp; Roll"}

        question = normalizer.normalize(record)

        assert question.correct_option.text == "Rock & Roll"

    def test_option_ids_unique(self, normalizer, trivia_record):
        question = normalizer.normalize(trivia_record)

        ids = [o.id for o in question.options]
        assert len(set(ids)) == len(ids)

    def test_two_candidates(self, normalizer):
        """True/false style records (2 candidates) are accepted."""
        question = normalizer.normalize(
            {
                "question": "Is water wet?",
                "correct_answer": "True",
                "incorrect_answers": ["False"],
                "difficulty": "easy",
            }
        )

        assert len(question.options) == 2
        assert question.correct_option.text == "True"

    def test_same_seed_same_order(self, trivia_record):
        """Shuffle is reproducible with an injected RNG."""
        from quizmaster.engine.normalizer import QuestionNormalizer

        first = QuestionNormalizer(rng=random.Random(3)).normalize(trivia_record)
        second = QuestionNormalizer(rng=random.Random(3)).normalize(trivia_record)

        assert [o.text for o in first.options] == [o.text for o in second.options]


class TestNormalizePoints:
    """Points and difficulty mapping."""

    @pytest.mark.parametrize(
        "difficulty,points",
        [("easy", 1), ("medium", 2), ("hard", 3)],
    )
    def test_points_by_difficulty(self, normalizer, trivia_record, difficulty, points):
        question = normalizer.normalize({**trivia_record, "difficulty": difficulty})

        assert question.points == points
        assert question.difficulty.value == difficulty

    def test_unknown_difficulty(self, normalizer, trivia_record):
        """Unknown difficulty: 1 point, stored as medium."""
        from quizmaster.models.enums import QuestionDifficulty

        question = normalizer.normalize({**trivia_record, "difficulty": "legendary"})

        assert question.points == 1
        assert question.difficulty == QuestionDifficulty.MEDIUM

    def test_missing_difficulty(self, normalizer, trivia_record):
        record = dict(trivia_record)
        del record["difficulty"]

        assert normalizer.normalize(record).points == 1

    def test_get_points_for_difficulty(self, normalizer):
        from quizmaster.models.enums import QuestionDifficulty

        assert normalizer.get_points_for_difficulty(QuestionDifficulty.HARD) == 3
        assert normalizer.get_points_for_difficulty("EASY") == 1
        assert normalizer.get_points_for_difficulty(None) == 1


class TestNormalizeErrors:
    """Malformed and inconsistent records."""

    def test_missing_correct_answer(self, normalizer, trivia_record):
        from quizmaster.exceptions import MalformedTriviaRecordError

        record = dict(trivia_record)
        del record["correct_answer"]

        with pytest.raises(MalformedTriviaRecordError) as exc_info:
            normalizer.normalize(record)

        assert "correct_answer" in exc_info.value.details["fields"]

    def test_empty_question(self, normalizer, trivia_record):
        from quizmaster.exceptions import MalformedTriviaRecordError

        with pytest.raises(MalformedTriviaRecordError):
            normalizer.normalize({**trivia_record, "question": ""})

    def test_no_incorrect_answers(self, normalizer, trivia_record):
        """A single candidate is not a multiple-choice question."""
        from quizmaster.exceptions import MalformedTriviaRecordError

        with pytest.raises(MalformedTriviaRecordError):
            normalizer.normalize({**trivia_record, "incorrect_answers": []})

    def test_too_many_candidates(self, normalizer, trivia_record):
        from quizmaster.exceptions import MalformedTriviaRecordError

        record = {**trivia_record, "incorrect_answers": [f"Wrong {i}" for i in range(6)]}

        with pytest.raises(MalformedTriviaRecordError):
            normalizer.normalize(record)

    def test_wrong_type(self, normalizer, trivia_record):
        from quizmaster.exceptions import MalformedTriviaRecordError

        with pytest.raises(MalformedTriviaRecordError):
            normalizer.normalize({**trivia_record, "incorrect_answers": "not a list"})

    def test_not_a_mapping(self, normalizer):
        from quizmaster.exceptions import MalformedTriviaRecordError

        with pytest.raises(MalformedTriviaRecordError):
            normalizer.normalize(["question", "answer"])

    def test_option_text_too_long(self, normalizer, trivia_record):
        """Records that violate the question schema are malformed."""
        from quizmaster.exceptions import MalformedTriviaRecordError

        record = {**trivia_record, "correct_answer": "x" * 201}

        with pytest.raises(MalformedTriviaRecordError):
            normalizer.normalize(record)

    def test_duplicate_correct_text_is_ambiguous(self, normalizer, trivia_record):
        from quizmaster.exceptions import AmbiguousCorrectAnswerError

        record = {**trivia_record, "correct_answer": "42", "incorrect_answers": ["42", "7", "8"]}

        with pytest.raises(AmbiguousCorrectAnswerError):
            normalizer.normalize(record)

    def test_ambiguity_after_decoding(self, normalizer, trivia_record):
        """Two candidates that only differ by encoding collide."""
        from quizmaster.exceptions import AmbiguousCorrectAnswerError

        record = {
            **trivia_record,
            "correct_answer": "A &amp; B",
            "incorrect_answers": ["A & B", "C", "D"],
        }

        with pytest.raises(AmbiguousCorrectAnswerError):
            normalizer.normalize(record)

    def test_errors_are_ingestion_errors(self):
        from quizmaster.exceptions import (
            AmbiguousCorrectAnswerError,
            CorrectAnswerNotFoundError,
            IngestionError,
            MalformedTriviaRecordError,
        )

        assert issubclass(MalformedTriviaRecordError, IngestionError)
        assert issubclass(CorrectAnswerNotFoundError, IngestionError)
        assert issubclass(AmbiguousCorrectAnswerError, IngestionError)


class TestShuffleDistribution:
    """Unbiased Fisher-Yates shuffle."""

    def test_correct_answer_position_uniform(self, trivia_record):
        """Over many runs the correct answer lands in each slot ~equally."""
        from quizmaster.engine.normalizer import QuestionNormalizer

        normalizer = QuestionNormalizer(rng=random.Random(2024))
        runs = 4000

        positions = Counter()
        for _ in range(runs):
            question = normalizer.normalize(trivia_record)
            positions[next(i for i, o in enumerate(question.options) if o.is_correct)] += 1

        assert set(positions) == {0, 1, 2, 3}
        for count in positions.values():
            # Expected 1000 per slot, std ~27
            assert 850 <= count <= 1150

    def test_all_permutations_reachable(self):
        from quizmaster.engine.normalizer import fisher_yates_shuffle

        rng = random.Random(1)
        seen = {tuple(fisher_yates_shuffle(["a", "b", "c"], rng)) for _ in range(600)}

        assert len(seen) == 6

    def test_shuffle_does_not_mutate_input(self):
        from quizmaster.engine.normalizer import fisher_yates_shuffle

        items = [1, 2, 3, 4]
        shuffled = fisher_yates_shuffle(items, random.Random(0))

        assert items == [1, 2, 3, 4]
        assert sorted(shuffled) == items


class TestNormalizeBatch:
    """Batch normalization."""

    def test_skips_bad_records(self, normalizer, trivia_record):
        records = [trivia_record, {"question": "broken"}, trivia_record]

        report = normalizer.normalize_batch(records)

        assert len(report.questions) == 2
        assert len(report.rejected) == 1
        assert report.rejected[0].index == 1
        assert not report.ok

    def test_all_good(self, normalizer, trivia_payload):
        report = normalizer.normalize_batch(trivia_payload["results"])

        assert report.ok
        assert [q.points for q in report.questions] == [1, 2, 3]

    def test_atomic_raises_first_error(self, normalizer, trivia_record):
        from quizmaster.exceptions import MalformedTriviaRecordError

        records = [trivia_record, {"question": "broken"}, trivia_record]

        with pytest.raises(MalformedTriviaRecordError):
            normalizer.normalize_batch(records, atomic=True)

    def test_rejections_logged(self, normalizer, trivia_record, caplog):
        import logging

        with caplog.at_level(logging.WARNING, logger="quizmaster.engine.normalizer"):
            normalizer.normalize_batch([{"question": "broken"}])

        assert "rejected" in caplog.text
