# =============================================================================
# TESTS - Quiz Schemas
# =============================================================================
# Validation rules, sanitized projection and id index
# =============================================================================

import pytest
from pydantic import ValidationError


class TestQuestion:
    def test_exactly_one_correct(self):
        from quizmaster.models.schemas import Option, Question

        with pytest.raises(ValidationError):
            Question(text="?", options=[Option(text="a"), Option(text="b")])

        with pytest.raises(ValidationError):
            Question(
                text="?",
                options=[Option(text="a", is_correct=True), Option(text="b", is_correct=True)],
            )

    def test_option_count_bounds(self):
        from quizmaster.models.schemas import Option, Question

        with pytest.raises(ValidationError):
            Question(text="?", options=[Option(text="a", is_correct=True)])

        options = [Option(text="a", is_correct=True)] + [Option(text=str(i)) for i in range(6)]
        with pytest.raises(ValidationError):
            Question(text="?", options=options)

    def test_points_bounds(self):
        from quizmaster.models.schemas import Option, Question

        options = [Option(text="a", is_correct=True), Option(text="b")]

        with pytest.raises(ValidationError):
            Question(text="?", options=options, points=0)
        with pytest.raises(ValidationError):
            Question(text="?", options=options, points=11)

    def test_duplicate_option_ids(self):
        from quizmaster.models.schemas import Option, Question

        with pytest.raises(ValidationError):
            Question(
                text="?",
                options=[Option(id="x", text="a", is_correct=True), Option(id="x", text="b")],
            )

    def test_to_public_hides_answers(self, two_question_quiz):
        public = two_question_quiz.questions[0].to_public()

        dumped = public.model_dump()
        assert "explanation" not in dumped
        assert all("is_correct" not in o for o in dumped["options"])
        assert [o["id"] for o in dumped["options"]] == ["q1-a", "q1-b", "q1-c", "q1-d"]


class TestQuiz:
    def test_total_points_recomputed(self, quiz_factory):
        quiz = quiz_factory(points=[1, 2, 3])

        assert quiz.total_points == 6

    def test_total_points_ignores_input(self, two_question_quiz):
        from quizmaster.models.schemas import Quiz

        data = two_question_quiz.model_dump()
        data["total_points"] = 99

        assert Quiz.model_validate(data).total_points == 3

    def test_duplicate_question_ids(self, two_question_quiz):
        from quizmaster.models.schemas import Quiz

        data = two_question_quiz.model_dump()
        data["questions"][1]["id"] = "q1"

        with pytest.raises(ValidationError):
            Quiz.model_validate(data)

    def test_requires_a_question(self, two_question_quiz):
        from quizmaster.models.schemas import Quiz

        data = two_question_quiz.model_dump()
        data["questions"] = []

        with pytest.raises(ValidationError):
            Quiz.model_validate(data)
        with pytest.raises(ValidationError):
            two_question_quiz.with_questions([])

    def test_tags_lowercased(self, quiz_factory):
        from quizmaster.models.schemas import Quiz

        data = quiz_factory().model_dump()
        data["tags"] = ["Trivia", " GENERAL "]

        assert Quiz.model_validate(data).tags == ["trivia", "general"]

    def test_time_limit(self, quiz_factory):
        assert quiz_factory(time_limit_minutes=2).time_limit_seconds == 120

    def test_for_taker(self, two_question_quiz):
        from quizmaster.models.schemas import PublicQuiz

        public = two_question_quiz.for_taker()

        assert isinstance(public, PublicQuiz)
        assert public.id == two_question_quiz.id
        assert public.total_points == 3
        assert "is_correct" not in public.model_dump_json()

    def test_view_for(self, two_question_quiz):
        from quizmaster.models.schemas import PublicQuiz, Quiz

        assert isinstance(two_question_quiz.view_for(True), Quiz)
        assert isinstance(two_question_quiz.view_for(False), PublicQuiz)

    def test_with_questions(self, two_question_quiz):
        updated = two_question_quiz.with_questions(two_question_quiz.questions[:1])

        assert updated.total_points == 1
        assert two_question_quiz.total_points == 3


class TestQuizIndex:
    def test_resolve(self, two_question_quiz):
        index = two_question_quiz.index

        question, option = index.resolve("q2", "q2-a")

        assert question.id == "q2"
        assert option.is_correct is True
        assert len(index) == 2

    def test_option_scoped_to_question(self, two_question_quiz):
        question, option = two_question_quiz.index.resolve("q1", "q2-a")

        assert question.id == "q1"
        assert option is None

    def test_unknown_question(self, two_question_quiz):
        assert two_question_quiz.index.resolve("nope", "q1-a") == (None, None)

    def test_built_once(self, two_question_quiz):
        assert two_question_quiz.index is two_question_quiz.index


class TestSubmission:
    def test_negative_time_rejected(self):
        from quizmaster.models.schemas import Submission

        with pytest.raises(ValidationError):
            Submission(quiz_id="quiz-1", total_time_seconds=-1)

    def test_defaults(self):
        from quizmaster.models.schemas import Submission

        submission = Submission(quiz_id="quiz-1", total_time_seconds=0)

        assert submission.answers == []
        assert submission.timed_out is False


class TestGenerateQuizRequest:
    def test_defaults(self):
        from quizmaster.models.enums import QuizCategory, QuizDifficulty
        from quizmaster.models.schemas import GenerateQuizRequest

        request = GenerateQuizRequest(title="T", description="D")

        assert request.category == QuizCategory.GENERAL
        assert request.difficulty == QuizDifficulty.MEDIUM
        assert request.amount == 15
        assert request.time_limit_minutes == 30
        assert request.atomic is False

    def test_amount_bounds(self):
        from quizmaster.models.schemas import GenerateQuizRequest

        with pytest.raises(ValidationError):
            GenerateQuizRequest(title="T", description="D", amount=0)
        with pytest.raises(ValidationError):
            GenerateQuizRequest(title="T", description="D", amount=51)


class TestTriviaResponseCode:
    def test_known_codes(self):
        from quizmaster.models.enums import TriviaResponseCode

        assert TriviaResponseCode.from_code(0) is TriviaResponseCode.SUCCESS
        assert TriviaResponseCode.from_code(4) is TriviaResponseCode.TOKEN_EMPTY

    def test_unknown_code(self):
        from quizmaster.models.enums import TriviaResponseCode

        code = TriviaResponseCode.from_code(7)

        assert code is TriviaResponseCode.UNKNOWN
        assert code.describe(7) == "Unknown error (Code: 7)"
