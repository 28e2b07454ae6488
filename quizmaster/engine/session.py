"""Quiz Session - Timed quiz-taking lifecycle on the consumer side.

Phases:
    not_started -> running -> submitting -> terminated
    not_started | running -> abandoned

The countdown is driven from outside through ``tick()`` (one call per second),
either by ``run_countdown`` or by a test calling it directly.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Union

from ..exceptions import SessionStateError, SubmissionError
from ..models.enums import SessionPhase
from ..models.schemas import PublicQuestion, PublicQuiz, Submission, SubmittedAnswer
from ..models.state import SessionState

logger = logging.getLogger(__name__)

Submitter = Callable[[Submission], Awaitable[str]]
Confirmation = Union[bool, Callable[[], bool]]


class QuizSession:
    """One user taking one quiz.

    The session only sees the sanitized quiz (no ``is_correct`` flags). Scoring
    happens wherever ``submitter`` sends the Submission; the session keeps the
    returned result id.

    Example:
        >>> session = QuizSession(public_quiz, submitter=api.submit)
        >>> session.start()
        >>> session.select_answer(0, 2)
        >>> result_id = await session.submit(confirm=True)
    """

    def __init__(self, quiz: PublicQuiz, submitter: Submitter):
        self.quiz = quiz
        self.submitter = submitter
        self.state = SessionState(quiz_id=quiz.id, time_limit_seconds=quiz.time_limit_seconds)

    # =========================================================================
    # READ-ONLY VIEW
    # =========================================================================

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def time_left(self) -> int:
        return self.state.time_left

    @property
    def question_count(self) -> int:
        return len(self.quiz.questions)

    @property
    def current_question(self) -> PublicQuestion:
        return self.quiz.questions[self.state.current_index]

    @property
    def answered_count(self) -> int:
        return self.state.answered_count

    @property
    def progress_percentage(self) -> float:
        """Position of the displayed question, as a percentage of the quiz."""
        if not self.quiz.questions:
            return 0.0
        return (self.state.current_index + 1) / self.question_count * 100

    def format_time_left(self) -> str:
        """Remaining time as ``MM:SS``."""
        minutes, seconds = divmod(max(self.state.time_left, 0), 60)
        return f"{minutes:02d}:{seconds:02d}"

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def _require_running(self, action: str) -> None:
        if self.state.phase is not SessionPhase.RUNNING:
            raise SessionStateError(
                f"Cannot {action} while session is {self.state.phase.value}",
                {"phase": self.state.phase.value, "action": action},
            )

    def start(self) -> None:
        if self.state.phase is not SessionPhase.NOT_STARTED:
            raise SessionStateError(
                f"Session already {self.state.phase.value}", {"phase": self.state.phase.value}
            )
        self.state.phase = SessionPhase.RUNNING
        logger.info(f"[Quiz {self.quiz.id}] Session started, {self.format_time_left()} on the clock")

    async def tick(self) -> str | None:
        """Advance the countdown by one second.

        At zero the session submits itself, without confirmation, exactly once.
        Ticks outside ``running`` or after the clock hit zero do nothing.

        Returns:
            Result id when this tick triggered a successful auto-submit
        """
        if self.state.phase is not SessionPhase.RUNNING or self.state.time_left <= 0:
            return None

        self.state.time_left -= 1
        self.state.add_time(self.state.current_index)

        if self.state.time_left == 0 and not self.state.auto_submit_fired:
            self.state.auto_submit_fired = True
            self.state.timed_out = True
            logger.info(f"[Quiz {self.quiz.id}] Time is up, auto-submitting")
            return await self._submit()
        return None

    def select_answer(self, question_index: int, option_index: int) -> None:
        """Select (or replace) the answer for a question."""
        self._require_running("select an answer")
        if not 0 <= question_index < self.question_count:
            raise SessionStateError(
                f"Question index {question_index} out of range", {"question_index": question_index}
            )
        options = self.quiz.questions[question_index].options
        if not 0 <= option_index < len(options):
            raise SessionStateError(
                f"Option index {option_index} out of range",
                {"question_index": question_index, "option_index": option_index},
            )
        self.state.record_answer(question_index, option_index)

    def next(self) -> int:
        self._require_running("navigate")
        self.state.current_index = min(self.state.current_index + 1, self.question_count - 1)
        return self.state.current_index

    def previous(self) -> int:
        self._require_running("navigate")
        self.state.current_index = max(self.state.current_index - 1, 0)
        return self.state.current_index

    def jump_to(self, index: int) -> int:
        self._require_running("navigate")
        if not 0 <= index < self.question_count:
            raise SessionStateError(f"Question index {index} out of range", {"index": index})
        self.state.current_index = index
        return index

    async def submit(self, confirm: Confirmation = False) -> str | None:
        """Manual submission.

        Args:
            confirm: ``True`` or a callable returning the user's answer to
                "submit now?"; a falsy answer leaves the session running

        Returns:
            Result id on success, ``None`` when declined or when the submitter
            failed (see ``state.last_error``)

        Raises:
            SessionStateError: Session is not running (including mid-submission)
        """
        self._require_running("submit")
        confirmed = confirm() if callable(confirm) else confirm
        if not confirmed:
            logger.debug(f"[Quiz {self.quiz.id}] Submission declined")
            return None
        return await self._submit()

    def abandon(self) -> None:
        """Leave without submitting; in-memory answers are discarded."""
        if self.state.phase not in (SessionPhase.NOT_STARTED, SessionPhase.RUNNING):
            raise SessionStateError(
                f"Cannot abandon a {self.state.phase.value} session", {"phase": self.state.phase.value}
            )
        self.state.clear()
        self.state.phase = SessionPhase.ABANDONED
        logger.info(f"[Quiz {self.quiz.id}] Session abandoned")

    # =========================================================================
    # SUBMISSION
    # =========================================================================

    def build_submission(self) -> Submission:
        """Submission for the current answers; unanswered questions are left out."""
        answers = []
        for question_index, option_index in sorted(self.state.answers.items()):
            question = self.quiz.questions[question_index]
            answers.append(
                SubmittedAnswer(
                    question_id=question.id,
                    selected_option_id=question.options[option_index].id,
                    time_spent_seconds=self.state.time_spent.get(question_index, 0),
                )
            )
        return Submission(
            quiz_id=self.quiz.id,
            answers=answers,
            total_time_seconds=self.state.elapsed_seconds,
            timed_out=self.state.timed_out,
        )

    async def _submit(self) -> str | None:
        self.state.phase = SessionPhase.SUBMITTING
        submission = self.build_submission()

        try:
            result_id = await self.submitter(submission)
        except SubmissionError as e:
            self.state.phase = SessionPhase.RUNNING
            self.state.last_error = e.message
            logger.warning(f"[Quiz {self.quiz.id}] Submission failed, session kept running: {e}")
            return None
        except BaseException:
            self.state.phase = SessionPhase.RUNNING
            raise

        self.state.phase = SessionPhase.TERMINATED
        self.state.result_id = result_id
        self.state.last_error = None
        logger.info(
            f"[Quiz {self.quiz.id}] Submitted {len(submission.answers)}/{self.question_count} answers "
            f"in {submission.total_time_seconds}s -> result {result_id}"
        )
        return result_id


async def run_countdown(session: QuizSession, interval: float = 1.0) -> str | None:
    """Tick ``session`` every ``interval`` seconds while it runs and has time left.

    Returns:
        The session's result id, if it ended up submitted
    """
    while session.phase is SessionPhase.RUNNING and session.time_left > 0:
        await asyncio.sleep(interval)
        await session.tick()
    return session.state.result_id
