"""Forward-only branching.

A question may name a later question (1-based) to jump to once it has been
answered. Every question strictly between the two is skipped for the rest of
the submission. Jumps never go backwards and never chain through a skipped
question.
"""

from molecula.surveys.errors import MalformedBranchingRule


def is_forward_target(
    question_index: int, next_question_order: int | None, total_questions: int
) -> bool:
    """True when ``next_question_order`` is a usable jump from ``question_index``."""
    if not next_question_order:
        return False
    return question_index + 1 < next_question_order <= total_questions


def evaluate(
    question_index: int,
    answered: bool,
    next_question_order: int | None,
    total_questions: int,
) -> range:
    """Return the 0-based indices a processed question adds to the skip set."""
    if not answered or next_question_order is None:
        return range(0)
    if not is_forward_target(question_index, next_question_order, total_questions):
        return range(0)
    return range(question_index + 1, next_question_order - 1)


def check_branch_target(
    question_index: int, next_question_order: int | None, total_questions: int
) -> None:
    """Reject a jump target that is not strictly forward and in range."""
    if not next_question_order:
        return
    if not is_forward_target(question_index, next_question_order, total_questions):
        raise MalformedBranchingRule(question_index, next_question_order, total_questions)


class BranchingEvaluator:
    """Tracks the skip set while a submission walks its questions in order."""

    def __init__(self, total_questions: int) -> None:
        self.total_questions = total_questions
        self._skipped: set[int] = set()

    @property
    def skipped(self) -> frozenset[int]:
        return frozenset(self._skipped)

    def is_skipped(self, question_index: int) -> bool:
        return question_index in self._skipped

    def observe(
        self, question_index: int, answered: bool, next_question_order: int | None
    ) -> range:
        # A skipped question's own branch is never followed.
        if self.is_skipped(question_index):
            return range(0)
        added = evaluate(
            question_index, answered, next_question_order, self.total_questions
        )
        self._skipped.update(added)
        return added