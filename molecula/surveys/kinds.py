"""Question kinds.

Every kind is a strategy object that knows how to check a question
definition, validate a submitted value, render a stored answer for export and
summarize a question's answers. Code that needs kind-specific behavior looks
the strategy up with :func:`strategy_for` instead of branching on the tag.
"""

from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from molecula.surveys.errors import SurveyDefinitionError
from molecula.surveys.payloads import AnswerPayload, Number, OptionRef, Text
from molecula.surveys.schema import QuestionDraft, QuestionKind, QuestionSpec
from molecula.surveys.validation import (
    AnswerCheck,
    check_multi,
    check_scale,
    check_single,
    check_text,
)

if TYPE_CHECKING:
    from molecula.surveys.aggregation import Aggregator

MIN_OPTIONS = 2


class KindStrategy:
    kind: QuestionKind

    def check_definition(self, draft: QuestionDraft) -> None:
        if draft.options:
            raise SurveyDefinitionError(
                f"{self.kind.value.capitalize()} questions do not take options."
            )

    def validate(self, question: QuestionSpec, raw: object) -> AnswerCheck:
        raise NotImplementedError

    def render(self, question: QuestionSpec, payload: AnswerPayload) -> str:
        raise NotImplementedError

    def summarize(
        self, aggregator: "Aggregator", question: QuestionSpec, anonymous: bool
    ) -> dict[str, Any]:
        raise NotImplementedError

    def _wrong_payload(self, payload: AnswerPayload) -> TypeError:
        return TypeError(
            f"{type(payload).__name__} is not a {self.kind.value} answer payload"
        )

    def _header(self, question: QuestionSpec) -> dict[str, Any]:
        return {
            "question_id": question.id,
            "position": question.position,
            "text": question.text,
            "kind": self.kind.value,
        }


class TextKind(KindStrategy):
    kind = QuestionKind.TEXT

    def validate(self, question: QuestionSpec, raw: object) -> AnswerCheck:
        return check_text(question, raw)

    def render(self, question: QuestionSpec, payload: AnswerPayload) -> str:
        match payload:
            case Text(value=value):
                return value
            case _:
                raise self._wrong_payload(payload)

    def summarize(
        self, aggregator: "Aggregator", question: QuestionSpec, anonymous: bool
    ) -> dict[str, Any]:
        samples = aggregator.text_sample(question, anonymous=anonymous)
        return {
            **self._header(question),
            "answers": [asdict(sample) for sample in samples],
        }


class ScaleKind(KindStrategy):
    kind = QuestionKind.SCALE

    def validate(self, question: QuestionSpec, raw: object) -> AnswerCheck:
        return check_scale(question, raw)

    def render(self, question: QuestionSpec, payload: AnswerPayload) -> str:
        match payload:
            case Number(value=value):
                return str(value)
            case _:
                raise self._wrong_payload(payload)

    def summarize(
        self, aggregator: "Aggregator", question: QuestionSpec, anonymous: bool
    ) -> dict[str, Any]:
        return {**self._header(question), **asdict(aggregator.scale_summary(question))}


class ChoiceKind(KindStrategy):
    def check_definition(self, draft: QuestionDraft) -> None:
        texts = [text for text in draft.options if text]
        if len(texts) < MIN_OPTIONS:
            raise SurveyDefinitionError(
                f"Choice questions need at least {MIN_OPTIONS} options."
            )
        if len(set(texts)) != len(texts):
            raise SurveyDefinitionError("Options of one question must be distinct.")

    def render(self, question: QuestionSpec, payload: AnswerPayload) -> str:
        if not isinstance(payload, OptionRef):
            raise self._wrong_payload(payload)
        for option in question.options:
            if option.id == payload.option_id:
                return option.text
        return ""

    def summarize(
        self, aggregator: "Aggregator", question: QuestionSpec, anonymous: bool
    ) -> dict[str, Any]:
        tally = aggregator.option_tally(question)
        return {
            **self._header(question),
            "options": [asdict(row) for row in tally],
            "total": sum(row.count for row in tally),
        }


class SingleChoiceKind(ChoiceKind):
    kind = QuestionKind.SINGLE

    def validate(self, question: QuestionSpec, raw: object) -> AnswerCheck:
        return check_single(question, raw)


class MultiChoiceKind(ChoiceKind):
    kind = QuestionKind.MULTI

    def validate(self, question: QuestionSpec, raw: object) -> AnswerCheck:
        return check_multi(question, raw)


KINDS: dict[str, KindStrategy] = {
    strategy.kind.value: strategy
    for strategy in (TextKind(), ScaleKind(), SingleChoiceKind(), MultiChoiceKind())
}


def strategy_for(kind: str) -> KindStrategy:
    try:
        return KINDS[kind]
    except KeyError:
        raise SurveyDefinitionError(
            f"Invalid question kind '{kind}'. Must be one of: {sorted(KINDS)}"
        ) from None


def validate_answer(question: QuestionSpec, raw: object) -> AnswerCheck:
    """Validate one submitted value against ``question``."""
    return strategy_for(question.kind).validate(question, raw)
