"""Read-only statistics over stored answers, and the CSV export."""

import csv
import io
from collections import defaultdict
from dataclasses import dataclass
from typing import Any

from molecula.surveys.kinds import strategy_for
from molecula.surveys.schema import SCALE_MAX, SCALE_MIN, QuestionSpec
from molecula.surveys.store import SurveyStore, TextSample

TEXT_SAMPLE_LIMIT = 20
ANONYMOUS_LABEL = "anonymous"
CELL_SEPARATOR = " | "
EXPORT_COLUMNS = ["response_id", "respondent", "submitted_at"]


@dataclass(frozen=True)
class OptionCount:
    option_id: int
    text: str
    count: int


@dataclass(frozen=True)
class ScaleSummary:
    average: str
    count: int
    histogram: dict[int, int]


class Aggregator:
    def __init__(
        self,
        store: SurveyStore,
        text_sample_limit: int = TEXT_SAMPLE_LIMIT,
        anonymous_label: str = ANONYMOUS_LABEL,
    ) -> None:
        self.store = store
        self.text_sample_limit = text_sample_limit
        self.anonymous_label = anonymous_label

    def option_tally(self, question: QuestionSpec) -> list[OptionCount]:
        """Answer counts per option in option order, including unchosen options."""
        counts = self.store.count_answers_by_option(question.id)
        return [
            OptionCount(option.id, option.text, counts.get(option.id, 0))
            for option in self.store.list_options(question.id)
        ]

    def scale_summary(self, question: QuestionSpec) -> ScaleSummary:
        stats = self.store.scale_stats(question.id)
        histogram = {
            value: stats.per_value_counts.get(value, 0)
            for value in range(SCALE_MIN, SCALE_MAX + 1)
        }
        average = stats.average if stats.count and stats.average is not None else 0.0
        return ScaleSummary(average=f"{average:.2f}", count=stats.count, histogram=histogram)

    def text_sample(
        self, question: QuestionSpec, anonymous: bool, limit: int | None = None
    ) -> list[TextSample]:
        samples = self.store.recent_text_answers(
            question.id, limit if limit is not None else self.text_sample_limit
        )
        if not anonymous:
            return list(samples)
        return [
            TextSample(text=sample.text, respondent=None, submitted_at=sample.submitted_at)
            for sample in samples
        ]

    def summarize(self, survey_id: int) -> list[dict[str, Any]]:
        survey = self.store.get_survey(survey_id)
        return [
            strategy_for(question.kind).summarize(
                self, question, anonymous=survey.is_anonymous
            )
            for question in self.store.list_questions(survey_id)
        ]

    def export_csv(self, survey_id: int) -> str:
        """One row per response, one column per question in position order."""
        survey = self.store.get_survey(survey_id)
        questions = list(self.store.list_questions(survey_id))

        cells: dict[tuple[int, int], list[str]] = defaultdict(list)
        by_id = {question.id: question for question in questions}
        for answer in self.store.list_answers(survey_id):
            question = by_id.get(answer.question_id)
            if question is None:
                continue
            rendered = strategy_for(question.kind).render(question, answer.payload)
            cells[(answer.response_id, answer.question_id)].append(rendered)

        buf = io.StringIO(newline="")
        writer = csv.writer(buf)
        writer.writerow(EXPORT_COLUMNS + [question.text for question in questions])
        for response in self.store.list_responses(survey_id):
            respondent = self.anonymous_label if survey.is_anonymous else response.respondent
            writer.writerow(
                [response.id, respondent, response.submitted_at.isoformat()]
                + [
                    CELL_SEPARATOR.join(cells.get((response.id, question.id), []))
                    for question in questions
                ]
            )
        return buf.getvalue()
