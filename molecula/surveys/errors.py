class SurveyError(Exception):
    """Base class for survey engine errors."""


class SurveyDefinitionError(SurveyError, ValueError):
    """A survey, question or option definition is rejected at creation time."""


class MalformedBranchingRule(SurveyDefinitionError):
    def __init__(self, position: int, target: int, total: int) -> None:
        self.position = position
        self.target = target
        self.total = total
        super().__init__(
            f"Question {position + 1} cannot branch to question {target}: "
            f"targets must be after it and at most {total}."
        )


class SurveyNotFound(SurveyError, LookupError):
    def __init__(self, survey_id: int) -> None:
        self.survey_id = survey_id
        super().__init__(f"Survey {survey_id} does not exist.")


class DuplicateSubmission(SurveyError):
    """The respondent already has a response for this survey."""

    def __init__(self, survey_id: int, respondent_id: int) -> None:
        self.survey_id = survey_id
        self.respondent_id = respondent_id
        super().__init__("You have already responded to this survey.")


class SurveyClosed(SurveyError):
    def __init__(self, survey_id: int) -> None:
        self.survey_id = survey_id
        super().__init__("This survey is closed.")


class ValidationFailure(SurveyError):
    """A submitted answer broke a required, range or option rule."""

    def __init__(self, question_id: int, position: int, reason: str) -> None:
        self.question_id = question_id
        self.position = position
        self.reason = reason
        super().__init__(f"Question {position + 1}: {reason}")


class StoreFailure(SurveyError):
    """The underlying store failed. Details are not shown to end users."""
