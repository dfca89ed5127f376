from molecula.data.models.answer import Answer
from molecula.data.models.option import Option
from molecula.data.models.question import Question
from molecula.data.models.response import Response
from molecula.data.models.survey import Survey
from molecula.data.models.user import User

__all__ = [
    "Answer",
    "Option",
    "Question",
    "Response",
    "Survey",
    "User",
]
