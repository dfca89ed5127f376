import pytest

from molecula.surveys.errors import SurveyDefinitionError
from molecula.surveys.kinds import (
    KINDS,
    MultiChoiceKind,
    ScaleKind,
    SingleChoiceKind,
    TextKind,
    strategy_for,
    validate_answer,
)
from molecula.surveys.payloads import Number, OptionRef, Text
from molecula.surveys.schema import OptionSpec, QuestionDraft, QuestionKind, QuestionSpec
from molecula.surveys.validation import NOT_AN_OPTION, OUT_OF_RANGE, REQUIRED

OPTIONS = (OptionSpec(id=10, text="A", position=0), OptionSpec(id=11, text="B", position=1))


def _question(kind: str, required: bool = False) -> QuestionSpec:
    options = OPTIONS if kind in (QuestionKind.SINGLE, QuestionKind.MULTI) else ()
    return QuestionSpec(
        id=1, position=0, text="Q?", kind=kind, required=required, options=options
    )


class TestTextAnswers:
    def test_text_is_stripped(self) -> None:
        check = validate_answer(_question("text"), "  hello  ")
        assert check.ok and check.present
        assert check.payloads == (Text("hello"),)

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_optional_is_absent(self, raw: object) -> None:
        check = validate_answer(_question("text"), raw)
        assert check.ok
        assert not check.present
        assert check.payloads == ()

    def test_blank_required_is_rejected(self) -> None:
        check = validate_answer(_question("text", required=True), "  ")
        assert check.error == REQUIRED


class TestScaleAnswers:
    @pytest.mark.parametrize("raw,value", [(1, 1), (5, 5), ("3", 3), (" 4 ", 4), (2.0, 2)])
    def test_valid_ratings(self, raw: object, value: int) -> None:
        check = validate_answer(_question("scale"), raw)
        assert check.ok and check.present
        assert check.payloads == (Number(value),)

    @pytest.mark.parametrize("raw", [0, 6, -1, "7", "abc", 3.5, True, [3]])
    def test_invalid_ratings_are_rejected(self, raw: object) -> None:
        check = validate_answer(_question("scale"), raw)
        assert check.present
        assert check.error == OUT_OF_RANGE
        assert check.payloads == ()

    def test_absent_optional(self) -> None:
        assert validate_answer(_question("scale"), "").ok

    def test_absent_required(self) -> None:
        assert validate_answer(_question("scale", required=True), None).error == REQUIRED


class TestSingleChoiceAnswers:
    def test_member_option(self) -> None:
        check = validate_answer(_question("single"), "10")
        assert check.payloads == (OptionRef(10),)

    @pytest.mark.parametrize("raw", [12, "99", "x"])
    def test_foreign_option_is_rejected(self, raw: object) -> None:
        check = validate_answer(_question("single"), raw)
        assert check.present
        assert check.error == NOT_AN_OPTION

    def test_absent_required(self) -> None:
        check = validate_answer(_question("single", required=True), None)
        assert check.error == REQUIRED
        assert not check.present


class TestMultiChoiceAnswers:
    def test_each_selection_yields_a_payload(self) -> None:
        check = validate_answer(_question("multi"), ["10", "11"])
        assert check.payloads == (OptionRef(10), OptionRef(11))

    def test_duplicates_are_collapsed(self) -> None:
        check = validate_answer(_question("multi"), [11, "11", 10])
        assert check.payloads == (OptionRef(11), OptionRef(10))

    def test_single_value_is_accepted(self) -> None:
        assert validate_answer(_question("multi"), "11").payloads == (OptionRef(11),)

    def test_any_foreign_option_rejects_all(self) -> None:
        check = validate_answer(_question("multi"), ["10", "42"])
        assert check.error == NOT_AN_OPTION
        assert check.payloads == ()

    @pytest.mark.parametrize("raw", [None, [], ["", " "]])
    def test_empty_required_is_rejected(self, raw: object) -> None:
        check = validate_answer(_question("multi", required=True), raw)
        assert check.error == REQUIRED

    def test_empty_optional_is_absent(self) -> None:
        check = validate_answer(_question("multi"), [])
        assert check.ok and not check.present


class TestKindStrategies:
    def test_registry_covers_every_kind(self) -> None:
        assert set(KINDS) == {kind.value for kind in QuestionKind}
        assert isinstance(strategy_for("text"), TextKind)
        assert isinstance(strategy_for("scale"), ScaleKind)
        assert isinstance(strategy_for("single"), SingleChoiceKind)
        assert isinstance(strategy_for("multi"), MultiChoiceKind)

    def test_unknown_kind(self) -> None:
        with pytest.raises(SurveyDefinitionError, match="Invalid question kind"):
            strategy_for("ranking")

    def test_choice_needs_two_options(self) -> None:
        with pytest.raises(SurveyDefinitionError, match="at least 2"):
            strategy_for("single").check_definition(
                QuestionDraft(text="Q", kind="single", options=["Only"])
            )

    def test_choice_options_must_be_distinct(self) -> None:
        with pytest.raises(SurveyDefinitionError, match="distinct"):
            strategy_for("multi").check_definition(
                QuestionDraft(text="Q", kind="multi", options=["A", "A"])
            )

    @pytest.mark.parametrize("kind", ["text", "scale"])
    def test_options_forbidden_for_open_kinds(self, kind: str) -> None:
        with pytest.raises(SurveyDefinitionError, match="do not take options"):
            strategy_for(kind).check_definition(
                QuestionDraft(text="Q", kind=kind, options=["A", "B"])
            )

    def test_render(self) -> None:
        single = _question("single")
        assert strategy_for("single").render(single, OptionRef(11)) == "B"
        assert strategy_for("scale").render(_question("scale"), Number(4)) == "4"
        assert strategy_for("text").render(_question("text"), Text("a, b")) == "a, b"

    def test_render_rejects_wrong_payload(self) -> None:
        with pytest.raises(TypeError):
            strategy_for("text").render(_question("text"), Number(3))
        with pytest.raises(TypeError):
            strategy_for("scale").render(_question("scale"), Text("3"))
        with pytest.raises(TypeError):
            strategy_for("multi").render(_question("multi"), Text("A"))


class TestQuestionDraft:
    def test_from_dict_drops_blank_options(self) -> None:
        draft = QuestionDraft.from_dict(
            {"text": " Pick ", "kind": "single", "options": ["A", " ", "B", None]}
        )
        assert draft.text == "Pick"
        assert draft.options == ["A", "B"]
        assert draft.required is False
        assert draft.next_question_order is None

    def test_from_dict_reads_branch_target(self) -> None:
        draft = QuestionDraft.from_dict(
            {"text": "Q", "kind": "text", "required": True, "next_question_order": "3"}
        )
        assert draft.required is True
        assert draft.next_question_order == 3

    def test_from_dict_accepts_integral_float_target(self) -> None:
        draft = QuestionDraft.from_dict({"text": "Q", "kind": "text", "next_question_order": 3.0})
        assert draft.next_question_order == 3

    @pytest.mark.parametrize("target", [2.7, "2.7", "three", True, [3]])
    def test_from_dict_rejects_non_integral_target(self, target: object) -> None:
        with pytest.raises(ValueError, match="next_question_order"):
            QuestionDraft.from_dict({"text": "Q", "kind": "text", "next_question_order": target})

    @pytest.mark.parametrize("required", ["false", "yes", 1, None])
    def test_from_dict_rejects_non_bool_required(self, required: object) -> None:
        with pytest.raises(ValueError, match="required"):
            QuestionDraft.from_dict({"text": "Q", "kind": "text", "required": required})
