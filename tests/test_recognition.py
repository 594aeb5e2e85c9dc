from __future__ import annotations

import pytest

from mathsnap.recognition import (
    INVALID_SOLUTION,
    NO_SOLUTION,
    RecognitionPayloadError,
    RecognitionResult,
    format_solution,
    graphable_expression,
    is_two_variable,
    needs_limit_fallback,
    solution_lines,
)


def test_payload_with_service_spelling() -> None:
    result = RecognitionResult.from_payload(
        {
            "formatted_equation": "x^2-4=0",
            "solution": ["2", "-2"],
            "isolated_solition": "y=x^2-4",
        }
    )
    assert result.formatted_equation == "x^2-4=0"
    assert result.solution == ("2", "-2")
    assert result.isolated_solution == "y=x^2-4"


def test_payload_with_corrected_spelling() -> None:
    result = RecognitionResult.from_payload(
        {"formatted_equation": "y=2x", "isolated_solution": "y=2x"}
    )
    assert result.isolated_solution == "y=2x"
    assert result.solution == ()


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, ()),
        (3, ("3",)),
        ("5", ("5",)),
        ([None, 2.5], (None, "2.5")),
        (("1", "2"), ("1", "2")),
    ],
)
def test_payload_solution_is_always_a_tuple(raw, expected) -> None:
    result = RecognitionResult.from_payload({"formatted_equation": "x=1", "solution": raw})
    assert result.solution == expected


@pytest.mark.parametrize("payload", [{}, {"solution": ["1"]}, {"formatted_equation": None}, ["x=1"]])
def test_payload_without_equation_is_rejected(payload) -> None:
    with pytest.raises(RecognitionPayloadError):
        RecognitionResult.from_payload(payload)


def test_manual_input() -> None:
    assert RecognitionResult.from_manual_input(" y = 2x + 3 ").isolated_solution == "y = 2x + 3"
    assert RecognitionResult.from_manual_input("x^2 + 1").isolated_solution == "x^2 + 1"
    assert RecognitionResult.from_manual_input("2x + 3 = 15").isolated_solution == ""
    with pytest.raises(RecognitionPayloadError):
        RecognitionResult.from_manual_input("  ")


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, NO_SOLUTION),
        ("2.0", "2"),
        ("2", "2"),
        (4.0, "4"),
        (1 / 3, "0.333"),
        ("-2.5", "-2.500"),
        ("sqrt(2)", "sqrt(2)"),
        ("inf", "inf"),
        (INVALID_SOLUTION, INVALID_SOLUTION),
    ],
)
def test_format_solution(value, expected: str) -> None:
    assert format_solution(value) == expected


def test_solution_lines_numbers_multiple_solutions() -> None:
    result = RecognitionResult("x^2-4=0", ("2", "-2"))
    assert solution_lines(result, "x") == ["x_{1} = 2", "x_{2} = -2"]


def test_solution_lines_single_and_missing() -> None:
    assert solution_lines(RecognitionResult("2x=1", ("0.5",)), "x") == ["x = 0.500"]
    assert solution_lines(RecognitionResult("x^2=-1", (None,)), "x") == [f"x = {NO_SOLUTION}"]


def test_solution_lines_typeset_symbolic_values() -> None:
    result = RecognitionResult("x^2=2", ("sqrt(2)",))
    assert solution_lines(result, "x") == ["x = \\sqrt{2}"]
    assert solution_lines(result, "") == ["\\sqrt{2}"]


def test_is_two_variable() -> None:
    assert is_two_variable("X+y=5")
    assert not is_two_variable("x+1=5")


@pytest.mark.parametrize(
    "result, expected",
    [
        (RecognitionResult("x^2-4=0", ("2", "-2")), False),
        (RecognitionResult("lim x\\to0 f(x)=a=b", ("1",)), True),
        (RecognitionResult("x^2+1=", (None,)), True),
        (RecognitionResult("2x=4", (INVALID_SOLUTION,)), True),
        (RecognitionResult("2x=4", ()), False),
        (RecognitionResult("x+y=5", (None,)), False),
        (RecognitionResult("x+y=5", (INVALID_SOLUTION,)), False),
    ],
)
def test_needs_limit_fallback(result: RecognitionResult, expected: bool) -> None:
    assert needs_limit_fallback(result) is expected


def test_limit_fallback_is_logged(caplog) -> None:
    caplog.set_level("DEBUG", logger="mathsnap.recognition")
    needs_limit_fallback(RecognitionResult("2x=4", (None,)))
    assert "limit fallback" in caplog.text


def test_graphable_expression_prefers_isolated_solution() -> None:
    result = RecognitionResult("x^2-4=y", ("2",), "y=x**2-4")
    assert graphable_expression(result) == "y=x^2-4"


def test_graphable_expression_falls_back_to_equation() -> None:
    assert graphable_expression(RecognitionResult("y = 2x")) == "y = 2x"
    assert graphable_expression(RecognitionResult("2x+3=15", ("6",))) == ""


@pytest.mark.parametrize(
    "solution, expected",
    [
        (None, False),
        ([], False),
        ("Error: Invalid equation", False),
        (7, False),
        ([None], True),
        (["Error: Invalid equation", "2"], True),
        (["2"], False),
    ],
)
def test_only_a_failed_solution_list_triggers_fallback(solution, expected: bool) -> None:
    result = RecognitionResult.from_payload({"formatted_equation": "2+3", "solution": solution})
    assert needs_limit_fallback(result) is expected


def test_payload_records_whether_solution_was_a_list() -> None:
    assert RecognitionResult.from_payload({"formatted_equation": "x=1", "solution": ["1"]}).solution_is_list
    assert not RecognitionResult.from_payload({"formatted_equation": "x=1", "solution": "1"}).solution_is_list
    assert not RecognitionResult.from_payload({"formatted_equation": "x=1"}).solution_is_list
