"""
Safe evaluation of the arithmetic expressions players type in.

Only digits, the four basic operators and whitespace are understood. Nothing is handed to `eval`:
the text is tokenized and folded with the usual precedence (`*` `/` before `+` `-`, left to right).
Every problem is reported as an `EvaluationFailure` value, never as an exception.
"""

import math
import re
from dataclasses import dataclass

from src.core.models import Number
from src.core.shared_types import OPERATORS

_TOKEN_RE = re.compile(r"\s*(?:(?P<number>[0-9]+)|(?P<op>[+\-*/]))")


@dataclass(frozen=True)
class EvaluationFailure:
    reason: str


def is_failure(result: Number | EvaluationFailure) -> bool:
    return isinstance(result, EvaluationFailure)


def evaluate(expr: str) -> Number | EvaluationFailure:
    """Evaluate `expr` to a finite number. Integral results come back as `int`."""
    if not isinstance(expr, str):
        return EvaluationFailure("Expression must be text.")

    stripped = expr.strip()
    if not stripped:
        return EvaluationFailure("Expression is empty.")
    if stripped[-1] in OPERATORS:
        return EvaluationFailure("Incomplete expression: ends with an operator.")

    tokens = _tokenize(stripped)
    if isinstance(tokens, EvaluationFailure):
        return tokens

    parsed = _parse(tokens)
    if isinstance(parsed, EvaluationFailure):
        return parsed
    numbers, operators = parsed

    try:
        result = _fold(numbers, operators)
    except ZeroDivisionError:
        return EvaluationFailure("Division by zero.")
    except OverflowError:
        return EvaluationFailure("Result is too large.")

    if isinstance(result, float):
        if not math.isfinite(result):
            return EvaluationFailure("Result is not a finite number.")
        if result.is_integer():
            return int(result)
    return result


# -- Internal helpers --
def _tokenize(text: str) -> list[str] | EvaluationFailure:
    tokens: list[str] = []
    position = 0
    while position < len(text):
        match = _TOKEN_RE.match(text, position)
        if match is None:
            offending = text[position:].lstrip()[:1]
            return EvaluationFailure(f"Unexpected character: {offending!r}.")
        tokens.append(match.group("number") or match.group("op"))
        position = match.end()
    return tokens


def _parse(tokens: list[str]) -> tuple[list[int], list[str]] | EvaluationFailure:
    """Split tokens into alternating operands and operators. A single leading sign is folded into the first operand."""
    sign = 1
    if tokens[0] in "+-":
        sign = -1 if tokens[0] == "-" else 1
        tokens = tokens[1:]

    numbers: list[int] = []
    operators: list[str] = []
    expect_number = True
    for token in tokens:
        is_operator = token in OPERATORS
        if expect_number and is_operator:
            return EvaluationFailure(f"Unexpected operator {token!r}.")
        if not expect_number and not is_operator:
            return EvaluationFailure(f"Missing operator before {token!r}.")
        if is_operator:
            operators.append(token)
        else:
            try:
                numbers.append(int(token))
            except ValueError:
                return EvaluationFailure("Number is too long.")
        expect_number = not expect_number

    if not numbers or expect_number:
        return EvaluationFailure("Incomplete expression.")
    numbers[0] *= sign
    return numbers, operators


def _fold(numbers: list[int], operators: list[str]) -> Number:
    """
    Two precedence levels, so one pass is enough:
    `term` collects the running product/quotient, `total` the sum of finished terms.
    """
    total: Number = 0
    term: Number = numbers[0]
    for op, value in zip(operators, numbers[1:]):
        if op == "*":
            term = term * value
        elif op == "/":
            term = term / value
        else:
            total += term
            term = value if op == "+" else -value
    return total + term
