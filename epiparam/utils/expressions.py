import logging
import math
from collections.abc import Callable, Mapping
from typing import Any

from epiparam.context.expression import Expression
from epiparam.exceptions import ExpressionEvaluationFailure
from epiparam.utils.security import (
    get_expression_variables,
    validate_expression_security,
)

logger = logging.getLogger(__name__)


# Names every expression may use on top of the caller's context
MATH_NAMESPACE: dict[str, float | Callable[..., Any]] = {
    "pi": math.pi,
    "e": math.e,
    "inf": math.inf,
    "nan": math.nan,
    "exp": math.exp,
    "log": math.log,
    "log10": math.log10,
    "log2": math.log2,
    "ln": math.log,
    "sqrt": math.sqrt,
    "pow": math.pow,
    "floor": math.floor,
    "ceil": math.ceil,
    "isnan": math.isnan,
    "abs": abs,
    "round": round,
    "min": min,
    "max": max,
    "sum": sum,
    "float": float,
    "int": int,
}


def evaluate_expression(
    parameter: str, expression: Expression, context: Mapping[str, Any]
) -> Any:
    """
    Evaluate a deferred expression against the caller's context.

    Parameters
    ----------
    parameter : str
        Name of the parameter the expression defines. Used in error messages.
    expression : Expression
        The deferred expression.
    context : Mapping[str, Any]
        Name to value lookup. Context names shadow the math namespace.

    Returns
    -------
    Any
        The evaluated value. Lists are returned as tuples.

    Raises
    ------
    ExpressionEvaluationFailure
        If the expression is rejected, references an undefined name, or
        raises while evaluating.
    """
    source = expression.source
    try:
        validate_expression_security(source)
    except ValueError as e:
        raise ExpressionEvaluationFailure(parameter, source, str(e)) from e

    undefined = [
        name
        for name in get_expression_variables(source)
        if name not in context and name not in MATH_NAMESPACE
    ]
    if undefined:
        raise ExpressionEvaluationFailure(
            parameter, source, f"undefined variables: {', '.join(undefined)}"
        )

    namespace: dict[str, Any] = {**MATH_NAMESPACE, **context}
    try:
        result = eval(source, {"__builtins__": {}}, namespace)
    except Exception as e:
        raise ExpressionEvaluationFailure(parameter, source, str(e)) from e

    logger.debug(f"Evaluated '{parameter}': '{source}' -> {result!r}")
    if isinstance(result, list):
        return tuple(result)
    return result


def eval_list(
    arguments: Mapping[str, Any], context: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """
    Resolve every deferred expression in a flattened argument mapping.

    Concrete values are returned as given. Expressions nested one level inside
    a sweep tuple are resolved element by element.

    Parameters
    ----------
    arguments : Mapping[str, Any]
        Flattened arguments, as returned by ``split_list``.
    context : Mapping[str, Any] | None, default=None
        Evaluation context. It is only read, never written.

    Returns
    -------
    dict[str, Any]
        Arguments with concrete values only.
    """
    lookup: Mapping[str, Any] = context if context is not None else {}
    resolved: dict[str, Any] = {}
    for name, value in arguments.items():
        if isinstance(value, Expression):
            resolved[name] = evaluate_expression(name, value, lookup)
        elif isinstance(value, tuple):
            resolved[name] = tuple(
                evaluate_expression(name, item, lookup)
                if isinstance(item, Expression)
                else item
                for item in value
            )
        else:
            resolved[name] = value
    return resolved
