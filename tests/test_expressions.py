import pytest
from pydantic import ValidationError

from epiparam import Expression, ExpressionEvaluationFailure, expr
from epiparam.utils.expressions import eval_list, evaluate_expression
from epiparam.utils.security import (
    get_expression_variables,
    validate_expression_security,
)


class TestEvalList:
    def test_expression_uses_context(self):
        """
        Test that a death rate written as a fraction of a birth rate resolves.
        """
        resolved = eval_list(
            {"b.rate": 0.02, "ds.rate": expr("birth * 0.5")},
            context={"birth": 0.02},
        )

        assert resolved["b.rate"] == 0.02
        assert resolved["ds.rate"] == pytest.approx(0.01)

    def test_concrete_values_are_untouched(self):
        """
        Test that literals, including strings, are not evaluated.
        """
        arguments = {"trans.rate": 0.3, "balance": "g1", "groups": 2}

        assert eval_list(arguments) == arguments

    def test_math_namespace_is_available(self):
        """
        Test that math functions and constants can be used without a context.
        """
        resolved = eval_list(
            {"a": expr("exp(0)"), "b": expr("max(1, 2) * pi"), "c": expr("1 / 4")}
        )

        assert resolved["a"] == 1.0
        assert resolved["b"] == pytest.approx(2 * 3.141592653589793)
        assert resolved["c"] == 0.25

    def test_sweep_elements_are_resolved(self):
        """
        Test that expressions inside a sweep tuple are evaluated one by one.
        """
        resolved = eval_list({"act.rate": (1, expr("x"), 3)}, context={"x": 2})

        assert resolved["act.rate"] == (1, 2, 3)

    def test_list_results_become_tuples(self):
        """
        Test that an expression producing a list yields a sweep tuple.
        """
        resolved = eval_list({"act.rate": expr("[x, x * 2]")}, context={"x": 1})

        assert resolved["act.rate"] == (1, 2)

    def test_context_is_not_modified(self):
        """
        Test that resolution only reads the caller's context.
        """
        context = {"birth": 0.02, "scale": 3}
        snapshot = dict(context)

        eval_list({"ds.rate": expr("birth * scale")}, context=context)

        assert context == snapshot

    def test_undefined_variable_names_the_parameter(self):
        """
        Test that an undefined reference fails with the parameter name.
        """
        with pytest.raises(ExpressionEvaluationFailure, match="ds.rate") as exc_info:
            eval_list({"ds.rate": expr("birth / 2")}, context={})

        assert exc_info.value.parameter == "ds.rate"
        assert exc_info.value.expression == "birth / 2"
        assert "birth" in str(exc_info.value)

    def test_runtime_error_is_chained(self):
        """
        Test that an error raised while evaluating is kept as the cause.
        """
        with pytest.raises(ExpressionEvaluationFailure, match="di.rate") as exc_info:
            eval_list({"di.rate": expr("1 / x")}, context={"x": 0})

        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)

    def test_type_mismatch_fails(self):
        """
        Test that a type error in the caller's values is reported.
        """
        with pytest.raises(ExpressionEvaluationFailure, match="rec.rate"):
            eval_list({"rec.rate": expr("label * 0.5")}, context={"label": "x"})

    @pytest.mark.parametrize(
        "source",
        [
            "__import__('os')",
            "x.real",
            "rates[0]",
            "(lambda: 1)()",
            "[y for y in rates]",
        ],
    )
    def test_unsafe_expressions_are_rejected(self, source: str):
        """
        Test that expressions beyond plain arithmetic are refused.
        """
        with pytest.raises(ExpressionEvaluationFailure, match="trans.rate"):
            evaluate_expression(
                "trans.rate", expr(source), {"x": 1.0, "rates": [0.1]}
            )


class TestExpression:
    def test_source_is_stripped(self):
        """
        Test that surrounding whitespace is removed from the source.
        """
        assert Expression(source="  b_rate / 2 ").source == "b_rate / 2"
        assert str(expr("x")) == "x"

    def test_blank_source_is_rejected(self):
        """
        Test that an empty expression cannot be built.
        """
        with pytest.raises(ValidationError):
            expr("   ")

    def test_variables_skip_function_names(self):
        """
        Test that function names are not reported as variables.
        """
        assert get_expression_variables("beta * S / max(N, 1)") == ["beta", "S", "N"]

    def test_security_rejects_invalid_syntax(self):
        """
        Test that unparseable text is reported as a ValueError.
        """
        with pytest.raises(ValueError, match="Invalid syntax"):
            validate_expression_security("beta *")
