from epiparam.context.constants import BALANCE_G1, BALANCE_G2


class ParameterResolutionError(ValueError):
    """Raised when epidemic parameters cannot be resolved into a parameter set."""

    pass


class MissingRequiredParameter(ParameterResolutionError):
    """Raised when a parameter every model of a class needs was not supplied."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"Required parameter missing: specify {parameter}")


class InvalidBalanceSelector(ParameterResolutionError):
    """Raised when a two-group model lacks a valid act balancing selector."""

    def __init__(self, value: object = None):
        self.value = value
        received = "no balance" if value is None else f"balance={value!r}"
        super().__init__(
            (
                f"Required selector missing or invalid ({received}): specify "
                f'balance="{BALANCE_G1}" or balance="{BALANCE_G2}" with 2-group models'
            )
        )


class ExpressionEvaluationFailure(ParameterResolutionError):
    """Raised when a deferred parameter expression cannot be evaluated."""

    def __init__(self, parameter: str, expression: str, reason: str):
        self.parameter = parameter
        self.expression = expression
        super().__init__(
            f"Failed to evaluate parameter '{parameter}' from '{expression}': {reason}"
        )


class SweepLengthMismatch(ParameterResolutionError):
    """Raised when sensitivity sweep sequences disagree on the number of runs."""

    def __init__(self, lengths: dict[str, int]):
        self.lengths = lengths
        detail = ", ".join(f"{name}={n}" for name, n in lengths.items())
        super().__init__(
            f"Sweep parameters must have length 1 or a common length; got {detail}"
        )
