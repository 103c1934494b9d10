from pydantic import BaseModel, ConfigDict, Field, field_validator

from epiparam.utils.security import get_expression_variables


class Expression(BaseModel):
    """
    A parameter value whose evaluation is deferred until resolution.

    Plain strings given as parameter values are literals (``balance="g1"``);
    only ``Expression`` values are evaluated, against the context passed to
    the parameter constructor.

    Attributes
    ----------
    source : str
        The expression text, e.g. ``"b_rate * 0.5"``.
    """

    model_config = ConfigDict(frozen=True)

    source: str = Field(
        default=..., min_length=1, description="Text of the deferred expression."
    )

    @field_validator("source", mode="after")
    @classmethod
    def strip_source(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Expression source must not be blank")
        return stripped

    def variables(self) -> list[str]:
        """Names the expression reads from its evaluation context."""
        return get_expression_variables(self.source)

    def __str__(self) -> str:
        return self.source


def expr(source: str) -> Expression:
    """Shorthand for ``Expression(source=source)``."""
    return Expression(source=source)
