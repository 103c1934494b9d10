from epiparam.context.arguments import (
    DcmArguments,
    IcmArguments,
    ModelArguments,
    NetArguments,
)
from epiparam.context.expression import Expression, expr
from epiparam.context.parameter_set import ParameterSet

__all__ = [
    "DcmArguments",
    "Expression",
    "IcmArguments",
    "ModelArguments",
    "NetArguments",
    "ParameterSet",
    "expr",
]
