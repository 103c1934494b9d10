import logging
from typing import TextIO

from epiparam import constants
from epiparam.api import (
    ActRates,
    act_rates,
    balance_act_rate,
    load_parameters,
    param_dcm,
    param_icm,
    param_net,
    resolve,
)
from epiparam.constants import ModelClass
from epiparam.context import (
    DcmArguments,
    Expression,
    IcmArguments,
    ModelArguments,
    NetArguments,
    ParameterSet,
    expr,
)
from epiparam.context.constants import NA, BalanceSelector
from epiparam.exceptions import (
    ExpressionEvaluationFailure,
    InvalidBalanceSelector,
    MissingRequiredParameter,
    ParameterResolutionError,
    SweepLengthMismatch,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())


def add_stderr_logger(level: int = logging.INFO) -> logging.StreamHandler[TextIO]:
    """Send this package's log records to stderr, for quick debugging."""
    logger = logging.getLogger(__name__)
    handler: logging.StreamHandler[TextIO] = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
    )
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return handler


__all__ = [
    "ActRates",
    "BalanceSelector",
    "DcmArguments",
    "Expression",
    "ExpressionEvaluationFailure",
    "IcmArguments",
    "InvalidBalanceSelector",
    "MissingRequiredParameter",
    "ModelArguments",
    "ModelClass",
    "NA",
    "NetArguments",
    "ParameterResolutionError",
    "ParameterSet",
    "SweepLengthMismatch",
    "act_rates",
    "add_stderr_logger",
    "balance_act_rate",
    "constants",
    "expr",
    "load_parameters",
    "param_dcm",
    "param_icm",
    "param_net",
    "resolve",
]
