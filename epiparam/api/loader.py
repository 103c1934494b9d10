import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from epiparam.api.params import resolve
from epiparam.constants import ModelClass
from epiparam.context.constants import NA
from epiparam.context.expression import Expression
from epiparam.context.parameter_set import ParameterSet

logger = logging.getLogger(__name__)

EXPRESSION_KEY = "$expr"


def _decode(value: Any) -> Any:
    if value is None:
        return NA
    if isinstance(value, dict):
        if set(value) == {EXPRESSION_KEY}:
            return Expression(source=value[EXPRESSION_KEY])
        return {name: _decode(inner) for name, inner in value.items()}
    if isinstance(value, list):
        return [_decode(item) for item in value]
    return value


def load_parameters(
    path: str | Path,
    model_class: ModelClass | str,
    context: Mapping[str, Any] | None = None,
) -> ParameterSet:
    """
    Load and resolve epidemic parameters from a JSON file.

    The file holds one object keyed by canonical parameter names
    (``"trans.rate"``, ``"act.rate.g2"``, ``"balance"``, ...). ``null`` is
    read as ``NA``, and ``{"$expr": "..."}`` as a deferred expression
    evaluated against ``context``. Other nested objects are flattened into
    dotted names.

    Parameters
    ----------
    path : str | Path
        Path to the JSON parameter file.
    model_class : ModelClass | str
        Model class to resolve the parameters for.
    context : Mapping[str, Any] | None, default=None
        Names available to deferred expressions.

    Returns
    -------
    ParameterSet
        The resolved parameters.

    Raises
    ------
    ValueError
        If the file root is not a JSON object.
    """
    path = Path(path)
    logger.info(f"Loading {model_class} parameters from '{path}'")
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Root of parameter file '{path}' must be a JSON object")

    arguments = {name: _decode(value) for name, value in data.items()}
    return resolve(model_class, arguments, context)
