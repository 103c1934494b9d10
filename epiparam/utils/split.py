import logging
from collections.abc import Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)

SEPARATOR = "."


def split_list(arguments: Mapping[str, Any]) -> dict[str, Any]:
    """
    Flatten nested argument mappings into top-level named entries.

    A value that is itself a mapping of qualifiers is replaced by one entry per
    leaf, named by joining the outer and inner names with a dot, so
    ``{"inf": {"prob": 0.2}}`` becomes ``{"inf.prob": 0.2}``. Plural values
    (lists, tuples and other non-string sequences) become tuples, the
    canonical form of a sensitivity sweep. Anything else passes through
    unchanged.

    Parameters
    ----------
    arguments : Mapping[str, Any]
        Collected arguments keyed by canonical parameter name.

    Returns
    -------
    dict[str, Any]
        Flattened arguments with no mapping values left.
    """
    flat: dict[str, Any] = {}
    for name, value in arguments.items():
        _flatten_into(flat, name, value)
    return flat


def _flatten_into(flat: dict[str, Any], name: str, value: Any) -> None:
    if isinstance(value, Mapping):
        if not value:
            logger.debug(f"Dropped empty nested parameter '{name}'")
        for inner_name, inner_value in value.items():
            _flatten_into(flat, f"{name}{SEPARATOR}{inner_name}", inner_value)
        return

    if name in flat:
        logger.warning(f"Parameter '{name}' given more than once; keeping last value")

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        flat[name] = tuple(value)
    else:
        flat[name] = value
