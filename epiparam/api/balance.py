from typing import Any, NamedTuple

from epiparam.constants import ModelClass
from epiparam.context.constants import (
    ACT_RATE,
    BALANCE_G1,
    BALANCE_G2,
    BalanceSelector,
)
from epiparam.context.parameter_set import ParameterSet
from epiparam.exceptions import InvalidBalanceSelector, MissingRequiredParameter


class ActRates(NamedTuple):
    """Act rates in effect for each group at one time step."""

    g1: float
    g2: float


def balance_act_rate(
    act_rate: float,
    balance: BalanceSelector,
    size_g1: float,
    size_g2: float,
) -> float:
    """
    Act rate of the non-authoritative group at the current time step.

    With purely heterogeneous mixing between two groups, the total number of
    acts seen from either side must match: ``size_g1 * rate_g1 ==
    size_g2 * rate_g2``. The group named by ``balance`` keeps its own rate;
    the other group's rate is solved from the live group sizes, which change
    under vital dynamics, so this is called every time step.

    Parameters
    ----------
    act_rate : float
        Act rate of the authoritative group.
    balance : BalanceSelector
        "g1" if group 1's rate is authoritative, "g2" if group 2's is.
    size_g1 : float
        Current size of group 1.
    size_g2 : float
        Current size of group 2.

    Returns
    -------
    float
        The dependent group's act rate, or 0.0 when the dependent group is
        empty.

    Raises
    ------
    InvalidBalanceSelector
        If ``balance`` is neither "g1" nor "g2".
    ValueError
        If a group size is negative.
    """
    if size_g1 < 0 or size_g2 < 0:
        raise ValueError(
            f"Group sizes must be non-negative, got size_g1={size_g1}, "
            f"size_g2={size_g2}"
        )

    match balance:
        case "g1":
            authoritative_size, dependent_size = size_g1, size_g2
        case "g2":
            authoritative_size, dependent_size = size_g2, size_g1
        case _:
            raise InvalidBalanceSelector(balance)

    # An empty group has no contact volume to balance.
    if dependent_size == 0:
        return 0.0
    return act_rate * authoritative_size / dependent_size


def _scalar_rate(params: ParameterSet, name: str) -> float:
    value: Any = params.get(name)
    if value is None:
        raise MissingRequiredParameter(name)
    if isinstance(value, tuple):
        if len(value) != 1:
            raise ValueError(
                (
                    f"'{name}' is a sensitivity sweep of {len(value)} values; "
                    "select a single run with ParameterSet.run() first"
                )
            )
        value = value[0]
    return float(value)


def act_rates(params: ParameterSet, size_g1: float, size_g2: float) -> ActRates:
    """
    Balanced act rates for both groups of a contact model.

    One-group models return their ``act.rate`` for group 1 and 0.0 for
    group 2. Two-group models read the authoritative rate (``act.rate`` or
    ``act.rate.g2``) named by ``balance`` and derive the other with
    ``balance_act_rate``.

    Parameters
    ----------
    params : ParameterSet
        A scalar deterministic compartmental or individual contact parameter
        set.
    size_g1 : float
        Current size of group 1.
    size_g2 : float
        Current size of group 2.

    Raises
    ------
    ValueError
        For network parameter sets, whose partnership volume is balanced by
        the network model rather than by act rates.
    """
    match params.model_class:
        case ModelClass.STOCHASTIC_NETWORK:
            raise ValueError(
                (
                    "Network models are balanced by the dynamic network model; "
                    "act rates are per partnership and are not rebalanced"
                )
            )
        case _:
            pass

    if params.groups == 1:
        return ActRates(g1=_scalar_rate(params, ACT_RATE), g2=0.0)

    balance = params.balance
    if balance == BALANCE_G1:
        rate = _scalar_rate(params, ACT_RATE)
        return ActRates(g1=rate, g2=balance_act_rate(rate, balance, size_g1, size_g2))
    if balance == BALANCE_G2:
        rate = _scalar_rate(params, f"{ACT_RATE}{params.group_suffix}")
        return ActRates(g1=balance_act_rate(rate, balance, size_g1, size_g2), g2=rate)
    raise InvalidBalanceSelector(balance)
