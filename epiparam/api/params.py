import logging
from collections.abc import Mapping
from typing import Any

from epiparam.constants import ModelClass
from epiparam.context.arguments import (
    DcmArguments,
    IcmArguments,
    ModelArguments,
    NetArguments,
    RateInput,
)
from epiparam.context.constants import ACT_RATE, DEFAULT_ACT_RATE, GROUPS, VITAL
from epiparam.context.expression import Expression
from epiparam.context.parameter_set import (
    ParameterSet,
    check_parameters,
    count_groups,
    has_vital_dynamics,
)
from epiparam.utils.expressions import eval_list
from epiparam.utils.split import split_list

logger = logging.getLogger(__name__)


def resolve_arguments(
    arguments: ModelArguments, context: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """
    Turn collected arguments into concrete values.

    The supplied arguments are flattened with ``split_list`` and every
    deferred expression is evaluated against ``context`` with ``eval_list``.
    No defaults are applied and nothing is validated.
    """
    collected = arguments.supplied()
    logger.debug(f"Collected parameters: {list(collected)}")
    flat = split_list(collected)
    return eval_list(flat, context)


def _is_present(values: Mapping[str, Any], name: str) -> bool:
    return values.get(name) is not None


def _build(model_class: ModelClass, values: dict[str, Any]) -> ParameterSet:
    check_parameters(model_class, values)
    params = ParameterSet(model_class=model_class, values=values)
    logger.info(
        (
            f"Resolved {model_class} parameters: groups={params.groups}, "
            f"vital={params.vital}, {len(params)} entries"
        )
    )
    return params


def resolve_dcm(
    arguments: DcmArguments, context: Mapping[str, Any] | None = None
) -> ParameterSet:
    """
    Resolve deterministic compartmental model parameters.

    Every parameter a built-in model needs must be given explicitly, even if
    zero. Nothing is defaulted or derived here: beyond the transmission rate
    every model needs, the set is only tagged with its class.

    Raises
    ------
    MissingRequiredParameter
        If ``trans.rate`` was not supplied.
    """
    out = resolve_arguments(arguments, context)
    return _build(ModelClass.DETERMINISTIC_COMPARTMENTAL, out)


def resolve_icm(
    arguments: IcmArguments, context: Mapping[str, Any] | None = None
) -> ParameterSet:
    """
    Resolve stochastic individual contact model parameters.

    Defaults ``act.rate`` to 1, derives ``vital`` and ``groups``, and requires
    ``trans.rate``. Two-group models must name the authoritative group with
    ``balance``.

    Raises
    ------
    MissingRequiredParameter
        If ``trans.rate`` was not supplied.
    InvalidBalanceSelector
        If a two-group model has no ``balance`` of "g1" or "g2".
    """
    out = resolve_arguments(arguments, context)

    if not _is_present(out, ACT_RATE):
        out[ACT_RATE] = DEFAULT_ACT_RATE
    out[VITAL] = has_vital_dynamics(out)
    out[GROUPS] = count_groups(ModelClass.STOCHASTIC_INDIVIDUAL_CONTACT, out)

    return _build(ModelClass.STOCHASTIC_INDIVIDUAL_CONTACT, out)


def resolve_net(
    arguments: NetArguments, context: Mapping[str, Any] | None = None
) -> ParameterSet:
    """
    Resolve stochastic network model parameters.

    Defaults ``act.rate`` (acts per partnership per unit time) to 1, derives
    ``vital`` and requires ``trans.rate``. Bipartite models need no
    ``balance``: the dynamic network model keeps partnership volume balanced.

    Raises
    ------
    MissingRequiredParameter
        If ``trans.rate`` was not supplied.
    """
    out = resolve_arguments(arguments, context)

    if not _is_present(out, ACT_RATE):
        out[ACT_RATE] = DEFAULT_ACT_RATE
    out[VITAL] = has_vital_dynamics(out)

    return _build(ModelClass.STOCHASTIC_NETWORK, out)


def resolve(
    model_class: ModelClass | str,
    arguments: Mapping[str, Any],
    context: Mapping[str, Any] | None = None,
) -> ParameterSet:
    """
    Resolve a mapping of raw arguments for the given model class.

    Keys are canonical dotted names (or their Python spellings); unknown keys
    form the extension set.
    """
    match ModelClass(model_class):
        case ModelClass.DETERMINISTIC_COMPARTMENTAL:
            return resolve_dcm(DcmArguments.model_validate(arguments), context)
        case ModelClass.STOCHASTIC_INDIVIDUAL_CONTACT:
            return resolve_icm(IcmArguments.model_validate(arguments), context)
        case ModelClass.STOCHASTIC_NETWORK:
            return resolve_net(NetArguments.model_validate(arguments), context)


def _given(named: dict[str, Any], extensions: dict[str, Any]) -> dict[str, Any]:
    given = {name: value for name, value in named.items() if value is not None}
    given.update(extensions)
    return given


def param_dcm(
    trans_rate: RateInput | None = None,
    act_rate: RateInput | None = None,
    rec_rate: RateInput | None = None,
    b_rate: RateInput | None = None,
    ds_rate: RateInput | None = None,
    di_rate: RateInput | None = None,
    dr_rate: RateInput | None = None,
    trans_rate_g2: RateInput | None = None,
    act_rate_g2: RateInput | None = None,
    rec_rate_g2: RateInput | None = None,
    b_rate_g2: RateInput | None = None,
    ds_rate_g2: RateInput | None = None,
    di_rate_g2: RateInput | None = None,
    dr_rate_g2: RateInput | None = None,
    balance: str | Expression | None = None,
    context: Mapping[str, Any] | None = None,
    **extensions: Any,
) -> ParameterSet:
    """
    Epidemic parameters for deterministic compartmental models.

    One-group and two-group models are available. Specifying any group 2
    parameter (suffix ``.g2``) implies a two-group model, in which
    ``balance`` names the group whose act rate controls the other so that
    ``N1 * act.rate == N2 * act.rate.g2`` at every time step.

    Any parameter may be a sequence to run a sensitivity analysis over its
    values, and any parameter may be a deferred ``Expression`` evaluated
    against ``context``.

    Parameters
    ----------
    trans_rate : RateInput | None
        Probability of transmission given a transmissible act. In two-group
        models, the probability of transmission to group 1 members.
    act_rate : RateInput | None
        Average number of transmissible acts per (group 1) person per unit
        time.
    rec_rate : RateInput | None
        Recovery rate (reciprocal of disease duration) for SIR and SIS models.
    b_rate : RateInput | None
        Birth or entry rate per (group 1) person per unit time.
    ds_rate, di_rate, dr_rate : RateInput | None
        Death or exit rates for susceptibles, infecteds and recovereds.
    trans_rate_g2, act_rate_g2, rec_rate_g2 : RateInput | None
        Group 2 counterparts of the transmission, act and recovery rates.
    b_rate_g2 : RateInput | None
        Group 2 birth rate, or ``NA`` to let the group 1 rate govern group 2.
    ds_rate_g2, di_rate_g2, dr_rate_g2 : RateInput | None
        Group 2 death or exit rates.
    balance : str | Expression | None
        "g1" or "g2": the group whose act rate is authoritative.
    context : Mapping[str, Any] | None
        Names available to deferred expressions.
    **extensions : Any
        Additional parameters for new model specifications, passed
        through to the model unchecked.

    Returns
    -------
    ParameterSet
        Parameters tagged ``DeterministicCompartmental``.
    """
    named = dict(
        trans_rate=trans_rate,
        act_rate=act_rate,
        rec_rate=rec_rate,
        b_rate=b_rate,
        ds_rate=ds_rate,
        di_rate=di_rate,
        dr_rate=dr_rate,
        trans_rate_g2=trans_rate_g2,
        act_rate_g2=act_rate_g2,
        rec_rate_g2=rec_rate_g2,
        b_rate_g2=b_rate_g2,
        ds_rate_g2=ds_rate_g2,
        di_rate_g2=di_rate_g2,
        dr_rate_g2=dr_rate_g2,
        balance=balance,
    )
    arguments = DcmArguments(**_given(named, extensions))
    return resolve_dcm(arguments, context)


def param_icm(
    trans_rate: RateInput | None = None,
    act_rate: RateInput | None = None,
    rec_rate: RateInput | None = None,
    b_rate: RateInput | None = None,
    ds_rate: RateInput | None = None,
    di_rate: RateInput | None = None,
    dr_rate: RateInput | None = None,
    trans_rate_g2: RateInput | None = None,
    act_rate_g2: RateInput | None = None,
    rec_rate_g2: RateInput | None = None,
    b_rate_g2: RateInput | None = None,
    ds_rate_g2: RateInput | None = None,
    di_rate_g2: RateInput | None = None,
    dr_rate_g2: RateInput | None = None,
    balance: str | Expression | None = None,
    context: Mapping[str, Any] | None = None,
    **extensions: Any,
) -> ParameterSet:
    """
    Epidemic parameters for stochastic individual contact models.

    Takes the same parameters as ``param_dcm``. ``act_rate`` defaults to 1,
    ``vital`` is set when any group 1 birth or death rate is given, and
    ``groups`` is 2 when any ``.g2`` parameter is given. Two-group models
    require ``balance="g1"`` or ``balance="g2"``.

    Returns
    -------
    ParameterSet
        Parameters tagged ``StochasticIndividualContact``.

    Raises
    ------
    MissingRequiredParameter
        If ``trans_rate`` is missing.
    InvalidBalanceSelector
        If a two-group model lacks a valid ``balance``.
    """
    named = dict(
        trans_rate=trans_rate,
        act_rate=act_rate,
        rec_rate=rec_rate,
        b_rate=b_rate,
        ds_rate=ds_rate,
        di_rate=di_rate,
        dr_rate=dr_rate,
        trans_rate_g2=trans_rate_g2,
        act_rate_g2=act_rate_g2,
        rec_rate_g2=rec_rate_g2,
        b_rate_g2=b_rate_g2,
        ds_rate_g2=ds_rate_g2,
        di_rate_g2=di_rate_g2,
        dr_rate_g2=dr_rate_g2,
        balance=balance,
    )
    arguments = IcmArguments(**_given(named, extensions))
    return resolve_icm(arguments, context)


def param_net(
    trans_rate: RateInput | None = None,
    act_rate: RateInput | None = None,
    rec_rate: RateInput | None = None,
    b_rate: RateInput | None = None,
    ds_rate: RateInput | None = None,
    di_rate: RateInput | None = None,
    dr_rate: RateInput | None = None,
    trans_rate_m2: RateInput | None = None,
    rec_rate_m2: RateInput | None = None,
    b_rate_m2: RateInput | None = None,
    ds_rate_m2: RateInput | None = None,
    di_rate_m2: RateInput | None = None,
    dr_rate_m2: RateInput | None = None,
    context: Mapping[str, Any] | None = None,
    **extensions: Any,
) -> ParameterSet:
    """
    Epidemic parameters for stochastic network models.

    Unlike the contact models, partnerships here have a duration set by the
    dynamic network model, so ``act_rate`` is the number of transmissible
    acts per partnership per unit time. It defaults to 1. Bipartite
    parameters use the mode suffix ``.m2``; no ``balance`` is taken.

    Parameters
    ----------
    trans_rate : RateInput | None
        Probability of transmission given a transmissible act. In bipartite
        models, the probability of transmission to mode 1 nodes.
    act_rate : RateInput | None
        Average number of transmissible acts per partnership per unit time.
    rec_rate, b_rate, ds_rate, di_rate, dr_rate : RateInput | None
        Recovery, birth and death rates (for mode 1 in bipartite models).
    trans_rate_m2, rec_rate_m2, ds_rate_m2, di_rate_m2, dr_rate_m2 : RateInput | None
        Mode 2 counterparts.
    b_rate_m2 : RateInput | None
        Mode 2 birth rate, or ``NA`` to let the mode 1 rate govern mode 2.
    context : Mapping[str, Any] | None
        Names available to deferred expressions.
    **extensions : Any
        Additional parameters for new process modules.

    Returns
    -------
    ParameterSet
        Parameters tagged ``StochasticNetwork``.
    """
    named = dict(
        trans_rate=trans_rate,
        act_rate=act_rate,
        rec_rate=rec_rate,
        b_rate=b_rate,
        ds_rate=ds_rate,
        di_rate=di_rate,
        dr_rate=dr_rate,
        trans_rate_m2=trans_rate_m2,
        rec_rate_m2=rec_rate_m2,
        b_rate_m2=b_rate_m2,
        ds_rate_m2=ds_rate_m2,
        di_rate_m2=di_rate_m2,
        dr_rate_m2=dr_rate_m2,
    )
    arguments = NetArguments(**_given(named, extensions))
    return resolve_net(arguments, context)
