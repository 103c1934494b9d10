from .balance import ActRates, act_rates, balance_act_rate
from .loader import load_parameters
from .params import param_dcm, param_icm, param_net, resolve

__all__ = [
    "ActRates",
    "act_rates",
    "balance_act_rate",
    "load_parameters",
    "param_dcm",
    "param_icm",
    "param_net",
    "resolve",
]
