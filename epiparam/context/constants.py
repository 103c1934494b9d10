import math
from typing import Final, Literal, get_args

# Balancing Selector

BalanceSelector = Literal["g1", "g2"]
"""
Group whose act rate is authoritative in two-group models.

Values
------
"g1"
    The group 1 act rate is fixed; the group 2 rate is balanced to it
"g2"
    The group 2 act rate is fixed; the group 1 rate is balanced to it
"""

_balance_args = get_args(BalanceSelector)
# Group 1 act rate controls
BALANCE_G1: Final = _balance_args[0]
# Group 2 act rate controls
BALANCE_G2: Final = _balance_args[1]

# Missing value marker. A parameter set to NA is supplied, not omitted.
NA: Final = math.nan

# Canonical parameter names

TRANS_RATE: Final = "trans.rate"
ACT_RATE: Final = "act.rate"
REC_RATE: Final = "rec.rate"
B_RATE: Final = "b.rate"
DS_RATE: Final = "ds.rate"
DI_RATE: Final = "di.rate"
DR_RATE: Final = "dr.rate"
BALANCE: Final = "balance"
GROUPS: Final = "groups"
VITAL: Final = "vital"

# Group 1 rates whose presence switches on vital dynamics
VITAL_RATES: Final = (B_RATE, DS_RATE, DI_RATE, DR_RATE)

# Act rate applied when the caller supplies none
DEFAULT_ACT_RATE: Final = 1
