import math
from collections.abc import ItemsView, Iterable, Iterator, KeysView, Mapping
from numbers import Real
from types import MappingProxyType
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from epiparam.constants import GroupSuffixes, ModelClass
from epiparam.context.arguments import (
    DCM_PARAMETERS,
    ICM_PARAMETERS,
    NET_PARAMETERS,
)
from epiparam.context.constants import (
    B_RATE,
    BALANCE,
    BALANCE_G1,
    BALANCE_G2,
    GROUPS,
    TRANS_RATE,
    VITAL,
    VITAL_RATES,
)
from epiparam.exceptions import (
    InvalidBalanceSelector,
    MissingRequiredParameter,
    SweepLengthMismatch,
)

_KNOWN_PARAMETERS: dict[ModelClass, frozenset[str]] = {
    ModelClass.DETERMINISTIC_COMPARTMENTAL: frozenset(DCM_PARAMETERS),
    ModelClass.STOCHASTIC_INDIVIDUAL_CONTACT: frozenset(
        ICM_PARAMETERS + (GROUPS, VITAL)
    ),
    ModelClass.STOCHASTIC_NETWORK: frozenset(NET_PARAMETERS + (VITAL,)),
}


def _is_sweep(value: Any) -> bool:
    return isinstance(value, tuple) and all(
        isinstance(item, Real) and not isinstance(item, bool) for item in value
    )


def _is_na(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def model_group_suffix(model_class: ModelClass) -> str:
    """Suffix marking group 2 (mode 2 for network models) parameters."""
    if model_class == ModelClass.STOCHASTIC_NETWORK:
        return GroupSuffixes.MODE
    return GroupSuffixes.GROUP


def count_groups(model_class: ModelClass, names: Iterable[str]) -> int:
    suffix = model_group_suffix(model_class)
    return 2 if any(suffix in name for name in names) else 1


def has_vital_dynamics(values: Mapping[str, Any]) -> bool:
    return any(values.get(name) is not None for name in VITAL_RATES)


def check_parameters(model_class: ModelClass, values: Mapping[str, Any]) -> None:
    """
    Check the structural requirements of a resolved parameter mapping.

    Raises
    ------
    MissingRequiredParameter
        If ``trans.rate`` is absent.
    InvalidBalanceSelector
        If a two-group individual contact model has no ``balance`` of "g1"
        or "g2".
    """
    if values.get(TRANS_RATE) is None:
        raise MissingRequiredParameter(TRANS_RATE)

    if model_class != ModelClass.STOCHASTIC_INDIVIDUAL_CONTACT:
        return
    balance = values.get(BALANCE)
    if count_groups(model_class, values) == 2 and not (
        isinstance(balance, str) and balance in (BALANCE_G1, BALANCE_G2)
    ):
        raise InvalidBalanceSelector(balance)


class ParameterSet(BaseModel):
    """
    Canonical, validated epidemic parameters for one model run.

    A parameter set is read-only and hashable once built. It behaves as a
    mapping from canonical parameter name (``trans.rate``, ``act.rate.g2``,
    ...) to a resolved value: a number, ``NA``, a string selector, or a tuple
    of numbers for sensitivity sweeps. The ``model_class`` discriminant tells
    consumers which simulation class the set was resolved for.

    Construction checks that ``trans.rate`` is present and that two-group
    individual contact models name a valid ``balance``. The ``groups`` and
    ``vital`` properties are always derived from the parameter names and
    never read from stored entries.

    Attributes
    ----------
    model_class : ModelClass
        The model class the parameters were resolved for.
    values : Mapping[str, Any]
        Resolved parameters, including derived entries such as ``vital``.
    """

    model_config = ConfigDict(
        frozen=True, arbitrary_types_allowed=True, protected_namespaces=()
    )

    model_class: ModelClass = Field(
        default=..., description="Model class the parameters were resolved for."
    )
    values: Mapping[str, Any] = Field(
        default_factory=dict,
        validate_default=True,
        description="Resolved parameters by canonical name.",
    )

    @field_validator("values", mode="after")
    @classmethod
    def freeze_values(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def validate_structure(self) -> Self:
        """
        Validates the required parameters of the model class.
        """
        check_parameters(self.model_class, self.values)
        return self

    def __hash__(self) -> int:
        return hash((self.model_class, frozenset(self.values.items())))

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def keys(self) -> KeysView[str]:
        return self.values.keys()

    def items(self) -> ItemsView[str, Any]:
        return self.values.items()

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable copy of the parameters."""
        return dict(self.values)

    @property
    def group_suffix(self) -> str:
        return model_group_suffix(self.model_class)

    @property
    def groups(self) -> int:
        """
        Number of groups (or modes).

        Two when any group 2 (mode 2) suffixed name is present, otherwise one.
        """
        return count_groups(self.model_class, self.values)

    @property
    def vital(self) -> bool:
        """Whether any group 1 birth or death rate is present."""
        return has_vital_dynamics(self.values)

    @property
    def balance(self) -> str | None:
        return self.values.get(BALANCE)

    @property
    def extensions(self) -> dict[str, Any]:
        """Parameters outside the well-known set of the model class."""
        known = _KNOWN_PARAMETERS[self.model_class]
        return {
            name: value for name, value in self.values.items() if name not in known
        }

    def group2_birth_rate(self) -> Any:
        """
        Birth rate governing group 2 (mode 2).

        A group 2 birth rate of ``NA`` means the group 1 rate governs both
        groups. Returns ``None`` when no group 2 birth rate was given.
        """
        rate = self.values.get(f"{B_RATE}{self.group_suffix}")
        if _is_na(rate):
            return self.values.get(B_RATE)
        return rate

    def sweep_length(self) -> int:
        """
        Number of runs in the sensitivity sweep.

        Every numeric tuple must have length 1 or the common sweep length.

        Raises
        ------
        SweepLengthMismatch
            If two sweep parameters disagree, or a sweep parameter is empty.
        """
        varying = {
            name: len(value)
            for name, value in self.values.items()
            if _is_sweep(value) and len(value) != 1
        }
        lengths = set(varying.values())
        if len(lengths) > 1 or 0 in lengths:
            raise SweepLengthMismatch(varying)
        return lengths.pop() if lengths else 1

    def run(self, index: int) -> Self:
        """
        Return the scalar parameter set of one sweep run.

        Length 1 sweeps are broadcast to every run. Non-numeric tuples are
        left as they are.
        """
        n_runs = self.sweep_length()
        if not 0 <= index < n_runs:
            raise IndexError(f"Run {index} outside sweep of length {n_runs}")

        values: dict[str, Any] = {}
        for name, value in self.values.items():
            if _is_sweep(value):
                values[name] = value[0] if len(value) == 1 else value[index]
            else:
                values[name] = value
        return type(self)(model_class=self.model_class, values=values)

    def runs(self) -> Iterator[Self]:
        """Iterate the scalar parameter sets of every sweep run."""
        for index in range(self.sweep_length()):
            yield self.run(index)

    def print_parameters(self, output_file: str | None = None) -> None:
        """
        Print a plain-text summary of the parameters.

        Parameters
        ----------
        output_file : str | None
            If provided, writes the summary to this file path instead of
            printing to console.
        """
        lines: list[str] = []
        lines.append("=" * 40)
        lines.append("EPIDEMIC PARAMETERS")
        lines.append("=" * 40)
        lines.append(f"Model Class: {self.model_class}")
        lines.append(f"Groups: {self.groups}")
        lines.append(f"Vital Dynamics: {self.vital}")
        lines.append(f"Number of Parameters: {len(self.values)}")
        lines.append("")
        for name, value in self.values.items():
            lines.append(f"{name} = {_format_value(value)}")

        output = "\n".join(lines)
        if output_file:
            with open(output_file, "w") as f:
                _ = f.write(output)
        else:
            print(output)


def _format_value(value: Any) -> str:
    if _is_na(value):
        return "NA"
    if isinstance(value, tuple):
        return ", ".join(_format_value(item) for item in value)
    return str(value)
