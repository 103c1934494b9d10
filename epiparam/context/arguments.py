from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

from epiparam.context.expression import Expression

ScalarInput = float | Expression
RateInput = ScalarInput | tuple[ScalarInput, ...]


class ModelArguments(BaseModel):
    """
    Raw epidemic parameters exactly as the caller supplied them.

    Values are kept unevaluated: deferred expressions stay ``Expression``
    objects and nested extension mappings stay nested. Keyword names are the
    Python spellings (``trans_rate``); the canonical dotted names
    (``trans.rate``) are accepted as aliases. Any other keyword lands in the
    open extension set and is kept as given.

    A field that was not supplied, or was supplied as ``None``, is omitted.
    Supplying ``NA`` (``math.nan``) is not an omission.

    Attributes
    ----------
    trans_rate : RateInput | None
        Probability of transmission given a transmissible act.
    act_rate : RateInput | None
        Average number of transmissible acts per person per unit time.
    rec_rate : RateInput | None
        Recovery rate, the reciprocal of the disease duration.
    b_rate : RateInput | None
        Birth or entry rate.
    ds_rate : RateInput | None
        Death or exit rate for susceptibles.
    di_rate : RateInput | None
        Death or exit rate for infecteds.
    dr_rate : RateInput | None
        Death or exit rate for recovereds.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="allow",
        arbitrary_types_allowed=True,
    )

    trans_rate: RateInput | None = Field(default=None, alias="trans.rate")
    act_rate: RateInput | None = Field(default=None, alias="act.rate")
    rec_rate: RateInput | None = Field(default=None, alias="rec.rate")
    b_rate: RateInput | None = Field(default=None, alias="b.rate")
    ds_rate: RateInput | None = Field(default=None, alias="ds.rate")
    di_rate: RateInput | None = Field(default=None, alias="di.rate")
    dr_rate: RateInput | None = Field(default=None, alias="dr.rate")

    @classmethod
    def parameter_names(cls) -> tuple[str, ...]:
        """Canonical names of the well-known parameters, in declaration order."""
        return tuple(
            field.alias or name for name, field in cls.model_fields.items()
        )

    def supplied(self) -> dict[str, Any]:
        """
        Return the supplied arguments under their canonical names.

        Well-known parameters come first, in declaration order, followed by
        the extension set in the order it was given.
        """
        out: dict[str, Any] = {}
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if name in self.model_fields_set and value is not None:
                out[field.alias or name] = value
        for name, value in (self.model_extra or {}).items():
            if value is not None:
                out[name] = value
        return out

    def is_supplied(self, name: str) -> bool:
        """Whether a parameter, by canonical name, was explicitly supplied."""
        return name in self.supplied()

    @property
    def extensions(self) -> dict[str, Any]:
        """Arguments outside the well-known set."""
        return dict(self.model_extra or {})


class DcmArguments(ModelArguments):
    """
    Raw parameters of a deterministic compartmental model.

    Adds the group 2 counterparts of every rate (suffix ``.g2``) and the
    ``balance`` selector naming the group whose act rate is authoritative.
    ``b_rate_g2`` set to ``NA`` means the group 1 birth rate governs group 2.
    """

    trans_rate_g2: RateInput | None = Field(default=None, alias="trans.rate.g2")
    act_rate_g2: RateInput | None = Field(default=None, alias="act.rate.g2")
    rec_rate_g2: RateInput | None = Field(default=None, alias="rec.rate.g2")
    b_rate_g2: RateInput | None = Field(default=None, alias="b.rate.g2")
    ds_rate_g2: RateInput | None = Field(default=None, alias="ds.rate.g2")
    di_rate_g2: RateInput | None = Field(default=None, alias="di.rate.g2")
    dr_rate_g2: RateInput | None = Field(default=None, alias="dr.rate.g2")
    balance: str | Expression | None = Field(default=None)


class IcmArguments(DcmArguments):
    """Raw parameters of a stochastic individual contact model."""

    pass


class NetArguments(ModelArguments):
    """
    Raw parameters of a stochastic network model.

    Bipartite counterparts use the mode suffix ``.m2``. There is no mode 2 act
    rate and no ``balance`` selector: ``act_rate`` counts acts per partnership,
    and partnership volume is balanced by the network model itself.
    """

    trans_rate_m2: RateInput | None = Field(default=None, alias="trans.rate.m2")
    rec_rate_m2: RateInput | None = Field(default=None, alias="rec.rate.m2")
    b_rate_m2: RateInput | None = Field(default=None, alias="b.rate.m2")
    ds_rate_m2: RateInput | None = Field(default=None, alias="ds.rate.m2")
    di_rate_m2: RateInput | None = Field(default=None, alias="di.rate.m2")
    dr_rate_m2: RateInput | None = Field(default=None, alias="dr.rate.m2")


DCM_PARAMETERS: Final = DcmArguments.parameter_names()
ICM_PARAMETERS: Final = IcmArguments.parameter_names()
NET_PARAMETERS: Final = NetArguments.parameter_names()
