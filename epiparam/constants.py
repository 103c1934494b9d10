from enum import StrEnum, unique


@unique
class ModelClass(StrEnum):
    DETERMINISTIC_COMPARTMENTAL = "DeterministicCompartmental"
    STOCHASTIC_INDIVIDUAL_CONTACT = "StochasticIndividualContact"
    STOCHASTIC_NETWORK = "StochasticNetwork"


@unique
class GroupSuffixes(StrEnum):
    GROUP = ".g2"
    MODE = ".m2"
