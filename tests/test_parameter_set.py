import math
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from epiparam import (
    NA,
    InvalidBalanceSelector,
    MissingRequiredParameter,
    ModelClass,
    ParameterSet,
    SweepLengthMismatch,
    param_dcm,
    param_icm,
    param_net,
)


class TestParameterSet:
    def test_values_cannot_be_mutated(self):
        """
        Test that the resolved values are read-only.
        """
        params = param_icm(trans_rate=0.3)

        with pytest.raises(TypeError):
            params.values["trans.rate"] = 0.5  # type: ignore[index]

    def test_fields_cannot_be_reassigned(self):
        """
        Test that the model class tag cannot be changed after resolution.
        """
        params = param_icm(trans_rate=0.3)

        with pytest.raises(ValidationError):
            params.model_class = ModelClass.STOCHASTIC_NETWORK

    def test_mapping_interface(self):
        """
        Test read access through the mapping methods.
        """
        params = param_icm(trans_rate=0.3, rec_rate=0.1)

        assert list(params) == ["trans.rate", "rec.rate", "act.rate", "vital", "groups"]
        assert list(params.keys()) == list(params)
        assert dict(params.items()) == params.to_dict()
        assert len(params) == 5
        assert "rec.rate" in params
        assert "b.rate" not in params
        assert params.get("b.rate") is None
        assert params.get("b.rate", 0.0) == 0.0

    def test_to_dict_is_a_copy(self):
        """
        Test that changing the exported dict leaves the parameter set alone.
        """
        params = param_icm(trans_rate=0.3)
        exported = params.to_dict()
        exported["trans.rate"] = 0.9

        assert params["trans.rate"] == 0.3

    def test_group2_birth_rate_na_uses_group1(self):
        """
        Test that an NA group 2 birth rate defers to the group 1 rate.
        """
        params = param_dcm(trans_rate=0.3, b_rate=0.01, b_rate_g2=NA, balance="g1")

        assert params.group2_birth_rate() == 0.01

    def test_group2_birth_rate_explicit(self):
        """
        Test that a numeric group 2 birth rate is used as given.
        """
        params = param_dcm(trans_rate=0.3, b_rate=0.01, b_rate_g2=0.02)

        assert params.group2_birth_rate() == 0.02
        assert param_dcm(trans_rate=0.3, b_rate=0.01).group2_birth_rate() is None

    def test_mode2_birth_rate_na_uses_mode1(self):
        """
        Test the NA birth rate convention with the network mode suffix.
        """
        params = param_net(trans_rate=0.3, b_rate=0.01, b_rate_m2=NA)

        assert params.group2_birth_rate() == 0.01

    def test_parameter_sets_are_hashable(self):
        """
        Test that equal parameter sets hash alike and work as dict keys.
        """
        params = param_icm(trans_rate=[0.1, 0.2], rec_rate=0.1)
        same = param_icm(trans_rate=[0.1, 0.2], rec_rate=0.1)

        assert hash(params) == hash(same)
        assert {params: "run"}[params] == "run"
        assert hash(params) != hash(param_net(trans_rate=[0.1, 0.2], rec_rate=0.1))


class TestParameterSetValidation:
    def test_direct_construction_requires_trans_rate(self):
        """
        Test that a parameter set cannot be built without a transmission rate.
        """
        with pytest.raises(ValidationError, match="specify trans.rate") as exc_info:
            ParameterSet(
                model_class=ModelClass.STOCHASTIC_INDIVIDUAL_CONTACT,
                values={"trans.rate.g2": 0.1},
            )

        error = exc_info.value.errors()[0]["ctx"]["error"]
        assert isinstance(error, MissingRequiredParameter)

    @pytest.mark.parametrize("balance", [None, "g3"])
    def test_direct_construction_requires_balance(self, balance: str | None):
        """
        Test that a two-group contact model needs a valid balance when built directly.
        """
        values = {"trans.rate": 0.3, "trans.rate.g2": 0.1}
        if balance is not None:
            values["balance"] = balance

        with pytest.raises(ValidationError, match="balance") as exc_info:
            ParameterSet(
                model_class=ModelClass.STOCHASTIC_INDIVIDUAL_CONTACT, values=values
            )

        error = exc_info.value.errors()[0]["ctx"]["error"]
        assert isinstance(error, InvalidBalanceSelector)

    def test_direct_construction_derives_groups_and_vital(self):
        """
        Test that stored groups and vital entries do not override the derivation.
        """
        params = ParameterSet(
            model_class=ModelClass.STOCHASTIC_NETWORK,
            values={"trans.rate": 0.3, "groups": 2, "vital": True},
        )

        assert params.groups == 1
        assert params.vital is False

    @pytest.mark.parametrize(
        "model_class",
        [ModelClass.DETERMINISTIC_COMPARTMENTAL, ModelClass.STOCHASTIC_NETWORK],
    )
    def test_balance_only_required_for_contact_models(self, model_class: ModelClass):
        """
        Test that two-group deterministic and bipartite network sets need no balance.
        """
        suffix = ".m2" if model_class == ModelClass.STOCHASTIC_NETWORK else ".g2"
        params = ParameterSet(
            model_class=model_class,
            values={"trans.rate": 0.3, f"trans.rate{suffix}": 0.1},
        )

        assert params.groups == 2


class TestSweeps:
    def test_sweep_runs(self):
        """
        Test that a sweep yields one scalar parameter set per run.
        """
        params = param_dcm(
            trans_rate=[0.1, 0.2, 0.3], act_rate=2, rec_rate=[0.5], b_rate=NA
        )

        assert params.sweep_length() == 3
        runs = list(params.runs())
        assert [run["trans.rate"] for run in runs] == [0.1, 0.2, 0.3]
        assert all(run["rec.rate"] == 0.5 for run in runs)
        assert all(run["act.rate"] == 2 for run in runs)
        assert all(math.isnan(run["b.rate"]) for run in runs)
        assert all(run.model_class == params.model_class for run in runs)
        assert all(run.sweep_length() == 1 for run in runs)

    def test_no_sweep(self):
        """
        Test that a scalar parameter set is a single run of itself.
        """
        params = param_icm(trans_rate=0.3)

        assert params.sweep_length() == 1
        assert params.run(0).to_dict() == params.to_dict()

    def test_mismatched_sweeps_fail_on_check(self):
        """
        Test that unequal sweep lengths are accepted at construction but not run.
        """
        params = param_dcm(trans_rate=[0.1, 0.2], rec_rate=[0.1, 0.2, 0.3])

        with pytest.raises(SweepLengthMismatch, match="trans.rate=2"):
            params.sweep_length()
        with pytest.raises(SweepLengthMismatch):
            list(params.runs())

    def test_empty_sweep_fails(self):
        """
        Test that an empty sequence is not a valid sweep.
        """
        params = param_dcm(trans_rate=0.3, rec_rate=[])

        with pytest.raises(SweepLengthMismatch):
            params.sweep_length()

    def test_run_outside_sweep(self):
        """
        Test that a run index beyond the sweep is rejected.
        """
        params = param_dcm(trans_rate=[0.1, 0.2])

        with pytest.raises(IndexError):
            params.run(2)

    def test_non_numeric_tuples_are_not_swept(self):
        """
        Test that tuples of names in the extension set are passed through.
        """
        params = param_icm(trans_rate=0.3, modules=["infection", "recovery"])

        assert params.sweep_length() == 1
        assert params.run(0)["modules"] == ("infection", "recovery")


class TestPrintParameters:
    def test_print_parameters_to_console(self, capsys: pytest.CaptureFixture[str]):
        """
        Test the plain-text summary printed to the console.
        """
        param_icm(trans_rate=0.3).print_parameters()

        expected_output = (
            "========================================\n"
            "EPIDEMIC PARAMETERS\n"
            "========================================\n"
            "Model Class: StochasticIndividualContact\n"
            "Groups: 1\n"
            "Vital Dynamics: False\n"
            "Number of Parameters: 4\n"
            "\n"
            "trans.rate = 0.3\n"
            "act.rate = 1\n"
            "vital = False\n"
            "groups = 1\n"
        )
        assert capsys.readouterr().out == expected_output

    def test_print_parameters_to_file(self):
        """
        Test that sweeps and NA values are written readably to a file.
        """
        params = ParameterSet(
            model_class=ModelClass.DETERMINISTIC_COMPARTMENTAL,
            values={"trans.rate": (0.1, 0.2), "b.rate.g2": NA},
        )

        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "params.txt"

            params.print_parameters(output_file=str(output_path))

            content = output_path.read_text()

        assert content == (
            "========================================\n"
            "EPIDEMIC PARAMETERS\n"
            "========================================\n"
            "Model Class: DeterministicCompartmental\n"
            "Groups: 2\n"
            "Vital Dynamics: False\n"
            "Number of Parameters: 2\n"
            "\n"
            "trans.rate = 0.1, 0.2\n"
            "b.rate.g2 = NA"
        )
