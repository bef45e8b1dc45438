"""Tests for count table sanitization."""

import numpy as np
import pandas as pd
import pytest

from aldexClr.core.exceptions import InvalidInputError
from aldexClr.data.validator import CountTableValidator, SanitizedInput


@pytest.fixture
def validator():
    return CountTableValidator()


@pytest.fixture
def sparse_counts():
    """Rows f2 and f4 sum to zero."""
    return pd.DataFrame(
        {
            "s1": [4, 0, 1, 0, 9],
            "s2": [0, 0, 2, 0, 3],
            "s3": [7, 0, 0, 0, 1],
        },
        index=["f1", "f2", "f3", "f4", "f5"]
    )


class TestZeroRowRemoval:
    """Tests for dropping features that were never observed."""

    def test_removes_exactly_zero_sum_rows(self, validator, sparse_counts):
        sanitized = validator.sanitize(sparse_counts, ["A", "A", "B"])

        assert isinstance(sanitized, SanitizedInput)
        assert list(sanitized.reads.index) == ["f1", "f3", "f5"]
        pd.testing.assert_frame_equal(
            sanitized.reads,
            sparse_counts.loc[["f1", "f3", "f5"]].astype(np.int64)
        )

    def test_keeps_order_of_remaining_rows(self, validator, counts, conditions):
        counts.iloc[[3, 11, 20]] = 0
        sanitized = validator.sanitize(counts, conditions)

        expected = [name for name in counts.index if counts.loc[name].sum() > 0]
        assert list(sanitized.reads.index) == expected

    def test_sanitize_is_idempotent(self, validator, sparse_counts):
        once = validator.sanitize(sparse_counts, ["A", "A", "B"])
        twice = validator.sanitize(once.reads, once.conditions)

        pd.testing.assert_frame_equal(once.reads, twice.reads)
        pd.testing.assert_series_equal(once.conditions, twice.conditions)

    def test_all_zero_table_is_rejected(self, validator):
        reads = pd.DataFrame({"s1": [0, 0], "s2": [0, 0]}, index=["f1", "f2"])
        with pytest.raises(InvalidInputError, match="no features remain"):
            validator.sanitize(reads, ["A", "B"])


class TestValueChecks:
    """Tests for rejecting counts that are not finite non-negative integers."""

    def test_negative_count(self, validator, sparse_counts):
        sparse_counts.loc["f1", "s2"] = -1
        with pytest.raises(InvalidInputError, match="negative"):
            validator.sanitize(sparse_counts, ["A", "A", "B"])

    def test_non_integer_count(self, validator, sparse_counts):
        reads = sparse_counts.astype(float)
        reads.loc["f3", "s1"] = 1.5
        with pytest.raises(InvalidInputError, match="integers"):
            validator.sanitize(reads, ["A", "A", "B"])

    @pytest.mark.parametrize("bad_value", [np.nan, np.inf, -np.inf])
    def test_non_finite_count(self, validator, sparse_counts, bad_value):
        reads = sparse_counts.astype(float)
        reads.loc["f5", "s3"] = bad_value
        with pytest.raises(InvalidInputError, match="not finite"):
            validator.sanitize(reads, ["A", "A", "B"])

    def test_non_numeric_column(self, validator, sparse_counts):
        reads = sparse_counts.astype(object)
        reads["s2"] = ["a", "b", "c", "d", "e"]
        with pytest.raises(InvalidInputError, match="non-numeric"):
            validator.sanitize(reads, ["A", "A", "B"])

    def test_boolean_table_is_not_counts(self, validator):
        reads = pd.DataFrame({"s1": [True, False], "s2": [True, True]}, index=["f1", "f2"])
        with pytest.raises(InvalidInputError, match="non-numeric"):
            validator.sanitize(reads, ["A", "B"])

    def test_boolean_column_among_counts(self, validator, sparse_counts):
        sparse_counts["s2"] = sparse_counts["s2"] > 0
        with pytest.raises(InvalidInputError, match=r"non-numeric or boolean columns: \['s2'\]"):
            validator.sanitize(sparse_counts, ["A", "A", "B"])

    def test_integral_floats_are_accepted(self, validator, sparse_counts):
        sanitized = validator.sanitize(sparse_counts.astype(float), ["A", "A", "B"])
        assert sanitized.reads.dtypes.eq(np.int64).all()

    def test_not_a_dataframe(self, validator):
        with pytest.raises(InvalidInputError, match="DataFrame"):
            validator.sanitize(np.ones((2, 2)), ["A", "B"])


class TestNameChecks:
    """Tests for feature and sample names."""

    def test_duplicate_feature_names(self, validator, sparse_counts):
        sparse_counts.index = ["f1", "f1", "f3", "f4", "f5"]
        with pytest.raises(InvalidInputError, match="row names are not unique"):
            validator.sanitize(sparse_counts, ["A", "A", "B"])

    def test_duplicate_sample_names(self, validator, sparse_counts):
        sparse_counts.columns = ["s1", "s1", "s3"]
        with pytest.raises(InvalidInputError, match="col names are not unique"):
            validator.sanitize(sparse_counts, ["A", "A", "B"])

    def test_empty_feature_name(self, validator, sparse_counts):
        sparse_counts.index = ["f1", "", "f3", "f4", "f5"]
        with pytest.raises(InvalidInputError, match="row names cannot be missing"):
            validator.sanitize(sparse_counts, ["A", "A", "B"])

    def test_table_without_rows(self, validator):
        with pytest.raises(InvalidInputError, match="rownames"):
            validator.sanitize(pd.DataFrame(columns=["s1", "s2"], dtype=int), ["A", "B"])

    def test_table_without_columns(self, validator):
        with pytest.raises(InvalidInputError, match="colnames"):
            validator.sanitize(pd.DataFrame(index=["f1", "f2"]), [])


class TestConditions:
    """Tests for aligning condition labels with sample columns."""

    def test_wrong_number_of_labels(self, validator, sparse_counts):
        with pytest.raises(InvalidInputError, match="expected 3 condition labels"):
            validator.sanitize(sparse_counts, ["A", "B"])

    def test_string_is_not_a_label_sequence(self, validator, sparse_counts):
        with pytest.raises(InvalidInputError):
            validator.sanitize(sparse_counts, "AAB")

    def test_missing_label(self, validator, sparse_counts):
        with pytest.raises(InvalidInputError, match="missing"):
            validator.sanitize(sparse_counts, ["A", None, "B"])

    def test_series_is_aligned_by_sample_name(self, validator, sparse_counts):
        labels = pd.Series(["B", "A", "A"], index=["s3", "s2", "s1"])
        sanitized = validator.sanitize(sparse_counts, labels)

        assert list(sanitized.conditions.index) == ["s1", "s2", "s3"]
        assert list(sanitized.conditions) == ["A", "A", "B"]


class TestMonteCarloSamples:
    """Tests for the mc_samples option and its reliability warning."""

    def test_few_samples_warn(self, validator, sparse_counts):
        sanitized = validator.sanitize(sparse_counts, ["A", "A", "B"], mc_samples=50)
        assert len(sanitized.warnings) == 1
        assert "unreliable" in sanitized.warnings[0]

    def test_default_does_not_warn(self, validator, sparse_counts):
        sanitized = validator.sanitize(sparse_counts, ["A", "A", "B"], mc_samples=128)
        assert sanitized.warnings == ()

    @pytest.mark.parametrize("bad_value", [0, -5, 2.5, True, "128", None])
    def test_invalid_mc_samples(self, validator, sparse_counts, bad_value):
        with pytest.raises(InvalidInputError, match="mc_samples"):
            validator.sanitize(sparse_counts, ["A", "A", "B"], mc_samples=bad_value)

    def test_integral_float_is_coerced(self, validator, sparse_counts):
        sanitized = validator.sanitize(sparse_counts, ["A", "A", "B"], mc_samples=256.0)
        assert sanitized.mc_samples == 256
        assert isinstance(sanitized.mc_samples, int)


class TestPrior:
    """Tests for the prior added before sampling."""

    def test_prior_is_added_to_every_cell(self, validator, sparse_counts):
        sanitized = validator.sanitize(sparse_counts, ["A", "A", "B"])
        adjusted = validator.add_prior(sanitized.reads)

        np.testing.assert_array_equal(adjusted.to_numpy(), sanitized.reads.to_numpy() + 0.5)
        assert (adjusted.to_numpy() > 0).all()
        assert adjusted.index.equals(sanitized.reads.index)

    def test_sanitize_does_not_apply_prior(self, validator, sparse_counts):
        sanitized = validator.sanitize(sparse_counts, ["A", "A", "B"])
        assert sanitized.reads.loc["f1", "s2"] == 0
