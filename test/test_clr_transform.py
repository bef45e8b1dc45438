"""Tests for the CLR transformation of Monte Carlo instances."""

from collections import OrderedDict

import numpy as np
import pandas as pd
import pytest

from aldexClr.core.base import TransformBranch
from aldexClr.core.exceptions import TransformError
from aldexClr.preprocessing.clr_transform import CLRTransformer, clr_instances
from aldexClr.preprocessing.monte_carlo import DirichletSampler


@pytest.fixture
def instances():
    """Monte Carlo frequencies for 4 samples x 6 features, conditions A, B, A, B."""
    rng = np.random.RandomState(0)
    reads = pd.DataFrame(
        rng.randint(0, 50, size=(6, 4)) + 0.5,
        index=[f"f{i}" for i in range(6)],
        columns=["s1", "s2", "s3", "s4"]
    )
    return DirichletSampler(mc_samples=50, random_state=0).sample(reads)


@pytest.fixture
def interleaved_conditions():
    return pd.Series(["A", "B", "A", "B"], index=["s1", "s2", "s3", "s4"])


class TestDefaultBranch:

    def test_column_means_are_zero(self, instances, interleaved_conditions):
        transformer = CLRTransformer(np.arange(6), interleaved_conditions, n_features=6)
        clr = transformer.transform(instances)

        assert transformer.branch is TransformBranch.DEFAULT
        for values in clr.values():
            np.testing.assert_allclose(values.to_numpy().mean(axis=0), 0.0, atol=1e-9)

    def test_matches_log2_minus_mean(self, instances, interleaved_conditions):
        clr = CLRTransformer(np.arange(6), interleaved_conditions, n_features=6).transform(instances)

        log_frequencies = np.log2(instances["s2"].to_numpy())
        expected = log_frequencies - log_frequencies.mean(axis=0)
        np.testing.assert_allclose(clr["s2"].to_numpy(), expected)

    def test_labels_and_order_are_kept(self, instances, interleaved_conditions):
        clr = CLRTransformer(np.arange(6), interleaved_conditions, n_features=6).transform(instances)

        assert list(clr.keys()) == ["s1", "s2", "s3", "s4"]
        for sample, values in clr.items():
            assert values.index.equals(instances[sample].index)
            assert values.columns.equals(instances[sample].columns)


class TestRestrictedBranch:

    def test_single_subset_means_are_zero(self, instances, interleaved_conditions):
        subset = np.array([1, 2, 4])
        transformer = CLRTransformer(subset, interleaved_conditions, n_features=6)
        clr = transformer.transform(instances)

        assert transformer.branch is TransformBranch.RESTRICTED
        for values in clr.values():
            matrix = values.to_numpy()
            np.testing.assert_allclose(matrix[subset].mean(axis=0), 0.0, atol=1e-9)
            assert np.abs(matrix.mean(axis=0)).max() > 1e-6

    def test_per_condition_subsets_follow_sample_labels(self, instances, interleaved_conditions):
        """Interleaved labels must not be matched to references by position."""
        subsets = OrderedDict([("A", np.array([0, 1])), ("B", np.array([3, 4, 5]))])
        clr = CLRTransformer(subsets, interleaved_conditions, n_features=6).transform(instances)

        for sample, label in interleaved_conditions.items():
            matrix = clr[sample].to_numpy()
            np.testing.assert_allclose(matrix[subsets[label]].mean(axis=0), 0.0, atol=1e-9)

            log_frequencies = np.log2(instances[sample].to_numpy())
            expected = log_frequencies - log_frequencies[subsets[label]].mean(axis=0)
            np.testing.assert_allclose(matrix, expected)

    def test_denominator_for_unknown_condition(self, instances, interleaved_conditions):
        subsets = OrderedDict([("A", np.array([0, 1])), ("C", np.array([2]))])
        transformer = CLRTransformer(subsets, interleaved_conditions, n_features=6)

        with pytest.raises(TransformError, match="condition 'B'"):
            transformer.transform(instances)

    def test_denominator_for_unlabelled_sample(self, interleaved_conditions):
        subsets = OrderedDict([("A", np.array([0])), ("B", np.array([1]))])
        transformer = CLRTransformer(subsets, interleaved_conditions, n_features=6)

        with pytest.raises(TransformError, match="no condition label"):
            transformer.denominator_for("s9")


class TestNonFiniteValues:

    def test_zero_frequency_raises(self, interleaved_conditions):
        frequencies = pd.DataFrame([[0.0, 0.5], [1.0, 0.5]], index=["a", "b"], columns=[0, 1])
        transformer = CLRTransformer(np.arange(2), interleaved_conditions.iloc[:1], n_features=2)

        with np.errstate(divide="ignore"):
            with pytest.raises(TransformError, match="non-finite"):
                transformer.transform(OrderedDict([("s1", frequencies)]))

    def test_clr_instances_without_denominator_uses_all_features(self):
        frequencies = pd.DataFrame([[0.25, 0.5], [0.75, 0.5]], index=["a", "b"], columns=[0, 1])
        values = clr_instances((frequencies, None))

        expected = np.log2(frequencies.to_numpy())
        expected = expected - expected.mean(axis=0)
        np.testing.assert_allclose(values.to_numpy(), expected)
