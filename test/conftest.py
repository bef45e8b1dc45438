"""
Pytest configuration and shared fixtures for the aldexClr tests.
"""

import pandas as pd
import pytest

from generate_test_data import make_conditions, make_count_table, write_test_files


@pytest.fixture
def small_counts():
    """3 features x 2 samples, no all-zero row."""
    return pd.DataFrame(
        [[0, 5], [10, 8], [3, 0]],
        index=["gene_a", "gene_b", "gene_c"],
        columns=["T1", "N1"]
    )


@pytest.fixture
def counts():
    """40 features x 6 samples of sparse read counts."""
    return make_count_table(n_features=40, n_samples=6, seed=7)


@pytest.fixture
def conditions():
    """Alternating labels for the 6-sample table: Health, Disease, Health, ..."""
    return make_conditions(6)


@pytest.fixture
def input_files(tmp_path):
    """Count table and conditions written as CSV files."""
    return write_test_files(tmp_path / "input")
