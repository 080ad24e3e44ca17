"""
Tests for the correlation / p-value diagram workflow.
"""

import numpy as np
import pandas as pd
import pytest

from dxcsystems.diagram import (
    CorrelationDiagram,
    PValueDiagram,
    compute_diagram,
    compute_pvalue_diagram,
    run_dxc_workflow,
    check_window_settings,
    check_sequences,
    correct_base_width,
)
from dxcsystems.testdata import (
    make_independent_pair,
    make_correlated_pair,
    make_test_dataframe,
)


class TestGeometry:
    """Validation before any computation."""

    def test_odd_base_width_corrected(self, capsys):
        L = check_window_settings(100, 3, 11)

        assert L == 10
        assert "reduced to 10" in capsys.readouterr().err

    def test_even_base_width_unchanged(self, capsys):
        assert check_window_settings(100, 3, 10) == 10
        assert capsys.readouterr().err == ""

    def test_quiet_correction(self, capsys):
        assert correct_base_width(7, verbose=False) == 6
        assert capsys.readouterr().err == ""

    @pytest.mark.parametrize("W,L", [(0, 10), (-1, 10), (3, 0), (3, -4)])
    def test_non_positive(self, W, L):
        with pytest.raises(ValueError):
            check_window_settings(100, W, L)

    def test_base_width_one(self):
        with pytest.raises(ValueError):
            check_window_settings(100, 3, 1, verbose=False)

    def test_diagram_too_small(self):
        with pytest.raises(ValueError, match="diagram size"):
            check_window_settings(100, 10, 10)

    def test_negative_tau(self):
        with pytest.raises(ValueError):
            check_window_settings(100, 3, 10, tau=-1)

    def test_select_columns(self):
        data = np.arange(12, dtype=float).reshape(4, 3)
        a, b = check_sequences(data, 0, 2)

        np.testing.assert_array_equal(a, [0, 3, 6, 9])
        np.testing.assert_array_equal(b, [2, 5, 8, 11])

    def test_index_out_of_range(self):
        data = np.zeros((10, 2))
        with pytest.raises(ValueError, match="out of range"):
            check_sequences(data, 0, 2)
        with pytest.raises(ValueError, match="out of range"):
            check_sequences(data, -1, 1)

    def test_non_finite(self):
        data = np.zeros((10, 2))
        data[3, 1] = np.nan
        with pytest.raises(ValueError):
            check_sequences(data, 0, 1)


class TestScenarios:
    """End-to-end behavior on synthetic data."""

    def test_identical_sequences(self):
        """Identical sequences: correlation 1 everywhere, never reached by surrogates."""
        s, _ = make_independent_pair(100, seed=21)
        data = np.column_stack([s, s])

        real = run_dxc_workflow(data, 0, 1, n_widths=3, base_width=10,
                                output="correlation", verbose=False)
        np.testing.assert_allclose(real.values, 1.0, atol=1e-9)

        p = run_dxc_workflow(data, 0, 1, n_widths=3, base_width=10,
                             n_surrogates=20, seed=4, verbose=False)
        assert p.shape == real.shape
        assert np.all(p.values <= 0.05)

    def test_independent_sequences_no_skew(self):
        """Uncoupled sequences: p-values spread over [0, 1], no pile-up near 0."""
        a, b = make_independent_pair(500, seed=22)

        p = compute_pvalue_diagram(a, b, base_width=20, n_widths=2, tau=0,
                                   n_surrogates=100, seed=1234)

        assert p.shape == (2, 23)
        assert np.all((p.values >= 0) & (p.values <= 1))
        assert p.values.mean() > 0.2
        assert np.mean(p.values < 0.05) < 0.3

    def test_correlated_sequences_significant(self):
        x, y = make_correlated_pair(300, rho=0.8, seed=23)

        p = compute_pvalue_diagram(x, y, base_width=20, n_widths=2,
                                   n_surrogates=50, seed=99)

        assert p.values.mean() < 0.1

    def test_p_value_bounds_single_trial(self):
        a, b = make_independent_pair(120, seed=24)
        p = compute_pvalue_diagram(a, b, 10, 2, n_surrogates=1, seed=3)

        assert p.n_trials == 1
        assert set(np.unique(p.values)) <= {0.0, 1.0}


class TestWorkflow:
    """Options and reproducibility."""

    def test_correlation_output(self):
        df = make_test_dataframe(n=200, seed=1)
        d = run_dxc_workflow(df, 2, 3, n_widths=2, base_width=10,
                             output="correlation", verbose=False)

        expected = compute_diagram(df.iloc[:, 2].to_numpy(), df.iloc[:, 3].to_numpy(), 10, 2)
        assert isinstance(d, CorrelationDiagram)
        np.testing.assert_allclose(d.values, expected.values)

    def test_odd_width_reaches_core_even(self, capsys):
        df = make_test_dataframe(n=200, seed=1)
        d = run_dxc_workflow(df, 0, 1, n_widths=2, base_width=11,
                             output="correlation", verbose=False)

        assert d.base_width == 10
        assert "Warning" in capsys.readouterr().err

    def test_same_seed_reproducible(self):
        a, b = make_independent_pair(150, seed=25)
        p1 = compute_pvalue_diagram(a, b, 10, 2, n_surrogates=6, seed=77)
        p2 = compute_pvalue_diagram(a, b, 10, 2, n_surrogates=6, seed=77)

        np.testing.assert_array_equal(p1.values, p2.values)

    def test_parallel_matches_sequential(self):
        """Index-derived seeds make the pool reproduce the sequential run."""
        a, b = make_independent_pair(150, seed=26)
        sequential = compute_pvalue_diagram(a, b, 10, 2, tau=1, n_surrogates=8, seed=5)
        parallel = compute_pvalue_diagram(a, b, 10, 2, tau=1, n_surrogates=8, seed=5,
                                          parallel=True, n_jobs=2)

        assert isinstance(parallel, PValueDiagram)
        assert parallel.n_trials == 8
        np.testing.assert_array_equal(parallel.values, sequential.values)

    def test_dataframe_and_array_agree(self):
        df = make_test_dataframe(n=200, seed=2)
        from_frame = run_dxc_workflow(df, 4, 5, 2, 10, output="correlation", verbose=False)
        from_array = run_dxc_workflow(df.to_numpy(), 4, 5, 2, 10, output="correlation", verbose=False)

        np.testing.assert_array_equal(from_frame.values, from_array.values)

    def test_non_positive_surrogates(self):
        data = np.column_stack(make_independent_pair(100, seed=1))
        with pytest.raises(ValueError):
            run_dxc_workflow(data, 0, 1, 3, 10, n_surrogates=0, verbose=False)

    def test_unknown_output(self):
        data = np.column_stack(make_independent_pair(100, seed=1))
        with pytest.raises(ValueError):
            run_dxc_workflow(data, 0, 1, 3, 10, output="both", verbose=False)

    def test_invalid_geometry_before_computation(self):
        data = np.column_stack(make_independent_pair(50, seed=1))
        with pytest.raises(ValueError):
            run_dxc_workflow(data, 0, 1, 5, 10, verbose=False)

    def test_test_dataframe_layout(self):
        df = make_test_dataframe(n=100, seed=3)

        assert isinstance(df, pd.DataFrame)
        assert df.shape == (100, 12)
        np.testing.assert_array_equal(df['identical_X'], df['identical_Y'])
