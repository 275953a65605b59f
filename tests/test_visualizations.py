"""Tests des sorties (courbe et tableau)."""

import os

import pandas as pd
import pytest

from taulink.visualizations import curve_to_frame, generate_results_table, plot_likelihood_curve

CURVE = [(0.0, 0.0), (0.5, 0.01), (1.0, 0.02)]


class TestCurveFrame:
    def test_relative(self):
        df = curve_to_frame(CURVE)
        assert list(df.columns) == ['tau', 'likelihood', 'relative']
        assert df['relative'].tolist() == pytest.approx([0.0, 0.5, 1.0])

    def test_all_zero(self):
        df = curve_to_frame([(0.0, 0.0), (1.0, 0.0)])
        assert df['relative'].tolist() == [0.0, 0.0]


class TestOutputs:
    def test_table(self, tmp_path):
        terms = {0.0: {1: 0.0, 2: 0.0}, 0.5: {1: 0.02, 2: 0.0}, 1.0: {1: 0.04, 2: 0.0}}
        path = generate_results_table(CURVE, str(tmp_path), terms)
        df = pd.read_csv(path, sep='\t')
        assert list(df.columns) == ['tau', 'likelihood', 'relative', 'term_1', 'term_2']
        assert df['term_1'].tolist() == pytest.approx([0.0, 0.02, 0.04])

    def test_plot(self, tmp_path):
        path = plot_likelihood_curve(CURVE, str(tmp_path / "out"), tau_hat=1.0)
        assert os.path.exists(path)
        assert path.endswith('.png')
