"""Tests for experiment logging utilities.

このファイルは探索実験データの収集と集計機能をテストします。
主な機能:

1. sweep_iterations: 反復回数ごとの繰り返し実験とデータ収集
2. summarize_success: 成功率の集計
3. SearchRunSetting: 実験設定の管理
"""

import pandas as pd
import pytest

from quantum_dbsearch import SearchRunSetting, summarize_success, sweep_iterations
from quantum_dbsearch.errors import ConfigurationError

COLUMNS = {
    "label", "n_iterations", "repeat", "marked", "key", "value",
    "success", "consistent", "theoretical_probability", "queries",
}


class TestSweepIterations:
    """反復回数スイープ機能のテスト.

    sweep_iterations は設定ごとに探索を繰り返し、
    1 試行 1 行の pandas DataFrame を返します。
    """

    def test_basic_sweep(self):
        """2 設定 × 3 回で 6 行が収集される."""
        df = sweep_iterations(
            search_value=2,
            settings=[
                SearchRunSetting(label="zero", n_iterations=0),
                SearchRunSetting(label="one", n_iterations=1),
            ],
            repeats=3,
            seed=7,
        )

        assert isinstance(df, pd.DataFrame)
        assert len(df) == 6
        assert COLUMNS <= set(df.columns)
        assert set(df["label"]) == {"zero", "one"}
        assert list(df["repeat"][:3]) == [0, 1, 2]
        assert set(df.loc[df["label"] == "one", "queries"]) == {3}

    def test_default_settings(self):
        """既定は classical (0 回) と grover (1 回) の 2 フェーズ."""
        df = sweep_iterations(search_value=0, repeats=2, seed=1)
        assert set(df["label"]) == {"classical", "grover"}
        assert set(df.loc[df["label"] == "classical", "n_iterations"]) == {0}

    def test_grover_always_succeeds(self):
        """N=4 では 1 回の反復で必ず正解に到達する."""
        df = sweep_iterations(
            search_value=2,
            settings=[SearchRunSetting(label="grover", n_iterations=1)],
            repeats=20,
            seed=3,
        )
        assert df["success"].all()
        assert (df["key"] == 1).all()
        assert (df["value"] == 2).all()

    def test_successful_rows_are_consistent(self):
        """成功した試行ではキーと値がテーブルと一致する."""
        df = sweep_iterations(search_value=3, repeats=30, seed=11)
        successes = df[df["success"]]
        assert successes["consistent"].all()
        assert (successes["value"] == 3).all()

    def test_seed_reproducibility(self):
        first = sweep_iterations(search_value=1, repeats=10, seed=99)
        second = sweep_iterations(search_value=1, repeats=10, seed=99)
        pd.testing.assert_frame_equal(first, second)

    def test_invalid_repeats(self):
        with pytest.raises(ConfigurationError):
            sweep_iterations(search_value=0, repeats=0)

    def test_negative_iterations_rejected_before_running(self):
        with pytest.raises(ConfigurationError):
            sweep_iterations(
                search_value=0,
                settings=[
                    SearchRunSetting(label="ok", n_iterations=1),
                    SearchRunSetting(label="bad", n_iterations=-1),
                ],
            )

    def test_invalid_search_value(self):
        with pytest.raises(ConfigurationError):
            sweep_iterations(search_value=9)


class TestSummarizeSuccess:
    """成功率集計機能のテスト."""

    def test_basic_summary(self):
        """ラベルごとに成功率と試行回数が集計される."""
        df = pd.DataFrame(
            {
                "label": ["classical", "classical", "grover", "grover"],
                "n_iterations": [0, 0, 1, 1],
                "success": [True, False, True, True],
                "theoretical_probability": [0.25, 0.25, 1.0, 1.0],
                "queries": [1, 1, 3, 3],
            }
        )

        summary = summarize_success(df)

        assert len(summary) == 2
        classical = summary[summary["label"] == "classical"].iloc[0]
        grover = summary[summary["label"] == "grover"].iloc[0]
        assert classical["success_rate"] == pytest.approx(0.5)
        assert classical["attempts"] == 2
        assert grover["success_rate"] == pytest.approx(1.0)
        assert grover["queries"] == 3
        assert grover["classical_probability"] == pytest.approx(0.25)
        # 1.0 / (0.25 * 3)
        assert grover["speedup"] == pytest.approx(4 / 3)

    def test_empty_dataframe(self):
        df = pd.DataFrame()
        summary = summarize_success(df)
        assert summary.empty

    def test_summary_of_sweep(self):
        df = sweep_iterations(search_value=2, repeats=5, seed=5)
        summary = summarize_success(df)
        assert set(summary["label"]) == {"classical", "grover"}
        assert (summary["attempts"] == 5).all()


class TestSearchRunSetting:
    """SearchRunSetting データクラスのテスト."""

    def test_default_values(self):
        setting = SearchRunSetting(label="test")
        assert setting.label == "test"
        assert setting.n_iterations == 0

    def test_immutable(self):
        """frozen=True なので変更不可."""
        setting = SearchRunSetting(label="test", n_iterations=1)
        with pytest.raises(AttributeError):
            setting.n_iterations = 2  # type: ignore
