"""Tests for measurement sampling and state collapse."""

import numpy as np
import pytest

from quantum_dbsearch.errors import NumericalConsistencyError
from quantum_dbsearch.gates import H, mcx
from quantum_dbsearch.sampler import Sampler
from quantum_dbsearch.statevector import StateVector


class _FixedRng:
    """Stand-in generator returning a constant draw."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class TestMeasure:
    """単一量子ビット測定のテスト."""

    def test_deterministic_outcomes(self):
        state = StateVector(2)
        q0, q1 = state.allocate(2)
        state.load([0, 0, 1, 0])  # |10>
        sampler = Sampler(np.random.default_rng(0))
        assert sampler.measure(state, q0) == 1
        assert sampler.measure(state, q1) == 0

    def test_collapse_and_renormalize(self):
        """測定後は結果と矛盾する振幅が 0 になり、正規化される."""
        state = StateVector(1)
        (q,) = state.allocate(1)
        H(q).apply(state)
        outcome = Sampler(np.random.default_rng(7)).measure(state, q)
        expected = np.zeros(2, dtype=complex)
        expected[outcome] = 1.0
        assert np.allclose(state.amplitudes, expected)
        assert state.norm() == pytest.approx(1.0)

    def test_frequencies_follow_born_rule(self):
        rng = np.random.default_rng(99)
        sampler = Sampler(rng)
        ones = 0
        trials = 2000
        for _ in range(trials):
            state = StateVector(1)
            (q,) = state.allocate(1)
            state.load([np.sqrt(0.8), np.sqrt(0.2)])
            ones += sampler.measure(state, q)
        assert ones / trials == pytest.approx(0.2, abs=0.04)

    def test_impossible_outcome_is_fatal(self):
        """実現確率 ~0 の結果は数値的不整合として扱う."""
        state = StateVector(1)
        (q,) = state.allocate(1)
        state.load([0, 1])  # p(one) = 1
        sampler = Sampler(_FixedRng(1.0))  # draw forces the zero outcome
        with pytest.raises(NumericalConsistencyError):
            sampler.measure(state, q)

    def test_seeded_reproducibility(self):
        def draw(seed):
            sampler = Sampler(np.random.default_rng(seed))
            outcomes = []
            for _ in range(20):
                state = StateVector(1)
                (q,) = state.allocate(1)
                H(q).apply(state)
                outcomes.append(sampler.measure(state, q))
            return outcomes

        assert draw(5) == draw(5)


class TestMeasureRegister:
    """レジスタの逐次 (同時分布) 測定."""

    def test_entangled_bits_agree(self):
        """GHZ 状態の測定結果は全ビット一致する."""
        sampler = Sampler(np.random.default_rng(3))
        seen = set()
        for _ in range(50):
            state = StateVector(3)
            reg = state.allocate(3)
            H(reg[0]).apply(state)
            mcx([reg[0]], reg[1]).apply(state)
            mcx([reg[1]], reg[2]).apply(state)
            bits = sampler.measure_register(state, reg)
            assert bits in ([0, 0, 0], [1, 1, 1])
            seen.add(tuple(bits))
        assert seen == {(0, 0, 0), (1, 1, 1)}


class TestReset:
    """測定後のクリーンアップ."""

    def test_reset_allows_release(self):
        state = StateVector(2)
        reg = state.allocate(2)
        state.load([0, 0, 0, 1])  # |11>
        sampler = Sampler(np.random.default_rng(0))
        results = sampler.measure_register(state, reg)
        assert results == [1, 1]
        sampler.reset(state, reg, results)
        state.release(reg)
        assert state.probabilities()[0] == pytest.approx(1.0)
