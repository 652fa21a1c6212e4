"""Tests for the gate library and its combinators.

随伴 (invert) と制御付与 (with_controls) の代数的性質を検証します:

- invert(invert(op)) == op
- H と X は自己随伴
- op の後に invert(op) を適用すると任意の状態が元に戻る
"""

import math

import numpy as np
import pytest

from quantum_dbsearch.errors import ConfigurationError
from quantum_dbsearch.gates import (
    Composite,
    Controlled,
    H,
    Phase,
    X,
    apply_to_each,
    compose,
    controlled_on_int,
    invert,
    mcphase,
    mcx,
    with_controls,
)
from quantum_dbsearch.statevector import StateVector

from conftest import random_amplitudes


def _random_state(n_qubits, rng):
    state = StateVector(n_qubits, validate=True)
    qubits = state.allocate(n_qubits)
    state.load(random_amplitudes(2 ** n_qubits, rng))
    return state, qubits


class TestInvert:
    """随伴演算のテスト."""

    def test_self_adjoint_gates(self):
        assert invert(X(0)) == X(0)
        assert invert(H(1)) == H(1)

    def test_phase_adjoint(self):
        assert invert(Phase(0, 0.3)) == Phase(0, -0.3)

    def test_double_inversion(self):
        """invert(invert(op)) == op が合成・制御付き演算でも成り立つ."""
        op = compose([
            H(0),
            Phase(1, 0.7),
            with_controls(Phase(2, 1.1), [0, 1], [0, 1]),
            mcx([0, 2], 1),
        ])
        assert invert(invert(op)) == op

    def test_composite_adjoint_reverses_order(self):
        op = compose([Phase(0, 0.1), Phase(1, 0.2)])
        assert invert(op) == Composite((Phase(1, -0.2), Phase(0, -0.1)))

    def test_op_then_inverse_is_identity(self, rng):
        """任意の状態に op → invert(op) を適用すると元に戻る."""
        state, (q0, q1, q2) = _random_state(3, rng)
        before = state.amplitudes
        op = compose([
            H(q0),
            Phase(q1, 0.42),
            with_controls(H(q2), [q0], [0]),
            mcphase(1.3, [q0, q2], q1),
            mcx([q1], q0),
        ])
        op.apply(state)
        assert not np.allclose(state.amplitudes, before)
        invert(op).apply(state)
        assert np.allclose(state.amplitudes, before)

    @pytest.mark.parametrize("gate", [X, H])
    def test_self_inverse_on_state(self, gate, rng):
        state, (q0, q1) = _random_state(2, rng)
        before = state.amplitudes
        gate(q1).apply(state)
        gate(q1).apply(state)
        assert np.allclose(state.amplitudes, before)


class TestWithControls:
    """制御付与コンビネータのテスト."""

    def test_no_controls_returns_op(self):
        assert with_controls(X(0), []) == X(0)

    def test_default_pattern_all_ones(self):
        op = with_controls(X(2), [0, 1])
        assert op == Controlled(X(2), (0, 1), (1, 1))

    def test_nested_controls_are_merged(self):
        inner = with_controls(X(2), [1], [0])
        outer = with_controls(inner, [0], [1])
        assert outer == Controlled(X(2), (0, 1), (1, 0))

    def test_unmatched_amplitudes_pass_through(self, rng):
        """制御パターンに一致しない振幅は変化しない."""
        state, (c0, c1, t) = _random_state(3, rng)
        before = state.amplitudes
        with_controls(X(t), [c0, c1], [1, 0]).apply(state)
        after = state.amplitudes
        # pattern c0=1, c1=0 -> indices 0b100, 0b101 swap
        assert after[0b100] == pytest.approx(before[0b101])
        assert after[0b101] == pytest.approx(before[0b100])
        for index in (0, 1, 2, 3, 6, 7):
            assert after[index] == pytest.approx(before[index])

    def test_invalid_pattern(self):
        with pytest.raises(ValueError):
            with_controls(X(1), [0], [2])
        with pytest.raises(ValueError):
            with_controls(X(1), [0], [1, 1])


class TestControlledOnInt:
    """整数パターンでの制御 (ビッグエンディアン) のテスト."""

    def test_pattern_decomposition(self):
        op = controlled_on_int(2, [0, 1], X(2))
        assert op == Controlled(X(2), (0, 1), (1, 0))

    def test_acts_only_on_matching_register(self):
        for value in range(4):
            state = StateVector(3)
            reg = state.allocate(2)
            (target,) = state.allocate(1)
            # load value 1 into the register
            X(reg[1]).apply(state)
            controlled_on_int(value, reg, X(target)).apply(state)
            expected_target = 1 if value == 1 else 0
            assert state.probability_of_one(target) == pytest.approx(expected_target)

    def test_out_of_range_value(self):
        with pytest.raises(ConfigurationError):
            controlled_on_int(4, [0, 1], X(2))


class TestHelpers:
    """補助関数のテスト."""

    def test_apply_to_each(self):
        op = apply_to_each(H, [1, 2, 3])
        assert list(op) == [H(1), H(2), H(3)]
        assert len(op) == 3

    def test_num_gates(self):
        op = compose([apply_to_each(H, [0, 1]), mcx([0], 1), Phase(0, math.pi)])
        assert op.num_gates == 4

    def test_call_applies(self):
        state = StateVector(1)
        (q,) = state.allocate(1)
        X(q)(state)
        assert state.probability_of_one(q) == pytest.approx(1.0)
