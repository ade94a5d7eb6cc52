"""
Circuit module tests: Gate, Circuit, 순열 구성
"""
import pytest

from zkmul.plonk.field import FR, MINUS_ONE, get_roots_of_unity
from zkmul.plonk.circuit import Circuit, Gate, WIRE_A, WIRE_B, WIRE_C
from zkmul.plonk.permutation import (
    K1, K2, position_label, build_permutation_polynomials, compute_accumulator,
)


def _multiplication_with_public_output():
    """공개 입력 c = 15, 곱셈 3 · 5 = 15, 두 c 배선을 copy constraint로 연결."""
    circuit = Circuit()
    circuit.add_public_input_gate()
    circuit.add_multiplication_gate()
    circuit.add_copy_constraint(0, WIRE_C, 1, WIRE_C)
    a_vals = [FR(0), FR(3)]
    b_vals = [FR(0), FR(5)]
    c_vals = [FR(15), FR(15)]
    return circuit, a_vals, b_vals, c_vals, [FR(15)]


class TestGate:
    def test_multiplication(self):
        gate = Gate(0, 0, MINUS_ONE, 1, 0)
        assert gate.check(FR(3), FR(5), FR(15))
        assert not gate.check(FR(3), FR(5), FR(16))

    def test_linear_with_constant(self):
        # 2a + 3b + 1 = c
        gate = Gate(2, 3, MINUS_ONE, 0, 1)
        assert gate.check(FR(1), FR(1), FR(6))

    def test_public_input_row(self):
        gate = Gate(0, 0, 1, 0, 0)
        assert gate.check(FR(0), FR(0), FR(15), pi=FR(0) - FR(15))
        assert not gate.check(FR(0), FR(0), FR(15), pi=FR(0) - FR(16))

    def test_padding_always_satisfied(self):
        assert Gate(0, 0, 0, 0, 0).check(FR(9), FR(8), FR(7))


class TestCircuit:
    def test_row_indices(self):
        circuit = Circuit()
        assert circuit.add_public_input_gate() == 0
        assert circuit.add_multiplication_gate() == 1
        assert circuit.add_linear_gate(1, 1) == 2
        assert circuit.n == 3
        assert circuit.num_public_inputs == 1

    def test_public_input_gate_must_come_first(self):
        circuit = Circuit()
        circuit.add_multiplication_gate()
        with pytest.raises(ValueError):
            circuit.add_public_input_gate()

    def test_pad_to(self):
        circuit = Circuit()
        circuit.add_multiplication_gate()
        circuit.pad_to(4)
        assert circuit.n == 4
        assert circuit.gates[3].selectors() == (FR(0),) * 5

    def test_selector_columns(self):
        circuit = Circuit()
        circuit.add_public_input_gate()
        circuit.add_multiplication_gate()
        q_l, q_r, q_o, q_m, q_c = circuit.get_selector_polynomials()
        assert q_o == [FR(1), MINUS_ONE]
        assert q_m == [FR(0), FR(1)]

    def test_check_assignment_ok(self):
        circuit, a_vals, b_vals, c_vals, pis = _multiplication_with_public_output()
        assert circuit.check_assignment(a_vals, b_vals, c_vals, pis) is None

    def test_check_assignment_reports_gate(self):
        circuit, a_vals, b_vals, c_vals, pis = _multiplication_with_public_output()
        c_vals = [FR(16), FR(16)]
        assert circuit.check_assignment(a_vals, b_vals, c_vals, pis) == 0

    def test_check_assignment_reports_copy(self):
        circuit = Circuit()
        circuit.add_linear_gate(1, 0)
        circuit.add_linear_gate(1, 0)
        circuit.add_copy_constraint(0, WIRE_A, 1, WIRE_A)
        # 두 게이트 모두 c = a 는 만족하지만 a 배선 값이 서로 다르다
        result = circuit.check_assignment(
            [FR(1), FR(2)], [FR(0), FR(0)], [FR(1), FR(2)], [])
        assert result == 0


class TestCopyConstraints:
    def test_identity_without_constraints(self):
        circuit = Circuit()
        circuit.add_multiplication_gate()
        circuit.pad_to(2)
        assert circuit.build_copy_constraints() == list(range(6))

    def test_cycle(self):
        circuit = Circuit()
        circuit.pad_to(2)
        # 위치 = wire * n + gate
        circuit.add_copy_constraint(0, WIRE_A, 1, WIRE_B)   # 0 ~ 3
        circuit.add_copy_constraint(1, WIRE_B, 1, WIRE_C)   # 3 ~ 5
        sigma = circuit.build_copy_constraints()
        assert sigma[0] == 3
        assert sigma[3] == 5
        assert sigma[5] == 0
        assert sorted(sigma) == list(range(6))


class TestPermutation:
    def test_position_labels_are_cosets(self):
        n = 4
        domain = get_roots_of_unity(n)
        assert position_label(1, n, domain) == domain[1]
        assert position_label(n + 1, n, domain) == K1 * domain[1]
        assert position_label(2 * n + 1, n, domain) == K2 * domain[1]

    def test_identity_permutation_polynomials(self):
        n = 2
        domain = get_roots_of_unity(n)
        s1, s2, s3 = build_permutation_polynomials(list(range(3 * n)), n, domain)
        assert s1 == domain
        assert s2 == [K1 * d for d in domain]
        assert s3 == [K2 * d for d in domain]

    def test_accumulator_closes_when_copies_hold(self):
        circuit, a_vals, b_vals, c_vals, _ = _multiplication_with_public_output()
        n = circuit.n
        domain = get_roots_of_unity(n)
        sigma = circuit.build_copy_constraints()
        beta, gamma = FR(11), FR(13)
        z = compute_accumulator(a_vals, b_vals, c_vals, sigma, n, domain, beta, gamma)
        assert z[0] == FR(1)

        # 마지막 행까지 곱하면 1로 돌아와야 한다
        s1, s2, s3 = build_permutation_polynomials(sigma, n, domain)
        i = n - 1
        num = ((a_vals[i] + beta * domain[i] + gamma)
               * (b_vals[i] + beta * K1 * domain[i] + gamma)
               * (c_vals[i] + beta * K2 * domain[i] + gamma))
        den = ((a_vals[i] + beta * s1[i] + gamma)
               * (b_vals[i] + beta * s2[i] + gamma)
               * (c_vals[i] + beta * s3[i] + gamma))
        assert z[-1] * num / den == FR(1)
