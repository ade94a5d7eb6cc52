"""
Tests for PLONK cryptographic modules: SRS, KZG, Transcript, Preprocessor.
"""

import random

import pytest

from zkmul.plonk.field import FR, G1, G2, ec_mul, ec_add, ec_neg, ec_pairing
from zkmul.plonk.polynomial import Polynomial
from zkmul.plonk.srs import SRS
from zkmul.plonk.kzg import commit, open_at
from zkmul.plonk.transcript import Transcript
from zkmul.plonk.preprocessor import (
    preprocess, extract_verifying_key, circuit_digest, SELECTOR_NAMES, SIGMA_NAMES,
)
from zkmul.plonk.circuit import Circuit, WIRE_C


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def srs_small():
    """max_degree=8 SRS."""
    return SRS.generate(max_degree=8, rng=random.Random(42))


def _small_circuit():
    circuit = Circuit()
    circuit.add_public_input_gate()
    circuit.add_multiplication_gate()
    circuit.add_copy_constraint(0, WIRE_C, 1, WIRE_C)
    return circuit


# ─────────────────────────────────────────────────────────────────────
# SRS
# ─────────────────────────────────────────────────────────────────────

class TestSRS:
    def test_lengths(self, srs_small):
        assert len(srs_small.g1_powers) == 9
        assert len(srs_small.g2_powers) == 2
        assert srs_small.max_degree == 8

    def test_first_powers_are_generators(self, srs_small):
        assert srs_small.g1_powers[0] == G1
        assert srs_small.g2_powers[0] == G2

    def test_deterministic_with_same_seed(self):
        srs1 = SRS.generate(max_degree=3, rng=random.Random(99))
        srs2 = SRS.generate(max_degree=3, rng=random.Random(99))
        assert srs1.g1_powers == srs2.g1_powers
        assert srs1.g2_powers == srs2.g2_powers

    def test_different_seed_differs(self):
        srs1 = SRS.generate(max_degree=1, rng=random.Random(1))
        srs2 = SRS.generate(max_degree=1, rng=random.Random(2))
        assert srs1.g1_powers[1] != srs2.g1_powers[1]

    def test_consistent_tau(self, srs_small):
        """e([τ]₁, G2) == e(G1, [τ]₂)."""
        assert ec_pairing(G2, srs_small.g1_powers[1]) == \
            ec_pairing(srs_small.g2_powers[1], G1)

    def test_negative_degree_rejected(self):
        with pytest.raises(ValueError):
            SRS.generate(max_degree=-1, rng=random.Random(0))


# ─────────────────────────────────────────────────────────────────────
# KZG
# ─────────────────────────────────────────────────────────────────────

class TestKZG:
    def test_commit_constant(self, srs_small):
        assert commit(Polynomial([5]), srs_small) == ec_mul(G1, 5)

    def test_commit_zero_is_infinity(self, srs_small):
        assert commit(Polynomial.zero(), srs_small) is None

    def test_degree_overflow(self, srs_small):
        with pytest.raises(ValueError):
            commit(Polynomial([1] * 10), srs_small)

    def test_linearity(self, srs_small):
        a = Polynomial([1, 2, 3])
        b = Polynomial([4, 0, 5, 6])
        assert commit(a + b, srs_small) == \
            ec_add(commit(a, srs_small), commit(b, srs_small))

    def test_opening_pairing(self, srs_small):
        """e(π, [τ - z]₂) == e([p] - p(z)·G1, G2)."""
        poly = Polynomial([3, 1, 4, 1, 5])
        z = FR(7)
        pi = open_at(poly, z, srs_small)
        c = commit(poly, srs_small)

        lhs = ec_pairing(ec_add(srs_small.g2_powers[1], ec_neg(ec_mul(G2, z))), pi)
        rhs = ec_pairing(G2, ec_add(c, ec_neg(ec_mul(G1, poly.evaluate(z)))))
        assert lhs == rhs


# ─────────────────────────────────────────────────────────────────────
# Transcript
# ─────────────────────────────────────────────────────────────────────

class TestTranscript:
    def test_same_inputs_same_challenge(self):
        t1, t2 = Transcript(), Transcript()
        for t in (t1, t2):
            t.append_scalars(b"public_inputs", [FR(15)])
            t.append_point(b"a_comm", G1)
        assert t1.challenge_scalar(b"beta") == t2.challenge_scalar(b"beta")

    def test_public_inputs_change_challenge(self):
        t1, t2 = Transcript(), Transcript()
        t1.append_scalars(b"public_inputs", [FR(15)])
        t2.append_scalars(b"public_inputs", [FR(16)])
        assert t1.challenge_scalar(b"beta") != t2.challenge_scalar(b"beta")

    def test_successive_challenges_differ(self):
        t = Transcript()
        t.append_scalar(b"x", FR(1))
        assert t.challenge_scalar(b"beta") != t.challenge_scalar(b"gamma")

    def test_infinity_point(self):
        t = Transcript()
        t.append_point(b"zero", None)
        assert isinstance(t.challenge_scalar(b"c"), FR)


# ─────────────────────────────────────────────────────────────────────
# Preprocessor
# ─────────────────────────────────────────────────────────────────────

class TestPreprocessor:
    def test_domain(self, srs_small):
        pp = preprocess(_small_circuit(), srs_small)
        assert pp.n == 2
        assert pp.omega ** 2 == FR(1)
        assert pp.num_public_inputs == 1

    def test_pads_circuit(self, srs_small):
        circuit = _small_circuit()
        circuit.add_multiplication_gate()
        pp = preprocess(circuit, srs_small)
        assert pp.n == 4
        assert circuit.n == 4

    def test_selector_polys_interpolate(self, srs_small):
        circuit = _small_circuit()
        pp = preprocess(circuit, srs_small)
        for i, w in enumerate(pp.domain):
            assert pp.q_m_poly.evaluate(w) == circuit.gates[i].q_m
            assert pp.q_o_poly.evaluate(w) == circuit.gates[i].q_o

    def test_commitments_match(self, srs_small):
        pp = preprocess(_small_circuit(), srs_small)
        comms = pp.commitments()
        assert set(comms) == set(SELECTOR_NAMES + SIGMA_NAMES)
        assert comms["q_m"] == commit(pp.q_m_poly, srs_small)

    def test_deterministic(self, srs_small):
        pp1 = preprocess(_small_circuit(), srs_small)
        pp2 = preprocess(_small_circuit(), srs_small)
        assert pp1.commitments() == pp2.commitments()
        assert pp1.digest == pp2.digest

    def test_digest_depends_on_copy_constraints(self):
        plain = Circuit()
        plain.add_public_input_gate()
        plain.add_multiplication_gate()
        linked = _small_circuit()
        assert circuit_digest(plain, plain.build_copy_constraints()) != \
            circuit_digest(linked, linked.build_copy_constraints())

    def test_verifying_key(self, srs_small):
        pp = preprocess(_small_circuit(), srs_small)
        vk = extract_verifying_key(pp, srs_small)
        assert vk.n == pp.n
        assert vk.num_public_inputs == 1
        assert vk.commitments() == pp.commitments()
        assert vk.g2_powers == srs_small.g2_powers
        assert vk.digest == pp.digest
