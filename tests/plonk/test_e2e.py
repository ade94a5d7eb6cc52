"""
PLONK Prover/Verifier End-to-End Tests
=======================================

plonk 백엔드만으로 circuit -> SRS -> preprocess -> prove -> verify를 돌린다.

테스트 범위:
  - 공개 출력 곱셈 회로 (3 · 5 = 15)
  - 블라인딩 난수 결정성
  - 만족하지 않는 할당은 Round 3에서 거부
  - 건전성: 조작된 증명 원소, 다른 공개 입력
"""

import copy
import random

import pytest

from zkmul.errors import UnsatisfiedConstraints
from zkmul.plonk.field import FR, G1, ec_mul, ec_add
from zkmul.plonk.circuit import Circuit, WIRE_C
from zkmul.plonk.srs import SRS
from zkmul.plonk.preprocessor import preprocess, extract_verifying_key
from zkmul.plonk.prover import prove, PROOF_COMMITMENTS, PROOF_EVALUATIONS
from zkmul.plonk.verifier import verify, check_proof_shape


# ─────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────

def _build_public_multiplication():
    """c = 15 공개, 3 · 5 = 15.

    게이트 0 (공개 입력): c = 15
    게이트 1 (mul):       3 · 5 = 15
    """
    circuit = Circuit()
    circuit.add_public_input_gate()
    circuit.add_multiplication_gate()
    circuit.add_copy_constraint(0, WIRE_C, 1, WIRE_C)
    a_vals = [FR(0), FR(3)]
    b_vals = [FR(0), FR(5)]
    c_vals = [FR(15), FR(15)]
    return circuit, a_vals, b_vals, c_vals, [FR(15)]


@pytest.fixture(scope="module")
def pipeline():
    circuit, a_vals, b_vals, c_vals, public_inputs = _build_public_multiplication()
    srs = SRS.generate(max_degree=circuit.n + 8, rng=random.Random(7777))
    preprocessed = preprocess(circuit, srs)
    vk = extract_verifying_key(preprocessed, srs)
    proof = prove(a_vals, b_vals, c_vals, public_inputs, preprocessed, srs,
                  random.Random(1))
    return {
        "a_vals": a_vals,
        "b_vals": b_vals,
        "c_vals": c_vals,
        "public_inputs": public_inputs,
        "srs": srs,
        "preprocessed": preprocessed,
        "vk": vk,
        "proof": proof,
    }


# ─────────────────────────────────────────────────────────────────────
# E2E
# ─────────────────────────────────────────────────────────────────────

class TestE2EPipeline:

    def test_valid_proof_passes(self, pipeline):
        assert verify(pipeline["proof"], pipeline["public_inputs"],
                      pipeline["vk"]) is True

    def test_proof_has_all_fields(self, pipeline):
        proof = pipeline["proof"]
        for name in PROOF_COMMITMENTS:
            assert getattr(proof, name) is not None, name
        for name in PROOF_EVALUATIONS:
            assert isinstance(getattr(proof, name), FR), name
        check_proof_shape(proof)

    def test_verify_is_deterministic(self, pipeline):
        r1 = verify(pipeline["proof"], pipeline["public_inputs"], pipeline["vk"])
        r2 = verify(pipeline["proof"], pipeline["public_inputs"], pipeline["vk"])
        assert r1 is True and r2 is True

    def test_same_rng_same_proof(self, pipeline):
        d = pipeline
        p1 = prove(d["a_vals"], d["b_vals"], d["c_vals"], d["public_inputs"],
                   d["preprocessed"], d["srs"], random.Random(5))
        p2 = prove(d["a_vals"], d["b_vals"], d["c_vals"], d["public_inputs"],
                   d["preprocessed"], d["srs"], random.Random(5))
        assert p1.a_comm == p2.a_comm
        assert p1.W_zeta_comm == p2.W_zeta_comm
        assert p1.r_eval == p2.r_eval

    def test_blinding_hides_wires(self, pipeline):
        d = pipeline
        other = prove(d["a_vals"], d["b_vals"], d["c_vals"], d["public_inputs"],
                      d["preprocessed"], d["srs"], random.Random(6))
        assert other.a_comm != d["proof"].a_comm
        assert verify(other, d["public_inputs"], d["vk"]) is True


# ─────────────────────────────────────────────────────────────────────
# Unsatisfied assignment
# ─────────────────────────────────────────────────────────────────────

class TestUnsatisfied:

    def test_wrong_product_rejected(self, pipeline):
        d = pipeline
        with pytest.raises(UnsatisfiedConstraints):
            prove(d["a_vals"], [FR(0), FR(6)], d["c_vals"], d["public_inputs"],
                  d["preprocessed"], d["srs"], random.Random(0))

    def test_public_input_mismatch_rejected(self, pipeline):
        d = pipeline
        with pytest.raises(UnsatisfiedConstraints):
            prove(d["a_vals"], d["b_vals"], d["c_vals"], [FR(16)],
                  d["preprocessed"], d["srs"], random.Random(0))

    def test_broken_copy_constraint_rejected(self, pipeline):
        d = pipeline
        # 게이트 0의 c는 공개 입력 16과 맞지만 게이트 1의 c와 다르다
        with pytest.raises(UnsatisfiedConstraints):
            prove(d["a_vals"], d["b_vals"], [FR(16), FR(15)], [FR(16)],
                  d["preprocessed"], d["srs"], random.Random(0))


# ─────────────────────────────────────────────────────────────────────
# Soundness
# ─────────────────────────────────────────────────────────────────────

class TestSoundness:

    def test_wrong_public_input_fails(self, pipeline):
        assert verify(pipeline["proof"], [FR(16)], pipeline["vk"]) is False

    @pytest.mark.parametrize("name", ["a_eval", "z_omega_eval", "r_eval"])
    def test_tampered_evaluation_fails(self, pipeline, name):
        proof = copy.deepcopy(pipeline["proof"])
        setattr(proof, name, getattr(proof, name) + FR(1))
        assert verify(proof, pipeline["public_inputs"], pipeline["vk"]) is False

    @pytest.mark.parametrize("name", ["c_comm", "t_hi_comm", "W_zeta_comm"])
    def test_tampered_commitment_fails(self, pipeline, name):
        proof = copy.deepcopy(pipeline["proof"])
        setattr(proof, name, ec_add(getattr(proof, name), G1))
        assert verify(proof, pipeline["public_inputs"], pipeline["vk"]) is False

    def test_swapped_openings_fail(self, pipeline):
        proof = copy.deepcopy(pipeline["proof"])
        proof.W_zeta_comm, proof.W_zeta_omega_comm = \
            proof.W_zeta_omega_comm, proof.W_zeta_comm
        assert verify(proof, pipeline["public_inputs"], pipeline["vk"]) is False

    def test_public_input_length_checked(self, pipeline):
        with pytest.raises(ValueError):
            verify(pipeline["proof"], [], pipeline["vk"])

    def test_malformed_point_rejected(self, pipeline):
        proof = copy.deepcopy(pipeline["proof"])
        proof.a_comm = (1, 2)
        with pytest.raises(ValueError):
            verify(proof, pipeline["public_inputs"], pipeline["vk"])

    def test_missing_evaluation_rejected(self, pipeline):
        proof = copy.deepcopy(pipeline["proof"])
        proof.b_eval = None
        with pytest.raises(ValueError):
            check_proof_shape(proof)

    def test_not_generator_multiple_still_on_curve(self, pipeline):
        # 곡선 위의 다른 점으로 바꾸면 형식 검사는 통과하고 페어링에서 걸린다
        proof = copy.deepcopy(pipeline["proof"])
        proof.z_comm = ec_mul(G1, 12345)
        assert verify(proof, pipeline["public_inputs"], pipeline["vk"]) is False
