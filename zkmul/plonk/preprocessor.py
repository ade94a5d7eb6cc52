"""
회로 전처리 (index)
===================

회로 구조가 정해지면 셀렉터 다항식과 순열 다항식을 한 번 계산해 커밋한다.

  Prover용  (PreprocessedData): 도메인, 다항식 원본, 커밋먼트, σ
  Verifier용 (VerifyingKey):    도메인 크기/단위근, 커밋먼트 8개, [1]₂, [τ]₂

둘 다 (SRS, 회로 구조)의 결정론적 함수이며, 같은 입력이면 바이트 단위로 같다.
"""

import hashlib

from zkmul.plonk.field import get_root_of_unity, get_roots_of_unity
from zkmul.plonk.polynomial import Polynomial
from zkmul.plonk.kzg import commit
from zkmul.plonk.permutation import build_permutation_polynomials
from zkmul.plonk.utils import next_power_of_2


SELECTOR_NAMES = ("q_l", "q_r", "q_o", "q_m", "q_c")
SIGMA_NAMES = ("s_sigma1", "s_sigma2", "s_sigma3")


class PreprocessedData:
    """전처리 결과. preprocess()가 속성을 채운다.

    속성:
        n, omega, domain: 평가 도메인
        q_*_poly / q_*_comm: 셀렉터 다항식과 커밋먼트
        s_sigma*_poly / s_sigma*_comm: 순열 다항식과 커밋먼트
        sigma: 순열 배열 (길이 3n)
        num_public_inputs: 공개 입력 게이트 수
        digest: 회로 구조의 SHA-256 (hex)
    """

    def commitments(self):
        """이름 → G1 커밋먼트 (셀렉터 5개 + 순열 3개)."""
        return {
            name: getattr(self, f"{name}_comm")
            for name in SELECTOR_NAMES + SIGMA_NAMES
        }


class VerifyingKey:
    """검증에 필요한 최소 공개 데이터."""

    def __init__(self, n, omega, num_public_inputs, commitments, g2_powers,
                 digest):
        self.n = n
        self.omega = omega
        self.num_public_inputs = num_public_inputs
        self.g2_powers = g2_powers
        self.digest = digest
        for name, point in commitments.items():
            setattr(self, f"{name}_comm", point)

    def commitments(self):
        return {
            name: getattr(self, f"{name}_comm")
            for name in SELECTOR_NAMES + SIGMA_NAMES
        }


def circuit_digest(circuit, sigma):
    """셀렉터, 순열, 공개 입력 수를 묶은 구조 해시."""
    h = hashlib.sha256()
    h.update(len(circuit.gates).to_bytes(8, "big"))
    h.update(circuit.num_public_inputs.to_bytes(8, "big"))
    for gate in circuit.gates:
        for selector in gate.selectors():
            h.update(int(selector).to_bytes(32, "big"))
    for pos in sigma:
        h.update(pos.to_bytes(8, "big"))
    return h.hexdigest()


def preprocess(circuit, srs):
    """회로를 전처리한다.

    게이트 수가 2의 거듭제곱이 아니면 0 게이트로 채운다 (circuit을 수정한다).

    Raises:
        ValueError: 다항식 차수가 SRS 한도를 넘을 때 (commit에서)
    """
    result = PreprocessedData()

    # ── 도메인 ──
    n = next_power_of_2(circuit.n)
    circuit.pad_to(n)
    result.n = n
    result.omega = get_root_of_unity(n)
    result.domain = get_roots_of_unity(n)

    # ── 셀렉터 ──
    for name, evals in zip(SELECTOR_NAMES, circuit.get_selector_polynomials()):
        poly = Polynomial.from_evaluations(evals, result.omega)
        setattr(result, f"{name}_poly", poly)
        setattr(result, f"{name}_comm", commit(poly, srs))

    # ── 순열 ──
    result.sigma = circuit.build_copy_constraints()
    sigma_evals = build_permutation_polynomials(result.sigma, n, result.domain)
    for name, evals in zip(SIGMA_NAMES, sigma_evals):
        poly = Polynomial.from_evaluations(evals, result.omega)
        setattr(result, f"{name}_poly", poly)
        setattr(result, f"{name}_comm", commit(poly, srs))

    result.num_public_inputs = circuit.num_public_inputs
    result.digest = circuit_digest(circuit, result.sigma)
    return result


def extract_verifying_key(preprocessed, srs):
    return VerifyingKey(
        n=preprocessed.n,
        omega=preprocessed.omega,
        num_public_inputs=preprocessed.num_public_inputs,
        commitments=preprocessed.commitments(),
        g2_powers=list(srs.g2_powers),
        digest=preprocessed.digest,
    )
