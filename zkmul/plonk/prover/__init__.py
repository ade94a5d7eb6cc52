"""
PLONK Prover: 5 라운드 오케스트레이터
======================================

  ┌─────────────────────────────────────────────────────┐
  │  Round 1: 공개 입력 흡수, 배선 다항식 커밋            │
  │           [a]₁, [b]₁, [c]₁                         │
  ├─────────────────────────────────────────────────────┤
  │  Round 2: β, γ → 순열 누적자 [z]₁                   │
  ├─────────────────────────────────────────────────────┤
  │  Round 3: α → 몫 다항식 [t_lo]₁, [t_mid]₁, [t_hi]₁ │
  ├─────────────────────────────────────────────────────┤
  │  Round 4: ζ → ā, b̄, c̄, s̄_σ1, s̄_σ2, z̄_ω            │
  ├─────────────────────────────────────────────────────┤
  │  Round 5: v → r̄, [W_ζ]₁, [W_ζω]₁                   │
  └─────────────────────────────────────────────────────┘

블라인딩 계수는 호출자가 넘긴 난수 생성기에서 뽑는다.

    >>> proof = prove(a_vals, b_vals, c_vals, public_inputs, pp, srs, rng)
"""

import random

from zkmul.plonk.transcript import Transcript
from zkmul.plonk.prover import round1, round2, round3, round4, round5


PROOF_COMMITMENTS = (
    "a_comm", "b_comm", "c_comm", "z_comm",
    "t_lo_comm", "t_mid_comm", "t_hi_comm",
    "W_zeta_comm", "W_zeta_omega_comm",
)
PROOF_EVALUATIONS = (
    "a_eval", "b_eval", "c_eval",
    "s_sigma1_eval", "s_sigma2_eval", "z_omega_eval", "r_eval",
)


class Proof:
    """G1 커밋먼트 9개와 FR 평가값 7개."""

    def __init__(self):
        # Round 1
        self.a_comm = None
        self.b_comm = None
        self.c_comm = None
        # Round 2
        self.z_comm = None
        # Round 3
        self.t_lo_comm = None
        self.t_mid_comm = None
        self.t_hi_comm = None
        # Round 4
        self.a_eval = None
        self.b_eval = None
        self.c_eval = None
        self.s_sigma1_eval = None
        self.s_sigma2_eval = None
        self.z_omega_eval = None
        # Round 5
        self.r_eval = None
        self.W_zeta_comm = None
        self.W_zeta_omega_comm = None


class ProverState:
    """라운드 사이에 공유되는 상태.

    입력: 배선 값, 공개 입력, 전처리 데이터, SRS, 난수 생성기
    라운드 결과: 다항식들, 챌린지 β γ α ζ v, 그리고 채워지는 proof
    """

    def __init__(self, a_vals, b_vals, c_vals, public_inputs, preprocessed,
                 srs, rng):
        self.a_vals = a_vals
        self.b_vals = b_vals
        self.c_vals = c_vals
        self.public_inputs = public_inputs
        self.preprocessed = preprocessed
        self.srs = srs
        self.rng = rng

        self.transcript = Transcript()

        self.n = preprocessed.n
        self.omega = preprocessed.omega
        self.domain = preprocessed.domain

        self.pi_poly = None
        self.a_poly = None
        self.b_poly = None
        self.c_poly = None
        self.z_poly = None
        self.t_lo_poly = None
        self.t_mid_poly = None
        self.t_hi_poly = None

        self.beta = None
        self.gamma = None
        self.alpha = None
        self.zeta = None
        self.v = None

        self.proof = Proof()


def prove(a_vals, b_vals, c_vals, public_inputs, preprocessed, srs, rng=None):
    """5 라운드를 실행해 증명을 만든다.

    Args:
        a_vals, b_vals, c_vals: 길이 n의 배선 값 (FR)
        public_inputs: 공개 입력 (FR), 길이 preprocessed.num_public_inputs
        preprocessed: PreprocessedData
        srs: SRS
        rng: 블라인딩용 random.Random 호환 객체. None이면 SystemRandom.

    Raises:
        UnsatisfiedConstraints: 할당이 회로를 만족하지 않을 때 (Round 3)
        ValueError: 다항식 차수가 SRS 한도를 넘을 때
    """
    if rng is None:
        rng = random.SystemRandom()
    state = ProverState(a_vals, b_vals, c_vals, public_inputs, preprocessed,
                        srs, rng)

    round1.execute(state)
    round2.execute(state)
    round3.execute(state)
    round4.execute(state)
    round5.execute(state)

    return state.proof
