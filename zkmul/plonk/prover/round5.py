"""
Round 5: 선형화와 열기 증명
===========================

Round 4 평가값을 스칼라로 박아 C(x)를 커밋먼트의 선형결합으로 바꾼 r(x)를 만든다.
r(ζ) = C(ζ) = t(ζ)·Z_H(ζ) 이므로 Verifier는 r̄만 받고 t(ζ)를 복원한다.

  r(x) = ā·b̄·q_M(x) + ā·q_L(x) + b̄·q_R(x) + c̄·q_O(x) + q_C(x) + PI(ζ)
       + α·(ā+βζ+γ)(b̄+βK1ζ+γ)(c̄+βK2ζ+γ)·z(x)
       - α·(ā+βs̄1+γ)(b̄+βs̄2+γ)·β·z̄ω·S_σ3(x)
       - α·(ā+βs̄1+γ)(b̄+βs̄2+γ)·(c̄+γ)·z̄ω
       + α²·L₀(ζ)·(z(x) - 1)

열기 증명:
  W_ζ  = open(t_comb + v·r + v²·a + v³·b + v⁴·c + v⁵·S_σ1 + v⁶·S_σ2, ζ)
  W_ζω = open(z, ζ·ω)
"""

from zkmul.plonk.field import FR
from zkmul.plonk.polynomial import Polynomial
from zkmul.plonk.kzg import open_at
from zkmul.plonk.permutation import K1, K2
from zkmul.plonk.utils import lagrange_basis_eval


def execute(state):
    state.v = state.transcript.challenge_scalar(b"v")
    v = state.v

    n = state.n
    zeta = state.zeta
    alpha = state.alpha
    beta = state.beta
    gamma = state.gamma
    pp = state.preprocessed
    proof = state.proof

    a_eval = proof.a_eval
    b_eval = proof.b_eval
    c_eval = proof.c_eval

    pi_zeta = state.pi_poly.evaluate(zeta)
    l0_zeta = lagrange_basis_eval(0, n, state.omega, zeta)

    # ── 게이트 ──
    r_poly = (
        pp.q_m_poly * (a_eval * b_eval)
        + pp.q_l_poly * a_eval
        + pp.q_r_poly * b_eval
        + pp.q_o_poly * c_eval
        + pp.q_c_poly
        + Polynomial([pi_zeta])
    )

    # ── 순열 ──
    perm_z_scalar = (
        alpha
        * (a_eval + beta * zeta + gamma)
        * (b_eval + beta * K1 * zeta + gamma)
        * (c_eval + beta * K2 * zeta + gamma)
    )
    ab_factor = (
        (a_eval + beta * proof.s_sigma1_eval + gamma)
        * (b_eval + beta * proof.s_sigma2_eval + gamma)
    )
    perm_s3_scalar = alpha * ab_factor * beta * proof.z_omega_eval
    perm_const = FR(0) - alpha * ab_factor * proof.z_omega_eval * (c_eval + gamma)

    r_poly = r_poly + state.z_poly * perm_z_scalar
    r_poly = r_poly - pp.s_sigma3_poly * perm_s3_scalar
    r_poly = r_poly + Polynomial([perm_const])

    # ── 경계 ──
    boundary = alpha * alpha * l0_zeta
    r_poly = r_poly + state.z_poly * boundary - Polynomial([boundary])

    proof.r_eval = r_poly.evaluate(zeta)

    # ── 일괄 열기 ──
    zeta_n = zeta ** n
    batched = (
        state.t_lo_poly
        + state.t_mid_poly * zeta_n
        + state.t_hi_poly * (zeta_n * zeta_n)
    )
    v_power = FR(1)
    for poly in (r_poly, state.a_poly, state.b_poly, state.c_poly,
                 pp.s_sigma1_poly, pp.s_sigma2_poly):
        v_power = v_power * v
        batched = batched + poly * v_power

    proof.W_zeta_comm = open_at(batched, zeta, state.srs)
    proof.W_zeta_omega_comm = open_at(state.z_poly, zeta * state.omega, state.srs)
