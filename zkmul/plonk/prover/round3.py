"""
Round 3: 몫 다항식 t(x)
=======================

세 제약 항을 α로 묶어 C(x)를 만들고 Z_H(x)로 나눈다.

  게이트: q_L·a + q_R·b + q_O·c + q_M·a·b + q_C + PI
  순열:   α·[(a+βx+γ)(b+βK1x+γ)(c+βK2x+γ)·z(x)
             - (a+βS_σ1+γ)(b+βS_σ2+γ)(c+βS_σ3+γ)·z(ωx)]
  경계:   α²·(z(x) - 1)·L₀(x)

  t(x) = C(x) / Z_H(x)

나머지가 0이 아니면 배선 값이 회로(또는 공개 입력)를 만족하지 않는다는 뜻이고,
증명을 만들지 않고 UnsatisfiedConstraints를 던진다.

t의 차수는 약 3n+5이므로 t_lo, t_mid (n개 계수), t_hi (나머지)로 나눠 커밋한다.
"""

from zkmul.errors import UnsatisfiedConstraints
from zkmul.plonk.field import FR
from zkmul.plonk.polynomial import Polynomial, poly_div
from zkmul.plonk.kzg import commit
from zkmul.plonk.permutation import K1, K2
from zkmul.plonk.utils import lagrange_basis_polynomial


def execute(state):
    state.alpha = state.transcript.challenge_scalar(b"alpha")

    n = state.n
    alpha = state.alpha
    beta = state.beta
    gamma = Polynomial([state.gamma])
    pp = state.preprocessed

    a, b, c, z = state.a_poly, state.b_poly, state.c_poly, state.z_poly
    x_poly = Polynomial([FR(0), FR(1)])

    gate_term = (
        pp.q_l_poly * a
        + pp.q_r_poly * b
        + pp.q_o_poly * c
        + pp.q_m_poly * (a * b)
        + pp.q_c_poly
        + state.pi_poly
    )

    perm_num = (
        (a + x_poly * beta + gamma)
        * (b + x_poly * (beta * K1) + gamma)
        * (c + x_poly * (beta * K2) + gamma)
        * z
    )
    perm_den = (
        (a + pp.s_sigma1_poly * beta + gamma)
        * (b + pp.s_sigma2_poly * beta + gamma)
        * (c + pp.s_sigma3_poly * beta + gamma)
        * z.scale_argument(state.omega)
    )
    perm_term = (perm_num - perm_den) * alpha

    l0 = lagrange_basis_polynomial(0, n, state.omega)
    boundary_term = (z - Polynomial([FR(1)])) * l0 * (alpha * alpha)

    constraint = gate_term + perm_term + boundary_term

    t_poly, remainder = poly_div(constraint, Polynomial.vanishing(n))
    if not remainder.is_zero():
        raise UnsatisfiedConstraints(
            "제약 다항식이 Z_H(x)로 나누어 떨어지지 않습니다: "
            "할당이 회로 또는 공개 입력을 만족하지 않습니다"
        )

    # ── 3분할: t = t_lo + xⁿ·t_mid + x²ⁿ·t_hi ──
    t_coeffs = list(t_poly.coeffs)
    t_coeffs += [FR(0)] * max(0, 3 * n - len(t_coeffs))
    state.t_lo_poly = Polynomial(t_coeffs[:n])
    state.t_mid_poly = Polynomial(t_coeffs[n:2 * n])
    state.t_hi_poly = Polynomial(t_coeffs[2 * n:])

    state.proof.t_lo_comm = commit(state.t_lo_poly, state.srs)
    state.proof.t_mid_comm = commit(state.t_mid_poly, state.srs)
    state.proof.t_hi_comm = commit(state.t_hi_poly, state.srs)

    state.transcript.append_point(b"t_lo_comm", state.proof.t_lo_comm)
    state.transcript.append_point(b"t_mid_comm", state.proof.t_mid_comm)
    state.transcript.append_point(b"t_hi_comm", state.proof.t_hi_comm)
