"""
Round 1: 배선 다항식 커밋
=========================

  1. 공개 입력을 트랜스크립트에 흡수하고 PI(x)를 만든다.
  2. a, b, c 배선 값을 IFFT로 보간한다.
  3. 블라인딩: a'(x) = a(x) + (r₁ + r₂·x)·Z_H(x)
     Z_H는 도메인 위에서 0이므로 배선 값은 그대로이고 도메인 밖 값만 가려진다.
  4. [a']₁, [b']₁, [c']₁ 커밋 후 트랜스크립트에 추가.
"""

from zkmul.plonk.field import FR, CURVE_ORDER
from zkmul.plonk.polynomial import Polynomial
from zkmul.plonk.kzg import commit
from zkmul.plonk.utils import public_input_polynomial


def execute(state):
    n = state.n
    omega = state.omega

    # ── 공개 입력 ──
    state.transcript.append_scalars(b"public_inputs", state.public_inputs)
    state.pi_poly = public_input_polynomial(state.public_inputs, n, omega)

    # ── 보간 + 블라인딩 ──
    zh = Polynomial.vanishing(n)
    state.a_poly = add_blinding(
        Polynomial.from_evaluations(state.a_vals, omega), zh, 2, state.rng)
    state.b_poly = add_blinding(
        Polynomial.from_evaluations(state.b_vals, omega), zh, 2, state.rng)
    state.c_poly = add_blinding(
        Polynomial.from_evaluations(state.c_vals, omega), zh, 2, state.rng)

    # ── 커밋 ──
    state.proof.a_comm = commit(state.a_poly, state.srs)
    state.proof.b_comm = commit(state.b_poly, state.srs)
    state.proof.c_comm = commit(state.c_poly, state.srs)

    state.transcript.append_point(b"a_comm", state.proof.a_comm)
    state.transcript.append_point(b"b_comm", state.proof.b_comm)
    state.transcript.append_point(b"c_comm", state.proof.c_comm)


def add_blinding(poly, zh, num_blinds, rng):
    """poly + (r₀ + r₁·x + ...)·Z_H(x), rᵢ는 rng에서 뽑은 FR."""
    blind = Polynomial([FR(rng.randrange(CURVE_ORDER)) for _ in range(num_blinds)])
    return poly + blind * zh
