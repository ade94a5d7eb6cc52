"""
도메인 위 평가 헬퍼
===================

Verifier가 다항식 전체 없이 ζ에서 바로 계산하는 값들과,
Prover가 쓰는 공개 입력 다항식 PI(x).

공개 입력 게이트는 q_O = 1 이므로 c + PI(ωⁱ) = 0 이 되도록 PI(ωⁱ) = -xᵢ 로 둔다.
"""

from zkmul.plonk.field import FR
from zkmul.plonk.polynomial import Polynomial


def vanishing_poly_eval(n, zeta):
    """Z_H(ζ) = ζⁿ - 1."""
    return zeta ** n - FR(1)


def lagrange_basis_eval(i, n, omega, zeta):
    """L_i(ζ) = (ωⁱ / n) · (ζⁿ - 1) / (ζ - ωⁱ).

    ζ가 도메인 점 ωⁱ와 같으면 1, 다른 도메인 점이면 0.
    """
    zeta = zeta if isinstance(zeta, FR) else FR(zeta)
    omega_i = omega ** i
    denominator = zeta - omega_i
    if denominator == FR(0):
        return FR(1)
    zh_zeta = vanishing_poly_eval(n, zeta)
    return zh_zeta * omega_i / (FR(n) * denominator)


def lagrange_basis_polynomial(i, n, omega):
    """L_i(x)의 계수 표현 (δ_i 평가값의 IFFT)."""
    evals = [FR(0)] * n
    evals[i] = FR(1)
    return Polynomial.from_evaluations(evals, omega)


def public_input_polynomial(pub_inputs, n, omega):
    """PI(x) = -Σ xᵢ·L_i(x)."""
    if not pub_inputs:
        return Polynomial.zero()
    evals = [FR(0)] * n
    for i, val in enumerate(pub_inputs):
        evals[i] = FR(0) - (val if isinstance(val, FR) else FR(val))
    return Polynomial.from_evaluations(evals, omega)


def public_input_poly_eval(pub_inputs, n, omega, zeta):
    """PI(ζ)를 Lagrange 기저 평가값만으로 계산한다."""
    result = FR(0)
    for i, val in enumerate(pub_inputs):
        val = val if isinstance(val, FR) else FR(val)
        result = result - val * lagrange_basis_eval(i, n, omega, zeta)
    return result


def next_power_of_2(n):
    """n 이상의 가장 작은 2의 거듭제곱 (n ≤ 1이면 1)."""
    p = 1
    while p < n:
        p <<= 1
    return p
