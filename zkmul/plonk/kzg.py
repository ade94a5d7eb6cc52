"""
KZG 커밋먼트
============

  commit(p)        = p(τ)·G1 = Σ cᵢ·[τⁱ]₁
  open_at(p, z)    = commit((p(x) - p(z)) / (x - z))

검증 쪽 페어링 검사는 verifier가 두 열기 증명을 묶어 한 번에 수행한다.
"""

from zkmul.plonk.field import FR, ec_mul, ec_add
from zkmul.plonk.polynomial import Polynomial, poly_div


def commit(poly, srs):
    """다항식을 SRS의 G1 거듭제곱으로 커밋한다.

    영 다항식의 커밋먼트는 무한원점(None)이다.

    Raises:
        ValueError: 차수가 srs.max_degree를 넘을 때
    """
    if poly.degree > srs.max_degree:
        raise ValueError(
            f"다항식 차수 {poly.degree}가 SRS 최대 차수 {srs.max_degree}를 초과합니다"
        )

    result = None
    for i, coeff in enumerate(poly.coeffs):
        if coeff == FR(0):
            continue
        result = ec_add(result, ec_mul(srs.g1_powers[i], coeff))
    return result


def open_at(poly, point, srs):
    """point에서의 열기 증명 π = [q(τ)]₁, q(x) = (p(x) - p(point)) / (x - point)."""
    quotient, remainder = poly_div(
        poly - Polynomial([poly.evaluate(point)]),
        Polynomial.linear_root(point),
    )
    if not remainder.is_zero():
        raise ValueError("열기 증명 생성 실패: 나머지가 0이 아닙니다")
    return commit(quotient, srs)
