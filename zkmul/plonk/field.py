"""
스칼라 필드와 bn128 곡선 연산
==============================

증명 시스템 전체가 쓰는 대수 도구를 한곳에 모은다.

**FR**: bn128 스칼라 필드. 회로 변수, 셀렉터, 다항식 계수, 챌린지 모두 FR 원소다.
  p - 1 = 2^28 · m 이므로 2^28 이하 크기의 곱셈 부분군(평가 도메인)을 만들 수 있다.

**사용자 입력 올리기 (to_field)**:
  CLI/바인딩으로 들어오는 부호 없는 정수는 FR로 올리기 전에 범위를 확인한다.
  음수나 p 이상 값은 조용히 mod p 되지 않고 InvalidParameters가 된다.

**곡선 연산**: KZG 커밋과 페어링 검사용 G1/G2 스칼라곱, 덧셈, 부호 반전.
  py_ecc는 무한원점을 None으로 표현한다.

    >>> from zkmul.plonk.field import FR, to_field
    >>> to_field(3) * to_field(5) == FR(15)
    True
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128

from zkmul.errors import InvalidParameters


# ─────────────────────────────────────────────────────────────────────
# 스칼라 필드 FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128.curve_order 위의 유한체 원소."""
    field_modulus = bn128.curve_order


CURVE_ORDER = bn128.curve_order

# FR에서 -1
MINUS_ONE = FR(CURVE_ORDER - 1)


def to_field(value):
    """부호 없는 정수를 FR로 올린다.

    Args:
        value: 0 이상 CURVE_ORDER 미만의 int, 또는 이미 FR인 값

    Returns:
        FR

    Raises:
        InvalidParameters: 정수가 아니거나 범위를 벗어날 때
    """
    if isinstance(value, FR):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameters(f"정수 입력이 필요합니다: {value!r}")
    if value < 0:
        raise InvalidParameters(f"음수는 field 값으로 쓸 수 없습니다: {value}")
    if value >= CURVE_ORDER:
        raise InvalidParameters(
            f"입력 {value}가 field 위수 {CURVE_ORDER} 이상입니다"
        )
    return FR(value)


# ─────────────────────────────────────────────────────────────────────
# 곡선 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

G1 = bn128.G1
G2 = bn128.G2


def ec_mul(point, scalar):
    """scalar · point. 무한원점(None)은 그대로 돌려준다."""
    if point is None:
        return None
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return bn128.multiply(point, scalar % CURVE_ORDER)


def ec_add(p1, p2):
    return bn128.add(p1, p2)


def ec_neg(point):
    return bn128.neg(point)


def ec_pairing(g2_point, g1_point):
    """e(g1_point, g2_point). py_ecc 인자 순서는 (G2, G1)이다."""
    return bn128.pairing(g2_point, g1_point)


def is_g1_point(point):
    """G1 위의 유효한 점(또는 무한원점)인지 확인한다."""
    if point is None:
        return True
    if not isinstance(point, tuple) or len(point) != 2:
        return False
    if not all(isinstance(coord, bn128.FQ) for coord in point):
        return False
    return bn128.is_on_curve(point, bn128.b)


# ─────────────────────────────────────────────────────────────────────
# 단위근
# ─────────────────────────────────────────────────────────────────────

def get_root_of_unity(n):
    """n차 원시 단위근 ω = 5^((p-1)/n).

    Raises:
        ValueError: n이 2의 거듭제곱이 아니거나 2^28을 넘을 때
    """
    if n < 1 or (n & (n - 1)) != 0:
        raise ValueError(f"n은 2의 거듭제곱이어야 합니다: {n}")
    if n > (1 << 28):
        raise ValueError(f"n은 2^28 이하여야 합니다: {n}")
    if n == 1:
        return FR(1)
    return FR(5) ** ((CURVE_ORDER - 1) // n)


def get_roots_of_unity(n):
    """평가 도메인 H = [1, ω, ω², ..., ω^(n-1)]."""
    omega = get_root_of_unity(n)
    roots = [FR(1)]
    for _ in range(n - 1):
        roots.append(roots[-1] * omega)
    return roots
