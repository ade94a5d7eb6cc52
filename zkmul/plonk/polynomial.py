"""
FR 계수 다항식과 NTT
=====================

계수 표현 다항식 p(x) = c₀ + c₁x + ... 와 radix-2 FFT(NTT), 긴 나눗셈.

배선, 셀렉터, 순열 다항식은 도메인 H 위의 평가값에서 IFFT로 얻고,
몫 다항식 t(x)와 열기 증명 W(x)는 poly_div로 얻는다.
"""

from zkmul.plonk.field import FR


def _as_fr(value):
    return value if isinstance(value, FR) else FR(value)


# ─────────────────────────────────────────────────────────────────────
# Polynomial
# ─────────────────────────────────────────────────────────────────────

class Polynomial:
    """FR 위의 다항식. coeffs[i]는 xⁱ의 계수이며 최고차 0 계수는 잘라낸다.

    +, -, * (다항식 또는 스칼라), 단항 -, == 를 지원한다.
    """

    def __init__(self, coeffs=None):
        if not coeffs:
            self.coeffs = [FR(0)]
        else:
            self.coeffs = [_as_fr(c) for c in coeffs]
        self._trim()

    def _trim(self):
        while len(self.coeffs) > 1 and self.coeffs[-1] == FR(0):
            self.coeffs.pop()

    @property
    def degree(self):
        """차수. 영 다항식은 0으로 본다."""
        return len(self.coeffs) - 1

    def is_zero(self):
        return len(self.coeffs) == 1 and self.coeffs[0] == FR(0)

    def evaluate(self, point):
        """Horner 방식으로 p(point)를 계산한다."""
        point = _as_fr(point)
        result = FR(0)
        for coeff in reversed(self.coeffs):
            result = result * point + coeff
        return result

    def scale_argument(self, factor):
        """p(factor · x)의 계수 표현. cᵢ → factorⁱ · cᵢ.

        Round 3에서 z(ω·x)를 만들 때 쓴다.
        """
        factor = _as_fr(factor)
        coeffs = []
        power = FR(1)
        for coeff in self.coeffs:
            coeffs.append(coeff * power)
            power = power * factor
        return Polynomial(coeffs)

    def _combine(self, other, sign):
        if isinstance(other, (int, FR)):
            other = Polynomial([other])
        length = max(len(self.coeffs), len(other.coeffs))
        mine = self.coeffs + [FR(0)] * (length - len(self.coeffs))
        theirs = other.coeffs + [FR(0)] * (length - len(other.coeffs))
        if sign > 0:
            return Polynomial([a + b for a, b in zip(mine, theirs)])
        return Polynomial([a - b for a, b in zip(mine, theirs)])

    def __add__(self, other):
        return self._combine(other, 1)

    def __radd__(self, other):
        return self._combine(other, 1)

    def __sub__(self, other):
        return self._combine(other, -1)

    def __rsub__(self, other):
        return Polynomial([other])._combine(self, -1)

    def __neg__(self):
        return Polynomial([FR(0) - c for c in self.coeffs])

    def __mul__(self, other):
        if isinstance(other, (int, FR)):
            scalar = _as_fr(other)
            return Polynomial([c * scalar for c in self.coeffs])
        # 나이브 convolution, O(n·m)
        result = [FR(0)] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            if a == FR(0):
                continue
            for j, b in enumerate(other.coeffs):
                result[i + j] = result[i + j] + a * b
        return Polynomial(result)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __eq__(self, other):
        if isinstance(other, (int, FR)):
            other = Polynomial([other])
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.coeffs == other.coeffs

    def __hash__(self):
        return hash(tuple(int(c) for c in self.coeffs))

    def __len__(self):
        return len(self.coeffs)

    def __repr__(self):
        terms = []
        for i, c in enumerate(self.coeffs):
            if c == FR(0):
                continue
            if i == 0:
                terms.append(str(int(c)))
            elif i == 1:
                terms.append(f"{int(c)}*x")
            else:
                terms.append(f"{int(c)}*x^{i}")
        return "Poly(" + " + ".join(terms) + ")" if terms else "Poly(0)"

    @classmethod
    def zero(cls):
        return cls([FR(0)])

    @classmethod
    def vanishing(cls, n):
        """Z_H(x) = xⁿ - 1. 도메인 H의 모든 점에서 0이다."""
        coeffs = [FR(0)] * (n + 1)
        coeffs[0] = FR(-1)
        coeffs[n] = FR(1)
        return cls(coeffs)

    @classmethod
    def linear_root(cls, point):
        """(x - point)."""
        return cls([FR(0) - _as_fr(point), FR(1)])

    @classmethod
    def from_evaluations(cls, evals, omega):
        """H 위의 평가값 [p(1), p(ω), ...]을 보간한다 (IFFT)."""
        return cls(ifft(evals, omega))


# ─────────────────────────────────────────────────────────────────────
# NTT
# ─────────────────────────────────────────────────────────────────────

def fft(coeffs, omega):
    """계수 → [p(1), p(ω), ..., p(ω^{n-1})]. 재귀 Cooley-Tukey.

    len(coeffs)는 2의 거듭제곱이고 omega는 그 길이의 원시 단위근이어야 한다.
    """
    n = len(coeffs)
    if n == 1:
        return [_as_fr(coeffs[0])]

    omega_sq = omega * omega
    even_vals = fft(coeffs[0::2], omega_sq)
    odd_vals = fft(coeffs[1::2], omega_sq)

    half = n // 2
    result = [FR(0)] * n
    omega_k = FR(1)
    for k in range(half):
        t = omega_k * odd_vals[k]
        result[k] = even_vals[k] + t
        result[k + half] = even_vals[k] - t
        omega_k = omega_k * omega
    return result


def ifft(evals, omega):
    """평가값 → 계수. ω⁻¹로 fft 후 1/n을 곱한다."""
    coeffs = fft(evals, FR(1) / omega)
    n_inv = FR(1) / FR(len(evals))
    return [c * n_inv for c in coeffs]


# ─────────────────────────────────────────────────────────────────────
# 나눗셈
# ─────────────────────────────────────────────────────────────────────

def poly_div(a, b):
    """a(x) = b(x)·q(x) + r(x)를 만족하는 (q, r).

    Raises:
        ValueError: b가 영 다항식일 때
    """
    if b.is_zero():
        raise ValueError("0으로 나눌 수 없습니다")

    remainder = list(a.coeffs)
    divisor = b.coeffs
    deg_b = len(divisor) - 1
    deg_a = len(remainder) - 1
    if deg_a < deg_b:
        return Polynomial.zero(), Polynomial(remainder)

    quotient = [FR(0)] * (deg_a - deg_b + 1)
    lead_inv = FR(1) / divisor[-1]
    for i in range(deg_a - deg_b, -1, -1):
        coeff = remainder[i + deg_b] * lead_inv
        quotient[i] = coeff
        if coeff == FR(0):
            continue
        for j in range(deg_b + 1):
            remainder[i + j] = remainder[i + j] - coeff * divisor[j]

    return Polynomial(quotient), Polynomial(remainder[:deg_b] or [FR(0)])
