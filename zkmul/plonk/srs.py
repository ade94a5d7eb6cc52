"""
범용 SRS (Structured Reference String)
======================================

  g1_powers = [G1, τ·G1, τ²·G1, ..., τ^d·G1]
  g2_powers = [G2, τ·G2]

회로와 무관하게 한 번 만들고 차수 d 이하 다항식을 쓰는 모든 회로에 재사용한다.
τ는 호출자가 넘긴 난수 생성기에서 뽑고 반환 전에 버린다. 같은 seed의
random.Random을 넘기면 같은 SRS가 나오므로 재현 가능한 데모/테스트용이며,
보안이 필요한 곳에서는 호출자가 예측 불가능한 생성기를 넘겨야 한다.
"""

import random

from zkmul.plonk.field import FR, G1, G2, ec_mul, CURVE_ORDER


class SRS:
    """KZG 공개 파라미터.

    속성:
        g1_powers: 길이 max_degree + 1
        g2_powers: [G2, τ·G2]
        max_degree: 커밋 가능한 최대 차수
    """

    def __init__(self, g1_powers, g2_powers, max_degree):
        self.g1_powers = g1_powers
        self.g2_powers = g2_powers
        self.max_degree = max_degree

    @classmethod
    def generate(cls, max_degree, rng=None):
        """max_degree차까지 커밋할 수 있는 SRS를 만든다.

        Args:
            max_degree: 0 이상 정수
            rng: random.Random 호환 객체. None이면 SystemRandom.

        Raises:
            ValueError: max_degree가 음수일 때
        """
        if max_degree < 0:
            raise ValueError(f"max_degree는 0 이상이어야 합니다: {max_degree}")
        if rng is None:
            rng = random.SystemRandom()

        # toxic waste τ ∈ [1, p)
        tau = FR(rng.randrange(1, CURVE_ORDER))

        g1_powers = []
        tau_power = FR(1)
        for _ in range(max_degree + 1):
            g1_powers.append(ec_mul(G1, tau_power))
            tau_power = tau_power * tau

        g2_powers = [G2, ec_mul(G2, tau)]
        return cls(g1_powers, g2_powers, max_degree)
