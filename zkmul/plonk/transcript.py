"""
Fiat-Shamir 트랜스크립트
========================

Prover와 Verifier가 같은 순서로 공개 입력, 커밋먼트, 평가값을 흡수하면
같은 챌린지 β, γ, α, ζ, v, u가 나온다.

  공개 입력 → [a],[b],[c] → β,γ → [z] → α → [t_lo],[t_mid],[t_hi] → ζ
  → 평가값 6개 → v → u
"""

import hashlib

from zkmul.plonk.field import FR, CURVE_ORDER


class Transcript:
    """SHA-256 해시 체인. 모든 입력은 레이블과 함께 추가된다."""

    def __init__(self, label=b"zkmul-plonk"):
        self.state = bytearray()
        self.state.extend(label)

    def append_scalar(self, label, scalar):
        """FR을 32바이트 빅엔디안으로 추가한다."""
        self.state.extend(label)
        self.state.extend((int(scalar) % CURVE_ORDER).to_bytes(32, "big"))

    def append_scalars(self, label, scalars):
        """길이 접두사와 함께 FR 리스트를 추가한다 (공개 입력용)."""
        self.state.extend(label)
        self.state.extend(len(scalars).to_bytes(8, "big"))
        for scalar in scalars:
            self.state.extend((int(scalar) % CURVE_ORDER).to_bytes(32, "big"))

    def append_point(self, label, point):
        """G1 점 (x, y)를 추가한다. 무한원점은 64바이트 0."""
        self.state.extend(label)
        if point is None:
            self.state.extend(b"\x00" * 64)
        else:
            x, y = point
            self.state.extend(int(x).to_bytes(32, "big"))
            self.state.extend(int(y).to_bytes(32, "big"))

    def challenge_scalar(self, label):
        """현재 상태의 해시를 FR로 축소한다. 해시값은 상태에 다시 흡수된다."""
        self.state.extend(label)
        h = hashlib.sha256(bytes(self.state)).digest()
        self.state.extend(h)
        return FR(int.from_bytes(h, "big") % CURVE_ORDER)
