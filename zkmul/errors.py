"""
증명 파이프라인 오류 분류
=========================

setup → index → prove → verify 각 단계가 던지는 예외 계층.

  ProofSystemError
  ├── MissingAssignment      제약 합성 시 필요한 값이 비어 있음
  ├── SizeExceeded           회로가 SRS 한도를 넘음 (index)
  ├── StageNotReady          수명주기 순서를 어긴 호출
  ├── InvalidParameters      잘못된 한도 / field 범위 밖 입력
  ├── PublicInputMismatch    공개 입력 개수가 인덱스와 다름
  └── CryptographicFailure   증명/검증 루틴 내부 실패
      └── UnsatisfiedConstraints

단계 함수는 예외를 던지고, Session의 one-shot 모드와 CLI/바인딩 어댑터가
이를 구조화된 실패 응답으로 바꾼다.
"""


class ProofSystemError(Exception):
    """모든 파이프라인 오류의 기반 클래스."""

    kind = "ProofSystemError"

    def to_dict(self):
        return {"error": self.kind, "message": str(self)}


class MissingAssignment(ProofSystemError):
    """PROVE 모드 합성 중 변수 값이 None이다."""

    kind = "MissingAssignment"


class SizeExceeded(ProofSystemError):
    """제약/변수/non-zero 개수가 SRS 한도를 넘었다."""

    kind = "SizeExceeded"


class StageNotReady(ProofSystemError):
    """선행 단계가 끝나지 않은 상태에서 호출되었다.

    Args:
        stage: 호출된 단계 이름
        required: 먼저 실행해야 하는 단계 이름
    """

    kind = "StageNotReady"

    def __init__(self, stage, required):
        self.stage = stage
        self.required = required
        super().__init__(f"{stage} 호출 전에 {required}를 먼저 실행해야 합니다")


class InvalidParameters(ProofSystemError, ValueError):
    """한도가 0 이하이거나 입력 정수가 field 범위를 벗어났다."""

    kind = "InvalidParameters"


class PublicInputMismatch(ProofSystemError):
    """verify에 넘긴 공개 입력 수가 인덱스된 회로와 다르다."""

    kind = "PublicInputMismatch"

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"공개 입력 개수 불일치: 기대 {expected}개, 입력 {actual}개"
        )


class CryptographicFailure(ProofSystemError):
    """증명 생성/검증 루틴 내부 실패 (잘못된 키, 손상된 증명 등)."""

    kind = "CryptographicFailure"


class UnsatisfiedConstraints(CryptographicFailure):
    """할당이 제약을 만족하지 않아 몫 다항식이 Z_H(x)로 나누어 떨어지지 않는다."""

    kind = "UnsatisfiedConstraints"
