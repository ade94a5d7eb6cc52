"""
제약 진단 하네스
================

사용자가 주장한 곱 c가 실제 a·b와 같은지 두 가지 방법으로 판정한다.

  1. 산술 판정: a·b를 정수로 계산한 뒤 field로 올려 c와 비교한다.
  2. 암호학적 판정: DiagnosticCircuit(enforced = a·b, c = 주장값)으로
     setup → index → prove → verify를 돌린다.

c ≠ a·b이면 두 번째 제약 c·1 = r을 만족하는 할당이 없으므로
prove가 거부하거나(UnsatisfiedConstraints) verify가 false를 낸다.
두 판정이 일치하는지(verdicts_agree)가 이 하네스의 핵심 출력이다.
"""

from zkmul.circuits import DiagnosticCircuit
from zkmul.config import DEFAULT_SEED
from zkmul.log import get_logger
from zkmul.plonk.field import FR, to_field
from zkmul.session import Session


log = get_logger(__name__)


class ConstraintCheck:
    """산술 판정 결과."""

    def __init__(self, a, b, claimed, actual):
        self.a = a
        self.b = b
        self.claimed = claimed
        self.actual = actual
        # 곱은 정수로 계산한 뒤 mod p로 올린다
        self.is_valid = FR(actual) == to_field(claimed)

    @property
    def constraint(self):
        return f"{self.a} × {self.b} = {self.claimed}"

    def message(self):
        if self.is_valid:
            return "제약 검증 통과 - 곱셈 관계가 맞습니다"
        return (f"제약 검증 실패 - {self.a} × {self.b} = {self.actual}, "
                f"{self.claimed}와 다릅니다")

    def to_dict(self):
        return {
            "constraint": self.constraint,
            "actual_result": self.actual,
            "claimed_result": self.claimed,
            "is_valid": self.is_valid,
            "message": self.message(),
        }


class DiagnosticReport:
    """산술 판정 + 파이프라인 판정.

    rejection:
        "prove"  - 증명 생성 단계에서 거부됨
        "verify" - 증명은 나왔지만 검증이 false
        None     - 거부되지 않음 (검증 통과)
    """

    def __init__(self, check, pipeline):
        self.check = check
        self.pipeline = pipeline

    @property
    def is_constraint_correct(self):
        return self.check.is_valid

    @property
    def proof_generated(self):
        return self.pipeline.proof_generated

    @property
    def verification_passed(self):
        return self.pipeline.is_valid

    @property
    def timings(self):
        return self.pipeline.timings

    @property
    def rejection(self):
        if self.pipeline.failed_stage == "prove":
            return "prove"
        if self.pipeline.proof_generated and not self.pipeline.is_valid:
            return "verify"
        return None

    @property
    def reached_prove(self):
        """setup과 index를 통과해 암호학적 판정이 실제로 수행되었는지."""
        return self.pipeline.failed_stage not in ("setup", "index")

    @property
    def verdicts_agree(self):
        if not self.reached_prove:
            return False
        return self.is_constraint_correct == self.verification_passed

    def explanation(self):
        if self.is_constraint_correct:
            return "제약이 산술적으로 맞으므로 zkSNARK 증명이 통과해야 합니다"
        return "제약이 산술적으로 틀렸으므로 zkSNARK 증명이 실패해야 합니다"

    def to_dict(self):
        error = self.pipeline.error
        return {
            "constraint": self.check.constraint,
            "actual_result": self.check.actual,
            "claimed_result": self.check.claimed,
            "is_constraint_correct": self.is_constraint_correct,
            "proof_generated": self.proof_generated,
            "verification_passed": self.verification_passed,
            "rejection": self.rejection,
            "reached_prove": self.reached_prove,
            "verdicts_agree": self.verdicts_agree,
            "explanation": self.explanation(),
            "failed_stage": self.pipeline.failed_stage,
            "error": error.to_dict() if error else None,
            "timing": dict(self.timings),
        }


def check_constraint(a, b, claimed):
    """암호학 없이 a·b = claimed 여부만 본다.

    Raises:
        InvalidParameters: 음수/정수가 아닌 입력, 또는 field 범위 밖 값
    """
    for value in (a, b, claimed):
        to_field(value)
    return ConstraintCheck(a, b, claimed, a * b)


def test_constraint(a, b, claimed, bounds=None, seed=DEFAULT_SEED):
    """산술 판정과 진단 회로 파이프라인을 함께 돌린다.

    Raises:
        InvalidParameters: 입력이 잘못되었을 때 (파이프라인 실행 전)
    """
    check = check_constraint(a, b, claimed)
    circuit = DiagnosticCircuit(a=a, b=b, c=claimed, enforced=int(FR(check.actual)))
    pipeline = Session.run_pipeline(circuit, bounds, seed)
    report = DiagnosticReport(check, pipeline)
    log.info("diagnostic.finished", constraint=check.constraint,
             is_constraint_correct=report.is_constraint_correct,
             verification_passed=report.verification_passed,
             rejection=report.rejection,
             verdicts_agree=report.verdicts_agree)
    return report

