"""
바인딩 어댑터
=============

Session 하나를 감싼 상태 객체. 스크립트 환경(HTTP 서버, 노트북 등)에서
단계별 호출을 그대로 노출한다.

    >>> ps = ProofSystem(seed=0)
    >>> ps.universal_setup()["success"]
    True
    >>> ps.index_circuit("multiplication", 3, 5, 15)["num_constraints"]
    1
    >>> ps.generate_proof(3, 5, 15)["proof_size"]
    800
    >>> ps.verify_proof(15)["is_valid"]
    True

모든 메서드는 JSON으로 바로 내보낼 수 있는 dict를 돌려준다. 실패는 예외가
아니라 success: False와 message로 표현한다. 호출은 threading.Lock으로
직렬화된다.
"""

import functools
import threading

from zkmul import diagnostic, snark
from zkmul.circuits import MultiplicationCircuit
from zkmul.config import DEFAULT_SEED, SetupBounds
from zkmul.errors import InvalidParameters, ProofSystemError
from zkmul.serializers import (
    deserialize_fr, deserialize_proof, deserialize_vk, pk_to_bytes,
    proof_to_bytes, serialize_fr, serialize_pk, serialize_proof, serialize_srs,
    serialize_vk, srs_to_bytes, vk_to_bytes,
)
from zkmul.session import Session


def _failure(message, error, **fields):
    result = {"success": False, "message": f"{message}: {error}"}
    result["error"] = error.kind
    result.update(fields)
    return result


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class ProofSystem:
    """Session 위의 스레드 안전한 단계별 인터페이스."""

    def __init__(self, seed=DEFAULT_SEED, bounds=None):
        self.bounds = bounds if bounds is not None else SetupBounds()
        self.session = Session(seed)
        self.circuit_name = None
        self._lock = threading.Lock()

    @property
    def seed(self):
        return self.session.seed

    # ─── 단계별 호출 ───

    @_locked
    def universal_setup(self, max_constraints=None, max_variables=None,
                        max_non_zero=None):
        bounds = (
            self.bounds.max_constraints if max_constraints is None else max_constraints,
            self.bounds.max_variables if max_variables is None else max_variables,
            self.bounds.max_non_zero if max_non_zero is None else max_non_zero,
        )
        try:
            srs = self.session.setup(*bounds)
        except ProofSystemError as e:
            return _failure("범용 설정 실패", e, setup_time=0)
        self.circuit_name = None
        return {
            "success": True,
            "message": f"범용 설정 완료 (최대 차수 {srs.max_degree})",
            "max_degree": srs.max_degree,
            "setup_time": self.session.timings["setup_ms"],
        }

    @_locked
    def index_circuit(self, name, a=None, b=None, c=None):
        circuit = MultiplicationCircuit(a, b, c)
        try:
            info = self.session.index(circuit)
        except ProofSystemError as e:
            return _failure("회로 인덱싱 실패", e, index_time=0)
        self.circuit_name = name
        return {
            "success": True,
            "message": f"회로 '{name}' 인덱싱 완료",
            "num_constraints": info.num_constraints,
            "num_variables": info.num_variables,
            "num_non_zero": info.num_non_zero,
            "domain_size": info.domain_size,
            "index_time": self.session.timings["index_ms"],
        }

    @_locked
    def generate_proof(self, a, b, c):
        circuit = MultiplicationCircuit(a, b, c)
        try:
            proof = self.session.prove(circuit)
        except ProofSystemError as e:
            return _failure("증명 생성 실패", e, proof_time=0)
        return {
            "success": True,
            "message": f"{circuit.describe()} 증명 생성 완료",
            "proof_size": snark.proof_size(proof),
            "proof_time": self.session.timings["prove_ms"],
        }

    @_locked
    def verify_proof(self, c):
        try:
            is_valid = self.session.verify([c])
        except ProofSystemError as e:
            return _failure("증명 검증 실패", e, is_valid=False, verify_time=0)
        if is_valid:
            message = "증명 검증 성공 - 제약이 만족됩니다"
        else:
            message = "증명 검증 실패 - 제약이 만족되지 않습니다"
        return {
            "success": True,
            "message": message,
            "is_valid": is_valid,
            "verify_time": self.session.timings["verify_ms"],
        }

    @_locked
    def reset(self):
        self.session.reset()
        self.circuit_name = None
        return {"success": True, "message": "세션을 초기화했습니다"}

    @_locked
    def state(self):
        return {
            "success": True,
            "stage": self.session.stage,
            "seed": self.session.seed,
            "circuit_name": self.circuit_name,
            "timings": dict(self.session.timings),
        }

    @_locked
    def artifacts(self):
        """현재 상태의 산출물을 JSON용 dict로 내보낸다. 없는 항목은 None."""
        state = self.session.state
        srs = getattr(state, "srs", None)
        pk = getattr(state, "pk", None)
        vk = getattr(state, "vk", None)
        proof = getattr(state, "proof", None)
        public_inputs = getattr(state, "public_inputs", None)
        return {
            "success": True,
            "stage": self.session.stage,
            "srs": serialize_srs(srs.srs) if srs is not None else None,
            "proving_key": serialize_pk(pk) if pk is not None else None,
            "verifying_key": serialize_vk(vk) if vk is not None else None,
            "proof": serialize_proof(proof) if proof is not None else None,
            "public_inputs": (
                [serialize_fr(x) for x in public_inputs]
                if public_inputs is not None else None
            ),
            "sizes": {
                "srs": len(srs_to_bytes(srs.srs)) if srs is not None else None,
                "proving_key": len(pk_to_bytes(pk)) if pk is not None else None,
                "verifying_key": len(vk_to_bytes(vk)) if vk is not None else None,
                "proof": len(proof_to_bytes(proof)) if proof is not None else None,
            },
        }

    @_locked
    def verify_artifacts(self, data):
        """artifacts()가 내보낸 dict만으로 증명을 다시 검증한다.

        verifying_key, proof, public_inputs 세 항목을 쓰며 세션 상태는
        바뀌지 않는다. 곡선 밖의 점이나 깨진 형식은 InvalidParameters로
        보고한다.
        """
        try:
            vk = deserialize_vk(data["verifying_key"])
            proof = deserialize_proof(data["proof"])
            public_inputs = [deserialize_fr(x) for x in data["public_inputs"]]
        except (KeyError, TypeError, ValueError) as e:
            return _failure("산출물 형식 오류", InvalidParameters(str(e)),
                            is_valid=False)
        try:
            timed = snark.verify(vk, public_inputs, proof)
        except ProofSystemError as e:
            return _failure("증명 검증 실패", e, is_valid=False)
        return {
            "success": True,
            "message": "증명 검증 성공" if timed.value else "증명 검증 실패",
            "is_valid": timed.value,
            "verify_time": timed.elapsed_ms,
        }

    # ─── one-shot 호출 (세션 상태를 건드리지 않는다) ───

    @_locked
    def full_demo(self, a, b, c):
        """표준 곱셈 회로로 네 단계를 한 번에 실행한다."""
        try:
            check = diagnostic.check_constraint(a, b, c)
        except ProofSystemError as e:
            return _failure("입력 오류", e, demo_complete=False)
        circuit = MultiplicationCircuit(a, b, c)
        result = Session.run_pipeline(circuit, self.bounds, self.seed)
        report = {
            "demo_complete": result.succeeded,
            "success": result.succeeded,
            "constraint": check.constraint,
            "is_constraint_satisfied": check.is_valid,
            "proof_generated": result.proof_generated,
            "proof_verification": result.is_valid,
            "proof_size": result.proof_size,
            "failed_stage": result.failed_stage,
            "timing": dict(result.timings),
        }
        if result.error is not None:
            report["message"] = f"{result.failed_stage} 단계 실패: {result.error}"
            report["error"] = result.error.kind
        else:
            report["message"] = "데모 완료"
        return report

    @_locked
    def test_constraint(self, a, b, c):
        """진단 회로로 산술 판정과 암호학적 판정을 비교한다."""
        try:
            report = diagnostic.test_constraint(a, b, c, self.bounds, self.seed)
        except ProofSystemError as e:
            return _failure("입력 오류", e, test_complete=False)
        pipeline = report.pipeline
        if not report.reached_prove:
            return _failure(f"{pipeline.failed_stage} 단계 실패", pipeline.error,
                            test_complete=False,
                            failed_stage=pipeline.failed_stage,
                            is_constraint_correct=report.is_constraint_correct,
                            verdicts_agree=False)
        result = report.to_dict()
        result["test_complete"] = True
        result["success"] = True
        return result

    @_locked
    def verify_constraint(self, a, b, c):
        """암호학 없이 산술 판정만 한다."""
        try:
            check = diagnostic.check_constraint(a, b, c)
        except ProofSystemError as e:
            return _failure("입력 오류", e, verification_complete=False)
        result = check.to_dict()
        result["verification_complete"] = True
        result["success"] = True
        return result
