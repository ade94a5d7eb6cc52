"""
Session: 파이프라인 상태 기계
==============================

  ┌───────────────┐ setup  ┌───────────┐ index ┌─────────┐ prove ┌────────┐ verify ┌──────────┐
  │ Uninitialized │ ─────▶ │ SetupDone │ ────▶ │ Indexed │ ────▶ │ Proved │ ─────▶ │ Verified │
  └───────────────┘        └───────────┘       └─────────┘       └────────┘        └──────────┘

각 상태 객체는 그 상태에서 유효한 산출물만 들고 있다. setup은 어느 상태에서나
부를 수 있고 하위 산출물을 버린다. index/prove/verify는 필요한 산출물이 없으면
StageNotReady를 던진다.

Session 하나는 random.Random(seed) 하나를 모든 단계에 넘긴다. 같은 seed로
같은 호출 순서를 밟으면 SRS, 키, 증명이 바이트 단위로 같다.

Session은 스레드 안전하지 않다. 여러 스레드가 공유할 때는 호출자가 잠근다
(zkmul.binding.ProofSystem 참고).
"""

import random

from zkmul import snark
from zkmul.config import DEFAULT_SEED, SetupBounds
from zkmul.errors import ProofSystemError, StageNotReady
from zkmul.log import get_logger


log = get_logger(__name__)


STAGES = ("setup", "index", "prove", "verify")


# ─────────────────────────────────────────────────────────────────────
# 상태
# ─────────────────────────────────────────────────────────────────────

class Uninitialized:
    name = "uninitialized"


class SetupDone:
    name = "setup_done"

    def __init__(self, srs):
        self.srs = srs


class Indexed:
    name = "indexed"

    def __init__(self, srs, pk, vk, info):
        self.srs = srs
        self.pk = pk
        self.vk = vk
        self.info = info


class Proved:
    name = "proved"

    def __init__(self, srs, pk, vk, info, proof, public_inputs):
        self.srs = srs
        self.pk = pk
        self.vk = vk
        self.info = info
        self.proof = proof
        self.public_inputs = public_inputs


class Verified:
    name = "verified"

    def __init__(self, srs, pk, vk, info, proof, public_inputs, is_valid):
        self.srs = srs
        self.pk = pk
        self.vk = vk
        self.info = info
        self.proof = proof
        self.public_inputs = public_inputs
        self.is_valid = is_valid


# ─────────────────────────────────────────────────────────────────────
# one-shot 결과
# ─────────────────────────────────────────────────────────────────────

class PipelineResult:
    """run_pipeline 결과.

    속성:
        timings: 끝난 단계의 {"setup_ms": ..., ...}
        info: IndexInfo (index 전에 실패하면 None)
        proof_generated: prove 성공 여부
        proof_size: 증명 바이트 수 (증명이 없으면 None)
        is_valid: verify 결과 (verify까지 못 가면 False)
        error: 실패한 단계의 ProofSystemError, 성공하면 None
        failed_stage: "setup" / "index" / "prove" / "verify" / None
    """

    def __init__(self):
        self.timings = {}
        self.info = None
        self.proof_generated = False
        self.proof_size = None
        self.is_valid = False
        self.error = None
        self.failed_stage = None

    @property
    def succeeded(self):
        return self.error is None

    def to_dict(self):
        return {
            "timings": dict(self.timings),
            "info": self.info.to_dict() if self.info else None,
            "proof_generated": self.proof_generated,
            "proof_size": self.proof_size,
            "is_valid": self.is_valid,
            "error": self.error.to_dict() if self.error else None,
            "failed_stage": self.failed_stage,
        }


# ─────────────────────────────────────────────────────────────────────
# Session
# ─────────────────────────────────────────────────────────────────────

class Session:

    def __init__(self, seed=DEFAULT_SEED):
        self.seed = seed
        self.rng = random.Random(seed)
        self.state = Uninitialized()
        self.timings = {}

    @property
    def stage(self):
        return self.state.name

    def _require(self, stage, attr, required):
        if not hasattr(self.state, attr):
            log.warning("stage.not_ready", stage=stage, state=self.stage,
                        required=required)
            raise StageNotReady(stage, required)
        return getattr(self.state, attr)

    def _record(self, stage, elapsed_ms):
        # 이 단계 이후의 시간은 더 이상 유효하지 않다
        position = STAGES.index(stage)
        for later in STAGES[position:]:
            self.timings.pop(f"{later}_ms", None)
        self.timings[f"{stage}_ms"] = elapsed_ms

    def setup(self, max_constraints=None, max_variables=None, max_non_zero=None):
        """범용 SRS를 만든다. 기존 산출물은 모두 버린다."""
        defaults = SetupBounds()
        bounds = (
            defaults.max_constraints if max_constraints is None else max_constraints,
            defaults.max_variables if max_variables is None else max_variables,
            defaults.max_non_zero if max_non_zero is None else max_non_zero,
        )
        log.info("setup.started", max_constraints=bounds[0],
                 max_variables=bounds[1], max_non_zero=bounds[2])
        try:
            srs, elapsed = snark.universal_setup(*bounds, self.rng)
        except ProofSystemError as e:
            log.error("setup.failed", error=e.kind, message=str(e))
            raise
        self.state = SetupDone(srs)
        self._record("setup", elapsed)
        log.info("setup.finished", setup_ms=elapsed, max_degree=srs.max_degree)
        return srs

    def index(self, circuit):
        """SRS 위에서 회로를 인덱스한다. IndexInfo를 돌려준다."""
        srs = self._require("index", "srs", "setup")
        log.info("index.started", circuit=circuit.name)
        try:
            (pk, vk), elapsed = snark.index(srs, circuit)
        except ProofSystemError as e:
            log.error("index.failed", error=e.kind, message=str(e))
            raise
        self.state = Indexed(srs, pk, vk, pk.info)
        self._record("index", elapsed)
        log.info("index.finished", index_ms=elapsed, **pk.info.to_dict())
        return pk.info

    def prove(self, circuit):
        """인덱스된 키로 증명을 만든다."""
        pk = self._require("prove", "pk", "index")
        log.info("prove.started", circuit=circuit.name)
        try:
            proof, elapsed = snark.prove(pk, circuit, self.rng)
        except ProofSystemError as e:
            log.error("prove.failed", error=e.kind, message=str(e))
            raise
        state = self.state
        self.state = Proved(state.srs, state.pk, state.vk, state.info, proof,
                            circuit.public_inputs())
        self._record("prove", elapsed)
        log.info("prove.finished", prove_ms=elapsed,
                 proof_size=snark.proof_size(proof))
        return proof

    def verify(self, public_inputs=None):
        """마지막 증명을 검증한다.

        Args:
            public_inputs: None이면 prove에 쓴 회로의 공개 입력
        """
        proof = self._require("verify", "proof", "prove")
        state = self.state
        if public_inputs is None:
            public_inputs = state.public_inputs
        log.info("verify.started", num_public_inputs=len(public_inputs))
        try:
            is_valid, elapsed = snark.verify(state.vk, public_inputs, proof,
                                             self.rng)
        except ProofSystemError as e:
            log.error("verify.failed", error=e.kind, message=str(e))
            raise
        self.state = Verified(state.srs, state.pk, state.vk, state.info, proof,
                              state.public_inputs, is_valid)
        self._record("verify", elapsed)
        log.info("verify.finished", verify_ms=elapsed, is_valid=is_valid)
        return is_valid

    def reset(self):
        """처음 상태로 되돌리고 같은 seed로 난수 생성기를 다시 만든다."""
        self.rng = random.Random(self.seed)
        self.state = Uninitialized()
        self.timings = {}
        log.info("session.reset", seed=self.seed)

    @classmethod
    def run_pipeline(cls, circuit, bounds=None, seed=DEFAULT_SEED,
                     public_inputs=None):
        """새 Session으로 네 단계를 한 번에 실행한다.

        실패는 예외 대신 결과에 담긴다. 산출물은 돌려주지 않는다.

        Args:
            circuit: 값이 모두 할당된 회로
            bounds: SetupBounds 또는 (C, V, N) 튜플. None이면 기본 한도.
            seed: 난수 생성기 seed
            public_inputs: verify에 넘길 공개 입력. None이면 회로 것.
        """
        if bounds is None:
            bounds = SetupBounds()
        if isinstance(bounds, SetupBounds):
            bounds = bounds.as_tuple()

        session = cls(seed)
        result = PipelineResult()
        steps = (
            ("setup", lambda: session.setup(*bounds)),
            ("index", lambda: session.index(circuit)),
            ("prove", lambda: session.prove(circuit)),
            ("verify", lambda: session.verify(public_inputs)),
        )
        for stage, step in steps:
            try:
                value = step()
            except ProofSystemError as e:
                result.error = e
                result.failed_stage = stage
                break
            if stage == "index":
                result.info = value
            elif stage == "prove":
                result.proof_generated = True
                result.proof_size = snark.proof_size(value)
            elif stage == "verify":
                result.is_valid = value

        result.timings = dict(session.timings)
        return result
