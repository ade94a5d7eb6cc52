"""
증명 시스템 파사드
==================

R1CS 회로를 받아 PLONK 백엔드로 네 단계를 수행한다.

  universal_setup(한도, rng)  →  UniversalSRS
  index(srs, circuit)          →  (ProvingKey, VerifyingKey)
  prove(pk, circuit, rng)      →  Proof
  verify(vk, 공개입력, proof)  →  bool

모든 함수는 Timed(value, elapsed_ms)를 돌려주고, 백엔드의 ValueError 등은
zkmul.errors의 분류로 바꿔 던진다.

SRS 크기:
  한도 (C, V, N)인 R1CS는 변환 후 gate_bound(C, V, N)행을 넘지 않는다.
  도메인 n_max = 2^⌈log₂ gate_bound⌉ 이고 몫 다항식 조각 t_hi의 차수가
  n+5까지 올라가므로 SRS 최대 차수는 n_max + 5다.
"""

import collections
import time

from zkmul.arithmetization import (
    compile_constraint_system, domain_size_for, gate_bound,
)
from zkmul.errors import (
    CryptographicFailure, InvalidParameters, PublicInputMismatch, SizeExceeded,
    UnsatisfiedConstraints,
)
from zkmul.plonk.field import to_field
from zkmul.plonk.preprocessor import (
    circuit_digest, extract_verifying_key, preprocess,
)
from zkmul.plonk.prover import prove as plonk_prove
from zkmul.plonk.srs import SRS
from zkmul.plonk.verifier import verify as plonk_verify
from zkmul.r1cs import ConstraintSystem, SynthesisMode
from zkmul.serializers import proof_to_bytes


# 몫 다항식 조각의 최대 차수 여유 (t_hi: n+5)
QUOTIENT_DEGREE_SLACK = 5


Timed = collections.namedtuple("Timed", ["value", "elapsed_ms"])


def _elapsed_ms(start):
    return round((time.perf_counter() - start) * 1000, 3)


class UniversalSRS:
    """한도 세 개와 그에 맞춘 KZG SRS."""

    def __init__(self, srs, max_constraints, max_variables, max_non_zero):
        self.srs = srs
        self.max_constraints = max_constraints
        self.max_variables = max_variables
        self.max_non_zero = max_non_zero

    @property
    def max_degree(self):
        return self.srs.max_degree

    @property
    def max_gates(self):
        return gate_bound(self.max_constraints, self.max_variables,
                          self.max_non_zero)

    @property
    def max_domain_size(self):
        return domain_size_for(self.max_gates)


class IndexInfo:
    """인덱스된 회로의 크기 정보."""

    def __init__(self, num_constraints, num_instance_variables,
                 num_witness_variables, num_non_zero, num_gates, domain_size):
        self.num_constraints = num_constraints
        self.num_instance_variables = num_instance_variables
        self.num_witness_variables = num_witness_variables
        self.num_non_zero = num_non_zero
        self.num_gates = num_gates
        self.domain_size = domain_size

    @property
    def num_variables(self):
        return self.num_instance_variables + self.num_witness_variables

    @property
    def num_public_inputs(self):
        """상수 1을 뺀 공개 입력 수."""
        return self.num_instance_variables - 1

    def to_dict(self):
        return {
            "num_constraints": self.num_constraints,
            "num_variables": self.num_variables,
            "num_instance_variables": self.num_instance_variables,
            "num_witness_variables": self.num_witness_variables,
            "num_non_zero": self.num_non_zero,
            "num_gates": self.num_gates,
            "domain_size": self.domain_size,
        }


class ProvingKey:
    """전처리 데이터 + SRS + 인덱스 정보."""

    def __init__(self, preprocessed, srs, info):
        self.preprocessed = preprocessed
        self.srs = srs
        self.info = info

    @property
    def digest(self):
        return self.preprocessed.digest


def _synthesize(circuit, mode):
    cs = ConstraintSystem(mode)
    circuit.generate_constraints(cs)
    return cs


# ─────────────────────────────────────────────────────────────────────
# universal_setup
# ─────────────────────────────────────────────────────────────────────

def universal_setup(max_constraints, max_variables, max_non_zero, rng):
    """한도 안의 모든 회로가 쓸 수 있는 SRS를 만든다.

    Raises:
        InvalidParameters: 한도가 1 미만이거나 정수가 아닐 때
    """
    bounds = (max_constraints, max_variables, max_non_zero)
    for name, value in zip(("max_constraints", "max_variables", "max_non_zero"),
                           bounds):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise InvalidParameters(f"{name}는 1 이상의 정수여야 합니다: {value!r}")

    start = time.perf_counter()
    n_max = domain_size_for(gate_bound(*bounds))
    srs = SRS.generate(n_max + QUOTIENT_DEGREE_SLACK, rng)
    return Timed(UniversalSRS(srs, *bounds), _elapsed_ms(start))


# ─────────────────────────────────────────────────────────────────────
# index
# ─────────────────────────────────────────────────────────────────────

def index(universal_srs, circuit):
    """회로 구조를 전처리해 키 쌍을 만든다. 값은 쓰지 않는다.

    Returns:
        Timed((ProvingKey, VerifyingKey), ms). 정보는 pk.info.

    Raises:
        SizeExceeded: 제약/변수/non-zero/게이트 수가 한도를 넘을 때
        CryptographicFailure: 커밋 실패
    """
    start = time.perf_counter()
    cs = _synthesize(circuit, SynthesisMode.SETUP)

    checks = (
        ("제약", cs.num_constraints, universal_srs.max_constraints),
        ("변수", cs.num_variables, universal_srs.max_variables),
        ("non-zero 항", cs.num_non_zero, universal_srs.max_non_zero),
    )
    for what, actual, limit in checks:
        if actual > limit:
            raise SizeExceeded(f"{what} 수 {actual}개가 SRS 한도 {limit}개를 넘습니다")

    compiled = compile_constraint_system(cs)
    if compiled.domain_size > universal_srs.max_domain_size:
        raise SizeExceeded(
            f"도메인 크기 {compiled.domain_size}가 SRS 한도 "
            f"{universal_srs.max_domain_size}를 넘습니다"
        )

    try:
        preprocessed = preprocess(compiled.circuit, universal_srs.srs)
    except ValueError as e:
        raise CryptographicFailure(f"전처리 실패: {e}") from e

    info = IndexInfo(
        num_constraints=cs.num_constraints,
        num_instance_variables=cs.num_instance_variables,
        num_witness_variables=cs.num_witness_variables,
        num_non_zero=cs.num_non_zero,
        num_gates=compiled.num_gates,
        domain_size=compiled.domain_size,
    )
    pk = ProvingKey(preprocessed, universal_srs.srs, info)
    vk = extract_verifying_key(preprocessed, universal_srs.srs)
    return Timed((pk, vk), _elapsed_ms(start))


# ─────────────────────────────────────────────────────────────────────
# prove
# ─────────────────────────────────────────────────────────────────────

def prove(pk, circuit, rng):
    """값이 모두 할당된 회로로 증명을 만든다.

    Raises:
        MissingAssignment: 값이 비어 있을 때
        CryptographicFailure: 회로 구조가 인덱스된 것과 다를 때
        UnsatisfiedConstraints: 할당이 제약을 만족하지 않을 때
    """
    start = time.perf_counter()
    cs = _synthesize(circuit, SynthesisMode.PROVE)
    compiled = compile_constraint_system(cs)

    digest = circuit_digest(compiled.circuit,
                            compiled.circuit.build_copy_constraints())
    if digest != pk.digest:
        raise CryptographicFailure("회로 구조가 인덱스된 회로와 다릅니다")

    try:
        proof = plonk_prove(
            compiled.a_vals, compiled.b_vals, compiled.c_vals,
            compiled.public_inputs, pk.preprocessed, pk.srs, rng,
        )
    except UnsatisfiedConstraints as e:
        row = compiled.circuit.check_assignment(
            compiled.a_vals, compiled.b_vals, compiled.c_vals,
            compiled.public_inputs,
        )
        if row is None:
            raise
        raise UnsatisfiedConstraints(f"{e} (게이트 {row})") from e
    except ValueError as e:
        raise CryptographicFailure(f"증명 생성 실패: {e}") from e
    return Timed(proof, _elapsed_ms(start))


# ─────────────────────────────────────────────────────────────────────
# verify
# ─────────────────────────────────────────────────────────────────────

def verify(vk, public_inputs, proof, rng=None):
    """증명을 검증한다.

    rng는 다른 단계와 호출 형태를 맞추기 위한 인자이며 쓰지 않는다
    (PLONK 검증은 트랜스크립트만으로 챌린지를 정한다).

    Raises:
        PublicInputMismatch: 공개 입력 수가 다를 때
        InvalidParameters: 공개 입력이 field 범위 밖일 때
        CryptographicFailure: 증명 형식이 잘못되었을 때
    """
    start = time.perf_counter()
    if len(public_inputs) != vk.num_public_inputs:
        raise PublicInputMismatch(vk.num_public_inputs, len(public_inputs))
    inputs = [to_field(x) for x in public_inputs]

    try:
        is_valid = plonk_verify(proof, inputs, vk)
    except ValueError as e:
        raise CryptographicFailure(f"검증 실패: {e}") from e
    return Timed(is_valid, _elapsed_ms(start))


def proof_size(proof):
    """정규 인코딩 기준 증명 바이트 수."""
    return len(proof_to_bytes(proof))
