"""
zkmul JSON API Blueprint
========================

ProofSystem의 단계별 호출을 HTTP로 노출한다.

  POST /api/universal-setup     {max_constraints?, max_variables?, max_non_zero?}
  POST /api/index               {name?, a?, b?, c?}
  POST /api/prove               {a, b, c}
  POST /api/verify              {c}
  POST /api/full-demo           {a, b, c}
  POST /api/test-constraint     {a, b, c}
  POST /api/verify-constraint   {a, b, c}
  POST /api/verify-artifacts    {verifying_key, proof, public_inputs}
  POST /api/reset
  GET  /api/state
  GET  /api/artifacts           현재 SRS/키/증명 (직렬화)
  GET  /api/health

단계 결과는 메모리 TinyDB에 "api.<단계>.result" 키로 남긴다.
앞 단계를 다시 실행하면 하위 단계 결과를 지운다.
"""

from flask import Blueprint, jsonify, request
from tinydb import Query

from zkmul.log import get_logger


api_bp = Blueprint("api", __name__, url_prefix="/api")

DATA = Query()

log = get_logger(__name__)

# app.py에서 주입
DB = None
PROOF_SYSTEM = None


def init_api_bp(db, proof_system):
    """app.py에서 DB와 ProofSystem을 주입받는다."""
    global DB, PROOF_SYSTEM
    DB = db
    PROOF_SYSTEM = proof_system


# ─── DB 헬퍼 ───

def db_get(key):
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_remove_prefix(prefix):
    """prefix로 시작하는 모든 키를 삭제한다."""
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


STAGE_KEYS = ("setup", "index", "prove", "verify")


def _store_stage(stage, result):
    """단계 결과를 저장하고 하위 단계 결과를 지운다."""
    for later in STAGE_KEYS[STAGE_KEYS.index(stage) + 1:]:
        db_remove_prefix(f"api.{later}.")
    db_set(f"api.{stage}.result", result)


# ─── 요청 파싱 ───

class BadRequest(Exception):
    pass


@api_bp.errorhandler(BadRequest)
def _bad_request(error):
    log.warning("api.bad_request", path=request.path, message=str(error))
    return jsonify({"success": False, "message": str(error)}), 400


def _body():
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise BadRequest("요청 본문은 JSON 객체여야 합니다")
    return body


def _int_field(body, name, required=True):
    value = body.get(name)
    if value is None:
        if required:
            raise BadRequest(f"'{name}' 필드가 필요합니다")
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise BadRequest(f"'{name}'는 정수여야 합니다: {value!r}")
    return value


def _abc(body):
    return (_int_field(body, "a"), _int_field(body, "b"), _int_field(body, "c"))


# ──────────────────────────────────────────────────────────────
# 단계별 호출
# ──────────────────────────────────────────────────────────────

@api_bp.route("/universal-setup", methods=["POST"])
def universal_setup():
    body = _body()
    result = PROOF_SYSTEM.universal_setup(
        _int_field(body, "max_constraints", required=False),
        _int_field(body, "max_variables", required=False),
        _int_field(body, "max_non_zero", required=False),
    )
    _store_stage("setup", result)
    return jsonify(result)


@api_bp.route("/index", methods=["POST"])
def index_circuit():
    body = _body()
    name = body.get("name", "multiplication")
    if not isinstance(name, str):
        raise BadRequest("'name'은 문자열이어야 합니다")
    result = PROOF_SYSTEM.index_circuit(
        name,
        _int_field(body, "a", required=False),
        _int_field(body, "b", required=False),
        _int_field(body, "c", required=False),
    )
    _store_stage("index", result)
    return jsonify(result)


@api_bp.route("/prove", methods=["POST"])
def prove():
    a, b, c = _abc(_body())
    result = PROOF_SYSTEM.generate_proof(a, b, c)
    _store_stage("prove", result)
    return jsonify(result)


@api_bp.route("/verify", methods=["POST"])
def verify():
    c = _int_field(_body(), "c")
    result = PROOF_SYSTEM.verify_proof(c)
    _store_stage("verify", result)
    return jsonify(result)


@api_bp.route("/reset", methods=["POST"])
def reset():
    result = PROOF_SYSTEM.reset()
    db_remove_prefix("api.")
    return jsonify(result)


# ──────────────────────────────────────────────────────────────
# one-shot 호출
# ──────────────────────────────────────────────────────────────

@api_bp.route("/full-demo", methods=["POST"])
def full_demo():
    a, b, c = _abc(_body())
    result = PROOF_SYSTEM.full_demo(a, b, c)
    db_set("api.demo.last", result)
    return jsonify(result)


@api_bp.route("/test-constraint", methods=["POST"])
def test_constraint():
    a, b, c = _abc(_body())
    return jsonify(PROOF_SYSTEM.test_constraint(a, b, c))


@api_bp.route("/verify-constraint", methods=["POST"])
def verify_constraint():
    a, b, c = _abc(_body())
    return jsonify(PROOF_SYSTEM.verify_constraint(a, b, c))


@api_bp.route("/verify-artifacts", methods=["POST"])
def verify_artifacts():
    return jsonify(PROOF_SYSTEM.verify_artifacts(_body()))


# ──────────────────────────────────────────────────────────────
# 조회
# ──────────────────────────────────────────────────────────────

@api_bp.route("/state")
def state():
    result = PROOF_SYSTEM.state()
    result["results"] = {
        stage: db_get(f"api.{stage}.result") for stage in STAGE_KEYS
    }
    result["last_demo"] = db_get("api.demo.last")
    return jsonify(result)


@api_bp.route("/artifacts")
def artifacts():
    return jsonify(PROOF_SYSTEM.artifacts())


@api_bp.route("/health")
def health():
    return jsonify({"status": "ok"})
