"""
파이프라인 산출물 직렬화
========================

두 가지 형태를 제공한다.

  dict  : JSON/TinyDB에 그대로 넣을 수 있는 형태 (정수는 10진 문자열)
  bytes : 정규 바이트 인코딩. 결정성 비교와 proof_size 계산에 쓴다.

바이트 인코딩 규칙:
  FR    32바이트 big-endian
  G1    x‖y 각 32바이트, 무한원점은 64바이트 0
  G2    x.c0‖x.c1‖y.c0‖y.c1 각 32바이트, 무한원점은 128바이트 0
  정수  8바이트 big-endian
"""

from py_ecc import bn128

from zkmul.plonk.field import FR
from zkmul.plonk.preprocessor import (
    SELECTOR_NAMES, SIGMA_NAMES, VerifyingKey,
)
from zkmul.plonk.prover import Proof, PROOF_COMMITMENTS, PROOF_EVALUATIONS


FR_BYTES = 32
G1_BYTES = 2 * FR_BYTES
G2_BYTES = 4 * FR_BYTES


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


def fr_to_bytes(val):
    return int(val).to_bytes(FR_BYTES, "big")


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point"""
    if data is None:
        return None
    point = (bn128.FQ(int(data[0])), bn128.FQ(int(data[1])))
    if not bn128.is_on_curve(point, bn128.b):
        raise ValueError("G1 곡선 위의 점이 아닙니다")
    return point


def g1_to_bytes(point):
    if point is None:
        return bytes(G1_BYTES)
    return int(point[0]).to_bytes(FR_BYTES, "big") + \
        int(point[1]).to_bytes(FR_BYTES, "big")


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]] or None"""
    if point is None:
        return None
    return [
        [str(int(point[0].coeffs[0])), str(int(point[0].coeffs[1]))],
        [str(int(point[1].coeffs[0])), str(int(point[1].coeffs[1]))],
    ]


def deserialize_g2(data):
    """[[str,str],[str,str]] or None → G2 point"""
    if data is None:
        return None
    point = (
        bn128.FQ2([int(data[0][0]), int(data[0][1])]),
        bn128.FQ2([int(data[1][0]), int(data[1][1])]),
    )
    if not bn128.is_on_curve(point, bn128.b2):
        raise ValueError("G2 곡선 위의 점이 아닙니다")
    return point


def g2_to_bytes(point):
    if point is None:
        return bytes(G2_BYTES)
    out = b""
    for coord in point:
        for c in coord.coeffs:
            out += int(c).to_bytes(FR_BYTES, "big")
    return out


def _int_bytes(value):
    return int(value).to_bytes(8, "big")


# ─── Polynomial ───

def serialize_poly(poly):
    """Polynomial → list of str (계수)"""
    if poly is None:
        return None
    return [str(int(c)) for c in poly.coeffs]


def _poly_bytes(poly):
    return _int_bytes(len(poly.coeffs)) + b"".join(
        fr_to_bytes(c) for c in poly.coeffs)


# ─── SRS ───

def serialize_srs(srs):
    """SRS → dict"""
    return {
        "g1_powers": [serialize_g1(p) for p in srs.g1_powers],
        "g2_powers": [serialize_g2(p) for p in srs.g2_powers],
        "max_degree": srs.max_degree,
    }


def srs_to_bytes(srs):
    return (_int_bytes(srs.max_degree)
            + b"".join(g1_to_bytes(p) for p in srs.g1_powers)
            + b"".join(g2_to_bytes(p) for p in srs.g2_powers))


# ─── VerifyingKey ───

def serialize_vk(vk):
    """VerifyingKey → dict"""
    data = {
        "n": vk.n,
        "omega": serialize_fr(vk.omega),
        "num_public_inputs": vk.num_public_inputs,
        "g2_powers": [serialize_g2(p) for p in vk.g2_powers],
        "digest": vk.digest,
    }
    for name, point in vk.commitments().items():
        data[f"{name}_comm"] = serialize_g1(point)
    return data


def deserialize_vk(data):
    return VerifyingKey(
        n=data["n"],
        omega=deserialize_fr(data["omega"]),
        num_public_inputs=data["num_public_inputs"],
        commitments={
            name: deserialize_g1(data[f"{name}_comm"])
            for name in SELECTOR_NAMES + SIGMA_NAMES
        },
        g2_powers=[deserialize_g2(p) for p in data["g2_powers"]],
        digest=data["digest"],
    )


def vk_to_bytes(vk):
    out = _int_bytes(vk.n) + fr_to_bytes(vk.omega) + \
        _int_bytes(vk.num_public_inputs)
    for name in SELECTOR_NAMES + SIGMA_NAMES:
        out += g1_to_bytes(getattr(vk, f"{name}_comm"))
    out += b"".join(g2_to_bytes(p) for p in vk.g2_powers)
    return out + bytes.fromhex(vk.digest)


# ─── ProvingKey ───

def serialize_pk(pk):
    """ProvingKey → dict (다항식 계수와 순열 포함)"""
    pp = pk.preprocessed
    data = {
        "n": pp.n,
        "omega": serialize_fr(pp.omega),
        "num_public_inputs": pp.num_public_inputs,
        "sigma": list(pp.sigma),
        "digest": pp.digest,
    }
    for name in SELECTOR_NAMES + SIGMA_NAMES:
        data[f"{name}_poly"] = serialize_poly(getattr(pp, f"{name}_poly"))
        data[f"{name}_comm"] = serialize_g1(getattr(pp, f"{name}_comm"))
    return data


def pk_to_bytes(pk):
    pp = pk.preprocessed
    out = _int_bytes(pp.n) + fr_to_bytes(pp.omega) + \
        _int_bytes(pp.num_public_inputs)
    out += b"".join(_int_bytes(pos) for pos in pp.sigma)
    for name in SELECTOR_NAMES + SIGMA_NAMES:
        out += _poly_bytes(getattr(pp, f"{name}_poly"))
        out += g1_to_bytes(getattr(pp, f"{name}_comm"))
    return out + bytes.fromhex(pp.digest)


# ─── Proof ───

def serialize_proof(proof):
    """Proof → dict"""
    data = {}
    for name in PROOF_COMMITMENTS:
        data[name] = serialize_g1(getattr(proof, name))
    for name in PROOF_EVALUATIONS:
        value = getattr(proof, name)
        data[name] = serialize_fr(value) if value is not None else None
    return data


def deserialize_proof(data):
    """dict → Proof. 빠진 평가값은 None으로 남겨 verify에서 걸러진다."""
    proof = Proof()
    for name in PROOF_COMMITMENTS:
        setattr(proof, name, deserialize_g1(data.get(name)))
    for name in PROOF_EVALUATIONS:
        value = data.get(name)
        setattr(proof, name, deserialize_fr(value) if value is not None else None)
    return proof


def proof_to_bytes(proof):
    """G1 9개 + FR 7개 = 9·64 + 7·32 = 800바이트."""
    return (b"".join(g1_to_bytes(getattr(proof, n)) for n in PROOF_COMMITMENTS)
            + b"".join(fr_to_bytes(getattr(proof, n)) for n in PROOF_EVALUATIONS))
