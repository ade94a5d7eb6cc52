"""
산출물 직렬화 테스트
"""
import json
import random

import pytest

from zkmul import snark
from zkmul.circuits import MultiplicationCircuit
from zkmul.plonk.field import FR, G1, G2
from zkmul.serializers import (
    G1_BYTES, G2_BYTES,
    deserialize_fr, deserialize_g1, deserialize_g2, deserialize_proof,
    deserialize_vk, fr_to_bytes, g1_to_bytes, g2_to_bytes,
    proof_to_bytes, serialize_fr, serialize_g1, serialize_g2, serialize_pk,
    serialize_proof, serialize_vk, vk_to_bytes,
)


@pytest.fixture(scope="module")
def artifacts(small_srs):
    (pk, vk), _ = snark.index(small_srs, MultiplicationCircuit())
    proof = snark.prove(pk, MultiplicationCircuit(3, 5, 15), random.Random(4)).value
    return pk, vk, proof


class TestPrimitives:
    def test_fr(self):
        assert serialize_fr(FR(15)) == "15"
        assert deserialize_fr("15") == FR(15)
        assert fr_to_bytes(FR(1)) == bytes(31) + b"\x01"

    def test_g1(self):
        assert deserialize_g1(serialize_g1(G1)) == G1
        assert len(g1_to_bytes(G1)) == G1_BYTES

    def test_g1_infinity(self):
        assert serialize_g1(None) is None
        assert deserialize_g1(None) is None
        assert g1_to_bytes(None) == bytes(64)

    def test_g2(self):
        assert deserialize_g2(serialize_g2(G2)) == G2
        assert len(g2_to_bytes(G2)) == G2_BYTES
        assert g2_to_bytes(None) == bytes(128)


class TestArtifacts:
    def test_proof_dict_is_json(self, artifacts):
        _, _, proof = artifacts
        data = json.loads(json.dumps(serialize_proof(proof)))
        restored = deserialize_proof(data)
        assert proof_to_bytes(restored) == proof_to_bytes(proof)

    def test_restored_proof_verifies(self, artifacts):
        _, vk, proof = artifacts
        restored_vk = deserialize_vk(json.loads(json.dumps(serialize_vk(vk))))
        restored = deserialize_proof(serialize_proof(proof))
        assert vk_to_bytes(restored_vk) == vk_to_bytes(vk)
        assert snark.verify(restored_vk, [15], restored).value is True

    def test_missing_evaluation_stays_none(self, artifacts):
        _, _, proof = artifacts
        data = serialize_proof(proof)
        del data["r_eval"]
        assert deserialize_proof(data).r_eval is None

    def test_proof_bytes_length(self, artifacts):
        _, _, proof = artifacts
        assert len(proof_to_bytes(proof)) == 9 * G1_BYTES + 7 * 32

    def test_pk_dict(self, artifacts):
        pk, vk, _ = artifacts
        data = serialize_pk(pk)
        assert data["digest"] == vk.digest
        assert len(data["sigma"]) == 3 * data["n"]
        assert data["q_m_comm"] == serialize_vk(vk)["q_m_comm"]
