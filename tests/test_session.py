"""
Session 상태 기계 테스트
"""
import pytest

from zkmul.circuits import MultiplicationCircuit
from zkmul.config import SetupBounds
from zkmul.errors import (
    InvalidParameters, PublicInputMismatch, StageNotReady, UnsatisfiedConstraints,
)
from zkmul.serializers import pk_to_bytes, proof_to_bytes, srs_to_bytes
from zkmul.session import Session


def _proved_session(bounds, seed=0, circuit=None):
    session = Session(seed)
    session.setup(*bounds)
    session.index(MultiplicationCircuit())
    session.prove(circuit or MultiplicationCircuit(3, 5, 15))
    return session


# ─────────────────────────────────────────────────────────────────────
# 단계 순서
# ─────────────────────────────────────────────────────────────────────

class TestOrdering:
    def test_initial_state(self):
        session = Session()
        assert session.stage == "uninitialized"
        assert session.timings == {}

    def test_index_before_setup(self):
        with pytest.raises(StageNotReady) as excinfo:
            Session().index(MultiplicationCircuit())
        assert excinfo.value.stage == "index"
        assert excinfo.value.required == "setup"

    def test_prove_before_index(self, small_bounds):
        session = Session()
        session.setup(*small_bounds)
        with pytest.raises(StageNotReady) as excinfo:
            session.prove(MultiplicationCircuit(3, 5, 15))
        assert excinfo.value.required == "index"
        assert session.stage == "setup_done"

    def test_verify_before_prove(self, small_bounds):
        session = Session()
        session.setup(*small_bounds)
        session.index(MultiplicationCircuit())
        with pytest.raises(StageNotReady) as excinfo:
            session.verify()
        assert excinfo.value.required == "prove"
        assert session.stage == "indexed"

    def test_invalid_setup_keeps_state(self):
        session = Session()
        with pytest.raises(InvalidParameters):
            session.setup(0, 10, 10)
        assert session.stage == "uninitialized"


# ─────────────────────────────────────────────────────────────────────
# 전체 흐름
# ─────────────────────────────────────────────────────────────────────

class TestLifecycle:
    def test_full_flow(self, small_bounds):
        session = Session(0)
        srs = session.setup(*small_bounds)
        assert srs.max_degree == 37
        assert session.stage == "setup_done"

        info = session.index(MultiplicationCircuit())
        assert info.num_constraints == 1
        assert session.stage == "indexed"

        session.prove(MultiplicationCircuit(3, 5, 15))
        assert session.stage == "proved"

        assert session.verify() is True
        assert session.stage == "verified"
        assert session.state.is_valid is True
        assert set(session.timings) == {"setup_ms", "index_ms", "prove_ms", "verify_ms"}

    def test_verify_with_other_public_input(self, small_bounds):
        session = _proved_session(small_bounds)
        assert session.verify([16]) is False
        # 재검증은 같은 증명으로 다시 할 수 있다
        assert session.verify([15]) is True

    def test_verify_length_mismatch(self, small_bounds):
        session = _proved_session(small_bounds)
        with pytest.raises(PublicInputMismatch):
            session.verify([15, 15])
        assert session.stage == "proved"

    def test_unsatisfied_prove_keeps_index(self, small_bounds):
        session = Session()
        session.setup(*small_bounds)
        session.index(MultiplicationCircuit())
        with pytest.raises(UnsatisfiedConstraints):
            session.prove(MultiplicationCircuit(3, 5, 16))
        assert session.stage == "indexed"
        assert "prove_ms" not in session.timings

    def test_setup_drops_later_artifacts(self, small_bounds):
        session = _proved_session(small_bounds)
        session.setup(*small_bounds)
        assert session.stage == "setup_done"
        assert set(session.timings) == {"setup_ms"}
        with pytest.raises(StageNotReady):
            session.prove(MultiplicationCircuit(3, 5, 15))

    def test_reindex_drops_proof(self, small_bounds):
        session = _proved_session(small_bounds)
        session.index(MultiplicationCircuit())
        assert session.stage == "indexed"
        assert "prove_ms" not in session.timings
        with pytest.raises(StageNotReady):
            session.verify()


# ─────────────────────────────────────────────────────────────────────
# 결정성
# ─────────────────────────────────────────────────────────────────────

class TestDeterminism:
    def test_same_seed_same_bytes(self, small_bounds):
        s1 = _proved_session(small_bounds, seed=7)
        s2 = _proved_session(small_bounds, seed=7)
        assert srs_to_bytes(s1.state.srs.srs) == srs_to_bytes(s2.state.srs.srs)
        assert pk_to_bytes(s1.state.pk) == pk_to_bytes(s2.state.pk)
        assert proof_to_bytes(s1.state.proof) == proof_to_bytes(s2.state.proof)

    def test_reset_replays_seed(self, small_bounds):
        session = _proved_session(small_bounds, seed=3)
        first = proof_to_bytes(session.state.proof)
        session.reset()
        assert session.stage == "uninitialized"
        assert session.timings == {}

        session.setup(*small_bounds)
        session.index(MultiplicationCircuit())
        second = proof_to_bytes(session.prove(MultiplicationCircuit(3, 5, 15)))
        assert first == second

    def test_different_seed_different_srs(self, small_bounds):
        s1 = Session(1)
        s2 = Session(2)
        assert srs_to_bytes(s1.setup(*small_bounds).srs) != \
            srs_to_bytes(s2.setup(*small_bounds).srs)


# ─────────────────────────────────────────────────────────────────────
# run_pipeline
# ─────────────────────────────────────────────────────────────────────

class TestRunPipeline:
    def test_success(self, small_bounds):
        result = Session.run_pipeline(MultiplicationCircuit(3, 5, 15), small_bounds)
        assert result.succeeded
        assert result.proof_generated is True
        assert result.proof_size == 800
        assert result.is_valid is True
        assert result.failed_stage is None
        assert result.info.num_constraints == 1
        assert set(result.timings) == {"setup_ms", "index_ms", "prove_ms", "verify_ms"}

    def test_accepts_setup_bounds(self, small_bounds):
        result = Session.run_pipeline(MultiplicationCircuit(7, 6, 42),
                                      SetupBounds(*small_bounds))
        assert result.is_valid is True

    def test_unsatisfied_stops_at_prove(self, small_bounds):
        result = Session.run_pipeline(MultiplicationCircuit(3, 5, 16), small_bounds)
        assert not result.succeeded
        assert result.failed_stage == "prove"
        assert isinstance(result.error, UnsatisfiedConstraints)
        assert result.proof_generated is False
        assert result.proof_size is None
        assert result.is_valid is False
        assert set(result.timings) == {"setup_ms", "index_ms"}

    def test_wrong_public_input_fails_verify(self, small_bounds):
        result = Session.run_pipeline(MultiplicationCircuit(3, 5, 15), small_bounds,
                                      public_inputs=[16])
        assert result.succeeded
        assert result.proof_generated is True
        assert result.is_valid is False

    def test_invalid_bounds_fail_setup(self):
        result = Session.run_pipeline(MultiplicationCircuit(3, 5, 15), (0, 1, 1))
        assert result.failed_stage == "setup"
        assert result.info is None
        assert result.timings == {}

    def test_to_dict(self, small_bounds):
        data = Session.run_pipeline(MultiplicationCircuit(3, 5, 16),
                                    small_bounds).to_dict()
        assert data["failed_stage"] == "prove"
        assert data["error"]["error"] == "UnsatisfiedConstraints"
        assert data["info"]["num_variables"] == 4
