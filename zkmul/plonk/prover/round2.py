"""
Round 2: 순열 누적자 z(x)
=========================

β, γ를 뽑고 z(ωⁱ)를 계산해 보간한 뒤 블라인딩 계수 3개를 더해 커밋한다.
z는 ζ와 ζω 두 점에서 열리므로 블라인딩 계수가 하나 더 필요하다.
"""

from zkmul.plonk.polynomial import Polynomial
from zkmul.plonk.kzg import commit
from zkmul.plonk.permutation import compute_accumulator
from zkmul.plonk.prover.round1 import add_blinding


def execute(state):
    state.beta = state.transcript.challenge_scalar(b"beta")
    state.gamma = state.transcript.challenge_scalar(b"gamma")

    z_evals = compute_accumulator(
        state.a_vals, state.b_vals, state.c_vals,
        state.preprocessed.sigma, state.n, state.domain,
        state.beta, state.gamma,
    )
    z_poly = Polynomial.from_evaluations(z_evals, state.omega)
    state.z_poly = add_blinding(z_poly, Polynomial.vanishing(state.n), 3, state.rng)

    state.proof.z_comm = commit(state.z_poly, state.srs)
    state.transcript.append_point(b"z_comm", state.proof.z_comm)
