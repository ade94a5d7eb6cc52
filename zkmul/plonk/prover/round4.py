"""
Round 4: ζ에서의 평가값
=======================

ā = a(ζ), b̄, c̄, s̄_σ1 = S_σ1(ζ), s̄_σ2, z̄_ω = z(ζ·ω).
S_σ3과 z(ζ)는 Round 5 선형화에서 커밋먼트로 남기므로 평가하지 않는다.
"""


def execute(state):
    state.zeta = state.transcript.challenge_scalar(b"zeta")
    zeta = state.zeta
    pp = state.preprocessed
    proof = state.proof

    proof.a_eval = state.a_poly.evaluate(zeta)
    proof.b_eval = state.b_poly.evaluate(zeta)
    proof.c_eval = state.c_poly.evaluate(zeta)
    proof.s_sigma1_eval = pp.s_sigma1_poly.evaluate(zeta)
    proof.s_sigma2_eval = pp.s_sigma2_poly.evaluate(zeta)
    proof.z_omega_eval = state.z_poly.evaluate(zeta * state.omega)

    for label in (b"a_eval", b"b_eval", b"c_eval",
                  b"s_sigma1_eval", b"s_sigma2_eval", b"z_omega_eval"):
        state.transcript.append_scalar(label, getattr(proof, label.decode()))
