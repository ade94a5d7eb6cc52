"""
PLONK Verifier
==============

  1. 증명 원소 형식 확인 (G1 점, FR 값)
  2. 트랜스크립트 재생 → β, γ, α, ζ, v, u
  3. Z_H(ζ), L₀(ζ), PI(ζ)
  4. 선형화 커밋먼트 [D]₁와 상수항 r₀   ([r]₁ = [D]₁ + r₀·G1)
  5. [F]₁ = [t_comb]₁ + v·[r]₁ + v²·[a]₁ + ... + v⁶·[S_σ2]₁
     E    = t̄ + v·r̄ + v²·ā + ... + v⁶·s̄_σ2 + u·z̄_ω,   t̄ = r̄ / Z_H(ζ)
  6. e([W_ζ]₁ + u·[W_ζω]₁, [τ]₂)
       == e(ζ·[W_ζ]₁ + uζω·[W_ζω]₁ + [F]₁ + u·[z]₁ - E·G1, [1]₂)

공개 입력이 증명 때와 다르면 PI(ζ)와 챌린지가 달라져 마지막 페어링이 깨진다.
"""

from zkmul.plonk.field import (
    FR, G1, ec_mul, ec_add, ec_neg, ec_pairing, is_g1_point,
)
from zkmul.plonk.transcript import Transcript
from zkmul.plonk.permutation import K1, K2
from zkmul.plonk.prover import PROOF_COMMITMENTS, PROOF_EVALUATIONS
from zkmul.plonk.utils import (
    vanishing_poly_eval, lagrange_basis_eval, public_input_poly_eval,
)


def check_proof_shape(proof):
    """증명 원소의 타입과 곡선 소속을 확인한다.

    Raises:
        ValueError: 누락되었거나 형식이 잘못된 원소가 있을 때
    """
    for name in PROOF_COMMITMENTS:
        if not hasattr(proof, name) or not is_g1_point(getattr(proof, name)):
            raise ValueError(f"증명 원소 {name}이(가) 유효한 G1 점이 아닙니다")
    for name in PROOF_EVALUATIONS:
        if not isinstance(getattr(proof, name, None), FR):
            raise ValueError(f"증명 원소 {name}이(가) FR 값이 아닙니다")


def verify(proof, public_inputs, vk):
    """증명을 검증한다.

    Args:
        proof: Proof
        public_inputs: FR 리스트 (길이 vk.num_public_inputs)
        vk: VerifyingKey

    Returns:
        bool

    Raises:
        ValueError: 공개 입력 수가 다르거나 증명 형식이 잘못되었을 때
    """
    if len(public_inputs) != vk.num_public_inputs:
        raise ValueError(
            f"공개 입력 {len(public_inputs)}개, 기대 {vk.num_public_inputs}개"
        )
    check_proof_shape(proof)

    n = vk.n
    omega = vk.omega

    # ── 트랜스크립트 재생 ──
    transcript = Transcript()
    transcript.append_scalars(b"public_inputs", public_inputs)
    transcript.append_point(b"a_comm", proof.a_comm)
    transcript.append_point(b"b_comm", proof.b_comm)
    transcript.append_point(b"c_comm", proof.c_comm)
    beta = transcript.challenge_scalar(b"beta")
    gamma = transcript.challenge_scalar(b"gamma")

    transcript.append_point(b"z_comm", proof.z_comm)
    alpha = transcript.challenge_scalar(b"alpha")

    transcript.append_point(b"t_lo_comm", proof.t_lo_comm)
    transcript.append_point(b"t_mid_comm", proof.t_mid_comm)
    transcript.append_point(b"t_hi_comm", proof.t_hi_comm)
    zeta = transcript.challenge_scalar(b"zeta")

    transcript.append_scalar(b"a_eval", proof.a_eval)
    transcript.append_scalar(b"b_eval", proof.b_eval)
    transcript.append_scalar(b"c_eval", proof.c_eval)
    transcript.append_scalar(b"s_sigma1_eval", proof.s_sigma1_eval)
    transcript.append_scalar(b"s_sigma2_eval", proof.s_sigma2_eval)
    transcript.append_scalar(b"z_omega_eval", proof.z_omega_eval)
    v = transcript.challenge_scalar(b"v")
    u = transcript.challenge_scalar(b"u")

    a_eval = proof.a_eval
    b_eval = proof.b_eval
    c_eval = proof.c_eval
    z_omega_eval = proof.z_omega_eval

    zh_zeta = vanishing_poly_eval(n, zeta)
    if zh_zeta == FR(0):
        return False
    l0_zeta = lagrange_basis_eval(0, n, omega, zeta)
    pi_zeta = public_input_poly_eval(public_inputs, n, omega, zeta)

    # ── [D]₁ ──
    D = ec_mul(vk.q_m_comm, a_eval * b_eval)
    D = ec_add(D, ec_mul(vk.q_l_comm, a_eval))
    D = ec_add(D, ec_mul(vk.q_r_comm, b_eval))
    D = ec_add(D, ec_mul(vk.q_o_comm, c_eval))
    D = ec_add(D, vk.q_c_comm)

    perm_z_scalar = (
        alpha
        * (a_eval + beta * zeta + gamma)
        * (b_eval + beta * K1 * zeta + gamma)
        * (c_eval + beta * K2 * zeta + gamma)
    )
    ab_factor = (
        (a_eval + beta * proof.s_sigma1_eval + gamma)
        * (b_eval + beta * proof.s_sigma2_eval + gamma)
    )
    perm_s3_scalar = alpha * ab_factor * beta * z_omega_eval
    boundary = alpha * alpha * l0_zeta

    D = ec_add(D, ec_mul(proof.z_comm, perm_z_scalar + boundary))
    D = ec_add(D, ec_neg(ec_mul(vk.s_sigma3_comm, perm_s3_scalar)))

    # ── r₀ ──
    r_0 = (
        pi_zeta
        - alpha * ab_factor * z_omega_eval * (c_eval + gamma)
        - boundary
    )

    # ── [F]₁, E ──
    zeta_n = zeta ** n
    F = ec_add(
        proof.t_lo_comm,
        ec_add(ec_mul(proof.t_mid_comm, zeta_n),
               ec_mul(proof.t_hi_comm, zeta_n * zeta_n)),
    )
    F = ec_add(F, ec_mul(D, v))
    F = ec_add(F, ec_mul(G1, v * r_0))

    t_eval = proof.r_eval / zh_zeta
    e_scalar = t_eval + v * proof.r_eval

    v_pow = v
    for comm, evaluation in ((proof.a_comm, a_eval),
                             (proof.b_comm, b_eval),
                             (proof.c_comm, c_eval),
                             (vk.s_sigma1_comm, proof.s_sigma1_eval),
                             (vk.s_sigma2_comm, proof.s_sigma2_eval)):
        v_pow = v_pow * v
        F = ec_add(F, ec_mul(comm, v_pow))
        e_scalar = e_scalar + v_pow * evaluation
    e_scalar = e_scalar + u * z_omega_eval

    E = ec_mul(G1, e_scalar)

    # ── 페어링 ──
    A = ec_add(proof.W_zeta_comm, ec_mul(proof.W_zeta_omega_comm, u))

    B = ec_mul(proof.W_zeta_comm, zeta)
    B = ec_add(B, ec_mul(proof.W_zeta_omega_comm, u * zeta * omega))
    B = ec_add(B, F)
    B = ec_add(B, ec_mul(proof.z_comm, u))
    B = ec_add(B, ec_neg(E))

    lhs = ec_pairing(vk.g2_powers[1], A)
    rhs = ec_pairing(vk.g2_powers[0], B)
    return lhs == rhs
