"""
순열 인자 (copy constraint)
===========================

3n개의 배선 위치에 도메인 원소를 붙인다.

  a 배선 i → ωⁱ,  b 배선 i → K1·ωⁱ,  c 배선 i → K2·ωⁱ

같은 값이어야 하는 위치들을 순환으로 묶은 순열 σ를 S_σ1, S_σ2, S_σ3으로
인코딩하고, grand product z(x)로 "w_σ(i) = wᵢ"를 증명한다.

  z(1) = 1
  z(ωⁱ⁺¹) = z(ωⁱ) · Π_k (w_k,i + β·id_k(ωⁱ) + γ) / (w_k,i + β·σ_k(ωⁱ) + γ)
"""

from zkmul.plonk.field import FR


# H, K1·H, K2·H가 서로 겹치지 않는 코셋이 되도록 고른 상수
K1 = FR(2)
K2 = FR(3)


def position_label(pos, n, domain):
    """순열 위치 pos(0..3n-1)에 붙는 코셋 원소."""
    if pos < n:
        return domain[pos]
    if pos < 2 * n:
        return K1 * domain[pos - n]
    return K2 * domain[pos - 2 * n]


def build_permutation_polynomials(sigma, n, domain):
    """σ를 세 개의 평가값 리스트 (S_σ1, S_σ2, S_σ3)로 바꾼다."""
    labels = [position_label(sigma[i], n, domain) for i in range(3 * n)]
    return labels[:n], labels[n:2 * n], labels[2 * n:]


def compute_accumulator(a_vals, b_vals, c_vals, sigma, n, domain, beta, gamma):
    """z(ωⁱ) 평가값 리스트 [1, z(ω), ..., z(ω^{n-1})].

    copy constraint가 지켜지면 마지막 곱까지 포함한 전체 곱이 1로 돌아온다.
    """
    s1, s2, s3 = build_permutation_polynomials(sigma, n, domain)

    z_evals = [FR(1)]
    for i in range(n - 1):
        num = (
            (a_vals[i] + beta * domain[i] + gamma)
            * (b_vals[i] + beta * K1 * domain[i] + gamma)
            * (c_vals[i] + beta * K2 * domain[i] + gamma)
        )
        den = (
            (a_vals[i] + beta * s1[i] + gamma)
            * (b_vals[i] + beta * s2[i] + gamma)
            * (c_vals[i] + beta * s3[i] + gamma)
        )
        z_evals.append(z_evals[-1] * num / den)
    return z_evals
