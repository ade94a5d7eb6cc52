"""
PLONK 게이트 회로
=================

한 행(게이트)은 배선 a, b, c와 셀렉터 5개로 이루어진다.

    q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C + PI(ωⁱ) = 0

  | 유형     | q_L | q_R | q_O | q_M | q_C | 의미                 |
  |----------|-----|-----|-----|-----|-----|----------------------|
  | 곱셈     |  0  |  0  | -1  |  1  |  0  | a·b = c              |
  | 선형     |  l  |  r  | -1  |  0  |  k  | l·a + r·b + k = c    |
  | 공개입력 |  0  |  0  |  1  |  0  |  0  | c = x  (PI(ωⁱ) = -x) |
  | 패딩     |  0  |  0  |  0  |  0  |  0  | 항상 만족            |

R1CS 회로는 zkmul.arithmetization이 이 게이트들로 내린다.
copy constraint는 (게이트, 배선) 쌍 두 개가 같은 값임을 뜻하고,
배선 번호는 0=a, 1=b, 2=c 이다.
"""

from zkmul.plonk.field import FR, MINUS_ONE


WIRE_A, WIRE_B, WIRE_C = 0, 1, 2
WIRE_NAMES = ("a", "b", "c")


class Gate:
    """셀렉터 (q_L, q_R, q_O, q_M, q_C) 한 행."""

    def __init__(self, q_l, q_r, q_o, q_m, q_c):
        self.q_l = q_l if isinstance(q_l, FR) else FR(q_l)
        self.q_r = q_r if isinstance(q_r, FR) else FR(q_r)
        self.q_o = q_o if isinstance(q_o, FR) else FR(q_o)
        self.q_m = q_m if isinstance(q_m, FR) else FR(q_m)
        self.q_c = q_c if isinstance(q_c, FR) else FR(q_c)

    def selectors(self):
        return (self.q_l, self.q_r, self.q_o, self.q_m, self.q_c)

    def check(self, a, b, c, pi=FR(0)):
        """배선 값 (a, b, c)와 PI 값으로 게이트 식이 0이 되는지."""
        result = (
            self.q_l * a
            + self.q_r * b
            + self.q_o * c
            + self.q_m * (a * b)
            + self.q_c
            + pi
        )
        return result == FR(0)


class Circuit:
    """게이트 리스트와 copy constraint.

    공개 입력 게이트는 항상 앞쪽 행을 차지한다 (PI(x)가 L₀..L_{k-1}를 쓰므로).

    속성:
        gates: Gate 리스트
        copy_constraints: (gate1, wire1, gate2, wire2) 리스트
        num_public_inputs: 공개 입력 게이트 수
    """

    def __init__(self):
        self.gates = []
        self.copy_constraints = []
        self.num_public_inputs = 0

    @property
    def n(self):
        return len(self.gates)

    def _append(self, gate):
        self.gates.append(gate)
        return len(self.gates) - 1

    def add_multiplication_gate(self):
        """a·b = c 게이트. 추가된 행 번호를 돌려준다."""
        return self._append(Gate(0, 0, MINUS_ONE, 1, 0))

    def add_linear_gate(self, q_l, q_r, q_c=0):
        """q_l·a + q_r·b + q_c = c 게이트."""
        return self._append(Gate(q_l, q_r, MINUS_ONE, 0, q_c))

    def add_public_input_gate(self):
        """c = 공개 입력 게이트.

        Raises:
            ValueError: 다른 게이트 뒤에 추가하려 할 때
        """
        if self.num_public_inputs != len(self.gates):
            raise ValueError("공개 입력 게이트는 회로 앞쪽에만 둘 수 있습니다")
        self.num_public_inputs += 1
        return self._append(Gate(0, 0, 1, 0, 0))

    def pad_to(self, size):
        """모든 셀렉터가 0인 게이트로 size 행까지 채운다."""
        while len(self.gates) < size:
            self._append(Gate(0, 0, 0, 0, 0))

    def add_copy_constraint(self, gate1, wire1, gate2, wire2):
        self.copy_constraints.append((gate1, wire1, gate2, wire2))

    def get_selector_polynomials(self):
        """행 순서대로 모은 (q_L, q_R, q_O, q_M, q_C) 평가값 리스트."""
        columns = list(zip(*(g.selectors() for g in self.gates)))
        return tuple(list(column) for column in columns)

    def build_copy_constraints(self):
        """순열 σ (길이 3n). 위치 번호는 wire * n + gate.

        같은 값으로 묶인 위치 집합마다 오름차순 순환 하나를 만든다.
        """
        n = self.n
        parent = list(range(3 * n))

        def find(pos):
            while parent[pos] != pos:
                parent[pos] = parent[parent[pos]]
                pos = parent[pos]
            return pos

        for g1, w1, g2, w2 in self.copy_constraints:
            root1 = find(w1 * n + g1)
            root2 = find(w2 * n + g2)
            if root1 != root2:
                parent[max(root1, root2)] = min(root1, root2)

        cycles = {}
        for pos in range(3 * n):
            cycles.setdefault(find(pos), []).append(pos)

        sigma = list(range(3 * n))
        for members in cycles.values():
            for i, pos in enumerate(members):
                sigma[pos] = members[(i + 1) % len(members)]
        return sigma

    def check_assignment(self, a_vals, b_vals, c_vals, public_inputs):
        """게이트 식과 copy constraint를 직접 확인한다.

        Returns:
            int 또는 None: 처음으로 실패한 행 번호. 모두 만족하면 None.
        """
        pis = list(public_inputs) + [FR(0)] * (self.n - len(public_inputs))
        for i, gate in enumerate(self.gates):
            pi = FR(0) - pis[i] if i < self.num_public_inputs else FR(0)
            if not gate.check(a_vals[i], b_vals[i], c_vals[i], pi):
                return i
        columns = (a_vals, b_vals, c_vals)
        for g1, w1, g2, w2 in self.copy_constraints:
            if columns[w1][g1] != columns[w2][g2]:
                return g1
        return None
