"""
R1CS → PLONK 게이트 변환
========================

ConstraintSystem의 각 제약 ⟨A,x⟩·⟨B,x⟩ = ⟨C,x⟩를 곱셈 게이트 하나로 내린다.
곱셈 게이트의 세 배선은 각각 ⟨A,x⟩, ⟨B,x⟩, ⟨C,x⟩ 값을 가진다.

  ┌──────────────────────────────────────────────────────────────┐
  │ 행 0..k-1 : 공개 입력 게이트 (c 배선 = xᵢ, PI가 고정)         │
  │ 제약마다  : 선형 결합을 줄이는 선형 게이트들 + 곱셈 게이트 1개 │
  │ 나머지    : 2의 거듭제곱까지 0 게이트                         │
  └──────────────────────────────────────────────────────────────┘

선형 결합 줄이기:
  - 계수 1인 변수 하나뿐이면 그 변수의 배선을 그대로 쓴다.
  - 상수뿐이면 q_C = k 게이트 하나로 k를 출력한다.
  - 그 밖에는 첫 게이트가 항 두 개와 상수를 (q_L, q_R, q_C)로 받고,
    이후 게이트가 누적값(q_L = 1)에 항 하나씩(q_R = 계수)을 더한다.

같은 변수(또는 중간값)가 놓인 모든 배선 위치는 copy constraint로 잇는다.
상수 1 변수는 배선이 아니라 q_C로 들어간다.

한 회로가 차지하는 행 수는 다음 한도를 넘지 않는다 (SRS 크기 계산에 쓴다).

  gate_bound = max_variables + 4·max_constraints + 3·max_non_zero
"""

from zkmul.plonk.circuit import Circuit, WIRE_A, WIRE_B, WIRE_C
from zkmul.plonk.field import FR
from zkmul.plonk.utils import next_power_of_2
from zkmul.r1cs import INSTANCE, ONE, Variable


MIN_DOMAIN_SIZE = 2


def gate_bound(max_constraints, max_variables, max_non_zero):
    """한도 안의 어떤 R1CS도 넘지 않는 게이트 행 수."""
    return max_variables + 4 * max_constraints + 3 * max_non_zero


def domain_size_for(num_gates):
    return max(MIN_DOMAIN_SIZE, next_power_of_2(num_gates))


class CompiledCircuit:
    """변환 결과.

    속성:
        circuit: 패딩까지 끝난 plonk Circuit
        a_vals, b_vals, c_vals: 배선 값 (SETUP 모드에서는 모두 0)
        public_inputs: 공개 입력 값 (상수 1 제외)
        num_gates: 패딩 전 행 수
    """

    def __init__(self, circuit, a_vals, b_vals, c_vals, public_inputs,
                 num_gates):
        self.circuit = circuit
        self.a_vals = a_vals
        self.b_vals = b_vals
        self.c_vals = c_vals
        self.public_inputs = public_inputs
        self.num_gates = num_gates

    @property
    def domain_size(self):
        return self.circuit.n


class _Builder:
    """게이트를 쌓으면서 배선 위치와 값을 기록한다."""

    def __init__(self, cs):
        self.cs = cs
        self.with_values = cs.is_proving
        self.circuit = Circuit()
        self.rows = []          # [(a, b, c)] 값
        self.positions = {}     # key → [(gate, wire)]
        self.temp_count = 0

    def value(self, var):
        if not self.with_values:
            return FR(0)
        return self.cs.value_of(var)

    def new_temp(self):
        self.temp_count += 1
        return ("temp", self.temp_count)

    def place(self, row, wire, key):
        if key is not None:
            self.positions.setdefault(key, []).append((row, wire))

    def emit(self, row, wires):
        """wires: [(key, value)] × 3 을 행 row에 배치한다."""
        self.rows.append(tuple(value for _, value in wires))
        for wire, (key, _) in enumerate(wires):
            self.place(row, wire, key)

    def reduce(self, combination):
        """선형 결합 값을 담은 배선의 (key, value)를 돌려준다."""
        constant = combination.terms.get(ONE, FR(0))
        terms = [(var, coeff) for var, coeff in combination.items() if var != ONE]

        if len(terms) == 1 and terms[0][1] == FR(1) and constant == FR(0):
            var = terms[0][0]
            return var, self.value(var)

        if not terms:
            out = self.new_temp()
            row = self.circuit.add_linear_gate(0, 0, constant)
            self.emit(row, [(None, FR(0)), (None, FR(0)), (out, constant)])
            return out, constant

        first_var, first_coeff = terms[0]
        if len(terms) > 1:
            second_var, second_coeff = terms[1]
            second = (second_var, self.value(second_var))
            rest = terms[2:]
        else:
            second_coeff = FR(0)
            second = (None, FR(0))
            rest = []

        first = (first_var, self.value(first_var))
        acc_value = first_coeff * first[1] + second_coeff * second[1] + constant
        out = self.new_temp()
        row = self.circuit.add_linear_gate(first_coeff, second_coeff, constant)
        self.emit(row, [first, second, (out, acc_value)])

        for var, coeff in rest:
            term_value = self.value(var)
            new_value = acc_value + coeff * term_value
            new_out = self.new_temp()
            row = self.circuit.add_linear_gate(1, coeff, 0)
            self.emit(row, [(out, acc_value), (var, term_value),
                            (new_out, new_value)])
            out, acc_value = new_out, new_value
        return out, acc_value


def compile_constraint_system(cs):
    """ConstraintSystem을 PLONK 회로와 배선 값으로 바꾼다.

    Raises:
        MissingAssignment: PROVE 모드인데 값이 비어 있을 때
    """
    builder = _Builder(cs)
    circuit = builder.circuit

    public_inputs = []
    for index in range(1, cs.num_instance_variables):
        var = Variable(INSTANCE, index)
        value = builder.value(var)
        row = circuit.add_public_input_gate()
        builder.emit(row, [(None, FR(0)), (None, FR(0)), (var, value)])
        public_inputs.append(value)

    for a_lc, b_lc, c_lc in cs.constraints:
        left = builder.reduce(a_lc)
        right = builder.reduce(b_lc)
        output = builder.reduce(c_lc)
        row = circuit.add_multiplication_gate()
        builder.emit(row, [left, right, output])

    for occurrences in builder.positions.values():
        for (g1, w1), (g2, w2) in zip(occurrences, occurrences[1:]):
            circuit.add_copy_constraint(g1, w1, g2, w2)

    num_gates = circuit.n
    circuit.pad_to(domain_size_for(num_gates))
    rows = builder.rows + [(FR(0), FR(0), FR(0))] * (circuit.n - num_gates)

    return CompiledCircuit(
        circuit,
        [row[WIRE_A] for row in rows],
        [row[WIRE_B] for row in rows],
        [row[WIRE_C] for row in rows],
        public_inputs,
        num_gates,
    )
