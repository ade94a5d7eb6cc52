"""
R1CS 제약 시스템
================

변수 벡터 x = [1, 공개 입력..., witness...] 위의 이차 제약

    ⟨A_i, x⟩ · ⟨B_i, x⟩ = ⟨C_i, x⟩

을 모은다. 회로의 generate_constraints(cs)는 ConstraintSystem을 빌더로 받아
변수를 할당하고 제약을 등록할 뿐 다른 부수효과는 없다.

합성 모드:
  SETUP: 구조만 필요하다 (index). 값이 None이어도 된다.
  PROVE: 모든 값이 있어야 한다. None이면 MissingAssignment.

    >>> cs = ConstraintSystem(SynthesisMode.PROVE)
    >>> a = cs.new_witness_variable(3)
    >>> b = cs.new_witness_variable(5)
    >>> c = cs.new_input_variable(15)
    >>> cs.enforce_constraint(lc(a), lc(b), lc(c))
    >>> cs.is_satisfied()
    True
"""

from zkmul.errors import MissingAssignment
from zkmul.plonk.field import FR, to_field


class SynthesisMode:
    SETUP = "setup"
    PROVE = "prove"


INSTANCE = "instance"
WITNESS = "witness"


class Variable:
    """제약 시스템 안의 변수 핸들. (종류, 종류별 인덱스)로 식별한다."""

    __slots__ = ("kind", "index")

    def __init__(self, kind, index):
        self.kind = kind
        self.index = index

    def __eq__(self, other):
        return (isinstance(other, Variable)
                and self.kind == other.kind and self.index == other.index)

    def __hash__(self):
        return hash((self.kind, self.index))

    def __lt__(self, other):
        # 공개 입력이 witness보다 앞
        return ((self.kind != INSTANCE, self.index)
                < (other.kind != INSTANCE, other.index))

    def __repr__(self):
        return f"Variable({self.kind}, {self.index})"

    # LinearCombination으로 승격되는 연산자
    def __add__(self, other):
        return LinearCombination.of(self) + other

    def __radd__(self, other):
        return LinearCombination.of(self) + other

    def __sub__(self, other):
        return LinearCombination.of(self) - other

    def __mul__(self, coeff):
        return LinearCombination.of(self) * coeff

    def __rmul__(self, coeff):
        return LinearCombination.of(self) * coeff


# 상수 1을 담는 0번 공개 변수
ONE = Variable(INSTANCE, 0)


class LinearCombination:
    """Σ coeffᵢ · varᵢ 희소 표현. 계수가 0인 항은 보관하지 않는다."""

    def __init__(self, terms=None):
        self.terms = {}
        for var, coeff in (terms or {}).items():
            self._accumulate(var, coeff)

    @classmethod
    def of(cls, value):
        """Variable, 정수/FR 상수, LinearCombination을 LC로 바꾼다."""
        if isinstance(value, LinearCombination):
            return value
        if isinstance(value, Variable):
            return cls({value: FR(1)})
        return cls({ONE: _coeff(value)})

    def _accumulate(self, var, coeff):
        total = self.terms.get(var, FR(0)) + _coeff(coeff)
        if total == FR(0):
            self.terms.pop(var, None)
        else:
            self.terms[var] = total

    def __add__(self, other):
        result = LinearCombination(self.terms)
        for var, coeff in LinearCombination.of(other).terms.items():
            result._accumulate(var, coeff)
        return result

    __radd__ = __add__

    def __sub__(self, other):
        return self + LinearCombination.of(other) * FR(-1)

    def __mul__(self, coeff):
        coeff = _coeff(coeff)
        return LinearCombination({v: c * coeff for v, c in self.terms.items()})

    __rmul__ = __mul__

    def __len__(self):
        return len(self.terms)

    def items(self):
        """(Variable, FR) 항을 변수 순서대로."""
        return sorted(self.terms.items(), key=lambda item: item[0])

    def evaluate(self, lookup):
        result = FR(0)
        for var, coeff in self.terms.items():
            result = result + coeff * lookup(var)
        return result

    def __repr__(self):
        inner = " + ".join(f"{int(c)}*{v}" for v, c in self.items())
        return f"LC({inner or '0'})"


def _coeff(value):
    if isinstance(value, FR):
        return value
    return FR(value)


def lc(*terms):
    """여러 항을 더한 LinearCombination. lc(a, (3, b), 5) = a + 3b + 5."""
    result = LinearCombination()
    for term in terms:
        if isinstance(term, tuple):
            coeff, var = term
            result = result + LinearCombination.of(var) * coeff
        else:
            result = result + term
    return result


class ConstraintSystem:
    """제약과 변수 할당을 모으는 빌더.

    속성:
        mode: SynthesisMode.SETUP 또는 PROVE
        instance_assignment: 공개 변수 값 (0번은 1)
        witness_assignment: witness 값 (SETUP 모드에서는 None이 섞일 수 있음)
        constraints: (a_lc, b_lc, c_lc) 리스트
    """

    def __init__(self, mode=SynthesisMode.PROVE):
        self.mode = mode
        self.instance_assignment = [FR(1)]
        self.witness_assignment = []
        self.constraints = []

    @property
    def is_proving(self):
        return self.mode == SynthesisMode.PROVE

    def _check_value(self, value, what):
        if value is None:
            if self.is_proving:
                raise MissingAssignment(f"{what} 값이 할당되지 않았습니다")
            return None
        return to_field(value)

    def new_input_variable(self, value, name="input"):
        """공개 변수 할당."""
        self.instance_assignment.append(
            self._check_value(value, f"공개 변수 '{name}'"))
        return Variable(INSTANCE, len(self.instance_assignment) - 1)

    def new_witness_variable(self, value, name="witness"):
        """비공개 변수 할당."""
        self.witness_assignment.append(
            self._check_value(value, f"witness 변수 '{name}'"))
        return Variable(WITNESS, len(self.witness_assignment) - 1)

    def enforce_constraint(self, a, b, c):
        """⟨a,x⟩ · ⟨b,x⟩ = ⟨c,x⟩ 등록."""
        self.constraints.append((
            LinearCombination.of(a),
            LinearCombination.of(b),
            LinearCombination.of(c),
        ))

    # ── 크기 ──

    @property
    def num_constraints(self):
        return len(self.constraints)

    @property
    def num_instance_variables(self):
        """상수 1 변수를 포함한 공개 변수 수."""
        return len(self.instance_assignment)

    @property
    def num_witness_variables(self):
        return len(self.witness_assignment)

    @property
    def num_variables(self):
        return self.num_instance_variables + self.num_witness_variables

    @property
    def num_non_zero(self):
        """A, B, C 행렬 중 non-zero 항이 가장 많은 행렬의 항 수."""
        if not self.constraints:
            return 0
        return max(
            sum(len(row[k]) for row in self.constraints) for k in range(3)
        )

    # ── 할당 ──

    def value_of(self, var):
        if var.kind == INSTANCE:
            value = self.instance_assignment[var.index]
        else:
            value = self.witness_assignment[var.index]
        if value is None:
            raise MissingAssignment(f"{var} 값이 할당되지 않았습니다")
        return value

    def public_inputs(self):
        """상수 1을 뺀 공개 입력 값 리스트."""
        return list(self.instance_assignment[1:])

    def which_is_unsatisfied(self):
        """처음으로 만족하지 않는 제약의 인덱스, 모두 만족하면 None.

        Raises:
            MissingAssignment: 할당이 비어 있을 때
        """
        for i, (a, b, c) in enumerate(self.constraints):
            if a.evaluate(self.value_of) * b.evaluate(self.value_of) \
                    != c.evaluate(self.value_of):
                return i
        return None

    def is_satisfied(self):
        return self.which_is_unsatisfied() is None
