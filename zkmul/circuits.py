"""
곱셈 회로
=========

**MultiplicationCircuit**: 표준 회로, 제약 1개

  | 변수 | 종류    | 값 |
  |------|---------|----|
  | a    | witness | a  |
  | b    | witness | b  |
  | c    | 공개    | c  |

  a · b = c

**DiagnosticCircuit**: 진단 회로, 제약 2개

  | 변수 | 종류    | 값                      |
  |------|---------|-------------------------|
  | a    | witness | a                       |
  | b    | witness | b                       |
  | c    | 공개    | 사용자가 주장한 값       |
  | r    | witness | 실제로 계산한 a·b        |
  | one  | witness | 1                       |

  a · b = r
  c · one = r

진단 회로는 "prover가 계산한 값" r과 "verifier가 받은 값" c를 분리한다.
c ≠ a·b이면 두 번째 제약은 어떤 할당으로도 만족되지 않는다.

값이 None인 필드는 SETUP 모드(index)에서는 허용되고 PROVE 모드에서는
MissingAssignment가 된다.
"""

from zkmul.r1cs import lc


class MultiplicationCircuit:
    """a · b = c (a, b 비공개, c 공개)."""

    name = "multiplication"

    def __init__(self, a=None, b=None, c=None):
        self.a = a
        self.b = b
        self.c = c

    def generate_constraints(self, cs):
        a = cs.new_witness_variable(self.a, name="a")
        b = cs.new_witness_variable(self.b, name="b")
        c = cs.new_input_variable(self.c, name="c")
        cs.enforce_constraint(lc(a), lc(b), lc(c))

    def public_inputs(self):
        return [self.c]

    def describe(self):
        return f"{_show(self.a)} * {_show(self.b)} = {_show(self.c)}"


class DiagnosticCircuit:
    """a · b = r, c · one = r (r = enforced, one = 1)."""

    name = "diagnostic"

    def __init__(self, a=None, b=None, c=None, enforced=None):
        self.a = a
        self.b = b
        self.c = c
        self.enforced = enforced

    def generate_constraints(self, cs):
        a = cs.new_witness_variable(self.a, name="a")
        b = cs.new_witness_variable(self.b, name="b")
        c = cs.new_input_variable(self.c, name="c")
        r = cs.new_witness_variable(self.enforced, name="enforced_result")
        one = cs.new_witness_variable(1, name="one")

        cs.enforce_constraint(lc(a), lc(b), lc(r))
        cs.enforce_constraint(lc(c), lc(one), lc(r))

    def public_inputs(self):
        return [self.c]

    def describe(self):
        return f"{_show(self.a)} * {_show(self.b)} = {_show(self.c)}"


def _show(value):
    return "?" if value is None else str(value)
