"""
zkmul 명령줄 도구
=================

    zkmul test_constraint 7 6 41
    zkmul verify_constraint 3 5 15
    zkmul universal_setup 10 10 10
    zkmul index multiplication 3 5 15
    zkmul prove 3 5 15
    zkmul verify 15 --a 3 --b 5
    zkmul full_demo 3 5 15

각 명령은 stdout에 JSON 객체 하나를 출력한다. 로그는 stderr로 간다.
index/prove/verify는 프로세스마다 새 세션이므로 앞 단계를 같은 seed로 다시 실행한다.

전역 옵션 (명령 앞에 둔다):
  --seed        난수 생성기 seed (기본 ZKMUL_SEED 또는 0)
  --log-level   DEBUG / INFO / WARNING / ERROR / CRITICAL
  --log-format  json / console
"""

import json
from typing import Optional

import typer
from pydantic import ValidationError

from zkmul.binding import ProofSystem
from zkmul.config import DEMO_A, DEMO_B, SetupBounds, Settings
from zkmul.log import setup_logging


app = typer.Typer(no_args_is_help=True, add_completion=False,
                  help="a·b = c zk-SNARK 데모 도구")


MaxConstraints = typer.Option(None, "--max-constraints", help="setup 제약 수 한도")
MaxVariables = typer.Option(None, "--max-variables", help="setup 변수 수 한도")
MaxNonZero = typer.Option(None, "--max-non-zero", help="setup non-zero 항 수 한도")


# ----------------- helpers -----------------

def _emit(result: dict) -> None:
    typer.echo(json.dumps(result, indent=2, ensure_ascii=False))


def _proof_system(ctx: typer.Context, max_constraints=None, max_variables=None,
                  max_non_zero=None) -> ProofSystem:
    settings = ctx.obj
    defaults = settings.bounds
    bounds = SetupBounds(
        defaults.max_constraints if max_constraints is None else max_constraints,
        defaults.max_variables if max_variables is None else max_variables,
        defaults.max_non_zero if max_non_zero is None else max_non_zero,
    )
    return ProofSystem(seed=settings.seed, bounds=bounds)


def _run_chain(*steps) -> dict:
    """단계를 차례로 실행하고 처음 실패한 결과나 마지막 결과를 돌려준다."""
    result = {}
    for step in steps:
        result = step()
        if not result["success"]:
            return result
    return result


# ----------------- CLI -----------------

@app.callback()
def _configure(
    ctx: typer.Context,
    seed: Optional[int] = typer.Option(None, "--seed", help="난수 생성기 seed"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="로그 레벨"),
    log_format: Optional[str] = typer.Option(None, "--log-format", help="json 또는 console"),
) -> None:
    overrides = {"seed": seed, "log_level": log_level, "log_format": log_format}
    try:
        settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e
    setup_logging(settings.log_level, settings.log_format)
    ctx.obj = settings


@app.command("test_constraint")
def test_constraint(
    ctx: typer.Context,
    a: int = typer.Argument(..., help="비공개 인수 a"),
    b: int = typer.Argument(..., help="비공개 인수 b"),
    c: int = typer.Argument(..., help="주장하는 곱 c"),
    max_constraints: Optional[int] = MaxConstraints,
    max_variables: Optional[int] = MaxVariables,
    max_non_zero: Optional[int] = MaxNonZero,
) -> None:
    """진단 회로로 a·b = c를 산술적으로, 그리고 zkSNARK로 판정한다."""
    ps = _proof_system(ctx, max_constraints, max_variables, max_non_zero)
    _emit(ps.test_constraint(a, b, c))


@app.command("verify_constraint")
def verify_constraint(
    ctx: typer.Context,
    a: int = typer.Argument(...),
    b: int = typer.Argument(...),
    c: int = typer.Argument(...),
) -> None:
    """암호학 없이 a·b = c 산술 판정만 한다."""
    _emit(_proof_system(ctx).verify_constraint(a, b, c))


@app.command("universal_setup")
def universal_setup(
    ctx: typer.Context,
    num_constraints: int = typer.Argument(..., help="제약 수 한도"),
    num_variables: int = typer.Argument(..., help="변수 수 한도"),
    num_non_zero: int = typer.Argument(..., help="non-zero 항 수 한도"),
) -> None:
    """범용 SRS를 만든다."""
    ps = _proof_system(ctx)
    _emit(ps.universal_setup(num_constraints, num_variables, num_non_zero))


@app.command("index")
def index(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="회로 이름"),
    a: int = typer.Argument(...),
    b: int = typer.Argument(...),
    c: int = typer.Argument(...),
    max_constraints: Optional[int] = MaxConstraints,
    max_variables: Optional[int] = MaxVariables,
    max_non_zero: Optional[int] = MaxNonZero,
) -> None:
    """setup 후 곱셈 회로를 인덱스한다."""
    ps = _proof_system(ctx, max_constraints, max_variables, max_non_zero)
    _emit(_run_chain(
        ps.universal_setup,
        lambda: ps.index_circuit(name, a, b, c),
    ))


@app.command("prove")
def prove(
    ctx: typer.Context,
    a: int = typer.Argument(..., help="witness a"),
    b: int = typer.Argument(..., help="witness b"),
    c: int = typer.Argument(..., help="공개 값 c"),
    max_constraints: Optional[int] = MaxConstraints,
    max_variables: Optional[int] = MaxVariables,
    max_non_zero: Optional[int] = MaxNonZero,
) -> None:
    """setup, index 후 증명을 만든다."""
    ps = _proof_system(ctx, max_constraints, max_variables, max_non_zero)
    _emit(_run_chain(
        ps.universal_setup,
        lambda: ps.index_circuit("multiplication", a, b, c),
        lambda: ps.generate_proof(a, b, c),
    ))


@app.command("verify")
def verify(
    ctx: typer.Context,
    c: int = typer.Argument(..., help="공개 값 c"),
    a: int = typer.Option(DEMO_A, "--a", help="증명에 쓸 witness a"),
    b: int = typer.Option(DEMO_B, "--b", help="증명에 쓸 witness b"),
    max_constraints: Optional[int] = MaxConstraints,
    max_variables: Optional[int] = MaxVariables,
    max_non_zero: Optional[int] = MaxNonZero,
) -> None:
    """(a, b, c)로 증명을 만든 뒤 공개 값 c로 검증한다."""
    ps = _proof_system(ctx, max_constraints, max_variables, max_non_zero)
    proved = _run_chain(
        ps.universal_setup,
        lambda: ps.index_circuit("multiplication", a, b, c),
        lambda: ps.generate_proof(a, b, c),
    )
    if not proved["success"]:
        _emit({
            "success": False,
            "message": f"검증할 증명을 만들지 못했습니다: {proved['message']}",
            "error": proved.get("error"),
            "is_valid": False,
            "verify_time": 0,
        })
        return
    _emit(ps.verify_proof(c))


@app.command("full_demo")
def full_demo(
    ctx: typer.Context,
    a: int = typer.Argument(...),
    b: int = typer.Argument(...),
    c: int = typer.Argument(...),
    max_constraints: Optional[int] = MaxConstraints,
    max_variables: Optional[int] = MaxVariables,
    max_non_zero: Optional[int] = MaxNonZero,
) -> None:
    """setup → index → prove → verify를 한 번에 실행한다."""
    ps = _proof_system(ctx, max_constraints, max_variables, max_non_zero)
    _emit(ps.full_demo(a, b, c))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
