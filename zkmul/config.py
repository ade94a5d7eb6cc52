"""
실행 설정
=========

기본값은 모듈 상수로 두고, ZKMUL_* 환경변수가 있으면 덮어쓴다 (pydantic-settings).

  | 환경변수               | 기본값    | 의미                          |
  |------------------------|-----------|-------------------------------|
  | ZKMUL_SEED             | 0         | Session 난수 생성기 seed       |
  | ZKMUL_MAX_CONSTRAINTS  | 10        | setup 제약 수 한도             |
  | ZKMUL_MAX_VARIABLES    | 10        | setup 변수 수 한도             |
  | ZKMUL_MAX_NON_ZERO     | 10        | setup non-zero 항 수 한도      |
  | ZKMUL_LOG_LEVEL        | INFO      | 로그 레벨                     |
  | ZKMUL_LOG_FORMAT       | json      | json 또는 console             |
  | ZKMUL_HOST / PORT      | 127.0.0.1 / 5000 | HTTP 서버 주소          |
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SEED = 0

DEFAULT_MAX_CONSTRAINTS = 10
DEFAULT_MAX_VARIABLES = 10
DEFAULT_MAX_NON_ZERO = 10

# verify 단독 호출 시 증명을 만들 데모 witness (3 · 5 = 15)
DEMO_A = 3
DEMO_B = 5
DEMO_C = 15

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"
LOG_FORMATS = ("json", "console")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000

ENV_PREFIX = "ZKMUL_"


class SetupBounds:
    """universal_setup 한도 세 개."""

    def __init__(self, max_constraints=DEFAULT_MAX_CONSTRAINTS,
                 max_variables=DEFAULT_MAX_VARIABLES,
                 max_non_zero=DEFAULT_MAX_NON_ZERO):
        self.max_constraints = max_constraints
        self.max_variables = max_variables
        self.max_non_zero = max_non_zero

    def as_tuple(self):
        return (self.max_constraints, self.max_variables, self.max_non_zero)

    def __eq__(self, other):
        return isinstance(other, SetupBounds) and self.as_tuple() == other.as_tuple()

    def __repr__(self):
        return "SetupBounds(constraints={}, variables={}, non_zero={})".format(
            *self.as_tuple())


class Settings(BaseSettings):
    """ZKMUL_* 환경변수로 덮어쓰는 실행 설정. 빈 값은 기본값으로 본다."""

    seed: int = Field(DEFAULT_SEED, description="Session 난수 생성기 seed")
    max_constraints: int = Field(DEFAULT_MAX_CONSTRAINTS, ge=1)
    max_variables: int = Field(DEFAULT_MAX_VARIABLES, ge=1)
    max_non_zero: int = Field(DEFAULT_MAX_NON_ZERO, ge=1)
    log_level: str = Field(DEFAULT_LOG_LEVEL, description="DEBUG, INFO, WARNING, ...")
    log_format: str = Field(DEFAULT_LOG_FORMAT, description="json 또는 console")
    host: str = DEFAULT_HOST
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX, env_ignore_empty=True, case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return str(v).upper()

    @field_validator("log_format", mode="before")
    @classmethod
    def _check_format(cls, v):
        v = str(v).lower()
        if v not in LOG_FORMATS:
            raise ValueError(f"log_format은 {', '.join(LOG_FORMATS)} 중 하나여야 합니다: {v!r}")
        return v

    @property
    def bounds(self):
        return SetupBounds(self.max_constraints, self.max_variables,
                           self.max_non_zero)
