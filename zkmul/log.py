"""
structlog 로깅 설정
===================

stdlib logging 위에 structlog를 얹어 stderr로 내보낸다.
CLI의 JSON 결과는 stdout, 로그는 stderr라 서로 섞이지 않는다.

    >>> from zkmul.log import setup_logging, get_logger
    >>> setup_logging("INFO", "console")
    >>> log = get_logger(__name__)
    >>> log.info("prove.finished", prove_ms=12.3)
"""

import logging
import sys

import structlog

from zkmul.config import DEFAULT_LOG_FORMAT, DEFAULT_LOG_LEVEL


def setup_logging(level=DEFAULT_LOG_LEVEL, log_format=DEFAULT_LOG_FORMAT):
    """루트 로거와 structlog를 설정한다. 여러 번 불러도 핸들러는 하나다.

    Args:
        level: "DEBUG", "INFO", "WARNING", ... (대소문자 무관)
        log_format: "json" 또는 "console"
    """
    level_no = logging.getLevelName(str(level).upper())
    if not isinstance(level_no, int):
        level_no = logging.INFO

    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    ))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level_no)


def get_logger(name=None):
    return structlog.get_logger(name)
