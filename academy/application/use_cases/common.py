"""
Use case 공통 - 현재 시각 결정, EngineError -> Err 변환
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from academy.application.ports.clock import Clock
from academy.domain.shared.errors import EngineError
from academy.domain.shared.result import Err


def resolve_now(clock: Optional[Clock]) -> datetime:
    if clock is not None:
        return clock.now()
    return datetime.now(timezone.utc)


def to_err(exc: EngineError, *, logger: logging.Logger, tag: str, **context) -> Err:
    """경계에서 한 번만 로그 후 Err 반환."""
    ctx = " ".join(f"{k}={v}" for k, v in context.items())
    logger.warning("[%s] rejected %s code=%s reason=%s", tag, ctx, exc.code, exc.message)
    return Err(message=exc.message, code=exc.code, details=exc.details)
