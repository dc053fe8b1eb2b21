"""
도메인 공통: Use Case 결과 타입 (외부 라이브러리 없음)

Use case 경계에서 EngineError를 Err로 바꿔 반환한다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    message: str
    code: str = "error"
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False


Result = Ok[T] | Err
