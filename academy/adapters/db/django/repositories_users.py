"""
User 표시 이름 조회 - AUTH_USER_MODEL 기준. ORM 접근은 메서드 내부에서만 lazy import.
"""
from __future__ import annotations

from typing import Optional


class DjangoUserDirectory:

    def get_display_name(self, user_id: int) -> Optional[str]:
        from django.contrib.auth import get_user_model

        User = get_user_model()
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            return None
        full_name = (user.get_full_name() or "").strip()
        return full_name or user.get_username()
