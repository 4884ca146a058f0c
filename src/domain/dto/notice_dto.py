#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
通知DTO定義

作成者向けの一時的な通知（検証エラー、インポート失敗など）の転送用データクラス。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import uuid


class NoticeLevel(Enum):
    """通知レベル"""
    INFO = "info"  # 情報
    WARNING = "warning"  # 入力検証エラー（操作は中止）
    ERROR = "error"  # パッケージ破損などの失敗


@dataclass(frozen=True)
class NoticeDTO:
    """
    通知転送オブジェクト

    expires_at_ms を過ぎると通知ボードから自動的に消える。
    """

    notice_id: str
    level: NoticeLevel
    message: str

    # 時刻（ミリ秒、通知ボードの時計基準）
    created_at_ms: float = 0.0
    expires_at_ms: Optional[float] = None

    def __post_init__(self):
        """検証"""
        if not self.message:
            raise ValueError("Notice message must not be empty")

        if self.expires_at_ms is not None and self.expires_at_ms < self.created_at_ms:
            raise ValueError(
                f"Notice expiry must be >= creation time, got {self.expires_at_ms} < {self.created_at_ms}"
            )

    def is_expired(self, now_ms: float) -> bool:
        """指定時刻で期限切れか"""
        return self.expires_at_ms is not None and now_ms >= self.expires_at_ms

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return {
            "notice_id": self.notice_id,
            "level": self.level.value,
            "message": self.message,
            "created_at_ms": self.created_at_ms,
            "expires_at_ms": self.expires_at_ms,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NoticeDTO":
        """辞書から生成"""
        return cls(
            notice_id=data["notice_id"],
            level=NoticeLevel(data["level"]),
            message=data["message"],
            created_at_ms=data.get("created_at_ms", 0.0),
            expires_at_ms=data.get("expires_at_ms"),
        )

    @classmethod
    def create(cls, level: NoticeLevel, message: str, now_ms: float,
               lifetime_ms: Optional[float]) -> "NoticeDTO":
        """新規通知を生成"""
        return cls(
            notice_id=str(uuid.uuid4()),
            level=level,
            message=message,
            created_at_ms=now_ms,
            expires_at_ms=None if lifetime_ms is None else now_ms + lifetime_ms,
        )
