#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
テストセッションポート定義

受験（テスト再生）機能へのアクセスインターフェース。
"""
from typing import Protocol, Tuple, Callable

from domain.dto.frame_dto import FrameAssetDTO
from domain.dto.session_dto import ScoreDTO, SessionAction, TestSessionStateDTO


# (遅延ミリ秒, コールバック) を受け取るタイマー
Scheduler = Callable[[int, Callable[[], None]], None]


class ITestSession(Protocol):
    """テストセッションインターフェース"""

    @property
    def frames(self) -> Tuple[FrameAssetDTO, ...]:
        """開始時点のフレームスナップショット"""
        ...

    @property
    def state(self) -> TestSessionStateDTO:
        """現在の状態"""
        ...

    def dispatch(self, action: SessionAction) -> TestSessionStateDTO:
        """アクションを適用して新しい状態を返す"""
        ...

    def click_at(self, x_percent: float, y_percent: float) -> TestSessionStateDTO:
        """現在フレーム上のクリック（ヒットテストしてアクションに変換）"""
        ...

    def score(self) -> ScoreDTO:
        """現在の状態から採点"""
        ...

    def close(self) -> None:
        """セッションを破棄（以降のタイマー発火は無視）"""
        ...
