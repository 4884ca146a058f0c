#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ポインタイベントポート定義

ビューポート全体のポインタ移動・ボタン解放を購読するインターフェース。
ドラッグ中にポインタがボックスの外へ出ても追従できるよう、
ジェスチャー開始時に購読し、終了時に必ず解除する。
"""
from typing import Protocol, Callable

from domain.dto.gesture_dto import PointerEventDTO


PointerHandler = Callable[[PointerEventDTO], None]


class IPointerSubscription(Protocol):
    """ポインタイベント購読ハンドル"""

    @property
    def active(self) -> bool:
        """購読中か"""
        ...

    def cancel(self) -> None:
        """購読を解除（複数回呼んでも安全）"""
        ...


class IPointerEventSource(Protocol):
    """ビューポートのポインタイベント発行元"""

    def subscribe(self, on_move: PointerHandler, on_up: PointerHandler) -> IPointerSubscription:
        """
        移動・解放イベントを購読

        Args:
            on_move: ポインタ移動時のハンドラ
            on_up: ポインタ解放時のハンドラ

        Returns:
            購読ハンドル
        """
        ...

    @property
    def listener_count(self) -> int:
        """現在の購読数"""
        ...
