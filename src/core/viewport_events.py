#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ビューポートイベントハブ

ホスト（UIウィジェット）から受け取ったポインタ移動・解放イベントを
購読者に配信する。IPointerEventSource の実装。
"""
from typing import List
import logging

from domain.dto.gesture_dto import PointerEventDTO
from domain.ports.secondary.pointer_ports import PointerHandler

logger = logging.getLogger(__name__)


class PointerSubscription:
    """購読ハンドル"""

    def __init__(self, hub: "ViewportEventHub", on_move: PointerHandler, on_up: PointerHandler):
        self._hub = hub
        self.on_move = on_move
        self.on_up = on_up
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._hub._remove(self)


class ViewportEventHub:
    """
    ポインタイベントの配信ハブ

    配信中に購読解除されても安全なよう、配信前に購読者リストを複製する。
    """

    def __init__(self):
        self._subscriptions: List[PointerSubscription] = []

    def subscribe(self, on_move: PointerHandler, on_up: PointerHandler) -> PointerSubscription:
        subscription = PointerSubscription(self, on_move, on_up)
        self._subscriptions.append(subscription)
        logger.debug(f"Pointer subscription added ({len(self._subscriptions)} active)")
        return subscription

    @property
    def listener_count(self) -> int:
        return len(self._subscriptions)

    def dispatch_move(self, event: PointerEventDTO) -> None:
        """ポインタ移動を配信"""
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.on_move(event)

    def dispatch_up(self, event: PointerEventDTO) -> None:
        """ポインタ解放を配信"""
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.on_up(event)

    def clear(self) -> None:
        """すべての購読を解除"""
        for subscription in list(self._subscriptions):
            subscription.cancel()

    def _remove(self, subscription: PointerSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            logger.debug(f"Pointer subscription removed ({len(self._subscriptions)} active)")
