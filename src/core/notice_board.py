#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
通知ボード

作成者向けの一時的な通知を保持する。通知は一定時間で期限切れになるか、
明示的に閉じられるまで表示される。
"""
from typing import Callable, List, Optional
import logging
import time

from domain.dto.notice_dto import NoticeDTO, NoticeLevel

logger = logging.getLogger(__name__)


DEFAULT_NOTICE_MS = 3000


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class NoticeBoard:
    """通知ボード"""

    def __init__(self, lifetime_ms: Optional[float] = DEFAULT_NOTICE_MS,
                 clock: Optional[Callable[[], float]] = None):
        """
        Args:
            lifetime_ms: 通知の表示時間（Noneなら期限なし）
            clock: 現在時刻（ミリ秒）を返す関数
        """
        self._lifetime_ms = lifetime_ms
        self._clock = clock or _monotonic_ms
        self._notices: List[NoticeDTO] = []
        self._listeners: List[Callable[[], None]] = []

    @property
    def lifetime_ms(self) -> Optional[float]:
        return self._lifetime_ms

    def add_listener(self, listener: Callable[[], None]) -> None:
        """通知の追加・削除の通知先を追加"""
        self._listeners.append(listener)

    def post(self, level: NoticeLevel, message: str) -> NoticeDTO:
        """通知を追加"""
        notice = NoticeDTO.create(level, message, self._clock(), self._lifetime_ms)
        self._notices.append(notice)

        if level == NoticeLevel.ERROR:
            logger.error(message)
        elif level == NoticeLevel.WARNING:
            logger.warning(message)
        else:
            logger.info(message)

        self._notify()
        return notice

    def info(self, message: str) -> NoticeDTO:
        return self.post(NoticeLevel.INFO, message)

    def warn(self, message: str) -> NoticeDTO:
        return self.post(NoticeLevel.WARNING, message)

    def error(self, message: str) -> NoticeDTO:
        return self.post(NoticeLevel.ERROR, message)

    def active(self) -> List[NoticeDTO]:
        """期限内の通知（古い順）"""
        self.prune()
        return list(self._notices)

    @property
    def latest(self) -> Optional[NoticeDTO]:
        notices = self.active()
        return notices[-1] if notices else None

    def dismiss(self, notice_id: str) -> bool:
        """通知を閉じる"""
        for notice in self._notices:
            if notice.notice_id == notice_id:
                self._notices.remove(notice)
                self._notify()
                return True
        return False

    def prune(self) -> int:
        """期限切れの通知を削除"""
        now = self._clock()
        remaining = [notice for notice in self._notices if not notice.is_expired(now)]
        removed = len(self._notices) - len(remaining)
        if removed:
            self._notices = remaining
            self._notify()
        return removed

    def clear(self) -> None:
        if self._notices:
            self._notices.clear()
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
