#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ステータスバーウィジェット

通知ボードの最新通知と、フレーム・ボックス数の表示。
"""
import logging
from typing import Optional

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QMouseEvent
from PyQt6.QtWidgets import QWidget, QLabel, QHBoxLayout

from core.notice_board import NoticeBoard
from domain.dto.notice_dto import NoticeLevel

logger = logging.getLogger(__name__)


NOTICE_COLORS = {
    NoticeLevel.INFO: "#3b82f6",
    NoticeLevel.WARNING: "#f59e0b",
    NoticeLevel.ERROR: "#ef4444",
}


class NoticeMessage(QLabel):
    """通知メッセージウィジェット

    通知ボードの最新の通知を表示する。
    期限切れの通知はタイマーで定期的に取り除き、クリックで通知を閉じる。
    """

    def __init__(self, board: NoticeBoard, parent: Optional[QWidget] = None,
                 prune_interval_ms: int = 250):
        super().__init__(parent)
        self._board = board

        self._timer = QTimer(self)
        self._timer.setInterval(prune_interval_ms)
        self._timer.timeout.connect(board.prune)
        self._timer.start()

        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setToolTip("Click to dismiss")

        board.add_listener(self.refresh)
        self.refresh()

    def refresh(self) -> None:
        """最新の通知を表示（無ければ非表示）"""
        notice = self._board.latest
        if notice is None:
            self.clear()
            self.hide()
            return

        color = NOTICE_COLORS[notice.level]
        self.setStyleSheet(f"""
            QLabel {{
                color: {color};
                padding: 4px 8px;
                border: 1px solid {color};
                border-radius: 4px;
            }}
        """)
        self.setText(notice.message)
        self.show()

    def dismiss(self) -> bool:
        """表示中の通知を閉じる"""
        notice = self._board.latest
        if notice is None:
            return False
        return self._board.dismiss(notice.notice_id)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.dismiss()
            event.accept()
            return
        super().mousePressEvent(event)


class FrameCounter(QWidget):
    """フレームカウンターウィジェット

    現在のフレーム番号、総フレーム数、テスト対象フレーム数を表示。
    """

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 0, 4, 0)
        layout.setSpacing(4)

        self.frame_label = QLabel("0 / 0")
        self.frame_label.setMinimumWidth(100)
        layout.addWidget(self.frame_label)

    def set_frame_info(self, current: int, total: int, included: int) -> None:
        """フレーム情報を設定

        Args:
            current: 現在のフレーム番号（1始まり、フレームが無ければ0）
            total: 総フレーム数
            included: テスト対象のフレーム数
        """
        self.frame_label.setText(f"{current} / {total}")
        self.setToolTip(f"{included} of {total} frames included in the test")
