#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
テストプレイヤーウィジェット

TestSessionEngine の状態を表示し、受験者のクリック・入力をセッションに渡す。
遅延アクション（フィードバック解除・自動遷移）は QTimer で実行する。
"""
import logging
from typing import Callable, Dict, Optional

from PyQt6.QtCore import Qt, QRectF, QTimer, pyqtSignal
from PyQt6.QtGui import QPainter, QPixmap, QColor, QPen, QBrush, QMouseEvent, QPaintEvent, QFont
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLabel, QLineEdit, QSizePolicy
)

from core.test_session import TestSessionEngine, answers_match
from domain.dto.box_dto import HotspotDTO, InputFieldDTO
from domain.dto.session_dto import TestSessionStateDTO
from domain.vo.box_geometry import SurfaceRect
from ui.frame_canvas_widget import percent_to_view, to_qimage

logger = logging.getLogger(__name__)


CORRECT_COLOR = QColor(34, 197, 94)
WRONG_COLOR = QColor(239, 68, 68)
NEUTRAL_COLOR = QColor(75, 85, 99)


def qt_scheduler(delay_ms: int, callback: Callable[[], None]) -> None:
    """セッションの遅延アクションをQtのイベントループで実行"""
    QTimer.singleShot(int(delay_ms), callback)


def input_review_text(typed: str, expected: str) -> str:
    """結果表示で入力欄の下に出す文言"""
    if answers_match(typed, expected):
        if not typed.strip() and not expected.strip():
            return "Correct (empty)"
        return f'Correct! Expected: "{expected}"'
    if not typed.strip():
        return f'Incorrect (empty). Expected: "{expected}"'
    return f'Incorrect. User: "{typed}". Expected: "{expected}"'


class TestFrameView(QWidget):
    """
    テストフレーム表示

    ホットスポットは描画のみで、クリックは座標をパーセントに変換して
    セッションの click_at に渡す。入力欄は QLineEdit を重ねて配置する。
    """

    __test__ = False  # pytestの収集対象外

    def __init__(self, session: TestSessionEngine, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._session = session
        self._pixmaps: Dict[str, QPixmap] = {}
        self._line_edits: Dict[str, QLineEdit] = {}
        self._frame_id: Optional[str] = None

        self.setMinimumSize(320, 180)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

    @property
    def line_edits(self) -> Dict[str, QLineEdit]:
        return dict(self._line_edits)

    def surface_rect(self) -> Optional[SurfaceRect]:
        if self.width() <= 0 or self.height() <= 0:
            return None
        return self._session.current_frame.resolution.fit_into(0, 0, self.width(), self.height())

    def refresh(self) -> None:
        """セッション状態を反映"""
        frame = self._session.current_frame
        if frame.id != self._frame_id:
            self._rebuild_inputs()
            self._frame_id = frame.id

        state = self._session.state
        answer = state.current_answer
        for box_id, line_edit in self._line_edits.items():
            text = answer.inputs.get(box_id, "")
            if line_edit.text() != text:
                line_edit.setText(text)
            line_edit.setReadOnly(state.reviewing)

        self._layout_inputs()
        self.update()

    def _rebuild_inputs(self) -> None:
        for line_edit in self._line_edits.values():
            line_edit.deleteLater()
        self._line_edits.clear()

        for field in self._session.current_frame.input_fields:
            line_edit = QLineEdit(self)
            line_edit.setPlaceholderText(field.label)
            line_edit.setToolTip(field.label)
            line_edit.textEdited.connect(
                lambda text, box_id=field.id: self._session.type_text(box_id, text)
            )
            line_edit.editingFinished.connect(
                lambda box_id=field.id: self._session.blur_input(box_id)
            )
            line_edit.show()
            self._line_edits[field.id] = line_edit

    def _layout_inputs(self) -> None:
        surface = self.surface_rect()
        if surface is None:
            return
        for field in self._session.current_frame.input_fields:
            line_edit = self._line_edits.get(field.id)
            if line_edit is not None:
                line_edit.setGeometry(percent_to_view(field.rect, surface).toAlignedRect())

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._layout_inputs()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """クリックをセッションに渡す（結果表示中は無視される）"""
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return

        surface = self.surface_rect()
        pos = event.position()
        if surface is None or not surface.contains(pos.x(), pos.y()):
            return
        x_percent, y_percent = surface.to_percent_point(pos.x(), pos.y())
        self._session.click_at(x_percent, y_percent)

    def _pixmap_for(self, frame) -> QPixmap:
        pixmap = self._pixmaps.get(frame.id)
        if pixmap is None:
            pixmap = QPixmap.fromImage(to_qimage(frame.image))
            self._pixmaps[frame.id] = pixmap
        return pixmap

    def paintEvent(self, event: QPaintEvent) -> None:
        """描画イベント"""
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(55, 65, 81))

        surface = self.surface_rect()
        if surface is None:
            return

        frame = self._session.current_frame
        state = self._session.state
        answer = state.current_answer
        target = QRectF(surface.left, surface.top, surface.width, surface.height)
        pixmap = self._pixmap_for(frame)
        painter.drawPixmap(target, pixmap, QRectF(pixmap.rect()))
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        for hotspot in frame.hotspots:
            self._paint_hotspot(painter, hotspot, surface, state,
                                bool(answer.hotspots_clicked.get(hotspot.id)))

        if state.reviewing:
            for field in frame.input_fields:
                self._paint_input_review(painter, field, surface, answer.inputs.get(field.id, ""))

        if state.feedback.mistake_flash:
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.setPen(QPen(WRONG_COLOR, 6.0))
            painter.drawRect(target.adjusted(3, 3, -3, -3))

    def _paint_hotspot(self, painter: QPainter, hotspot: HotspotDTO, surface: SurfaceRect,
                       state: TestSessionStateDTO, clicked: bool) -> None:
        view_rect = percent_to_view(hotspot.rect, surface)
        feedback = state.feedback

        fill = None
        outline = None
        mark = None
        if state.reviewing:
            fill = CORRECT_COLOR if clicked else WRONG_COLOR
            mark = "✓" if clicked else "✗"
        elif clicked:
            fill = CORRECT_COLOR
            outline = CORRECT_COLOR
            mark = "✓"

        if feedback.correct_hotspot_id == hotspot.id:
            fill = CORRECT_COLOR
            outline = QColor(74, 222, 128)
            mark = "✓"
        if feedback.incorrect_hotspot_id == hotspot.id:
            outline = WRONG_COLOR

        if fill is not None:
            color = QColor(fill)
            color.setAlpha(110)
            painter.fillRect(view_rect, QBrush(color))
        if outline is not None:
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.setPen(QPen(outline, 3.0))
            painter.drawRect(view_rect)
        if mark is not None:
            painter.setPen(QColor(255, 255, 255))
            font = QFont(painter.font())
            font.setPointSize(18)
            font.setBold(True)
            painter.setFont(font)
            painter.drawText(view_rect, Qt.AlignmentFlag.AlignCenter, mark)

        # クリック順バッジ
        if state.reviewing or clicked:
            badge_color = CORRECT_COLOR if clicked else (WRONG_COLOR if state.reviewing else NEUTRAL_COLOR)
            badge = QRectF(view_rect.left() - 9, view_rect.top() - 9, 18, 18)
            painter.setBrush(QBrush(badge_color))
            painter.setPen(QPen(QColor(255, 255, 255), 1.0))
            painter.drawEllipse(badge)
            font = QFont(painter.font())
            font.setPointSize(8)
            painter.setFont(font)
            painter.drawText(badge, Qt.AlignmentFlag.AlignCenter, str(hotspot.order))

    def _paint_input_review(self, painter: QPainter, field: InputFieldDTO,
                            surface: SurfaceRect, typed: str) -> None:
        view_rect = percent_to_view(field.rect, surface)
        correct = answers_match(typed, field.expected)
        color = CORRECT_COLOR if correct else WRONG_COLOR

        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.setPen(QPen(color, 2.0))
        painter.drawRect(view_rect.adjusted(-2, -2, 2, 2))

        text = input_review_text(typed, field.expected)
        font = QFont(painter.font())
        font.setPointSize(8)
        painter.setFont(font)
        metrics = painter.fontMetrics()
        caption = QRectF(view_rect.left(), view_rect.bottom() + 3,
                         metrics.horizontalAdvance(text) + 8, metrics.height() + 4)
        painter.fillRect(caption, color)
        painter.setPen(QColor(255, 255, 255))
        painter.drawText(caption, Qt.AlignmentFlag.AlignCenter, text)


class TestPlayerWidget(QWidget):
    """
    テストプレイヤー

    ヘッダー（モード・進捗）、フレーム表示、結果サマリー、前後移動ボタンで構成。
    """

    __test__ = False  # pytestの収集対象外

    # シグナル
    exit_requested = pyqtSignal()

    def __init__(self, session: TestSessionEngine, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._session = session
        self._setup_ui()

        session.add_listener(self._on_state_changed)
        self.refresh()

    @property
    def session(self) -> TestSessionEngine:
        return self._session

    @property
    def frame_view(self) -> TestFrameView:
        return self._frame_view

    def _setup_ui(self) -> None:
        """UIをセットアップ"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        # ヘッダー
        header = QHBoxLayout()
        self.title_label = QLabel()
        self.title_label.setStyleSheet("font-weight: bold; font-size: 18px;")
        header.addWidget(self.title_label)
        header.addStretch()
        self.exit_button = QPushButton("Exit Test")
        self.exit_button.clicked.connect(self.exit_requested.emit)
        header.addWidget(self.exit_button)
        layout.addLayout(header)

        self.progress_label = QLabel()
        layout.addWidget(self.progress_label)

        self._frame_view = TestFrameView(self._session, self)
        layout.addWidget(self._frame_view, 1)

        # 結果サマリー
        self.results_label = QLabel()
        self.results_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.results_label.setWordWrap(True)
        self.results_label.setStyleSheet(
            "background: #dbeafe; border: 1px solid #93c5fd; border-radius: 4px; padding: 8px;"
        )
        layout.addWidget(self.results_label)

        # フッター
        footer = QHBoxLayout()
        self.prev_button = QPushButton("< Previous")
        self.prev_button.clicked.connect(self._session.previous_frame)
        footer.addWidget(self.prev_button)
        footer.addStretch()
        self.next_button = QPushButton()
        self.next_button.clicked.connect(self._on_next_clicked)
        footer.addWidget(self.next_button)
        layout.addLayout(footer)

    def _on_state_changed(self, state: TestSessionStateDTO) -> None:
        self.refresh()

    def _on_next_clicked(self) -> None:
        state = self._session.state
        if state.reviewing and state.is_last_frame:
            self.exit_requested.emit()
            return
        self._session.next_frame()

    def refresh(self) -> None:
        """セッション状態を反映"""
        state = self._session.state
        position = f"Frame {state.current_frame_index + 1} of {state.frame_count}"

        if state.reviewing:
            self.title_label.setText("Test Review")
            self.progress_label.setText(f"Reviewing {position}")
        else:
            self.title_label.setText("Test Mode")
            self.progress_label.setText(position)

        self.prev_button.setEnabled(state.current_frame_index > 0)
        if state.reviewing:
            self.next_button.setText("Finish && Exit Review" if state.is_last_frame else "Next (Review) >")
        else:
            self.next_button.setText("Finish Test && View Results" if state.is_last_frame else "Next Frame >")

        self._refresh_results(state)
        self._frame_view.refresh()

    def _refresh_results(self, state: TestSessionStateDTO) -> None:
        if not state.reviewing:
            self.results_label.hide()
            return

        score = self._session.score()
        lines = ["<b>Test Complete!</b>", f"Your score: {score.score} / {score.total_possible}"]
        if score.mistake_frame_count > 0:
            plural = "" if score.mistake_frame_count == 1 else "s"
            lines.append(f"Mistakes on {score.mistake_frame_count} frame{plural}.")
        lines.append("Review your answers with Previous/Next or exit the test.")
        self.results_label.setText("<br>".join(lines))
        self.results_label.show()
