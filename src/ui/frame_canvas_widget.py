#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
フレームキャンバスウィジェット

編集中フレームを表示し、マウス操作を FrameGeometryEditor のジェスチャーに変換する。
ボックスの表示、選択中ボックスのリサイズハンドル、ドラッグ描画のプレビューを描画。
"""
import logging
import time
from typing import Optional, Tuple

import numpy as np
from PyQt6.QtCore import Qt, QRectF, QPointF, pyqtSignal
from PyQt6.QtGui import (
    QPainter, QImage, QPixmap, QColor, QPen, QBrush, QMouseEvent, QPaintEvent, QFont
)
from PyQt6.QtWidgets import QWidget, QSizePolicy

from core.authoring_workspace import AuthoringWorkspace
from core.frame_geometry_editor import FrameGeometryEditor
from core.viewport_events import ViewportEventHub
from domain.dto.box_dto import BoxDTO, HotspotDTO
from domain.dto.gesture_dto import PointerEventDTO
from domain.dto.settings_dto import EditorSettingsDTO
from domain.ports.secondary.performance_ports import IGeometryUpdateThrottle
from domain.vo.box_geometry import FULL_PERCENT, PercentRect, SurfaceRect
from domain.vo.resize_handle import ResizeHandle

logger = logging.getLogger(__name__)


HANDLE_SIZE = 8.0

HOTSPOT_COLOR = QColor(59, 130, 246)
INPUT_COLOR = QColor(34, 197, 94)
SELECTED_COLOR = QColor(250, 204, 21)
PREVIEW_COLOR = QColor(255, 255, 255)


def to_qimage(image: np.ndarray) -> QImage:
    """RGB24配列をQImageに変換（配列の寿命に依存しないようコピー）"""
    height, width = image.shape[:2]
    data = np.ascontiguousarray(image)
    q_image = QImage(data.data, width, height, 3 * width, QImage.Format.Format_RGB888)
    return q_image.copy()


def percent_to_view(rect: PercentRect, surface: SurfaceRect) -> QRectF:
    """パーセント矩形をウィジェット座標の矩形に変換"""
    return QRectF(
        surface.left + rect.x / FULL_PERCENT * surface.width,
        surface.top + rect.y / FULL_PERCENT * surface.height,
        rect.w / FULL_PERCENT * surface.width,
        rect.h / FULL_PERCENT * surface.height,
    )


def handle_rect(box_rect: QRectF, handle: ResizeHandle) -> QRectF:
    """ハンドルの当たり判定・描画用の矩形"""
    if handle.moves_left_edge:
        x = box_rect.left()
    elif handle.moves_right_edge:
        x = box_rect.right()
    else:
        x = box_rect.center().x()

    if handle.moves_top_edge:
        y = box_rect.top()
    elif handle.moves_bottom_edge:
        y = box_rect.bottom()
    else:
        y = box_rect.center().y()

    half = HANDLE_SIZE / 2
    return QRectF(x - half, y - half, HANDLE_SIZE, HANDLE_SIZE)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class FrameCanvasWidget(QWidget):
    """
    フレームキャンバスウィジェット

    ジェスチャー中のマウス移動・解放はウィジェット外でも受け取れるよう
    ボタン押下中はマウスをグラブする。
    """

    # シグナル
    gesture_finished = pyqtSignal()  # ジェスチャー終了時

    def __init__(self, workspace: AuthoringWorkspace,
                 settings: Optional[EditorSettingsDTO] = None,
                 throttle: Optional[IGeometryUpdateThrottle] = None,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._workspace = workspace
        self._events = ViewportEventHub()
        self._editor = FrameGeometryEditor(
            workspace, self._events, self.surface_rect,
            settings=settings or workspace.editor_settings,
            throttle=throttle,
        )

        self._pixmap: Optional[QPixmap] = None
        self._pixmap_frame_id: Optional[str] = None

        self.setMinimumSize(320, 180)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setFocusPolicy(Qt.FocusPolicy.ClickFocus)

        workspace.add_listener(self.update)

    @property
    def editor(self) -> FrameGeometryEditor:
        return self._editor

    @property
    def events(self) -> ViewportEventHub:
        return self._events

    def surface_rect(self) -> Optional[SurfaceRect]:
        """現在の描画面（フレームが無ければNone）"""
        frame = self._workspace.current_frame
        if frame is None or self.width() <= 0 or self.height() <= 0:
            return None
        return frame.resolution.fit_into(0, 0, self.width(), self.height())

    def _current_pixmap(self) -> Optional[QPixmap]:
        frame = self._workspace.current_frame
        if frame is None:
            self._pixmap = None
            self._pixmap_frame_id = None
            return None
        if frame.id != self._pixmap_frame_id:
            self._pixmap = QPixmap.fromImage(to_qimage(frame.image))
            self._pixmap_frame_id = frame.id
        return self._pixmap

    # === ヒットテスト ===

    def hit_test(self, pos: QPointF) -> Tuple[Optional[BoxDTO], Optional[ResizeHandle]]:
        """
        ウィジェット座標にあるボックスとハンドルを返す

        選択中ボックスのハンドルを最優先し、次に前面（後から作成）のボックス。
        """
        surface = self.surface_rect()
        frame = self._workspace.current_frame
        if surface is None or frame is None:
            return None, None

        selected = self._workspace.selected_box
        if selected is not None:
            view_rect = percent_to_view(selected.rect, surface)
            for handle in ResizeHandle:
                if handle_rect(view_rect, handle).contains(pos):
                    return selected, handle

        for box in reversed(frame.boxes):
            if percent_to_view(box.rect, surface).contains(pos):
                return box, None
        return None, None

    # === マウスイベント ===

    def _pointer_event(self, event: QMouseEvent) -> PointerEventDTO:
        pos = event.position()
        return PointerEventDTO(client_x=pos.x(), client_y=pos.y(), timestamp_ms=monotonic_ms())

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """マウスプレスイベント"""
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return

        pointer = self._pointer_event(event)
        box, handle = self.hit_test(event.position())
        if box is not None and handle is not None:
            started = self._editor.pointer_down_on_handle(box.id, handle, pointer)
        elif box is not None:
            started = self._editor.pointer_down_on_box(box.id, pointer)
        else:
            started = self._editor.pointer_down_on_surface(pointer)

        if started and self.isVisible():
            self.grabMouse()
        self.update()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """マウス移動イベント"""
        if self._events.listener_count:
            self._events.dispatch_move(self._pointer_event(event))
            self.update()
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """マウスリリースイベント"""
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return

        self._events.dispatch_up(self._pointer_event(event))
        self.releaseMouse()
        self.update()
        self.gesture_finished.emit()

    def set_editing_enabled(self, enabled: bool) -> None:
        """編集の有効/無効を設定"""
        self._editor.set_disabled(not enabled)
        self.update()

    def closeEvent(self, event) -> None:
        self._editor.dispose()
        super().closeEvent(event)

    # === 描画 ===

    def paintEvent(self, event: QPaintEvent) -> None:
        """描画イベント"""
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(24, 24, 27))

        surface = self.surface_rect()
        pixmap = self._current_pixmap()
        frame = self._workspace.current_frame
        if surface is None or pixmap is None or frame is None:
            painter.setPen(QColor(161, 161, 170))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "Open a video or import a package")
            return

        target = QRectF(surface.left, surface.top, surface.width, surface.height)
        painter.drawPixmap(target, pixmap, QRectF(pixmap.rect()))

        if not frame.include_in_test:
            painter.fillRect(target, QColor(0, 0, 0, 160))
            painter.setPen(QColor(244, 244, 245))
            painter.drawText(target, Qt.AlignmentFlag.AlignCenter, "Excluded from test")
            return

        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        for box in frame.boxes:
            self._paint_box(painter, box, surface, box.id == self._workspace.selected_box_id)

        preview = self._editor.preview
        if preview is not None:
            pen = QPen(PREVIEW_COLOR, 1.5, Qt.PenStyle.DashLine)
            painter.setPen(pen)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(percent_to_view(preview, surface))

    def _paint_box(self, painter: QPainter, box: BoxDTO, surface: SurfaceRect, selected: bool) -> None:
        view_rect = percent_to_view(box.rect, surface)
        color = HOTSPOT_COLOR if isinstance(box, HotspotDTO) else INPUT_COLOR

        fill = QColor(color)
        fill.setAlpha(60)
        painter.setBrush(QBrush(fill))
        painter.setPen(QPen(SELECTED_COLOR if selected else color, 2.0))
        painter.drawRect(view_rect)

        painter.setPen(QColor(255, 255, 255))
        font = QFont(painter.font())
        font.setPointSize(9)
        painter.setFont(font)
        if isinstance(box, HotspotDTO):
            caption = f"{box.order}. {box.label}"
        else:
            caption = box.label
        painter.drawText(view_rect.adjusted(3, 1, -3, -1),
                         Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop, caption)

        if selected:
            painter.setBrush(QBrush(SELECTED_COLOR))
            painter.setPen(QPen(QColor(0, 0, 0), 1.0))
            for handle in ResizeHandle:
                painter.drawRect(handle_rect(view_rect, handle))
