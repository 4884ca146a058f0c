#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ボックス操作エンジン

ポインタのドラッグ操作をボックスのパーセント座標に変換する。

- 移動: ポインタ移動量（px）を現在の描画面サイズで%に換算し、開始位置に加算してクランプ
- リサイズ: 8つのハンドルごとに変化する辺を決め、最小ピクセルサイズを下回る場合は
  動いている辺を固定位置に留めて反転を防ぐ

ジェスチャー中はビューポート全体の移動・解放イベントを購読し、
解放時またはdispose時に必ず購読を解除する。
"""
from typing import Callable, Optional, Union
import logging

from domain.dto.box_dto import BoxDTO
from domain.dto.gesture_dto import DragGestureDTO, PointerEventDTO, ResizeGestureDTO
from domain.ports.primary.editor_ports import IBoxStore
from domain.ports.secondary.performance_ports import IGeometryUpdateThrottle
from domain.ports.secondary.pointer_ports import IPointerEventSource, IPointerSubscription
from domain.vo.box_geometry import FULL_PERCENT, PercentRect, SurfaceRect, clamp_rect
from domain.vo.resize_handle import ResizeHandle

logger = logging.getLogger(__name__)


DEFAULT_MIN_RESIZE_PX = 10.0

SurfaceProvider = Callable[[], Optional[SurfaceRect]]
ActiveGesture = Union[DragGestureDTO, ResizeGestureDTO]


def compute_drag_rect(gesture: DragGestureDTO, event: PointerEventDTO,
                      surface: SurfaceRect) -> PercentRect:
    """
    移動ジェスチャーの現在ジオメトリを計算

    Args:
        gesture: 開始時スナップショット
        event: 現在のポインタイベント
        surface: 現在の描画面

    Returns:
        フレーム内にクランプされた矩形（サイズは不変）
    """
    dx_percent = (event.client_x - gesture.pointer_x) / surface.width * FULL_PERCENT
    dy_percent = (event.client_y - gesture.pointer_y) / surface.height * FULL_PERCENT
    start = gesture.start_rect
    return clamp_rect(start.moved_to(start.x + dx_percent, start.y + dy_percent))


def compute_resize_rect(gesture: ResizeGestureDTO, event: PointerEventDTO,
                        surface: SurfaceRect,
                        min_size_px: float = DEFAULT_MIN_RESIZE_PX) -> PercentRect:
    """
    リサイズジェスチャーの現在ジオメトリを計算

    Args:
        gesture: 開始時スナップショット（描画面ピクセル）
        event: 現在のポインタイベント
        surface: 現在の描画面
        min_size_px: 最小サイズ（描画面ピクセル）

    Returns:
        フレーム内にクランプされた矩形
    """
    handle = gesture.handle
    dx = event.client_x - gesture.pointer_x
    dy = event.client_y - gesture.pointer_y

    x, y = gesture.start_x, gesture.start_y
    w, h = gesture.start_w, gesture.start_h

    if handle.moves_left_edge:
        x += dx
        w -= dx
    elif handle.moves_right_edge:
        w += dx

    if handle.moves_top_edge:
        y += dy
        h -= dy
    elif handle.moves_bottom_edge:
        h += dy

    # 描画面より大きな最小サイズは描画面に合わせる
    min_w = min(min_size_px, surface.width)
    min_h = min(min_size_px, surface.height)

    # 最小サイズ未満なら動いている辺を留め、反対側の辺は開始位置のまま
    if w < min_w:
        w = min_w
        if handle.moves_left_edge:
            x = gesture.start_x + gesture.start_w - min_w
    if h < min_h:
        h = min_h
        if handle.moves_top_edge:
            y = gesture.start_y + gesture.start_h - min_h

    # 描画面の左上を越えた分だけ縮める
    if x < 0:
        w += x
        x = 0.0
    if y < 0:
        h += y
        y = 0.0

    x_percent = x / surface.width * FULL_PERCENT
    y_percent = y / surface.height * FULL_PERCENT
    w_percent = min(w / surface.width * FULL_PERCENT, FULL_PERCENT - x_percent)
    h_percent = min(h / surface.height * FULL_PERCENT, FULL_PERCENT - y_percent)

    return clamp_rect(
        PercentRect(x=x_percent, y=y_percent, w=w_percent, h=h_percent),
        min_size_percent=min_w / surface.width * FULL_PERCENT,
        min_height_percent=min_h / surface.height * FULL_PERCENT,
    )


class BoxManipulator:
    """
    ボックス操作エンジン

    一度に1つのジェスチャー（移動またはリサイズ）を扱う。
    途中の移動イベントごとにボックスストアへジオメトリを反映し、
    解放時点のジオメトリがそのまま確定値となる。
    """

    def __init__(self, store: IBoxStore, events: IPointerEventSource,
                 surface_provider: SurfaceProvider,
                 min_size_px: float = DEFAULT_MIN_RESIZE_PX,
                 throttle: Optional[IGeometryUpdateThrottle] = None):
        """
        Args:
            store: ボックス保持者
            events: ビューポートのポインタイベント発行元
            surface_provider: 現在の描画面を返す関数（イベントごとに呼ぶ）
            min_size_px: リサイズ時の最小サイズ（描画面ピクセル）
            throttle: 途中更新の間引き（Noneなら全イベントを反映）
        """
        self._store = store
        self._events = events
        self._surface_provider = surface_provider
        self._min_size_px = min_size_px
        self._throttle = throttle

        self._gesture: Optional[ActiveGesture] = None
        self._subscription: Optional[IPointerSubscription] = None
        self._pending_rect: Optional[PercentRect] = None

    @property
    def gesture(self) -> Optional[ActiveGesture]:
        """進行中のジェスチャー"""
        return self._gesture

    @property
    def is_active(self) -> bool:
        return self._gesture is not None

    @property
    def min_size_px(self) -> float:
        return self._min_size_px

    def begin_drag(self, box_id: str, event: PointerEventDTO) -> bool:
        """
        移動ジェスチャーを開始

        Returns:
            開始できたらTrue
        """
        box = self._store.get_box(box_id)
        if box is None or self._surface_provider() is None:
            return False

        self._start(DragGestureDTO(
            box_id=box_id,
            start_rect=box.rect,
            pointer_x=event.client_x,
            pointer_y=event.client_y,
        ))
        logger.debug(f"Drag started: box={box_id}")
        return True

    def begin_resize(self, box_id: str, handle: ResizeHandle, event: PointerEventDTO) -> bool:
        """
        リサイズジェスチャーを開始

        Returns:
            開始できたらTrue
        """
        box = self._store.get_box(box_id)
        surface = self._surface_provider()
        if box is None or surface is None:
            return False

        self._start(self._resize_snapshot(box, handle, event, surface))
        logger.debug(f"Resize started: box={box_id}, handle={handle.value}")
        return True

    def dispose(self) -> None:
        """進行中のジェスチャーを破棄（ジオメトリは最後に反映した状態のまま）"""
        if self._gesture is not None:
            logger.debug(f"Gesture disposed: box={self._gesture.box_id}")
        self._finish()

    def _start(self, gesture: ActiveGesture) -> None:
        # 前のジェスチャーが残っていれば破棄
        self._finish()
        self._gesture = gesture
        self._pending_rect = None
        if self._throttle is not None:
            self._throttle.reset()
        self._subscription = self._events.subscribe(self._on_move, self._on_up)

    def _finish(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self._gesture = None
        self._pending_rect = None

    def _resize_snapshot(self, box: BoxDTO, handle: ResizeHandle, event: PointerEventDTO,
                         surface: SurfaceRect) -> ResizeGestureDTO:
        rect = box.rect
        return ResizeGestureDTO(
            box_id=box.id,
            handle=handle,
            start_x=rect.x / FULL_PERCENT * surface.width,
            start_y=rect.y / FULL_PERCENT * surface.height,
            start_w=rect.w / FULL_PERCENT * surface.width,
            start_h=rect.h / FULL_PERCENT * surface.height,
            pointer_x=event.client_x,
            pointer_y=event.client_y,
        )

    def _compute(self, event: PointerEventDTO) -> Optional[PercentRect]:
        surface = self._surface_provider()
        if surface is None or self._gesture is None:
            return None

        if isinstance(self._gesture, DragGestureDTO):
            return compute_drag_rect(self._gesture, event, surface)
        return compute_resize_rect(self._gesture, event, surface, self._min_size_px)

    def _on_move(self, event: PointerEventDTO) -> None:
        rect = self._compute(event)
        if rect is None:
            return

        if self._throttle is not None and not self._throttle.should_update(event.timestamp_ms):
            self._pending_rect = rect
            return

        self._pending_rect = None
        self._store.set_box_rect(self._gesture.box_id, rect)

    def _on_up(self, event: PointerEventDTO) -> None:
        gesture = self._gesture
        if gesture is None:
            return

        # 間引かれた最後の途中更新を確定
        if self._pending_rect is not None:
            self._store.set_box_rect(gesture.box_id, self._pending_rect)

        box = self._store.get_box(gesture.box_id)
        logger.debug(
            f"{gesture.kind.value.capitalize()} committed: box={gesture.box_id}, "
            f"rect={box.rect if box is not None else None}"
        )
        self._finish()
