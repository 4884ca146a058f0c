#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
フレームジオメトリエディタ

描画面上のジェスチャーを判別してボックスを作成・操作する。

- ボックス / ハンドル上のポインタダウン: 選択してから BoxManipulator に移動・リサイズを委譲
- 描画面上のポインタダウン: 短時間かつ小移動で解放ならクリック（ホットスポット作成）、
  それ以外で十分な大きさの矩形ならドラッグ描画（入力欄作成）、どちらでもなければ破棄
"""
from dataclasses import replace
from math import hypot
from typing import Optional
import logging

from core.box_manipulator import BoxManipulator, SurfaceProvider
from domain.dto.box_dto import HotspotDTO, InputFieldDTO, new_box_id
from domain.dto.gesture_dto import DrawGestureDTO, GestureOutcome, PointerEventDTO
from domain.dto.settings_dto import EditorSettingsDTO
from domain.ports.primary.editor_ports import IBoxStore
from domain.ports.secondary.performance_ports import IGeometryUpdateThrottle
from domain.ports.secondary.pointer_ports import IPointerEventSource, IPointerSubscription
from domain.vo.box_geometry import FULL_PERCENT, PercentRect, SurfaceRect, centered_rect, clamp
from domain.vo.resize_handle import ResizeHandle

logger = logging.getLogger(__name__)


def classify_draw(gesture: DrawGestureDTO, event: PointerEventDTO, surface: SurfaceRect,
                  settings: EditorSettingsDTO) -> GestureOutcome:
    """
    描画ジェスチャーを判別

    Args:
        gesture: 描画ジェスチャー状態
        event: ポインタ解放イベント
        surface: 現在の描画面
        settings: 判定閾値

    Returns:
        判定結果
    """
    elapsed = event.timestamp_ms - gesture.started_at_ms
    distance = hypot(event.client_x - gesture.origin_client_x,
                     event.client_y - gesture.origin_client_y)
    if elapsed < settings.click_max_duration_ms and distance < settings.click_max_distance_px:
        return GestureOutcome.CLICK

    rect = drawn_rect(gesture, event, surface)
    if rect.w > settings.min_draw_size_percent and rect.h > settings.min_draw_size_percent:
        return GestureOutcome.DRAW
    return GestureOutcome.DISCARDED


def drawn_rect(gesture: DrawGestureDTO, event: PointerEventDTO, surface: SurfaceRect) -> PercentRect:
    """起点と現在位置（フレーム内にクランプ）から矩形を生成"""
    x, y = _clamped_percent_point(surface, event)
    return PercentRect.from_corners(gesture.origin_x, gesture.origin_y, x, y)


def _clamped_percent_point(surface: SurfaceRect, event: PointerEventDTO):
    x, y = surface.to_percent_point(event.client_x, event.client_y)
    return clamp(x, 0.0, FULL_PERCENT), clamp(y, 0.0, FULL_PERCENT)


class FrameGeometryEditor:
    """
    フレームジオメトリエディタ

    作成したボックスは編集中フレームの末尾に追加され、選択状態になる。
    除外フレームや無効化中はすべての操作を無視する。
    """

    def __init__(self, store: IBoxStore, events: IPointerEventSource,
                 surface_provider: SurfaceProvider,
                 settings: Optional[EditorSettingsDTO] = None,
                 throttle: Optional[IGeometryUpdateThrottle] = None,
                 manipulator: Optional[BoxManipulator] = None):
        """
        Args:
            store: ボックス保持者
            events: ビューポートのポインタイベント発行元
            surface_provider: 現在の描画面を返す関数
            settings: エディタ設定
            throttle: 移動・リサイズの途中更新の間引き
            manipulator: 移動・リサイズエンジン（省略時は生成）
        """
        self._store = store
        self._events = events
        self._surface_provider = surface_provider
        self._settings = settings or EditorSettingsDTO()
        self._manipulator = manipulator or BoxManipulator(
            store, events, surface_provider,
            min_size_px=self._settings.min_resize_px,
            throttle=throttle,
        )

        self._disabled = False
        self._gesture: Optional[DrawGestureDTO] = None
        self._subscription: Optional[IPointerSubscription] = None
        self._last_outcome: Optional[GestureOutcome] = None

    @property
    def settings(self) -> EditorSettingsDTO:
        return self._settings

    @property
    def manipulator(self) -> BoxManipulator:
        return self._manipulator

    @property
    def enabled(self) -> bool:
        """編集可能か"""
        frame = self._store.current_frame
        return not self._disabled and frame is not None and frame.include_in_test

    def set_disabled(self, disabled: bool) -> None:
        """エディタ全体の無効化（テスト再生中など）"""
        self._disabled = disabled
        if disabled:
            self.dispose()

    @property
    def gesture(self) -> Optional[DrawGestureDTO]:
        """進行中の描画ジェスチャー"""
        return self._gesture

    @property
    def preview(self) -> Optional[PercentRect]:
        return self._gesture.preview if self._gesture is not None else None

    @property
    def last_outcome(self) -> Optional[GestureOutcome]:
        """直前の描画ジェスチャーの判定結果"""
        return self._last_outcome

    @property
    def is_busy(self) -> bool:
        """ジェスチャー進行中か"""
        return self._gesture is not None or self._manipulator.is_active

    def pointer_down_on_box(self, box_id: str, event: PointerEventDTO) -> bool:
        if not self.enabled or self._store.get_box(box_id) is None:
            return False

        self._cancel_draw()
        self._store.select_box(box_id)
        return self._manipulator.begin_drag(box_id, event)

    def pointer_down_on_handle(self, box_id: str, handle: ResizeHandle,
                               event: PointerEventDTO) -> bool:
        if not self.enabled or self._store.get_box(box_id) is None:
            return False

        self._cancel_draw()
        self._store.select_box(box_id)
        return self._manipulator.begin_resize(box_id, handle, event)

    def pointer_down_on_surface(self, event: PointerEventDTO) -> bool:
        surface = self._surface_provider()
        frame = self._store.current_frame
        if not self.enabled or surface is None or frame is None:
            return False

        self._manipulator.dispose()
        self._cancel_draw()
        self._store.select_box(None)

        origin_x, origin_y = _clamped_percent_point(surface, event)
        self._gesture = DrawGestureDTO(
            frame_id=frame.id,
            origin_x=origin_x,
            origin_y=origin_y,
            origin_client_x=event.client_x,
            origin_client_y=event.client_y,
            started_at_ms=event.timestamp_ms,
        )
        self._subscription = self._events.subscribe(self._on_draw_move, self._on_draw_up)
        logger.debug(f"Draw gesture started at ({origin_x:.1f}%, {origin_y:.1f}%)")
        return True

    def dispose(self) -> None:
        """進行中のジェスチャーを破棄し、すべての購読を解除"""
        self._manipulator.dispose()
        self._cancel_draw()

    def _cancel_draw(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self._gesture = None

    def _on_draw_move(self, event: PointerEventDTO) -> None:
        surface = self._surface_provider()
        if self._gesture is None or surface is None:
            return

        self._gesture = replace(self._gesture, preview=drawn_rect(self._gesture, event, surface))

    def _on_draw_up(self, event: PointerEventDTO) -> None:
        gesture = self._gesture
        surface = self._surface_provider()
        # プレビューは判定結果にかかわらず破棄
        self._cancel_draw()
        if gesture is None or surface is None:
            return

        frame = self._store.current_frame
        if frame is None or frame.id != gesture.frame_id or not self.enabled:
            self._last_outcome = GestureOutcome.DISCARDED
            return

        outcome = classify_draw(gesture, event, surface, self._settings)
        self._last_outcome = outcome

        if outcome == GestureOutcome.CLICK:
            box = HotspotDTO(
                id=new_box_id(),
                rect=centered_rect(gesture.origin_x, gesture.origin_y,
                                   self._settings.default_box_w, self._settings.default_box_h),
                order=frame.next_hotspot_order(),
            )
        elif outcome == GestureOutcome.DRAW:
            box = InputFieldDTO(id=new_box_id(), rect=drawn_rect(gesture, event, surface))
        else:
            logger.debug("Draw gesture discarded (below size threshold)")
            return

        self._store.append_box(box)
        self._store.select_box(box.id)
        logger.debug(f"{box.box_type.value} created by {outcome.value}: {box.rect}")
