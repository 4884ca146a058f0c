#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ジェスチャーDTO定義

ポインタイベントと、進行中の1つのジェスチャー（移動・リサイズ・描画）の状態。
ジェスチャー状態はポインタダウンで生成され、ポインタアップで破棄される短命な値。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from domain.vo.box_geometry import PercentRect
from domain.vo.resize_handle import ResizeHandle


class GestureKind(Enum):
    """ジェスチャー種別"""
    DRAG = "drag"  # ボックス全体の移動
    RESIZE = "resize"  # ハンドルによるリサイズ
    DRAW = "draw"  # 描画面上でのクリック / ドラッグ描画


class GestureOutcome(Enum):
    """描画ジェスチャーの判定結果"""
    CLICK = "click"  # ホットスポット作成
    DRAW = "draw"  # 入力欄作成
    DISCARDED = "discarded"  # 何も作成しない


@dataclass(frozen=True)
class PointerEventDTO:
    """
    ポインタイベント

    座標はビューポート座標（描画面の外も含む）、時刻はミリ秒。
    """

    client_x: float
    client_y: float
    timestamp_ms: float = 0.0


@dataclass(frozen=True)
class DragGestureDTO:
    """移動ジェスチャーの開始時スナップショット"""

    box_id: str
    start_rect: PercentRect
    pointer_x: float
    pointer_y: float

    @property
    def kind(self) -> GestureKind:
        return GestureKind.DRAG


@dataclass(frozen=True)
class ResizeGestureDTO:
    """
    リサイズジェスチャーの開始時スナップショット

    開始時の矩形は描画面ピクセル座標で保持する。
    """

    box_id: str
    handle: ResizeHandle
    start_x: float
    start_y: float
    start_w: float
    start_h: float
    pointer_x: float
    pointer_y: float

    @property
    def kind(self) -> GestureKind:
        return GestureKind.RESIZE


@dataclass(frozen=True)
class DrawGestureDTO:
    """
    描画ジェスチャーの状態

    起点はパーセント座標と画面座標の両方で保持し、preview は現在のプレビュー矩形。
    """

    frame_id: str
    origin_x: float  # %
    origin_y: float  # %
    origin_client_x: float
    origin_client_y: float
    started_at_ms: float
    preview: Optional[PercentRect] = None

    @property
    def kind(self) -> GestureKind:
        return GestureKind.DRAW
