#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
フレーム編集ポート定義

ボックス編集機能へのアクセスインターフェース。
"""
from typing import Protocol, Optional

from domain.dto.box_dto import BoxDTO
from domain.dto.frame_dto import FrameAssetDTO
from domain.dto.gesture_dto import PointerEventDTO
from domain.vo.box_geometry import PercentRect
from domain.vo.resize_handle import ResizeHandle


class IBoxStore(Protocol):
    """
    編集対象フレームのボックス保持者

    BoxManipulator / FrameGeometryEditor はこのインターフェース経由でのみ
    ボックスを読み書きする。
    """

    @property
    def current_frame(self) -> Optional[FrameAssetDTO]:
        """編集中のフレーム"""
        ...

    @property
    def selected_box_id(self) -> Optional[str]:
        """選択中のボックスID"""
        ...

    def get_box(self, box_id: str) -> Optional[BoxDTO]:
        """編集中フレームのボックスを取得"""
        ...

    def set_box_rect(self, box_id: str, rect: PercentRect) -> None:
        """ボックスのジオメトリを更新"""
        ...

    def append_box(self, box: BoxDTO) -> None:
        """編集中フレームの末尾にボックスを追加"""
        ...

    def select_box(self, box_id: Optional[str]) -> None:
        """ボックスを選択（Noneで選択解除）"""
        ...


class IFrameGeometryEditor(Protocol):
    """描画面上のジェスチャー受付インターフェース"""

    @property
    def enabled(self) -> bool:
        """編集可能か（除外フレームや無効化中はFalse）"""
        ...

    @property
    def preview(self) -> Optional[PercentRect]:
        """ドラッグ描画中のプレビュー矩形"""
        ...

    def pointer_down_on_surface(self, event: PointerEventDTO) -> bool:
        """描画面（ボックス以外）でのポインタダウン"""
        ...

    def pointer_down_on_box(self, box_id: str, event: PointerEventDTO) -> bool:
        """ボックス本体でのポインタダウン（選択して移動開始）"""
        ...

    def pointer_down_on_handle(self, box_id: str, handle: ResizeHandle,
                               event: PointerEventDTO) -> bool:
        """リサイズハンドルでのポインタダウン（選択してリサイズ開始）"""
        ...

    def dispose(self) -> None:
        """進行中のジェスチャーを破棄し、購読を解除"""
        ...
