#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
フレームDTO定義

ビデオから抽出した静止フレームと、その上のボックス群の転送用データクラス。
画像はRGB24形式に統一して外部ライブラリ依存を排除。
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple
import uuid

import numpy as np

from domain.dto.box_dto import BoxDTO, HotspotDTO, InputFieldDTO
from domain.vo.resolution import Resolution


def new_frame_id() -> str:
    """一意のフレームIDを生成"""
    return str(uuid.uuid4())


@dataclass(frozen=True, eq=False)
class FrameAssetDTO:
    """
    フレームアセット転送オブジェクト

    boxes は作成順（表示順ではない）。編集は新しいインスタンスを生成して行う。
    """

    # フレーム識別情報
    id: str

    # 画像データ（RGB24形式、shape: (height, width, 3)）
    image: np.ndarray

    # ネイティブ解像度（パーセント⇄ピクセル変換専用）
    original_width: int
    original_height: int

    boxes: Tuple[BoxDTO, ...] = field(default_factory=tuple)
    include_in_test: bool = True

    # 元動画での時刻（秒）
    timestamp: Optional[float] = None

    def __post_init__(self):
        """検証とデータ整合性チェック"""
        # 解像度の検証（Resolutionに委譲）
        Resolution(self.original_width, self.original_height)

        # データ形状の検証
        if self.image.ndim != 3 or self.image.shape[2] != 3:
            raise ValueError(f"Frame image must be (h, w, 3) RGB array, got shape {self.image.shape}")

        if self.image.dtype != np.uint8:
            raise ValueError(f"Frame image must be uint8, got {self.image.dtype}")

        if not isinstance(self.boxes, tuple):
            object.__setattr__(self, "boxes", tuple(self.boxes))

        ids = [box.id for box in self.boxes]
        if len(ids) != len(set(ids)):
            raise ValueError("Box ids must be unique within a frame")

    @property
    def resolution(self) -> Resolution:
        """ネイティブ解像度"""
        return Resolution(self.original_width, self.original_height)

    @property
    def hotspots(self) -> Tuple[HotspotDTO, ...]:
        """ホットスポットのみ（作成順）"""
        return tuple(box for box in self.boxes if isinstance(box, HotspotDTO))

    @property
    def input_fields(self) -> Tuple[InputFieldDTO, ...]:
        """入力欄のみ（作成順）"""
        return tuple(box for box in self.boxes if isinstance(box, InputFieldDTO))

    @property
    def has_hotspots(self) -> bool:
        return any(isinstance(box, HotspotDTO) for box in self.boxes)

    @property
    def is_input_only(self) -> bool:
        """入力欄のみで構成されたフレームか（1つ以上必要）"""
        return bool(self.boxes) and all(isinstance(box, InputFieldDTO) for box in self.boxes)

    def find_box(self, box_id: str) -> Optional[BoxDTO]:
        """IDでボックスを検索"""
        for box in self.boxes:
            if box.id == box_id:
                return box
        return None

    def next_hotspot_order(self) -> int:
        """新規ホットスポットに割り当てる順序（既存の最大値+1）"""
        return max((box.order for box in self.hotspots), default=0) + 1

    def with_boxes(self, boxes) -> "FrameAssetDTO":
        """ボックス群を差し替えた新しいインスタンス"""
        return replace(self, boxes=tuple(boxes))

    def with_box_appended(self, box: BoxDTO) -> "FrameAssetDTO":
        """ボックスを末尾に追加した新しいインスタンス"""
        return replace(self, boxes=self.boxes + (box,))

    def with_box_replaced(self, box: BoxDTO) -> "FrameAssetDTO":
        """同じIDのボックスを差し替えた新しいインスタンス"""
        return replace(
            self,
            boxes=tuple(box if existing.id == box.id else existing for existing in self.boxes),
        )

    def without_box(self, box_id: str) -> "FrameAssetDTO":
        """ボックスを削除した新しいインスタンス"""
        return replace(self, boxes=tuple(box for box in self.boxes if box.id != box_id))

    def with_inclusion(self, included: bool) -> "FrameAssetDTO":
        """テスト対象フラグを変更した新しいインスタンス"""
        return replace(self, include_in_test=included)

    @classmethod
    def from_image(cls, image: np.ndarray, timestamp: Optional[float] = None,
                   include_in_test: bool = True) -> "FrameAssetDTO":
        """RGB画像から新規フレームを生成（解像度は画像から取得）"""
        height, width = image.shape[:2]
        return cls(
            id=new_frame_id(),
            image=image,
            original_width=width,
            original_height=height,
            include_in_test=include_in_test,
            timestamp=timestamp,
        )
