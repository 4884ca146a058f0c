#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
テストパッケージDTO定義

エクスポートパッケージのマニフェスト（test.json）の転送用データクラス。
座標はフレームのネイティブ解像度上の整数ピクセル。

マニフェスト形式:
    [
      {
        "image": "frame_001.jpg",
        "hotspots": [{"x": 10, "y": 20, "w": 30, "h": 40, "label": "...", "order": 1}],
        "inputs": [{"x": 10, "y": 20, "w": 30, "h": 40, "label": "...", "expected": "..."}]
      }
    ]
"""
from dataclasses import dataclass, field
import math
from typing import List, Tuple

from domain.vo.box_geometry import PixelRect


IMAGE_NAME_FORMAT = "frame_{:03d}.jpg"


def image_name_for(position: int) -> str:
    """エクスポート順（1始まり）から画像名を生成"""
    if position < 1:
        raise ValueError(f"Image position must be >= 1, got {position}")
    return IMAGE_NAME_FORMAT.format(position)


def _finite_number(data: dict, key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Manifest coordinate '{key}' must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError as e:
        raise ValueError(f"Manifest coordinate '{key}' is out of range") from e
    if not math.isfinite(number):
        raise ValueError(f"Manifest coordinate '{key}' must be finite, got {value!r}")
    return number


def _pixel_rect_from(data: dict) -> PixelRect:
    return PixelRect(
        x=int(round(_finite_number(data, "x"))),
        y=int(round(_finite_number(data, "y"))),
        w=int(round(_finite_number(data, "w"))),
        h=int(round(_finite_number(data, "h"))),
    )


def _hotspot_order_from(data: dict) -> int:
    order = data.get("order")
    if order is None:
        return 1
    if isinstance(order, bool):
        raise ValueError(f"Hotspot order must be an integer, got {order!r}")
    if isinstance(order, float) and math.isfinite(order) and order.is_integer():
        return int(order)
    if not isinstance(order, int):
        raise ValueError(f"Hotspot order must be an integer, got {order!r}")
    return order


def _text_from(data: dict, key: str) -> str:
    # null は空文字として扱う
    value = data.get(key)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class ManifestHotspotDTO:
    """マニフェスト上のホットスポット"""

    rect: PixelRect
    label: str = ""
    order: int = 1

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        data = self.rect.to_dict()
        data["label"] = self.label
        data["order"] = self.order
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ManifestHotspotDTO":
        """辞書から生成（order が無い旧形式は1とみなす）"""
        return cls(
            rect=_pixel_rect_from(data),
            label=_text_from(data, "label"),
            order=_hotspot_order_from(data),
        )


@dataclass(frozen=True)
class ManifestInputDTO:
    """マニフェスト上の入力欄"""

    rect: PixelRect
    label: str = ""
    expected: str = ""

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        data = self.rect.to_dict()
        data["label"] = self.label
        data["expected"] = self.expected
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ManifestInputDTO":
        """辞書から生成"""
        return cls(
            rect=_pixel_rect_from(data),
            label=_text_from(data, "label"),
            expected=_text_from(data, "expected"),
        )


@dataclass(frozen=True)
class ManifestFrameDTO:
    """マニフェスト上の1フレーム"""

    image: str
    hotspots: Tuple[ManifestHotspotDTO, ...] = field(default_factory=tuple)
    inputs: Tuple[ManifestInputDTO, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """検証"""
        if not isinstance(self.image, str) or not self.image:
            raise ValueError("Manifest frame must reference an image")

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return {
            "image": self.image,
            "hotspots": [hotspot.to_dict() for hotspot in self.hotspots],
            "inputs": [field_.to_dict() for field_ in self.inputs],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ManifestFrameDTO":
        """辞書から生成"""
        return cls(
            image=data["image"],
            hotspots=tuple(ManifestHotspotDTO.from_dict(h) for h in data.get("hotspots") or []),
            inputs=tuple(ManifestInputDTO.from_dict(i) for i in data.get("inputs") or []),
        )


@dataclass(frozen=True)
class TestManifestDTO:
    """
    テストパッケージのマニフェスト全体

    frames はエクスポート順。
    """

    __test__ = False  # pytestの収集対象外

    frames: Tuple[ManifestFrameDTO, ...]

    @property
    def image_names(self) -> List[str]:
        return [frame.image for frame in self.frames]

    def to_list(self) -> list:
        """JSON配列形式に変換"""
        return [frame.to_dict() for frame in self.frames]

    @classmethod
    def from_list(cls, data: list) -> "TestManifestDTO":
        """JSON配列から生成"""
        if not isinstance(data, list):
            raise ValueError(f"Manifest must be a list of frames, got {type(data).__name__}")
        return cls(frames=tuple(ManifestFrameDTO.from_dict(item) for item in data))
