#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ボックスDTO定義

フレーム上のインタラクティブ領域（ホットスポット / 入力欄）の転送用データクラス。
2種類のボックスは別クラスとして定義し、BoxDTO（Union）で扱う。
種別はボックス作成後に変更できない。
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Union
import uuid

from domain.vo.box_geometry import PercentRect


class BoxType(Enum):
    """ボックス種別"""
    HOTSPOT = "hotspot"  # 順番にクリックする領域
    INPUT = "input"  # 期待される回答テキストを持つ入力欄


DEFAULT_HOTSPOT_LABEL = "New Hotspot"
DEFAULT_INPUT_LABEL = "New Input"


def new_box_id() -> str:
    """一意のボックスIDを生成"""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class HotspotDTO:
    """
    ホットスポット転送オブジェクト

    order は1以上の整数で、フレーム内でのクリック順序を表す。
    """

    id: str
    rect: PercentRect
    label: str = DEFAULT_HOTSPOT_LABEL
    order: int = 1

    def __post_init__(self):
        """検証"""
        if not self.id:
            raise ValueError("Box id must not be empty")

        if isinstance(self.order, bool) or not isinstance(self.order, int):
            raise ValueError(f"Hotspot order must be an integer, got {self.order!r}")

        if self.order < 1:
            raise ValueError(f"Hotspot order must be >= 1, got {self.order}")

    @property
    def box_type(self) -> BoxType:
        return BoxType.HOTSPOT


@dataclass(frozen=True)
class InputFieldDTO:
    """
    入力欄転送オブジェクト

    expected が空文字列の場合は「入力なし」を正解とする。
    """

    id: str
    rect: PercentRect
    label: str = DEFAULT_INPUT_LABEL
    expected: str = ""

    def __post_init__(self):
        """検証"""
        if not self.id:
            raise ValueError("Box id must not be empty")

        if not isinstance(self.expected, str):
            raise ValueError(f"Expected answer must be a string, got {self.expected!r}")

    @property
    def box_type(self) -> BoxType:
        return BoxType.INPUT


BoxDTO = Union[HotspotDTO, InputFieldDTO]


# 種別ごとに変更可能なフィールド
_EDITABLE_FIELDS = {
    BoxType.HOTSPOT: {"rect", "label", "order"},
    BoxType.INPUT: {"rect", "label", "expected"},
}


def update_box(box: BoxDTO, **changes) -> BoxDTO:
    """
    ボックスの一部フィールドを更新した新しいインスタンスを返す

    種別やIDは変更できない。種別に存在しないフィールド
    （ホットスポットの expected など）の指定は ValueError。
    """
    allowed = _EDITABLE_FIELDS[box.box_type]
    unknown = set(changes) - allowed
    if unknown:
        raise ValueError(
            f"Cannot change {', '.join(sorted(unknown))} on a {box.box_type.value} box"
        )
    return replace(box, **changes)


def is_hotspot(box: BoxDTO) -> bool:
    """ホットスポットか判定"""
    return isinstance(box, HotspotDTO)


def is_input_field(box: BoxDTO) -> bool:
    """入力欄か判定"""
    return isinstance(box, InputFieldDTO)
