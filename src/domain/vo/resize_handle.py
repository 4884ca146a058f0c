#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
リサイズハンドルValue Object

ボックスの4隅と4辺に配置されるリサイズハンドルの種類と、
各ハンドルが動かす辺の対応を定義する。
"""
from enum import Enum


class ResizeHandle(Enum):
    """リサイズハンドル（方角で識別）"""
    NORTH_WEST = "nw"
    NORTH_EAST = "ne"
    SOUTH_WEST = "sw"
    SOUTH_EAST = "se"
    NORTH = "n"
    SOUTH = "s"
    WEST = "w"
    EAST = "e"

    @property
    def moves_left_edge(self) -> bool:
        """左辺を動かす（x と幅が変化）"""
        return "w" in self.value

    @property
    def moves_right_edge(self) -> bool:
        """右辺を動かす（幅のみ変化）"""
        return "e" in self.value

    @property
    def moves_top_edge(self) -> bool:
        """上辺を動かす（y と高さが変化）"""
        return "n" in self.value

    @property
    def moves_bottom_edge(self) -> bool:
        """下辺を動かす（高さのみ変化）"""
        return "s" in self.value

    @property
    def is_corner(self) -> bool:
        """角のハンドルか"""
        return len(self.value) == 2

    @classmethod
    def from_string(cls, value: str) -> "ResizeHandle":
        """文字列からハンドルを取得"""
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Unknown resize handle: {value}") from None
