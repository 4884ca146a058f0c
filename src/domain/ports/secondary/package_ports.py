#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
テストパッケージポート定義

テストパッケージ（マニフェスト + フレーム画像のアーカイブ）の
読み書きに関するインターフェース。
"""
from typing import Protocol, Dict, List, Sequence, Union
from pathlib import Path

import numpy as np

from domain.dto.frame_dto import FrameAssetDTO
from domain.dto.package_dto import TestManifestDTO


class MalformedPackageError(ValueError):
    """
    パッケージ破損エラー

    マニフェストの欠落、参照画像の欠落、不正なJSONなど。
    """


class IImageCodec(Protocol):
    """フレーム画像のエンコード / デコード"""

    def encode_jpeg(self, image: np.ndarray, quality: int = 90) -> bytes:
        """RGB24画像をJPEGにエンコード"""
        ...

    def decode(self, data: bytes) -> np.ndarray:
        """
        画像データをRGB24にデコード

        Raises:
            ValueError: デコードできない場合
        """
        ...


class ITestPackageSerializer(Protocol):
    """フレーム ⇄ マニフェストの変換"""

    def build_manifest(self, frames: Sequence[FrameAssetDTO]) -> TestManifestDTO:
        """エクスポート順のフレームからマニフェストを生成"""
        ...

    def frames_from_manifest(self, manifest: TestManifestDTO,
                             images: Dict[str, np.ndarray]) -> List[FrameAssetDTO]:
        """
        マニフェストと画像からフレームを復元

        Raises:
            MalformedPackageError: 参照画像が無い場合
        """
        ...

    def dumps(self, manifest: TestManifestDTO) -> bytes:
        """マニフェストをJSONにシリアライズ"""
        ...

    def loads(self, data: bytes) -> TestManifestDTO:
        """
        JSONからマニフェストを復元

        Raises:
            MalformedPackageError: JSONが不正な場合
        """
        ...


class ITestPackageRepository(Protocol):
    """テストパッケージリポジトリ"""

    def save(self, frames: Sequence[FrameAssetDTO], path: Union[str, Path]) -> None:
        """フレームをパッケージとして保存（渡されたフレームをすべて出力）"""
        ...

    def load(self, path: Union[str, Path]) -> List[FrameAssetDTO]:
        """
        パッケージを読み込む

        Raises:
            FileNotFoundError: ファイルが無い場合
            MalformedPackageError: パッケージが不正な場合
        """
        ...

    def to_bytes(self, frames: Sequence[FrameAssetDTO]) -> bytes:
        """パッケージをメモリ上で生成"""
        ...

    def from_bytes(self, data: bytes) -> List[FrameAssetDTO]:
        """メモリ上のパッケージを読み込む"""
        ...
