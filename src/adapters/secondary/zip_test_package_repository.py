#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ZIP Test Package Repository Adapter

ZIPアーカイブ（test.json + frame_NNN.jpg）を使用したテストパッケージリポジトリ実装。
ITestPackageRepository / ITestPackageSerializer ポートの実装を提供。
"""
from typing import Dict, List, Optional, Sequence, Union
from pathlib import Path
import io
import json
import logging
import zipfile
import zlib

import numpy as np

from domain.dto.box_dto import BoxDTO, HotspotDTO, InputFieldDTO, new_box_id
from domain.dto.frame_dto import FrameAssetDTO, new_frame_id
from domain.dto.package_dto import (
    ManifestFrameDTO, ManifestHotspotDTO, ManifestInputDTO, TestManifestDTO, image_name_for
)
from domain.dto.settings_dto import PackageSettingsDTO
from domain.ports.secondary.package_ports import (
    IImageCodec, ITestPackageSerializer, MalformedPackageError
)
from domain.vo.box_geometry import clamp_rect, to_percent, to_pixels
from adapters.secondary.opencv_image_codec import OpenCVImageCodecAdapter

logger = logging.getLogger(__name__)


def _read_member(zf: zipfile.ZipFile, name: str) -> bytes:
    """
    アーカイブのメンバーを読み込む

    破損（CRC不一致・途中切れ）、未対応の圧縮方式、暗号化メンバーは
    MalformedPackageError に変換する。存在しないメンバーは KeyError のまま送出。
    """
    try:
        return zf.read(name)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, NotImplementedError, RuntimeError,
            EOFError, zlib.error) as e:
        raise MalformedPackageError(f"Package member {name} could not be read: {e}") from e


class JsonManifestSerializer:
    """
    JSONマニフェストシリアライザ

    ボックス座標はフレームのネイティブ解像度で整数ピクセルに丸めて出力し、
    読み込み時にパーセント座標へ戻す。
    """

    def build_manifest(self, frames: Sequence[FrameAssetDTO]) -> TestManifestDTO:
        """エクスポート順のフレームからマニフェストを生成"""
        entries = []
        for position, frame in enumerate(frames, start=1):
            width, height = frame.original_width, frame.original_height
            entries.append(ManifestFrameDTO(
                image=image_name_for(position),
                hotspots=tuple(
                    ManifestHotspotDTO(rect=to_pixels(h.rect, width, height), label=h.label, order=h.order)
                    for h in frame.hotspots
                ),
                inputs=tuple(
                    ManifestInputDTO(rect=to_pixels(i.rect, width, height), label=i.label, expected=i.expected)
                    for i in frame.input_fields
                ),
            ))
        return TestManifestDTO(frames=tuple(entries))

    def frames_from_manifest(self, manifest: TestManifestDTO,
                             images: Dict[str, np.ndarray]) -> List[FrameAssetDTO]:
        """
        マニフェストと画像からフレームを復元

        ボックスはホットスポット、入力欄の順に並べ、すべてのフレームをテスト対象とする。
        """
        frames = []
        for entry in manifest.frames:
            image = images.get(entry.image)
            if image is None:
                raise MalformedPackageError(f"Image referenced by manifest is missing: {entry.image}")

            height, width = image.shape[:2]
            try:
                boxes: List[BoxDTO] = [
                    HotspotDTO(
                        id=new_box_id(),
                        rect=clamp_rect(to_percent(h.rect, width, height)),
                        label=h.label,
                        order=h.order,
                    )
                    for h in entry.hotspots
                ]
                boxes.extend(
                    InputFieldDTO(
                        id=new_box_id(),
                        rect=clamp_rect(to_percent(i.rect, width, height)),
                        label=i.label,
                        expected=i.expected,
                    )
                    for i in entry.inputs
                )
                frames.append(FrameAssetDTO(
                    id=new_frame_id(),
                    image=image,
                    original_width=width,
                    original_height=height,
                    boxes=tuple(boxes),
                    include_in_test=True,
                ))
            except ValueError as e:
                raise MalformedPackageError(f"Invalid frame {entry.image}: {e}") from e
        return frames

    def dumps(self, manifest: TestManifestDTO) -> bytes:
        """マニフェストをJSON形式でシリアライズ"""
        json_str = json.dumps(manifest.to_list(), ensure_ascii=False, indent=2)
        return json_str.encode('utf-8')

    def loads(self, data: bytes) -> TestManifestDTO:
        """JSONからマニフェストをデシリアライズ"""
        try:
            data_list = json.loads(data.decode('utf-8'))
            return TestManifestDTO.from_list(data_list)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedPackageError(f"Manifest is not valid JSON: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedPackageError(f"Manifest has an invalid structure: {e!r}") from e


class ZipTestPackageRepositoryAdapter:
    """
    ZIPアーカイブを使用したテストパッケージリポジトリアダプター

    ITestPackageRepositoryインターフェースの実装。
    渡されたフレームをすべて出力する（テスト対象の絞り込みは呼び出し側）。
    """

    def __init__(self, serializer: Optional[ITestPackageSerializer] = None,
                 codec: Optional[IImageCodec] = None,
                 settings: Optional[PackageSettingsDTO] = None):
        """
        Args:
            serializer: マニフェストシリアライザ
            codec: 画像コーデック
            settings: パッケージ設定
        """
        self.serializer = serializer or JsonManifestSerializer()
        self.codec = codec or OpenCVImageCodecAdapter()
        self.settings = settings or PackageSettingsDTO()

    def to_bytes(self, frames: Sequence[FrameAssetDTO]) -> bytes:
        """パッケージをメモリ上で生成"""
        manifest = self.serializer.build_manifest(frames)

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
            zf.writestr(self.settings.manifest_name, self.serializer.dumps(manifest))
            for frame, entry in zip(frames, manifest.frames):
                zf.writestr(entry.image, self.codec.encode_jpeg(frame.image, self.settings.jpeg_quality))
        return buffer.getvalue()

    def from_bytes(self, data: bytes) -> List[FrameAssetDTO]:
        """メモリ上のパッケージを読み込む"""
        try:
            zf = zipfile.ZipFile(io.BytesIO(data), 'r')
        except zipfile.BadZipFile as e:
            raise MalformedPackageError(f"Package is not a valid ZIP archive: {e}") from e

        with zf:
            try:
                manifest_data = _read_member(zf, self.settings.manifest_name)
            except KeyError as e:
                raise MalformedPackageError(
                    f"Package has no manifest ({self.settings.manifest_name})"
                ) from e

            manifest = self.serializer.loads(manifest_data)

            images: Dict[str, np.ndarray] = {}
            for name in manifest.image_names:
                if name in images:
                    continue
                try:
                    images[name] = self.codec.decode(_read_member(zf, name))
                except KeyError as e:
                    raise MalformedPackageError(f"Image referenced by manifest is missing: {name}") from e
                except MalformedPackageError:
                    raise
                except ValueError as e:
                    raise MalformedPackageError(f"Image could not be decoded: {name}") from e

        return self.serializer.frames_from_manifest(manifest, images)

    def save(self, frames: Sequence[FrameAssetDTO], path: Union[str, Path]) -> None:
        """パッケージを保存"""
        path = Path(path)
        data = self.to_bytes(frames)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"テストパッケージを保存しました: {path} ({len(frames)}フレーム)")

    def load(self, path: Union[str, Path]) -> List[FrameAssetDTO]:
        """パッケージを読み込む"""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Package file not found: {path}")

        frames = self.from_bytes(path.read_bytes())
        logger.info(f"テストパッケージを読み込みました: {path} ({len(frames)}フレーム)")
        return frames
