#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
テストパッケージ入出力のテスト

ZIPアーカイブ（test.json + frame_NNN.jpg）の書き出しと読み込み、
破損パッケージの検出を検証します。
"""
import io
import json
import tempfile
import zipfile
from pathlib import Path

import numpy as np
import pytest

from adapters.secondary.opencv_image_codec import OpenCVImageCodecAdapter
from adapters.secondary.zip_test_package_repository import (
    JsonManifestSerializer, ZipTestPackageRepositoryAdapter
)
from core.authoring_workspace import AuthoringWorkspace
from domain.dto.box_dto import HotspotDTO, InputFieldDTO
from domain.dto.frame_dto import FrameAssetDTO
from domain.dto.package_dto import TestManifestDTO, image_name_for
from domain.dto.settings_dto import PackageSettingsDTO
from domain.ports.secondary.package_ports import MalformedPackageError
from domain.vo.box_geometry import PercentRect, PixelRect


# === テスト用データ生成 ===

def solid_frame(value: int, width: int = 200, height: int = 100, boxes=()) -> FrameAssetDTO:
    """単色のフレームを生成"""
    image = np.full((height, width, 3), value, dtype=np.uint8)
    return FrameAssetDTO.from_image(image).with_boxes(boxes)


def zip_bytes(entries: dict) -> bytes:
    """名前 -> 内容 の辞書からZIPを生成"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buffer.getvalue()


def jpeg_bytes(width: int = 20, height: int = 10) -> bytes:
    return OpenCVImageCodecAdapter().encode_jpeg(np.zeros((height, width, 3), dtype=np.uint8))


def valid_package_bytes() -> bytes:
    """無圧縮で格納した1フレームのパッケージ"""
    return zip_bytes({"test.json": json.dumps([{"image": "frame_001.jpg"}]), "frame_001.jpg": jpeg_bytes()})


def corrupt_once(data: bytes, old: bytes, new: bytes) -> bytes:
    """格納データの最初の一致箇所だけを書き換える"""
    assert len(old) == len(new) and old in data
    return data.replace(old, new, 1)


@pytest.fixture
def repository():
    return ZipTestPackageRepositoryAdapter()


class TestJsonManifestSerializer:
    """マニフェスト変換のテスト"""

    def test_boxes_exported_as_native_pixels(self):
        frame = solid_frame(0, boxes=(
            HotspotDTO(id="h", rect=PercentRect(x=10, y=20, w=30, h=40), label="Menu", order=2),
            InputFieldDTO(id="i", rect=PercentRect(x=50, y=50, w=25, h=10), label="Price", expected="42"),
        ))
        manifest = JsonManifestSerializer().build_manifest([frame])

        entry = manifest.frames[0]
        assert entry.image == "frame_001.jpg"
        assert entry.hotspots[0].rect == PixelRect(x=20, y=20, w=60, h=40)
        assert entry.hotspots[0].order == 2
        assert entry.inputs[0].rect == PixelRect(x=100, y=50, w=50, h=10)
        assert entry.inputs[0].expected == "42"

    def test_json_layout(self):
        frame = solid_frame(0, boxes=(HotspotDTO(id="h", rect=PercentRect(0, 0, 50, 50), label="A"),))
        serializer = JsonManifestSerializer()
        data = json.loads(serializer.dumps(serializer.build_manifest([frame])))

        assert data == [{
            "image": "frame_001.jpg",
            "hotspots": [{"x": 0, "y": 0, "w": 100, "h": 50, "label": "A", "order": 1}],
            "inputs": [],
        }]

    def test_missing_order_defaults_to_one(self):
        manifest = JsonManifestSerializer().loads(json.dumps([{
            "image": "frame_001.jpg",
            "hotspots": [{"x": 1, "y": 2, "w": 3, "h": 4, "label": "legacy"}],
        }]).encode('utf-8'))
        assert manifest.frames[0].hotspots[0].order == 1
        assert manifest.frames[0].inputs == ()

    def test_non_list_manifest_rejected(self):
        with pytest.raises(MalformedPackageError):
            JsonManifestSerializer().loads(b'{"frames": []}')

    def test_invalid_json_rejected(self):
        with pytest.raises(MalformedPackageError):
            JsonManifestSerializer().loads(b'[{"image": ')

    def test_missing_image_key_rejected(self):
        with pytest.raises(MalformedPackageError):
            JsonManifestSerializer().loads(b'[{"hotspots": []}]')

    @pytest.mark.parametrize("raw", [b"1e400", b"Infinity", b"-Infinity", b"NaN", b'"10"', b"true"])
    def test_non_finite_or_non_numeric_coordinates_rejected(self, raw):
        """無限大・NaN・数値以外の座標は不正なマニフェスト"""
        data = b'[{"image": "frame_001.jpg", "hotspots": [{"x": ' + raw + b', "y": 0, "w": 5, "h": 5}]}]'
        with pytest.raises(MalformedPackageError):
            JsonManifestSerializer().loads(data)

    @pytest.mark.parametrize("order", [1.7, True, "2", [1]])
    def test_non_integer_order_rejected(self, order):
        manifest = json.dumps([{
            "image": "frame_001.jpg",
            "hotspots": [{"x": 1, "y": 2, "w": 3, "h": 4, "order": order}],
        }]).encode('utf-8')
        with pytest.raises(MalformedPackageError):
            JsonManifestSerializer().loads(manifest)

    def test_integral_float_order_accepted(self):
        manifest = JsonManifestSerializer().loads(json.dumps([{
            "image": "frame_001.jpg",
            "hotspots": [{"x": 1, "y": 2, "w": 3, "h": 4, "order": 3.0}],
        }]).encode('utf-8'))
        assert manifest.frames[0].hotspots[0].order == 3

    def test_null_text_becomes_empty(self):
        """null のラベル・期待値は空文字"""
        manifest = JsonManifestSerializer().loads(json.dumps([{
            "image": "frame_001.jpg",
            "hotspots": [{"x": 1, "y": 2, "w": 3, "h": 4, "label": None}],
            "inputs": [{"x": 1, "y": 2, "w": 3, "h": 4, "label": None, "expected": None}],
        }]).encode('utf-8'))
        assert manifest.frames[0].hotspots[0].label == ""
        assert manifest.frames[0].inputs[0].label == ""
        assert manifest.frames[0].inputs[0].expected == ""

    def test_non_string_image_rejected(self):
        with pytest.raises(MalformedPackageError):
            JsonManifestSerializer().loads(b'[{"image": ["frame_001.jpg"]}]')

    def test_image_names(self):
        assert image_name_for(1) == "frame_001.jpg"
        assert image_name_for(12) == "frame_012.jpg"
        with pytest.raises(ValueError):
            image_name_for(0)


class TestZipTestPackageRepository:
    """ZipTestPackageRepositoryAdapterのテスト"""

    def test_export_only_included_frames_renumbered(self):
        """5フレーム中2フレームをテスト対象にすると、連番の2画像と2エントリのみ出力"""
        workspace = AuthoringWorkspace(package_repository=ZipTestPackageRepositoryAdapter())
        workspace.load_frames([solid_frame(value * 40) for value in range(5)])
        for index in (0, 2, 4):
            workspace.go_to_frame(index)
            workspace.set_frame_included(False)

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "test_package.zip"
            assert workspace.export_package(path)

            with zipfile.ZipFile(path) as zf:
                names = sorted(zf.namelist())
                manifest = json.loads(zf.read("test.json"))

        assert names == ["frame_001.jpg", "frame_002.jpg", "test.json"]
        assert [entry["image"] for entry in manifest] == ["frame_001.jpg", "frame_002.jpg"]

    def test_save_and_load_round_trip(self, repository):
        """往復後のボックス座標はネイティブ解像度で1px以内"""
        original = PercentRect(x=12.34, y=56.78, w=20.2, h=11.1)
        frames = [
            solid_frame(30, width=321, height=123, boxes=(
                HotspotDTO(id="h1", rect=original, label="First", order=1),
                InputFieldDTO(id="i1", rect=PercentRect(x=5, y=5, w=30, h=10), label="Name", expected="Ada"),
            )),
            solid_frame(200),
        ]

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "pkg.zip"
            repository.save(frames, path)
            loaded = repository.load(path)

        assert len(loaded) == 2
        first = loaded[0]
        assert (first.original_width, first.original_height) == (321, 123)
        assert all(frame.include_in_test for frame in loaded)

        hotspot = first.hotspots[0]
        assert hotspot.label == "First"
        assert hotspot.order == 1
        assert hotspot.id != "h1"  # IDは読み込み時に再発行
        assert abs(hotspot.rect.x - original.x) * 321 / 100 <= 1
        assert abs(hotspot.rect.y - original.y) * 123 / 100 <= 1
        assert abs(hotspot.rect.w - original.w) * 321 / 100 <= 1
        assert abs(hotspot.rect.h - original.h) * 123 / 100 <= 1

        field = first.input_fields[0]
        assert (field.label, field.expected) == ("Name", "Ada")

        # JPEGの誤差を許容
        assert abs(int(loaded[1].image.mean()) - 200) <= 2

    def test_imported_boxes_ordered_hotspots_first(self, repository):
        frame = solid_frame(0, boxes=(
            InputFieldDTO(id="i", rect=PercentRect(0, 0, 10, 10)),
            HotspotDTO(id="h", rect=PercentRect(50, 50, 10, 10)),
        ))
        loaded = repository.from_bytes(repository.to_bytes([frame]))
        assert [type(box) for box in loaded[0].boxes] == [HotspotDTO, InputFieldDTO]

    def test_custom_manifest_name(self):
        repository = ZipTestPackageRepositoryAdapter(settings=PackageSettingsDTO(manifest_name="manifest.json"))
        data = repository.to_bytes([solid_frame(0)])
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert "manifest.json" in zf.namelist()
        assert len(repository.from_bytes(data)) == 1

    def test_missing_file(self, repository):
        with pytest.raises(FileNotFoundError):
            repository.load("/nonexistent/package.zip")

    def test_not_a_zip(self, repository):
        with pytest.raises(MalformedPackageError):
            repository.from_bytes(b"this is not a zip archive")

    def test_missing_manifest(self, repository):
        with pytest.raises(MalformedPackageError):
            repository.from_bytes(zip_bytes({"frame_001.jpg": jpeg_bytes()}))

    def test_missing_referenced_image(self, repository):
        manifest = json.dumps([{"image": "frame_001.jpg"}, {"image": "frame_002.jpg"}])
        data = zip_bytes({"test.json": manifest, "frame_001.jpg": jpeg_bytes()})
        with pytest.raises(MalformedPackageError):
            repository.from_bytes(data)

    def test_undecodable_image(self, repository):
        data = zip_bytes({"test.json": json.dumps([{"image": "frame_001.jpg"}]), "frame_001.jpg": b"garbage"})
        with pytest.raises(MalformedPackageError):
            repository.from_bytes(data)

    def test_invalid_box_values(self, repository):
        manifest = json.dumps([{
            "image": "frame_001.jpg",
            "hotspots": [{"x": 0, "y": 0, "w": 5, "h": 5, "order": 0}],
        }])
        data = zip_bytes({"test.json": manifest, "frame_001.jpg": jpeg_bytes()})
        with pytest.raises(MalformedPackageError):
            repository.from_bytes(data)

    def test_corrupted_manifest_member(self, repository):
        """CRCが一致しないメンバーは不正なパッケージ"""
        data = corrupt_once(valid_package_bytes(), b'[{"image"', b'[{"imagf"')
        with pytest.raises(MalformedPackageError):
            repository.from_bytes(data)

    def test_corrupted_image_member(self, repository):
        data = valid_package_bytes()
        image = jpeg_bytes()
        data = corrupt_once(data, image[-8:], bytes(b ^ 0xFF for b in image[-8:]))
        with pytest.raises(MalformedPackageError):
            repository.from_bytes(data)

    def test_unsupported_compression(self, repository):
        """未対応の圧縮方式のメンバーは不正なパッケージ"""
        data = bytearray(valid_package_bytes())
        # 先頭の中央ディレクトリレコード（test.json）の圧縮方式を書き換える
        offset = data.index(b'PK\x01\x02') + 10
        data[offset:offset + 2] = (99).to_bytes(2, 'little')
        with pytest.raises(MalformedPackageError):
            repository.from_bytes(bytes(data))

    def test_empty_manifest_loads_no_frames(self, repository):
        assert repository.from_bytes(zip_bytes({"test.json": "[]"})) == []

    def test_manifest_dto_from_list(self):
        manifest = TestManifestDTO.from_list([{"image": "a.jpg"}, {"image": "b.jpg", "inputs": None}])
        assert manifest.image_names == ["a.jpg", "b.jpg"]
