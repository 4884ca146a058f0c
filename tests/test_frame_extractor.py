#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
フレーム抽出のテスト

OpenCVで生成した短い動画からPyAVで静止フレームを抽出します。
"""
import tempfile
from pathlib import Path

import cv2
import numpy as np
import pytest

from adapters.secondary.pyav_frame_extractor import PyAVFrameExtractorAdapter, plan_sample_times
from domain.dto.settings_dto import ExtractionSettingsDTO


# === テスト用動画生成 ===

def create_test_video(output_path: Path,
                      width: int = 64,
                      height: int = 48,
                      fps: float = 10.0,
                      duration: float = 2.0) -> None:
    """明るさが時間とともに増える動画を生成"""
    fourcc = cv2.VideoWriter_fourcc(*'mp4v')
    out = cv2.VideoWriter(str(output_path), fourcc, fps, (width, height))

    frame_count = int(fps * duration)
    for i in range(frame_count):
        img = np.full((height, width, 3), int(255 * i / frame_count), dtype=np.uint8)
        out.write(img)

    out.release()


class TestPlanSampleTimes:
    """抽出時刻計画のテスト"""

    def test_long_video_uses_max_frames(self):
        times = plan_sample_times(100.0, 10, 1.0)
        assert len(times) == 10
        assert times[0] == 0.0
        assert times[1] == pytest.approx(10.0)

    def test_short_video_uses_target_fps(self):
        """max_frames / target_fps 秒より短い動画は枚数を減らす"""
        times = plan_sample_times(4.5, 10, 1.0)
        assert times == pytest.approx([0.0, 1.125, 2.25, 3.375])

    def test_very_short_video_yields_one_frame(self):
        assert plan_sample_times(0.3, 10, 1.0) == [0.0]

    def test_unknown_duration(self):
        assert plan_sample_times(0.0, 10, 1.0) == [0.0]


class TestPyAVFrameExtractor:
    """PyAVFrameExtractorAdapterのテスト"""

    @pytest.fixture
    def test_video_path(self):
        """テスト用動画を作成"""
        with tempfile.TemporaryDirectory() as tmpdir:
            video_path = Path(tmpdir) / "test_video.mp4"
            create_test_video(video_path)
            yield video_path

    def test_extracts_evenly_spaced_frames(self, test_video_path):
        extractor = PyAVFrameExtractorAdapter(ExtractionSettingsDTO(max_frames=4, target_fps=10.0))
        progress = []
        frames = extractor.extract_frames(test_video_path, progress.append)

        assert len(frames) == 4
        assert progress[-1] == 100
        assert all(frame.include_in_test for frame in frames)
        assert all(frame.boxes == () for frame in frames)
        assert (frames[0].original_width, frames[0].original_height) == (64, 48)
        assert frames[0].image.shape == (48, 64, 3)

        timestamps = [frame.timestamp for frame in frames]
        assert timestamps == sorted(timestamps)
        assert timestamps[1] == pytest.approx(0.5, abs=0.1)

        # 後のフレームほど明るい
        assert frames[-1].image.mean() > frames[0].image.mean()

    def test_short_video_default_settings(self, test_video_path):
        """2秒の動画は既定設定（最大10枚, 1fps）で2枚"""
        frames = PyAVFrameExtractorAdapter().extract_frames(test_video_path)
        assert len(frames) == 2
        assert len({frame.id for frame in frames}) == 2

    def test_oversized_file_rejected(self, test_video_path):
        extractor = PyAVFrameExtractorAdapter(ExtractionSettingsDTO(max_video_bytes=16))
        with pytest.raises(ValueError):
            extractor.extract_frames(test_video_path)

    def test_unreadable_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "broken.mp4"
            path.write_bytes(b"definitely not a video")
            with pytest.raises(IOError):
                PyAVFrameExtractorAdapter().extract_frames(path)

    def test_missing_file(self):
        with pytest.raises(IOError):
            PyAVFrameExtractorAdapter().extract_frames("/nonexistent/video.mp4")
