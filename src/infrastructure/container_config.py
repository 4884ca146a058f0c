#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DIコンテナ設定

アプリケーションの依存性を設定ファイルに基づいて構成。
設定はデフォルト値 → 設定ファイル（YAML / JSON） → 環境変数の順に上書きされる。
"""
from typing import Dict, Any, Optional
from pathlib import Path
import copy
import json
import os
import logging

import yaml

logger = logging.getLogger(__name__)

from .di_container import DIContainer
from core.authoring_workspace import AuthoringWorkspace
from core.notice_board import NoticeBoard
from domain.dto.settings_dto import (
    EditorSettingsDTO, SessionSettingsDTO, ExtractionSettingsDTO, PackageSettingsDTO
)
from domain.ports.secondary.video_ports import IFrameExtractor
from domain.ports.secondary.package_ports import (
    IImageCodec, ITestPackageSerializer, ITestPackageRepository
)
from domain.ports.secondary.performance_ports import IGeometryUpdateThrottle
from adapters.secondary.pyav_frame_extractor import PyAVFrameExtractorAdapter
from adapters.secondary.opencv_image_codec import OpenCVImageCodecAdapter
from adapters.secondary.zip_test_package_repository import (
    JsonManifestSerializer, ZipTestPackageRepositoryAdapter
)
from infrastructure.services.geometry_update_throttle_service import GeometryUpdateThrottleService


ENV_PREFIX = "HOTSPOT_BUILDER_"

# 環境変数名（接頭辞なし） -> (セクション, キー, 型)
_ENV_OVERRIDES = {
    "click_max_ms": ("editor", "click_max_duration_ms", float),
    "click_max_distance_px": ("editor", "click_max_distance_px", float),
    "min_resize_px": ("editor", "min_resize_px", float),
    "notice_ms": ("notices", "lifetime_ms", int),
    "max_frames": ("extraction", "max_frames", int),
    "log_level": ("logging", "level", str),
}


class ContainerConfigurator:
    """
    DIコンテナ設定クラス

    設定ファイルやデフォルト設定に基づいてDIコンテナを構成。
    """

    def __init__(self, config_path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None):
        """
        Args:
            config_path: 設定ファイルのパス
            environ: 環境変数（省略時は os.environ）
        """
        self.config_path = Path(config_path) if config_path else None
        self._environ = os.environ if environ is None else environ
        self.config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """設定を読み込む"""
        # デフォルト設定
        self.config = self._get_default_config()

        # 設定ファイルがあれば読み込む
        if self.config_path and self.config_path.exists():
            if self.config_path.suffix in ('.yaml', '.yml'):
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    file_config = yaml.safe_load(f) or {}
            elif self.config_path.suffix == '.json':
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
            else:
                raise ValueError(f"Unsupported config file format: {self.config_path}")

            if not isinstance(file_config, dict):
                raise ValueError(f"Config file must contain a mapping: {self.config_path}")

            # デフォルト設定を上書き
            self._merge_config(self.config, file_config)
            logger.info(f"Loaded config file: {self.config_path}")
        elif self.config_path:
            logger.warning(f"Config file not found, using defaults: {self.config_path}")

        # 環境変数で上書き
        self._apply_env_overrides()

    def _get_default_config(self) -> Dict[str, Any]:
        """デフォルト設定を取得"""
        return {
            "components": {
                "frame_extractor": {"backend": "pyav"},
                "image_codec": {"backend": "opencv"},
                "package_repository": {"backend": "zip"},
            },
            "editor": EditorSettingsDTO().to_dict(),
            "session": SessionSettingsDTO().to_dict(),
            "extraction": ExtractionSettingsDTO().to_dict(),
            "package": PackageSettingsDTO().to_dict(),
            "notices": {
                "lifetime_ms": 3000,
            },
            "logging": {
                "level": "INFO",
            },
        }

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """設定をマージ（再帰的）"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def _apply_env_overrides(self) -> None:
        """環境変数による設定の上書き"""
        # 例: HOTSPOT_BUILDER_CLICK_MAX_MS=300
        for key, value in self._environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            config_key = key[len(ENV_PREFIX):].lower()
            target = _ENV_OVERRIDES.get(config_key)
            if target is None:
                logger.warning(f"Unknown environment override ignored: {key}")
                continue

            section, name, value_type = target
            try:
                self.config.setdefault(section, {})[name] = value_type(value)
            except ValueError:
                logger.warning(f"Invalid value for {key}: {value!r}")

    @property
    def editor_settings(self) -> EditorSettingsDTO:
        return EditorSettingsDTO.from_dict(self.config["editor"])

    @property
    def session_settings(self) -> SessionSettingsDTO:
        return SessionSettingsDTO.from_dict(self.config["session"])

    @property
    def extraction_settings(self) -> ExtractionSettingsDTO:
        return ExtractionSettingsDTO.from_dict(self.config["extraction"])

    @property
    def package_settings(self) -> PackageSettingsDTO:
        return PackageSettingsDTO.from_dict(self.config["package"])

    @property
    def log_level(self) -> str:
        return str(self.config.get("logging", {}).get("level", "INFO")).upper()

    def configure_container(self, container: DIContainer) -> None:
        """
        DIコンテナを設定

        Args:
            container: 設定するDIコンテナ
        """
        # 設定値を登録
        for key, value in self.config.items():
            container.set_config(key, copy.deepcopy(value))

        # コンポーネントを登録
        self._register_settings(container)
        self._register_video_components(container)
        self._register_package_components(container)
        self._register_performance_components(container)
        self._register_workspace_components(container)

    def _register_settings(self, container: DIContainer) -> None:
        """設定DTOを登録"""
        container.register_instance(EditorSettingsDTO, self.editor_settings)
        container.register_instance(SessionSettingsDTO, self.session_settings)
        container.register_instance(ExtractionSettingsDTO, self.extraction_settings)
        container.register_instance(PackageSettingsDTO, self.package_settings)

    def _register_video_components(self, container: DIContainer) -> None:
        """フレーム抽出コンポーネントを登録"""
        backend = self.config["components"]["frame_extractor"]["backend"]

        if backend == "pyav":
            container.register_singleton(IFrameExtractor, PyAVFrameExtractorAdapter)
        else:
            raise ValueError(f"Unknown frame extractor backend: {backend}")

    def _register_package_components(self, container: DIContainer) -> None:
        """パッケージ関連コンポーネントを登録"""
        codec_backend = self.config["components"]["image_codec"]["backend"]
        if codec_backend == "opencv":
            container.register_singleton(IImageCodec, OpenCVImageCodecAdapter)
        else:
            raise ValueError(f"Unknown image codec backend: {codec_backend}")

        repository_backend = self.config["components"]["package_repository"]["backend"]
        if repository_backend == "zip":
            container.register_singleton(ITestPackageSerializer, JsonManifestSerializer)
            container.register_singleton(ITestPackageRepository, ZipTestPackageRepositoryAdapter)
        else:
            raise ValueError(f"Unknown package repository backend: {repository_backend}")

    def _register_performance_components(self, container: DIContainer) -> None:
        """パフォーマンス関連コンポーネントを登録"""
        rate = self.editor_settings.geometry_updates_per_second

        # ジェスチャーを扱うコンポーネントごとに別インスタンス
        container.register_transient(
            IGeometryUpdateThrottle,
            lambda: GeometryUpdateThrottleService(updates_per_second=rate)
        )
        logger.debug("Performance components registered")

    def _register_workspace_components(self, container: DIContainer) -> None:
        """ワークスペース関連コンポーネントを登録"""
        lifetime_ms = self.config["notices"]["lifetime_ms"]
        container.register_singleton(NoticeBoard, lambda: NoticeBoard(lifetime_ms=lifetime_ms))
        container.register_singleton(AuthoringWorkspace, AuthoringWorkspace)


def create_default_container(config_path: Optional[Path] = None) -> DIContainer:
    """
    デフォルト設定でDIコンテナを作成

    Args:
        config_path: 設定ファイルのパス

    Returns:
        設定済みのDIコンテナ
    """
    container = DIContainer()
    configurator = ContainerConfigurator(config_path)
    configurator.configure_container(container)
    return container
