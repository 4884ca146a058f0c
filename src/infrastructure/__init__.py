#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Infrastructure (インフラストラクチャ層)

DIコンテナ、設定管理、共通サービスなど、
アプリケーション全体を支える基盤機能を提供。
"""

from .di_container import DIContainer, Lifetime, ServiceDescriptor
from .container_config import ContainerConfigurator, create_default_container
from .services import GeometryUpdateThrottleService

__all__ = [
    # DI Container
    "DIContainer",
    "Lifetime",
    "ServiceDescriptor",
    # Configuration
    "ContainerConfigurator",
    "create_default_container",
    # Services
    "GeometryUpdateThrottleService",
]
