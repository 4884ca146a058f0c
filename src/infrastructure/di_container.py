#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
依存性注入コンテナ

型ヒントに基づいてコンストラクタ引数を自動解決するコンテナ実装。
ポート（Protocol）をキーに具象アダプターを登録する。
"""
from typing import Dict, Any, Callable, List, TypeVar, Type, Optional, Union, get_type_hints
from enum import Enum
import inspect
import logging
from threading import RLock

logger = logging.getLogger(__name__)


T = TypeVar('T')


class Lifetime(Enum):
    """オブジェクトのライフタイム"""
    SINGLETON = "singleton"  # コンテナ全体で1つのインスタンス
    TRANSIENT = "transient"  # 要求ごとに新しいインスタンス


class ServiceDescriptor:
    """サービス記述子"""

    def __init__(
        self,
        service_type: type,
        factory: Callable[[], Any],
        lifetime: Lifetime = Lifetime.TRANSIENT
    ):
        self.service_type = service_type
        self.factory = factory
        self.lifetime = lifetime

    def __repr__(self) -> str:
        return f"ServiceDescriptor({_type_name(self.service_type)}, {self.lifetime.value})"


class DIContainer:
    """
    依存性注入コンテナ

    シングルトンは初回解決時に生成され、以降同じインスタンスを返す。
    循環依存は解決時に検出して ValueError とする。
    """

    def __init__(self):
        self._services: Dict[type, ServiceDescriptor] = {}
        self._singletons: Dict[type, Any] = {}
        self._config: Dict[str, Any] = {}
        self._resolving: List[type] = []
        self._lock = RLock()

    def register(
        self,
        interface: Type[T],
        factory: Union[Callable[[], T], Type[T]],
        lifetime: Lifetime = Lifetime.TRANSIENT
    ) -> None:
        """
        サービスを登録

        Args:
            interface: インターフェース型（ポート）
            factory: ファクトリ関数またはクラス（クラスの場合は依存性を自動注入）
            lifetime: オブジェクトのライフタイム
        """
        if inspect.isclass(factory):
            cls = factory
            factory_func = lambda: self._create_instance(cls)
        else:
            factory_func = factory

        with self._lock:
            self._services[interface] = ServiceDescriptor(interface, factory_func, lifetime)
            self._singletons.pop(interface, None)

    def register_singleton(self, interface: Type[T], factory: Union[Callable[[], T], Type[T]]) -> None:
        """シングルトンとしてサービスを登録"""
        self.register(interface, factory, Lifetime.SINGLETON)

    def register_transient(self, interface: Type[T], factory: Union[Callable[[], T], Type[T]]) -> None:
        """トランジェントとしてサービスを登録"""
        self.register(interface, factory, Lifetime.TRANSIENT)

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """既存のインスタンスをシングルトンとして登録"""
        with self._lock:
            self._services[interface] = ServiceDescriptor(interface, lambda: instance, Lifetime.SINGLETON)
            self._singletons[interface] = instance

    def resolve(self, interface: Type[T]) -> T:
        """
        サービスを解決

        Args:
            interface: 解決するインターフェース型

        Returns:
            サービスのインスタンス

        Raises:
            ValueError: 未登録、または循環依存の場合
        """
        with self._lock:
            descriptor = self._services.get(interface)
            if descriptor is None:
                raise ValueError(f"Service not registered: {_type_name(interface)}")

            if descriptor.lifetime == Lifetime.SINGLETON and interface in self._singletons:
                return self._singletons[interface]

            if interface in self._resolving:
                chain = " -> ".join(_type_name(t) for t in self._resolving + [interface])
                raise ValueError(f"Circular dependency detected: {chain}")

            self._resolving.append(interface)
            try:
                instance = descriptor.factory()
            finally:
                self._resolving.pop()

            if descriptor.lifetime == Lifetime.SINGLETON:
                self._singletons[interface] = instance
                logger.debug(f"Singleton created: {_type_name(interface)}")
            return instance

    def try_resolve(self, interface: Type[T]) -> Optional[T]:
        """登録されていればサービスを解決（未登録ならNone）"""
        if not self.has_service(interface):
            return None
        return self.resolve(interface)

    def _create_instance(self, cls: Type[T]) -> T:
        """
        クラスのインスタンスを作成（依存性を自動注入）

        登録済みの型の引数は解決し、未登録ならデフォルト値を使う。
        """
        try:
            hints = get_type_hints(cls.__init__)
        except NameError:
            hints = {}

        kwargs = {}
        for param_name, param in inspect.signature(cls.__init__).parameters.items():
            if param_name == 'self' or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue

            param_type = _unwrap_optional(hints.get(param_name, param.annotation))

            if param_type in self._services:
                kwargs[param_name] = self.resolve(param_type)
            elif param.default is not param.empty:
                kwargs[param_name] = param.default
            else:
                raise ValueError(
                    f"Cannot resolve dependency '{param_name}' of type {param_type} "
                    f"for {cls.__name__}"
                )

        return cls(**kwargs)

    def set_config(self, key: str, value: Any) -> None:
        """設定値を登録"""
        self._config[key] = value

    def get_config(self, key: str, default: Any = None) -> Any:
        """設定値を取得"""
        return self._config.get(key, default)

    def clear(self) -> None:
        """コンテナをクリア"""
        with self._lock:
            self._services.clear()
            self._singletons.clear()
            self._config.clear()

    def has_service(self, interface: type) -> bool:
        """サービスが登録されているか確認"""
        return interface in self._services

    def get_all_services(self) -> Dict[type, ServiceDescriptor]:
        """登録されている全サービスを取得"""
        return self._services.copy()


def _unwrap_optional(annotation: Any) -> Any:
    """Optional[X] なら X を返す"""
    if getattr(annotation, '__origin__', None) is Union:
        args = [arg for arg in annotation.__args__ if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _type_name(t: Any) -> str:
    return getattr(t, '__name__', repr(t))
