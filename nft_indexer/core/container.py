# nft_indexer/core/container.py

from typing import Any, Callable, Dict, List, Type, TypeVar

from .logging import IndexerLogger, log_with_context, DEBUG, ERROR

T = TypeVar('T')


class IndexerContainer:
    """Singleton service registry built from factories."""

    def __init__(self, config):
        self._config = config
        self._factories: Dict[Type, Callable[['IndexerContainer'], Any]] = {}
        self._instances: Dict[Type, Any] = {}
        self._resolution_stack: List[Type] = []

        self._logger = IndexerLogger.get_logger('core.container')

    @property
    def config(self):
        return self._config

    def register_factory(self, interface: Type[T], factory_func: Callable[['IndexerContainer'], T]) -> 'IndexerContainer':
        log_with_context(self._logger, DEBUG, "Registering factory service",
                         interface=interface.__name__)
        self._factories[interface] = factory_func
        return self

    def register_instance(self, interface: Type[T], instance: T) -> 'IndexerContainer':
        self._instances[interface] = instance
        return self

    def get(self, service_type: Type[T]) -> T:
        if service_type in self._instances:
            return self._instances[service_type]

        service_name = service_type.__name__

        if service_type in self._resolution_stack:
            circular_path = " -> ".join(t.__name__ for t in self._resolution_stack) + f" -> {service_name}"
            log_with_context(self._logger, ERROR, "Circular dependency detected",
                             service_type=service_name,
                             circular_path=circular_path)
            raise ValueError(f"Circular dependency detected: {circular_path}")

        if service_type not in self._factories:
            log_with_context(self._logger, ERROR, "Service not registered",
                             service_type=service_name)
            raise ValueError(f"Service {service_name} not registered")

        self._resolution_stack.append(service_type)
        try:
            instance = self._factories[service_type](self)
        finally:
            self._resolution_stack.pop()

        self._instances[service_type] = instance
        log_with_context(self._logger, DEBUG, "Service created", service_type=service_name)
        return instance

    def has_instance(self, service_type: Type) -> bool:
        return service_type in self._instances
