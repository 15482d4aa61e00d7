"""
Extension Registry
Factories the host looks up by content type or property page key
File: dartvs_services/registry.py
"""

import logging
from typing import Any, Callable, Dict, List, Tuple

from .config import DartVSConfig
from .errors import RegistrationError
from .property_pages import DartProjectPropertyPage, MavenComponentSelector
from .quick_info import HoverProvider, QuickInfoSourceProvider

logger = logging.getLogger(__name__)

DART_CONTENT_TYPE = "dart"
DART_PROJECT_PAGE = "dart-project"
MAVEN_COMPONENT_SELECTOR_PAGE = "maven-component-selector"


class ExtensionRegistry:
    def __init__(self):
        self._quick_info: Dict[str, List[Tuple[str, Any]]] = {}
        self._pages: Dict[str, Callable[..., Any]] = {}

    def register_quick_info_provider(self, content_type: str, name: str, provider: Any) -> None:
        providers = self._quick_info.setdefault(content_type, [])
        if any(existing == name for existing, _ in providers):
            raise RegistrationError(f"Quick info provider '{name}' already registered for {content_type}")
        providers.append((name, provider))
        logger.debug(f"Registered quick info provider '{name}' for {content_type}")

    def quick_info_providers(self, content_type: str) -> List[Any]:
        return [provider for _, provider in self._quick_info.get(content_type, [])]

    def register_property_page(self, key: str, factory: Callable[..., Any]) -> None:
        if key in self._pages:
            raise RegistrationError(f"Property page '{key}' already registered")
        self._pages[key] = factory
        logger.debug(f"Registered property page '{key}'")

    def create_property_page(self, key: str, *args, **kwargs) -> Any:
        try:
            factory = self._pages[key]
        except KeyError:
            raise RegistrationError(f"Unknown property page '{key}'")
        return factory(*args, **kwargs)

    @property
    def property_pages(self) -> List[str]:
        return list(self._pages)


def build_default_registry(config: DartVSConfig = None, analysis_service: HoverProvider = None) -> ExtensionRegistry:
    """Registry wired with the Dart quick info provider and project pages"""
    config = config or DartVSConfig()
    registry = ExtensionRegistry()

    provider = QuickInfoSourceProvider(analysis_service, config)
    registry.register_quick_info_provider(DART_CONTENT_TYPE, provider.name, provider)
    registry.register_property_page(DART_PROJECT_PAGE, DartProjectPropertyPage)
    registry.register_property_page(MAVEN_COMPONENT_SELECTOR_PAGE, MavenComponentSelector)

    return registry
