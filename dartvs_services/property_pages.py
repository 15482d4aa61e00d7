"""
Dart Project Property Pages
Project properties read from pubspec.yaml, plus the Maven component selector
File: dartvs_services/property_pages.py
"""

import yaml
import logging
from dataclasses import dataclass, field
from typing import List, Optional
from pathlib import Path

from .errors import DartAnalyzerError

logger = logging.getLogger(__name__)


@dataclass
class ProjectProperties:
    name: str
    description: str = ""
    version: str = ""
    sdk_constraint: Optional[str] = None
    flutter_constraint: Optional[str] = None
    dependencies: List[str] = field(default_factory=list)
    dev_dependencies: List[str] = field(default_factory=list)


class DartProjectPropertyPage:
    """General properties page for a Dart project"""

    title = "Dart"

    def __init__(self, project_path: str | Path):
        self.project_path = Path(project_path)
        self.pubspec_path = self.project_path / "pubspec.yaml"

    def _read_pubspec(self) -> dict:
        try:
            with open(self.pubspec_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise DartAnalyzerError(f"pubspec.yaml not found in {self.project_path}")
        except yaml.YAMLError as e:
            raise DartAnalyzerError(f"Error parsing pubspec.yaml: {e}")

        if not isinstance(data, dict):
            raise DartAnalyzerError("pubspec.yaml must contain a mapping")
        return data

    def load(self) -> ProjectProperties:
        """Read project properties from pubspec.yaml"""
        pubspec = self._read_pubspec()
        environment = pubspec.get("environment") or {}

        properties = ProjectProperties(
            name=pubspec.get("name", "Unknown"),
            description=pubspec.get("description", ""),
            version=str(pubspec.get("version", "")),
            sdk_constraint=environment.get("sdk"),
            flutter_constraint=environment.get("flutter"),
            dependencies=list((pubspec.get("dependencies") or {}).keys()),
            dev_dependencies=list((pubspec.get("dev_dependencies") or {}).keys()),
        )
        logger.debug(f"Loaded properties for project {properties.name}")
        return properties

    def validate(self) -> List[str]:
        """Problems that stop the project from being analyzed"""
        issues = []

        if not self.pubspec_path.exists():
            issues.append("pubspec.yaml not found")
        else:
            try:
                if not self._read_pubspec().get("name"):
                    issues.append("Project name not specified in pubspec.yaml")
            except DartAnalyzerError as e:
                issues.append(e.message)

        if not (self.project_path / "lib").is_dir():
            issues.append("lib directory not found")

        return issues


class MavenComponentSelector:
    """Component selector page for Maven references; lists nothing yet"""

    title = "Maven"
    can_select_items = True

    def __init__(self):
        self.initialize_items()

    def initialize_items(self) -> None:
        pass

    def clear_selection(self) -> None:
        pass

    def set_selection_mode(self, multi_select: bool) -> None:
        pass

    def get_selection(self) -> list:
        return []
