"""Read-only reference catalogs: group themes, VR environments and CBT modules."""

import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Sequence

import yaml

from ..models.session import GroupTheme, VREnvironment, VRModule

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "default_catalog.yaml"


class Catalog:
    """Lookup of catalog entries by slug or id.

    Entries are frozen dataclasses and the catalog exposes tuples, so callers
    cannot mutate the reference data.
    """

    def __init__(self,
                 themes: Sequence[GroupTheme],
                 environments: Sequence[VREnvironment],
                 modules: Sequence[VRModule]):
        self.themes = tuple(themes)
        self.environments = tuple(environments)
        self.modules = tuple(modules)

        self._themes_by_slug = {t.slug: t for t in self.themes}
        self._environments_by_id = {e.id: e for e in self.environments}
        self._modules_by_id = {m.id: m for m in self.modules}

    @classmethod
    def load(cls, catalog_path: Optional[str] = None) -> "Catalog":
        """Load catalogs from YAML.

        Args:
            catalog_path: Path to catalog YAML. Uses the bundled catalog if None.

        Returns:
            Loaded Catalog
        """
        path = Path(catalog_path) if catalog_path else DEFAULT_CATALOG_PATH
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in catalog file: {e}")

        catalog = cls.from_dict(data)
        logger.info(f"Loaded catalog from {path}: {len(catalog.themes)} themes, "
                    f"{len(catalog.environments)} environments, {len(catalog.modules)} modules")
        return catalog

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Catalog":
        themes = [GroupTheme(**entry) for entry in data.get('group_themes', [])]
        environments = [
            VREnvironment(**{**entry, 'target_conditions': tuple(entry.get('target_conditions', ()))})
            for entry in data.get('vr_environments', [])
        ]
        modules = [VRModule(**entry) for entry in data.get('vr_modules', [])]
        return cls(themes, environments, modules)

    def theme(self, slug: str) -> Optional[GroupTheme]:
        return self._themes_by_slug.get(slug)

    def environment(self, environment_id: str) -> Optional[VREnvironment]:
        return self._environments_by_id.get(environment_id)

    def module(self, module_id: str) -> Optional[VRModule]:
        return self._modules_by_id.get(module_id)

    def unknown_modules(self, module_ids: Sequence[str]) -> List[str]:
        """Return the ids in module_ids that are not in the catalog."""
        return [m for m in module_ids if m not in self._modules_by_id]
