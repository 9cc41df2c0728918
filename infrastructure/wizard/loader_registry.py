# infrastructure/wizard/loader_registry.py
from __future__ import annotations

from pathlib import Path
from typing import Dict

from domain.wizard import WizardDefinition
from infrastructure.wizard.base_loader import WizardLoaderBase, WizardLoadError
from infrastructure.wizard.file_finder import WizardFileFinder
from infrastructure.wizard.json_loader import JsonWizardLoader
from infrastructure.wizard.yaml_loader import YamlWizardLoader


class WizardLoaderRegistry:
    def __init__(self) -> None:
        self._loaders: Dict[str, WizardLoaderBase] = {
            ".yaml": YamlWizardLoader(),
            ".yml": YamlWizardLoader(),
            ".json": JsonWizardLoader(),
        }

    def get_loader(self, path: Path) -> WizardLoaderBase:
        ext = path.suffix.lower()
        loader = self._loaders.get(ext)
        if loader is None:
            raise WizardLoadError(f"Unsupported wizard format: {ext}")
        return loader

    def load_by_id(self, base_dir: Path, wizard_id: str) -> WizardDefinition:
        path = WizardFileFinder(base_dir).find_by_id(wizard_id)
        if path is None:
            raise WizardLoadError(f"Wizard not found: {wizard_id} (in {base_dir})")
        return self.get_loader(path).load_from_file(str(path))
