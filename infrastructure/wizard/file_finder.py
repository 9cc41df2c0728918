"""Find wizard definition files by ID."""
from pathlib import Path
from typing import Optional


class WizardFileFinder:
    """Search wizard files under the given base directory."""

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def find_by_id(self, wizard_id: str) -> Optional[Path]:
        """
        Find a wizard file by wizard ID.

        Args:
            wizard_id: Wizard ID (e.g., "resident-support")

        Returns:
            The Path if found, otherwise None.
        """
        priority = [".json", ".yaml", ".yml"]
        candidates: list[Path] = []

        # .json wins over YAML variants for the same wizard_id
        for ext in priority:
            for file_path in self.base_dir.rglob(f"{wizard_id}{ext}"):
                if file_path.is_file():
                    candidates.append(file_path)

        if not candidates:
            return None

        candidates.sort(key=lambda path: (priority.index(path.suffix), str(path)))
        return candidates[0]
