# Small persisted values shared between screens
import os
import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class Preferences:
    """
    JSON-backed store for the two scalars the game keeps outside the catalog:

    - initialized: the bundled catalog has been imported
    - last_sub_zone_id: the area the player last opened in the collection
      book, used to scope treasure selection
    """

    def __init__(self, path: str):
        self.path = os.path.expanduser(path)
        self.initialized: bool = False
        self.last_sub_zone_id: Optional[int] = None

        self.load()

    def load(self) -> None:
        """Load preferences from file if it exists"""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Error loading preferences from {self.path}: {e}")
            return

        self.initialized = bool(data.get("initialized", False))
        last = data.get("last_sub_zone_id")
        self.last_sub_zone_id = int(last) if last is not None else None

    def save(self) -> None:
        """Write the current preferences to file"""
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initialized": self.initialized,
            "last_sub_zone_id": self.last_sub_zone_id,
        }

    def mark_initialized(self) -> None:
        self.initialized = True
        self.save()

    def set_last_sub_zone(self, sub_zone_id: int) -> None:
        """Remember the area chosen in the collection book"""
        self.last_sub_zone_id = sub_zone_id
        self.save()
