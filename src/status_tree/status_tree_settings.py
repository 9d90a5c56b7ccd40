from dataclasses import dataclass
import json


@dataclass
class StatusTreeSettings:
    """
    Settings for status tree sessions.

    This class handles the loading and saving of settings to a JSON file.
    """
    auto_refresh: bool = True
    refresh_interval: int = 2000  # Milliseconds between polls
    submodules_enabled: bool = True
    diff_only: bool = True  # List only changed files rather than the whole tree
    default_ref: str = "HEAD"

    @classmethod
    def load(cls, path: str) -> "StatusTreeSettings":
        """Load settings from a JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
            file_tree = data.get("fileTree", {})
            diff = data.get("diff", {})

            return cls(
                auto_refresh=file_tree.get("autoRefresh", True),
                refresh_interval=file_tree.get("refreshInterval", 2000),
                submodules_enabled=file_tree.get("submodulesEnabled", True),
                diff_only=file_tree.get("diffOnly", True),
                default_ref=diff.get("defaultRef", "HEAD")
            )

    def save(self, path: str) -> None:
        """Save settings to a JSON file."""
        data = {
            "fileTree": {
                "autoRefresh": self.auto_refresh,
                "refreshInterval": self.refresh_interval,
                "submodulesEnabled": self.submodules_enabled,
                "diffOnly": self.diff_only,
            },
            "diff": {
                "defaultRef": self.default_ref,
            },
        }
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
