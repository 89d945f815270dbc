import yaml
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "tiled_tables.yml"


class TTConfig:
    def __init__(self, data):
        self.paths = data.get("paths", {}) or {}
        self.loader = data.get("loader", {}) or {}
        self.logging = data.get("logging", {}) or {}
        self.debug = data.get("debug", False)


def load_config(path=None) -> 'TTConfig':
    config_path = Path(path) if path is not None else CONFIG_PATH

    # Installed copies ship without the repository config directory.
    if not config_path.exists():
        if path is not None:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return TTConfig({})

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return TTConfig(data)


_config_cache = None


def get_config() -> 'TTConfig':
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache
