"""
config_loader.py

Utility for loading the YAML configuration files that drive the outlier
detection pipeline, and for picking out a module's block from them.
"""
import yaml


def load_config(config_path: str):
    """
    Load a YAML configuration file and return the full config.

    Args:
        config_path (str): Path to the YAML config file.

    Returns:
        dict: The full configuration dictionary (empty if the file is empty).
    """
    with open(config_path, "r") as f:
        config = yaml.safe_load(f)

    return config or {}


def resolve_module_config(config: dict, module_key: str) -> dict:
    """Return config[module_key] when present, otherwise the config itself."""
    if config is None:
        return {}
    if module_key in config:
        return config.get(module_key) or {}
    return config
