"""Configuration management system"""

from pathlib import Path
from typing import Any, Optional
import yaml


class Config:
    """Centralized configuration manager with dot-notation access."""
    
    _instance: Optional["Config"] = None
    _config: dict = {}
    
    def __new__(cls, config_path: Optional[str] = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self, config_path: Optional[str] = None):
        if self._initialized and config_path is None:
            return
            
        if config_path is None:
            config_path = self._find_config()
        
        self._load(config_path)
        self._initialized = True
    
    @classmethod
    def reset_instance(cls) -> None:
        """Drop the shared instance so the next Config() loads afresh."""
        cls._instance = None
    
    def _find_config(self) -> str:
        """Find config.yaml in project root."""
        current = Path(__file__).parent
        for _ in range(5):
            config_file = current / "config.yaml"
            if config_file.exists():
                return str(config_file)
            current = current.parent
        
        raise FileNotFoundError("config.yaml not found")
    
    def _load(self, config_path: str) -> None:
        """Load configuration from YAML file."""
        with open(config_path, "r") as f:
            self._config = yaml.safe_load(f) or {}
        self._config_path = config_path
    
    def reload(self) -> None:
        """Reload configuration from file."""
        self._load(self._config_path)
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get config value using dot notation.
        
        Example:
            config.get("app.log_level", "INFO")
            config.get("retarget.corrections", [])
        """
        keys = key.split(".")
        value = self._config
        
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        
        return value
    
    def set(self, key: str, value: Any) -> None:
        """Set config value using dot notation (runtime only, not persisted)."""
        keys = key.split(".")
        config = self._config
        
        for k in keys[:-1]:
            if k not in config or not isinstance(config[k], dict):
                config[k] = {}
            config = config[k]
        
        config[keys[-1]] = value
    
    def save(self, path: Optional[str] = None) -> None:
        """Save current configuration to file."""
        save_path = path or self._config_path
        with open(save_path, "w") as f:
            yaml.dump(self._config, f, default_flow_style=False)
    
    @property
    def app(self) -> dict:
        return self._config.get("app", {})
    
    @property
    def logging(self) -> dict:
        return self._config.get("logging", {})
    
    @property
    def automap(self) -> dict:
        return self._config.get("automap", {})
    
    @property
    def retarget(self) -> dict:
        return self._config.get("retarget", {})
    
    def __repr__(self) -> str:
        return f"Config({self._config_path})"
