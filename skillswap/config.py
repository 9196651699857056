"""
Client Configuration Management
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict

from dotenv import load_dotenv


@dataclass
class ClientConfig:
    """Configuration for the SkillSwap admin client"""

    # API settings
    api_base_url: str = "http://localhost:4000"
    timeout: float = 30.0

    # Session (the backend authenticates admin screens by cookie)
    session_cookie_name: str = "connect.sid"
    session_cookie: Optional[str] = None

    # List behaviour
    page_limit: int = 20
    near_bottom_threshold: int = 80  # px of scroll remaining

    # Output settings
    output_format: str = "text"  # text, json
    verbose: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    json_logs: bool = False

    # Paths
    config_dir: str = field(default_factory=lambda: str(Path.home() / ".skillswap"))

    def load_from_file(self, config_path: str) -> None:
        """Load configuration from JSON file"""
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = json.load(f)
                for key, value in data.items():
                    if hasattr(self, key):
                        setattr(self, key, value)

    def save_to_file(self, config_path: Optional[str] = None) -> None:
        """Save configuration to JSON file"""
        path = Path(config_path or (Path(self.config_dir) / "config.json"))
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(asdict(self), f, indent=2)

    @classmethod
    def load_default(cls, config_path: Optional[str] = None) -> "ClientConfig":
        """Load config.json from the config directory, then apply .env and environment overrides"""
        load_dotenv()

        config = cls()
        default_config_path = Path(config_path) if config_path else Path(config.config_dir) / "config.json"
        if default_config_path.exists():
            config.load_from_file(str(default_config_path))

        config._load_from_env()

        return config

    def _load_from_env(self) -> None:
        """Load configuration from environment variables"""
        env_mappings = {
            "SKILLSWAP_API_URL": "api_base_url",
            "SKILLSWAP_SESSION_COOKIE": "session_cookie",
            "SKILLSWAP_SESSION_COOKIE_NAME": "session_cookie_name",
            "SKILLSWAP_TIMEOUT": ("timeout", float),
            "SKILLSWAP_PAGE_LIMIT": ("page_limit", int),
            "SKILLSWAP_LOG_LEVEL": "log_level",
            "SKILLSWAP_LOG_FILE": "log_file",
            "SKILLSWAP_JSON_LOGS": ("json_logs", lambda x: x.lower() == "true"),
            "SKILLSWAP_VERBOSE": ("verbose", lambda x: x.lower() == "true"),
        }

        for env_var, mapping in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                if isinstance(mapping, tuple):
                    attr, converter = mapping
                    setattr(self, attr, converter(value))
                else:
                    setattr(self, mapping, value)

    def get_cookies(self) -> Dict[str, str]:
        """Cookies to send with every request"""
        if self.session_cookie:
            return {self.session_cookie_name: self.session_cookie}
        return {}
