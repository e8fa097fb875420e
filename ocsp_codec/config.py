import json
import os
from dataclasses import dataclass, asdict
from typing import Dict, Any


@dataclass
class CodecConfig:
    """Configuration for the OCSP codec"""
    # Reject decoded single responses whose status is not exactly one of
    # good/revoked/unknown instead of handing them to the caller as-is
    strict_status: bool = False
    show_debug: bool = False  # also print DEBUG lines to the console
    hash_algorithm: str = "sha1"  # CertID hash used by build_cert_id
    nonce_len: int = 32  # RFC 9654 recommends >=32


class ConfigManager:
    """Manages saving and loading of codec configuration"""

    def __init__(self, config_file: str):
        self.config_file = config_file
        self.config = CodecConfig()

    def load_config(self) -> CodecConfig:
        """Load configuration from file, keeping defaults for missing keys"""
        if not os.path.exists(self.config_file):
            return self.config
        with open(self.config_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
        self.update_from_dict(data)
        return self.config

    def save_config(self, config: CodecConfig) -> None:
        """Save configuration to file (atomic)"""
        config_dir = os.path.dirname(self.config_file) or "."
        os.makedirs(config_dir, exist_ok=True)

        tmp_path = self.config_file + ".tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(asdict(config), f, indent=2)
        os.replace(tmp_path, self.config_file)
        self.config = config

    def update_from_dict(self, data: Dict[str, Any]) -> None:
        """Update config from dictionary"""
        for key, value in data.items():
            if hasattr(self.config, key):
                setattr(self.config, key, value)
