import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "model": "gemini",
    "model_name": None,  # None = provider default (e.g. gemini-2.5-flash)
    "api_key": None,  # fallback when the provider's environment variable is unset
    "max_files": 10,
    "exclude": [],  # fnmatch patterns or directory names to skip on top of node_modules/dist/build
    "atomic_apply": True,
    "request_timeout": 120,
}

# Environment variable holding each provider's credential.
API_KEY_ENV = {
    "gemini": "GEMINI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


def load_config(config_path: str = ".codemedic.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .codemedic.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "exclude": list(DEFAULT_CONFIG["exclude"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["gemini_api_key"] = os.environ.get("GEMINI_API_KEY")
    config["anthropic_api_key"] = os.environ.get("ANTHROPIC_API_KEY")
    config["openai_api_key"] = os.environ.get("OPENAI_API_KEY")

    return config


def get_api_key(config: dict) -> Optional[str]:
    """Return the credential for the configured provider.

    The provider's environment variable wins; ``api_key`` from the config file
    is the fallback so editor-style per-project settings still work.
    """
    model = config.get("model", "gemini")
    return config.get(f"{model}_api_key") or config.get("api_key")
