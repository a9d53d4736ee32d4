"""fileshift configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (FILESHIFT_ENDPOINT, FILESHIFT_MODEL, FILESHIFT_STATE)
  3. Per-project fileshift.yaml  (current directory)
  4. Global ~/.fileshift/config.yaml  (defaults only — no API keys)
  5. Hardcoded defaults

Global config must never contain API keys; use environment variables instead.
chat.endpoint must be an http(s) URL.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from fileshift.ingest.rename import normalize_extension

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".fileshift"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "fileshift.yaml"

# Fields that suggest an API key, forbidden in global config.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"
    r"|_token$"
    r"|^token$"
    r"|_secret$"
    r"|^secret$"
    r"|passw(?:ord|d)"
    r"|credential",
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(["convert", "chat", "server", "state"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class ConvertCfg:
    """Rename defaults (fileshift.yaml: convert:)."""

    target_extension: str = "ts"
    preserve_folders: bool = True


@dataclass
class ChatCfg:
    """Chat client configuration (fileshift.yaml: chat:).

    Attributes:
        endpoint: URL of the streaming relay (``fileshift serve`` or compatible).
        timeout: Seconds to wait for connect/read before giving up.
    """

    endpoint: str = "http://127.0.0.1:8765/api/chat"
    timeout: float = 120.0


@dataclass
class ServerCfg:
    """Relay server configuration (fileshift.yaml: server:)."""

    host: str = "127.0.0.1"
    port: int = 8765
    model: str = "gemini/gemini-2.5-flash"


@dataclass
class StateCfg:
    """Local state store location (fileshift.yaml: state:)."""

    path: str = ".fileshift/state.json"


@dataclass
class FileshiftConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    convert: ConvertCfg = field(default_factory=ConvertCfg)
    chat: ChatCfg = field(default_factory=ChatCfg)
    server: ServerCfg = field(default_factory=ServerCfg)
    state: StateCfg = field(default_factory=StateCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {str(k).upper().replace('-', '_')}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _validate_endpoint(endpoint: str) -> None:
    if not endpoint.startswith(("http://", "https://")):
        raise ConfigError(
            f"chat.endpoint must be an http(s) URL: '{endpoint}'\n"
            "  Example: chat.endpoint: http://127.0.0.1:8765/api/chat"
        )


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> FileshiftConfig:
    """Build a *FileshiftConfig* from a merged raw YAML dict."""
    cfg = FileshiftConfig()

    if "convert" in data:
        c = data["convert"]
        try:
            ext = normalize_extension(str(c.get("target_extension", cfg.convert.target_extension)))
        except ValueError as exc:
            raise ConfigError(f"convert.target_extension: {exc}") from exc
        cfg.convert = ConvertCfg(
            target_extension=ext,
            preserve_folders=bool(c.get("preserve_folders", cfg.convert.preserve_folders)),
        )

    if "chat" in data:
        ch = data["chat"]
        cfg.chat = ChatCfg(
            endpoint=str(ch.get("endpoint", cfg.chat.endpoint)),
            timeout=float(ch.get("timeout", cfg.chat.timeout)),
        )

    if "server" in data:
        s = data["server"]
        cfg.server = ServerCfg(
            host=str(s.get("host", cfg.server.host)),
            port=int(s.get("port", cfg.server.port)),
            model=str(s.get("model", cfg.server.model)),
        )

    if "state" in data:
        st = data["state"]
        cfg.state = StateCfg(path=str(st.get("path", cfg.state.path)))

    return cfg


def _apply_env_overrides(cfg: FileshiftConfig) -> FileshiftConfig:
    """Apply FILESHIFT_* environment variable overrides."""
    if endpoint := os.environ.get("FILESHIFT_ENDPOINT"):
        cfg.chat.endpoint = endpoint
    if model := os.environ.get("FILESHIFT_MODEL"):
        cfg.server.model = model
    if state := os.environ.get("FILESHIFT_STATE"):
        cfg.state.path = state
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> FileshiftConfig:
    """Load and return a merged *FileshiftConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *fileshift.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If global config contains API-key-like fields, if the
            target extension is malformed, or if ``chat.endpoint`` is not a URL.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)
    cfg = _apply_env_overrides(cfg)

    _validate_endpoint(cfg.chat.endpoint)

    return cfg
