"""vidcat configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site, not in this module)
  2. Environment variables  (VIDCAT_SOURCE_URL, VIDCAT_DB, VIDCAT_OUTPUT_DIR)
  3. Per-project vidcat.yaml  (current working directory)
  4. Global ~/.vidcat/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load(), never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".vidcat"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "vidcat.yaml"

DEFAULT_SOURCE_URL = (
    "https://hebbkx1anhila5yf.public.blob.vercel-storage.com/"
    "FINAL-consolidated-video-test-assets-jdHni20uYFY2xAC7Hzgw7CvJh9lSDt.csv"
)

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["source", "output", "store", "search", "scoring"])

_ENV_SOURCE_URL = "VIDCAT_SOURCE_URL"
_ENV_DB = "VIDCAT_DB"
_ENV_OUTPUT_DIR = "VIDCAT_OUTPUT_DIR"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class SourceCfg:
    """Catalog source (vidcat.yaml: source:).

    Attributes:
        url: HTTP(S) URL or local path of the CSV source.
        timeout: Fetch timeout in seconds; the build fails after it.
        max_mb: Largest accepted source body in megabytes.
    """

    url: str = DEFAULT_SOURCE_URL
    timeout: float = 30.0
    max_mb: int = 20

    @property
    def max_bytes(self) -> int:
        return self.max_mb * 1024 * 1024


@dataclass
class OutputCfg:
    """Catalog JSON output (vidcat.yaml: output:)."""

    dir: str = "public"
    split_files: bool = True


@dataclass
class StoreCfg:
    """Local SQLite store (vidcat.yaml: store:)."""

    db: str = ".vidcat.db"


@dataclass
class SearchCfg:
    """Search history settings (vidcat.yaml: search:)."""

    history_limit: int = 10


@dataclass
class ScoringCfg:
    """Quality ranking output (vidcat.yaml: scoring:)."""

    top_limit: int = 5


@dataclass
class VidcatConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    source: SourceCfg = field(default_factory=SourceCfg)
    output: OutputCfg = field(default_factory=OutputCfg)
    store: StoreCfg = field(default_factory=StoreCfg)
    search: SearchCfg = field(default_factory=SearchCfg)
    scoring: ScoringCfg = field(default_factory=ScoringCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}'; ignored.",
                UserWarning,
                stacklevel=4,
            )


def _validate(cfg: VidcatConfig) -> None:
    """Raise ConfigError for values the pipeline cannot work with."""
    url = cfg.source.url.strip()
    if not url:
        raise ConfigError("source.url must not be empty.")
    if "://" in url and not url.startswith(("https://", "http://")):
        raise ConfigError(
            f"source.url must be an http(s) URL or a local path: '{url}'\n"
            "  Example:  source.url: https://example.com/assets.csv"
        )
    if cfg.source.timeout <= 0:
        raise ConfigError(f"source.timeout must be > 0, got {cfg.source.timeout}")
    if cfg.source.max_mb < 1:
        raise ConfigError(f"source.max_mb must be >= 1, got {cfg.source.max_mb}")
    if cfg.search.history_limit < 0:
        raise ConfigError(f"search.history_limit must be >= 0, got {cfg.search.history_limit}")
    if cfg.scoring.top_limit < 1:
        raise ConfigError(f"scoring.top_limit must be >= 1, got {cfg.scoring.top_limit}")


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


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping, got {type(value).__name__}")
    return value


def _cfg_from_dict(data: dict[str, Any]) -> VidcatConfig:
    """Build a *VidcatConfig* from a merged raw YAML dict."""
    cfg = VidcatConfig()

    try:
        if "source" in data:
            s = _section(data, "source")
            cfg.source = SourceCfg(
                url=str(s.get("url", cfg.source.url)),
                timeout=float(s.get("timeout", cfg.source.timeout)),
                max_mb=int(s.get("max_mb", cfg.source.max_mb)),
            )

        if "output" in data:
            o = _section(data, "output")
            cfg.output = OutputCfg(
                dir=str(o.get("dir", cfg.output.dir)),
                split_files=bool(o.get("split_files", cfg.output.split_files)),
            )

        if "store" in data:
            st = _section(data, "store")
            cfg.store = StoreCfg(db=str(st.get("db", cfg.store.db)))

        if "search" in data:
            se = _section(data, "search")
            cfg.search = SearchCfg(
                history_limit=int(se.get("history_limit", cfg.search.history_limit)),
            )

        if "scoring" in data:
            sc = _section(data, "scoring")
            cfg.scoring = ScoringCfg(top_limit=int(sc.get("top_limit", cfg.scoring.top_limit)))
    except ConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc

    return cfg


def _apply_env_overrides(cfg: VidcatConfig) -> VidcatConfig:
    """Apply VIDCAT_* environment variable overrides (layer 2)."""
    if url := os.environ.get(_ENV_SOURCE_URL):
        cfg.source.url = url
    if db := os.environ.get(_ENV_DB):
        cfg.store.db = db
    if out := os.environ.get(_ENV_OUTPUT_DIR):
        cfg.output.dir = out
    return cfg


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse '{path}': {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return raw


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> VidcatConfig:
    """Load and return a merged *VidcatConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *vidcat.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If a config file is malformed or holds an invalid value.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    cfg = _apply_env_overrides(cfg)

    _validate(cfg)
    return cfg


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.vidcat/config.yaml`` with defaults if it does not exist.

    Creates parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).

    Returns:
        Path to the global config file.
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# vidcat global configuration.\n"
            "# Per-project settings go in ./vidcat.yaml.\n"
            "\n"
            "source:\n"
            f"  url: {DEFAULT_SOURCE_URL}\n"
            "  timeout: 30\n"
            "\n"
            "output:\n"
            "  dir: public\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target
