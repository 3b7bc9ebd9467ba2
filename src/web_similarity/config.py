"""Configuration for web similarity.

All settings live in ``<data_dir>/config.toml``. The data directory is
``$WSIM_HOME`` when set, otherwise ``~/.websimilarity``.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"
DOCUMENTS_FILENAME = "documents.txt"
SNAPSHOT_FILENAME = "snapshot.db"

DEFAULT_USER_AGENT = "WebSimilarityBot/1.0"


def default_data_dir() -> Path:
    env = os.environ.get("WSIM_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".websimilarity"


@dataclass(frozen=True)
class FetchConfig:
    """Settings for the HTTP fetch collaborator.

    Attributes:
        timeout_seconds: Upper bound for a single fetch.
        user_agent: User-Agent header sent with every request.
        follow_redirects: Whether to follow HTTP redirects.
    """

    timeout_seconds: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeout_seconds": self.timeout_seconds,
            "user_agent": self.user_agent,
            "follow_redirects": self.follow_redirects,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FetchConfig:
        try:
            return cls(
                timeout_seconds=float(data.get("timeout_seconds", 15.0)),
                user_agent=str(data.get("user_agent", DEFAULT_USER_AGENT)),
                follow_redirects=bool(data.get("follow_redirects", True)),
            )
        except (ValueError, TypeError):
            logger.warning("Invalid [fetch] settings, using defaults")
            return cls()


@dataclass(frozen=True)
class BuildConfig:
    """Settings for the concurrent vector build.

    Attributes:
        max_concurrency: Max fetches in flight at once.
    """

    max_concurrency: int = 16

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")

    def to_dict(self) -> dict[str, Any]:
        return {"max_concurrency": self.max_concurrency}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BuildConfig:
        try:
            return cls(max_concurrency=int(data.get("max_concurrency", 16)))
        except (ValueError, TypeError):
            logger.warning("Invalid [build] settings, using defaults")
            return cls()


@dataclass(frozen=True)
class GraphConfig:
    """Settings for graph construction.

    Attributes:
        min_edge_weight: Document pairs less similar than this get no edge.
            0.0 connects every pair.
    """

    min_edge_weight: float = 0.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.min_edge_weight <= 1.0:
            raise ValueError(f"min_edge_weight must be in [0.0, 1.0], got {self.min_edge_weight}")

    def to_dict(self) -> dict[str, Any]:
        return {"min_edge_weight": self.min_edge_weight}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphConfig:
        try:
            return cls(min_edge_weight=float(data.get("min_edge_weight", 0.0)))
        except (ValueError, TypeError):
            logger.warning("Invalid [graph] settings, using defaults")
            return cls()


@dataclass(frozen=True)
class ClusteringConfig:
    """Settings for k-means clustering.

    Attributes:
        k: Number of clusters.
        max_iterations: Hard cap on assignment/update rounds.
        seed: Seed for centroid sampling (None = nondeterministic).
    """

    k: int = 10
    max_iterations: int = 100
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.k < 1:
            raise ValueError(f"k must be >= 1, got {self.k}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"k": self.k, "max_iterations": self.max_iterations}
        if self.seed is not None:
            data["seed"] = self.seed
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClusteringConfig:
        try:
            seed = data.get("seed")
            return cls(
                k=int(data.get("k", 10)),
                max_iterations=int(data.get("max_iterations", 100)),
                seed=int(seed) if seed is not None else None,
            )
        except (ValueError, TypeError):
            logger.warning("Invalid [clustering] settings, using defaults")
            return cls()


_SECTIONS: dict[str, type] = {
    "fetch": FetchConfig,
    "build": BuildConfig,
    "graph": GraphConfig,
    "clustering": ClusteringConfig,
}


@dataclass(frozen=True)
class SimilarityConfig:
    """Top-level configuration bound to a data directory."""

    data_dir: Path = field(default_factory=default_data_dir)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)

    @property
    def config_path(self) -> Path:
        return self.data_dir / CONFIG_FILENAME

    @property
    def documents_path(self) -> Path:
        return self.data_dir / DOCUMENTS_FILENAME

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / SNAPSHOT_FILENAME

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {name: getattr(self, name).to_dict() for name in _SECTIONS}

    @classmethod
    def from_dict(cls, data: dict[str, Any], data_dir: Path | None = None) -> SimilarityConfig:
        sections = {
            name: section_cls.from_dict(data.get(name) or {})
            for name, section_cls in _SECTIONS.items()
        }
        return cls(data_dir=data_dir or default_data_dir(), **sections)

    @classmethod
    def load(cls, data_dir: Path | None = None) -> SimilarityConfig:
        """Load config.toml from the data directory; defaults when it is missing or unreadable."""
        data_dir = data_dir or default_data_dir()
        path = data_dir / CONFIG_FILENAME
        if not path.exists():
            return cls(data_dir=data_dir)

        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except (tomllib.TOMLDecodeError, OSError):
            logger.warning("Could not read %s, using defaults", path, exc_info=True)
            return cls(data_dir=data_dir)

        return cls.from_dict(data, data_dir=data_dir)

    def save(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        lines: list[str] = []
        for section, values in self.to_dict().items():
            lines.append(f"[{section}]")
            for key, value in values.items():
                lines.append(f"{key} = {_toml_value(value)}")
            lines.append("")
        self.config_path.write_text("\n".join(lines), encoding="utf-8")

    def with_setting(self, key: str, value: str) -> SimilarityConfig:
        """
        Return a copy with one ``section.key`` setting changed.

        The value is parsed as a TOML literal, falling back to a plain string.

        Raises:
            ValueError: If the key is unknown or the value is invalid
        """
        section, _, name = key.partition(".")
        if section not in _SECTIONS or not name:
            raise ValueError(f"Unknown setting: {key}")

        current = getattr(self, section).to_dict()
        if name not in current and not (section == "clustering" and name == "seed"):
            raise ValueError(f"Unknown setting: {key}")

        try:
            parsed = tomllib.loads(f"v = {value}")["v"]
        except tomllib.TOMLDecodeError:
            parsed = value

        expected = type(current[name]) if name in current else int
        if expected is float and isinstance(parsed, int) and not isinstance(parsed, bool):
            parsed = float(parsed)
        if not isinstance(parsed, expected):
            raise ValueError(f"{key} expects {expected.__name__}, got {value!r}")

        # Constructing directly keeps __post_init__ validation errors visible
        section_cls = _SECTIONS[section]
        updated = section_cls(**{**current, name: parsed})
        return replace(self, **{section: updated})


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return repr(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
