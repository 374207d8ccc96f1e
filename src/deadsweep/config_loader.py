"""
Config loader - YAML files or [tool.deadsweep] in pyproject.toml
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field

try:
    import yaml
except ImportError:
    yaml = None

try:  # py3.11+
    import tomllib as tomli
except ImportError:
    try:
        import tomli
    except ImportError:
        tomli = None

from .heuristics import DEPRECATED_PATTERNS, LEGACY_INDICATORS, SIMILARITY_THRESHOLD


@dataclass
class HeuristicsConfig:
    """Classification vocabularies and thresholds"""
    legacy_indicators: List[str] = field(default_factory=lambda: list(LEGACY_INDICATORS))
    deprecated_patterns: List[str] = field(default_factory=lambda: list(DEPRECATED_PATTERNS))
    similarity_threshold: float = SIMILARITY_THRESHOLD
    # An unreachable file at or under all three limits is an inline candidate
    inline_max_lines: int = 40
    inline_max_exports: int = 2
    inline_max_importers: int = 1


@dataclass
class ReportConfig:
    """Display caps for the Markdown report (totals always cover every row)"""
    safe_deletion_display: int = 20
    inline_display: int = 15
    blocked_display: int = 20
    largest_unused: int = 20
    git_preview: int = 10


@dataclass
class DeadsweepConfig:
    root: str = "."
    graph: str = "analysis/dep-graph.json"
    entrypoints: str = "analysis/entrypoints.json"
    # Root the graph builder resolved imports against; None = metadata.root, then /workspace
    graph_root: Optional[str] = None
    output: str = "analysis"
    workers: int = 8
    render_graph: bool = False
    graph_format: str = "svg"

    heuristics: HeuristicsConfig = field(default_factory=HeuristicsConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    def graph_path(self) -> Path:
        return self._under_root(self.graph)

    def entrypoints_path(self) -> Path:
        return self._under_root(self.entrypoints)

    def output_dir(self) -> Path:
        return self._under_root(self.output)

    def _under_root(self, value: str) -> Path:
        p = Path(value)
        return p if p.is_absolute() else Path(self.root) / p


def load_config(config_path: Optional[Path] = None, verbose: bool = True) -> DeadsweepConfig:
    """
    Load configuration

    Args:
        config_path: explicit config file; searched for when None
        verbose: print which file was picked up

    Returns:
        DeadsweepConfig: loaded (or default) configuration
    """
    if config_path:
        return _load_config_file(Path(config_path))

    found_config = find_config_file()
    if found_config:
        if verbose:
            print(f"Using config file: {found_config}")
        return _load_config_file(found_config)

    return DeadsweepConfig()


def find_config_file(cwd: Optional[Path] = None) -> Optional[Path]:
    """
    Find a config file by priority

    Returns:
        Path: first candidate found, or None
    """
    base = Path(cwd) if cwd else Path('.')
    candidates = [
        base / 'deadsweep.yaml',
        base / 'deadsweep.yml',
        base / '.deadsweep.yaml',
        base / '.deadsweep.yml',
        base / 'pyproject.toml',  # only with [tool.deadsweep]
    ]

    for candidate in candidates:
        if candidate.exists():
            if candidate.name == 'pyproject.toml':
                if _has_deadsweep_config(candidate):
                    return candidate
                continue
            return candidate

    return None


def _load_config_file(config_path: Path) -> DeadsweepConfig:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    if suffix in ['.yaml', '.yml']:
        return _load_yaml_config(config_path)
    elif suffix == '.toml':
        return _load_toml_config(config_path)
    else:
        raise ValueError(f"Unsupported config file format: {suffix}")


def _load_yaml_config(config_path: Path) -> DeadsweepConfig:
    if yaml is None:
        raise ImportError("PyYAML is required to read YAML config files: pip install pyyaml")

    with config_path.open('r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if not data:
        return DeadsweepConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return _parse_config_data(data)


def _load_toml_config(config_path: Path) -> DeadsweepConfig:
    if tomli is None:
        raise ImportError("tomli is required to read TOML config files: pip install tomli")

    with config_path.open('rb') as f:
        data = tomli.load(f)

    if 'tool' in data and 'deadsweep' in data['tool']:
        config_data = data['tool']['deadsweep']
    else:
        config_data = data

    return _parse_config_data(config_data)


def _has_deadsweep_config(pyproject_path: Path) -> bool:
    if tomli is None:
        return False

    try:
        with pyproject_path.open('rb') as f:
            data = tomli.load(f)
        return 'tool' in data and 'deadsweep' in data['tool']
    except Exception:
        return False


def _parse_config_data(data: Dict[str, Any]) -> DeadsweepConfig:
    config = DeadsweepConfig()

    for key in ('root', 'graph', 'entrypoints', 'output', 'graph_format'):
        if key in data:
            setattr(config, key, str(data[key]))
    if 'graph_root' in data:
        config.graph_root = str(data['graph_root']) if data['graph_root'] else None
    if 'workers' in data:
        try:
            config.workers = max(1, int(data['workers']))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid workers value: {data['workers']!r}") from None
    if 'render_graph' in data:
        config.render_graph = bool(data['render_graph'])

    heur_data = data.get('heuristics')
    if isinstance(heur_data, dict):
        heur = HeuristicsConfig()
        if isinstance(heur_data.get('legacy_indicators'), list):
            heur.legacy_indicators = [str(x) for x in heur_data['legacy_indicators']]
        if isinstance(heur_data.get('deprecated_patterns'), list):
            heur.deprecated_patterns = [str(x) for x in heur_data['deprecated_patterns']]
        if 'similarity_threshold' in heur_data:
            heur.similarity_threshold = float(heur_data['similarity_threshold'])
        for key in ('inline_max_lines', 'inline_max_exports', 'inline_max_importers'):
            if key in heur_data:
                setattr(heur, key, int(heur_data[key]))
        config.heuristics = heur

    report_data = data.get('report')
    if isinstance(report_data, dict):
        rep = ReportConfig()
        for key in ('safe_deletion_display', 'inline_display', 'blocked_display', 'largest_unused', 'git_preview'):
            if key in report_data:
                setattr(rep, key, max(0, int(report_data[key])))
        config.report = rep

    return config


def create_example_config() -> str:
    """Example config file content"""
    return """# deadsweep configuration
version: "1.0"

# Workspace the graph describes; content scans read files under it
root: "."
graph: "analysis/dep-graph.json"
entrypoints: "analysis/entrypoints.json"
# graph_root: "/workspace"   # root the graph builder resolved imports against
output: "analysis"
workers: 8                   # parallel file reads; 1 = sequential
render_graph: false          # also write dead-code-graph.dot/.svg (needs Graphviz)
graph_format: "svg"

heuristics:
  # Path fragments that mark a file as legacy (case-insensitive)
  legacy_indicators:
    - legacy
    - old
    - v1
    - deprecated
    - archive
    - __old__
    - backup
    - temp
    - tmp
    - unused
    - disabled
  # Literal markers counted as deprecation annotations (case-insensitive)
  deprecated_patterns:
    - "@deprecated"
    - "DEPRECATED:"
    - "MIGRATE:"
    - "TODO: remove"
    - "FIXME: remove"
  similarity_threshold: 0.6  # base-name similarity needed to call two files alike
  inline_max_lines: 40
  inline_max_exports: 2
  inline_max_importers: 1

report:
  safe_deletion_display: 20
  inline_display: 15
  blocked_display: 20
  largest_unused: 20
  git_preview: 10
"""
