"""
Config initialisation - write the example config and show the effective one
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config_loader import DeadsweepConfig, create_example_config


def init_config(output_path: Optional[Path] = None, force: bool = False) -> Optional[Path]:
    """
    Write the example config file

    Args:
        output_path: target path, ``deadsweep.yaml`` in the current directory by default
        force: overwrite an existing file

    Returns:
        Path: the written file, or None when an existing file was kept
    """
    if output_path is None:
        output_path = Path("deadsweep.yaml")

    if output_path.exists() and not force:
        print(f"⚠  Config file already exists: {output_path}")
        print("   Use --force to overwrite it.")
        return None

    config_content = create_example_config()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(config_content, encoding="utf-8")

    print(f"✓ Config file written: {output_path}")
    print("\nNext steps:")
    print("1. Point 'graph' and 'entrypoints' at the documents produced by your graph builder")
    print("2. Run 'deadsweep analyze' to write dead-code-findings.json")
    print("3. Run 'deadsweep report' to write dead-code-report.md and summary.json")
    return output_path


def show_config(config: DeadsweepConfig) -> None:
    """Print the effective configuration"""
    h = config.heuristics
    r = config.report
    print("Effective configuration:")
    print("━" * 60)
    print("Inputs:")
    print(f"  workspace root:   {config.root}")
    print(f"  dependency graph: {config.graph_path()}")
    print(f"  entrypoints:      {config.entrypoints_path()}")
    print(f"  graph root:       {config.graph_root or '(metadata.root or /workspace)'}")
    print(f"  output:           {config.output_dir()}")
    print(f"  workers:          {config.workers}")
    print(f"  render graph:     {'yes' if config.render_graph else 'no'} ({config.graph_format})")
    print("\nHeuristics:")
    print(f"  legacy indicators:   {', '.join(h.legacy_indicators)}")
    print(f"  deprecated patterns: {', '.join(h.deprecated_patterns)}")
    print(f"  similarity > {h.similarity_threshold}")
    print(
        f"  inline when lines <= {h.inline_max_lines}, exports <= {h.inline_max_exports}, "
        f"importers <= {h.inline_max_importers}"
    )
    print("\nReport caps:")
    print(
        f"  safe deletion {r.safe_deletion_display}, inline {r.inline_display}, "
        f"blocked {r.blocked_display}, largest unused {r.largest_unused}, git preview {r.git_preview}"
    )
    print("━" * 60)
