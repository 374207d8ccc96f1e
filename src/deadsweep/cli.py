#!/usr/bin/env python3
"""
deadsweep command line

Subcommands:
  - analyze:      reachability + classification, writes dead-code-findings.json
  - report:       projects findings into dead-code-report.md and summary.json
  - init:         writes an example deadsweep.yaml
  - show-config:  prints the effective configuration
"""
from __future__ import annotations

import sys
import argparse
from pathlib import Path


def _load(args: argparse.Namespace):
    from .config_loader import load_config

    config = load_config(Path(args.config) if args.config else None)
    for attr in ("root", "graph", "entrypoints", "output"):
        value = getattr(args, attr, None)
        if value:
            setattr(config, attr, value)
    if getattr(args, "graph_root", None):
        config.graph_root = args.graph_root
    if getattr(args, "workers", None) is not None:
        config.workers = max(1, args.workers)
    if getattr(args, "render_graph", False):
        config.render_graph = True
    return config


def _run_analyze(args: argparse.Namespace) -> int:
    from .dead_code import save_dead_code_report

    config = _load(args)
    save_dead_code_report(config)
    return 0


def _run_report(args: argparse.Namespace) -> int:
    from .documents import load_entrypoints, load_findings_document
    from .report import save_report

    config = _load(args)
    findings_path = Path(args.findings) if args.findings else config.output_dir() / "dead-code-findings.json"
    findings, summary = load_findings_document(findings_path)

    entrypoints = None
    ep_path = config.entrypoints_path()
    if ep_path.exists():
        entrypoints = load_entrypoints(ep_path, root=config.graph_root)
    else:
        print(f"⚠ Entrypoint document not found, skipping entrypoint summary: {ep_path}")

    save_report(findings, summary, entrypoints, config.output_dir(), config.report)
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="deadsweep", description="Dead code and legacy component sweep")
    sub = parser.add_subparsers(dest="cmd")

    p_an = sub.add_parser("analyze", help="Classify every file of the dependency graph")
    p_an.add_argument("--config", default=None, help="Path to config (YAML or pyproject.toml)")
    p_an.add_argument("--root", default=None, help="Workspace root for content scans")
    p_an.add_argument("--graph", default=None, help="Dependency graph document (dep-graph.json)")
    p_an.add_argument("--entrypoints", default=None, help="Entrypoint document (entrypoints.json)")
    p_an.add_argument("--graph-root", default=None, help="Root the graph builder resolved imports against")
    p_an.add_argument("--output", default=None, help="Output directory")
    p_an.add_argument("--workers", type=int, default=None, help="Parallel file reads (1 = sequential)")
    p_an.add_argument("--render-graph", action="store_true", help="Also write a Graphviz reachability graph")

    p_rep = sub.add_parser("report", help="Render the Markdown report and summary.json")
    p_rep.add_argument("--config", default=None, help="Path to config (YAML or pyproject.toml)")
    p_rep.add_argument(
        "--root", default=None, help="Base directory for relative findings, entrypoints and output paths"
    )
    p_rep.add_argument(
        "--findings", default=None, help="Findings document, optionally enriched with safetyCheck entries"
    )
    p_rep.add_argument("--entrypoints", default=None, help="Entrypoint document (entrypoints.json)")
    p_rep.add_argument("--output", default=None, help="Output directory")

    p_init = sub.add_parser("init", help="Write an example deadsweep.yaml")
    p_init.add_argument("--force", action="store_true", help="Overwrite an existing config file")
    p_init.add_argument("--path", default="deadsweep.yaml", help="Where to write the config")

    p_show = sub.add_parser("show-config", help="Print the effective configuration")
    p_show.add_argument("--config", default=None, help="Path to config (YAML or pyproject.toml)")

    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        sys.exit(0)

    if args.cmd == "init":
        from .config_init import init_config
        init_config(Path(args.path), force=args.force)
        return

    try:
        if args.cmd == "show-config":
            from .config_init import show_config
            show_config(_load(args))
            return
        if args.cmd == "analyze":
            sys.exit(_run_analyze(args))
        if args.cmd == "report":
            sys.exit(_run_report(args))
    except (ValueError, FileNotFoundError) as e:
        # invalid documents (DeadsweepError) and invalid config both land here
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
