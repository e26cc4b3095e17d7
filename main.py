#!/usr/bin/env python3
"""Prompt-to-files generation pipeline.

Usage:
    python main.py build --prompt "build me a bakery website"
    python main.py build --prompt "add a pricing page" --workspace bakery
    python main.py build --prompt "..." --dry-run            # intent + plan only
    python main.py validate path/to/project
    python main.py providers
"""

import argparse
import os
import sys

from config.providers import PROVIDERS, load_provider_config
from core.logging import configure_logging
from core.orchestrator import Orchestrator
from core.store import DirectoryStore
from core.telemetry import StageTracer
from core.validator import validate_files
from utils.folder_naming import DEFAULT_OUTPUT_DIR, new_workspace_id


def _format_findings(findings):
    lines = []
    for f in findings:
        loc = f.file
        if f.line:
            loc += f":{f.line}"
        marker = "ERROR" if f.severity == "error" else "WARN"
        lines.append(f"  [{marker}] {loc} [{f.category}] {f.message}")
        if f.fix:
            lines.append(f"           Fix: {f.fix}")
    return "\n".join(lines)


def cmd_build(args):
    """Run the pipeline and write the files into the workspace directory."""
    store = DirectoryStore(args.output_dir)
    orchestrator = Orchestrator(store=store)
    workspace_id = args.workspace or new_workspace_id(args.prompt, args.output_dir)
    context = orchestrator.create_context(workspace_id, args.prompt)

    if args.dry_run:
        tracer = StageTracer(context)
        intent = orchestrator.intent.run(context, tracer)
        print(f"Intent:   {intent.type} ({intent.confidence:.2f})")
        if intent.type == "question":
            return 0
        plan = orchestrator.planner.run(context, tracer)
        print(f"Project:  {plan.project_type}")
        print(f"Theme:    {plan.theme.get('primary')} / {plan.theme.get('style')}")
        print("\nFiles:")
        for planned in plan.pages + plan.components:
            print(f"  {planned.path}")
        return 0

    result = orchestrator.run(context)
    if result.success and result.files:
        orchestrator.save_files(context, result.files)

    print(f"\nWorkspace: {store.workspace_dir(workspace_id)}")
    print(f"Success:   {'yes' if result.success else 'NO'}")
    print(f"Validation passed: {'yes' if result.validation_passed else 'NO'}")
    print(f"Repair attempts:   {result.repair_attempts}")
    if result.models_used:
        print("Models used:")
        for m in result.models_used:
            print(f"  {m}")
    print(f"\nGenerated {len(result.files)} file(s):")
    for f in result.files:
        print(f"  {f.path}")
    if result.errors:
        print("\nErrors:")
        for e in result.errors:
            print(f"  {e}")
    print(f"\n{result.ai_message}")
    return 0 if result.success else 1


def cmd_validate(args):
    """Validate the files of an existing project directory."""
    if not os.path.isdir(args.path):
        print(f"Not a directory: {args.path}", file=sys.stderr)
        return 2
    root = os.path.realpath(args.path)
    store = DirectoryStore(os.path.dirname(root))
    files = store.get_existing_files(os.path.basename(root))
    result = validate_files(files)

    print(f"Files:    {len(files)}")
    print(f"Valid:    {'yes' if result.valid else 'NO'}")
    print(f"Score:    {result.score:.2f}")
    print(f"Errors: {len(result.critical_errors)}  Warnings: {len(result.warnings)}")
    if result.critical_errors or (args.verbose and result.warnings):
        print("\nFindings:")
        shown = result.critical_errors + (result.warnings if args.verbose else [])
        print(_format_findings(shown))
    if result.suggestions:
        print("\nSuggestions:")
        for s in result.suggestions:
            print(f"  - {s}")
    return 0 if result.valid else 1


def cmd_providers(args):
    """Show which providers are configured and how tasks are routed."""
    config = load_provider_config()
    print("Providers:")
    for key, table in PROVIDERS.items():
        status = "configured" if config.get(key) else f"missing {table['env']}"
        print(f"  {key:10s} {table['name']:18s} {status}")
    print("\nRouting:")
    for task, entry in config.routing.items():
        fallback = f"{entry.fallback.provider}/{entry.fallback.model}" if entry.fallback else "-"
        print(f"  {task:10s} {entry.provider}/{entry.model:10s} "
              f"threshold {entry.confidence_threshold:.2f}  fallback {fallback}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="promptforge",
        description="Turn a prompt into a validated React + Tailwind project",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging and all findings")
    subparsers = parser.add_subparsers(dest="command")

    build_parser = subparsers.add_parser("build", help="Run the generation pipeline")
    build_parser.add_argument("--prompt", required=True, help="Natural language request")
    build_parser.add_argument("--workspace", help="Existing workspace to modify (default: new)")
    build_parser.add_argument("--output-dir", default=DEFAULT_OUTPUT_DIR,
                              help="Directory holding the workspaces")
    build_parser.add_argument("--dry-run", action="store_true",
                              help="Run intent and planning only, show the file plan")
    build_parser.set_defaults(func=cmd_build)

    validate_parser = subparsers.add_parser("validate", help="Validate an existing project")
    validate_parser.add_argument("path", help="Project directory")
    validate_parser.set_defaults(func=cmd_validate)

    providers_parser = subparsers.add_parser("providers", help="Show provider configuration")
    providers_parser.set_defaults(func=cmd_providers)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1
    configure_logging("DEBUG" if args.verbose else None)
    try:
        return args.func(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
