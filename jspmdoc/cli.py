"""CLI entrypoints for jspmdoc commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import load_host_config, load_options, plugin_options
from .errors import PluginError
from .logging import configure_logging
from .orchestrator import Orchestrator, PluginContext, rewrite_host_config


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "config",
        nargs="?",
        default=".",
        help="ESDoc config file or the directory holding it (defaults to current directory).",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Project root holding the JSPM config.js (overrides jspmRootPath).",
    )
    parser.add_argument(
        "--silent",
        action="store_true",
        help="Suppress info and warning output.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jspmdoc",
        description="Link JSPM packages into ESDoc generated documentation.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    prepare_parser = subparsers.add_parser(
        "prepare",
        help="Print the ESDoc config rewritten with linked JSPM package includes.",
    )
    _add_common_options(prepare_parser)
    prepare_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the rewritten config to this file instead of stdout.",
    )

    finalize_parser = subparsers.add_parser(
        "finalize",
        help="Rewrite the generated search index and write the docs .gitignore.",
    )
    _add_common_options(finalize_parser)

    graph_parser = subparsers.add_parser(
        "graph",
        help="Print the JSPM package dependency graph as JSON.",
    )
    _add_common_options(graph_parser)
    graph_parser.add_argument(
        "--scope",
        choices=("all", "main", "dev"),
        default="all",
        help="Dependency scope to report.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for jspmdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    config_path = Path(args.config).expanduser()
    config_dir = config_path if config_path.is_dir() else config_path.parent
    orchestrator = Orchestrator()

    try:
        host_config = load_host_config(config_path)
        options = load_options(plugin_options(host_config))
        if args.silent:
            options.silent = True
        if args.verbose:
            options.verbose = True
        if args.root:
            host_config["jspmRootPath"] = args.root
        context = orchestrator.prepare(host_config, options, cwd=config_dir.resolve())
        if args.command == "finalize":
            orchestrator.finalize(context)
    except (PluginError, OSError, ValueError) as exc:
        parser.exit(1, f"jspmdoc {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    if args.command == "prepare":
        payload = json.dumps(rewrite_host_config(host_config, context), indent=2)
        if args.output:
            Path(args.output).write_text(payload + "\n", encoding="utf-8")
            print(f"Config written to {_relativize(Path(args.output))}")
        else:
            print(payload)
    elif args.command == "finalize":
        print(f"Documentation finalized at {_relativize(_destination(context))}")
    elif args.command == "graph":
        print(json.dumps(context.graphs[args.scope].to_dict(), indent=2))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _destination(context: PluginContext) -> Path:
    return context.destination or context.root_path


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
