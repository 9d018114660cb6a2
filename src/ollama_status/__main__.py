"""CLI entrypoint for ollama-status."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from importlib import metadata
from pathlib import Path

from .actions import model_choice_label
from .config import ensure_config_dir, load_config
from .logging_utils import configure_logging
from .plugin import OllamaStatusPlugin


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ollama-status", description="Ollama status bar and model launcher"
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a config.toml (defaults to the user config directory)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Print the current status line and exit",
    )
    parser.add_argument(
        "--models",
        action="store_true",
        help="Print the available models and exit",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Load configuration, handle CLI flags, and run the status app."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("ollama-status")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"ollama-status {version}")
        return

    if args.config is None:
        ensure_config_dir()
    config = load_config(args.config)
    configure_logging(config["logging"])
    plugin = OllamaStatusPlugin.from_config(config)

    if args.once:
        segments = plugin.status_segments() + plugin.datetime_segments()
        print("".join(segment.text for segment in segments).rstrip())
        return

    if args.models:
        models = plugin.fetch_models()
        if not models:
            print("No models found. Is Ollama running?")
            return
        for model in models:
            print(model_choice_label(model))
        return

    from .app import OllamaStatusApp

    app = OllamaStatusApp(plugin)
    app.run()


if __name__ == "__main__":
    main()
