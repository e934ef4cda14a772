#!/usr/bin/env python3
"""
Pixel Editor launcher.
"""

import argparse
import sys

from .config import EditorConfig
from .errors import ConfigError
from .log_setup import configure_logging
from .terminal import TerminalApp, terminal_size


def main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="pixel_editor", description="Terminal pixel-grid editor")
    p.add_argument("-c", "--config", default="pixel_editor.toml")
    p.add_argument("-W", "--width", type=int, help="initial grid width in cells")
    p.add_argument("-H", "--height", type=int, help="initial grid height in cells")
    p.add_argument("--log-file", help="write log records to this file")
    p.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR")
    args = p.parse_args(argv)

    try:
        config = EditorConfig.load_from_toml(args.config)
    except ConfigError as e:
        print(e, file=sys.stderr)
        return 1

    overrides = {
        "grid_width": args.width,
        "grid_height": args.height,
        "log_file": args.log_file,
        "log_level": args.log_level,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        try:
            config = EditorConfig(**{**config.model_dump(), **overrides})
        except ValueError as e:
            print(f"Invalid arguments: {e}", file=sys.stderr)
            return 2

    if config.log_file:
        configure_logging(config.log_level, config.log_file)

    cols, rows = terminal_size()
    TerminalApp(config, cols, rows).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
