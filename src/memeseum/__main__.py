"""Entry point: python -m memeseum <command>

- create TITLE URL MUSEUM   Add a meme to a museum
- get ID                   Show one meme
- list                     Show every meme
- museums                  Show museum names
- museum NAME              Show the memes of one museum

Results are printed as JSON on stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from memeseum.catalog import MuseumCatalog
from memeseum.config import load_config
from memeseum.tools import get_catalog_tools


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def cmd_create(tools: dict, args: argparse.Namespace):
    return tools["create"](args.title, args.url, args.museum)


def cmd_get(tools: dict, args: argparse.Namespace):
    return tools["get_record"](args.id)


def cmd_list(tools: dict, args: argparse.Namespace):
    return tools["list_records"]()


def cmd_museums(tools: dict, args: argparse.Namespace):
    return tools["list_collections"]()


def cmd_museum(tools: dict, args: argparse.Namespace):
    return tools["list_collection_records"](args.name)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memeseum",
        description="Meme museum catalog",
    )
    parser.add_argument("--config", type=Path, help="Path to memeseum.toml")
    parser.add_argument("--data-dir", type=Path, help="Override storage.data_dir")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # create
    p = subparsers.add_parser("create", help="Add a meme to a museum")
    p.add_argument("title", help="Meme title")
    p.add_argument("url", help="Meme URL")
    p.add_argument("museum", help="Museum name")
    p.add_argument("--creator", help="Creator identity (default: from config)")
    p.set_defaults(func=cmd_create)

    # get
    p = subparsers.add_parser("get", help="Show one meme")
    p.add_argument("id", type=int, help="Meme id")
    p.set_defaults(func=cmd_get)

    # list
    p = subparsers.add_parser("list", help="Show every meme")
    p.set_defaults(func=cmd_list)

    # museums
    p = subparsers.add_parser("museums", help="Show museum names")
    p.set_defaults(func=cmd_museums)

    # museum
    p = subparsers.add_parser("museum", help="Show the memes of one museum")
    p.add_argument("name", help="Museum name")
    p.set_defaults(func=cmd_museum)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = load_config(args.config)
    if args.data_dir:
        config.storage.data_dir = args.data_dir
    _setup_logging(config.log_level)

    catalog = MuseumCatalog.open(
        config.storage.data_dir,
        id_policy=config.storage.id_policy,
        clock_step=config.storage.clock_step,
    )
    tools = get_catalog_tools(catalog, creator=getattr(args, "creator", None) or config.creator)

    result = args.func(tools, args)
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 1 if result is None else 0


if __name__ == "__main__":
    sys.exit(main())
