"""Command-line entry point: prepare generation commands and inspect images."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from collections.abc import Sequence
from pathlib import Path

from neuralpixel.command import command_line
from neuralpixel.constants import MODELS_PATH
from neuralpixel.files import list_model_files
from neuralpixel.pnginfo import read_png_parameters
from neuralpixel.session import Session


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the neuralpixel command."""
    parser = argparse.ArgumentParser(
        prog="neuralpixel",
        description="Prepare image generation runs from cached settings.",
    )
    parser.add_argument(
        "--root",
        default=".",
        help="working directory holding models/, outputs/ and .cache/",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser(
        "generate", help="build the generator command and record the settings"
    )
    generate.add_argument("--model", help="checkpoint file name to use")
    generate.add_argument("--prompt", help="positive prompt")
    generate.add_argument("--negative", help="negative prompt")
    generate.add_argument("--img2img", metavar="PATH", help="source image for img2img")
    generate.add_argument("--png", metavar="PATH", help="take parameters from a PNG file")
    generate.add_argument("--seed", type=float, help="seed, -1 for random")
    generate.add_argument("--cfg", type=float, help="CFG scale")
    generate.add_argument(
        "--reset", action="store_true", help="start from the default prompts and options"
    )

    commands.add_parser("files", help="list the files available for every model slot")

    info = commands.add_parser("info", help="show the generation parameters stored in a PNG")
    info.add_argument("path", help="PNG file to read")
    return parser


def _run_generate(args: argparse.Namespace) -> int:
    root = Path(args.root)
    session = Session(root)
    if args.reset:
        session.reset()
    if args.png:
        session.load_png_info(args.png)
    if args.model is not None:
        models = list_model_files(root / MODELS_PATH)
        if args.model not in models:
            raise ValueError(f"model not found: {args.model}")
        session.settings = dataclasses.replace(
            session.settings, model_index=models.index(args.model)
        )
    if args.prompt is not None:
        session.positive = args.prompt
    if args.negative is not None:
        session.negative = args.negative
    changes: dict[str, float] = {}
    if args.seed is not None:
        changes["seed"] = args.seed
    if args.cfg is not None:
        changes["cfg"] = args.cfg
    if changes:
        session.settings = dataclasses.replace(session.settings, **changes)
    if args.img2img:
        session.set_img2img(args.img2img)
    print(command_line(session.generate()))
    return 0


def _run_files(args: argparse.Namespace) -> int:
    session = Session(args.root)
    for slot, items in session.refresh().items():
        print(f"{slot}: {', '.join(items)}")
    return 0


def _run_info(args: argparse.Namespace) -> int:
    models = list_model_files(Path(args.root) / MODELS_PATH)
    params = read_png_parameters(args.path, models)
    for field in dataclasses.fields(params):
        value = getattr(params, field.name)
        if value is not None:
            print(f"{field.name}: {value}")
    return 0


_HANDLERS = {
    "generate": _run_generate,
    "files": _run_files,
    "info": _run_info,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; returns the process exit status."""
    args = build_parser().parse_args(argv)
    try:
        return _HANDLERS[args.command](args)
    except (ValueError, IndexError, OSError) as exc:
        print(f"neuralpixel: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())