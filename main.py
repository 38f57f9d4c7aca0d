"""CLI entry point: turn song analyses into Suno packs and article drafts."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from music_factory.models.pack import AnalyzeReferenceSongRequest
from music_factory.services import pack_service
from music_factory.services.patterns import CORE_TYPE_PATTERNS
from music_factory.services.storage import DataStore

log = logging.getLogger(__name__)

TARGET_LENGTHS = ("3min", "4min", "5min")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate Suno style/lyrics/image prompts from song analyses."
    )
    parser.add_argument(
        "--data-path",
        type=str,
        default=None,
        help="Data directory (default: $MUSIC_FACTORY_DATA_PATH, $DATA_PATH or ./data).",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug detail to stderr.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Synthesize an analysis YAML from a core type.")
    analyze.add_argument("--title", required=True)
    analyze.add_argument("--artist", required=True)
    analyze.add_argument("--core-type", required=True, help="One of: " + ", ".join(CORE_TYPE_PATTERNS))
    analyze.add_argument("--target-length", choices=TARGET_LENGTHS, default="3min")
    analyze.add_argument(
        "--genre-tag",
        action="append",
        dest="genre_tags",
        default=None,
        help="Genre tag, repeatable (max 4).",
    )
    analyze.add_argument("--notes", default=None, help="Free-form notes, e.g. 'slow, short'.")

    save = sub.add_parser("save", help="Store an analysis markdown file as analysis/<slug>.md.")
    save.add_argument("slug")
    save.add_argument("markdown_file", type=Path)

    generate = sub.add_parser("generate", help="Write a Suno pack for an analysis file.")
    generate.add_argument("analysis_path", help="Path under the data directory, e.g. analysis/foo.yaml")
    generate.add_argument("--target-length", choices=TARGET_LENGTHS, default=None)
    generate.add_argument("--no-image-prompt", action="store_true")

    validate = sub.add_parser("validate", help="Validate a written Suno pack directory.")
    validate.add_argument("output_dir", help="e.g. outputs/foo")

    note = sub.add_parser("note", help="Write a note.com article draft for an analysis file.")
    note.add_argument("analysis_path")

    sub.add_parser("core-types", help="List available core types.")

    return parser.parse_args(argv)


def setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Setup logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def run(args: argparse.Namespace) -> str:
    """Execute one sub-command and return its JSON output."""
    store = DataStore(args.data_path)

    if args.command == "analyze":
        request = AnalyzeReferenceSongRequest(
            title=args.title,
            artist=args.artist,
            core_type=args.core_type,
            target_length=args.target_length,
            genre_tags=args.genre_tags,
            notes=args.notes,
        )
        result = pack_service.analyze_reference_song(request, store)
    elif args.command == "save":
        markdown = args.markdown_file.read_text(encoding="utf-8")
        result = pack_service.save_song_analysis(args.slug, markdown, store)
    elif args.command == "generate":
        result = pack_service.generate_suno_pack(
            args.analysis_path,
            target_length=args.target_length,
            include_image_prompt=not args.no_image_prompt,
            store=store,
        )
    elif args.command == "validate":
        result = pack_service.validate_suno_pack_dir(args.output_dir, store)
    elif args.command == "note":
        result = pack_service.generate_note(args.analysis_path, store)
    else:
        core_types = {name: p.description for name, p in CORE_TYPE_PATTERNS.items()}
        return json.dumps(core_types, ensure_ascii=False, indent=2)

    return result.model_dump_json(indent=2)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)
    log.debug("Running %s with data path %s", args.command, args.data_path or "<default>")

    try:
        output = run(args)
    except (ValueError, ValidationError, OSError) as e:
        log.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
