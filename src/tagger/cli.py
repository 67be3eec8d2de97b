import argparse
import logging
import os
import sys
from typing import Optional

from tagger.lib.config import load_config
from tagger.lib.errors import ConflictError, InvalidFilenameError, InvalidTagError, SchemaError, TaggerError
from tagger.services.repository import Repository, init

logger = logging.getLogger(__name__)


def _is_text(value: str) -> bool:
    try:
        # argv bytes that failed to decode show up as lone surrogates
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _path_to_string(path) -> str:
    """Return ``path`` as text, rejecting names with undecodable bytes."""
    value = os.fspath(path)
    if not _is_text(value):
        raise InvalidFilenameError(f"filename is not valid UTF-8: {value!r}")
    return value


def _tag_name(name: str) -> str:
    if not _is_text(name):
        raise InvalidTagError(f"tag name is not valid UTF-8: {name!r}")
    return name


def add(args, repo: Repository):
    filename = _path_to_string(args.filename)
    file_id = repo.create_file(filename)
    logger.info("tracking %s as id=%s", filename, file_id)
    return 0


def tag(args, repo: Repository):
    # validate both arguments before anything is written
    filename = _path_to_string(args.filename)
    tag_name = _tag_name(args.tag)
    file_id, created = repo.ensure_file(filename)
    if created:
        print("File wasn't being tracked, tracking it now...")
    tag_id, created = repo.ensure_tag(tag_name)
    if created:
        print("Tag didn't exist, making it now...")
    try:
        repo.tag_file(tag_id, file_id)
    except ConflictError:
        print(f"{filename} is already tagged '{tag_name}'")
    return 0


def update(args, repo: Optional[Repository] = None):
    print("This command would take a file, and update its tags.")
    return 0


def scan(args, repo: Optional[Repository] = None):
    print("This would walk the directory and find files to add and mark missing files as orphaned")
    return 0


def search(args, repo: Repository):
    tag_id = repo.get_tag(_tag_name(args.tag))
    if tag_id is None:
        print("This tag doesn't exist.")
        return 0
    for f in repo.get_files_for_tag(tag_id):
        print(f.filename)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tagger", description="Track files and look them up by tag.")
    parser.add_argument("--config", help="Path to JSON config file (default: ./config.json if present)")
    parser.add_argument("--database", help="Override config: path or URL of the database")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd")

    p_add = sub.add_parser("add", help="Start tracking a file")
    p_add.add_argument("filename")
    p_add.set_defaults(func=add)

    p_tag = sub.add_parser("tag", help="Tag a file, tracking the file and creating the tag if needed")
    p_tag.add_argument("filename")
    p_tag.add_argument("tag")
    p_tag.set_defaults(func=tag)

    p_update = sub.add_parser("update", help="Update a file's tags (not implemented)")
    p_update.set_defaults(func=update)

    p_scan = sub.add_parser("scan", help="Reconcile tracked files with disk (not implemented)")
    p_scan.set_defaults(func=scan)

    p_search = sub.add_parser("search", help="List files carrying a tag")
    p_search.add_argument("tag")
    p_search.set_defaults(func=search)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        if args.database:
            config.database = args.database
        with init(config) as repo:
            return args.func(args, repo)
    except SchemaError as exc:
        print(f"FATAL: {exc}", file=sys.stderr)
        return 2
    except TaggerError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
