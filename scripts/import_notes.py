"""CLI for saving a folder of markdown/text files as notes in the local knowledge base"""

import argparse
from pathlib import Path

from loguru import logger

from cortex.config import settings
from cortex.errors import CortexError
from cortex.providers import build_classifier, build_embedder
from cortex.service import NoteService
from cortex.vector_dbs.local_db import LocalVectorDB

MAX_CONTENT_CHARS = 10000


def read_note_file(file: Path) -> tuple[str, str]:
    """Return (title, content) for a note file, preferring a leading markdown header as title."""
    content = file.read_text(encoding="utf-8").strip()
    title = file.stem
    if content.startswith("#"):
        first_line, _, rest = content.partition("\n")
        title = first_line.lstrip("#").strip()
        content = rest.strip() or title
    return title[:200], content[:MAX_CONTENT_CHARS]


def main(in_folder: str, db_path: str, tags: list[str]) -> None:
    service = NoteService(
        vector_db=LocalVectorDB(filepath=Path(db_path), match_threshold=settings.match_threshold),
        embedder=build_embedder(settings),
        classifier=build_classifier(settings),
        top_k=settings.auto_connect_top_k,
        preview_chars=settings.candidate_preview_chars,
    )

    files = sorted(
        f for pattern in ("*.md", "*.txt") for f in Path(in_folder).rglob(pattern)
    )
    logger.info(f"Found {len(files)} files to import")

    saved = failed = 0
    for file in files:
        title, content = read_note_file(file)
        if not content:
            logger.warning(f"Skipping empty file {file}")
            continue
        try:
            result = service.save_note(title=title, content=content, tags=tags, source="auto")
        except CortexError as e:
            failed += 1
            logger.error(f"Failed to import {file}: {e}")
            continue
        saved += 1
        logger.info(f"{file.name}: {result.message}")

    logger.info(f"Import complete: {saved} saved, {failed} failed")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--in-folder", type=str, required=True, help="Folder containing markdown or text files"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        required=False,
        help="Local database file",
        default=settings.local_db_path,
    )
    parser.add_argument(
        "--tag", action="append", default=[], help="Tag added to every imported note"
    )

    args = parser.parse_args()

    main(in_folder=args.in_folder, db_path=args.db_path, tags=args.tag[:10])
