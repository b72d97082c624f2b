"""
Import a word-book backup file into the configured backend store.

Usage examples:

  python scripts/import_wordbook.py --file ziyang-backup.json --name ziyang

  python scripts/import_wordbook.py --file backup.json --book-id 3fa85f64c1d2

Without --book-id a new book is created; with it the stored book is
overwritten. The document is normalised first, so legacy ``wordbook/1``
backups are upgraded on the way in.
"""
from __future__ import annotations

import argparse
import os

from wordbook.api.deps import get_repository
from wordbook.services.transfer import read_backup
from wordbook.utils.exceptions import WordBookError


def main() -> None:
    parser = argparse.ArgumentParser(description="Import a word-book backup file")
    parser.add_argument("--file", required=True, help="Path to the backup JSON file")
    parser.add_argument("--name", default=None, help="Name for a newly created book")
    parser.add_argument("--book-id", default=None, help="Overwrite this existing book instead")

    args = parser.parse_args()

    if not os.path.exists(args.file):
        raise SystemExit(f"Backup file not found: {args.file}")

    repository = get_repository()
    try:
        book = read_backup(args.file)
        if args.book_id:
            book.id = args.book_id
            repository.update(args.book_id, book.to_dict())
            target_id = args.book_id
        else:
            created = repository.create_from_template(None, args.name or book.name or "imported")
            book.id = created["id"]
            book.name = created["name"]
            book.bump_version()
            repository.update(book.id, book.to_dict())
            target_id = book.id
    except WordBookError as exc:
        raise SystemExit(f"Import failed: {exc.message}")

    print(f"Imported {len(book.words)} words into book {target_id}")


if __name__ == "__main__":
    main()
