from __future__ import annotations

import argparse
from collections.abc import Sequence

from tqadb.db import build_runner, create_engine, init_schema
from tqadb.entrypoints import Entrypoint
from tqadb.errors import MalformedDataError
from tqadb.logging_config import configure_logging
from tqadb.repos import EntrypointRepository
from tqadb.settings import get_settings
from tqadb.uris import parse_uri


def _print_entrypoint(entrypoint: Entrypoint) -> None:
    print(entrypoint.name)
    for uri in entrypoint.sorted_doc_uri_texts():
        print(f"  {uri}")


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="tqadb")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("init-db")
    sub.add_parser("list-entrypoints")
    show = sub.add_parser("show-entrypoint")
    show.add_argument("name")
    find = sub.add_parser("find-by-docuris")
    find.add_argument("docuris", nargs="+")

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)
    engine = create_engine(settings.database_url, echo=settings.echo_sql)
    repo = EntrypointRepository(build_runner(engine, settings))

    try:
        if args.cmd == "init-db":
            init_schema(engine)
        elif args.cmd == "list-entrypoints":
            for entrypoint in sorted(repo.find_all_entrypoints(), key=lambda ep: ep.name):
                _print_entrypoint(entrypoint)
        elif args.cmd == "show-entrypoint":
            found = repo.find_entrypoint_by_name(args.name)
            if found is None:
                raise SystemExit(f"No entrypoint named {args.name!r}")
            _print_entrypoint(found)
        elif args.cmd == "find-by-docuris":
            try:
                wanted = {parse_uri(text) for text in args.docuris}
            except MalformedDataError as exc:
                parser.error(str(exc))
            found = repo.find_entrypoint_by_doc_uris(wanted)
            if found is None:
                raise SystemExit("No entrypoint has exactly these docuris")
            _print_entrypoint(found)
        else:
            raise SystemExit(2)
    finally:
        engine.dispose()
