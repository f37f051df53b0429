from __future__ import annotations

import argparse
import sys

import uvicorn
from sqlalchemy.orm import Session, sessionmaker

from token_vault.core.config import settings
from token_vault.core.database import Base, SessionLocal
from token_vault.core.log_config import configure_logging
from token_vault.models.token_mapping import Category
from token_vault.services.tokenization_service import TokenizationError, build_service


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="token_vault", description=settings.app_name)
    subcommands = parser.add_subparsers(dest="command")

    serve = subcommands.add_parser("serve", help="run the HTTP API")
    serve.add_argument("--reload", action="store_true")

    categories = [item.value for item in Category]
    tokenize = subcommands.add_parser("tokenize", help="print the token for a value")
    tokenize.add_argument("category", choices=categories)
    tokenize.add_argument("value")
    tokenize.add_argument("--operator", default=None)

    detokenize = subcommands.add_parser("detokenize", help="print the value behind a token")
    detokenize.add_argument("category", choices=categories)
    detokenize.add_argument("value")
    return parser


def _serve(reload: bool) -> int:
    uvicorn.run(
        "token_vault.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=reload,
    )
    return 0


def _run_operation(args: argparse.Namespace, session_factory: sessionmaker[Session]) -> int:
    with session_factory() as db:
        Base.metadata.create_all(bind=db.get_bind())

        service = build_service(db)
        try:
            if args.command == "tokenize":
                result = service.tokenize(args.value, args.category, created_by=args.operator)
            else:
                result = service.detokenize(args.value, args.category)
        except TokenizationError as exc:
            sys.stderr.write(f"[{exc.code}] {exc.message}\n")
            return 1

    sys.stdout.write(result + "\n")
    return 0


def main(
    argv: list[str] | None = None,
    session_factory: sessionmaker[Session] = SessionLocal,
) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()
    if args.command in (None, "serve"):
        return _serve(reload=getattr(args, "reload", False))
    return _run_operation(args, session_factory)


if __name__ == "__main__":
    raise SystemExit(main())
