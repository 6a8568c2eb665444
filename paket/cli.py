import argparse
import logging
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from .config import Settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="paket", description="Paket: read before it goes away")
    parser.add_argument("-n", "--name", help="feed name (default: My Paket)")
    parser.add_argument("-d", "--desc", help="feed description (default: My links)")
    parser.add_argument("-l", "--link", help="feed HTTP url (or PAKET_LINK)")
    parser.add_argument("--db", help="database file (default: paket.db)")
    parser.add_argument("-p", "--port", type=int, help="server port (default: 8080)")
    parser.add_argument("--ttl", type=int, help="time to live in days (default: 60)")
    parser.add_argument("--host", help="address to listen on (default: 0.0.0.0)")
    parser.add_argument(
        "--no-fetch",
        action="store_false",
        dest="fetch_titles",
        default=None,
        help="do not fetch saved pages to learn their titles",
    )
    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        type=str.upper,
        help="logging level (default: INFO)",
    )
    return parser


def parse_settings(argv: Sequence[str]) -> Settings:
    """Settings from the environment with the flags given in ``argv`` on top."""
    parser = build_parser()
    args = parser.parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if value is not None}
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        parser.error(f"invalid value for {fields or 'settings'}")
    if settings.link is None:
        parser.error("the following arguments are required: -l/--link")
    return settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = parse_settings(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    import uvicorn

    from .main import create_app

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
