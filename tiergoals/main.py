import sys
from pathlib import Path

import uvicorn
from dotenv import find_dotenv, load_dotenv
from loguru import logger

from tiergoals.logging_setup import setup_logging

MIGRATIONS_DIR = Path(__file__).resolve().parent / "db" / "migrations"


def _load_env() -> None:
    env_path = find_dotenv(usecwd=True)
    if env_path:
        logger.info("Loaded .env from {}", env_path)
        load_dotenv(env_path, override=True)
    else:
        logger.warning("No .env found")


def _ensure_sqlite_dir() -> None:
    from tiergoals.config import settings

    if settings.database_url:
        return
    Path(settings.sqlite_path).resolve().parent.mkdir(parents=True, exist_ok=True)


def _run_migrations() -> None:
    from alembic import command
    from alembic.config import Config

    from tiergoals.db.session import build_database_url

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    alembic_cfg.set_main_option("sqlalchemy.url", build_database_url())
    command.upgrade(alembic_cfg, "head")
    logger.info("Database schema upgraded to head")


def main() -> None:
    _load_env()
    setup_logging()

    from tiergoals.config import settings

    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not set")
        sys.exit(1)
    if settings.run_migrations:
        _ensure_sqlite_dir()
        _run_migrations()

    uvicorn.run("tiergoals.api.app:app", host=settings.host, port=settings.port, reload=False)


def issue_token() -> None:
    """Print a signed access token for the user id given on the command line."""
    _load_env()
    if len(sys.argv) != 2 or not sys.argv[1].strip():
        print("usage: tiergoals-token <user-id>", file=sys.stderr)
        sys.exit(2)

    from tiergoals.api.auth import create_access_token
    from tiergoals.config import settings

    if not settings.jwt_secret:
        print("JWT_SECRET is not set", file=sys.stderr)
        sys.exit(1)
    print(create_access_token(sys.argv[1].strip()))


if __name__ == "__main__":
    main()
