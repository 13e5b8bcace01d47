"""Management CLI commands."""

import sys

from flask import Flask

from talentbridge import create_app, db


def init_db(app: Flask) -> None:
    """Create all tables directly from the models (local development only)."""
    with app.app_context():
        db.create_all()
        app.logger.info("Database initialized successfully")


def drop_db(app: Flask, confirm: bool = False) -> None:
    """Drop all database tables."""
    if not confirm:
        response = input("Are you sure you want to drop all tables? [y/N]: ")
        if response.lower() != "y":
            print("Operation cancelled")
            return

    with app.app_context():
        db.drop_all()
        app.logger.info("Database dropped successfully")


def seed_db(app: Flask, email: str = None, password: str = None) -> None:
    """Seed the HQ admin, demo JVs, partners and candidates."""
    from talentbridge.seeds.demo_data import seed_demo_data

    with app.app_context():
        seed_demo_data(admin_email=email, password=password)


def migrate(app: Flask) -> None:
    """Run database migrations."""
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config("alembic.ini")

    with app.app_context():
        command.upgrade(alembic_cfg, "head")
        print("Migrations completed successfully")


def create_migration(app: Flask, message: str) -> None:
    """Create a new migration."""
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config("alembic.ini")

    with app.app_context():
        command.revision(alembic_cfg, autogenerate=True, message=message)
        print(f"Migration created with message: {message}")


def stamp_db(app: Flask, revision: str = "001") -> None:
    """Stamp database with a specific migration version without running it."""
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config("alembic.ini")

    with app.app_context():
        command.stamp(alembic_cfg, revision)
        print(f"Database stamped with revision: {revision}")


def list_routes(app: Flask) -> None:
    """Print every registered route."""
    rules = sorted(app.url_map.iter_rules(), key=lambda rule: rule.rule)
    for rule in rules:
        methods = ",".join(sorted(rule.methods - {"HEAD", "OPTIONS"}))
        print(f"  {methods:<12} {rule.rule:<45} {rule.endpoint}")


if __name__ == "__main__":
    app = create_app()

    commands = {
        "init-db": lambda: init_db(app),
        "drop-db": lambda: drop_db(app, confirm="--yes" in sys.argv),
        "migrate": lambda: migrate(app),
        "create-migration": lambda: create_migration(app, sys.argv[2] if len(sys.argv) > 2 else "auto"),
        "stamp": lambda: stamp_db(app, sys.argv[2] if len(sys.argv) > 2 else "001"),
        "seed": lambda: seed_db(
            app,
            email=sys.argv[2] if len(sys.argv) > 2 else None,
            password=sys.argv[3] if len(sys.argv) > 3 else None,
        ),
        "routes": lambda: list_routes(app),
    }

    if len(sys.argv) < 2:
        print("Usage: python manage.py <command>")
        print("\nCommands:")
        print("  init-db             - Create tables from the models (development)")
        print("  drop-db             - Drop all tables (--yes to skip the prompt)")
        print("  migrate             - Run migrations")
        print("  create-migration    - Create new migration")
        print("  stamp               - Mark database as at specific revision")
        print("                        Usage: stamp [revision] (default: 001)")
        print("  seed                - Seed HQ admin, demo JVs, partners and candidates")
        print("                        Usage: seed [admin_email] [password]")
        print("  routes              - List registered routes")
        sys.exit(1)

    command = sys.argv[1]
    if command not in commands:
        print(f"Unknown command: {command}")
        sys.exit(1)

    commands[command]()
