"""Alembic environment bound to the Flask app's database."""

from logging.config import fileConfig

from alembic import context
from flask import current_app, has_app_context

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def _flask_app():
    """Use the running app when invoked from manage.py, else build one."""
    if has_app_context():
        return current_app._get_current_object()
    from talentbridge import create_app
    return create_app()


app = _flask_app()

with app.app_context():
    from talentbridge import db
    import talentbridge.models  # noqa: F401  (registers every table on the metadata)

    target_metadata = db.metadata
    database_url = app.config["SQLALCHEMY_DATABASE_URI"]


def run_migrations_offline() -> None:
    """Emit SQL to stdout without a database connection."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against the app's engine."""
    with app.app_context():
        from talentbridge import db

        with db.engine.connect() as connection:
            context.configure(connection=connection, target_metadata=target_metadata)
            with context.begin_transaction():
                context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
