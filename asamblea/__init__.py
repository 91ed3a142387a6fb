import click
from flask import Flask
from werkzeug.security import generate_password_hash

from asamblea.config import Config, engine_options
from asamblea.extensions import db, login_manager, migrate
from asamblea.models import User
from asamblea.models.user import ROLES
from asamblea.routes import register_routes


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.from_mapping(test_config)
        if "SQLALCHEMY_ENGINE_OPTIONS" not in test_config:
            app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_options(
                app.config["SQLALCHEMY_DATABASE_URI"],
                app.config["DB_TIMEOUT_SECONDS"],
            )

    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return User.query.get(int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return {"ok": False, "error": "unauthorized", "message": "Please log in."}, 401

    register_routes(app)
    register_commands(app)
    return app


def register_commands(app):
    @app.cli.command("create-admin")
    @click.argument("username")
    @click.option("--role", type=click.Choice(ROLES), default="voting_admin")
    @click.password_option()
    def create_admin(username, role, password):
        """Create an administrator account."""
        if User.query.filter_by(username=username).first():
            raise click.ClickException(f"User {username} already exists.")

        user = User(
            username=username,
            password_hash=generate_password_hash(password, method="pbkdf2:sha256"),
            role=role,
        )
        db.session.add(user)
        db.session.commit()
        click.echo(f"Created {role} account {username}.")

    @app.cli.command("init-db")
    def init_db():
        """Create all tables without running migrations."""
        db.create_all()
        click.echo("Database tables created.")


__all__ = ["db", "migrate", "create_app"]
