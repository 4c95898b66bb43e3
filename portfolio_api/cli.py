import click
from flask import current_app
from flask.cli import with_appcontext

from portfolio_api import db
from portfolio_api.services.auth import AuthService


@click.command('seed-admin')
@click.option('--email', default=None, help='Defaults to ADMIN_EMAIL.')
@click.option('--password', default=None, help='Defaults to ADMIN_PASSWORD.')
@click.option('--name', default=None, help='Defaults to ADMIN_NAME.')
@with_appcontext
def seed_admin_command(email, password, name):
    """Create the admin user if it does not exist yet."""
    config = current_app.config
    service = AuthService(db.session, config['JWT_SECRET'], config['JWT_EXPIRES_HOURS'])
    user, created = service.seed_admin(
        email or config['ADMIN_EMAIL'],
        password or config['ADMIN_PASSWORD'],
        name or config['ADMIN_NAME'],
    )
    if created:
        click.echo(f'Seed completed: created {user.email} ({user.id})')
    else:
        click.echo(f'Seed skipped: {user.email} already exists')


def register_commands(app):
    app.cli.add_command(seed_admin_command)
