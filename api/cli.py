"""Maintenance commands, registered on the app as `flask --app api <command>`."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

import click
from flask.cli import with_appcontext

from models.blacklisted_token import BlacklistedToken
from models.refresh_token import RefreshToken

log = logging.getLogger(__name__)


@click.command("purge-tokens")
@with_appcontext
def purge_tokens_command():
    """Delete revoked access tokens and refresh tokens that have expired."""
    now = datetime.now(timezone.utc)
    revoked = BlacklistedToken.purge_expired(now)
    refresh = RefreshToken.purge_expired(now)
    log.info("expired tokens purged: %d revoked, %d refresh", revoked, refresh)
    click.echo(f"Purged {revoked} revoked access token(s) and {refresh} refresh token(s).")


def init_app(app) -> None:
    app.cli.add_command(purge_tokens_command)
