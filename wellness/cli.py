# wellness/cli.py
import click
from flask import current_app

from . import db
from .achievements.catalog import BADGE_CATALOG
from .models.badges import Badge


def seed_badges(catalog=BADGE_CATALOG) -> int:
    """Insert missing catalog badges and refresh display text of existing ones.

    Returns the number of badges created.
    """
    existing = {b.name: b for b in Badge.query.all()}
    created = 0
    for item in catalog:
        badge = existing.get(item["name"])
        if badge is None:
            db.session.add(Badge(**item))
            created += 1
        else:
            badge.description = item["description"]
            badge.icon_name = item["icon_name"]
            badge.requirement = item["requirement"]
    db.session.commit()
    return created


def register_commands(app):
    @app.cli.command("seed-badges")
    def seed_badges_command():
        """Load the badge catalog into the badges table."""
        created = seed_badges()
        click.echo(f"badges created: {created}, total: {len(BADGE_CATALOG)}")

    @app.cli.command("recompute-badges")
    @click.argument("user_id", type=int)
    def recompute_badges_command(user_id):
        """Recompute every badge domain for USER_ID."""
        current_app.extensions["badge_engine"].recompute_all_badges(user_id)
        click.echo(f"badges recomputed for user {user_id}")
