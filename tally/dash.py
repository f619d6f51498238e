from fncli import cli

from .lib.errors import echo
from .lib.render import render_dashboard
from .stats import build_stats


@cli("tally")
def dashboard() -> None:
    """Stats, tasks and habits at a glance"""
    from .state import load_app

    app = load_app()
    stats = build_stats(app.tasks.items, app.habits.items)
    echo(render_dashboard(app.tasks.items, app.habits.items, stats))
