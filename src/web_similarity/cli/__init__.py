"""Command-line interface for web similarity.

The console script targets ``web_similarity.cli.main:main``; only the typer
app is re-exported so ``web_similarity.cli.main`` stays the submodule.
"""

from web_similarity.cli.main import app

__all__ = ["app"]
