"""First-time setup of the data directory.

Called by `wsim init` to create config.toml and the document list.
"""

from __future__ import annotations

from web_similarity.config import SimilarityConfig


def setup_data_dir(config: SimilarityConfig, *, force: bool = False) -> bool:
    """Create the data directory with config.toml and documents.txt.

    Returns True if config was created/updated, False if skipped.
    """
    if config.config_path.exists() and not force:
        return False

    config.save()

    if not config.documents_path.exists():
        config.documents_path.touch()

    return True
