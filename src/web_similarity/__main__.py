"""Allow ``python -m web_similarity``."""

from web_similarity.cli.main import main

main()
