"""Allow ``python -m swagfluence``."""

from swagfluence.app import main

main()
