"""Built-in sub-commands of the ``swagfluence`` CLI."""
