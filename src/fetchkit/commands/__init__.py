"""Built-in ``fetchkit`` sub-commands."""
