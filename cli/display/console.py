"""Rich console used by every renderer."""

from rich.console import Console

# Markup in user data is escaped by the renderers, not disabled here
console = Console(highlight=False)
