"""Session inactivity logout and session plumbing for the RAFC academy console."""

__all__: list[str] = []
