"""CLI commands for devtodo."""
