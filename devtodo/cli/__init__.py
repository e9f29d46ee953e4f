"""Command line interface for devtodo."""
