"""Interfaces layer for toodo.

This layer contains adapters for external interactions:
- CLI: Command-line interface using Typer (toodo.interfaces.cli)
- API: REST API using FastAPI (toodo.interfaces.api)

The interfaces layer is responsible for:
- Accepting user input and validating it
- Calling application services
- Formatting output for the user
"""
