"""Workflow orchestration for catalog operations used by the CLI and the server."""
