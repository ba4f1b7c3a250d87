"""Operational scripts: the interactive console and the demo seeder."""
