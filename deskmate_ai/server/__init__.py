"""
HTTP transport for DeskMate-AI.

A FastAPI application exposing the agent runtime, the chat record store and
the completion pipeline. Import ``deskmate_ai.server.main`` for the ``app``.
"""
