"""DeskMate-AI.

Backend of a desktop AI-chat assistant: a chat client for several LLM vendors
that can also act on the local machine on the user's behalf.

Core subpackages
----------------

- ``deskmate_ai.agent_core``:

  - Agent sessions with a working directory and an append-only audit log.
  - A capability dispatcher that records exactly one action per request.
  - A table-driven permission policy; ``Dangerous`` operations never run.
  - File and process collaborators that touch the operating system.

- ``deskmate_ai.llm``:

  - A wire-neutral message form and one adapter per vendor.
  - A streaming pipeline reporting start/chunk/complete/error events.

- ``deskmate_ai.core``: logging, event delivery and the chat record store.

- ``deskmate_ai.server``: the FastAPI transport over all of the above.
"""
