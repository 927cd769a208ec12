"""Building blocks for a chat assistant: messages, memory, task and utility tools, prompts, index helpers and a web server."""

__version__ = "0.1.0"