"""Textual host for the buffer engine.

Only the controller is imported here so the session can be used (and tested)
without loading Textual itself; ``eru_engine.adapters.textual.app`` holds the
application.
"""

from .controller import EditorSession, Prompt, SessionHooks, StatusMessage

__all__ = ["EditorSession", "Prompt", "SessionHooks", "StatusMessage"]
