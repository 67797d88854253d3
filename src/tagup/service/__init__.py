"""Suggestion service lifecycle and its FastAPI front end (`tagup.service.app`)."""

from tagup.service.lifecycle import Status, SuggestionService

__all__ = ["Status", "SuggestionService"]
