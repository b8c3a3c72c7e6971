"""Clients for external services."""

from scripture_study.clients.assistant import StudyAssistant

__all__ = ["StudyAssistant"]
