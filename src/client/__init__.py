"""HTTP client bindings."""

from src.client.saved_prompts import SavedPromptsClient, SavedPromptsClientError

__all__ = ["SavedPromptsClient", "SavedPromptsClientError"]
