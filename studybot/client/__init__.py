"""Client module - Python counterpart of the Study Bot web frontend."""

from .api_client import StudyBotAPIClient, StudyBotAPIError
from .chat_controller import ChatController, ChatEntry, GREETING

__all__ = ['StudyBotAPIClient', 'StudyBotAPIError', 'ChatController', 'ChatEntry', 'GREETING']
