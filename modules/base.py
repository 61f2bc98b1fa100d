"""
Base class for message-handling modules.

All modules must inherit from BaseModule and implement its abstract methods.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Dict, Optional

import pytz

from utils.logger import get_logger


class BaseModule(ABC):
    """
    Abstract base class for coach modules.

    A module looks at an inbound message and either handles it (returns a
    result dict) or passes (returns None). Each module owns its collections.
    """

    def __init__(
        self,
        db,
        config: Optional[Dict] = None,
        timezone: str = "America/Los_Angeles",
        settings: Optional[Dict] = None,
        openai_client=None,
        embedding_provider=None,
    ):
        """
        Initialize module.

        Args:
            db: MongoDB database instance
            config: Module-specific configuration from config.yaml
            timezone: Timezone string used for calendar dates
            settings: Full application config (lexicons, retrieval settings)
            openai_client: OpenAIClient instance, if the module needs one
            embedding_provider: EmbeddingProvider instance, if the module needs one
        """
        self.db = db
        self.config = config or {}
        self.settings = settings or {}
        self.timezone = pytz.timezone(timezone)
        self.openai_client = openai_client
        self.embedding_provider = embedding_provider
        self.logger = get_logger(f"module.{self.get_name()}")

        self.setup_database()

    @abstractmethod
    def get_name(self) -> str:
        """
        Return unique module identifier.

        Returns:
            Module name (e.g., 'workout', 'knowledge')
        """
        pass

    @abstractmethod
    def setup_database(self):
        """
        Create indexes needed by this module.

        Called during module initialization; must be idempotent.
        """
        pass

    @abstractmethod
    def handle_message(self, message: str, user_id: str) -> Optional[Dict]:
        """
        Process an inbound message.

        Args:
            message: Raw message text
            user_id: Sender identifier

        Returns:
            Result dict when the module handled the message, otherwise None
        """
        pass

    # Helper methods (don't need to override)

    def get_today_in_timezone(self) -> date:
        """Today's date in the configured timezone."""
        return datetime.now(self.timezone).date()

    def get_now_in_timezone(self) -> datetime:
        """Current datetime in the configured timezone."""
        return datetime.now(self.timezone)

    def to_local(self, when: datetime) -> datetime:
        """
        Express a stored timestamp in the configured timezone.

        MongoDB hands back naive UTC datetimes.
        """
        if when.tzinfo is None:
            when = pytz.utc.localize(when)
        return when.astimezone(self.timezone)
