"""
Module registry for loading and routing.

The registry:
- Loads all enabled modules
- Routes an inbound message: workout logs first, then knowledge lookup
"""

from typing import Dict, List, Optional

from utils.logger import get_logger


class ModuleRegistry:
    """Central registry for all coach modules"""

    def __init__(self, db, config: Dict, timezone: str = "America/Los_Angeles",
                 openai_client=None, embedding_provider=None):
        """
        Initialize registry and load modules.

        Args:
            db: MongoDB database instance
            config: Configuration dict from config.yaml
            timezone: Timezone string for calendar dates
            openai_client: OpenAIClient instance
            embedding_provider: EmbeddingProvider instance
        """
        self.db = db
        self.config = config
        self.timezone = timezone
        self.openai_client = openai_client
        self.embedding_provider = embedding_provider
        self.modules = []
        self.logger = get_logger("registry")

        self.load_modules()

    def load_modules(self):
        """Load all enabled modules from configuration"""
        from .workout import WorkoutModule
        from .knowledge import KnowledgeModule

        # Routing order follows this mapping
        available_modules = {
            'workout': WorkoutModule,
            'knowledge': KnowledgeModule,
        }

        for module_name, ModuleClass in available_modules.items():
            module_config = self.config.get('modules', {}).get(module_name, {})

            if not module_config.get('enabled', False):
                self.logger.debug(f"Skipping disabled module: {module_name}")
                continue

            self.logger.info(f"Loading module: {module_name}...")
            module = ModuleClass(
                self.db,
                module_config,
                timezone=self.timezone,
                settings=self.config,
                openai_client=self.openai_client,
                embedding_provider=self.embedding_provider
            )
            self.modules.append(module)
            self.logger.info(f"Loaded module: {module.get_name()}")

    def get_module(self, name: str) -> Optional[object]:
        for module in self.modules:
            if module.get_name() == name:
                return module
        return None

    def get_all_modules(self) -> List[object]:
        return self.modules

    def route_message(self, message: str, user_id: str) -> Dict:
        """
        Offer the message to each module in order.

        Returns:
            {"module": name, **result} from the first module that handled it,
            or {"module": None} when none did
        """
        for module in self.modules:
            result = module.handle_message(message, user_id)
            if result is not None:
                return {"module": module.get_name(), **result}
        return {"module": None}
