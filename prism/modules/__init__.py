"""
Command modules, in registration order.
"""

from typing import List

from prism.commands.base_module import BaseModule, ModuleContext

from .quotes import QuotesModule
from .silly import SillyModule
from .management import ManagementModule
from .topics import TopicsModule

MODULE_CLASSES = (QuotesModule, SillyModule, ManagementModule, TopicsModule)


def create_modules(context: ModuleContext) -> List[BaseModule]:
    """Instantiate every module with the shared context."""
    return [module_class(context) for module_class in MODULE_CLASSES]


__all__ = [
    "QuotesModule",
    "SillyModule",
    "ManagementModule",
    "TopicsModule",
    "MODULE_CLASSES",
    "create_modules",
]
