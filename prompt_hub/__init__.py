"""prompt-hub - Push and pull versioned prompts to and from the hub."""

from .hub import pull, push
from .manifest import patch_manifest
from .template import PromptFile

__version__ = "0.1.0"
__all__ = ["PromptFile", "patch_manifest", "pull", "push"]
