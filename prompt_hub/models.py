"""Lookup of chat model classes that can be re-attached to pulled prompts."""

from typing import Any

from .exceptions import UnsupportedModelClassError

# Serialized hub manifests address models as ("langchain", *key.split("__"), name).
MODEL_IMPORT_KEYS: dict[str, str] = {
    "ChatAnthropic": "chat_models__anthropic",
    "ChatAzureOpenAI": "chat_models__openai",
    "ChatGoogleVertexAI": "chat_models__vertexai",
    "ChatGoogleGenerativeAI": "chat_models__google_genai",
    "ChatBedrockConverse": "chat_models__chat_bedrock_converse",
    "ChatMistral": "chat_models__mistralai",
    "ChatFireworks": "chat_models__fireworks",
    "ChatGroq": "chat_models__groq",
    # Python integration class names
    "AzureChatOpenAI": "chat_models__openai",
    "ChatVertexAI": "chat_models__vertexai",
    "ChatMistralAI": "chat_models__mistralai",
}

SERIALIZED_ROOT = "langchain"


def model_import_key(model_class: type) -> str:
    """
    Get the import-map key for a model class.

    Raises:
        UnsupportedModelClassError: If the class name is not in the table.
    """
    name = getattr(model_class, "__name__", None)
    if name not in MODEL_IMPORT_KEYS:
        raise UnsupportedModelClassError(
            "Received unsupported model class when pulling prompt."
        )
    return MODEL_IMPORT_KEYS[name]


def build_model_import_map(model_class: type) -> dict[str, dict[str, type]]:
    """Build an import map holding just the given model class."""
    key = model_import_key(model_class)
    return {key: {model_class.__name__: model_class}}


def to_import_mappings(
    import_map: dict[str, dict[str, Any]],
) -> dict[tuple[str, ...], tuple[str, ...]]:
    """
    Convert an import map into deserializer import mappings.

    Args:
        import_map: Mapping of import-map key to {class name: class}.

    Returns:
        Mapping of serialized id path to the path the class is importable from.
    """
    mappings: dict[tuple[str, ...], tuple[str, ...]] = {}
    for key, classes in import_map.items():
        for name, cls in classes.items():
            serialized_id = (SERIALIZED_ROOT, *key.split("__"), name)
            mappings[serialized_id] = (*cls.__module__.split("."), cls.__name__)
    return mappings
