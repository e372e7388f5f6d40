"""Push prompts to and pull prompts from the hub."""

import json
import logging
import warnings
from typing import Any, Sequence

from langchain_core.load import loads
from langsmith import Client

from .exceptions import PromptLoadError
from .manifest import patch_manifest
from .models import build_model_import_map, to_import_mappings

logger = logging.getLogger(__name__)

MODEL_CLASS_HINT = "\n".join(
    [
        "",
        "To load prompts with an associated non-OpenAI model, you must pass a "
        '"model_class" parameter like this:',
        "",
        "```",
        "from langchain_anthropic import ChatAnthropic",
        "",
        'prompt = pull("my-prompt", include_model=True, model_class=ChatAnthropic)',
        "```",
    ]
)


def get_client(api_url: str | None = None, api_key: str | None = None) -> Client:
    """Create a registry client. Unset values fall back to the environment."""
    return Client(api_url=api_url, api_key=api_key)


def push(
    repo_full_name: str,
    object: Any,
    *,
    api_url: str | None = None,
    api_key: str | None = None,
    parent_commit_hash: str | None = None,
    new_repo_is_public: bool | None = None,
    is_public: bool | None = None,
    new_repo_description: str | None = None,
    description: str | None = None,
    readme: str | None = None,
    tags: Sequence[str] | None = None,
) -> str:
    """
    Push a prompt to the hub.

    If the repo does not exist yet it is created.

    Args:
        repo_full_name: ``owner/repo`` or just ``repo`` for the caller's handle.
        object: The prompt (or other serializable runnable) to push.
        api_url: Hub API URL.
        api_key: Hub API key.
        parent_commit_hash: Commit to push on top of. Defaults to the latest.
        new_repo_is_public: Deprecated, use ``is_public``.
        is_public: Whether the repo is public.
        new_repo_description: Deprecated, use ``description``.
        description: Repo description.
        readme: Repo readme.
        tags: Repo tags.

    Returns:
        URL of the newly pushed commit.
    """
    if new_repo_is_public is not None:
        warnings.warn(
            "new_repo_is_public is deprecated, use is_public instead",
            DeprecationWarning,
            stacklevel=2,
        )
    if new_repo_description is not None:
        warnings.warn(
            "new_repo_description is deprecated, use description instead",
            DeprecationWarning,
            stacklevel=2,
        )

    client = get_client(api_url=api_url, api_key=api_key)
    logger.debug("Pushing prompt to %s", repo_full_name)
    url = client.push_prompt(
        repo_full_name,
        object=object,
        parent_commit_hash=parent_commit_hash,
        is_public=is_public if is_public is not None else new_repo_is_public,
        description=description if description is not None else new_repo_description,
        readme=readme,
        tags=tags,
    )
    logger.info("Pushed %s: %s", repo_full_name, url)
    return url


def pull(
    owner_repo_commit: str,
    *,
    api_url: str | None = None,
    api_key: str | None = None,
    include_model: bool | None = None,
    model_class: type | None = None,
) -> Any:
    """
    Pull a prompt from the hub and load it.

    Args:
        owner_repo_commit: ``owner/repo`` optionally followed by ``:commit_hash``.
        api_url: Hub API URL.
        api_key: Hub API key.
        include_model: Also pull the model stored with the prompt.
        model_class: Chat model class to instantiate the stored model with.

    Returns:
        The deserialized prompt, or a prompt-and-model sequence.

    Raises:
        UnsupportedModelClassError: If ``model_class`` is not a known model.
        PromptLoadError: If a prompt with a model cannot be loaded because no
            ``model_class`` was given.
    """
    client = get_client(api_url=api_url, api_key=api_key)
    prompt_commit = client.pull_prompt_commit(owner_repo_commit, include_model=include_model)
    logger.debug(
        "Pulled %s/%s at %s", prompt_commit.owner, prompt_commit.repo, prompt_commit.commit_hash
    )

    manifest = patch_manifest(
        prompt_commit.manifest,
        owner=prompt_commit.owner,
        repo=prompt_commit.repo,
        commit_hash=prompt_commit.commit_hash,
    )

    import_mappings = None
    if model_class is not None:
        import_mappings = to_import_mappings(build_model_import_map(model_class))

    try:
        # Partner chat models live outside langchain-core
        return loads(
            json.dumps(manifest),
            additional_import_mappings=import_mappings,
            allowed_objects="all" if include_model else "core",
        )
    except Exception as e:
        if include_model and model_class is None:
            raise PromptLoadError(f"{e}\n{MODEL_CLASS_HINT}") from e
        raise
