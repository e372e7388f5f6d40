"""Provenance and variable-name patching for pulled prompt manifests."""

import copy
from typing import Any

METADATA_OWNER_KEY = "lc_hub_owner"
METADATA_REPO_KEY = "lc_hub_repo"
METADATA_COMMIT_KEY = "lc_hub_commit_hash"


def strip_dot_notation(name: str) -> str:
    """Return the part of a variable name before the first dot."""
    return name.split(".")[0]


def _is_runnable_sequence(node: dict[str, Any]) -> bool:
    node_id = node.get("id")
    return isinstance(node_id, list) and bool(node_id) and node_id[-1] == "RunnableSequence"


def _prompt_node(manifest: dict[str, Any]) -> dict[str, Any]:
    """Find the node holding the prompt's kwargs.

    Prompts pulled together with their model come back as a sequence whose
    first step is the prompt.
    """
    if _is_runnable_sequence(manifest):
        sequence_kwargs = manifest.get("kwargs")
        if isinstance(sequence_kwargs, dict) and isinstance(sequence_kwargs.get("first"), dict):
            return sequence_kwargs["first"]
    return manifest


def _strip_variables(kwargs: dict[str, Any]) -> None:
    input_variables = kwargs.get("input_variables")
    if isinstance(input_variables, list):
        kwargs["input_variables"] = [
            strip_dot_notation(v) if isinstance(v, str) else v for v in input_variables
        ]


def patch_manifest(
    manifest: dict[str, Any], *, owner: str, repo: str, commit_hash: str
) -> dict[str, Any]:
    """
    Inject hub provenance into a manifest and normalize mustache variables.

    Args:
        manifest: Serialized prompt as returned by the registry.
        owner: Repo owner handle.
        repo: Repo name.
        commit_hash: Commit the manifest was pulled from.

    Returns:
        A patched copy of the manifest. The input is left untouched.
    """
    patched = copy.deepcopy(manifest)
    node = _prompt_node(patched)

    kwargs = node.get("kwargs")
    if not isinstance(kwargs, dict):
        kwargs = {}
        node["kwargs"] = kwargs

    metadata = kwargs.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    kwargs["metadata"] = {
        **metadata,
        METADATA_OWNER_KEY: owner,
        METADATA_REPO_KEY: repo,
        METADATA_COMMIT_KEY: commit_hash,
    }

    # Nested mustache prompts can carry variables parsed with their dotted path
    if kwargs.get("template_format") == "mustache":
        _strip_variables(kwargs)

        messages = kwargs.get("messages")
        if isinstance(messages, list):
            for message in messages:
                if not isinstance(message, dict):
                    continue
                message_kwargs = message.get("kwargs")
                if not isinstance(message_kwargs, dict):
                    continue
                prompt = message_kwargs.get("prompt")
                if isinstance(prompt, dict) and isinstance(prompt.get("kwargs"), dict):
                    _strip_variables(prompt["kwargs"])

    return patched
