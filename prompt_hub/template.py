"""Local YAML prompt files that can be pushed to the hub."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, BaseLoader, TemplateSyntaxError, meta
from langchain_core.load import dumpd
from langchain_core.prompts import BasePromptTemplate, ChatPromptTemplate, PromptTemplate

from .exceptions import PromptFileError

TEMPLATE_FORMATS = ("f-string", "mustache", "jinja2")
MESSAGE_ROLES = ("system", "human", "user", "ai", "assistant", "placeholder")


def _parse_message(entry: Any) -> tuple[str, str]:
    """Accept ``[role, content]`` pairs or ``{role: ..., content: ...}`` mappings."""
    if isinstance(entry, dict):
        role, content = entry.get("role"), entry.get("content")
    elif isinstance(entry, (list, tuple)) and len(entry) == 2:
        role, content = entry
    else:
        raise PromptFileError(f"Invalid message entry: {entry!r}")

    if role not in MESSAGE_ROLES:
        raise PromptFileError(f"Unknown message role {role!r}")
    if not isinstance(content, str):
        raise PromptFileError(f"Message content for role {role!r} must be a string")
    return role, content


@dataclass
class PromptFile:
    """A prompt definition read from a local YAML file."""

    name: str
    template: str | None = None
    messages: list[Any] = field(default_factory=list)
    template_format: str = "f-string"
    description: str = ""
    readme: str | None = None
    tags: list[str] = field(default_factory=list)
    public: bool | None = None

    def __post_init__(self) -> None:
        self._env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            keep_trailing_newline=True,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PromptFile":
        """Create a PromptFile from a dictionary (e.g., parsed YAML)."""
        return cls(
            name=data.get("name", "unnamed"),
            template=data.get("template"),
            messages=list(data.get("messages") or []),
            template_format=data.get("template_format", "f-string"),
            description=data.get("description", ""),
            readme=data.get("readme"),
            tags=list(data.get("tags") or []),
            public=data.get("public"),
        )

    @classmethod
    def load(cls, filepath: str | Path) -> "PromptFile":
        """
        Load a prompt file.

        The file name is used as the prompt name when the file sets none.

        Raises:
            PromptFileError: If the file cannot be read or parsed.
        """
        filepath = Path(filepath)
        try:
            with open(filepath, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise PromptFileError(f"Cannot read {filepath}: {e}") from e
        except yaml.YAMLError as e:
            raise PromptFileError(f"Error parsing YAML in {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise PromptFileError(f"{filepath} does not contain a prompt definition")

        prompt_file = cls.from_dict(data)
        if prompt_file.name == "unnamed":
            prompt_file.name = filepath.stem
        return prompt_file

    def _sources(self) -> list[str]:
        if self.template is not None:
            return [self.template]
        return [_parse_message(m)[1] for m in self.messages]

    def validate(self) -> list[str]:
        """
        Validate the prompt definition.

        Returns a list of error messages. Empty list means valid.
        """
        errors = []

        if self.template_format not in TEMPLATE_FORMATS:
            errors.append(
                f"Unknown template format '{self.template_format}', "
                f"expected one of: {', '.join(TEMPLATE_FORMATS)}"
            )

        if self.template is None and not self.messages:
            errors.append("Prompt defines neither 'template' nor 'messages'")
        elif self.template is not None and self.messages:
            errors.append("Prompt defines both 'template' and 'messages'")

        for entry in self.messages:
            try:
                _parse_message(entry)
            except PromptFileError as e:
                errors.append(str(e))

        if errors:
            return errors

        if self.template_format == "jinja2":
            for source in self._sources():
                try:
                    self._env.parse(source)
                except TemplateSyntaxError as e:
                    errors.append(f"Template syntax error: {e}")
        else:
            try:
                self._build()
            except PromptFileError as e:
                errors.append(str(e))

        return errors

    def variables(self) -> list[str]:
        """Get the sorted variable names used by the prompt."""
        if self.template_format == "jinja2":
            names: set[str] = set()
            for source in self._sources():
                names |= meta.find_undeclared_variables(self._env.parse(source))
            return sorted(names)
        return sorted(self.to_prompt().input_variables)

    def _build(self) -> BasePromptTemplate:
        # Malformed f-string and mustache templates fail while variables are parsed
        try:
            if self.template is not None:
                return PromptTemplate.from_template(
                    self.template, template_format=self.template_format
                )

            return ChatPromptTemplate.from_messages(
                [_parse_message(m) for m in self.messages],
                template_format=self.template_format,
            )
        except (ValueError, SyntaxError) as e:
            raise PromptFileError(f"Template syntax error: {e}") from e

    def to_prompt(self) -> BasePromptTemplate:
        """
        Build the langchain prompt template for this definition.

        Raises:
            PromptFileError: If the definition is invalid.
        """
        errors = self.validate()
        if errors:
            raise PromptFileError(f"Invalid prompt '{self.name}': {'; '.join(errors)}")

        return self._build()


def write_manifest(obj: Any, filepath: str | Path) -> Path:
    """
    Write a serialized prompt to disk.

    ``.yaml`` and ``.yml`` paths are written as YAML, anything else as JSON.

    Returns:
        Path to the written file.
    """
    filepath = Path(filepath)
    data = dumpd(obj)

    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as f:
        if filepath.suffix in (".yaml", ".yml"):
            yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
        else:
            json.dump(data, f, indent=2)
            f.write("\n")

    return filepath
