"""Tests for local prompt files."""
import json

import pytest
import yaml
from langchain_core.prompts import ChatPromptTemplate, PromptTemplate

from prompt_hub.exceptions import PromptFileError
from prompt_hub.template import PromptFile, write_manifest


def _write(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


def test_load_string_prompt(tmp_path):
    path = _write(
        tmp_path / "summarize.yaml",
        {
            "description": "Summarize a document",
            "template": "Summarize: {text}",
            "tags": ["summaries"],
            "public": False,
        },
    )

    definition = PromptFile.load(path)

    assert definition.name == "summarize"
    assert definition.description == "Summarize a document"
    assert definition.tags == ["summaries"]
    assert definition.public is False
    assert definition.validate() == []

    prompt = definition.to_prompt()
    assert isinstance(prompt, PromptTemplate)
    assert prompt.format(text="the doc") == "Summarize: the doc"


def test_load_chat_prompt(tmp_path):
    path = _write(
        tmp_path / "chat.yaml",
        {
            "name": "chat",
            "messages": [
                ["system", "You are terse."],
                {"role": "human", "content": "Explain {topic}"},
            ],
        },
    )

    prompt = PromptFile.load(path).to_prompt()

    assert isinstance(prompt, ChatPromptTemplate)
    messages = prompt.format_messages(topic="owls")
    assert [m.type for m in messages] == ["system", "human"]
    assert messages[1].content == "Explain owls"


def test_mustache_variables():
    definition = PromptFile.from_dict(
        {"name": "m", "template_format": "mustache", "messages": [["human", "Hi {{name}}"]]}
    )

    assert definition.variables() == ["name"]


def test_jinja2_variables():
    definition = PromptFile.from_dict(
        {"name": "j", "template_format": "jinja2", "template": "{{ a }} and {{ b }}"}
    )

    assert definition.variables() == ["a", "b"]


def test_jinja2_syntax_error():
    definition = PromptFile.from_dict(
        {"name": "j", "template_format": "jinja2", "template": "{{ a "}
    )

    errors = definition.validate()

    assert len(errors) == 1
    assert errors[0].startswith("Template syntax error")


@pytest.mark.parametrize(
    "data,expected",
    [
        ({"name": "x"}, "neither"),
        ({"name": "x", "template": "a", "messages": [["human", "b"]]}, "both"),
        ({"name": "x", "template": "a", "template_format": "erb"}, "Unknown template format"),
        ({"name": "x", "messages": [["robot", "b"]]}, "Unknown message role"),
        ({"name": "x", "messages": ["just text"]}, "Invalid message entry"),
    ],
)
def test_validate_errors(data, expected):
    errors = PromptFile.from_dict(data).validate()

    assert any(expected in e for e in errors)


def test_to_prompt_rejects_invalid():
    with pytest.raises(PromptFileError, match="Invalid prompt 'x'"):
        PromptFile.from_dict({"name": "x"}).to_prompt()


def test_load_missing_file(tmp_path):
    with pytest.raises(PromptFileError, match="Cannot read"):
        PromptFile.load(tmp_path / "missing.yaml")


def test_load_bad_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("template: [unclosed\n")

    with pytest.raises(PromptFileError, match="Error parsing YAML"):
        PromptFile.load(path)


def test_load_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")

    with pytest.raises(PromptFileError, match="does not contain"):
        PromptFile.load(path)


def test_write_manifest_yaml_and_json(tmp_path):
    prompt = PromptTemplate.from_template("Summarize: {text}")

    yaml_path = write_manifest(prompt, tmp_path / "out" / "prompt.yaml")
    json_path = write_manifest(prompt, tmp_path / "prompt.json")

    from_yaml = yaml.safe_load(yaml_path.read_text())
    from_json = json.loads(json_path.read_text())
    assert from_yaml == from_json
    assert from_json["id"][-1] == "PromptTemplate"
    assert from_json["kwargs"]["template"] == "Summarize: {text}"


@pytest.mark.parametrize(
    "data",
    [
        {"name": "x", "template": "Summarize: {text"},
        {"name": "x", "template_format": "mustache", "messages": [["human", "Hi {{name"]]},
    ],
)
def test_malformed_template_is_invalid(data):
    definition = PromptFile.from_dict(data)

    errors = definition.validate()

    assert len(errors) == 1
    assert errors[0].startswith("Template syntax error")
    with pytest.raises(PromptFileError, match="Template syntax error"):
        definition.to_prompt()
