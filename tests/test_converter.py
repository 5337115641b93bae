"""Unit tests for YAML/JSON conversion of pipeline configs."""

import json

import pytest
import yaml

from pipesync.exceptions import ConfigParseError
from pipesync.services.pipeline.converter import json_to_json, json_to_yaml, yaml_to_json

PIPELINE_YAML = """\
resources:
- name: repo
  type: git
  source:
    uri: https://example.com/repo.git
    branch: main
jobs:
- name: unit
  public: true
  plan:
  - get: repo
    trigger: true
  - task: test
    file: repo/ci/test.yml
"""


class TestYamlToJson:
    """Tests for yaml_to_json."""

    def test_converts_structure(self):
        """Mappings, lists and scalars survive conversion."""
        data = json.loads(yaml_to_json(PIPELINE_YAML))
        assert data["resources"][0]["source"]["branch"] == "main"
        assert data["jobs"][0]["public"] is True
        assert data["jobs"][0]["plan"][0] == {"get": "repo", "trigger": True}

    def test_output_is_canonical(self):
        """Keys are sorted and separators are compact."""
        assert yaml_to_json("b: 1\na: [x, y]\n") == '{"a":["x","y"],"b":1}'

    def test_empty_job_list(self):
        assert yaml_to_json("jobs: []") == '{"jobs":[]}'

    def test_timestamps_stay_strings(self):
        """Date-like scalars are not turned into date objects."""
        assert json.loads(yaml_to_json("since: 2024-01-01\n")) == {"since": "2024-01-01"}

    def test_non_string_keys_become_strings(self):
        assert json.loads(yaml_to_json("1: one\ntrue: yes\n")) == {"1": "one", "true": True}

    def test_colliding_keys_rejected(self):
        """Keys that collapse to the same JSON string are an error, not a merge."""
        with pytest.raises(ConfigParseError, match="duplicate mapping key 1"):
            yaml_to_json('1: a\n"1": b\n')

    def test_unicode_preserved(self):
        assert yaml_to_json("name: déploiement\n") == '{"name":"déploiement"}'

    def test_malformed_yaml_raises(self):
        """Syntax errors raise ConfigParseError carrying the document and cause."""
        raw = "jobs: [unclosed\n"
        with pytest.raises(ConfigParseError) as exc_info:
            yaml_to_json(raw)

        err = exc_info.value
        assert err.config_format == "yaml"
        assert err.raw == raw
        assert isinstance(err.__cause__, yaml.YAMLError)

    def test_binary_value_rejected(self):
        """Values JSON cannot represent are rejected, not coerced."""
        with pytest.raises(ConfigParseError, match="bytes"):
            yaml_to_json("blob: !!binary aGVsbG8=\n")

    def test_infinity_rejected(self):
        with pytest.raises(ConfigParseError):
            yaml_to_json("limit: .inf\n")


class TestJsonConversions:
    """Tests for json_to_json and json_to_yaml."""

    def test_json_reencoded_canonically(self):
        assert json_to_json('{ "b": 1,\n  "a": {"y": 2, "x": 1} }') == '{"a":{"x":1,"y":2},"b":1}'

    def test_invalid_json_raises(self):
        with pytest.raises(ConfigParseError) as exc_info:
            json_to_json('{"jobs": [}')
        assert exc_info.value.config_format == "json"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_nan_rejected(self):
        with pytest.raises(ConfigParseError):
            json_to_json('{"threshold": NaN}')

    def test_json_to_yaml(self):
        assert json_to_yaml('{"jobs":[]}') == "jobs: []\n"

    def test_json_to_yaml_invalid(self):
        with pytest.raises(ConfigParseError):
            json_to_yaml("not json")

    def test_yaml_json_round_trip_preserves_structure(self):
        """JSON -> YAML -> JSON keeps keys and scalar values."""
        original = json_to_json(yaml_to_json(PIPELINE_YAML))
        assert yaml_to_json(json_to_yaml(original)) == original
