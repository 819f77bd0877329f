"""Tests for document loading and saved sessions."""

import json

import pytest
from datatreediff import (
    ArrayDiff,
    ArrayDiffDesc,
    Config,
    ConfigError,
    DataTreeDiffEngine,
    DiffCollection,
    InputError,
    KeyDiff,
    MalformedDocumentError,
    OutputError,
    SavedContext,
    TypeDiff,
    ValueDiff,
    WorkingContext,
    WorkingFile,
    load_config,
    read_document,
    read_saved_context,
    write_saved_context,
)


def make_context(**config) -> WorkingContext:
    return WorkingContext(WorkingFile("a.json"), WorkingFile("b.json"), Config(**config))


class TestReadDocument:
    """Test loading JSON and YAML documents."""

    def test_json(self, tmp_path):
        path = tmp_path / "doc.json"
        path.write_text('{"a": [1, 2], "b": null}', encoding="utf-8")

        assert read_document(path) == {"a": [1, 2], "b": None}

    def test_yaml(self, tmp_path):
        path = tmp_path / "doc.yaml"
        path.write_text("a:\n  - 1\n  - 2\nb: ~\n", encoding="utf-8")

        assert read_document(path) == {"a": [1, 2], "b": None}

    def test_missing_file_is_input_error(self, tmp_path):
        """Test an unreadable source is an InputError, not a parse error."""
        with pytest.raises(InputError) as exc_info:
            read_document(tmp_path / "missing.json")
        assert not isinstance(exc_info.value, MalformedDocumentError)
        assert exc_info.value.path.endswith("missing.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"a": ', encoding="utf-8")

        with pytest.raises(MalformedDocumentError) as exc_info:
            read_document(path)
        assert exc_info.value.reason

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("a: [1, 2\n", encoding="utf-8")

        with pytest.raises(MalformedDocumentError):
            read_document(path)

    def test_yaml_dates_stay_strings(self, tmp_path):
        """Test unquoted dates load as text, not as date objects."""
        path = tmp_path / "doc.yaml"
        path.write_text("d: 2020-01-01\nts: 2020-01-01T10:00:00Z\n", encoding="utf-8")

        assert read_document(path) == {"d": "2020-01-01", "ts": "2020-01-01T10:00:00Z"}

    def test_yaml_binary_is_rejected(self, tmp_path):
        path = tmp_path / "doc.yaml"
        path.write_text("blob: !!binary aGVsbG8=\n", encoding="utf-8")

        with pytest.raises(MalformedDocumentError) as exc_info:
            read_document(path)
        assert "blob" in str(exc_info.value)

    def test_deeply_nested_json(self, tmp_path):
        """Test nesting beyond the parser's limit is a parse error."""
        path = tmp_path / "deep.json"
        path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")

        with pytest.raises(MalformedDocumentError):
            read_document(path)


class TestLoadConfig:
    """Test YAML run configuration files."""

    def test_load(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text(
            "array_same_order: true\n"
            "checks: [key, value]\n"
            "ignore_paths:\n"
            "  - $..updatedAt\n",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.array_same_order is True
        assert config.check_for_key_diffs and config.check_for_value_diffs
        assert not config.check_for_array_diffs
        assert config.ignore_paths == ("$..updatedAt",)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == Config()

    def test_quoted_bool_is_rejected(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text('array_same_order: "false"\n', encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "run.yaml"
        path.write_text("- key\n", encoding="utf-8")

        with pytest.raises(ConfigError):
            load_config(path)


class TestSavedContext:
    """Test persisting and reloading a run."""

    def setup_method(self):
        self.context = make_context(
            check_for_key_diffs=True,
            check_for_value_diffs=True,
            check_for_array_diffs=True,
        )
        self.collection = DiffCollection(
            key_diffs=[KeyDiff(key="y", has="a.json", misses="b.json")],
            type_diffs=None,
            value_diffs=[ValueDiff(key="v", value1="1", value2="null")],
            array_diffs=[
                ArrayDiff(key="arr", descriptor=ArrayDiffDesc.A_HAS, value="1"),
                ArrayDiff(key="arr", descriptor=ArrayDiffDesc.B_MISSES, value="1"),
            ],
        )

    def test_layout(self, tmp_path):
        """Test the on-disk layout of a saved session."""
        path = tmp_path / "session.json"
        write_saved_context(path, self.collection, self.context)

        data = json.loads(path.read_text(encoding="utf-8"))

        assert set(data) == {"key_diff", "type_diff", "value_diff", "array_diff", "config"}
        assert data["type_diff"] == []
        assert data["key_diff"] == [{"key": "y", "has": "a.json", "misses": "b.json"}]
        assert data["array_diff"][0] == {"key": "arr", "descriptor": "AHas", "value": "1"}
        assert data["config"] == {
            "check_for_key_diffs": True,
            "check_for_type_diffs": False,
            "check_for_value_diffs": True,
            "check_for_array_diffs": True,
            "file_a": "a.json",
            "file_b": "b.json",
            "array_same_order": False,
        }

    def test_round_trip(self, tmp_path):
        path = tmp_path / "session.json"
        write_saved_context(path, self.collection, self.context)

        saved = read_saved_context(path)

        assert saved.to_collection() == self.collection
        assert saved.config.to_context() == self.context

    def test_reads_compact_files(self, tmp_path):
        """Test sessions written without indentation load too."""
        path = tmp_path / "session.json"
        saved = SavedContext.from_collection(self.collection, self.context)
        path.write_text(json.dumps(saved.to_dict(), separators=(",", ":")), encoding="utf-8")

        assert read_saved_context(path).to_collection() == self.collection

    def test_type_diffs_round_trip(self, tmp_path):
        context = make_context(check_for_type_diffs=True)
        collection = DiffCollection(type_diffs=[TypeDiff(key="v", type1="string", type2="number")])
        path = tmp_path / "session.json"

        write_saved_context(path, collection, context)

        assert read_saved_context(path).to_collection() == collection

    def test_not_a_session(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text('{"key_diff": []}', encoding="utf-8")

        with pytest.raises(MalformedDocumentError):
            read_saved_context(path)

    def test_deeply_nested_session(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")

        with pytest.raises(MalformedDocumentError):
            read_saved_context(path)

    def test_bad_descriptor(self, tmp_path):
        path = tmp_path / "session.json"
        saved = SavedContext.from_collection(self.collection, self.context).to_dict()
        saved["array_diff"][0]["descriptor"] = "CHas"
        path.write_text(json.dumps(saved), encoding="utf-8")

        with pytest.raises(MalformedDocumentError):
            read_saved_context(path)

    def test_write_failure_is_output_error(self, tmp_path):
        path = tmp_path / "no" / "such" / "dir" / "session.json"

        with pytest.raises(OutputError):
            write_saved_context(path, self.collection, self.context)


class TestCompareFiles:
    """Test comparing documents straight from disk."""

    def test_compare_json_with_yaml(self, tmp_path):
        path_a = tmp_path / "a.json"
        path_b = tmp_path / "b.yaml"
        path_a.write_text('{"x": 1, "y": [1, 2]}', encoding="utf-8")
        path_b.write_text("x: 2\ny: [2, 1]\n", encoding="utf-8")

        config = Config(check_for_value_diffs=True, check_for_array_diffs=True)
        collection, context = DataTreeDiffEngine.compare_files(path_a, path_b, config)

        assert context.file_a.name == str(path_a)
        assert context.file_b.name == str(path_b)
        assert collection.value_diffs == [ValueDiff(key="x", value1="1", value2="2")]
        assert collection.array_diffs == []
        assert collection.key_diffs is None

    def test_missing_second_file(self, tmp_path):
        path_a = tmp_path / "a.json"
        path_a.write_text("{}", encoding="utf-8")

        with pytest.raises(InputError):
            DataTreeDiffEngine.compare_files(path_a, tmp_path / "b.json")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
