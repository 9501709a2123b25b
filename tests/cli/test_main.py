"""Unit tests for the repotree CLI entry point."""

import json
from unittest.mock import patch

import pytest

from repotree.cli.main import build_exclusion_rules, load_tree, main, parse_tree_document
from repotree.exceptions import MalformedTreeError
from repotree.exclusion_rules.git_rules import GitIgnoreExclusionRules
from repotree.tree_model.tree_node import TreeNode


@pytest.fixture
def listing_file(tmp_path, sample_entries):
    """A saved API tree response for the sample repository."""
    path = tmp_path / "repo.json"
    path.write_text(json.dumps({"sha": "abc123", "tree": sample_entries, "truncated": False}))
    return path


def run_main(argv):
    """Run main() with the given arguments and return the exit code (0 if it returned normally)."""
    with patch("sys.argv", ["repotree"] + argv):
        try:
            main()
        except SystemExit as e:
            return e.code
    return 0


class TestParseTreeDocument:
    """Tests for the input document shapes."""

    def test_api_response(self, sample_entries, sample_tree):
        assert parse_tree_document({"tree": sample_entries}, "repo") == sample_tree

    def test_bare_listing(self, sample_entries, sample_tree):
        assert parse_tree_document(sample_entries, "repo") == sample_tree

    def test_nested_tree(self, sample_tree):
        data = {
            "name": "repo",
            "path": "",
            "type": "folder",
            "children": [{"name": "README.md", "path": "README.md", "type": "file", "size": 5}],
        }
        assert parse_tree_document(data, "ignored") == TreeNode.folder("repo", "", [sample_tree.children[1]])

    @pytest.mark.parametrize("data", [42, "tree", {"sha": "abc"}, None])
    def test_unsupported_shapes(self, data):
        with pytest.raises(MalformedTreeError, match="neither"):
            parse_tree_document(data, "repo")


class TestLoadTree:
    """Tests for reading input files."""

    def test_default_name_is_file_stem(self, listing_file):
        assert load_tree(str(listing_file)).name == "repo"

    def test_explicit_name(self, listing_file):
        assert load_tree(str(listing_file), "my-repo").name == "my-repo"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(MalformedTreeError, match="not valid JSON"):
            load_tree(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_tree(str(tmp_path / "missing.json"))

    def test_stdin(self, sample_entries):
        with patch("sys.stdin") as mock_stdin:
            mock_stdin.read.return_value = json.dumps(sample_entries)
            tree = load_tree("-")
        assert tree.name == "repo"
        assert len(tree.children) == 2


def test_build_exclusion_rules():
    git_rules = GitIgnoreExclusionRules()
    assert not build_exclusion_rules(git_rules, None).has_rules()
    rules = build_exclusion_rules(git_rules, "10")
    assert rules.exclude(TreeNode.file("big", "big", size=11))


class TestMain:
    """Tests for main()."""

    def test_text_output_to_file(self, listing_file, tmp_path):
        out = tmp_path / "out.txt"
        assert run_main(["-o", str(out), str(listing_file)]) == 0
        assert out.read_text(encoding="utf-8") == "repo\n├── src\n│   ├── a.ts\n│   └── b.ts\n└── README.md\n"

    def test_text_output_to_stdout(self, listing_file, capfd):
        assert run_main(["-n", "demo", str(listing_file)]) == 0
        assert capfd.readouterr().out.splitlines()[0] == "demo"

    def test_json_output(self, listing_file, tmp_path):
        out = tmp_path / "out.json"
        assert run_main(["-f", "json", "--indent", "0", "-o", str(out), str(listing_file)]) == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert [child["name"] for child in data["children"]] == ["src", "README.md"]

    def test_output_directory_uses_export_filename(self, listing_file, tmp_path):
        out_dir = tmp_path / "exports"
        out_dir.mkdir()
        assert run_main(["-f", "markdown", "-o", str(out_dir), str(listing_file)]) == 0
        assert (out_dir / "repo-structure.md").read_text(encoding="utf-8").startswith("# repo\n")

    def test_filtering(self, listing_file, tmp_path):
        out = tmp_path / "out.txt"
        assert run_main(["-s", "a.ts", "-o", str(out), str(listing_file)]) == 0
        assert out.read_text(encoding="utf-8") == "repo\n└── src\n    └── a.ts\n"

    def test_exclusion_options(self, listing_file, tmp_path):
        out = tmp_path / "out.txt"
        assert run_main(["-i", "*.md", "--max-size", "15", "-o", str(out), str(listing_file)]) == 0
        assert out.read_text(encoding="utf-8") == "repo\n└── src\n    └── a.ts\n"

    def test_no_match_warns(self, listing_file, tmp_path, capfd):
        out = tmp_path / "out.txt"
        assert run_main(["-s", "zzz", "-o", str(out), str(listing_file)]) == 0
        assert "Warning: No nodes matched" in capfd.readouterr().err
        assert out.read_text() == ""

    def test_chunked_output(self, listing_file, tmp_path):
        out = tmp_path / "chunks.json"
        assert run_main(["--chunk", "1", "-o", str(out), str(listing_file)]) == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert sorted(data["chunks"]) == ["src_0", "src_1"]
        assert data["rootTree"]["children"][0]["children"] == []

    def test_stats_to_stderr(self, listing_file, tmp_path, capfd):
        assert run_main(["-S", "stderr", "-s", "a.ts", "-o", str(tmp_path / "out.txt"), str(listing_file)]) == 0
        err = capfd.readouterr().err
        # Statistics describe the unfiltered input
        assert "Files: 3" in err
        assert "Total size: 35 bytes" in err

    def test_stats_to_stdout(self, listing_file, tmp_path):
        out = tmp_path / "out.txt"
        assert run_main(["-S", "stdout", "-o", str(out), str(listing_file)]) == 0
        content = out.read_text(encoding="utf-8")
        assert content.endswith("File types: ts (2), md (1)\n")
        assert "└── README.md\n\nFolders: 2\n" in content

    @pytest.mark.parametrize(
        "argv",
        [
            ["--chunk", "0"],
            ["--chunk", "5", "-f", "text"],
            ["--indent", "-1"],
            ["--max-size", "lots"],
        ],
    )
    def test_invalid_values_exit_1(self, listing_file, capfd, argv):
        assert run_main(argv + [str(listing_file)]) == 1
        assert capfd.readouterr().err.startswith("Error: ")

    def test_malformed_input_exits_1(self, tmp_path, capfd):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"path": "a", "type": "blob"}, {"path": "a", "type": "blob"}]))
        assert run_main([str(path)]) == 1
        assert "Duplicate entry in listing: a" in capfd.readouterr().err

    def test_missing_input_exits_1(self, tmp_path, capfd):
        assert run_main([str(tmp_path / "missing.json")]) == 1
        assert "Error:" in capfd.readouterr().err

    def test_missing_rules_file_exits_1(self, listing_file, tmp_path, capfd):
        assert run_main(["-e", str(tmp_path / "nope"), str(listing_file)]) == 1
        assert "Rules file not found" in capfd.readouterr().err

    def test_syntax_error_exits_2(self, listing_file):
        assert run_main(["--format", "xml", str(listing_file)]) == 2

    def test_broken_pipe_exits_141(self, listing_file):
        with patch("repotree.cli.main.SafeWriter.write", side_effect=BrokenPipeError()):
            assert run_main([str(listing_file)]) == 141


class TestDeepInput:
    """Listings and documents deeper than the recursion limit."""

    @pytest.fixture
    def deep_listing_file(self, tmp_path):
        path = tmp_path / "deep.json"
        path.write_text(json.dumps([{"path": "/".join(["d"] * 1500 + ["leaf.py"]), "type": "blob", "size": 7}]))
        return path

    @pytest.mark.parametrize("fmt", ["text", "json", "markdown"])
    def test_every_format(self, deep_listing_file, tmp_path, fmt):
        out = tmp_path / "out"
        assert run_main(["-f", fmt, "--indent", "0", "-s", "leaf", "-o", str(out), str(deep_listing_file)]) == 0
        assert "leaf.py" in out.read_text(encoding="utf-8")

    def test_chunked(self, deep_listing_file, tmp_path):
        out = tmp_path / "chunks.json"
        assert run_main(["--chunk", "10", "--indent", "0", "-o", str(out), str(deep_listing_file)]) == 0
        assert out.read_text(encoding="utf-8").startswith('{"rootTree":{"name":"deep"')

    def test_stats(self, deep_listing_file, tmp_path, capfd):
        assert run_main(["-S", "stderr", "-o", str(tmp_path / "out.txt"), str(deep_listing_file)]) == 0
        assert "Folders: 1501" in capfd.readouterr().err

    def test_nesting_beyond_json_decoder_exits_1(self, tmp_path, capfd):
        path = tmp_path / "nested.json"
        path.write_text("[" * 100000 + "]" * 100000)
        assert run_main([str(path)]) == 1
        assert capfd.readouterr().err.startswith("Error: ")
