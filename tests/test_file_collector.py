"""Tests for FileCollector"""

import pytest

from sheafy.domain.errors import ConfigError
from sheafy.infrastructure.file_collector import FileCollector, file_extension
from sheafy.infrastructure.filestore.memory import MemoryFileStore
from sheafy.infrastructure.pattern_matcher import PatternMatcher


def _paths(collected):
    return [item.relative_path for item in collected]


class TestTraversal:
    """Tests for traversal order and entry kinds"""

    def test_depth_first_bytewise_order(self):
        """Test entries are visited depth-first in byte order of names"""
        store = MemoryFileStore(
            {
                "b.txt": "b",
                "a/z.txt": "z",
                "a.txt": "a",
                "A.txt": "A",
                "a/b/c.txt": "c",
            }
        )
        collector = FileCollector(store)

        collected = collector.collect(PatternMatcher())

        assert _paths(collected) == ["A.txt", "a/b/c.txt", "a/z.txt", "a.txt", "b.txt"]

    def test_collection_is_deterministic(self):
        """Test two runs over the same tree give the same order"""
        files = {f"dir{i % 3}/file{i}.py": str(i) for i in range(20)}
        collector = FileCollector(MemoryFileStore(files))

        first = collector.collect(PatternMatcher())
        second = collector.collect(PatternMatcher())

        assert first == second
        assert len(first) == 20

    def test_symlinks_are_not_followed(self):
        """Test symbolic links are skipped"""
        store = MemoryFileStore({"real.txt": "x"}, symlinks=["link.txt", "sub/loop"])
        collector = FileCollector(store)

        assert _paths(collector.collect(PatternMatcher())) == ["real.txt"]

    def test_hidden_entries_skipped_by_default(self):
        """Test dot-files and dot-directories are skipped"""
        store = MemoryFileStore({".env": "SECRET=1", ".cache/x.txt": "x", "main.py": ""})
        collector = FileCollector(store)

        assert _paths(collector.collect(PatternMatcher())) == ["main.py"]

    def test_include_hidden_never_includes_git_dir(self):
        """Test include_hidden collects dot-files but not .git"""
        store = MemoryFileStore({".env": "SECRET=1", ".git/config": "[core]", "main.py": ""})
        collector = FileCollector(store, include_hidden=True)

        assert _paths(collector.collect(PatternMatcher())) == [".env", "main.py"]

    def test_exclude_paths(self):
        """Test explicitly excluded paths are never collected"""
        store = MemoryFileStore({"project_bundle.md": "old", "sheafy.yml": "", "a.md": ""})
        collector = FileCollector(store, exclude_paths=["project_bundle.md", "sheafy.yml"])

        assert _paths(collector.collect(PatternMatcher())) == ["a.md"]

    def test_absolute_path_comes_from_store(self):
        """Test collected files carry the store's absolute location"""
        collector = FileCollector(MemoryFileStore({"src/a.py": ""}))

        collected = collector.collect(PatternMatcher())

        assert collected[0].absolute_path == "memory://src/a.py"


class TestSelection:
    """Tests for ignore rules and extension filters"""

    def test_extension_filter(self):
        """Test files outside the filter set are excluded"""
        store = MemoryFileStore({"main.rs": "", "README.md": "", "notes.txt": ""})
        collector = FileCollector(store)

        collected = collector.collect(PatternMatcher(), extension_filters={"rs", "md"})

        assert _paths(collected) == ["README.md", "main.rs"]

    def test_extension_filter_is_case_sensitive(self):
        """Test extension comparison is exact"""
        store = MemoryFileStore({"LIB.RS": "", "lib.rs": ""})
        collector = FileCollector(store)

        assert _paths(collector.collect(PatternMatcher(), ["rs"])) == ["lib.rs"]

    def test_empty_filter_means_all(self):
        """Test empty filter list selects every extension"""
        store = MemoryFileStore({"a.py": "", "b.txt": ""})
        collector = FileCollector(store)

        assert _paths(collector.collect(PatternMatcher(), [])) == ["a.py", "b.txt"]

    def test_configured_patterns(self):
        """Test configured ignore patterns exclude files"""
        store = MemoryFileStore(
            {"main.py": "", "utils.py": "", "data.csv": "", "temp.tmp": ""}
        )
        matcher = PatternMatcher.compile(["*.csv", "*.tmp"])

        assert _paths(FileCollector(store).collect(matcher)) == ["main.py", "utils.py"]

    def test_negation_inside_ignored_directory(self):
        """Test a negated child of an excluded directory is collected"""
        store = MemoryFileStore(
            {"logs/app.log": "", "logs/important.log": "", "config.toml": ""}
        )
        matcher = PatternMatcher.compile(["logs/*", "!logs/important.log", "config.toml"])

        assert _paths(FileCollector(store).collect(matcher)) == ["logs/important.log"]

    def test_last_rule_wins_with_directory_rule(self):
        """Test build/ plus !build/keep.txt keeps only keep.txt"""
        store = MemoryFileStore({"build/tmp.o": "", "build/keep.txt": "", "src/a.rs": ""})
        matcher = PatternMatcher.compile(["build/", "!build/keep.txt"])

        assert _paths(FileCollector(store).collect(matcher)) == ["build/keep.txt", "src/a.rs"]

    def test_excluded_directory_is_never_listed(self):
        """Test an excluded directory's subtree is not traversed"""
        files = {f"node_modules/pkg{i}/index.js": "" for i in range(1000)}
        files["src/app.js"] = ""
        store = MemoryFileStore(files)
        matcher = PatternMatcher.compile(["node_modules/"])

        collected = FileCollector(store).collect(matcher)

        assert _paths(collected) == ["src/app.js"]
        assert "node_modules" not in store.listed
        assert store.listed == ["", "src"]


class TestGitignore:
    """Tests for .gitignore handling"""

    def test_root_gitignore_is_respected(self):
        """Test rules from the root .gitignore exclude files"""
        store = MemoryFileStore({".gitignore": "*.log\ntarget/\n", "a.rs": "", "b.log": "", "target/c.o": ""})
        collector = FileCollector(store, use_gitignore=True)

        assert _paths(collector.collect(PatternMatcher())) == ["a.rs"]
        assert "target" not in store.listed

    def test_gitignore_disabled(self):
        """Test .gitignore is ignored when disabled"""
        store = MemoryFileStore({".gitignore": "*.log\n", "a.rs": "", "b.log": ""})
        collector = FileCollector(store, use_gitignore=False)

        assert _paths(collector.collect(PatternMatcher())) == ["a.rs", "b.log"]

    def test_nested_gitignore_applies_to_its_directory(self):
        """Test nested .gitignore rules are anchored at their directory"""
        store = MemoryFileStore(
            {"sub/.gitignore": "/local.txt\n", "sub/local.txt": "", "local.txt": "", "sub/keep.txt": ""}
        )
        collector = FileCollector(store)

        assert _paths(collector.collect(PatternMatcher())) == ["local.txt", "sub/keep.txt"]

    def test_nested_gitignore_does_not_leak_to_siblings(self):
        """Test a directory's rules do not apply to its siblings"""
        store = MemoryFileStore({"a/.gitignore": "*.txt\n", "a/x.txt": "", "b/x.txt": ""})
        collector = FileCollector(store)

        assert _paths(collector.collect(PatternMatcher())) == ["b/x.txt"]

    def test_configured_patterns_override_gitignore(self):
        """Test configured negation re-includes a .gitignore exclusion"""
        store = MemoryFileStore({".gitignore": "*.log\n", "debug.log": "", "important.log": ""})
        matcher = PatternMatcher.compile(["!important.log"])

        assert _paths(FileCollector(store).collect(matcher)) == ["important.log"]

    def test_malformed_gitignore_pattern(self):
        """Test malformed .gitignore pattern is a configuration error"""
        store = MemoryFileStore({".gitignore": "[oops\n", "a.txt": ""})

        with pytest.raises(ConfigError, match=".gitignore:1"):
            FileCollector(store).collect(PatternMatcher())


class TestReadEntries:
    """Tests for reading collected files"""

    def test_reads_content_unchanged(self):
        """Test content is decoded without newline translation"""
        store = MemoryFileStore({"win.txt": b"line1\r\nline2\r\n", "plain.txt": "no newline"})
        collector = FileCollector(store)

        result = collector.collect_entries(PatternMatcher())

        assert [e.content for e in result.entries] == ["no newline", "line1\r\nline2\r\n"]
        assert not result.has_warnings

    def test_non_utf8_file_is_skipped_with_warning(self):
        """Test invalid UTF-8 files become warnings, not entries"""
        store = MemoryFileStore(
            {"invalid_utf8.bin": bytes([0x48, 0x65, 0x6C, 0x6C, 0x80, 0x6F]), "valid.txt": "Valid text"}
        )
        collector = FileCollector(store)

        result = collector.collect_entries(PatternMatcher())

        assert [e.path for e in result.entries] == ["valid.txt"]
        assert len(result.warnings) == 1
        assert result.warnings[0].path == "invalid_utf8.bin"
        assert "UTF-8" in result.warnings[0].reason
        assert "invalid_utf8.bin" in str(result.warnings[0])

    def test_colon_in_file_name_is_collected(self):
        """Test names such as a:b.txt are ordinary relative paths"""
        store = MemoryFileStore({"a:b.txt": "x", "c.txt": "y", "d/e:f.md": "z"})
        collector = FileCollector(store)

        result = collector.collect_entries(PatternMatcher())

        assert [e.path for e in result.entries] == ["a:b.txt", "c.txt", "d/e:f.md"]
        assert not result.has_warnings

    def test_unreadable_file_is_skipped_with_warning(self):
        """Test read failures become warnings"""
        store = MemoryFileStore({"a.txt": "a"})
        collector = FileCollector(store)
        collected = collector.collect(PatternMatcher())
        del store.files["a.txt"]

        result = collector.read_entries(collected)

        assert result.entries == []
        assert result.warnings[0].path == "a.txt"


class TestFileExtension:
    """Tests for file_extension helper"""

    @pytest.mark.parametrize(
        "name, expected",
        [("main.rs", "rs"), ("archive.tar.gz", "gz"), ("Makefile", ""), (".bashrc", "")],
    )
    def test_file_extension(self, name, expected):
        """Test extension extraction"""
        assert file_extension(name) == expected
