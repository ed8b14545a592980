"""
Tests for file dispatch, discovery and batch processing.

Run with: pytest tests/test_dispatcher.py -v
"""

import pytest

from i18n_auto.dispatcher import discover_files, file_kind_for, process_batch, process_file
from i18n_auto.keygen import derive_key
from i18n_auto.models import FileKind
from i18n_auto.utils import BOM


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestFileKind:
    """Tests for file_kind_for."""

    @pytest.mark.parametrize("name,kind", [
        ("a.js", FileKind.SCRIPT),
        ("a.jsx", FileKind.JSX),
        ("a.ts", FileKind.TYPESCRIPT),
        ("a.tsx", FileKind.TSX),
        ("a.vue", FileKind.COMPONENT),
        ("A.VUE", FileKind.COMPONENT),
    ])
    def test_supported(self, name, kind):
        assert file_kind_for(name) is kind

    @pytest.mark.parametrize("name", ["a.py", "a.css", "README"])
    def test_unsupported(self, name):
        assert file_kind_for(name) is None


class TestProcessFile:
    """Tests for process_file."""

    def test_rewrites_in_place(self, tmp_path, config, store):
        path = write(tmp_path / "src" / "a.js", "const a = '你好';\n")
        result = process_file(path, config, store)

        assert result.success
        assert result.changes == 1
        text = path.read_text(encoding="utf-8")
        assert text.startswith("import i18n from '@/i18n';\n")
        assert f"i18n.global.t('{derive_key('你好')}')" in text
        assert store.load() == {derive_key("你好"): "你好"}

    def test_second_run_leaves_file_alone(self, tmp_path, config, store):
        path = write(tmp_path / "a.js", "const a = '你好';\n")
        process_file(path, config, store)
        before = path.read_text(encoding="utf-8")

        result = process_file(path, config, store)
        assert result.success
        assert result.changes == 0
        assert path.read_text(encoding="utf-8") == before

    def test_missing_file(self, tmp_path, config, store):
        result = process_file(tmp_path / "nope.js", config, store)
        assert not result.success
        assert "not found" in result.errors[0]

    def test_excluded_extension(self, tmp_path, config, store):
        path = write(tmp_path / "data.json", '{"a": "你好"}')
        result = process_file(path, config, store)
        assert not result.success
        assert "excluded" in result.errors[0]

    def test_unsupported_extension(self, tmp_path, config, store):
        path = write(tmp_path / "a.py", "x = '你好'\n")
        result = process_file(path, config, store)
        assert not result.success
        assert "Unsupported" in result.errors[0]

    def test_parse_failure_leaves_file(self, tmp_path, config, store):
        source = "const a = '你好';\nconst = ;\n"
        path = write(tmp_path / "bad.js", source)
        result = process_file(path, config, store)
        assert not result.success
        assert path.read_text(encoding="utf-8") == source
        assert store.load() == {}

    def test_bom_preserved(self, tmp_path, config, store):
        path = write(tmp_path / "a.ts", BOM + "const a: string = '你好';\n")
        result = process_file(path, config, store)
        assert result.success
        assert path.read_text(encoding="utf-8").startswith(BOM + "import i18n")

    def test_vue_file(self, tmp_path, config, store):
        path = write(tmp_path / "Home.vue", "<template>\n  <h1>首页</h1>\n</template>\n")
        result = process_file(path, config, store)
        assert result.changes == 1
        assert f"<h1>{{{{ $t('{derive_key('首页')}') }}}}</h1>" in path.read_text(encoding="utf-8")

    def test_catalog_write_failure_fails_file(self, tmp_path, config, store):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "i18n").write_text("not a directory", encoding="utf-8")
        source = "const a = '你好';\n"
        path = write(tmp_path / "a.js", source)

        result = process_file(path, config, store)
        assert not result.success
        assert path.read_text(encoding="utf-8") == source


class TestDiscovery:
    """Tests for discover_files."""

    def test_skips_dependency_and_hidden_dirs(self, tmp_path, config):
        write(tmp_path / "src" / "a.js", "")
        write(tmp_path / "src" / "views" / "b.vue", "")
        write(tmp_path / "node_modules" / "lib" / "c.js", "")
        write(tmp_path / ".cache" / "d.js", "")
        write(tmp_path / "dist" / "e.js", "")
        write(tmp_path / "src" / "style.css", "")

        files = discover_files(tmp_path, config)
        assert [p.relative_to(tmp_path).as_posix() for p in files] == ["src/a.js", "src/views/b.vue"]

    def test_exclude_patterns(self, tmp_path, config):
        write(tmp_path / "src" / "a.js", "")
        write(tmp_path / "src" / "legacy" / "b.js", "")
        write(tmp_path / "src" / "c.spec.js", "")

        files = discover_files(tmp_path, config, ["legacy", ".spec."])
        assert [p.name for p in files] == ["a.js"]


class TestBatch:
    """Tests for process_batch."""

    def test_failure_does_not_stop_batch(self, tmp_path, config, store):
        good = write(tmp_path / "a.js", "const a = '你好';\n")
        bad = write(tmp_path / "b.js", "const = ;\n")
        other = write(tmp_path / "c.vue", "<template><p>世界</p></template>\n")
        seen = []

        report = process_batch(
            [good, bad, other], config, store,
            progress=lambda path, index, total: seen.append((path.name, index, total)),
        )

        assert seen == [("a.js", 0, 3), ("b.js", 1, 3), ("c.vue", 2, 3)]
        assert len(report.processed) == 2
        assert [o.path for o in report.failed] == [bad]
        assert report.total_changes == 2
        assert report.to_dict() == {
            "files": 3, "processed": 2, "changed": 2, "failed": 1, "total_changes": 2,
        }
        assert set(store.load()) == {derive_key("你好"), derive_key("世界")}

    def test_later_files_see_earlier_entries(self, tmp_path, config, store):
        first = write(tmp_path / "a.js", "const a = '相同';\n")
        second = write(tmp_path / "b.js", "const b = '相同';\n")
        report = process_batch([first, second], config, store)
        assert report.total_changes == 2
        assert store.load() == {derive_key("相同"): "相同"}
