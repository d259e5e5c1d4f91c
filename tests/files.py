import os
import stat

from pytest import raises

from staticflow.files import FileRecord, clean, read_tree, write_tree

from _util import snapshot


class FileRecord_:
    def mode_defaults_to_None(self):
        assert FileRecord("a.txt", b"").mode is None

    def is_a_tuple(self):
        path, content, mode = FileRecord("a.txt", b"hi", 0o644)
        assert (path, content, mode) == ("a.txt", b"hi", 0o644)


class clean_:
    def removes_directory_trees(self, tmp_path):
        out = tmp_path / "out"
        (out / "js").mkdir(parents=True)
        (out / "js" / "app.js").write_text("x")
        clean(str(out))
        assert not out.exists()

    def accepts_path_objects(self, tmp_path):
        out = tmp_path / "out"
        out.mkdir()
        clean(out)
        assert not out.exists()

    def removes_plain_files(self, tmp_path):
        target = tmp_path / "out"
        target.write_text("not a dir")
        clean(target)
        assert not target.exists()

    def missing_paths_are_fine(self, tmp_path):
        clean(tmp_path / "nope")
        assert not (tmp_path / "nope").exists()

    def leaves_siblings_alone(self, tmp_path):
        (tmp_path / "out").mkdir()
        (tmp_path / "src").mkdir()
        clean(tmp_path / "out")
        assert (tmp_path / "src").is_dir()

    def refuses_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with raises(ValueError):
            clean(".")
        assert tmp_path.is_dir()

    def refuses_filesystem_root(self):
        with raises(ValueError):
            clean(os.path.abspath(os.sep))


class read_tree_:
    def reads_every_file_sorted(self, site):
        records = read_tree("src")
        assert [x.path for x in records] == [
            "css/site.css",
            "img/logo.png",
            "index.html",
            "js/app.js",
        ]

    def content_is_bytes(self, site):
        records = {x.path: x for x in read_tree("src")}
        assert records["js/app.js"].content == b'console.log("hello");\n'
        assert records["img/logo.png"].content.startswith(b"\x89PNG")

    def records_permission_bits(self, site):
        script = site / "src" / "js" / "app.js"
        os.chmod(str(script), 0o755)
        records = {x.path: x for x in read_tree("src")}
        assert records["js/app.js"].mode == 0o755

    def patterns_limit_what_is_read(self, site):
        records = read_tree("src", ("**/*.css", "*.html"))
        assert [x.path for x in records] == ["css/site.css", "index.html"]

    def overlapping_patterns_do_not_duplicate(self, site):
        records = read_tree("src", ("**/*", "**/*.js"))
        assert len(records) == 4

    def negated_patterns_exclude(self, site):
        records = read_tree("src", ("**/*", "!**/*.png"))
        assert "img/logo.png" not in [x.path for x in records]
        assert len(records) == 3

    def negated_directory_patterns_exclude_subtrees(self, site):
        records = read_tree("src", ("**/*", "!img/**"))
        assert [x.path for x in records] == [
            "css/site.css",
            "index.html",
            "js/app.js",
        ]

    def dotfiles_are_skipped_by_default(self, site):
        (site / "src" / ".htaccess").write_text("Deny from all\n")
        (site / "src" / ".cache").mkdir()
        (site / "src" / ".cache" / "x.js").write_text("")
        paths = [x.path for x in read_tree("src")]
        assert ".htaccess" not in paths
        assert ".cache/x.js" not in paths
        assert len(paths) == 4

    def dotfiles_may_be_included(self, site):
        (site / "src" / ".htaccess").write_text("Deny from all\n")
        (site / "src" / ".cache").mkdir()
        (site / "src" / ".cache" / "x.js").write_text("")
        paths = [x.path for x in read_tree("src", dotfiles=True)]
        assert ".htaccess" in paths
        assert ".cache/x.js" in paths

    def dots_inside_names_are_not_hidden(self, tmp_path):
        (tmp_path / "app.min.js").write_text("")
        assert [x.path for x in read_tree(tmp_path)] == ["app.min.js"]

    def empty_source_gives_no_records(self, tmp_path):
        (tmp_path / "src").mkdir()
        assert read_tree(tmp_path / "src") == []

    def missing_source_raises_FileNotFoundError(self, tmp_path):
        with raises(FileNotFoundError):
            read_tree(tmp_path / "nope")

    def file_as_source_raises_FileNotFoundError(self, tmp_path):
        (tmp_path / "src").write_text("")
        with raises(FileNotFoundError):
            read_tree(tmp_path / "src")


class write_tree_:
    def creates_parent_directories(self, tmp_path):
        write_tree([FileRecord("a/b/c.txt", b"deep")], tmp_path / "out")
        assert (tmp_path / "out" / "a" / "b" / "c.txt").read_bytes() == b"deep"

    def returns_written_paths(self, tmp_path):
        written = write_tree(
            [FileRecord("x.txt", b"1"), FileRecord("y/z.txt", b"2")],
            tmp_path / "out",
        )
        assert written == [
            tmp_path / "out" / "x.txt",
            tmp_path / "out" / "y" / "z.txt",
        ]

    def applies_modes(self, tmp_path):
        write_tree([FileRecord("run.sh", b"#!/bin/sh\n", 0o700)], tmp_path)
        mode = stat.S_IMODE((tmp_path / "run.sh").stat().st_mode)
        assert mode == 0o700

    def overwrites_existing_files(self, tmp_path):
        (tmp_path / "x.txt").write_text("old")
        write_tree([FileRecord("x.txt", b"new")], tmp_path)
        assert (tmp_path / "x.txt").read_bytes() == b"new"

    def round_trips_a_tree(self, site):
        write_tree(read_tree("src"), "out")
        assert snapshot(site / "out") == snapshot(site / "src")
