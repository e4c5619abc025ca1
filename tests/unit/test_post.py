"""Tests for esamirror.core.post."""

from pathlib import Path

import pytest

from esamirror.core.errors import (
    AlreadyExistsError,
    FormatInvalidError,
    MetaInvalidError,
    NameInvalidError,
    NotExistsError,
    PostWriteError,
)
from esamirror.core.models import Meta
from esamirror.core.names import PostName
from esamirror.core.post import Post


def _record(**kwargs) -> dict:
    defaults = {
        "number": 42,
        "name": "runbook",
        "category": "infra",
        "tags": ["ops"],
        "body_md": "# Runbook\n",
        "wip": False,
        "url": "https://team.esa.io/posts/42",
        "created_by": {"screen_name": "me"},
    }
    defaults.update(kwargs)
    return defaults


class TestNew:
    def test_defaults(self, tmp_path: Path):
        post = Post.new("infra/runbook", tmp_path)
        assert post.name == PostName.parse("infra/runbook")
        assert post.number is None
        assert post.meta == Meta(tags=[], wip=True, number=None)
        assert post.body is None
        assert post.path == tmp_path / "infra" / "runbook.md"

    def test_does_not_write(self, tmp_path: Path):
        post = Post.new("infra/runbook", tmp_path)
        assert not post.path.exists()

    def test_invalid_name(self, tmp_path: Path):
        with pytest.raises(NameInvalidError):
            Post.new("runbook", tmp_path)

    def test_already_exists(self, tmp_path: Path):
        Post.new("infra/runbook", tmp_path).save()
        with pytest.raises(AlreadyExistsError):
            Post.new("infra/runbook", tmp_path)


class TestSave:
    def test_creates_parent_dirs(self, tmp_path: Path):
        path = Post.new("a/b/c/doc", tmp_path).save()
        assert path == tmp_path / "a" / "b" / "c" / "doc.md"
        assert path.read_text(encoding="utf-8") == "+++\ntags = []\nwip = true\n+++\n\n"

    def test_overwrites(self, tmp_path: Path):
        post = Post.new("infra/runbook", tmp_path)
        post.body = "a much longer first version of the body\n"
        post.save()
        post.body = "short\n"
        post.save()
        assert post.path.read_text(encoding="utf-8").endswith("\n\nshort\n")

    def test_write_failure(self, tmp_path: Path):
        # A regular file where the category directory should be
        (tmp_path / "infra").write_text("not a dir", encoding="utf-8")
        post = Post.new("infra/runbook", tmp_path)
        with pytest.raises(PostWriteError):
            post.save()


class TestLoad:
    def test_round_trip(self, tmp_path: Path):
        post = Post(
            PostName.parse("infra/runbook"),
            tmp_path,
            meta=Meta(tags=["ops", "db"], wip=False, number=7),
            body="Steps:\n1. restart\n",
        )
        post.save()

        loaded = Post.load("infra/runbook", tmp_path)
        assert loaded.meta == post.meta
        assert loaded.body == post.body
        assert loaded.number == 7

    def test_accepts_md_suffix(self, tmp_path: Path):
        Post.new("infra/runbook", tmp_path).save()
        assert Post.load("infra/runbook.md", tmp_path).name == PostName.parse("infra/runbook")

    def test_preserves_crlf_body(self, tmp_path: Path):
        path = tmp_path / "infra" / "runbook.md"
        path.parent.mkdir()
        path.write_bytes(b"+++\r\ntags = []\r\nwip = true\r\n+++\r\n\r\nline\r\n")
        assert Post.load("infra/runbook", tmp_path).body == "line\r\n"

    def test_not_exists(self, tmp_path: Path):
        with pytest.raises(NotExistsError):
            Post.load("infra/missing", tmp_path)

    def test_format_invalid(self, tmp_path: Path):
        path = tmp_path / "infra" / "runbook.md"
        path.parent.mkdir()
        path.write_text("just text\n", encoding="utf-8")
        with pytest.raises(FormatInvalidError):
            Post.load("infra/runbook", tmp_path)

    def test_meta_invalid(self, tmp_path: Path):
        path = tmp_path / "infra" / "runbook.md"
        path.parent.mkdir()
        path.write_text("+++\ntags = []\n+++\n\nbody", encoding="utf-8")
        with pytest.raises(MetaInvalidError):
            Post.load("infra/runbook", tmp_path)


class TestAssignNumber:
    def test_assigns(self, tmp_path: Path):
        post = Post.new("infra/runbook", tmp_path)
        post.assign_number(5)
        assert post.number == 5

    def test_none_keeps_existing(self, tmp_path: Path):
        post = Post.new("infra/runbook", tmp_path)
        post.assign_number(5)
        post.assign_number(None)
        assert post.number == 5


class TestRemoteMapping:
    def test_from_remote(self, tmp_path: Path):
        post = Post.from_remote("infra/runbook", _record(), tmp_path)
        assert post.meta == Meta(tags=["ops"], wip=False, number=42)
        assert post.body == "# Runbook\n"

    def test_from_remote_missing_fields(self, tmp_path: Path):
        post = Post.from_remote("infra/runbook", {"name": "runbook"}, tmp_path)
        assert post.meta == Meta(tags=[], wip=False, number=None)
        assert post.body is None

    def test_from_remote_bad_tags(self, tmp_path: Path):
        with pytest.raises(MetaInvalidError):
            Post.from_remote("infra/runbook", _record(tags=[1, 2]), tmp_path)

    def test_to_remote_payload(self, tmp_path: Path):
        post = Post(
            PostName.parse("infra/db/runbook"),
            tmp_path,
            meta=Meta(tags=["ops"], wip=False, number=42),
            body="text",
        )
        assert post.to_remote_payload() == {
            "category": "infra/db",
            "name": "runbook",
            "body_md": "text",
            "tags": ["ops"],
            "wip": False,
        }

    def test_payload_never_has_number(self, tmp_path: Path):
        post = Post.from_remote("infra/runbook", _record(), tmp_path)
        assert "number" not in post.to_remote_payload()

    def test_payload_unloaded_body(self, tmp_path: Path):
        assert Post.new("infra/runbook", tmp_path).to_remote_payload()["body_md"] == ""
