"""Tests for applying confirmed fixes to the workspace."""

import os

import pytest

from codemedic_core.applier import FixApplier, build_fix_summary
from codemedic_core.errors import ApplyError, InvalidFixPayloadError, NoWorkspaceError
from codemedic_core.models import FixSet, ProposedFix
from codemedic_core.workspace import LocalWorkspace


def _fix(path, code="console.log(1)", issues=("x",)):
    return ProposedFix(path=path, issues=list(issues), fixed_code=code)


class TestBuildFixSummary:
    def test_one_line_per_file_with_basename(self):
        fix_set = FixSet(files=[_fix("src/a.js", issues=["unused var"]), _fix("b.css", issues=["typo"])])
        assert build_fix_summary(fix_set) == "• a.js – unused var\n• b.css – typo"

    def test_at_most_two_issues(self):
        fix_set = FixSet(files=[_fix("a.js", issues=["one", "two", "three"])])
        assert build_fix_summary(fix_set) == "• a.js – one, two"

    def test_windows_separators(self):
        fix_set = FixSet(files=[_fix("src\\lib\\a.js")])
        assert build_fix_summary(fix_set).startswith("• a.js")

    def test_non_list_issues_shown_as_blank(self):
        fix_set = FixSet(files=[ProposedFix(path="a.js", issues="oops", fixed_code="x")])
        assert build_fix_summary(fix_set) == "• a.js – "


class TestApply:
    def test_round_trip(self, tmp_path):
        ws = LocalWorkspace(tmp_path)
        result = FixApplier(ws).apply(FixSet(files=[_fix("a.js")]))
        assert ws.read_file("a.js") == "console.log(1)"
        assert result.written == ["a.js"]
        assert result.summary == "• a.js – x"

    def test_no_workspace_raises(self):
        with pytest.raises(NoWorkspaceError):
            FixApplier(None).apply(FixSet(files=[_fix("a.js")]))

    def test_replaces_existing_content(self, tmp_path):
        (tmp_path / "a.js").write_text("var broken = ;")
        FixApplier(LocalWorkspace(tmp_path)).apply(FixSet(files=[_fix("a.js", code="var fixed = 1;")]))
        assert (tmp_path / "a.js").read_text() == "var fixed = 1;"

    def test_writes_in_order(self, tmp_path):
        result = FixApplier(LocalWorkspace(tmp_path)).apply(FixSet(files=[_fix("b.js"), _fix("a.js")]))
        assert result.written == ["b.js", "a.js"]


class TestAtomicApply:
    def test_unencodable_entry_writes_nothing(self, tmp_path):
        fix_set = FixSet(files=[_fix("a.js"), _fix("b.js", code="a\ud800b")])
        with pytest.raises(InvalidFixPayloadError) as exc:
            FixApplier(LocalWorkspace(tmp_path)).apply(fix_set)
        assert exc.value.path == "b.js"
        assert list(tmp_path.iterdir()) == []

    def test_invalid_second_entry_writes_nothing(self, tmp_path):
        fix_set = FixSet(files=[_fix("a.js"), _fix("b.js", code=123)])
        with pytest.raises(InvalidFixPayloadError) as exc:
            FixApplier(LocalWorkspace(tmp_path)).apply(fix_set)
        assert exc.value.path == "b.js"
        assert exc.value.committed == []
        assert not (tmp_path / "a.js").exists()

    def test_path_outside_root_writes_nothing(self, tmp_path):
        (tmp_path / "proj").mkdir()
        fix_set = FixSet(files=[_fix("a.js"), _fix("../escape.js")])
        with pytest.raises(ApplyError):
            FixApplier(LocalWorkspace(tmp_path / "proj")).apply(fix_set)
        assert not (tmp_path / "proj" / "a.js").exists()
        assert not (tmp_path / "escape.js").exists()

    def test_commit_failure_reports_committed_and_rolled_back(self, tmp_path, mocker):
        real_replace = os.replace
        calls = []

        def flaky_replace(src, dst):
            calls.append(dst)
            if len(calls) == 2:
                raise OSError("disk full")
            return real_replace(src, dst)

        mocker.patch("codemedic_core.applier.os.replace", side_effect=flaky_replace)
        fix_set = FixSet(files=[_fix("a.js"), _fix("b.js"), _fix("c.js")])

        with pytest.raises(ApplyError) as exc:
            FixApplier(LocalWorkspace(tmp_path)).apply(fix_set)

        assert exc.value.committed == ["a.js"]
        assert exc.value.rolled_back == ["b.js", "c.js"]
        assert (tmp_path / "a.js").exists()
        assert not (tmp_path / "b.js").exists()
        # Staged temp files are cleaned up.
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.js"]


class TestSequentialApply:
    def test_invalid_second_entry_keeps_first_write(self, tmp_path):
        fix_set = FixSet(files=[_fix("a.js"), _fix("b.js", code=["not", "text"])])
        with pytest.raises(InvalidFixPayloadError) as exc:
            FixApplier(LocalWorkspace(tmp_path)).apply(fix_set, atomic=False)
        assert exc.value.path == "b.js"
        assert exc.value.committed == ["a.js"]
        assert (tmp_path / "a.js").read_text() == "console.log(1)"
        assert not (tmp_path / "b.js").exists()

    def test_write_failure_reports_committed(self, tmp_path, mocker):
        ws = LocalWorkspace(tmp_path)
        real_write = ws.write_file

        def fail_on_b(path, content):
            if path == "b.js":
                raise OSError("read-only")
            real_write(path, content)

        mocker.patch.object(ws, "write_file", side_effect=fail_on_b)
        with pytest.raises(ApplyError) as exc:
            FixApplier(ws).apply(FixSet(files=[_fix("a.js"), _fix("b.js")]), atomic=False)
        assert exc.value.committed == ["a.js"]

    def test_unencodable_second_entry_keeps_first_write(self, tmp_path):
        fix_set = FixSet(files=[_fix("a.js"), _fix("b.js", code="a\ud800b")])
        with pytest.raises(InvalidFixPayloadError) as exc:
            FixApplier(LocalWorkspace(tmp_path)).apply(fix_set, atomic=False)
        assert exc.value.path == "b.js"
        assert exc.value.committed == ["a.js"]
        assert not (tmp_path / "b.js").exists()
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.js"]
