"""
Tests for the rendered-report lifecycle (artifacts.py).
"""
import pytest
from factories import FailingRenderer, StubRenderer, make_submission

from scorecard_report.artifacts import (
    RenderedReport,
    report_scope,
    unique_report_path,
)
from scorecard_report.errors import DeliveryError, RenderError


class TestUniqueReportPath:
    def test_creates_directory(self, tmp_path):
        target = tmp_path / "out"
        path = unique_report_path(target)
        assert target.is_dir()
        assert path.parent == target
        assert not path.exists()

    def test_paths_do_not_collide(self, tmp_path):
        paths = {unique_report_path(tmp_path) for _ in range(100)}
        assert len(paths) == 100

    def test_custom_prefix_suffix(self, tmp_path):
        path = unique_report_path(tmp_path, prefix="x", suffix=".bin")
        assert path.name.startswith("x_")
        assert path.suffix == ".bin"


class TestRenderedReport:
    def test_discard_removes_file(self, tmp_path):
        path = tmp_path / "r.pdf"
        path.write_bytes(b"%PDF")
        report = RenderedReport(path=path)
        report.discard()
        assert not path.exists()

    def test_discard_is_idempotent(self, tmp_path):
        report = RenderedReport(path=tmp_path / "missing.pdf")
        report.discard()
        report.discard()

    def test_filename(self, tmp_path):
        assert RenderedReport(path=tmp_path / "abc.pdf").filename == "abc.pdf"


class TestReportScope:
    def test_file_exists_inside_and_removed_after(self, tmp_path):
        renderer = StubRenderer(tmp_path)
        with report_scope(renderer, make_submission()) as report:
            assert report.path.exists()
        assert not report.path.exists()

    def test_removed_when_body_raises(self, tmp_path):
        renderer = StubRenderer(tmp_path)
        with pytest.raises(DeliveryError):
            with report_scope(renderer, make_submission()) as report:
                raise DeliveryError("relay down")
        assert not report.path.exists()
        assert list(tmp_path.iterdir()) == []

    def test_render_failure_propagates(self):
        renderer = FailingRenderer()
        with pytest.raises(RenderError):
            with report_scope(renderer, make_submission()):
                pytest.fail("body must not run when rendering fails")
        assert renderer.calls == 1
