"""Tests for the comparison session."""

import pytest
from structlog.testing import capture_logs

from whatschanging.diff import compare
from whatschanging.diff_exceptions import ImageLoadError
from whatschanging.logging import setup_logging
from whatschanging.session import ComparisonResult, ComparisonSession


@pytest.fixture
def pictures(write_png, random_rgb):
    """Write a base picture, a changed copy and a differently sized one."""
    base = random_rgb(10, 12)
    changed = base.copy()
    changed[3, 4] = (0, 0, 0) if tuple(changed[3, 4]) != (0, 0, 0) else (1, 1, 1)
    return {
        "base": write_png("base.png", base),
        "changed": write_png("changed.png", changed),
        "other": write_png("other.png", random_rgb(12, 10)),
    }


class TestComparisonSession:
    """Test session state and results."""

    def test_nothing_chosen(self):
        result = ComparisonSession().run()

        assert result.image1 is None
        assert result.image2 is None
        assert result.diff is None
        assert result.ok

    def test_only_first_chosen(self, pictures):
        session = ComparisonSession()
        session.choose_first(pictures["base"])

        result = session.run()

        assert result.image1 is not None
        assert result.image2 is None
        assert not result.compared
        assert result.ok

    def test_both_chosen(self, pictures):
        session = ComparisonSession()
        session.choose_first(pictures["base"])
        session.choose_second(pictures["changed"])

        result = session.run()

        assert result.compared
        assert result.diff.different_pixels == 1
        assert result.diff.mask()[3, 4]

    def test_mismatch_is_reported_not_raised(self, pictures):
        session = ComparisonSession()
        session.choose_first(pictures["base"])
        session.choose_second(pictures["other"])

        result = session.run()

        assert result.diff is None
        assert not result.ok
        assert result.error_code == "DIMENSION_MISMATCH"
        assert "12x10 vs 10x12" in result.error
        assert result.image1 is not None and result.image2 is not None

    def test_mismatch_warns_once(self, pictures):
        setup_logging(level="DEBUG", console=False)
        session = ComparisonSession()
        session.choose_first(pictures["base"])
        session.choose_second(pictures["other"])

        with capture_logs() as logs:
            session.run()

        warnings = [e["event"] for e in logs if e["log_level"] == "warning"]
        assert warnings == ["pixel_diff_rejected"]
        assert any(e["event"] == "comparison_skipped" for e in logs)

    def test_decode_size_applies_to_both(self, pictures):
        session = ComparisonSession(6, 5)
        session.choose_first(pictures["base"])
        session.choose_second(pictures["base"])

        result = session.run()

        assert result.diff.size == (6, 5)
        assert result.diff.same

    def test_rechoosing_replaces_state(self, pictures):
        session = ComparisonSession()
        session.choose_first(pictures["base"])
        session.choose_second(pictures["other"])
        assert not session.run().ok

        session.choose_second(pictures["changed"])

        assert session.run().ok

    def test_load_errors_propagate(self, tmp_path, pictures):
        session = ComparisonSession()
        session.choose_first(pictures["base"])
        session.choose_second(tmp_path / "missing.png")

        with pytest.raises(ImageLoadError):
            session.run()

    def test_workers(self, pictures):
        session = ComparisonSession(workers=3)
        session.choose_first(pictures["base"])
        session.choose_second(pictures["changed"])

        assert session.run().diff.different_pixels == 1


def test_result_to_dict(make_image):
    image = make_image([[(1, 2, 3), (4, 5, 6)]], name="tiny")

    result = ComparisonResult(image1=image, image2=image, diff=compare(image, image))

    data = result.to_dict()

    assert data["compared"] is True
    assert data["same"] is True
    assert data["different_pixels"] == 0
    assert data["total_pixels"] == 2
    assert data["first"]["name"] == "tiny"
    assert data["first"]["rowstride"] == 6
    assert data["error"] is None


def test_result_to_dict_without_diff():
    data = ComparisonResult(error="boom", error_code="DIMENSION_MISMATCH").to_dict()

    assert data["compared"] is False
    assert data["first"] is None
    assert "different_pixels" not in data
    assert data["error"] == "boom"
    assert data["error_code"] == "DIMENSION_MISMATCH"
