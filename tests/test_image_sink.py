"""Tests for local and remote image delivery."""

import base64
from unittest.mock import MagicMock

import requests
from PIL import Image

from attractions.models.enums import FailureStage, SinkMode
from attractions.models.records import Downloadable, FailureList
from attractions.services.image_sink import ImageSink

from conftest import make_image_bytes


def _ready(record_id: str, mode: str = "RGB", raw: bytes = b"original") -> Downloadable:
    """A downloadable that already passed the transform stage."""
    return Downloadable(
        id=record_id,
        url=f"https://img.test/{record_id}.jpg",
        image_bytes=raw,
        decoded_image=Image.new(mode, (1200, 800)),
    )


class TestLocalSink:
    def test_writes_one_jpeg_per_id(self, tmp_path):
        sink = ImageSink(output_dir=tmp_path / "images")
        failures = FailureList()

        result = sink.save([_ready("trakpilis"), _ready("kernav")], failures)

        assert result.mode == SinkMode.LOCAL
        assert result.delivered == 2
        assert result.failed == 0
        assert sorted(p.name for p in (tmp_path / "images").iterdir()) == ["kernav.jpg", "trakpilis.jpg"]
        with Image.open(tmp_path / "images" / "trakpilis.jpg") as img:
            assert img.format == "JPEG"
            assert img.size == (1200, 800)

    def test_converts_alpha_images(self, tmp_path):
        sink = ImageSink(output_dir=tmp_path)
        failures = FailureList()

        result = sink.save([_ready("alpha", mode="RGBA"), _ready("palette", mode="P")], failures)

        assert result.delivered == 2
        assert (tmp_path / "alpha.jpg").exists()
        assert (tmp_path / "palette.jpg").exists()

    def test_write_error_fails_only_that_id(self, tmp_path):
        sink = ImageSink(output_dir=tmp_path)
        # A directory where the file should go makes the write fail
        (tmp_path / "blocked.jpg").mkdir()
        failures = FailureList()

        result = sink.save([_ready("blocked"), _ready("ok")], failures)

        assert result.delivered == 1
        assert failures.by_stage(FailureStage.DELIVER) == ["blocked"]
        assert (tmp_path / "ok.jpg").exists()

    def test_unusable_output_dir_fails_every_id(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        sink = ImageSink(output_dir=blocker / "images")
        failures = FailureList()

        result = sink.save([_ready("a"), _ready("b")], failures)

        assert result.mode == SinkMode.LOCAL
        assert result.delivered == 0
        assert failures.by_stage(FailureStage.DELIVER) == ["a", "b"]

    def test_parent_reference_id_stays_inside_output_dir(self, tmp_path):
        out = tmp_path / "nested" / "images"
        failures = FailureList()

        result = ImageSink(output_dir=out).save([_ready("../../escaped"), _ready("ok")], failures)

        assert result.delivered == 1
        assert failures.by_stage(FailureStage.DELIVER) == ["../../escaped"]
        assert not (tmp_path / "escaped.jpg").exists()
        assert sorted(p.name for p in out.iterdir()) == ["ok.jpg"]

    def test_separator_in_id_is_a_delivery_failure(self, tmp_path):
        failures = FailureList()

        result = ImageSink(output_dir=tmp_path).save([_ready("kaunas/vilnius")], failures)

        assert result.delivered == 0
        assert failures.by_stage(FailureStage.DELIVER) == ["kaunas/vilnius"]
        assert "not a plain file name" in failures.items[0].reason

    def test_existing_failures_carried(self, tmp_path):
        failures = FailureList()
        failures.add("nourl", FailureStage.NO_URL)

        result = ImageSink(output_dir=tmp_path).save([_ready("ok")], failures)

        assert result.failures.ids == ["nourl"]
        assert result.delivered == 1


class TestRemoteSink:
    def test_posts_original_bytes_as_base64(self):
        session = MagicMock()
        session.post.return_value.ok = True
        sink = ImageSink(session=session, timeout=5.0)
        original = make_image_bytes(1600, 1200)
        failures = FailureList()

        result = sink.send([_ready("trakpilis", raw=original), _ready("kernav", raw=b"xyz")],
                           "https://images.test/upload", failures)

        assert result.mode == SinkMode.REMOTE
        assert result.delivered == 2
        assert result.transport_error is None

        args, kwargs = session.post.call_args
        assert args == ("https://images.test/upload",)
        assert kwargs["timeout"] == 5.0
        payload = kwargs["json"]
        assert [entry["id"] for entry in payload] == ["trakpilis", "kernav"]
        assert base64.b64decode(payload[0]["image"]) == original
        assert base64.b64decode(payload[1]["image"]) == b"xyz"

    def test_non_ok_status_still_counts_as_sent(self):
        session = MagicMock()
        session.post.return_value.ok = False
        session.post.return_value.status_code = 502

        result = ImageSink(session=session).send([_ready("a")], "https://images.test/upload", FailureList())

        assert result.delivered == 1
        assert result.transport_error is None

    def test_transport_error_is_not_a_record_failure(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("connection refused")
        failures = FailureList()
        failures.add("garbage", FailureStage.DECODE)

        result = ImageSink(session=session).send([_ready("a"), _ready("b")], "https://images.test/upload", failures)

        assert result.delivered == 0
        assert "connection refused" in result.transport_error
        assert result.failures.ids == ["garbage"]
