"""Tests for the output multiplexer and the error reporter."""

import json
from unittest.mock import patch

import cbor2
import yaml

from gnostic.exceptions import SerializationError
from gnostic.output.multiplexer import OutputFormat, OutputMultiplexer
from gnostic.output.sinks import SinkWriter
from gnostic.pipeline.failure_tracking import ErrorReporter


def _multiplexer(streams, errors_out="="):
    writer = SinkWriter(streams)
    reporter = ErrorReporter(
        writer=writer, source_name="petstore.yaml", errors_out=errors_out
    )
    return OutputMultiplexer(writer, reporter), reporter


class TestOutputMultiplexer:
    """Tests for OutputMultiplexer."""

    def test_all_formats_to_directory(self, streams, v2_document, tmp_path):
        multiplexer, reporter = _multiplexer(streams)
        location = str(tmp_path)

        written = multiplexer.emit(
            v2_document,
            "specs/petstore.yaml",
            binary_out=location,
            json_out=location,
            text_out=location,
        )

        assert written == ["binary", "json", "text"]
        assert (tmp_path / "petstore.pb").read_bytes() == v2_document.to_binary()
        assert json.loads((tmp_path / "petstore.json").read_text())["swagger"] == "2.0"
        text = yaml.safe_load((tmp_path / "petstore.text").read_text())
        assert text["info"]["title"] == "Swagger Petstore"
        assert not reporter.failed

    def test_unset_formats_are_skipped(self, streams, v2_document, tmp_path):
        multiplexer, _ = _multiplexer(streams)

        written = multiplexer.emit(v2_document, "petstore.yaml", json_out="-")

        assert written == ["json"]
        assert json.loads(streams.stdout.getvalue())["info"]["version"] == "1.0.0"

    def test_binary_output_is_idempotent(self, streams, v2_document, tmp_path):
        multiplexer, _ = _multiplexer(streams)
        first, second = tmp_path / "first.pb", tmp_path / "second.pb"

        multiplexer.emit(v2_document, "petstore.yaml", binary_out=str(first))
        multiplexer.emit(v2_document, "petstore.yaml", binary_out=str(second))

        assert first.read_bytes() == second.read_bytes()
        assert cbor2.loads(first.read_bytes()) == v2_document.to_tree()

    def test_failed_format_does_not_stop_others(self, streams, v2_document, tmp_path):
        multiplexer, reporter = _multiplexer(streams)

        def broken(document):
            raise SerializationError("Unable to encode JSON document: boom")

        with patch(
            "gnostic.output.multiplexer.JSON", OutputFormat("json", "json", broken)
        ):
            written = multiplexer.emit(
                v2_document,
                "petstore.yaml",
                binary_out=str(tmp_path / "out.pb"),
                json_out=str(tmp_path / "out.json"),
                text_out=str(tmp_path / "out.text"),
            )

        assert written == ["binary", "text"]
        assert (tmp_path / "out.pb").exists()
        assert (tmp_path / "out.text").exists()
        assert not (tmp_path / "out.json").exists()
        assert [f.stage for f in reporter.failures] == ["emit:json"]
        assert streams.stderr.getvalue() == (
            b"Errors reading petstore.yaml\nUnable to encode JSON document: boom\n"
        )

    def test_unwritable_location_is_reported(self, streams, v2_document, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        multiplexer, reporter = _multiplexer(streams)

        written = multiplexer.emit(
            v2_document,
            "petstore.yaml",
            binary_out=str(blocker / "out.pb"),
            text_out="-",
        )

        assert written == ["text"]
        assert reporter.failed
        assert b"Unable to write" in streams.stderr.getvalue()


class TestErrorReporter:
    """Tests for ErrorReporter."""

    def test_message_format(self, streams):
        reporter = ErrorReporter(writer=SinkWriter(streams), source_name="api.yaml")

        reporter.report(ValueError("bad thing"), stage="compile")

        assert streams.stderr.getvalue() == b"Errors reading api.yaml\nbad thing\n"
        assert reporter.failures[0].stage == "compile"
        assert reporter.failures[0].message == "bad thing"

    def test_file_sink_truncated_then_appended(self, streams, tmp_path):
        target = tmp_path / "errors.txt"
        target.write_text("stale errors from a previous run\n")
        reporter = ErrorReporter(
            writer=SinkWriter(streams), source_name="api.yaml", errors_out=str(target)
        )

        reporter.report(ValueError("first"))
        reporter.report(ValueError("second"))

        assert target.read_text() == (
            "Errors reading api.yaml\nfirst\nErrors reading api.yaml\nsecond\n"
        )

    def test_directory_sink_uses_errors_extension(self, streams, tmp_path):
        reporter = ErrorReporter(
            writer=SinkWriter(streams),
            source_name="specs/api.yaml",
            errors_out=str(tmp_path),
        )

        reporter.report(ValueError("nope"))

        assert (tmp_path / "api.errors").read_text() == (
            "Errors reading specs/api.yaml\nnope\n"
        )

    def test_discarded_errors_are_still_recorded(self, streams):
        reporter = ErrorReporter(
            writer=SinkWriter(streams), source_name="api.yaml", errors_out="!"
        )

        reporter.report(ValueError("quiet"))

        assert reporter.failed
        assert streams.stderr.getvalue() == b""

    def test_unwritable_error_sink_falls_back_to_stderr(self, streams, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        reporter = ErrorReporter(
            writer=SinkWriter(streams),
            source_name="api.yaml",
            errors_out=str(blocker / "errors.txt"),
        )

        reporter.report(ValueError("lost?"))

        assert streams.stderr.getvalue() == b"Errors reading api.yaml\nlost?\n"
