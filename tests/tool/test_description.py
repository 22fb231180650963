"""Tests for the command description generator."""

import io

import pytest

from awsmcp.tool.description import render_description, write_description
from awsmcp.tool.models import CommandSpec


class TestRenderDescription:
    def test_full_description(self) -> None:
        spec = CommandSpec(
            service_name="s3",
            operation_name="list-buckets",
            parameters={"max-items": "10"},
            region="us-west-2",
            profile_name="development",
            label="List S3 buckets",
        )
        text = render_description(spec)

        assert text.startswith("Running aws cli command:\n\n")
        assert "Service name: s3" in text
        assert "Operation name: list-buckets" in text
        assert "Parameters:" in text
        assert '- max-items: "10"' in text
        assert "Profile name: development" in text
        assert "Region: us-west-2" in text
        assert "Label: List S3 buckets" in text

    def test_exact_layout(self) -> None:
        spec = CommandSpec(
            service_name="sts",
            operation_name="get-caller-identity",
            region="us-east-1",
            label="Who am I",
        )
        assert render_description(spec) == (
            "Running aws cli command:\n\n"
            "Service name: sts\n"
            "Operation name: get-caller-identity\n"
            "Profile name: default\n"
            "Region: us-east-1\n"
            "Label: Who am I"
        )

    def test_default_profile(self) -> None:
        spec = CommandSpec(service_name="ec2", operation_name="describe-instances", region="us-east-1")
        text = render_description(spec)
        assert "Profile name: default" in text
        assert "Label:" not in text
        assert text.endswith("Region: us-east-1")

    @pytest.mark.parametrize("parameters", [None, {}])
    def test_parameters_section_omitted(self, parameters: dict | None) -> None:
        spec = CommandSpec(
            service_name="ec2",
            operation_name="describe-instances",
            parameters=parameters,
            region="us-east-1",
        )
        assert "Parameters:" not in render_description(spec)

    def test_empty_value_renders_bare_name(self) -> None:
        spec = CommandSpec(
            service_name="ec2",
            operation_name="describe-instances",
            parameters={"dry-run": ""},
            region="us-east-1",
        )
        text = render_description(spec)
        assert "- dry-run\n" in text
        assert "- dry-run:" not in text

    def test_structured_values_render_as_json(self) -> None:
        spec = CommandSpec(
            service_name="dynamodb",
            operation_name="get-item",
            parameters={"key": {"id": {"S": "1"}}, "limit": 5, "consistent": True},
            region="us-east-1",
        )
        text = render_description(spec)
        assert '- key: {"id":{"S":"1"}}' in text
        assert "- limit: 5" in text
        assert "- consistent: true" in text


class TestWriteDescription:
    def test_writes_to_sink(self) -> None:
        spec = CommandSpec(service_name="s3", operation_name="ls", region="us-east-1")
        sink = io.StringIO()
        write_description(spec, sink)
        assert sink.getvalue() == render_description(spec)

    def test_sink_errors_propagate(self) -> None:
        class BrokenSink:
            def write(self, text: str) -> int:
                raise OSError("disk full")

        spec = CommandSpec(service_name="s3", operation_name="ls", region="us-east-1")
        with pytest.raises(OSError, match="disk full"):
            write_description(spec, BrokenSink())
