"""Unit tests for result rendering."""

import io

from cron_job_list.config import Destination
from cron_job_list.executor import DestinationResult, DestinationStatus
from cron_job_list.output import format_failure, format_success, write_result


def _success(output):
    return DestinationResult(
        index=0,
        destination=Destination(host="h1", user="u1"),
        status=DestinationStatus.SUCCESS,
        output=output,
    )


def _failure(error):
    return DestinationResult(
        index=1,
        destination=Destination(host="h2", user="u2"),
        status=DestinationStatus.FAILED,
        error=error,
    )


class TestFormat:
    def test_success_block(self):
        block = format_success(_success(b"* * * * * /bin/true\n"))
        assert block == b"[Host] u1@h1\n[Content] \n* * * * * /bin/true\n\n"

    def test_success_keeps_raw_bytes(self):
        """Output is passed through without decoding"""
        raw = b"0 3 * * * /opt/\xff\xfe\n"
        assert format_success(_success(raw)).endswith(raw + b"\n")

    def test_success_without_output(self):
        assert format_success(_success(None)) == b"[Host] u1@h1\n[Content] \n\n"

    def test_failure_line(self):
        assert format_failure(_failure("refused")) == "ERROR: [Host] u2@h2: refused\n"

    def test_failure_without_message(self):
        assert format_failure(_failure("")) == "ERROR: [Host] u2@h2\n"


class TestWriteResult:
    def test_success_goes_to_stdout(self):
        stdout, stderr = io.BytesIO(), io.StringIO()
        write_result(_success(b"@reboot x\n"), stdout, stderr)
        assert stdout.getvalue() == b"[Host] u1@h1\n[Content] \n@reboot x\n\n"
        assert stderr.getvalue() == ""

    def test_failure_goes_to_stderr(self):
        stdout, stderr = io.BytesIO(), io.StringIO()
        write_result(_failure("boom"), stdout, stderr)
        assert stdout.getvalue() == b""
        assert stderr.getvalue() == "ERROR: [Host] u2@h2: boom\n"

    def test_defaults_to_process_streams(self, capsys):
        write_result(_success(b"x\n"))
        write_result(_failure("boom"))
        captured = capsys.readouterr()
        assert "[Host] u1@h1" in captured.out
        assert "ERROR: [Host] u2@h2: boom" in captured.err
