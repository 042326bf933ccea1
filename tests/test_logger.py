from datetime import datetime

import pytest

from polarysdb.logger import Level, Logger, LoggerConfig

STAMP_FORMAT = "%Y/%m/%d %H:%M:%S"
STAMP_LENGTH = 19


def console_logger(min_level=Level.INFO):
    return Logger(LoggerConfig(min_level=min_level, to_console=True))


def test_info_goes_to_stdout(capsys):
    console_logger().info("Database reloaded", "ok")
    out, err = capsys.readouterr()
    assert out.startswith("\033[34mINFO:\033[0m ")
    assert out.endswith("Database reloaded ok\n")
    assert err == ""


def test_line_format_has_timestamp(capsys):
    console_logger().warn("careful")
    out, _ = capsys.readouterr()
    prefix = "\033[33mWARN:\033[0m "
    assert out.startswith(prefix)
    rest = out[len(prefix):]
    stamp = rest[:STAMP_LENGTH]
    parsed = datetime.strptime(stamp, STAMP_FORMAT)
    assert parsed.year >= 2000
    assert rest[STAMP_LENGTH:] == " careful\n"


def test_error_goes_to_stderr(capsys):
    console_logger().error("boom", 7)
    out, err = capsys.readouterr()
    assert out == ""
    assert err.startswith("\033[31mERROR:\033[0m ")
    assert err.endswith("boom 7\n")


def test_min_level_suppresses_lower(capsys):
    log = console_logger(Level.ERROR)
    log.info("hidden")
    log.warn("hidden")
    log.error("shown")
    out, err = capsys.readouterr()
    assert out == ""
    assert "shown" in err


def test_console_disabled_writes_nothing(capsys):
    Logger(LoggerConfig()).info("nothing")
    assert capsys.readouterr() == ("", "")


def test_fatal_exits(capsys):
    with pytest.raises(SystemExit) as excinfo:
        console_logger().fatal("dead")
    assert excinfo.value.code == 1
    _, err = capsys.readouterr()
    assert err.startswith("\033[35mFATAL:\033[0m ")
    assert err.endswith("dead\n")


def test_file_output(tmp_path, capsys):
    path = tmp_path / "app.log"
    with Logger(LoggerConfig(log_file_path=str(path), to_file=True)) as log:
        log.info("first")
        log.error("second")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("first")
    assert lines[1].endswith("second")
    assert capsys.readouterr() == ("", "")


def test_file_is_appended(tmp_path):
    path = tmp_path / "app.log"
    config = LoggerConfig(log_file_path=str(path), to_file=True)
    for word in ("one", "two"):
        log = Logger(config)
        log.info(word)
        log.close()
    assert [line.split()[-1] for line in path.read_text().splitlines()] == ["one", "two"]


def test_console_and_file(tmp_path, capsys):
    path = tmp_path / "both.log"
    log = Logger(LoggerConfig(log_file_path=str(path), to_console=True, to_file=True))
    log.warn("twice")
    log.close()
    out, _ = capsys.readouterr()
    assert out == path.read_text()


def test_close_is_idempotent(tmp_path):
    path = tmp_path / "x.log"
    log = Logger(LoggerConfig(log_file_path=str(path), to_file=True))
    log.close()
    log.close()
    log.info("after close")
    assert path.read_text() == ""


def test_unopenable_log_file(tmp_path):
    with pytest.raises(OSError):
        Logger(LoggerConfig(log_file_path=str(tmp_path / "missing" / "x.log"), to_file=True))


def test_warn_level_keeps_warn_and_error(capsys):
    log = console_logger(Level.WARN)
    log.info("quiet")
    log.warn("loud")
    log.error("louder")
    out, err = capsys.readouterr()
    assert "quiet" not in out
    assert out.endswith("loud\n")
    assert err.endswith("louder\n")