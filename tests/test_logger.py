import io
import json

from odpairs.logger import StdLogger


def test_plain_lines_respect_level():
    buf = io.StringIO()
    log = StdLogger(level="info", stream=buf)
    log.debug("hidden", x=1)
    log.info("batch", label="2^4", count=10)
    log.warning("done")
    assert buf.getvalue().splitlines() == ["info batch label=2^4 count=10", "warning done"]


def test_json_lines():
    buf = io.StringIO()
    StdLogger(level="debug", json_fmt=True, stream=buf).debug("exhausted", source=3, settled=1)
    assert json.loads(buf.getvalue()) == {
        "level": "debug",
        "event": "exhausted",
        "source": 3,
        "settled": 1,
    }
