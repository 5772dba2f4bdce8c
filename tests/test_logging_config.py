from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.bin_store",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Bin created",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context_keys() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s")

    output = formatter.format(_record(bin_id="abc", status="Full", unrelated="skip", radius_km=None))

    assert output == "INFO Bin created | bin_id=abc status=Full"


def test_formatter_without_context_is_plain() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", extra_keys=["bin_id"])

    assert formatter.format(_record(status="Full")) == "Bin created"
