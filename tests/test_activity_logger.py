from __future__ import annotations

import logging

from logic import activity_logger


def test_format_action_with_details_and_snapshot():
    body = activity_logger.format_action(
        "Document generated",
        details={"company": "acme", "output_file": "AIA_Invoice_1.xlsx"},
        snapshot={"schedule_rows_written": 2},
    )

    lines = body.splitlines()
    assert lines[0] == "#### Document generated"
    assert "- **Company:** acme" in lines
    assert "- **Output File:** AIA_Invoice_1.xlsx" in lines
    assert "```json" in lines
    assert '  "schedule_rows_written": 2' in lines


def test_format_action_without_extras():
    assert activity_logger.format_action("Started") == "#### Started"


def test_log_user_action_uses_activity_logger(caplog):
    with caplog.at_level(logging.INFO, logger="activity"):
        activity_logger.log_user_action("No default template", details={"company": "acme"})

    assert caplog.records[0].name == "activity"
    assert "No default template" in caplog.records[0].getMessage()
