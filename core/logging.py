import logging
import sys

from config.defaults import DEFAULTS


class ContextFormatter(logging.Formatter):
    """Formatter that tolerates records without session_id or stage."""

    def format(self, record):
        if not hasattr(record, "session_id"):
            record.session_id = "-"
        if not hasattr(record, "stage"):
            record.stage = "-"
        return super().format(record)


def configure_logging(level=None) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ContextFormatter(
        "%(asctime)s %(levelname)s %(name)s [session=%(session_id)s stage=%(stage)s] - %(message)s"
    ))
    logging.basicConfig(
        level=level or DEFAULTS["log_level"],
        handlers=[handler],
        force=True,
    )
