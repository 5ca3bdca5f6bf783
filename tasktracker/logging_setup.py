import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a single stderr handler.

    Safe to call more than once: existing handlers are replaced, not stacked.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    root.addHandler(handler)

    # passlib logs a noisy traceback when probing newer bcrypt builds
    logging.getLogger("passlib").setLevel(logging.ERROR)
