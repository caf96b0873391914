# util/timing.py
import time
from contextlib import contextmanager
from typing import Any, Iterator
import logging


@contextmanager
def timed(logger: logging.Logger, name: str, **kv: Any) -> Iterator[None]:
    """
    Usage:
      with timed(logger, "purge.project", project=pid):
          ...
    Emits one INFO on exit: "<name>.done ms=<int> key=val ..."
    or one WARNING if the block raised: "<name>.error ms=<int> err=<Type> key=val ..."
    """
    t0 = time.perf_counter()
    failed: BaseException | None = None
    try:
        yield
    except BaseException as e:
        failed = e
        raise
    finally:
        dt_ms = int((time.perf_counter() - t0) * 1000)
        suffix = "".join(f" {k}={v}" for k, v in kv.items())
        if failed is None:
            logger.info("%s.done ms=%d%s", name, dt_ms, suffix)
        else:
            logger.warning(
                "%s.error ms=%d err=%s%s", name, dt_ms, type(failed).__name__, suffix
            )
