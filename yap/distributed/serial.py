"""Run per-sample tasks one at a time, in input order.

External assemblers and cleaners already use every core they are given, and
two running side by side can exhaust memory. Work for a batch is therefore
queued here and each task is waited on before the next one starts.
"""
import collections

from yap.log import logger

class SerialQueue(object):
    """FIFO queue of items processed by a single worker.
    """
    def __init__(self, items):
        self._pending = collections.deque(x for x in items if x is not None)
        self.total = len(self._pending)
        self.processed = 0

    def __len__(self):
        return len(self._pending)

    def run(self, fn):
        """Apply fn to each queued item in order, yielding results as they finish.
        """
        while self._pending:
            item = self._pending.popleft()
            try:
                yield fn(item)
            finally:
                self.processed += 1
                logger.info("Processed %s of %s samples" % (self.processed, self.total))

def runner():
    """Return a function that processes items serially with a given function.
    """
    def run_serial(fn, items):
        queue = SerialQueue(items)
        if not queue.total:
            return []
        logger.info("Queued %s samples for %s" % (queue.total, getattr(fn, "__name__", "processing")))
        return list(queue.run(fn))
    return run_serial
