"""In-process job queue."""

_QUEUE = []


def schedule(job):
    _QUEUE.append(job)


def drain():
    while _QUEUE:
        job = _QUEUE.pop(0)
        job()
