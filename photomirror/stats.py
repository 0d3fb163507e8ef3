import time

KIB = 1024
MIB = 1024 * 1024


def format_size(n: int) -> str:
    if n > MIB:
        return f"{n / MIB:.1f}m"
    if n > KIB:
        return f"{n / KIB:.1f}k"
    return f"{n} bytes"


def format_elapsed(seconds: float) -> str:
    if seconds >= 60:
        minutes, secs = divmod(seconds, 60)
        return f"{int(minutes)}m{secs:.1f}s"
    return f"{seconds:.1f}s"


class TransferStats:
    """
    Files and bytes moved during one run (or that would be moved, in a
    dry run).
    """

    def __init__(self):
        self.file_count = 0
        self.total_bytes = 0
        self.started = time.monotonic()

    def record(self, size: int):
        self.file_count += 1
        self.total_bytes += size

    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def summary(self) -> str:
        return (
            f"Downloaded {self.file_count} files ({format_size(self.total_bytes)}) "
            f"in {format_elapsed(self.elapsed())}"
        )
