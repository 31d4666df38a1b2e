"""
Subprocess Runner

Spawns one external command with stdout and stderr captured, drains both
streams concurrently and routes every line, as it arrives, through the
classifier into the progress estimator.
"""

import queue
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Callable, List, Optional, Tuple

from analytics_installer.wizard.exceptions import (
    InstallerError, ProcessExitError, ProcessSpawnError, StreamReadError
)
from analytics_installer.wizard.logging_config import get_logger
from analytics_installer.wizard.progress import ProgressEstimator


logger = get_logger("runner")

# (stream name, line, read error); line and error both None means end-of-input
StreamItem = Tuple[str, Optional[str], Optional[BaseException]]


@dataclass
class SubprocessOutcome:
    """Result of a single runner invocation."""
    error: Optional[InstallerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return self.error.message if self.error else ""

    @classmethod
    def success(cls) -> "SubprocessOutcome":
        return cls()

    @classmethod
    def failure(cls, error: InstallerError) -> "SubprocessOutcome":
        return cls(error=error)


class _StreamPump:
    """Reads one stream line by line into a shared queue."""

    def __init__(self, stream: Optional[IO[str]], name: str, output_queue: "queue.Queue[StreamItem]"):
        self.stream = stream
        self.name = name
        self.queue = output_queue
        self.thread = threading.Thread(target=self._run, name=f"pump-{name}", daemon=True)
        self.thread.start()

    def _run(self):
        if self.stream is None:
            self.queue.put((self.name, None, None))
            return
        try:
            for line in self.stream:
                self.queue.put((self.name, line.rstrip("\r\n"), None))
        except (OSError, ValueError) as e:
            self.queue.put((self.name, None, e))
            return
        self.queue.put((self.name, None, None))

    def join(self, timeout: Optional[float] = None):
        self.thread.join(timeout)


class SubprocessRunner:
    """Runs one command to completion while streaming its output."""

    def __init__(
        self,
        estimator: ProgressEstimator,
        cwd: Optional[Path] = None,
        on_update: Optional[Callable[[], None]] = None,
    ):
        self.estimator = estimator
        self.cwd = cwd
        self.on_update = on_update

    def run(self, command: str, args: List[str]) -> SubprocessOutcome:
        """Run `command args...` and stream its output.

        Args:
            command: Program to execute
            args: Its arguments

        Returns:
            SubprocessOutcome: success iff the exit status is 0
        """
        cmd_list = [command] + list(args)
        display_cmd = " ".join(cmd_list)
        logger.info("Running: %s (cwd=%s)", display_cmd, self.cwd)

        try:
            process = subprocess.Popen(
                cmd_list,
                cwd=str(self.cwd) if self.cwd else None,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            logger.error("Could not start %s: %s", display_cmd, e)
            self.estimator.log(f"❌ Failed to start {display_cmd}: {e}")
            self._notify()
            return SubprocessOutcome.failure(ProcessSpawnError(
                f"Could not start '{display_cmd}'",
                command=cmd_list,
                details=str(e),
            ))

        output_queue: "queue.Queue[StreamItem]" = queue.Queue()
        pumps = [
            _StreamPump(process.stdout, "stdout", output_queue),
            _StreamPump(process.stderr, "stderr", output_queue),
        ]

        read_error = None
        remaining = len(pumps)
        while remaining > 0:
            name, line, error = output_queue.get()
            if error is not None:
                read_error = StreamReadError(
                    f"Error reading {name} of '{display_cmd}'",
                    stream=name,
                    details=str(error),
                )
                logger.error("Error reading %s: %s", name, error)
                self.estimator.log(f"❌ Error reading {name}: {error}")
                self._notify()
                break
            if line is None:
                remaining -= 1
                continue
            logger.debug("[%s] %s", name, line)
            self.estimator.feed_line(line)
            self._notify()

        if read_error is not None and process.poll() is None:
            process.kill()

        returncode = process.wait()
        for pump in pumps:
            pump.join(timeout=1.0)
        for stream in (process.stdout, process.stderr):
            if stream:
                stream.close()

        logger.info("%s exited with status %s", display_cmd, returncode)

        if read_error is not None:
            return SubprocessOutcome.failure(read_error)
        if returncode != 0:
            return SubprocessOutcome.failure(ProcessExitError(
                f"'{display_cmd}' failed",
                returncode=returncode,
            ))
        return SubprocessOutcome.success()

    def _notify(self):
        if self.on_update:
            self.on_update()
