"""Process launcher: one shell child per task, attached to a pseudo-terminal.

Each child gets its own session so a kill reaches the whole process group.
Output is read by one daemon thread per channel and posted to the
supervisor queue; a waiter thread posts the exit once the readers drained.
"""

import codecs
import logging
import os
import signal
import subprocess
import sys
import threading
from typing import BinaryIO, Callable, Mapping, Optional

from .events import OutputChunk, ProcessExited, TaskEvent
from .task import Task

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"

if not IS_WINDOWS:
    import pty

READ_SIZE = 4096
READER_DRAIN_TIMEOUT = 0.5
FORCE_COLOR_ENV = "FORCE_COLOR"


class SpawnError(Exception):
    """Raised when a task's command cannot be started."""


def build_child_env(base: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Environment for children: the parent's, plus a forced-color indicator."""
    env = dict(os.environ if base is None else base)
    env.setdefault(FORCE_COLOR_ENV, "1")
    return env


def normalize_exit_code(returncode: int) -> int:
    """Map a Popen return code to a shell-style exit code (128 + signal)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


class ProcessHandle:
    """A running child process. Owned by the launcher, referenced by its Task."""

    def __init__(self, task_index: int, process: subprocess.Popen, uses_pty: bool):
        self.task_index = task_index
        self.process = process
        self.uses_pty = uses_pty
        self._kill_sent = False
        self._force_sent = False

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def kill_sent(self) -> bool:
        return self._kill_sent

    def send_kill(self, force: bool = False) -> bool:
        """Signal the process group once per strength.

        The group is signaled even after the shell itself exited, since
        background children may still hold the output channels.

        Returns:
            True if a signal was sent by this call
        """
        if force:
            if self._force_sent:
                return False
        elif self._kill_sent:
            return False

        try:
            if IS_WINDOWS:
                if force:
                    self.process.kill()
                else:
                    self.process.terminate()
            else:
                os.killpg(self.process.pid, signal.SIGKILL if force else signal.SIGTERM)
        except OSError as e:
            logger.debug("Signal to pid %s failed: %s", self.process.pid, e)

        self._kill_sent = True
        if force:
            self._force_sent = True
        return True


class ProcessLauncher:
    """Spawns task commands and forwards their output and exit to `post`."""

    def __init__(
        self,
        post: Callable[[TaskEvent], None],
        use_pty: Optional[bool] = None,
        env: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the launcher.

        Args:
            post: Thread-safe sink for task events (usually ``queue.Queue.put``)
            use_pty: Prefer pseudo-terminals; defaults to True on POSIX
            env: Base environment for children (defaults to ``os.environ``)
        """
        self._post = post
        self.use_pty = (not IS_WINDOWS) if use_pty is None else (use_pty and not IS_WINDOWS)
        self._env = build_child_env(env)

    # =========================================================================
    # Spawning
    # =========================================================================

    def launch(self, task: Task) -> ProcessHandle:
        """Start the task's command and attach reader threads.

        Raises:
            SpawnError: If the command cannot be started
        """
        try:
            process, streams, uses_pty = self._spawn(task.command)
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Task %d failed to start: %s", task.index, e)
            raise SpawnError(str(e)) from e

        handle = ProcessHandle(task.index, process, uses_pty)
        task.handle = handle
        logger.info(
            "Task %d started pid=%s via %s: %s",
            task.index, process.pid, "pty" if uses_pty else "pipes", task.command,
        )

        readers = []
        for stream, is_error in streams:
            channel = "stderr" if is_error else "stdout"
            reader = threading.Thread(
                target=self._read_stream,
                args=(task.index, stream, is_error),
                name=f"task-{task.index}-{channel}",
                daemon=True,
            )
            reader.start()
            readers.append(reader)

        waiter = threading.Thread(
            target=self._wait,
            args=(handle, readers),
            name=f"task-{task.index}-wait",
            daemon=True,
        )
        waiter.start()
        return handle

    def _spawn(self, command: str) -> tuple[subprocess.Popen, list[tuple[BinaryIO, bool]], bool]:
        ptys = self._open_ptys() if self.use_pty else None
        if ptys is None:
            process, streams = self._spawn_with_pipes(command)
            return process, streams, False
        process, streams = self._spawn_with_ptys(command, ptys)
        return process, streams, True

    def _open_ptys(self) -> Optional[tuple[tuple[int, int], tuple[int, int]]]:
        """Open pty pairs for stdout and stderr, or None when unavailable."""
        try:
            out_pair = pty.openpty()
        except OSError as e:
            logger.info("Pseudo-terminal unavailable, using pipes: %s", e)
            return None
        try:
            err_pair = pty.openpty()
        except OSError as e:
            logger.info("Pseudo-terminal unavailable, using pipes: %s", e)
            for fd in out_pair:
                os.close(fd)
            return None
        return out_pair, err_pair

    def _spawn_with_ptys(
        self, command: str, ptys: tuple[tuple[int, int], tuple[int, int]]
    ) -> tuple[subprocess.Popen, list[tuple[BinaryIO, bool]]]:
        (out_master, out_slave), (err_master, err_slave) = ptys
        try:
            process = subprocess.Popen(
                command,
                shell=True,
                stdin=out_slave,
                stdout=out_slave,
                stderr=err_slave,
                env=self._env,
                start_new_session=True,
            )
        except BaseException:
            for fd in (out_master, out_slave, err_master, err_slave):
                os.close(fd)
            raise

        # The child holds its own copies of the slave ends
        os.close(out_slave)
        os.close(err_slave)
        return process, [
            (os.fdopen(out_master, "rb", buffering=0), False),
            (os.fdopen(err_master, "rb", buffering=0), True),
        ]

    def _spawn_with_pipes(self, command: str) -> tuple[subprocess.Popen, list[tuple[BinaryIO, bool]]]:
        process = subprocess.Popen(
            command,
            shell=True,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=self._env,
            bufsize=0,
            start_new_session=not IS_WINDOWS,
        )
        return process, [(process.stdout, False), (process.stderr, True)]

    # =========================================================================
    # Threads
    # =========================================================================

    def _read_stream(self, task_index: int, stream: BinaryIO, is_error: bool) -> None:
        """Forward decoded chunks from one channel until it closes."""
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            while True:
                try:
                    data = stream.read(READ_SIZE)
                except OSError:
                    # A pty master reports EIO once every slave end is closed
                    break
                if not data:
                    break
                text = decoder.decode(data)
                if text:
                    self._post(OutputChunk(task_index, text, is_error))
            tail = decoder.decode(b"", final=True)
            if tail:
                self._post(OutputChunk(task_index, tail, is_error))
        finally:
            stream.close()

    def _wait(self, handle: ProcessHandle, readers: list[threading.Thread]) -> None:
        returncode = handle.process.wait()
        for reader in readers:
            # Background grandchildren may keep a channel open past the exit
            reader.join(timeout=READER_DRAIN_TIMEOUT)
        exit_code = normalize_exit_code(returncode)
        logger.info("Task %d exited with code %d", handle.task_index, exit_code)
        self._post(ProcessExited(handle.task_index, exit_code))

    # =========================================================================
    # Termination
    # =========================================================================

    def kill(self, task: Task, force: bool = False) -> bool:
        """Best-effort termination request.

        No-op for tasks that already exited, never started, or were already
        signaled with the same strength.

        Returns:
            True if a signal was sent by this call
        """
        if not task.is_running or task.handle is None:
            return False
        sent = task.handle.send_kill(force=force)
        if sent:
            logger.info(
                "Sent %s to task %d (pid=%s)",
                "SIGKILL" if force else "SIGTERM", task.index, task.handle.pid,
            )
        return sent
