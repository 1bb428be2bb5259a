# netlify_deploy/core/process.py
"""External process execution with streamed output"""

import asyncio
import logging
import os
from typing import Awaitable, Callable, Dict, List, Optional, Union

from ..api.exceptions import DeployCancelledError, ProcessLaunchError
from ..constants import PROCESS_STREAM_LIMIT, PROCESS_TERMINATE_TIMEOUT
from ..models.result import ExecutionResult

logger = logging.getLogger(__name__)

# Line callbacks may be plain functions or coroutines
LineCallback = Callable[[str], Union[None, Awaitable[None]]]


async def _emit(callback: Optional[LineCallback], line: str) -> None:
    if callback is None:
        return
    result = callback(line)
    if asyncio.iscoroutine(result):
        await result


class ProcessRunner:
    """Runs a command, streaming stdout/stderr line by line"""

    def __init__(self,
                 terminate_timeout: float = PROCESS_TERMINATE_TIMEOUT,
                 stream_limit: int = PROCESS_STREAM_LIMIT):
        self.terminate_timeout = terminate_timeout
        self.stream_limit = stream_limit

    async def run(self,
                  command: str,
                  args: List[str],
                  cwd: Optional[str] = None,
                  env: Optional[Dict[str, str]] = None,
                  on_stdout: Optional[LineCallback] = None,
                  on_stderr: Optional[LineCallback] = None,
                  cancel_event: Optional[asyncio.Event] = None) -> ExecutionResult:
        """
        Run a command to completion

        Args:
            command: Executable path or name
            args: Arguments (not including the executable)
            cwd: Working directory
            env: Extra environment variables merged over os.environ
            on_stdout: Called with each stdout line as it arrives
            on_stderr: Called with each stderr line as it arrives
            cancel_event: When set, the process is terminated

        Returns:
            ExecutionResult with the exit code and captured output

        Raises:
            ProcessLaunchError: If the executable cannot be started
            DeployCancelledError: If cancelled before the process exited
        """
        process_env = None
        if env:
            process_env = dict(os.environ)
            process_env.update(env)

        try:
            process = await asyncio.create_subprocess_exec(
                command,
                *args,
                cwd=cwd,
                env=process_env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=self.stream_limit,
            )
        except OSError as e:
            raise ProcessLaunchError(command, str(e))

        stdout_lines: List[str] = []
        stderr_lines: List[str] = []

        async def pump(stream, sink: List[str], callback: Optional[LineCallback]) -> None:
            while True:
                try:
                    raw = await stream.readline()
                except ValueError:
                    # Longer than stream_limit; the buffered part is discarded
                    logger.warning(
                        f"Dropped an output line of '{command}' longer than {self.stream_limit} bytes"
                    )
                    continue
                if not raw:
                    break
                line = raw.decode('utf-8', errors='replace').rstrip('\r\n')
                sink.append(line)
                await _emit(callback, line)

        pumps = asyncio.gather(
            pump(process.stdout, stdout_lines, on_stdout),
            pump(process.stderr, stderr_lines, on_stderr),
        )
        completion = asyncio.ensure_future(self._wait(process, pumps))

        try:
            if cancel_event is None:
                await completion
            else:
                cancel_waiter = asyncio.ensure_future(cancel_event.wait())
                try:
                    await asyncio.wait(
                        {completion, cancel_waiter},
                        return_when=asyncio.FIRST_COMPLETED
                    )
                finally:
                    cancel_waiter.cancel()

                if not completion.done():
                    logger.info(f"Cancelling '{command}'")
                    await self._stop(process, completion)
                    raise DeployCancelledError()

                completion.result()

        except BaseException:
            await self._stop(process, completion)
            pumps.cancel()
            raise

        return ExecutionResult(
            exit_code=process.returncode,
            stdout="\n".join(stdout_lines),
            stderr="\n".join(stderr_lines),
        )

    @staticmethod
    async def _wait(process, pumps) -> None:
        await pumps
        await process.wait()

    async def _stop(self, process, completion) -> None:
        """Terminate the process, killing it after the grace period"""
        if process.returncode is None:
            try:
                process.terminate()
            except ProcessLookupError:
                pass

            try:
                await asyncio.wait_for(process.wait(), timeout=self.terminate_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Process {process.pid} did not exit, killing it")
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()

        completion.cancel()
        try:
            await completion
        except (asyncio.CancelledError, Exception):
            pass
