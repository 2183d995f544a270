from __future__ import annotations

import asyncio
import io

from luxstream.ui.console import StdinConsole


def _run_console(text: str) -> bool:
    async def scenario() -> bool:
        stopped = asyncio.Event()
        console = StdinConsole(stopped.set, asyncio.get_running_loop(), stream=io.StringIO(text))
        console.start()
        await asyncio.wait_for(stopped.wait(), timeout=2.0)
        console.join(timeout=1.0)
        return stopped.is_set()

    return asyncio.run(scenario())


def test_quit_command_requests_stop() -> None:
    assert _run_console("status\nquit\n")


def test_end_of_input_requests_stop() -> None:
    assert _run_console("")
