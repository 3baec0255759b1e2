# src/forcegraph/layout/tick_scheduler.py
"""
在 asyncio 事件迴圈上重複排程模擬步驟。

每一步執行完畢即交還控制權給事件迴圈；取消唯一的方式是停止排程
(新的資料更新會先停止舊排程，再為新模擬開始排程)。
"""

# 1. 標準庫導入
import asyncio
import logging
from collections.abc import Callable

# 2. 第三方庫導入
# (無)

# 3. 本專案導入
# (無)

StepFunction = Callable[[], bool]


class TickScheduler:
    """以固定間隔呼叫 step()，直到 step 回傳 True 或被 stop()。"""

    def __init__(self, interval: float = 0.016, loop: asyncio.AbstractEventLoop | None = None):
        self.interval = max(0.0, float(interval))
        self._loop = loop
        self._handle: asyncio.Handle | None = None
        self._step: StepFunction | None = None
        self._done: asyncio.Future | None = None
        self._active_loop: asyncio.AbstractEventLoop | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        """未指定事件迴圈時使用目前執行中的迴圈；沒有時拋出 RuntimeError。"""
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def start(self, step: StepFunction):
        """停止任何進行中的排程後，開始驅動新的 step。"""
        self.stop()
        loop = self._get_loop()
        self._active_loop = loop
        self._step = step
        self._done = loop.create_future()
        self._handle = loop.call_soon(self._run)

    def _run(self):
        self._handle = None
        if self._step is None:
            return
        try:
            finished = self._step()
        except Exception as e:
            logging.error(f"模擬步驟執行時發生錯誤: {e}", exc_info=True)
            self._finish(error=e)
            return
        if finished:
            self._finish()
        else:
            self._handle = self._active_loop.call_later(self.interval, self._run)

    def _finish(self, error: Exception | None = None):
        self._step = None
        done, self._done = self._done, None
        if done is None or done.done():
            return
        if error is not None:
            done.set_exception(error)
        else:
            done.set_result(True)

    def stop(self):
        """取消尚未執行的下一步；等待中的 wait() 會收到 CancelledError。"""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._step = None
        done, self._done = self._done, None
        if done is not None and not done.done():
            done.cancel()

    async def wait(self) -> bool:
        """等待目前的排程自然結束。沒有進行中的排程時立即回傳 False。"""
        if self._done is None:
            return False
        return await asyncio.shield(self._done)
