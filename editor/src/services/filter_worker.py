"""
Convolution worker thread.

Runs apply_convolution off the GUI thread so large images don't freeze the
editor. Buffers are copied when a task is created, so the thread never shares
pixel memory with the caller.

Usage:
    worker = FilterWorker()
    worker.result_ready.connect(on_filtered)   # (request_id, PixelBuffer)
    worker.error.connect(on_filter_error)      # (request_id, message)
    worker.submit(buffer, get_preset_kernel('Sharpen'))

Only the most recent request is reported; results of older requests that
finish later are dropped. Running tasks are never cancelled.
"""

import logging
from typing import Dict

from PyQt5.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from models.kernel import Kernel
from models.modes import ConvolutionMode
from models.pixel_buffer import PixelBuffer
from services.convolution import apply_convolution


class ConvolutionTask(QThread):
    """Worker thread for one convolution request."""

    completed = pyqtSignal(object)  # PixelBuffer
    failed = pyqtSignal(str)        # error message

    def __init__(self, buffer: PixelBuffer, kernel: Kernel, mode=ConvolutionMode.RGB,
                 request_id: int = 0, parent=None):
        super().__init__(parent)
        self.buffer = buffer.copy()
        self.kernel = kernel
        self.mode = ConvolutionMode.parse(mode)
        self.request_id = request_id

    def run(self):
        try:
            result = apply_convolution(self.buffer, self.kernel, self.mode)
        except Exception as e:
            logging.getLogger('ConvolutionTask').exception(f"Request {self.request_id} failed")
            self.failed.emit(str(e))
            return
        self.completed.emit(result)


class FilterWorker(QObject):
    """Submits ConvolutionTasks and reports the latest one's outcome."""

    result_ready = pyqtSignal(int, object)  # request_id, PixelBuffer
    error = pyqtSignal(int, str)            # request_id, message

    def __init__(self, parent=None):
        super().__init__(parent)
        self._logger = logging.getLogger('FilterWorker')
        self._next_id = 0
        self._latest_id = 0
        self._tasks: Dict[int, ConvolutionTask] = {}

    @property
    def latest_request_id(self) -> int:
        return self._latest_id

    @property
    def pending_count(self) -> int:
        """Tasks started but not yet finished"""
        return len(self._tasks)

    def submit(self, buffer: PixelBuffer, kernel: Kernel, mode=ConvolutionMode.RGB) -> int:
        """Start a convolution and return its request id

        Any earlier request still running becomes stale.
        """
        self._next_id += 1
        request_id = self._next_id
        self._latest_id = request_id

        task = ConvolutionTask(buffer, kernel, mode, request_id=request_id)
        task.completed.connect(self._on_completed)
        task.failed.connect(self._on_failed)
        task.finished.connect(self._on_task_finished)
        self._tasks[request_id] = task

        self._logger.debug(f"Submitted request {request_id} ({buffer.width}x{buffer.height}, {task.mode.value})")
        task.start()
        return request_id

    def wait_all(self, timeout_ms: int = 30000) -> bool:
        """Block until every running task has finished

        Returns:
            False if a task was still running after timeout_ms
        """
        done = True
        for task in list(self._tasks.values()):
            done = task.wait(timeout_ms) and done
        return done

    # ========================================
    # Task callbacks (run on this object's thread)
    # ========================================

    def _is_stale(self, task: ConvolutionTask) -> bool:
        if task.request_id != self._latest_id:
            self._logger.info(f"Discarding stale result {task.request_id} (latest is {self._latest_id})")
            return True
        return False

    @pyqtSlot(object)
    def _on_completed(self, result):
        task = self.sender()
        if task is None or self._is_stale(task):
            return
        self.result_ready.emit(task.request_id, result)

    @pyqtSlot(str)
    def _on_failed(self, message: str):
        task = self.sender()
        if task is None or self._is_stale(task):
            return
        self.error.emit(task.request_id, message)

    @pyqtSlot()
    def _on_task_finished(self):
        task = self.sender()
        if task is not None:
            self._tasks.pop(task.request_id, None)
            task.deleteLater()
