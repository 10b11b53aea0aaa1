"""
Tests for the background convolution worker.

Verifies:
- A submitted task delivers the same result as the synchronous engine
- Failures arrive on the error signal
- Results of superseded requests are discarded
"""
import pytest

from models.kernel import Kernel, get_preset_kernel
from models.modes import ConvolutionMode
from services.convolution import apply_convolution
from services.filter_worker import ConvolutionTask, FilterWorker
from conftest import make_random


class TestConvolutionTask:

    def test_completed_signal(self, qtbot, random_buffer):
        kernel = get_preset_kernel('Gaussian Blur')
        task = ConvolutionTask(random_buffer, kernel, ConvolutionMode.RGB)
        with qtbot.waitSignal(task.completed, timeout=5000) as blocker:
            task.start()
        task.wait()
        assert blocker.args[0] == apply_convolution(random_buffer, kernel)

    def test_buffer_copied_on_submit(self, random_buffer):
        task = ConvolutionTask(random_buffer, Kernel.identity())
        assert task.buffer == random_buffer
        assert task.buffer is not random_buffer

    def test_bad_mode_rejected_on_submit(self, random_buffer):
        with pytest.raises(ValueError):
            ConvolutionTask(random_buffer, Kernel.identity(), 'luma')


class TestFilterWorker:

    def test_result_ready(self, qtbot, random_buffer):
        worker = FilterWorker()
        kernel = get_preset_kernel('Sharpen')
        with qtbot.waitSignal(worker.result_ready, timeout=5000) as blocker:
            request_id = worker.submit(random_buffer, kernel)
        assert blocker.args[0] == request_id
        assert blocker.args[1] == apply_convolution(random_buffer, kernel)
        worker.wait_all()

    def test_request_ids_increase(self, qtbot, random_buffer):
        worker = FilterWorker()
        first = worker.submit(random_buffer, Kernel.identity())
        second = worker.submit(random_buffer, Kernel.identity())
        assert second > first
        assert worker.latest_request_id == second
        worker.wait_all()

    def test_superseded_results_discarded(self, qtbot):
        worker = FilterWorker()
        received = []
        worker.result_ready.connect(lambda request_id, result: received.append(request_id))

        big = make_random(400, 400, seed=1)
        small = make_random(4, 4, seed=2)
        kernel = get_preset_kernel('Box Blur')

        worker.submit(big, kernel)
        with qtbot.waitSignal(worker.result_ready, timeout=10000):
            latest = worker.submit(small, kernel)
        assert worker.wait_all()
        # let queued signals from the first task arrive
        qtbot.wait(100)

        assert received == [latest]
        assert worker.pending_count == 0

    def test_error_signal(self, qtbot, random_buffer, monkeypatch):
        import services.filter_worker as filter_worker

        def explode(*args):
            raise RuntimeError("kernel exploded")

        monkeypatch.setattr(filter_worker, 'apply_convolution', explode)
        worker = FilterWorker()
        with qtbot.waitSignal(worker.error, timeout=5000) as blocker:
            request_id = worker.submit(random_buffer, Kernel.identity())
        assert blocker.args == [request_id, "kernel exploded"]
        worker.wait_all()
