import pytest

from wedding_portal.saga import SagaRunner, SagaStep, SagaStepFailedError


class Recorder:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def action(self, name: str, result=None):
        async def _action(results):
            self.calls.append(f"do {name}")
            return result

        return _action

    def failing(self, name: str):
        async def _action(results):
            self.calls.append(f"do {name}")
            raise RuntimeError(f"{name} broke")

        return _action

    def undo(self, name: str):
        async def _compensation(results):
            self.calls.append(f"undo {name}")

        return _compensation


async def test_steps_run_in_order_and_see_earlier_results():
    seen = {}

    async def second(results):
        seen.update(results)
        return "second-result"

    runner = SagaRunner("test")
    results = await runner.run(
        [
            SagaStep("first", Recorder().action("first", "first-result")),
            SagaStep("second", second),
        ]
    )

    assert results == {"first": "first-result", "second": "second-result"}
    assert seen == {"first": "first-result"}


async def test_critical_failure_compensates_completed_steps_in_reverse():
    recorder = Recorder()
    steps = [
        SagaStep("a", recorder.action("a"), compensation=recorder.undo("a")),
        SagaStep("b", recorder.action("b")),
        SagaStep("c", recorder.action("c"), compensation=recorder.undo("c")),
        SagaStep("d", recorder.failing("d"), compensation=recorder.undo("d")),
    ]

    with pytest.raises(SagaStepFailedError) as exc_info:
        await SagaRunner("test").run(steps)

    assert exc_info.value.step == "d"
    assert isinstance(exc_info.value.cause, RuntimeError)
    assert recorder.calls == ["do a", "do b", "do c", "do d", "undo c", "undo a"]


async def test_non_critical_failure_is_skipped():
    recorder = Recorder()
    steps = [
        SagaStep("a", recorder.action("a", 1), compensation=recorder.undo("a")),
        SagaStep("optional", recorder.failing("optional"), critical=False),
        SagaStep("b", recorder.action("b", 2)),
    ]

    results = await SagaRunner("test").run(steps)

    assert results == {"a": 1, "b": 2}
    assert "undo a" not in recorder.calls


async def test_failing_compensation_does_not_stop_the_others():
    recorder = Recorder()

    async def broken_undo(results):
        raise RuntimeError("cannot undo")

    steps = [
        SagaStep("a", recorder.action("a"), compensation=recorder.undo("a")),
        SagaStep("b", recorder.action("b"), compensation=broken_undo),
        SagaStep("c", recorder.failing("c")),
    ]

    with pytest.raises(SagaStepFailedError):
        await SagaRunner("test").run(steps)

    assert recorder.calls[-1] == "undo a"
