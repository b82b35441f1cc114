from __future__ import annotations

from typing import Mapping, Optional, Sequence, Tuple

from prop_store.config import StoreConfig
from prop_store.runtime.shell import ShellResult

_RC = {"succeeded": 0, "exited_nonzero": 1}


def _result(args: list[str], status: str, stdout: str = "") -> ShellResult:
    return ShellResult(
        args=args,
        stdout=stdout,
        stderr="",
        returncode=_RC.get(status),
        status=status,  # type: ignore[arg-type]
    )


class FakeShell:
    """Records privileged batches; answers plain commands from a table."""

    def __init__(
        self,
        config: Optional[StoreConfig] = None,
        *,
        statuses: Sequence[str] = (),
        outputs: Mapping[Tuple[str, ...], str] | None = None,
    ) -> None:
        self.config = config or StoreConfig()
        self.batches: list[list[str]] = []
        self.commands: list[list[str]] = []
        self._statuses = list(statuses)
        self._outputs = dict(outputs or {})

    def execute(self, command_lines: Sequence[str], *, delay_ms: int = 0) -> ShellResult:
        _ = delay_ms
        self.batches.append(list(command_lines))
        status = self._statuses.pop(0) if self._statuses else "succeeded"
        return _result(list(self.config.privileged_command), status)

    def run_privileged(self, command_lines: Sequence[str], delay_ms: int = 0) -> bool:
        return self.execute(command_lines, delay_ms=delay_ms).launched

    def run_command(self, args: Sequence[str]) -> ShellResult:
        key = tuple(str(a) for a in args)
        self.commands.append(list(key))
        if key not in self._outputs:
            return _result(list(key), "exited_nonzero")
        return _result(list(key), "succeeded", stdout=self._outputs[key])

    def query_runtime_property(self, name: str) -> Optional[str]:
        res = self.run_command([*self.config.getprop_command, name])
        return res.first_line() if res.ok() else None
