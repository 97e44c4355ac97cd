"""Tests for the launch coordinator.

Launcher.run() owns its event loop, so these tests are synchronous and
observe outcomes through the exit code handed to exit_func.
"""

import asyncio
import os
import signal
import sys
import pytest
from unittest.mock import AsyncMock, Mock

from launchkit.errors import WrongUsageError
from launchkit.modules.cancellation import CancelledError, cancellable_sleep
from launchkit.modules.configuration import LayeredConfiguration
from launchkit.modules.launcher import (
    LaunchState, Launcher, LauncherSettings, LoadAndParse, NoConfig, ParseOnly, launch
)
from launchkit.modules.registry import ModuleRegistry


class _Runtime:
    def __init__(self, events, delay=0.01):
        self.events = events
        self.delay = delay
        self.destroy_calls = 0

    async def destroy(self):
        self.destroy_calls += 1
        await asyncio.sleep(self.delay)
        self.events.append("destroyed")


def create_launcher(initializer, strategy=None, logger=None, **kwargs):
    exit_func = kwargs.pop("exit_func", Mock())
    kwargs.setdefault("settings", LauncherSettings())
    kwargs.setdefault("registry", ModuleRegistry())
    kwargs.setdefault("argv", [])
    return Launcher(initializer, strategy or NoConfig(), logger=logger, exit_func=exit_func, **kwargs)


def test_initialization_failure_exits_127(test_logger):
    async def initializer(token, configuration):
        raise RuntimeError("Something wrong")

    launcher = create_launcher(initializer, logger=test_logger)
    code = launcher.run()

    assert code == 127
    launcher.exit_func.assert_called_once_with(127)
    assert test_logger.get_logs("FATAL") == [
        "FATAL: Runtime initialization failed with error: RuntimeError: Something wrong"
    ]
    assert launcher.state == LaunchState.TERMINATED

def test_cancelled_initialization_exits_0(test_logger):
    launcher = None

    async def initializer(token, configuration):
        asyncio.get_running_loop().call_later(0.05, launcher.source.cancel)
        await cancellable_sleep(token, 5)
        raise AssertionError("sleep was not cancelled")

    launcher = create_launcher(initializer, logger=test_logger)
    code = launcher.run()

    assert code == 0
    assert test_logger.get_logs("WARNING") == ["WARNING: Runtime initialization was cancelled by user"]
    assert test_logger.get_logs("FATAL") == []

def test_cancellation_error_without_token_is_still_clean(test_logger):
    async def initializer(token, configuration):
        raise CancelledError()

    launcher = create_launcher(initializer, logger=test_logger)

    assert launcher.run() == 0

def test_state_while_initializing(test_logger):
    states = []
    launcher = None

    async def initializer(token, configuration):
        states.append(launcher.state)
        raise RuntimeError("stop")

    launcher = create_launcher(initializer, logger=test_logger)
    assert launcher.state == LaunchState.IDLE
    launcher.run()

    assert states == [LaunchState.INITIALIZING]

def test_signals_trigger_single_teardown(test_logger):
    events = []
    runtime = _Runtime(events)
    states = []
    launcher = None

    def deliver_signals():
        states.append(launcher.state)
        for name in ("SIGTERM", "SIGINT", "SIGTERM"):
            launcher.shutdown.request_shutdown(name)
        states.append(launcher.state)

    async def initializer(token, configuration):
        asyncio.get_running_loop().call_later(0.05, deliver_signals)
        return runtime

    exit_func = Mock(side_effect=lambda code: events.append(f"exit {code}"))
    launcher = create_launcher(initializer, logger=test_logger, exit_func=exit_func)
    code = launcher.run()

    assert code == 0
    assert runtime.destroy_calls == 1
    assert events == ["destroyed", "exit 0"]
    assert states == [LaunchState.RUNNING, LaunchState.SHUTTING_DOWN]
    assert launcher.source.is_cancelled is True
    info = test_logger.get_logs("INFO")
    assert "INFO: Interrupt signal received: SIGTERM" in info
    assert "INFO: Interrupt signal (2) received: SIGINT" in info
    assert "INFO: Interrupt signal (3) received: SIGTERM" in info
    assert f"INFO: Application was started. Process ID: {os.getpid()}" in info

@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")
def test_real_sigterm_triggers_shutdown(test_logger):
    events = []
    # The second signal arrives while destroy is still running
    runtime = _Runtime(events, delay=0.3)
    original = signal.getsignal(signal.SIGTERM)

    async def initializer(token, configuration):
        loop = asyncio.get_running_loop()
        loop.call_later(0.05, os.kill, os.getpid(), signal.SIGTERM)
        loop.call_later(0.1, os.kill, os.getpid(), signal.SIGTERM)
        return runtime

    launcher = create_launcher(initializer, logger=test_logger)
    code = launcher.run()

    assert code == 0
    assert runtime.destroy_calls == 1
    assert signal.getsignal(signal.SIGTERM) == original

def test_signal_handlers_not_installed_before_start(test_logger):
    handlers = []

    async def initializer(token, configuration):
        handlers.append(signal.getsignal(signal.SIGTERM))
        raise RuntimeError("stop")

    original = signal.getsignal(signal.SIGTERM)
    create_launcher(initializer, logger=test_logger).run()

    assert handlers == [original]

def test_unhandled_async_error_exits_255(test_logger):
    runtime = Mock()
    runtime.destroy = AsyncMock()

    def boom():
        raise ValueError("lost error")

    async def initializer(token, configuration):
        asyncio.get_running_loop().call_later(0.05, boom)
        return runtime

    launcher = create_launcher(initializer, logger=test_logger)
    code = launcher.run()

    assert code == 255
    runtime.destroy.assert_not_awaited()
    fatal = test_logger.get_logs("FATAL")
    assert len(fatal) == 1
    assert "ValueError: lost error" in fatal[0]

def test_destroy_failure_exits_127(test_logger):
    runtime = Mock()
    runtime.destroy = AsyncMock(side_effect=RuntimeError("cannot close"))
    launcher = None

    async def initializer(token, configuration):
        asyncio.get_running_loop().call_later(0.05, lambda: launcher.shutdown.request_shutdown("SIGTERM"))
        return runtime

    launcher = create_launcher(initializer, logger=test_logger)

    assert launcher.run() == 127
    runtime.destroy.assert_awaited_once()

def test_configuration_error_exits_127_before_initializer(test_logger):
    initializer = AsyncMock()

    launcher = create_launcher(initializer, ParseOnly(), logger=test_logger, argv=["--verbose"])
    code = launcher.run()

    assert code == 127
    initializer.assert_not_called()
    assert test_logger.get_logs("FATAL") == [
        "FATAL: Cannot launch the application due to an error: no configuration source provided"
    ]

def test_parse_only_passes_layered_configuration(test_logger, write_json):
    a = write_json("A.json", {"port": 1, "host": "x"})
    received = []

    async def initializer(token, configuration):
        received.append(configuration)
        raise CancelledError()

    launcher = create_launcher(
        initializer,
        ParseOnly(),
        logger=test_logger,
        argv=["--config-env", f"--config-file={a}", "--workers=4"],
        environ={"PORT": "9"}
    )
    launcher.run()

    configuration = received[0]
    assert isinstance(configuration, LayeredConfiguration)
    assert configuration.get_int("port") == 9
    assert configuration.get("host") == "x"

def test_parse_only_applies_parser(test_logger, write_json):
    a = write_json("A.json", {"port": 1})
    received = []

    async def initializer(token, configuration):
        received.append(configuration)
        raise CancelledError()

    parser = lambda configuration: {"port": configuration.get_int("port")}
    create_launcher(initializer, ParseOnly(parser), logger=test_logger, argv=[f"--config={a}"]).run()

    assert received == [{"port": 1}]

def test_load_and_parse(test_logger):
    received = []

    async def loader(token):
        assert token.is_cancellation_requested is False
        return {"raw": True}

    async def parser(raw):
        return {**raw, "parsed": True}

    async def initializer(token, configuration):
        received.append(configuration)
        raise CancelledError()

    create_launcher(initializer, LoadAndParse(loader, parser), logger=test_logger).run()

    assert received == [{"raw": True, "parsed": True}]

def test_no_config_passes_none(test_logger):
    received = []

    async def initializer(token, configuration):
        received.append(configuration)
        raise CancelledError()

    create_launcher(initializer, NoConfig(), logger=test_logger).run()

    assert received == [None]

def test_initializer_must_return_runtime(test_logger):
    async def initializer(token, configuration):
        return object()

    launcher = create_launcher(initializer, logger=test_logger)

    assert launcher.run() == 127
    assert "destroy()" in test_logger.get_logs("FATAL")[0]

def test_wrong_usage_is_raised_synchronously():
    with pytest.raises(WrongUsageError):
        Launcher("not a function", NoConfig())
    with pytest.raises(WrongUsageError):
        Launcher(AsyncMock(), strategy=object())
    with pytest.raises(WrongUsageError):
        Launcher(AsyncMock(), strategy=LoadAndParse(loader="nope"))
    with pytest.raises(WrongUsageError):
        launch(AsyncMock(), ParseOnly(parser=None))

def test_module_conflict_exits_127(test_logger):
    registry = ModuleRegistry()
    registry.init("launchkit", "0.0.1")
    initializer = AsyncMock()

    launcher = create_launcher(initializer, logger=test_logger, registry=registry)

    assert launcher.run() == 127
    initializer.assert_not_called()
    assert "already loaded" in test_logger.get_logs("FATAL")[0]

def test_module_conflict_allowed(test_logger):
    registry = ModuleRegistry(allow_conflicts=True, logger=test_logger)
    registry.init("launchkit", "0.0.1")

    async def initializer(token, configuration):
        raise CancelledError()

    launcher = create_launcher(initializer, logger=test_logger, registry=registry)

    assert launcher.run() == 0
    assert len(test_logger.get_logs("WARNING")) == 2

def test_development_mode_delays_failure_exit(test_logger, monkeypatch):
    sleep = Mock()
    monkeypatch.setattr("launchkit.modules.launcher.launcher.time.sleep", sleep)

    async def initializer(token, configuration):
        raise RuntimeError("boom")

    settings = LauncherSettings(environment="development", development_exit_delay=0.5)
    launcher = create_launcher(initializer, logger=test_logger, settings=settings)

    assert launcher.run() == 127
    sleep.assert_called_once_with(0.5)

def test_production_mode_exits_without_delay(test_logger, monkeypatch):
    sleep = Mock()
    monkeypatch.setattr("launchkit.modules.launcher.launcher.time.sleep", sleep)

    async def initializer(token, configuration):
        raise RuntimeError("boom")

    create_launcher(initializer, logger=test_logger).run()

    sleep.assert_not_called()

def test_logs_are_flushed_before_exit(test_logger):
    async def initializer(token, configuration):
        raise RuntimeError("boom")

    exit_func = Mock(side_effect=lambda code: test_logger.logs.append(f"EXIT {code}"))
    create_launcher(initializer, logger=test_logger, exit_func=exit_func).run()

    assert test_logger.logs[-2:] == ["FLUSH", "EXIT 127"]
