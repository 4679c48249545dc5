import pytest

from tower_crane.cli.cli import CLI
from tower_crane.controllers import ControllerManager
from tower_crane.runtime.scheduler import FrameScheduler


def test_scheduler_step_calls_callback():
    calls = []
    scheduler = FrameScheduler(realtime=False)
    scheduler.step(3)
    scheduler.request(lambda: calls.append(1))
    scheduler.step(2)
    assert calls == [1, 1]
    assert scheduler.frame_count == 5


def test_scheduler_cancel_in_before_frame_skips_callback():
    calls = []
    scheduler = FrameScheduler(realtime=False)
    scheduler.request(lambda: calls.append("tick"))

    frames = iter([True, True, False])
    scheduler.run(lambda: next(frames),
                  before_frame=scheduler.cancel,
                  after_frame=lambda: calls.append("draw"))
    assert calls == ["draw", "draw"]


def test_scheduler_run_order():
    calls = []
    scheduler = FrameScheduler(frame_rate=1000.0, realtime=True)
    scheduler.request(lambda: calls.append("tick"))
    remaining = [2]

    def should_continue():
        remaining[0] -= 1
        return remaining[0] >= 0

    scheduler.run(should_continue,
                  before_frame=lambda: calls.append("poll"),
                  after_frame=lambda: calls.append("draw"))
    assert calls == ["poll", "tick", "draw", "poll", "tick", "draw"]


def make_cli(publisher, loop):
    keys = loop.input_state
    manager = ControllerManager(keys, loop, mode="cli")
    cli = CLI(publisher, manager, loop)
    manager.register_controller("keyboard", object())
    manager.register_controller("cli", cli)
    loop.sources.append(cli)
    return cli, manager


def test_cli_key_command_holds_key(loop, scene, publisher, scheduler):
    cli, _ = make_cli(publisher, loop)
    loop.start(scene)

    assert cli.execute("key S on")
    scheduler.step(10)
    assert cli.execute("k s off")
    scheduler.step(10)

    assert loop.state.cable_length == pytest.approx(6.0)


def test_cli_key_ignored_outside_cli_mode(loop, scene, publisher, capsys):
    cli, manager = make_cli(publisher, loop)
    loop.start(scene)
    manager.set_mode("keyboard")

    cli.execute("key a on")
    assert not loop.input_state.is_held("a")
    assert "CLI命令被忽略" in capsys.readouterr().out


def test_cli_get_state_prints_snapshot(loop, scene, publisher, capsys):
    cli, _ = make_cli(publisher, loop)
    cli.execute("1")
    assert "尚未采集状态数据" in capsys.readouterr().out

    loop.start(scene)
    loop.tick()
    cli.execute("get_state")
    out = capsys.readouterr().out
    assert "5.0" in out and "63" in out


def test_cli_reset_and_release(loop, scene, publisher, scheduler):
    cli, _ = make_cli(publisher, loop)
    loop.start(scene)
    cli.execute("key d on")
    scheduler.step(5)
    cli.execute("x")
    assert loop.input_state.held_keys() == []

    cli.execute("r")
    assert loop.state.rotation == 0.0


def test_cli_mode_and_quit(loop, publisher, capsys):
    cli, manager = make_cli(publisher, loop)
    cli.execute("mode keyboard")
    assert manager.get_mode() == "keyboard"
    cli.execute("m gamepad")
    assert "切换失败" in capsys.readouterr().out

    assert not cli.execute("bogus")
    assert not cli.is_quit_requested()
    cli.execute("quit")
    assert cli.is_quit_requested()


def test_cli_bad_key_usage(loop, publisher, capsys):
    cli, _ = make_cli(publisher, loop)
    cli.execute("key q")
    assert "用法" in capsys.readouterr().out
    assert loop.input_state.held_keys() == []
