"""Main entry point for the tower crane simulator."""

import argparse
import threading

import mujoco.viewer

from tower_crane.config.config import CraneConfig
from tower_crane.core.input_state import InputState
from tower_crane.core.mujoco_model import MujocoSceneBinding
from tower_crane.core.state import SnapshotPublisher
from tower_crane.cli.cli import CLI
from tower_crane.runtime.control_loop import ControlLoop
from tower_crane.runtime.scheduler import FrameScheduler
from tower_crane.controllers import ControllerManager
from tower_crane.controllers.keyboard_controller import KeyboardController
from tower_crane.controllers.gamepad_controller import GamepadController
from tower_crane.ui.status_panel import StatusPanel


def main():
    """Initialize and run the crane simulator."""
    parser = argparse.ArgumentParser(description="Tower crane simulator")
    parser.add_argument("--config", default="config/crane.yaml", help="配置文件路径")
    args = parser.parse_args()

    print("=" * 60)
    print("塔式起重机仿真系统 (Tower Crane Simulator)")
    print("=" * 60)

    # 1. 加载配置
    print("\n[1/7] 加载配置文件...")
    cfg = CraneConfig(args.config)
    print(f"  - 帧率: {cfg.sim.frame_rate}Hz")
    print(f"  - 场景模型: {cfg.scene.model_path}")

    # 2. 加载场景模型（MuJoCo，仅作场景图）
    print("\n[2/7] 加载场景模型...")
    scene = MujocoSceneBinding(cfg.scene.model_path)
    print(f"  - 活动部件: {', '.join(scene.nodes)}")

    # 3. 状态发布
    print("\n[3/7] 初始化状态发布...")
    publisher = SnapshotPublisher(cfg.telemetry.endpoint if cfg.telemetry.enabled else None)
    publisher.start_publish(interval=cfg.publish_interval)
    if cfg.telemetry.enabled:
        print(f"  - ZMQ 发布端点: {cfg.telemetry.endpoint}")
        print(f"  - 发布间隔: {cfg.publish_interval:.3f}s")
    else:
        print("  - ZMQ 发布未启用")

    # 4. 输入源与控制循环
    print("\n[4/7] 初始化输入源...")
    input_state = InputState()
    scheduler = FrameScheduler(cfg.sim.frame_rate, cfg.sim.realtime)
    manager = ControllerManager(input_state, mode=cfg.input.mode)
    keyboard = KeyboardController(manager)
    gamepad = GamepadController(manager, cfg.input.gamepad_deadzone)
    cli = CLI(publisher, manager)

    manager.register_controller("keyboard", keyboard)
    manager.register_controller("cli", cli)
    if gamepad.is_available():
        manager.register_controller("gamepad", gamepad)
    manager.activate()

    loop = ControlLoop(input_state, scheduler, publisher,
                       sources=[keyboard, gamepad, cli],
                       params=cfg.parameters, geometry=cfg.geometry)
    manager.loop = loop
    cli.loop = loop

    # 5. 状态面板（键盘焦点窗口）
    print("\n[5/7] 打开状态面板...")
    panel = StatusPanel(publisher, keyboard, scene, cfg.window.width, cfg.window.height)

    # 6. 启动MuJoCo可视化窗口
    print("\n[6/7] 启动可视化窗口...")
    viewer = mujoco.viewer.launch_passive(scene.model, scene.data)
    scene.mount(viewer)
    print("  - MuJoCo 可视化已启动")

    # 7. 命令行交互线程
    print("\n[7/7] 启动命令行交互...")
    threading.Thread(target=cli.run, daemon=True).start()

    print("\n" + "=" * 60)
    print("系统就绪，开始仿真...")
    print(f"当前输入模式: {manager.get_mode()}（键盘需聚焦状态面板窗口）")
    print("输入 'h' 查看帮助，'m' 切换输入模式")
    print("=" * 60 + "\n")

    def should_continue():
        return viewer.is_running() and not panel.closed and not cli.is_quit_requested()

    def before_frame():
        panel.poll_events()
        gamepad.update()

    try:
        loop.start(scene)
        scheduler.run(should_continue, before_frame=before_frame, after_frame=panel.draw)
    except KeyboardInterrupt:
        print("\n\n仿真被用户中断")
    finally:
        print("\n清理资源...")
        loop.stop()
        publisher.stop_publish()
        viewer.close()
        panel.close()
        print("仿真已结束")


if __name__ == "__main__":
    main()
