"""Command-line interface for crane control.

This module provides an interactive CLI for steering the crane by
holding keys from the terminal and monitoring its state in real-time.
"""

import threading


class CLI:
    """Interactive command-line interface for crane control."""

    def __init__(self, publisher, manager=None, loop=None):
        """Initialize the CLI.

        Args:
            publisher: SnapshotPublisher for reading the latest status
            manager: ControllerManager for mode switching (optional)
            loop: ControlLoop for reset (optional)
        """
        self.publisher = publisher
        self.manager = manager
        self.loop = loop
        self._quit_flag = False
        self._quit_lock = threading.Lock()
        self._listeners = []

        width_list = [10, 12, 20]
        self.help_info = "\n --------- HELP INFO --------- "
        self.help_info += "\n {:<{}}".format("cmd", width_list[0])
        self.help_info += "{:^{}}".format("simple cmd", width_list[1])
        self.help_info += "{:<{}}".format("describ", width_list[2])

        self.cmd_list = []
        self.cmd_list.append(["h", "help", "帮助信息", self._help])
        self.cmd_list.append(["1", "get_state", "获取当前状态", self._get_state])
        self.cmd_list.append(["k", "key", "按下/松开按键 key name on|off", self._key])
        self.cmd_list.append(["x", "release", "松开所有按键", self._release])
        self.cmd_list.append(["r", "reset", "重置起重机", self._reset])

        # Add mode switching command if manager available
        if self.manager:
            self.cmd_list.append(["m", "mode", "切换输入模式 mode [keyboard|gamepad|cli]", self._mode])

        self.cmd_list.append(["q", "quit", "退出程序", self._quit])

        for it in self.cmd_list:
            self.help_info += "\n {:<{}}".format(it[1], width_list[0])
            self.help_info += "{:^{}}".format(it[0], width_list[1])
            self.help_info += "{:<{}}".format(it[2], width_list[2])

    def add_listener(self, callback):
        with self._quit_lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback):
        with self._quit_lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def is_quit_requested(self):
        """Check if quit was requested."""
        with self._quit_lock:
            return self._quit_flag

    def _help(self, args=None):
        """Display help information."""
        print(self.help_info)

    def execute(self, cmd_line: str) -> bool:
        """Run a single command line.

        Returns:
            True if the command was recognised
        """
        parts = cmd_line.split()
        if not parts:
            return False
        cmd = parts[0]
        args = parts[1:]
        for it in self.cmd_list:
            if it[0] == cmd or it[1] == cmd:
                it[3](args)
                return True
        print("未知命令，输入 h 或 help 查看帮助")
        return False

    def run(self):
        """Run the interactive CLI loop."""
        self._help()
        while not self.is_quit_requested():
            try:
                cmd_line = input("please input cmd: ").strip()
                if not cmd_line:
                    continue
                self.execute(cmd_line)
            except EOFError:
                # Handle Ctrl+D gracefully
                print("\n退出CLI")
                break
            except KeyboardInterrupt:
                # Handle Ctrl+C gracefully
                print("\n中断，输入 q 或 quit 退出程序")

    def _key(self, args):
        """Hold or release a crane key.

        Args:
            args: [key name, 'on' | 'off']
        """
        if len(args) != 2 or args[1] not in ("on", "off"):
            print("用法: key name on|off")
            return

        # Check if CLI mode is active
        if self.manager and not self.manager.is_active("cli"):
            print(f"当前输入模式: {self.manager.get_mode()}，CLI命令被忽略")
            return

        key = args[0].lower()
        held = args[1] == "on"
        with self._quit_lock:
            listeners = list(self._listeners)
        for callback in listeners:
            callback(key, held)
        print(f"按键 {key}: {'按下' if held else '松开'}")

    def _release(self, args=None):
        """Release all keys."""
        if self.manager:
            self.manager.release_all()
        print("已松开所有按键")

    def _get_state(self, args=None):
        """Display current crane state."""
        snapshot = self.publisher.get_latest()
        if snapshot is None:
            print("尚未采集状态数据")
            return

        print("\n  当前起重机状态")
        print("  {:<10} {:<10} {:<10} {:<10}".format("吊臂(%)", "钢缆(m)", "回转(°)", "小车(m)"))
        print("  {:<10} {:<10} {:<10} {:<10}".format(
            snapshot.boom_percent,
            f"{snapshot.cable_length:.1f}",
            snapshot.rotation_degrees,
            f"{snapshot.trolley_position:.1f}",
        ))
        print()

    def _reset(self, args=None):
        """Reset crane parameters."""
        if self.manager:
            self.manager.reset()
        elif self.loop:
            self.loop.reset()
        print("起重机状态已重置")

    def _mode(self, args=None):
        """Switch input mode or display current mode.

        Args:
            args: ['keyboard'|'gamepad'|'cli'] or empty to display current mode
        """
        if not self.manager:
            print("输入模式管理器未启用")
            return

        if len(args) == 0:
            # Display current mode
            current = self.manager.get_mode()
            available = self.manager.list_available_modes()
            print(f"当前输入模式: {current}")
            print(f"可用模式: {', '.join(available)}")
        elif len(args) == 1:
            # Switch mode
            mode = args[0].lower()
            if not self.manager.set_mode(mode):
                print(f"切换失败: 模式 '{mode}' 不可用")
                print(f"可用模式: {', '.join(self.manager.list_available_modes())}")
        else:
            print("用法: mode [keyboard|gamepad|cli]")

    def _quit(self, args=None):
        """Request simulation to quit."""
        with self._quit_lock:
            self._quit_flag = True
        print("退出信号已发送")
