"""Status panel window.

A small resizable pygame window showing the latest crane snapshot and
the key legend. It also owns keyboard focus: key events reaching this
window are forwarded to the keyboard controller.
"""

import pygame

BACKGROUND = (31, 41, 55)
CARD = (55, 65, 81)
TEXT = (255, 255, 255)
MUTED = (156, 163, 175)
ACCENT = (251, 146, 60)

CARDS = (
    ("Boom Angle", "boom_percent", "{}%"),
    ("Cable Length", "cable_length", "{:.1f}m"),
    ("Rotation", "rotation_degrees", "{}°"),
    ("Trolley Pos", "trolley_position", "{:.1f}m"),
)

LEGEND = (
    "W / S  Cable Up/Down      A / D  Rotate Left/Right",
    "Q / E  Boom Up/Down       ← / →  Trolley Left/Right",
)


class StatusPanel:
    """pygame window rendering the crane status readout."""

    def __init__(self, publisher, keyboard, scene=None, width: int = 900, height: int = 260):
        """Create the window.

        Args:
            publisher: SnapshotPublisher to read the latest snapshot from
            keyboard: KeyboardController receiving key events
            scene: SceneBinding notified of window resizes (optional)
            width: Initial window width
            height: Initial window height
        """
        self.publisher = publisher
        self.keyboard = keyboard
        self.scene = scene
        self.closed = False

        pygame.init()
        pygame.display.set_caption("Crane Controller")
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.title_font = pygame.font.SysFont("Arial", 24, bold=True)
        self.label_font = pygame.font.SysFont("Arial", 14)
        self.value_font = pygame.font.SysFont("Arial", 26, bold=True)

    def poll_events(self):
        """Handle window events (main thread, once per frame)."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.closed = True
            elif event.type == pygame.VIDEORESIZE:
                self.resize(event.w, event.h)
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.closed = True
            else:
                self.keyboard.handle_event(event)

    def resize(self, width: int, height: int):
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        if self.scene is not None:
            self.scene.resize(width, height)

    def draw(self):
        """Draw the latest snapshot and flip the display."""
        s = self.screen
        s.fill(BACKGROUND)
        width = s.get_width()
        s.blit(self.title_font.render("Crane Controller", True, ACCENT), (16, 12))

        snapshot = self.publisher.get_latest()
        card_w = (width - 16 * 5) // 4
        for i, (label, field, fmt) in enumerate(CARDS):
            rect = pygame.Rect(16 + i * (card_w + 16), 52, card_w, 76)
            pygame.draw.rect(s, CARD, rect, border_radius=6)
            s.blit(self.label_font.render(label, True, MUTED), (rect.x + 12, rect.y + 10))
            value = "--" if snapshot is None else fmt.format(getattr(snapshot, field))
            s.blit(self.value_font.render(value, True, TEXT), (rect.x + 12, rect.y + 32))

        for i, line in enumerate(LEGEND):
            s.blit(self.label_font.render(line, True, TEXT), (16, 148 + i * 22))

        pygame.display.flip()

    def close(self):
        pygame.quit()
