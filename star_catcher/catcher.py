from __future__ import annotations

import numpy as np


class Catcher:
    """The player's basket. Only moves horizontally."""

    def __init__(self, bounds_width, bounds_height, base_width=100, height=20, speed=8.0, offset_y=60):
        self.bounds_width = bounds_width
        self.base_width = base_width
        self.height = height
        self.speed = float(speed)
        self.width_multiplier = 1.0
        self.dx = 0.0
        self.y = bounds_height - offset_y
        self.x = bounds_width / 2 - base_width / 2
        self._direction = 0

    @property
    def width(self):
        return self.base_width * self.width_multiplier

    def clamp(self):
        self.x = float(np.clip(self.x, 0, max(0.0, self.bounds_width - self.width)))

    def apply_velocity(self):
        self.x += self.dx
        self.clamp()

    def steer(self, direction):
        """Key input: -1 left, 1 right, 0 stop."""
        self._direction = int(np.sign(direction))
        self.dx = self._direction * self.speed

    def drag(self, delta_x, sensitivity=0.5):
        """Pointer input: velocity follows the drag delta, capped at speed."""
        self._direction = 0
        self.dx = float(np.clip(delta_x * sensitivity, -self.speed, self.speed))

    def stop(self):
        self.steer(0)

    def set_speed(self, speed):
        self.speed = float(speed)
        if self._direction:
            self.dx = self._direction * self.speed
        else:
            self.dx = float(np.clip(self.dx, -self.speed, self.speed))
