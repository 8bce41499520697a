from __future__ import annotations

from star_catcher.log import get_logger

logger = get_logger("powerups")


class PowerUpEffect:
    """One timed effect. Re-activating refreshes the expiry, never stacks it."""

    def __init__(self, name, duration):
        self.name = name
        self.duration = duration
        self.active = False
        self.expires_at = None
        self._expiry = None

    def __repr__(self):
        return f"PowerUpEffect({self.name!r}, active={self.active}, expires_at={self.expires_at})"


class PowerUpManager:
    def __init__(self, catcher, events, widen_duration=5000, widen_multiplier=1.5,
                 slowdown_duration=7000, slowdown_multiplier=0.3):
        self.catcher = catcher
        self.events = events
        self.widen = PowerUpEffect("widen", widen_duration)
        self.slowdown = PowerUpEffect("slowdown", slowdown_duration)
        self.widen_multiplier = widen_multiplier
        self.slowdown_multiplier = slowdown_multiplier
        self.fall_speed_multiplier = 1.0

    def fall_speed(self, base_speed):
        return base_speed * self.fall_speed_multiplier

    def activate_widen(self, now):
        self.catcher.width_multiplier = self.widen_multiplier
        # The wider basket may now hang over the right edge
        self.catcher.clamp()
        self._arm(self.widen, now, self._expire_widen)

    def activate_slowdown(self, now):
        self.fall_speed_multiplier = self.slowdown_multiplier
        self._arm(self.slowdown, now, self._expire_slowdown)

    def cancel_all(self):
        for effect in (self.widen, self.slowdown):
            self.events.cancel(effect._expiry)
            effect._expiry = None

    def _arm(self, effect, now, on_expire):
        refreshed = effect.active
        self.events.cancel(effect._expiry)
        effect.active = True
        effect.expires_at = now + effect.duration
        effect._expiry = self.events.schedule(effect.expires_at, on_expire, name=f"{effect.name}-expiry")
        logger.debug(
            "%s %s until t=%.0f", "refreshed" if refreshed else "activated", effect.name, effect.expires_at,
            extra={"t_ms": now},
        )

    def _expire_widen(self):
        self.catcher.width_multiplier = 1.0
        self._clear(self.widen)

    def _expire_slowdown(self):
        self.fall_speed_multiplier = 1.0
        self._clear(self.slowdown)

    def _clear(self, effect):
        logger.debug("%s expired", effect.name, extra={"t_ms": effect.expires_at})
        effect.active = False
        effect.expires_at = None
        effect._expiry = None
