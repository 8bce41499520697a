import gymnasium as gym
from gymnasium.spaces import MultiDiscrete, Box
import numpy as np
import pygame
import pygame.gfxdraw
import math
import os

from star_catcher.config import GameConfig
from star_catcher.items import Feedback, ItemKind
from star_catcher.session import GameSession, Status

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class GameEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    # Must be a short, user-facing control string:
    user_guide = (
        "Controls: Use ← and → (or drag) to move the basket. E asks for encouragement, F for a star fact."
    )

    # Must be a short, user-facing description of the game:
    game_description = (
        "Catch falling stars for points and grab power-ups to widen your basket or slow time. "
        "Bombs and missed stars cost a life; lose all three and the game is over."
    )

    # Frames auto-advance for real-time gameplay.
    auto_advance = True

    # Colors
    COLOR_BG = (12, 16, 40)
    COLOR_GRID = (24, 30, 64)
    COLOR_UI_TEXT = (226, 232, 240)
    COLOR_CATCHER = (160, 82, 45)
    COLOR_CATCHER_RIM = (205, 133, 63)
    COLOR_STAR = (255, 215, 0)
    COLOR_BOMB = (51, 51, 51)
    COLOR_FUSE = (255, 69, 0)
    COLOR_WIDEN = (138, 43, 226)
    COLOR_SLOWDOWN = (0, 191, 255)
    COLOR_POSITIVE = (200, 255, 200)
    COLOR_NEGATIVE = (255, 120, 120)

    MAX_STEPS = 10000
    POP_TEXT_LIFESPAN = 30

    # Reward Structure
    REWARD_STAR = 1.0
    REWARD_POWERUP = 0.5
    REWARD_LIFE_LOST = -1.0
    REWARD_GAME_OVER = -10.0

    def __init__(self, render_mode="rgb_array", config=None, store=None):
        super().__init__()
        self.render_mode = render_mode
        self.config = config or GameConfig()
        self.store = store

        self.SCREEN_WIDTH = self.config.SCREEN_WIDTH
        self.SCREEN_HEIGHT = self.config.SCREEN_HEIGHT

        # Gymnasium spaces
        self.observation_space = Box(
            low=0, high=255, shape=(self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])

        # Pygame setup
        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT))
        self.font_ui = pygame.font.Font(None, 28)
        self.font_pop = pygame.font.Font(None, 22)
        self.font_msg = pygame.font.Font(None, 24)

        # State variables are initialized in reset()
        self.session = None
        self.time_ms = 0.0
        self.steps = 0
        self.pop_texts = []
        self._key_steering = False

        self.reset()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        if self.session is None:
            self.session = GameSession(self.config, store=self.store, rng=self.np_random)
        self.session.rng = self.np_random

        self.time_ms = 0.0
        self.steps = 0
        self.pop_texts = []
        self._key_steering = False
        self.session.start(self.time_ms)

        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.session.status is Status.GAME_OVER:
            # Keep the clock moving so pending power-up expiries still fire
            self.time_ms += self.config.frame_ms
            self.session.tick(self.time_ms)
            self._update_pop_texts()
            return self._get_observation(), 0.0, True, False, self._get_info()

        reward = 0.0
        self.steps += 1
        self.time_ms += self.config.frame_ms

        self._handle_input(action)
        events = self.session.tick(self.time_ms)

        for event in events:
            if event.cue == "star_catch":
                reward += self.REWARD_STAR
            elif event.cue == "powerup":
                reward += self.REWARD_POWERUP
            elif event.cue in ("bomb_hit", "star_miss"):
                reward += self.REWARD_LIFE_LOST
            elif event.cue == "game_over":
                reward += self.REWARD_GAME_OVER
            color = self.COLOR_POSITIVE if event.feedback is Feedback.POSITIVE else self.COLOR_NEGATIVE
            self._create_pop_text(event.text, (event.x, event.y), color)

        self._update_pop_texts()

        terminated = False
        if self.session.status is Status.GAME_OVER:
            terminated = True
        elif self.steps >= self.MAX_STEPS:
            terminated = True

        return (
            self._get_observation(),
            reward,
            terminated,
            False,  # truncated always False
            self._get_info()
        )

    def _handle_input(self, action):
        movement = action[0]  # 0-4: none/up/down/left/right

        if movement == 3:  # Left
            self.session.press(-1)
            self._key_steering = True
        elif movement == 4:  # Right
            self.session.press(1)
            self._key_steering = True
        elif self._key_steering:
            # Key released; a pointer drag keeps its own velocity
            self.session.release()
            self._key_steering = False

    def _create_pop_text(self, text, pos, color):
        self.pop_texts.append({
            'text': text,
            'pos': list(pos),
            'color': color,
            'lifespan': self.POP_TEXT_LIFESPAN
        })

    def _update_pop_texts(self):
        for t in self.pop_texts[:]:
            t['pos'][1] -= 1.0
            t['lifespan'] -= 1
            if t['lifespan'] <= 0:
                self.pop_texts.remove(t)

    def _get_observation(self):
        self.screen.fill(self.COLOR_BG)
        for i in range(0, self.SCREEN_WIDTH, 40):
            pygame.draw.line(self.screen, self.COLOR_GRID, (i, 0), (i, self.SCREEN_HEIGHT))
        for i in range(0, self.SCREEN_HEIGHT, 40):
            pygame.draw.line(self.screen, self.COLOR_GRID, (0, i), (self.SCREEN_WIDTH, i))

        self._render_items()
        self._render_catcher()
        self._render_pop_texts()
        self._render_ui()

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def render(self):
        return self._get_observation()

    def _render_catcher(self):
        catcher = self.session.catcher
        rect = pygame.Rect(int(catcher.x), int(catcher.y), int(catcher.width), catcher.height)
        pygame.draw.rect(self.screen, self.COLOR_CATCHER, rect, border_radius=catcher.height // 2)
        rim = pygame.Rect(rect.x + rect.width // 10, rect.y, rect.width * 8 // 10, max(1, rect.height * 3 // 10))
        pygame.draw.rect(self.screen, self.COLOR_CATCHER_RIM, rim)

    def _render_items(self):
        for item in self.session.items:
            half = item.size / 2
            cx, cy = int(item.x + half), int(item.y + half)
            if item.kind is ItemKind.BOMB:
                pygame.gfxdraw.filled_circle(self.screen, cx, cy, int(half), self.COLOR_BOMB)
                pygame.draw.line(self.screen, self.COLOR_FUSE, (cx + half / 2, cy - half), (cx + half, cy - item.size), 2)
            else:
                color = {
                    ItemKind.STAR: self.COLOR_STAR,
                    ItemKind.WIDEN: self.COLOR_WIDEN,
                    ItemKind.SLOWDOWN: self.COLOR_SLOWDOWN,
                }[item.kind]
                pygame.gfxdraw.filled_polygon(self.screen, self._star_points(cx, cy, half), color)
                if item.kind.is_powerup:
                    label = self.font_pop.render('P' if item.kind is ItemKind.WIDEN else 'S', True, (255, 255, 255))
                    self.screen.blit(label, label.get_rect(center=(cx, cy)))

    def _star_points(self, cx, cy, outer):
        inner = outer / 2
        points = []
        for i in range(10):
            radius = outer if i % 2 == 0 else inner
            angle = i * math.pi / 5 - math.pi / 2
            points.append((int(cx + radius * math.cos(angle)), int(cy + radius * math.sin(angle))))
        return points

    def _render_pop_texts(self):
        for t in self.pop_texts:
            alpha = int(255 * t['lifespan'] / self.POP_TEXT_LIFESPAN)
            if alpha > 0:
                text_surf = self.font_pop.render(t['text'], True, t['color'])
                text_surf.set_alpha(alpha)
                text_rect = text_surf.get_rect(center=(int(t['pos'][0]), int(t['pos'][1])))
                self.screen.blit(text_surf, text_rect)

    def _render_ui(self):
        score_text = self.font_ui.render(f"SCORE: {self.session.score}", True, self.COLOR_UI_TEXT)
        self.screen.blit(score_text, (10, 10))

        lives_text = self.font_ui.render(f"LIVES: {self.session.lives}", True, self.COLOR_UI_TEXT)
        self.screen.blit(lives_text, lives_text.get_rect(topright=(self.SCREEN_WIDTH - 10, 10)))

        best_text = self.font_pop.render(f"BEST: {self.session.high_score}", True, self.COLOR_UI_TEXT)
        self.screen.blit(best_text, best_text.get_rect(midtop=(self.SCREEN_WIDTH // 2, 12)))

        if self.session.message:
            msg = self.font_msg.render(self.session.message[:90], True, self.COLOR_UI_TEXT)
            self.screen.blit(msg, msg.get_rect(midbottom=(self.SCREEN_WIDTH // 2, self.SCREEN_HEIGHT - 8)))

    def _get_info(self):
        powerups = self.session.powerups
        return {
            "score": self.session.score,
            "lives": self.session.lives,
            "high_score": self.session.high_score,
            "status": self.session.status.value,
            "steps": self.steps,
            "time_ms": self.time_ms,
            "items": len(self.session.items),
            "widen_active": powerups.widen.active,
            "slowdown_active": powerups.slowdown.active,
        }

    def close(self):
        pygame.quit()

    def validate_implementation(self):
        '''
        Call this at the end of __init__ to verify implementation.
        '''
        # Test action space
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        # Test observation space
        test_obs = self._get_observation()
        assert test_obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert test_obs.dtype == np.uint8

        # Test reset
        obs, info = self.reset()
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(info, dict)

        # Test step
        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        print("✓ Implementation validated successfully")
