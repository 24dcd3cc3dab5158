"""Input handling for the player: mouse movement, cheat keys and upgrades."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from ericsjourney.entities import Vec2
from ericsjourney.player import Player

GOD_MODE_TOGGLE_DELAY = 1.5
CADENCE_HUD_LIMIT = 0.47
MOVEMENT_SPEED_LIMIT = 0.5
ATTACK_HUD_LIMIT = 4
HEALTH_BOOST = 25.0


class Upgrade(Enum):
    """Upgrades shown on the HUD."""

    ATTACK_SPEED = "attackspeed"
    MOVEMENT_SPEED = "movementspeed"
    ATTACK_MORE = "attackmore"
    HEALTH = "health"
    MORE_DAMAGE = "moredamage"
    CRIT_ATTACK = "critattack"


class PlayerController:
    """Turns user input into player actions and upgrades."""

    def __init__(
        self,
        player: Player,
        now: float = 0.0,
        on_upgrade: Callable[[Upgrade], None] | None = None,
    ) -> None:
        self.player = player
        self.on_upgrade = on_upgrade
        self.upgrades: list[Upgrade] = []
        self.cadence = 1.0
        self.stopped = True
        self.god_mode = False
        self._god_clock = now
        self._keys: dict[str, Callable[[], None]] = {
            "Q": lambda: self.improve_cadence(0.9),
            "W": lambda: self.improve_movement(1.1),
            "E": self.increase_health,
            "R": self.improve_attack,
            "T": self.modify_damage,
            "Y": lambda: self.modify_critic(0.96),
        }

    @property
    def current_health(self) -> float:
        return self.player.health_current

    @property
    def max_health(self) -> float:
        return self.player.health_max

    def _add_upgrade(self, upgrade: Upgrade) -> None:
        self.upgrades.append(upgrade)
        if self.on_upgrade is not None:
            self.on_upgrade(upgrade)

    def handle_key(self, key: str, now: float) -> bool:
        """Apply a released key at time ``now`` (seconds); False when the key is unbound."""
        key = key.upper()
        if key == "G":
            if now - self._god_clock > GOD_MODE_TOGGLE_DELAY:
                self.set_god_mode(not self.god_mode)
                self._god_clock = now
            return True
        action = self._keys.get(key)
        if action is None:
            return False
        action()
        return True

    def set_god_mode(self, enabled: bool) -> None:
        self.player.god_mode = enabled
        self.god_mode = enabled

    def press(self) -> None:
        """Left mouse button pressed: the player follows the cursor."""
        self.stopped = False

    def move_towards(self, point: Vec2) -> None:
        """Steer the player towards a world point unless the player is stopped."""
        if self.stopped:
            return
        offset = point - self.player.location
        self.player.set_direction(offset.normalized() if offset else Vec2())

    def stop(self) -> None:
        """Mouse button released: the player halts."""
        self.stopped = True
        self.player.set_direction(Vec2())

    def improve_cadence(self, factor: float) -> None:
        self.cadence *= factor
        if self.cadence >= CADENCE_HUD_LIMIT:
            self._add_upgrade(Upgrade.ATTACK_SPEED)
        self.player.cadence_multiplier = self.cadence

    def improve_movement(self, factor: float) -> None:
        if self.player.movement_speed <= MOVEMENT_SPEED_LIMIT:
            self._add_upgrade(Upgrade.MOVEMENT_SPEED)
            self.player.movement_speed *= factor

    def improve_attack(self) -> None:
        self.player.improve_attack()
        if self.player.attack_improvement <= ATTACK_HUD_LIMIT:
            self._add_upgrade(Upgrade.ATTACK_MORE)

    def increase_health(self) -> None:
        self.player.increase_max_health(HEALTH_BOOST)
        self.player.heal(HEALTH_BOOST)
        self._add_upgrade(Upgrade.HEALTH)

    def modify_damage(self) -> None:
        self.player.increase_damage_arrows()
        self._add_upgrade(Upgrade.MORE_DAMAGE)

    def modify_critic(self, factor: float) -> None:
        self.player.modify_critic(factor)
        self._add_upgrade(Upgrade.CRIT_ATTACK)