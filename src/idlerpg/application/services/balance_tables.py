from __future__ import annotations

import math


DEFAULT_TRAVEL_TIME_MS = 5000
AGILITY_SPEED_PER_LEVEL = 0.005
AGILITY_XP_PER_BASE_SECOND = 2

PLAYER_HIT_MIN = 1
PLAYER_HIT_MAX = 8
MINIMUM_DAMAGE = 1
COMBAT_XP_PER_DAMAGE = 4
HITPOINTS_XP_PER_DAMAGE = 1.33
DEFENSE_XP_PER_DAMAGE_TAKEN = 4

ENEMY_TURN_DELAY_MS = 1000
AUTOSAVE_INTERVAL_MS = 30000

# one real second is one game minute
MS_PER_GAME_MINUTE = 1000
MINUTES_PER_DAY = 1440


def agility_speed_factor(agility_level: int) -> float:
    return 1 - (AGILITY_SPEED_PER_LEVEL * int(agility_level))


def effective_travel_time(base_travel_time: int, agility_level: int) -> int:
    return math.floor(int(base_travel_time) * agility_speed_factor(agility_level))


def travel_agility_xp(base_travel_time: int) -> int:
    return math.floor((int(base_travel_time) / 1000) * AGILITY_XP_PER_BASE_SECOND)


def stance_xp(damage: int) -> int:
    return int(damage) * COMBAT_XP_PER_DAMAGE


def controlled_stance_xp(damage: int) -> int:
    return math.floor(int(damage) * COMBAT_XP_PER_DAMAGE / 3)


def hitpoints_xp(damage: int) -> int:
    return math.floor(int(damage) * HITPOINTS_XP_PER_DAMAGE)


def format_game_time(minutes: float) -> str:
    whole = int(math.floor(max(0.0, float(minutes))))
    day = whole // MINUTES_PER_DAY + 1
    hour = (whole % MINUTES_PER_DAY) // 60
    minute = whole % 60
    return f"Day {day} • {hour:02d}:{minute:02d}"
