"""
Axis-aligned collision resolution
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set

from .entities import Bullet, Enemy, Player
from .utils import boxes_overlap


@dataclass
class HitReport:
    """Outcome of one player-bullet pass"""
    score: int = 0
    hits: int = 0
    killed: List[Enemy] = field(default_factory=list)


def collides(a, b) -> bool:
    """Any two entities with a .box"""
    return boxes_overlap(a.box, b.box)


def resolve_player_hits(enemies: List[Enemy], bullets: List[Bullet]) -> HitReport:
    """Apply player bullets to enemies, in place.

    Each enemy takes at most one hit per pass, from the first overlapping
    bullet in list order that no earlier enemy has consumed. Dead enemies and
    spent bullets are removed after the scan, highest index first.
    """
    report = HitReport()
    dead: List[int] = []
    spent: Set[int] = set()

    for ei, enemy in enumerate(enemies):
        for bi, bullet in enumerate(bullets):
            if bi in spent:
                continue
            if collides(enemy, bullet):
                enemy.health -= 1
                spent.add(bi)
                report.hits += 1
                if enemy.health <= 0:
                    dead.append(ei)
                    report.score += enemy.score
                    report.killed.append(enemy)
                break

    for index in sorted(dead, reverse=True):
        del enemies[index]
    for index in sorted(spent, reverse=True):
        del bullets[index]
    return report


def enemy_touching_player(player: Player, enemies: List[Enemy]) -> Optional[Enemy]:
    for enemy in enemies:
        if collides(player, enemy):
            return enemy
    return None


def pop_bullet_hitting_player(player: Player, bullets: List[Bullet]) -> Optional[Bullet]:
    """Remove and return the first bullet overlapping the player"""
    for index, bullet in enumerate(bullets):
        if collides(player, bullet):
            return bullets.pop(index)
    return None
