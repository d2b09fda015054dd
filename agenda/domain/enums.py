"""Categorical tags shared by the agenda models and services."""

from __future__ import annotations

from enum import StrEnum


class OverlapKind(StrEnum):
    TOTAL = "TOTAL"
    PARTIAL_START = "PARTIEL_DEBUT"
    PARTIAL_END = "PARTIEL_FIN"
    ENCLOSED = "ENGLOBE"


class TimeBracket(StrEnum):
    MORNING = "MATIN"
    AFTERNOON = "APRES_MIDI"
    EVENING = "SOIR"
    OFF_HOURS = "HORS_HEURES"


class CheckKind(StrEnum):
    ORGANIZER = "ORGANISATEUR"
    PARTICIPANT = "UTILISATEUR"
