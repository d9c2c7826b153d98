"""Resolve localized credit labels ("Director", "Regie", "Stars") to canonical roles."""

from __future__ import annotations

from enum import Enum

from filmtags.extraction.text import normalize_whitespace


class Role(str, Enum):
    DIRECTOR = "director"
    WRITER = "writer"
    ACTOR = "actor"
    UNKNOWN = "unknown"


# Surface forms as rendered on title pages for the supported site languages.
_ROLE_LABELS: dict[Role, tuple[str, ...]] = {
    Role.DIRECTOR: (
        "director", "directors", "directed by",
        "regie", "regisseur", "regisseurin", "regisseure",
        "réalisation", "réalisateur", "réalisatrice", "réalisateurs",
        "dirección", "director", "directora", "directores",
        "regia", "regista", "registi",
        "direção", "diretor", "diretores",
    ),
    Role.WRITER: (
        "writer", "writers", "writing credits", "written by",
        "drehbuch", "drehbuchautor", "drehbuchautorin", "drehbuchautoren", "autor", "autoren",
        "scénario", "scénariste", "scénaristes",
        "guion", "guionista", "guionistas",
        "sceneggiatura", "sceneggiatore", "sceneggiatori",
        "roteiro", "roteirista", "roteiristas",
    ),
    Role.ACTOR: (
        "star", "stars", "cast",
        "hauptdarsteller", "hauptdarstellerin", "hauptdarsteller*innen", "besetzung",
        "vedette", "vedettes", "têtes d'affiche", "distribution",
        "estrella", "estrellas", "reparto", "reparto principal",
        "star principali", "interpreti", "attori",
        "estrelas", "elenco", "artistas",
    ),
}

_LABEL_INDEX: dict[str, Role] = {
    label.casefold(): role for role, labels in _ROLE_LABELS.items() for label in labels
}


def _normalize_label(label: str) -> str:
    return normalize_whitespace(label).rstrip(":").strip().casefold()


def resolve_role(label: str) -> Role:
    """Map a credit label to its canonical role; unknown labels give ``Role.UNKNOWN``."""

    return _LABEL_INDEX.get(_normalize_label(label), Role.UNKNOWN)
