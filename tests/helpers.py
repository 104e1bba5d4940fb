"""Shared fixtures for the test suite."""

from natural_remedy_bridge.data.database import create_db_engine, create_session_factory, init_db
from natural_remedy_bridge.data.db_models import NaturalRemedy, Pharmaceutical
from natural_remedy_bridge.models.remedy_models import Drug, EvidenceLevel, RemedyCandidate

IBUPROFEN = Drug(
    id="drug-ibuprofen",
    name="Ibuprofen",
    category="Pain Reliever (NSAID)",
    ingredients=("Ibuprofen",),
    benefits=("Pain relief", "Inflammation reduction"),
)

WARFARIN = Drug(
    id="drug-warfarin",
    name="Warfarin",
    category="Anticoagulant",
    ingredients=("Warfarin",),
    benefits=("Anticoagulant",),
)

TURMERIC = RemedyCandidate(
    id="remedy-turmeric",
    name="Turmeric",
    category="Herbal",
    description="Golden spice root.",
    ingredients=("Curcumin",),
    benefits=("Anti-inflammatory",),
)

# benefit J = 4/7, category J = 1/9, ingredient J = 0 -> 0.319
WILLOW_BARK = RemedyCandidate(
    id="remedy-willow-bark",
    name="Willow Bark",
    category="Pain Relief Herb",
    ingredients=("Salicin",),
    benefits=("Pain relief", "Inflammation reduction"),
)

# Same fields as WARFARIN -> 0.5 + 0.3 * 0.5 + 0.2 = 0.85
WARFARIN_LOOKALIKE = RemedyCandidate(
    id="remedy-warfarin-lookalike",
    name="Warfarin",
    category="Anticoagulant",
    ingredients=("Warfarin",),
    benefits=("Anticoagulant",),
    evidence_level=EvidenceLevel.UNSPECIFIED,
)


def make_session_factory():
    """Session factory bound to a fresh in-memory SQLite database."""
    engine = create_db_engine("sqlite://", echo=False)
    init_db(engine)
    return create_session_factory(engine)


def store_drug(session_factory, drug: Drug) -> None:
    session = session_factory()
    try:
        session.add(Pharmaceutical(
            id=drug.id,
            name=drug.name,
            category=drug.category,
            ingredients=list(drug.ingredients),
            benefits=list(drug.benefits),
        ))
        session.commit()
    finally:
        session.close()


def store_remedy(session_factory, remedy: RemedyCandidate) -> None:
    session = session_factory()
    try:
        session.add(NaturalRemedy(
            id=remedy.id,
            name=remedy.name,
            category=remedy.category,
            description=remedy.description,
            image_url=remedy.image_url,
            ingredients=list(remedy.ingredients),
            benefits=list(remedy.benefits),
            evidence_level=remedy.evidence_level.value,
        ))
        session.commit()
    finally:
        session.close()
