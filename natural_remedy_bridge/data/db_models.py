"""
ORM models for pharmaceuticals, natural remedies and their mappings.

List-valued fields (ingredients, benefits, matching nutrients) are stored as
JSON. Rows written by older importers may hold a delimited string instead;
``field_parsers`` normalizes both shapes when rows are read.
"""

import datetime
import uuid

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, String, Text, UniqueConstraint

from .database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class Pharmaceutical(Base):
    __tablename__ = 'pharmaceuticals'
    id = Column(String(64), primary_key=True, default=_new_id)
    fda_id = Column(String, nullable=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False, default="")
    ingredients = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)
    usage = Column(Text, nullable=True)
    warnings = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)


class NaturalRemedy(Base):
    __tablename__ = 'natural_remedies'
    id = Column(String(64), primary_key=True, default=_new_id)
    name = Column(String, unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False, default="")
    ingredients = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)
    image_url = Column(String, nullable=True)
    usage = Column(Text, nullable=True)
    dosage = Column(Text, nullable=True)
    precautions = Column(Text, nullable=True)
    evidence_level = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)


class NaturalRemedyMapping(Base):
    __tablename__ = 'natural_remedy_mappings'
    id = Column(String(64), primary_key=True, default=_new_id)
    pharmaceutical_id = Column(String(64), ForeignKey('pharmaceuticals.id'), nullable=False, index=True)
    natural_remedy_id = Column(String(64), ForeignKey('natural_remedies.id'), nullable=False, index=True)
    similarity_score = Column(Float, nullable=False)
    matching_nutrients = Column(JSON, nullable=False, default=list)
    replacement_type = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    __table_args__ = (
        UniqueConstraint(
            "pharmaceutical_id", "natural_remedy_id",
            name="uq_remedy_mapping_pharmaceutical_remedy"
        ),
    )
