"""
Database Models using SQLAlchemy.

These define the database schema for identities, profiles, mindmaps, nodes and
edges. They are NOT the API schemas (see planmap.schemas.api_schemas).
"""
from sqlalchemy import Column, ForeignKey, Integer, String, DateTime, Text, JSON, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship
import datetime
import uuid

Base = declarative_base()

def generate_uuid():
    return str(uuid.uuid4())

def utcnow():
    return datetime.datetime.now(datetime.timezone.utc)

class User(Base):
    """Authentication identity; the profile shares its id."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_uuid)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    
    # Relationships
    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    mindmaps = relationship("Mindmap", back_populates="user", cascade="all, delete-orphan")

class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    username = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    
    # Relationships
    user = relationship("User", back_populates="profile")

class Mindmap(Base):
    __tablename__ = "mindmaps"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    viewport = Column(JSON, nullable=True)  # {"x": float, "y": float, "zoom": float}
    settings = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    
    # Relationships
    user = relationship("User", back_populates="mindmaps")
    nodes = relationship(
        "Node", back_populates="mindmap", cascade="all, delete-orphan",
        order_by="Node.created_at",
    )
    edges = relationship(
        "Edge", back_populates="mindmap", cascade="all, delete-orphan",
        order_by="Edge.created_at",
    )

class Node(Base):
    __tablename__ = "nodes"
    __table_args__ = (UniqueConstraint("mindmap_id", "react_flow_id"),)

    id = Column(String, primary_key=True, default=generate_uuid)
    mindmap_id = Column(String, ForeignKey("mindmaps.id", ondelete="CASCADE"), nullable=False, index=True)
    react_flow_id = Column(String, nullable=False)
    type = Column(String, nullable=False, default="default")
    title = Column(String, nullable=False)
    content = Column(Text, nullable=True)
    progress = Column(Integer, nullable=False, default=0)
    position = Column(JSON, nullable=False)  # {"x": float, "y": float}
    style = Column(JSON, nullable=True)
    data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    
    # Relationships
    mindmap = relationship("Mindmap", back_populates="nodes")

class Edge(Base):
    """Directed link between two nodes, addressed by their react_flow_id."""
    __tablename__ = "edges"
    __table_args__ = (UniqueConstraint("mindmap_id", "react_flow_id"),)

    id = Column(String, primary_key=True, default=generate_uuid)
    mindmap_id = Column(String, ForeignKey("mindmaps.id", ondelete="CASCADE"), nullable=False, index=True)
    react_flow_id = Column(String, nullable=False)
    source_node_id = Column(String, nullable=False)
    target_node_id = Column(String, nullable=False)
    type = Column(String, nullable=False, default="default")
    style = Column(JSON, nullable=True)
    data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    
    # Relationships
    mindmap = relationship("Mindmap", back_populates="edges")
