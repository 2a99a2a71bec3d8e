from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from treasure_hunt.database import Base


class SubZone(Base):
    __tablename__ = "subzones"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    image_ref = Column(String(255), nullable=True)

    zone_id = Column(Integer, ForeignKey("zones.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    zone = relationship("Zone", back_populates="sub_zones")
    treasures = relationship(
        "Treasure",
        back_populates="sub_zone",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Treasure.id",
    )

    def __repr__(self):
        return f"<SubZone {self.id} - {self.name} (Zone: {self.zone_id})>"
