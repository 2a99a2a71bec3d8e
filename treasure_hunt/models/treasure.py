from sqlalchemy import Column, String, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from treasure_hunt.database import Base


class Treasure(Base):
    __tablename__ = "treasures"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False, index=True)
    image_ref = Column(String(255), nullable=True)
    # Only ever flipped False -> True, see CatalogService.mark_collected
    is_collected = Column(Boolean, default=False, nullable=False)

    sub_zone_id = Column(Integer, ForeignKey("subzones.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    sub_zone = relationship("SubZone", back_populates="treasures")

    def __repr__(self):
        return f"<Treasure {self.id} - {self.name} (SubZone: {self.sub_zone_id}, collected={self.is_collected})>"
