from sqlalchemy import Column, String, Integer
from sqlalchemy.orm import relationship
from treasure_hunt.database import Base


class Zone(Base):
    __tablename__ = "zones"

    id = Column(Integer, primary_key=True, autoincrement=False)
    code = Column(String(20), nullable=False)  # building code, e.g. "W15"
    name = Column(String(100), nullable=False)

    # Relationships
    sub_zones = relationship(
        "SubZone",
        back_populates="zone",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SubZone.id",
    )

    def __repr__(self):
        return f"<Zone {self.id} - {self.code} {self.name}>"
