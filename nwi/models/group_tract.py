# nwi/models/group_tract.py
from sqlalchemy import Column, Integer, BigInteger, SmallInteger, String, Float, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship, validates
from nwi.core.database import Base

TRACT_FK = "group_tracts.geoid10"


def _tract_fk():
    # One row per tract: the shared geoid is both the join key and unique.
    return Column(
        BigInteger,
        ForeignKey(TRACT_FK, onupdate="CASCADE", ondelete="CASCADE"),
        unique=True,
        index=True,
        nullable=False,
    )


class GroupTract(Base):
    __tablename__ = "group_tracts"

    geoid10 = Column(BigInteger, primary_key=True, autoincrement=False)
    geoid20 = Column(BigInteger, nullable=True)  # 2020 boundary revision

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Composition: every tract owns exactly one of each
    geoid_detail = relationship("GeoidDetail", uselist=False, back_populates="tract", cascade="all, delete-orphan")
    csa = relationship("CSA", uselist=False, back_populates="tract", cascade="all, delete-orphan")
    cbsa = relationship("CBSA", uselist=False, back_populates="tract", cascade="all, delete-orphan")
    ac = relationship("AC", uselist=False, back_populates="tract", cascade="all, delete-orphan")
    population = relationship("Population", uselist=False, back_populates="tract", cascade="all, delete-orphan")
    rank = relationship("Rank", uselist=False, back_populates="tract", cascade="all, delete-orphan")
    shape = relationship("Shape", uselist=False, back_populates="tract", cascade="all, delete-orphan")

    @validates("geoid10")
    def _freeze_geoid(self, key, value):
        if self.geoid10 is not None and value != self.geoid10:
            raise ValueError(f"geoid10 is immutable ({self.geoid10} -> {value})")
        return value


class GeoidDetail(Base):
    __tablename__ = "geoid_details"

    id = Column(Integer, primary_key=True)
    geoid = _tract_fk()
    statefp = Column(SmallInteger, nullable=False)
    countyfp = Column(SmallInteger, nullable=False)
    tractce = Column(Integer, nullable=False)
    blkgrpce = Column(SmallInteger, nullable=True)

    tract = relationship("GroupTract", back_populates="geoid_detail")


class CSA(Base):
    __tablename__ = "csas"

    id = Column(Integer, primary_key=True)
    geoid = _tract_fk()
    csa = Column(Integer, index=True, nullable=True)
    csa_name = Column(String, nullable=False, default="")

    tract = relationship("GroupTract", back_populates="csa")


class CBSA(Base):
    __tablename__ = "cbsas"

    id = Column(Integer, primary_key=True)
    geoid = _tract_fk()
    cbsa = Column(Integer, index=True, nullable=True)
    cbsa_name = Column(String, nullable=False, default="")

    # --- Filled in later by the enrichment pass ---
    public_transit_usage = Column(Float, nullable=True)       # workers commuting by transit (estimate)
    public_transit_percentage = Column(Float, nullable=True)
    bike_ridership = Column(BigInteger, nullable=True)

    tract = relationship("GroupTract", back_populates="cbsa")


class AC(Base):
    """Area composition, in acres."""
    __tablename__ = "area_compositions"

    id = Column(Integer, primary_key=True)
    geoid = _tract_fk()
    ac_total = Column(Float)
    ac_water = Column(Float)
    ac_land = Column(Float)
    ac_unpr = Column(Float)

    tract = relationship("GroupTract", back_populates="ac")


class Population(Base):
    __tablename__ = "populations"

    id = Column(Integer, primary_key=True)
    geoid = _tract_fk()
    total_pop = Column(Integer)
    count_hu = Column(Float)  # housing units
    hh = Column(Float)        # households
    workers = Column(Integer)

    tract = relationship("GroupTract", back_populates="population")


class Rank(Base):
    __tablename__ = "ranks"

    id = Column(Integer, primary_key=True)
    geoid = _tract_fk()

    # Raw sub-metrics
    d2b_e8mixa = Column(Float)  # employment mix
    d2a_ephhm = Column(Float)   # employment and household mix
    d3b = Column(Float)         # street intersection density
    d4a = Column(Float)         # distance to nearest transit stop

    # Percentile ranks (1-20)
    d2a_ranked = Column(Float)
    d2b_ranked = Column(Float)
    d3b_ranked = Column(Float)
    d4a_ranked = Column(Float)

    nwi = Column(Float, index=True)

    bike_count_rank = Column(SmallInteger, nullable=True)
    bike_percentage_rank = Column(SmallInteger, nullable=True)
    bike_fatality_rank = Column(SmallInteger, nullable=True)
    bike_share_rank = Column(SmallInteger, default=1)
    transit_score = Column(SmallInteger, nullable=True)
    bike_score = Column(Float, nullable=True)

    tract = relationship("GroupTract", back_populates="rank")


class Shape(Base):
    __tablename__ = "shapes"

    id = Column(Integer, primary_key=True)
    geoid = _tract_fk()
    shape_length = Column(Float)
    shape_area = Column(Float)
    geometry = Column(Text, nullable=False, default="")  # WKT

    tract = relationship("GroupTract", back_populates="shape")


class Zipcode(Base):
    __tablename__ = "zipcodes"

    id = Column(Integer, primary_key=True)
    zipcode = Column(String(5), index=True, nullable=False)
    cbsa = Column(Integer, index=True, nullable=False)
