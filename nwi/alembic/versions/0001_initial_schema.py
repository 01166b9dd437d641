"""initial schema: group tracts, sub-entities and zip crosswalk

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

SUB_TABLES = ("geoid_details", "csas", "cbsas", "area_compositions", "populations", "ranks", "shapes")


def _tract_columns():
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "geoid",
            sa.BigInteger(),
            sa.ForeignKey("group_tracts.geoid10", onupdate="CASCADE", ondelete="CASCADE"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "group_tracts",
        sa.Column("geoid10", sa.BigInteger(), primary_key=True, autoincrement=False),
        sa.Column("geoid20", sa.BigInteger(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "geoid_details",
        *_tract_columns(),
        sa.Column("statefp", sa.SmallInteger(), nullable=False),
        sa.Column("countyfp", sa.SmallInteger(), nullable=False),
        sa.Column("tractce", sa.Integer(), nullable=False),
        sa.Column("blkgrpce", sa.SmallInteger(), nullable=True),
    )
    op.create_table(
        "csas",
        *_tract_columns(),
        sa.Column("csa", sa.Integer(), nullable=True),
        sa.Column("csa_name", sa.String(), nullable=False),
    )
    op.create_table(
        "cbsas",
        *_tract_columns(),
        sa.Column("cbsa", sa.Integer(), nullable=True),
        sa.Column("cbsa_name", sa.String(), nullable=False),
        sa.Column("public_transit_usage", sa.Float(), nullable=True),
        sa.Column("public_transit_percentage", sa.Float(), nullable=True),
        sa.Column("bike_ridership", sa.BigInteger(), nullable=True),
    )
    op.create_table(
        "area_compositions",
        *_tract_columns(),
        sa.Column("ac_total", sa.Float()),
        sa.Column("ac_water", sa.Float()),
        sa.Column("ac_land", sa.Float()),
        sa.Column("ac_unpr", sa.Float()),
    )
    op.create_table(
        "populations",
        *_tract_columns(),
        sa.Column("total_pop", sa.Integer()),
        sa.Column("count_hu", sa.Float()),
        sa.Column("hh", sa.Float()),
        sa.Column("workers", sa.Integer()),
    )
    op.create_table(
        "ranks",
        *_tract_columns(),
        sa.Column("d2b_e8mixa", sa.Float()),
        sa.Column("d2a_ephhm", sa.Float()),
        sa.Column("d3b", sa.Float()),
        sa.Column("d4a", sa.Float()),
        sa.Column("d2a_ranked", sa.Float()),
        sa.Column("d2b_ranked", sa.Float()),
        sa.Column("d3b_ranked", sa.Float()),
        sa.Column("d4a_ranked", sa.Float()),
        sa.Column("nwi", sa.Float()),
        sa.Column("bike_count_rank", sa.SmallInteger(), nullable=True),
        sa.Column("bike_percentage_rank", sa.SmallInteger(), nullable=True),
        sa.Column("bike_fatality_rank", sa.SmallInteger(), nullable=True),
        sa.Column("bike_share_rank", sa.SmallInteger()),
        sa.Column("transit_score", sa.SmallInteger(), nullable=True),
        sa.Column("bike_score", sa.Float(), nullable=True),
    )
    op.create_table(
        "shapes",
        *_tract_columns(),
        sa.Column("shape_length", sa.Float()),
        sa.Column("shape_area", sa.Float()),
        sa.Column("geometry", sa.Text(), nullable=False),
    )
    for table in SUB_TABLES:
        op.create_index(f"ix_{table}_geoid", table, ["geoid"], unique=True)
    op.create_index("ix_csas_csa", "csas", ["csa"])
    op.create_index("ix_cbsas_cbsa", "cbsas", ["cbsa"])
    op.create_index("ix_ranks_nwi", "ranks", ["nwi"])

    op.create_table(
        "zipcodes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("zipcode", sa.String(5), nullable=False),
        sa.Column("cbsa", sa.Integer(), nullable=False),
    )
    op.create_index("ix_zipcodes_zipcode", "zipcodes", ["zipcode"])
    op.create_index("ix_zipcodes_cbsa", "zipcodes", ["cbsa"])


def downgrade() -> None:
    op.drop_table("zipcodes")
    for table in reversed(SUB_TABLES):
        op.drop_table(table)
    op.drop_table("group_tracts")
