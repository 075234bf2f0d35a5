import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bearmaps.domain.entities.geography import BoundingBox
from bearmaps.domain.rasterer import MAX_DEPTH, ROOT_BOX, TILE_SIZE


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1, ge=1)


class BoundingBoxModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    ullon: float
    ullat: float
    lrlon: float
    lrlat: float

    @model_validator(mode="after")
    def _check_corners(self):
        if not self.ullon < self.lrlon:
            raise ValueError(f"ullon ({self.ullon}) must be west of lrlon ({self.lrlon})")
        if not self.ullat > self.lrlat:
            raise ValueError(f"ullat ({self.ullat}) must be north of lrlat ({self.lrlat})")
        return self

    def to_box(self) -> BoundingBox:
        return BoundingBox(self.ullon, self.ullat, self.lrlon, self.lrlat)


# ----------------- RASTER ---------------------


class RasterModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    root: BoundingBoxModel = Field(
        default_factory=lambda: BoundingBoxModel(
            ullon=ROOT_BOX.ullon, ullat=ROOT_BOX.ullat, lrlon=ROOT_BOX.lrlon, lrlat=ROOT_BOX.lrlat
        )
    )
    tile_size: int = Field(default=TILE_SIZE, gt=0)
    max_depth: int = Field(default=MAX_DEPTH, ge=0, le=30)


# ----------------- GRAPH ---------------------


class GraphByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["json", "pickle"] = "json"
    must_exist: bool = True

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


# ----------------- ROUTING ---------------------


class LocatorScanModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["scan"] = "scan"


class LocatorVectorizedModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["vectorized"] = "vectorized"


LocatorUnion = Annotated[
    LocatorScanModel | LocatorVectorizedModel,
    Field(discriminator="kind"),
]


class RoutingModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    locator: LocatorUnion = Field(default_factory=LocatorScanModel)
    max_expansions: int | None = Field(default=None, gt=0)


# ------------------------------------------------------------------


class ServiceModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "bearmaps"
    run_id: str = "local"
    log: LogModel = LogModel()
    raster: RasterModel = Field(default_factory=RasterModel)
    routing: RoutingModel = Field(default_factory=RoutingModel)
    graph: GraphByPath | None = None
