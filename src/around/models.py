from pydantic import BaseModel, Field


class Location(BaseModel):
    """A geo point, stored as ``geo_point`` in the posts index."""

    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")


class Post(BaseModel):
    """A geo-tagged post as stored in the index and returned by search."""

    user: str = Field(..., description="Identity of the author")
    message: str = Field("", description="The post text")
    location: Location
    url: str | None = Field(
        None, description="Public URL of the attached image"
    )


class PostCreatedResponse(BaseModel):
    """Returned after a post has been stored and indexed."""

    id: str = Field(..., description="Generated post id (index id and blob key)")
    url: str | None = Field(None, description="Public URL of the attached image")
