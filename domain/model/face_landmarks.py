from pydantic import BaseModel, Field

Point = tuple[float, float]


class FaceLandmarks(BaseModel):
    """Named groups of the 68-point facial landmark layout."""

    jaw_outline: list[Point] = Field(default_factory=list)
    left_eyebrow: list[Point] = Field(default_factory=list)
    right_eyebrow: list[Point] = Field(default_factory=list)
    nose: list[Point] = Field(default_factory=list)
    left_eye: list[Point] = Field(default_factory=list)
    right_eye: list[Point] = Field(default_factory=list)
    mouth: list[Point] = Field(default_factory=list)

    @property
    def points(self) -> list[Point]:
        return [
            *self.jaw_outline,
            *self.left_eyebrow,
            *self.right_eyebrow,
            *self.nose,
            *self.left_eye,
            *self.right_eye,
            *self.mouth,
        ]
