from pydantic import BaseModel


class FrameSize(BaseModel):
    width: int
    height: int

    @classmethod
    def of(cls, frame) -> "FrameSize":
        height, width = frame.shape[:2]
        return cls(width=width, height=height)
