from pydantic import BaseModel, ConfigDict
from typing import List


class LevelResponse(BaseModel):
    id: int
    title: str

    model_config = ConfigDict(
        from_attributes=True
    )


class LevelsOverviewResponse(BaseModel):
    levels: List[LevelResponse]
    completed_lessons: int
    total_lessons: int
    study_time_hours: float
    accuracy: float
    earned_stars: int
    total_stars: int

    model_config = ConfigDict(
        from_attributes=True
    )
